# streamlit_app.py
import os
from typing import Any, Dict, Optional

import requests
import streamlit as st
from pydantic import ValidationError

from balancify.core.questionnaire import FieldSpec, Questionnaire
from balancify.core.session_store import JsonFileBackend, SessionStore
from balancify.finance.whatif import generate_default_scenarios

API_URL = os.getenv("BALANCIFY_API_URL", "http://localhost:8000").rstrip("/")
API_TIMEOUT = float(os.getenv("BALANCIFY_API_TIMEOUT", "120"))

st.set_page_config(page_title="Balancify", layout="wide")
st.title("Balancify")

# --- Session bootstrap -----------------------------------------------------
if "questionnaire" not in st.session_state:
    store = SessionStore(JsonFileBackend())
    questionnaire = Questionnaire(store)
    stored = store.load()
    analysis = None
    if stored is not None and stored.is_completed:
        analysis = stored.analysis_result
    elif not questionnaire.resume():
        store.create(total_steps=len(questionnaire.steps))
    st.session_state.store = store
    st.session_state.questionnaire = questionnaire
    st.session_state.analysis = analysis

store: SessionStore = st.session_state.store
questionnaire: Questionnaire = st.session_state.questionnaire


# --- API helpers ------------------------------------------------------------
def api_post(path: str, payload: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    try:
        resp = requests.post(f"{API_URL}{path}", json=payload, timeout=API_TIMEOUT)
    except requests.RequestException as exc:
        st.error(f"Could not reach the Balancify API at {API_URL}: {exc}")
        return None
    if not resp.ok:
        body = resp.json() if resp.headers.get("content-type", "").startswith("application/json") else {}
        st.error(body.get("error", f"Request failed with status {resp.status_code}"))
        if body.get("details"):
            st.caption(str(body["details"]))
        return None
    return resp.json()


def submit() -> None:
    try:
        questionnaire.to_answers()
    except ValidationError as exc:
        st.error("Some answers are missing or invalid.")
        for error in exc.errors(include_url=False):
            st.caption(f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}")
        return
    created = api_post("/api/financial-session", questionnaire.submission_data())
    if created is None:
        return
    with st.spinner("Analyzing your finances..."):
        result = api_post(f"/api/analyze-session/{created['sessionId']}", {})
    if result is None:
        return
    store.complete(questionnaire_id=result["questionnaireId"], analysis_result=result)
    st.session_state.analysis = result
    st.rerun()


def reset() -> None:
    questionnaire.reset()
    store.create(total_steps=len(questionnaire.steps))
    st.session_state.analysis = None
    for key in [key for key in st.session_state.keys() if str(key).startswith("field_")]:
        del st.session_state[key]
    st.rerun()


# --- Questionnaire ----------------------------------------------------------
def render_goal_builder(field: FieldSpec, current: Any) -> Any:
    st.caption(field.label)
    return st.data_editor(
        current or [],
        key=f"field_{field.id}",
        num_rows="dynamic",
        column_config={
            "description": st.column_config.TextColumn("Goal", required=True),
            "target_amount": st.column_config.NumberColumn("Target", min_value=1, required=True),
            "current_amount": st.column_config.NumberColumn("Saved so far", min_value=0),
            "timeline_months": st.column_config.NumberColumn("Months", min_value=1, max_value=120),
            "priority": st.column_config.SelectboxColumn("Priority", options=["high", "medium", "low"]),
            "category": st.column_config.SelectboxColumn(
                "Category",
                options=["emergency", "investment", "purchase", "retirement", "education", "other"],
            ),
        },
    )


def render_field(field: FieldSpec) -> None:
    current = questionnaire.value(field.id)
    key = f"field_{field.id}"
    if field.kind == "number":
        floor = float(field.min or 0)
        raw = st.number_input(field.label, min_value=floor, value=float(current or floor), key=key)
    elif field.kind == "radio":
        index = field.options.index(current) if current in field.options else 0
        raw = st.radio(field.label, field.options, index=index, horizontal=True, key=key)
    elif field.kind == "select":
        index = field.options.index(current) if current in field.options else 0
        raw = st.selectbox(field.label, field.options, index=index, key=key)
    elif field.kind == "checkbox":
        raw = st.multiselect(field.label, field.options, default=current or [], key=key)
    elif field.kind == "range":
        raw = st.slider(
            field.label,
            min_value=int(field.min),
            max_value=int(field.max),
            value=int(current or field.min),
            step=int(field.step or 1),
            key=key,
        )
    elif field.kind == "goal-builder":
        raw = render_goal_builder(field, current)
    else:
        raw = st.text_input(field.label, value=current or "", placeholder=field.placeholder, key=key)

    if raw != current:
        questionnaire.update(field.id, raw)


def render_questionnaire() -> None:
    step = questionnaire.step
    if step is None:
        # Past the last step without a successful submission.
        questionnaire.prev()
        st.rerun()
    st.progress(int(questionnaire.progress), text=f"Step {questionnaire.current_step + 1} of {len(questionnaire.steps)}")
    st.subheader(step.title)
    for field in questionnaire.visible_fields():
        render_field(field)

    col_prev, col_next = st.columns(2)
    if col_prev.button("Previous", disabled=questionnaire.is_first):
        questionnaire.prev()
        st.rerun()
    if questionnaire.is_last:
        if col_next.button("Complete", type="primary"):
            submit()
    elif col_next.button("Next", type="primary"):
        questionnaire.next()
        st.rerun()


# --- Dashboard --------------------------------------------------------------
def render_what_if(questionnaire_id: str) -> None:
    st.subheader("What-if simulator")
    presets = {preset["name"]: preset["adjustments"] for preset in generate_default_scenarios()}
    preset_name = st.selectbox("Start from a preset", list(presets))
    chosen = presets[preset_name]
    income = st.slider("Income increase (%)", -50, 100, int(chosen.income_increase_pct), key=f"wi_income_{preset_name}")
    cut = st.slider("Expense reduction (%)", 0, 80, int(chosen.expense_reduction_pct), key=f"wi_cut_{preset_name}")
    boost = st.slider("Investment boost (%)", -50, 200, int(chosen.investment_boost_pct), key=f"wi_boost_{preset_name}")

    result = api_post(
        "/api/simulate",
        {
            "questionnaireId": questionnaire_id,
            "simulation": {"incomeIncrease": income, "expenseReduction": cut, "investmentBoost": boost},
        },
    )
    if result is None:
        return
    comparison = result["comparison"]
    col1, col2, col3 = st.columns(3)
    col1.metric("Monthly savings", f"{comparison['newMonthlySavings']:,.0f}", f"{comparison['savingsIncrease']:,.0f}")
    col2.metric("Months to goal", comparison["newTimeToGoal"], -comparison["monthsSaved"], delta_color="inverse")
    col3.metric("Goal target", f"{comparison['goalTarget']:,.0f}")
    st.line_chart(
        {
            "Current plan": {point["month"]: point["beforeScenario"] for point in result["projections"]["monthlyData"]},
            "Scenario": {point["month"]: point["afterScenario"] for point in result["projections"]["monthlyData"]},
        }
    )
    insights = result["insights"]
    st.write(insights["goalAchievability"])
    st.write(insights["timeToGoal"])
    st.write(insights["savingsImpact"])
    for line in insights["recommendations"]:
        st.markdown(f"- {line}")


def render_dashboard(analysis: Dict[str, Any]) -> None:
    spending = analysis["spendingBreakdown"]
    needs_wants = analysis["needsWantsAnalysis"]
    timeline = analysis["goalTimeline"]

    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Monthly savings", f"{spending['savings']:,.0f}")
    col2.metric("Needs", f"{needs_wants['needsPercentage']}%")
    col3.metric("Wants", f"{needs_wants['wantsPercentage']}%")
    col4.metric("Months to goal", timeline["timeToGoal"])

    st.subheader("Spending breakdown")
    st.bar_chart({"Amount": spending})

    st.subheader("Goal timeline")
    if timeline["milestones"]:
        st.line_chart({"Projected savings": {m["description"]: m["amount"] for m in timeline["milestones"]}})
    st.caption(
        f"Target {timeline['targetAmount']:,.0f} at {timeline['monthlyContribution']:,.0f} per month "
        f"({'on track' if timeline['onTrack'] else 'behind'} for a {timeline['preferredTimelineMonths']} month plan)."
    )

    st.subheader("Insights")
    for title, key in (
        ("Spending patterns", "spendingPatterns"),
        ("Optimization opportunities", "optimizationOpportunities"),
        ("Investment recommendations", "investmentRecommendations"),
        ("Risk analysis", "riskAnalysis"),
        ("Goal achievability", "goalAchievability"),
    ):
        with st.expander(title, expanded=key == "spendingPatterns"):
            st.write(analysis["insights"][key])

    st.subheader("Recommendations")
    recommendations = analysis["recommendations"]
    for title, key in (("Now", "immediate"), ("Next 12 months", "shortTerm"), ("Long term", "longTerm")):
        st.markdown(f"**{title}**")
        for line in recommendations[key]:
            st.markdown(f"- {line}")
    st.info(recommendations["emergencyFund"])
    st.info(recommendations["investmentStrategy"])

    questionnaire_id = analysis["questionnaireId"]
    try:
        report = requests.get(f"{API_URL}/api/report/{questionnaire_id}", timeout=API_TIMEOUT)
    except requests.RequestException as exc:
        st.warning(f"Report unavailable: {exc}")
    else:
        if report.ok:
            st.download_button(
                "Download PDF report",
                report.content,
                file_name=f"financial-report-{questionnaire_id}.pdf",
                mime="application/pdf",
            )

    render_what_if(questionnaire_id)


# --- Layout -----------------------------------------------------------------
with st.sidebar:
    st.header("Session")
    session = store.load()
    if session is not None:
        st.caption(f"Session {session.session_id}")
        st.caption(f"Started {session.start_time:%d %b %H:%M} UTC")
    if st.button("Start over"):
        reset()

if st.session_state.analysis:
    render_dashboard(st.session_state.analysis)
else:
    render_questionnaire()
