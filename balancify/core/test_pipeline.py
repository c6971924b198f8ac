import pytest

from balancify.core.errors import InsightServiceError
from balancify.core.models import QuestionnaireAnswers, SimulationRequest
from balancify.core.pipeline import run_analysis, run_simulation
from balancify.core.sample_payloads import SAMPLE_INSIGHTS, SAMPLE_QUESTIONNAIRE, SAMPLE_RECOMMENDATIONS


def fake_generator(prompt):
    if "spendingPatterns" in prompt:
        return dict(SAMPLE_INSIGHTS)
    return dict(SAMPLE_RECOMMENDATIONS)


@pytest.fixture
def answers():
    return QuestionnaireAnswers.model_validate(SAMPLE_QUESTIONNAIRE)


def test_run_analysis_combines_local_and_generated_parts(answers):
    prompts = []

    def recording_generator(prompt):
        prompts.append(prompt)
        return fake_generator(prompt)

    result = run_analysis(answers, recording_generator)

    assert len(prompts) == 2
    assert "₹100,000" in prompts[0]
    assert result.spending_breakdown.savings == 47000
    assert result.needs_wants_analysis.needs_percentage == 78
    assert result.goal_timeline.time_to_goal == 9
    assert result.insights.risk_analysis == SAMPLE_INSIGHTS["riskAnalysis"]
    assert result.recommendations.short_term == SAMPLE_RECOMMENDATIONS["shortTerm"]
    assert [goal.id for goal in result.financial_goals] == ["goal_1", "goal_2"]


def test_analysis_serializes_camel_case(answers):
    payload = run_analysis(answers, fake_generator).model_dump(by_alias=True)
    assert set(payload) == {
        "insights",
        "spendingBreakdown",
        "needsWantsAnalysis",
        "recommendations",
        "goalTimeline",
        "financialGoals",
    }
    assert payload["goalTimeline"]["timeToGoal"] == 9
    assert payload["financialGoals"][0]["targetAmount"] == 500000


def test_malformed_insights_rejected(answers):
    def generator(prompt):
        return {"spendingPatterns": "Only one field"}

    with pytest.raises(InsightServiceError, match="malformed insights"):
        run_analysis(answers, generator)


def test_malformed_recommendations_rejected(answers):
    def generator(prompt):
        if "spendingPatterns" in prompt:
            return dict(SAMPLE_INSIGHTS)
        return {"immediate": "not a list"}

    with pytest.raises(InsightServiceError, match="malformed recommendations"):
        run_analysis(answers, generator)


def test_generator_failure_propagates(answers):
    def generator(prompt):
        raise InsightServiceError("connection refused")

    with pytest.raises(InsightServiceError, match="connection refused"):
        run_analysis(answers, generator)


def test_simulation_expense_reduction(answers):
    request = SimulationRequest.model_validate(
        {"questionnaireId": "q1", "simulation": {"expenseReduction": 10}}
    )
    response = run_simulation(answers, request)

    comparison = response.comparison
    assert comparison.original_monthly_savings == 57000
    assert comparison.savings_increase == pytest.approx(2800)
    assert comparison.goal_target == 500000
    assert comparison.months_saved == comparison.original_time_to_goal - comparison.new_time_to_goal
    assert len(response.projections.monthly_data) == 24
    assert len(response.projections.goal_timeline) == comparison.new_time_to_goal + 6
    assert response.spending_breakdown.savings == pytest.approx(49800)
    assert response.insights.recommendations


def test_simulation_goal_target_override(answers):
    request = SimulationRequest.model_validate(
        {"questionnaireId": "q1", "simulation": {"goalTarget": 1140000}}
    )
    response = run_simulation(answers, request)
    comparison = response.comparison
    assert comparison.goal_target == 1140000
    assert comparison.original_time_to_goal == 20
    assert comparison.savings_increase == 0
    assert comparison.months_saved == 0
    assert response.goal_timeline.target_amount == 1140000
    assert response.goal_timeline.time_to_goal == comparison.new_time_to_goal


def test_simulation_value_adjustments(answers):
    request = SimulationRequest.model_validate(
        {"questionnaireId": "q1", "adjustments": {"shopping_monthly": 2500}}
    )
    response = run_simulation(answers, request)
    assert response.comparison.savings_increase == 2500
    assert "2,500" in response.insights.savings_impact


def test_simulation_does_not_touch_answers(answers):
    request = SimulationRequest.model_validate(
        {"questionnaireId": "q1", "simulation": {"incomeIncrease": 50, "expenseReduction": 40}}
    )
    run_simulation(answers, request)
    assert answers == QuestionnaireAnswers.model_validate(SAMPLE_QUESTIONNAIRE)
