import logging
from typing import Any, Callable, Dict, List, Type, TypeVar

from pydantic import BaseModel, ValidationError

from balancify.ai.insight_client import query_json
from balancify.finance.breakdown import analyze_needs_vs_wants, calculate_spending_breakdown
from balancify.finance.goals import calculate_goal_timeline, normalize_goals, primary_goal, time_to_goal
from balancify.finance.schemas import Adjustments
from balancify.finance.utils import round_or_none, safe_div
from balancify.finance.whatif import (
    apply_adjustments,
    progress_horizon,
    project_goal_progress,
    project_monthly_savings,
)

from .errors import InsightServiceError
from .models import (
    AnalysisResult,
    FinancialInsights,
    Projections,
    QuestionnaireAnswers,
    Recommendations,
    SimulationComparison,
    SimulationRequest,
    SimulationResponse,
    WhatIfInsights,
)
from .prompts import build_insights_prompt, build_recommendations_prompt, format_currency
from .tools import (
    clamp_llm_breakdown,
    clamp_llm_goal_timeline,
    clamp_llm_needs_wants,
    clamp_llm_profile,
)

logger = logging.getLogger(__name__)

JsonGenerator = Callable[[str], Dict[str, Any]]
ModelT = TypeVar("ModelT", bound=BaseModel)


def _request_structured(generate_json: JsonGenerator, prompt: str, model: Type[ModelT], label: str) -> ModelT:
    payload = generate_json(prompt)
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise InsightServiceError(
            f"AI model returned malformed {label} ({exc.error_count()} field errors)"
        ) from exc


def run_analysis(answers: QuestionnaireAnswers, generate_json: JsonGenerator = query_json) -> AnalysisResult:
    spending = calculate_spending_breakdown(answers)
    needs_wants = analyze_needs_vs_wants(answers, spending)
    goal_timeline = calculate_goal_timeline(answers, spending)
    goals = normalize_goals(answers.financial_goals)

    llm_profile = clamp_llm_profile(answers.model_dump())
    llm_breakdown = clamp_llm_breakdown(spending.model_dump())
    llm_needs_wants = clamp_llm_needs_wants(needs_wants.model_dump())
    llm_goal_timeline = clamp_llm_goal_timeline(goal_timeline.model_dump())

    insights = _request_structured(
        generate_json,
        build_insights_prompt(llm_profile, llm_breakdown, llm_needs_wants, llm_goal_timeline),
        FinancialInsights,
        "insights",
    )
    recommendations = _request_structured(
        generate_json,
        build_recommendations_prompt(llm_profile, llm_breakdown, [goal.model_dump() for goal in answers.financial_goals]),
        Recommendations,
        "recommendations",
    )
    logger.info(
        "Analysis complete: savings=%.0f needs=%d%% time_to_goal=%d",
        spending.savings,
        needs_wants.needs_percentage,
        goal_timeline.time_to_goal,
    )

    return AnalysisResult(
        insights=insights,
        spending_breakdown=spending,
        needs_wants_analysis=needs_wants,
        recommendations=recommendations,
        goal_timeline=goal_timeline,
        financial_goals=goals,
    )


def _duration(months: int) -> str:
    years, remainder = divmod(months, 12)
    if years == 0:
        return f"{months} months"
    return f"{years} years and {remainder} months ({months} months total)"


def _what_if_insights(adjusted: QuestionnaireAnswers, comparison: SimulationComparison) -> WhatIfInsights:
    savings_rate = safe_div(comparison.new_monthly_savings, adjusted.monthly_income, default=0.0) * 100
    increase = comparison.savings_increase
    ratio = safe_div(increase, comparison.original_monthly_savings)
    increase_pct = round_or_none(ratio * 100 if ratio is not None else None, 1)

    if savings_rate >= 30:
        achievability = (
            f"Saving and investing {savings_rate:.1f}% of income puts long-term goals well within reach."
        )
    elif savings_rate >= 15:
        achievability = (
            f"A {savings_rate:.1f}% savings and investment rate is solid; goals are achievable with consistency."
        )
    else:
        achievability = (
            f"At {savings_rate:.1f}% of income, progress toward goals will be slow unless spending comes down."
        )

    time_line = (
        f"You could reach your goal of {format_currency(comparison.goal_target)} in approximately "
        f"{_duration(comparison.new_time_to_goal)}."
    )
    if comparison.months_saved > 0:
        time_line += f" That is {comparison.months_saved} months sooner than your current trajectory."
    elif comparison.months_saved < 0:
        time_line += f" That is {-comparison.months_saved} months later than your current trajectory."

    if increase > 0:
        impact = (
            f"This scenario adds {format_currency(increase)} per month, "
            f"{format_currency(increase * 12)} per year, to savings and investments"
        )
        impact += f" ({increase_pct:.1f}% more than today)." if increase_pct is not None else "."
    elif increase < 0:
        impact = f"This scenario reduces monthly savings and investments by {format_currency(-increase)}."
    else:
        impact = "This scenario leaves monthly savings and investments unchanged."

    recommendations: List[str] = []
    if increase > 0:
        recommendations.append(f"Set up an automatic transfer of {format_currency(increase)} each month to lock in the gain.")
    if adjusted.shopping_monthly + adjusted.dining_monthly > 0.2 * adjusted.monthly_income:
        recommendations.append("Shopping and dining still take over a fifth of income; cap them with a weekly limit.")
    if adjusted.has_loans == "Yes":
        recommendations.append("Direct part of the extra savings to the highest-interest loan.")
    recommendations.extend(
        [
            "Keep an emergency fund covering 6 months of expenses before raising risk.",
            "Review this plan every quarter and adjust the targets.",
        ]
    )

    return WhatIfInsights(
        goal_achievability=achievability,
        time_to_goal=time_line,
        savings_impact=impact,
        recommendations=recommendations,
    )


def _to_adjustments(request: SimulationRequest) -> Adjustments:
    overrides = request.adjustments.model_dump(exclude_none=True) if request.adjustments else {}
    return Adjustments(
        income_increase_pct=request.simulation.income_increase,
        expense_reduction_pct=request.simulation.expense_reduction,
        investment_boost_pct=request.simulation.investment_boost,
        overrides=overrides,
    )


def run_simulation(answers: QuestionnaireAnswers, request: SimulationRequest) -> SimulationResponse:
    """Recompute the analysis under adjusted inputs.

    Local arithmetic only: the insight service is not called and ``answers``
    is left untouched.
    """
    adjusted = apply_adjustments(answers, _to_adjustments(request))

    original_spending = calculate_spending_breakdown(answers)
    new_spending = calculate_spending_breakdown(adjusted)
    new_needs_wants = analyze_needs_vs_wants(adjusted, new_spending)

    goal = primary_goal(answers.financial_goals)
    if request.simulation.goal_target is not None:
        goal = goal.model_copy(update={"target_amount": request.simulation.goal_target})
    goal_target = goal.target_amount
    new_goal_timeline = calculate_goal_timeline(adjusted, new_spending, goal)

    original_contribution = original_spending.savings + original_spending.investments
    new_contribution = new_spending.savings + new_spending.investments
    original_months = time_to_goal(goal_target, original_contribution)
    new_months = time_to_goal(goal_target, new_contribution)

    comparison = SimulationComparison(
        original_monthly_savings=original_contribution,
        new_monthly_savings=new_contribution,
        savings_increase=new_contribution - original_contribution,
        goal_target=goal_target,
        original_time_to_goal=original_months,
        new_time_to_goal=new_months,
        months_saved=original_months - new_months,
    )
    projections = Projections(
        monthly_data=project_monthly_savings(original_contribution, new_contribution, goal_target),
        goal_timeline=project_goal_progress(
            original_contribution, new_contribution, goal_target, progress_horizon(new_months)
        ),
    )

    return SimulationResponse(
        insights=_what_if_insights(adjusted, comparison),
        projections=projections,
        comparison=comparison,
        spending_breakdown=new_spending,
        needs_wants_analysis=new_needs_wants,
        goal_timeline=new_goal_timeline,
    )
