import pytest
from pydantic import ValidationError

from balancify.core.models import DEFAULT_GOAL, FinancialGoal, QuestionnaireAnswers
from balancify.core.sample_payloads import SAMPLE_QUESTIONNAIRE
from balancify.finance.breakdown import analyze_needs_vs_wants, calculate_spending_breakdown, entertainment_cost
from balancify.finance.goals import (
    calculate_goal_timeline,
    normalize_goals,
    primary_goal,
    sort_goals_by_priority,
    time_to_goal,
)


def _answers(**overrides) -> QuestionnaireAnswers:
    return QuestionnaireAnswers.model_validate({**SAMPLE_QUESTIONNAIRE, **overrides})


def _goal(description, priority, target=100000, months=24):
    return FinancialGoal(description=description, target_amount=target, timeline_months=months, priority=priority)


def test_spending_breakdown_example():
    spending = calculate_spending_breakdown(_answers())
    assert spending.housing == 23000
    assert spending.food == 10000
    assert spending.transportation == 3000
    assert spending.entertainment == 1000
    assert spending.shopping == 5000
    assert spending.subscriptions == 1000
    assert spending.loans == 0
    assert spending.investments == 10000
    assert spending.savings == 47000
    assert spending.other == 0


@pytest.mark.parametrize("income", [0, 20000, 53000, 100000, 275000])
def test_savings_is_income_minus_expenses_floored(income):
    spending = calculate_spending_breakdown(_answers(monthly_income=income))
    expenses = (
        spending.housing
        + spending.food
        + spending.transportation
        + spending.entertainment
        + spending.shopping
        + spending.subscriptions
        + spending.loans
        + spending.investments
    )
    assert spending.savings == max(0, income - expenses)


def test_loans_only_counted_when_declared():
    ignored = calculate_spending_breakdown(_answers(has_loans="No", loan_repayment=4000))
    assert ignored.loans == 0

    counted = calculate_spending_breakdown(_answers(has_loans="Yes", loan_repayment=4000, loan_type="Car"))
    assert counted.loans == 4000
    assert counted.savings == 43000


def test_entertainment_cost_scales_with_impulse_and_hours():
    assert entertainment_cost(_answers(impulse_shopping=3, entertainment_hours=5)) == 750
    assert entertainment_cost(_answers(entertainment_hours=0)) == 0


def test_needs_wants_example():
    answers = _answers()
    analysis = analyze_needs_vs_wants(answers, calculate_spending_breakdown(answers))
    assert analysis.needs.housing == 23000
    assert analysis.needs.food_essential == 7000
    assert analysis.needs.utilities == 3000
    assert analysis.wants.dining_out == 3000
    assert analysis.wants.entertainment == 1000
    assert analysis.needs_percentage == 78
    assert analysis.wants_percentage == 22


@pytest.mark.parametrize(
    "overrides",
    [
        {},
        {"shopping_monthly": 33333, "dining_monthly": 777},
        {"housing_expenses": 1, "utility_bills": 1, "groceries_weekly": 1},
        {"has_loans": "Yes", "loan_repayment": 12345},
        {"impulse_shopping": 5, "entertainment_hours": 37},
    ],
)
def test_needs_and_wants_percentages_cover_everything(overrides):
    answers = _answers(**overrides)
    analysis = analyze_needs_vs_wants(answers, calculate_spending_breakdown(answers))
    assert 99 <= analysis.needs_percentage + analysis.wants_percentage <= 101


def test_needs_wants_with_no_spending_reports_zero():
    answers = _answers(
        housing_expenses=0,
        utility_bills=0,
        groceries_weekly=0,
        dining_monthly=0,
        transport_monthly=0,
        shopping_monthly=0,
        subscription_cost=0,
        entertainment_hours=0,
    )
    analysis = analyze_needs_vs_wants(answers, calculate_spending_breakdown(answers))
    assert analysis.needs_percentage == 0
    assert analysis.wants_percentage == 0


def test_priority_sort_is_stable():
    goals = [
        _goal("a", "low"),
        _goal("b", "high"),
        _goal("c", "medium"),
        _goal("d", "high"),
        _goal("e", "low"),
    ]
    ordered = sort_goals_by_priority(goals)
    assert [goal.description for goal in ordered] == ["b", "d", "c", "a", "e"]
    assert primary_goal(goals).description == "b"


def test_time_to_goal_example():
    assert time_to_goal(500000, 47000) == 11


def test_time_to_goal_floors_small_contributions():
    assert time_to_goal(500000, 0) == 500
    assert time_to_goal(500000, 999) == 500
    assert time_to_goal(0, 5000) == 0


def test_goal_timeline_uses_highest_priority_goal():
    answers = _answers()
    timeline = calculate_goal_timeline(answers, calculate_spending_breakdown(answers))
    assert timeline.target_amount == 500000
    assert timeline.monthly_contribution == 57000
    assert timeline.time_to_goal == 9
    assert timeline.timeline_months == 9
    assert timeline.on_track
    assert [m.month for m in timeline.milestones] == [6]
    assert timeline.milestones[0].amount == 342000


@pytest.mark.parametrize("income,months", [(60000, 120), (100000, 24), (54000, 12), (300000, 120)])
def test_milestone_count_follows_shortest_horizon(income, months):
    goals = [{"description": "House", "target_amount": 2500000, "timeline_months": months, "priority": "high", "category": "purchase"}]
    answers = _answers(monthly_income=income, financial_goals=goals)
    timeline = calculate_goal_timeline(answers, calculate_spending_breakdown(answers))
    assert timeline.time_to_goal >= 0
    assert len(timeline.milestones) == min(months, timeline.time_to_goal, 240) // 6


def test_missing_goals_default_to_emergency_fund():
    answers = _answers(financial_goals=[])
    assert answers.financial_goals == [DEFAULT_GOAL]
    tracked = normalize_goals(answers.financial_goals)
    assert tracked[0].id == "goal_1"
    assert tracked[0].description == "Emergency Fund"


def test_goal_requires_positive_target():
    with pytest.raises(ValidationError):
        FinancialGoal(description="Nothing", target_amount=0, priority="low", category="other")
