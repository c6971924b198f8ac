import pytest

from balancify.core.models import QuestionnaireAnswers
from balancify.core.sample_payloads import SAMPLE_QUESTIONNAIRE
from balancify.finance.breakdown import calculate_spending_breakdown
from balancify.finance.goals import time_to_goal
from balancify.finance.schemas import Adjustments
from balancify.finance.whatif import (
    apply_adjustments,
    generate_default_scenarios,
    progress_horizon,
    project_goal_progress,
    project_monthly_savings,
)


def _answers(**overrides) -> QuestionnaireAnswers:
    return QuestionnaireAnswers.model_validate({**SAMPLE_QUESTIONNAIRE, **overrides})


def _contribution(answers: QuestionnaireAnswers) -> float:
    spending = calculate_spending_breakdown(answers)
    return spending.savings + spending.investments


def test_shopping_override_raises_savings():
    answers = _answers()
    adjusted = apply_adjustments(answers, Adjustments(overrides={"shopping_monthly": 2500}))

    before = calculate_spending_breakdown(answers)
    after = calculate_spending_breakdown(adjusted)
    assert after.savings - before.savings == 2500
    assert time_to_goal(500000, _contribution(adjusted)) <= time_to_goal(500000, _contribution(answers))


def test_shopping_override_shortens_tight_budget():
    answers = _answers(monthly_income=60000)
    adjusted = apply_adjustments(answers, Adjustments(overrides={"shopping_monthly": 2500}))

    assert _contribution(answers) == 17000
    assert _contribution(adjusted) == 19500
    assert time_to_goal(500000, _contribution(answers)) == 30
    assert time_to_goal(500000, _contribution(adjusted)) == 26


def test_adjustments_leave_original_untouched():
    answers = _answers()
    apply_adjustments(answers, Adjustments(income_increase_pct=50, expense_reduction_pct=30, overrides={"dining_monthly": 0}))
    assert answers.monthly_income == 100000
    assert answers.housing_expenses == 20000
    assert answers.dining_monthly == 2000


def test_expense_reduction_scales_discretionary_fields():
    adjusted = apply_adjustments(_answers(), Adjustments(expense_reduction_pct=10))
    assert adjusted.housing_expenses == pytest.approx(18000)
    assert adjusted.dining_monthly == pytest.approx(1800)
    assert adjusted.shopping_monthly == pytest.approx(4500)
    assert adjusted.subscription_cost == pytest.approx(900)
    # untouched by the reduction
    assert adjusted.utility_bills == 3000
    assert adjusted.transport_monthly == 3000


def test_income_and_investment_scaling():
    adjusted = apply_adjustments(_answers(), Adjustments(income_increase_pct=10, investment_boost_pct=-100))
    assert adjusted.monthly_income == pytest.approx(110000)
    assert adjusted.monthly_investment == 0


def test_unknown_override_rejected():
    with pytest.raises(ValueError):
        apply_adjustments(_answers(), Adjustments(overrides={"monthly_income": 1}))


def test_monthly_projection_covers_two_years():
    data = project_monthly_savings(57000, 59800, 500000)
    assert len(data) == 24
    assert data[0].month == "Month 1"
    assert data[-1].before_scenario == 57000 * 24
    assert data[-1].after_scenario == 59800 * 24
    assert data[-1].difference == 2800 * 24


def test_goal_progress_marks_years():
    points = project_goal_progress(10000, 12000, 300000, 30)
    assert len(points) == 30
    assert [p.milestone for p in points if p.milestone] == ["Year 1", "Year 2"]
    assert points[11].simulated_progress == 144000
    assert points[11].projected_progress == points[11].current_progress == 120000
    assert "projectedProgress" in points[0].model_dump(by_alias=True)


@pytest.mark.parametrize("months,expected", [(0, 6), (9, 15), (54, 60), (80, 60)])
def test_progress_horizon(months, expected):
    assert progress_horizon(months) == expected


def test_default_scenarios():
    scenarios = generate_default_scenarios()
    names = [s["name"] for s in scenarios]
    assert names[0] == "baseline"
    assert len(set(names)) == len(names)
    assert scenarios[0]["adjustments"] == Adjustments()
