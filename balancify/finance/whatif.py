from typing import Any, Dict, List

from balancify.core.models import GoalProgressPoint, MonthlyProjection, QuestionnaireAnswers

from .schemas import Adjustments

EXPENSE_REDUCTION_FIELDS = (
    "housing_expenses",
    "dining_monthly",
    "shopping_monthly",
    "subscription_cost",
)
OVERRIDABLE_FIELDS = (
    "subscription_cost",
    "entertainment_hours",
    "shopping_monthly",
    "dining_monthly",
    "groceries_weekly",
)
PROJECTION_MONTHS = 24
MAX_PROGRESS_MONTHS = 60
PROGRESS_TAIL_MONTHS = 6


def generate_default_scenarios() -> List[Dict[str, Any]]:
    return [
        {"name": "baseline", "adjustments": Adjustments()},
        {"name": "trim_spending_10", "adjustments": Adjustments(expense_reduction_pct=10)},
        {"name": "raise_10", "adjustments": Adjustments(income_increase_pct=10)},
        {"name": "invest_more_25", "adjustments": Adjustments(investment_boost_pct=25)},
        {"name": "combined_push", "adjustments": Adjustments(income_increase_pct=10, expense_reduction_pct=15, investment_boost_pct=20)},
    ]


def apply_adjustments(answers: QuestionnaireAnswers, adjustments: Adjustments) -> QuestionnaireAnswers:
    """Return a copy of ``answers`` with the what-if changes applied."""
    updates: Dict[str, float] = {
        "monthly_income": answers.monthly_income * (1 + adjustments.income_increase_pct / 100.0),
        "monthly_investment": answers.monthly_investment * (1 + adjustments.investment_boost_pct / 100.0),
    }
    for name in EXPENSE_REDUCTION_FIELDS:
        updates[name] = getattr(answers, name) * (1 - adjustments.expense_reduction_pct / 100.0)
    for name, value in adjustments.overrides.items():
        if name not in OVERRIDABLE_FIELDS:
            raise ValueError(f"{name} cannot be overridden in a what-if simulation")
        updates[name] = value
    return answers.model_copy(update={name: max(0.0, value) for name, value in updates.items()})


def project_monthly_savings(
    original_contribution: float,
    new_contribution: float,
    goal_target: float,
    months: int = PROJECTION_MONTHS,
) -> List[MonthlyProjection]:
    projections = []
    for month in range(1, months + 1):
        before = original_contribution * month
        after = new_contribution * month
        projections.append(
            MonthlyProjection(
                month=f"Month {month}",
                before_scenario=round(before, 2),
                after_scenario=round(after, 2),
                goal_target=goal_target,
                savings=new_contribution,
                difference=round(after - before, 2),
            )
        )
    return projections


def progress_horizon(new_time_to_goal: int) -> int:
    return min(new_time_to_goal + PROGRESS_TAIL_MONTHS, MAX_PROGRESS_MONTHS)


def project_goal_progress(
    original_contribution: float,
    new_contribution: float,
    goal_target: float,
    months: int,
) -> List[GoalProgressPoint]:
    points = []
    for month in range(1, months + 1):
        current = round(original_contribution * month, 2)
        points.append(
            GoalProgressPoint(
                month=f"Month {month}",
                current_progress=current,
                # unadjusted trajectory
                projected_progress=current,
                simulated_progress=round(new_contribution * month, 2),
                goal_target=goal_target,
                milestone=f"Year {month // 12}" if month % 12 == 0 else None,
            )
        )
    return points
