import math
from typing import List, Optional, Sequence

from balancify.core.models import (
    DEFAULT_GOAL,
    FinancialGoal,
    GoalTimeline,
    Milestone,
    QuestionnaireAnswers,
    SpendingBreakdown,
    TrackedGoal,
)

from .utils import round_half_up

PRIORITY_WEIGHTS = {
    "high": 3,
    "medium": 2,
    "low": 1,
}
MIN_MONTHLY_CONTRIBUTION = 1000.0
MAX_TIMELINE_MONTHS = 240
MILESTONE_INTERVAL_MONTHS = 6


def sort_goals_by_priority(goals: Sequence[FinancialGoal]) -> List[FinancialGoal]:
    # sorted() is stable, so equal priorities keep their input order
    return sorted(goals, key=lambda goal: PRIORITY_WEIGHTS[goal.priority], reverse=True)


def primary_goal(goals: Sequence[FinancialGoal]) -> FinancialGoal:
    ordered = sort_goals_by_priority(goals)
    return ordered[0] if ordered else DEFAULT_GOAL


def normalize_goals(goals: Sequence[FinancialGoal]) -> List[TrackedGoal]:
    source = list(goals) or [DEFAULT_GOAL]
    return [
        TrackedGoal(id=f"goal_{index}", **goal.model_dump())
        for index, goal in enumerate(source, start=1)
    ]


def time_to_goal(target_amount: float, monthly_contribution: float) -> int:
    """Months needed to reach ``target_amount``.

    The contribution is floored at 1000 so a near-zero saver still gets a
    finite answer.
    """
    if target_amount <= 0:
        return 0
    return math.ceil(target_amount / max(monthly_contribution, MIN_MONTHLY_CONTRIBUTION))


def build_milestones(monthly_contribution: float, horizon_months: int) -> List[Milestone]:
    return [
        Milestone(
            month=month,
            amount=float(round_half_up(monthly_contribution * month)),
            description=f"{month} month milestone",
        )
        for month in range(MILESTONE_INTERVAL_MONTHS, horizon_months + 1, MILESTONE_INTERVAL_MONTHS)
    ]


def calculate_goal_timeline(
    answers: QuestionnaireAnswers,
    spending: SpendingBreakdown,
    goal: Optional[FinancialGoal] = None,
) -> GoalTimeline:
    if goal is None:
        goal = primary_goal(answers.financial_goals)
    contribution = spending.savings + spending.investments
    months_needed = time_to_goal(goal.target_amount, contribution)
    horizon = min(goal.timeline_months, months_needed, MAX_TIMELINE_MONTHS)

    return GoalTimeline(
        current_savings=goal.current_amount,
        target_amount=goal.target_amount,
        monthly_contribution=contribution,
        time_to_goal=months_needed,
        timeline_months=horizon,
        preferred_timeline_months=goal.timeline_months,
        on_track=months_needed <= goal.timeline_months,
        milestones=build_milestones(contribution, horizon),
    )
