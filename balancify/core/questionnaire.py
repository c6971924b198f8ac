"""The step-by-step questionnaire.

Steps and fields are static data. ``Questionnaire`` tracks the step pointer
and the answers, and writes every change through to a ``SessionStore``.
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from .models import DEFAULT_GOAL, FinancialGoal, QuestionnaireAnswers
from .session_store import SessionStore

YES_NO = ("Yes", "No")


@dataclass(frozen=True)
class FieldCondition:
    field: str
    equals: Any

    def matches(self, answers: Dict[str, Any]) -> bool:
        return answers.get(self.field) == self.equals


@dataclass(frozen=True)
class FieldSpec:
    id: str
    label: str
    kind: str
    options: Tuple[str, ...] = ()
    min: Optional[float] = None
    max: Optional[float] = None
    step: Optional[float] = None
    integer: bool = False
    default: Any = None
    placeholder: str = ""
    condition: Optional[FieldCondition] = None

    def is_visible(self, answers: Dict[str, Any]) -> bool:
        return self.condition is None or self.condition.matches(answers)

    def _number(self, raw: Any, fallback: float) -> float:
        try:
            value = float(raw)
        except (TypeError, ValueError):
            return fallback
        if math.isnan(value) or math.isinf(value):
            return fallback
        return value

    def coerce(self, raw: Any) -> Any:
        if self.kind == "number":
            floor = self.min if self.min is not None else 0.0
            value = self._number(raw, floor)
            # a blank or zero entry falls back to the floor
            value = max(floor, value) if value else floor
            return int(value) if self.integer else value
        if self.kind == "range":
            value = self._number(raw, self.min or 0.0)
            if self.min is not None:
                value = max(self.min, value)
            if self.max is not None:
                value = min(self.max, value)
            return int(round(value)) if self.integer else value
        if self.kind in ("radio", "select"):
            value = str(raw)
            if value not in self.options:
                raise ValueError(f"{value!r} is not a valid choice for {self.id}")
            return value
        if self.kind == "checkbox":
            return [str(option) for option in (raw or []) if str(option) in self.options]
        if self.kind == "goal-builder":
            goals = raw or []
            return [goal.model_dump() if isinstance(goal, FinancialGoal) else dict(goal) for goal in goals]
        return "" if raw is None else str(raw)


@dataclass(frozen=True)
class Step:
    title: str
    fields: Tuple[FieldSpec, ...]


def _money(field_id: str, label: str, **kwargs) -> FieldSpec:
    return FieldSpec(id=field_id, label=label, kind="number", min=0, placeholder="0", **kwargs)


def _choice(field_id: str, label: str, options: Tuple[str, ...], kind: str = "radio", **kwargs) -> FieldSpec:
    return FieldSpec(id=field_id, label=label, kind=kind, options=options, **kwargs)


def _scale(field_id: str, label: str, high: int, low: int = 1) -> FieldSpec:
    return FieldSpec(id=field_id, label=label, kind="range", min=low, max=high, step=1, integer=True, default=low)


HAS_LOANS = FieldCondition("has_loans", "Yes")

QUESTIONNAIRE_STEPS: Tuple[Step, ...] = (
    Step(
        "Salary & Income",
        (
            _money("monthly_income", "Monthly take-home income"),
            _choice("side_income", "Do you have a side income?", YES_NO),
            _money("side_income_amount", "Side income per month", condition=FieldCondition("side_income", "Yes")),
            _choice("bonus_pay", "Do you receive bonuses?", ("Yes", "No", "Sometimes")),
        ),
    ),
    Step(
        "Living Situation & Rent",
        (
            _choice("housing_status", "Housing situation", ("Rent", "Own", "Living with family")),
            _money("housing_expenses", "Rent or mortgage per month"),
            _money("utility_bills", "Utility bills per month"),
            FieldSpec(id="household_size", label="People in your household", kind="number", min=1, integer=True, default=1),
        ),
    ),
    Step(
        "Food & Dining",
        (
            _money("groceries_weekly", "Groceries per week"),
            _money("dining_monthly", "Dining out per month"),
            _choice("food_ordering", "How often do you order food?", ("Daily", "Few times a week", "Rarely")),
        ),
    ),
    Step(
        "Shopping Habits",
        (
            _money("shopping_monthly", "Shopping per month"),
            _scale("impulse_shopping", "How often do you shop on impulse?", 5),
            _choice("online_shopping", "Online shopping frequency", ("Daily", "Weekly", "Monthly", "Rarely"), kind="select"),
        ),
    ),
    Step(
        "Subscriptions & Entertainment",
        (
            _choice(
                "subscriptions",
                "Which subscriptions do you pay for?",
                ("Netflix", "Amazon Prime", "Spotify", "Disney+ Hotstar", "YouTube Premium", "Gym", "Other"),
                kind="checkbox",
                default=(),
            ),
            _money("subscription_cost", "Total subscription cost per month"),
            _money("entertainment_hours", "Hours of paid entertainment per week"),
        ),
    ),
    Step(
        "Travel & Transportation",
        (
            _money("commute_cost", "Daily commute cost"),
            _choice("transport_mode", "Main mode of transport", ("Public Transport", "Own Vehicle", "Both")),
            _money("transport_monthly", "Transport spend per month"),
        ),
    ),
    Step(
        "Debt / Loans",
        (
            _choice("has_loans", "Do you have any loans?", YES_NO),
            _money("loan_repayment", "Loan repayment per month", condition=HAS_LOANS),
            _choice(
                "loan_type",
                "Type of loan",
                ("Education", "Car", "Home", "Personal", "Credit Card"),
                kind="select",
                condition=HAS_LOANS,
            ),
        ),
    ),
    Step(
        "Investments & Financial Goals",
        (
            _choice(
                "investment_types",
                "Where do you invest?",
                ("Mutual Funds", "Stocks", "Fixed Deposits", "Gold", "Crypto", "PPF/EPF", "Real Estate", "None"),
                kind="checkbox",
                default=(),
            ),
            _money("monthly_investment", "Amount invested per month"),
            FieldSpec(
                id="financial_goals",
                label="Your financial goals",
                kind="goal-builder",
                default=(DEFAULT_GOAL.model_dump(),),
            ),
        ),
    ),
    Step(
        "Budgeting Behavior & Mindset",
        (
            _choice("track_spending", "Do you track your spending?", YES_NO),
            _scale("impulse_control", "Rate your impulse control", 5),
            _scale("saving_behavior", "How consistently do you save?", 10),
            _choice("risk_taking", "Risk appetite", ("Low", "Medium", "High")),
        ),
    ),
    Step(
        "Commitment & Willingness",
        (
            _scale("expense_reduction", "How willing are you to cut expenses?", 10),
            _money("preferred_savings", "How much would you like to save per month?"),
            _scale("financial_discipline", "Rate your financial discipline", 5),
        ),
    ),
)


class Questionnaire:
    def __init__(self, store: Optional[SessionStore] = None, steps: Tuple[Step, ...] = QUESTIONNAIRE_STEPS):
        self.store = store
        self.steps = steps
        self.fields = {field.id: field for step in steps for field in step.fields}
        self.current_step = 0
        self.answers: Dict[str, Any] = {}

    @property
    def step(self) -> Optional[Step]:
        if self.current_step < len(self.steps):
            return self.steps[self.current_step]
        return None

    @property
    def is_first(self) -> bool:
        return self.current_step == 0

    @property
    def is_last(self) -> bool:
        return self.current_step == len(self.steps) - 1

    @property
    def is_finished(self) -> bool:
        return self.current_step >= len(self.steps)

    @property
    def progress(self) -> float:
        return min(100.0, (self.current_step + 1) / len(self.steps) * 100)

    def visible_fields(self) -> List[FieldSpec]:
        if self.step is None:
            return []
        return [field for field in self.step.fields if field.is_visible(self.answers)]

    def value(self, field_id: str) -> Any:
        if field_id in self.answers:
            return self.answers[field_id]
        default = self.fields[field_id].default
        if isinstance(default, tuple):
            return [dict(item) if isinstance(item, dict) else item for item in default]
        return default

    def next(self) -> int:
        # No upper bound: the caller submits instead of advancing past the last step.
        self.current_step += 1
        self._persist({"current_step": self.current_step})
        return self.current_step

    def prev(self) -> int:
        self.current_step = max(0, self.current_step - 1)
        self._persist({"current_step": self.current_step})
        return self.current_step

    def update(self, field_id: str, raw_value: Any) -> Any:
        field = self.fields.get(field_id)
        if field is None:
            raise KeyError(f"Unknown questionnaire field: {field_id}")
        value = field.coerce(raw_value)
        self.answers[field_id] = value
        if self.store is not None:
            self.store.save_form_progress({field_id: value}, self.current_step)
        return value

    def resume(self) -> bool:
        """Restore answers and step from a stored session. Returns False if there is none."""
        if self.store is None:
            return False
        session = self.store.load()
        if session is None or not session.is_active:
            return False
        self.answers = dict(session.form_data)
        self.current_step = session.current_step
        return True

    def reset(self) -> None:
        self.current_step = 0
        self.answers = {}
        if self.store is not None:
            self.store.clear()

    def submission_data(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        for field_id, field in self.fields.items():
            value = self.value(field_id)
            if value is None or not field.is_visible(self.answers):
                continue
            data[field_id] = value
        return data

    def to_answers(self) -> QuestionnaireAnswers:
        """Validate the collected answers; raises pydantic.ValidationError."""
        return QuestionnaireAnswers.model_validate(self.submission_data())

    def _persist(self, partial: Dict[str, Any]) -> None:
        if self.store is not None:
            self.store.save(partial)
