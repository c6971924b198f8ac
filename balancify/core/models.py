from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

YesNo = Literal["Yes", "No"]
Priority = Literal["high", "medium", "low"]
GoalCategory = Literal["emergency", "investment", "purchase", "retirement", "education", "other"]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class FinancialGoal(BaseModel):
    model_config = ConfigDict(frozen=True)

    description: str = Field(min_length=1)
    target_amount: float = Field(gt=0)
    current_amount: float = Field(ge=0, default=0.0)
    timeline_months: int = Field(ge=1, le=120, default=24)
    priority: Priority = "medium"
    category: GoalCategory = "other"


DEFAULT_GOAL = FinancialGoal(
    description="Emergency Fund",
    target_amount=500000,
    timeline_months=24,
    priority="high",
    category="emergency",
)


class QuestionnaireAnswers(BaseModel):
    # Salary & income
    monthly_income: float = Field(ge=0)
    side_income: YesNo
    side_income_amount: Optional[float] = Field(ge=0, default=None)
    bonus_pay: Literal["Yes", "No", "Sometimes"]

    # Living situation
    housing_status: Literal["Rent", "Own", "Living with family"]
    housing_expenses: float = Field(ge=0)
    utility_bills: float = Field(ge=0)
    household_size: int = Field(ge=1)

    # Food & dining
    groceries_weekly: float = Field(ge=0)
    dining_monthly: float = Field(ge=0)
    food_ordering: Literal["Daily", "Few times a week", "Rarely"]

    # Shopping
    shopping_monthly: float = Field(ge=0)
    impulse_shopping: int = Field(ge=1, le=5)
    online_shopping: Literal["Daily", "Weekly", "Monthly", "Rarely"]

    # Subscriptions & entertainment
    subscriptions: List[str] = Field(default_factory=list)
    subscription_cost: float = Field(ge=0)
    entertainment_hours: float = Field(ge=0)

    # Transportation
    commute_cost: float = Field(ge=0)
    transport_mode: Literal["Public Transport", "Own Vehicle", "Both"]
    transport_monthly: float = Field(ge=0)

    # Debt
    has_loans: YesNo
    loan_repayment: Optional[float] = Field(ge=0, default=None)
    loan_type: Optional[Literal["Education", "Car", "Home", "Personal", "Credit Card"]] = None

    # Investments & goals
    investment_types: List[str] = Field(default_factory=list)
    monthly_investment: float = Field(ge=0)
    financial_goals: List[FinancialGoal] = Field(default_factory=lambda: [DEFAULT_GOAL])

    # Budgeting behavior
    track_spending: YesNo
    impulse_control: int = Field(ge=1, le=5)
    saving_behavior: int = Field(ge=1, le=10)
    risk_taking: Literal["Low", "Medium", "High"]

    # Commitment
    expense_reduction: int = Field(ge=1, le=10)
    preferred_savings: float = Field(ge=0)
    financial_discipline: int = Field(ge=1, le=5)

    @field_validator("financial_goals")
    @classmethod
    def _default_goal(cls, goals: List[FinancialGoal]) -> List[FinancialGoal]:
        return goals or [DEFAULT_GOAL]


class SpendingBreakdown(CamelModel):
    housing: float
    food: float
    transportation: float
    entertainment: float
    shopping: float
    subscriptions: float
    loans: float
    investments: float
    savings: float
    other: float = 0.0


class NeedsBreakdown(BaseModel):
    model_config = ConfigDict(frozen=True)

    housing: float
    food_essential: float
    transportation: float
    utilities: float
    loan_payments: float


class WantsBreakdown(BaseModel):
    model_config = ConfigDict(frozen=True)

    dining_out: float
    entertainment: float
    shopping: float
    subscriptions: float
    other: float


class NeedsWantsAnalysis(CamelModel):
    needs: NeedsBreakdown
    wants: WantsBreakdown
    needs_percentage: int
    wants_percentage: int


class Milestone(BaseModel):
    model_config = ConfigDict(frozen=True)

    month: int
    amount: float
    description: str


class GoalTimeline(CamelModel):
    current_savings: float
    target_amount: float
    monthly_contribution: float
    time_to_goal: int
    timeline_months: int
    preferred_timeline_months: int
    on_track: bool
    milestones: List[Milestone]


class TrackedGoal(CamelModel):
    id: str
    description: str
    target_amount: float
    current_amount: float
    timeline_months: int
    priority: Priority
    category: GoalCategory


class FinancialInsights(CamelModel):
    spending_patterns: str = Field(min_length=1)
    optimization_opportunities: str = Field(min_length=1)
    investment_recommendations: str = Field(min_length=1)
    risk_analysis: str = Field(min_length=1)
    goal_achievability: str = Field(min_length=1)


class Recommendations(CamelModel):
    immediate: List[str]
    short_term: List[str]
    long_term: List[str]
    emergency_fund: str
    investment_strategy: str


class AnalysisResult(CamelModel):
    insights: FinancialInsights
    spending_breakdown: SpendingBreakdown
    needs_wants_analysis: NeedsWantsAnalysis
    recommendations: Recommendations
    goal_timeline: GoalTimeline
    financial_goals: List[TrackedGoal]


class QuestionnaireResponse(AnalysisResult):
    questionnaire_id: str
    analysis_id: str


class SessionAnalysisResponse(QuestionnaireResponse):
    session_id: str


class QuestionnaireRecord(CamelModel):
    id: str
    user_id: Optional[str] = None
    data: QuestionnaireAnswers
    created_at: datetime


class AnalysisRecord(AnalysisResult):
    id: str
    questionnaire_id: str
    created_at: datetime


class AnalysisLookupResponse(CamelModel):
    questionnaire: QuestionnaireRecord
    analysis: AnalysisRecord


class FinancialSessionResponse(CamelModel):
    session_id: str


class SimulationSettings(CamelModel):
    income_increase: float = Field(ge=-100, le=500, default=0.0)
    expense_reduction: float = Field(ge=0, le=100, default=0.0)
    investment_boost: float = Field(ge=-100, le=500, default=0.0)
    goal_target: Optional[float] = Field(gt=0, default=None)


class ValueAdjustments(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid", frozen=True)

    subscription_cost: Optional[float] = Field(ge=0, default=None)
    entertainment_hours: Optional[float] = Field(ge=0, default=None)
    shopping_monthly: Optional[float] = Field(ge=0, default=None)
    dining_monthly: Optional[float] = Field(ge=0, default=None)
    groceries_weekly: Optional[float] = Field(ge=0, default=None)


class SimulationRequest(CamelModel):
    questionnaire_id: str
    simulation: SimulationSettings = Field(default_factory=SimulationSettings)
    adjustments: Optional[ValueAdjustments] = None


class MonthlyProjection(CamelModel):
    month: str
    before_scenario: float
    after_scenario: float
    goal_target: float
    savings: float
    difference: float


class GoalProgressPoint(CamelModel):
    month: str
    current_progress: float
    projected_progress: float
    simulated_progress: float
    goal_target: float
    milestone: Optional[str] = None


class Projections(CamelModel):
    monthly_data: List[MonthlyProjection]
    goal_timeline: List[GoalProgressPoint]


class SimulationComparison(CamelModel):
    original_monthly_savings: float
    new_monthly_savings: float
    savings_increase: float
    goal_target: float
    original_time_to_goal: int
    new_time_to_goal: int
    months_saved: int


class WhatIfInsights(CamelModel):
    goal_achievability: str
    time_to_goal: str
    savings_impact: str
    recommendations: List[str]


class SimulationResponse(CamelModel):
    insights: WhatIfInsights
    projections: Projections
    comparison: SimulationComparison
    spending_breakdown: SpendingBreakdown
    needs_wants_analysis: NeedsWantsAnalysis
    goal_timeline: GoalTimeline


class Session(BaseModel):
    session_id: str
    user_name: str = ""
    form_data: Dict[str, Any] = Field(default_factory=dict)
    current_step: int = Field(ge=0, default=0)
    total_steps: int = Field(ge=1, default=10)
    start_time: AwareDatetime
    last_updated: AwareDatetime
    is_active: bool = True
    is_completed: bool = False
    questionnaire_id: Optional[str] = None
    analysis_result: Optional[Dict[str, Any]] = None
