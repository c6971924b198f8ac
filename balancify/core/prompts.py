from typing import Any, Dict, List

from .tools import rating, risk_label

CURRENCY_SYMBOL = "₹"

INSIGHT_FIELDS = (
    "spendingPatterns",
    "optimizationOpportunities",
    "investmentRecommendations",
    "riskAnalysis",
    "goalAchievability",
)
RECOMMENDATION_FIELDS = (
    "immediate",
    "shortTerm",
    "longTerm",
    "emergencyFund",
    "investmentStrategy",
)


def format_currency(value: float, symbol: str = CURRENCY_SYMBOL) -> str:
    return f"{symbol}{value:,.0f}"


def _breakdown_lines(breakdown: Dict[str, float]) -> str:
    return "\n".join(f"- {name.capitalize()}: {format_currency(amount)}" for name, amount in breakdown.items())


def _goal_lines(goals: List[Dict[str, Any]]) -> str:
    if not goals:
        return "- None stated"
    return "\n".join(
        f"- {goal['description']} ({goal['priority']} priority, {goal['category']}): "
        f"{format_currency(goal['target_amount'])} within {goal['timeline_months']} months"
        for goal in goals
    )


def build_insights_prompt(
    profile: Dict[str, Any],
    breakdown: Dict[str, float],
    needs_wants: Dict[str, Any],
    goal_timeline: Dict[str, Any],
) -> str:
    investment_types = ", ".join(profile["investment_types"]) or "None"
    return f"""
You are Balancify, a personal budgeting assistant.
Analyze the financial profile below and describe what the numbers show.
Keep the tone supportive and practical, never alarmist. Use {CURRENCY_SYMBOL} for amounts.

Respond with a single JSON object and nothing else. It must contain exactly these string fields:
- spendingPatterns: analysis of spending behavior
- optimizationOpportunities: areas for improvement
- investmentRecommendations: investment advice based on the risk profile
- riskAnalysis: financial risk assessment
- goalAchievability: assessment of how achievable the primary goal is

Profile:
- Monthly income: {format_currency(profile['monthly_income'])}
- Household size: {profile['household_size']:.0f}
- Housing status: {profile['housing_status']}
- Financial discipline: {rating(profile['financial_discipline'], 5)}
- Impulse control: {rating(profile['impulse_control'], 5)}
- Saving behavior: {rating(profile['saving_behavior'], 10)}
- Tracks spending: {profile['track_spending']}
- Risk tolerance: {risk_label(profile['risk_taking'])}
- Investment types: {investment_types}

Monthly spending breakdown:
{_breakdown_lines(breakdown)}

Needs vs wants: {needs_wants['needs_percentage']:.0f}% needs, {needs_wants['wants_percentage']:.0f}% wants

Primary goal:
- Target: {format_currency(goal_timeline['target_amount'])}
- Monthly contribution (savings + investments): {format_currency(goal_timeline['monthly_contribution'])}
- Estimated months to goal: {goal_timeline['time_to_goal']:.0f}
- Preferred timeline (months): {goal_timeline['preferred_timeline_months']:.0f}
- On track: {"yes" if goal_timeline['on_track'] else "no"}
""".strip()


def build_recommendations_prompt(
    profile: Dict[str, Any],
    breakdown: Dict[str, float],
    goals: List[Dict[str, Any]],
) -> str:
    loan_line = "None"
    if profile["has_loans"] == "Yes":
        loan_line = f"{profile.get('loan_type') or 'Unspecified'} loan, {format_currency(breakdown.get('loans', 0.0))}/month"
    return f"""
You are Balancify, a personal budgeting assistant.
Based on the financial profile below, provide actionable recommendations. Use {CURRENCY_SYMBOL} for amounts.

Respond with a single JSON object and nothing else. It must contain exactly these fields:
- immediate: array of strings, actions for the next 1-3 months
- shortTerm: array of strings, goals for the next 3-12 months
- longTerm: array of strings, strategies for 1+ years
- emergencyFund: string, emergency fund recommendation
- investmentStrategy: string, investment strategy recommendation

Profile:
- Monthly income: {format_currency(profile['monthly_income'])}
- Preferred monthly savings: {format_currency(profile['preferred_savings'])}
- Willingness to reduce expenses: {rating(profile['expense_reduction'], 10)}
- Risk tolerance: {risk_label(profile['risk_taking'])}
- Loans: {loan_line}

Monthly spending breakdown:
{_breakdown_lines(breakdown)}

Financial goals:
{_goal_lines(goals)}
""".strip()
