from typing import Any, Dict

LLM_INCOME_MAX = 10000000.0
LLM_AMOUNT_MAX = 10000000.0
LLM_TARGET_MAX = 1000000000.0
LLM_PERCENT_MAX = 100.0
LLM_MONTHS_MAX = 240.0
LLM_HOUSEHOLD_MAX = 20.0
LLM_HOURS_MAX = 168.0

RISK_LABELS = {
    "Low": "Low (capital preservation)",
    "Medium": "Medium (balanced)",
    "High": "High (growth seeking)",
}


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(value, hi))


def risk_label(value: str) -> str:
    return RISK_LABELS.get(value, "Medium (balanced)")


def rating(value: float, scale: int) -> str:
    return f"{clamp(value, 0.0, float(scale)):.0f}/{scale}"


def clamp_llm_breakdown(breakdown: Dict[str, float]) -> Dict[str, float]:
    return {key: clamp(float(value), 0.0, LLM_AMOUNT_MAX) for key, value in breakdown.items()}


def clamp_llm_needs_wants(analysis: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "needs": clamp_llm_breakdown(analysis["needs"]),
        "wants": clamp_llm_breakdown(analysis["wants"]),
        "needs_percentage": clamp(analysis["needs_percentage"], 0.0, LLM_PERCENT_MAX),
        "wants_percentage": clamp(analysis["wants_percentage"], 0.0, LLM_PERCENT_MAX),
    }


def clamp_llm_profile(profile: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "monthly_income": clamp(profile["monthly_income"], 0.0, LLM_INCOME_MAX),
        "household_size": clamp(profile["household_size"], 1.0, LLM_HOUSEHOLD_MAX),
        "entertainment_hours": clamp(profile.get("entertainment_hours", 0.0), 0.0, LLM_HOURS_MAX),
        "preferred_savings": clamp(profile.get("preferred_savings", 0.0), 0.0, LLM_AMOUNT_MAX),
        "housing_status": profile.get("housing_status", "Rent"),
        "risk_taking": profile.get("risk_taking", "Medium"),
        "investment_types": list(profile.get("investment_types") or []),
        "financial_discipline": profile.get("financial_discipline", 3),
        "expense_reduction": profile.get("expense_reduction", 5),
        "saving_behavior": profile.get("saving_behavior", 5),
        "impulse_control": profile.get("impulse_control", 3),
        "track_spending": profile.get("track_spending", "No"),
        "has_loans": profile.get("has_loans", "No"),
        "loan_type": profile.get("loan_type"),
    }


def clamp_llm_goal_timeline(timeline: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "target_amount": clamp(timeline["target_amount"], 0.0, LLM_TARGET_MAX),
        "monthly_contribution": clamp(timeline["monthly_contribution"], 0.0, LLM_AMOUNT_MAX),
        "time_to_goal": clamp(timeline["time_to_goal"], 0.0, LLM_MONTHS_MAX),
        "preferred_timeline_months": clamp(timeline["preferred_timeline_months"], 0.0, LLM_MONTHS_MAX),
        "on_track": bool(timeline.get("on_track", False)),
    }
