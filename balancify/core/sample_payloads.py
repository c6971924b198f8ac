SAMPLE_QUESTIONNAIRE = {
    "monthly_income": 100000,
    "side_income": "No",
    "bonus_pay": "Sometimes",
    "housing_status": "Rent",
    "housing_expenses": 20000,
    "utility_bills": 3000,
    "household_size": 2,
    "groceries_weekly": 2000,
    "dining_monthly": 2000,
    "food_ordering": "Few times a week",
    "shopping_monthly": 5000,
    "impulse_shopping": 2,
    "online_shopping": "Weekly",
    "subscriptions": ["Netflix", "Spotify"],
    "subscription_cost": 1000,
    "entertainment_hours": 10,
    "commute_cost": 100,
    "transport_mode": "Public Transport",
    "transport_monthly": 3000,
    "has_loans": "No",
    "investment_types": ["Mutual Funds"],
    "monthly_investment": 10000,
    "financial_goals": [
        {
            "description": "Emergency Fund",
            "target_amount": 500000,
            "timeline_months": 24,
            "priority": "high",
            "category": "emergency",
        },
        {
            "description": "New laptop",
            "target_amount": 120000,
            "timeline_months": 6,
            "priority": "medium",
            "category": "purchase",
        },
    ],
    "track_spending": "Yes",
    "impulse_control": 3,
    "saving_behavior": 7,
    "risk_taking": "Medium",
    "expense_reduction": 6,
    "preferred_savings": 30000,
    "financial_discipline": 4,
}

SAMPLE_INSIGHTS = {
    "spendingPatterns": "Housing is the largest expense at about a quarter of income.",
    "optimizationOpportunities": "Shopping and dining out can be trimmed by a third.",
    "investmentRecommendations": "Keep the monthly mutual fund contribution and add an index fund.",
    "riskAnalysis": "No debt and a large monthly surplus keep risk low.",
    "goalAchievability": "The emergency fund is reachable in under a year.",
}

SAMPLE_RECOMMENDATIONS = {
    "immediate": ["Move the monthly surplus to a separate savings account."],
    "shortTerm": ["Finish the emergency fund."],
    "longTerm": ["Raise investments as income grows."],
    "emergencyFund": "Hold six months of expenses in a liquid fund.",
    "investmentStrategy": "Balanced mix of equity and debt funds.",
}
