from balancify.core.models import (
    NeedsBreakdown,
    NeedsWantsAnalysis,
    QuestionnaireAnswers,
    SpendingBreakdown,
    WantsBreakdown,
)

from .utils import percent_of, round_half_up

WEEKS_PER_MONTH = 4
ENTERTAINMENT_RATE_PER_IMPULSE_LEVEL = 500.0
ENTERTAINMENT_HOURS_BASELINE = 10.0
ESSENTIAL_FOOD_SHARE = 0.7


def entertainment_cost(answers: QuestionnaireAnswers) -> float:
    # Heuristic estimate, the questionnaire never asks for entertainment spend directly.
    base_rate = answers.impulse_shopping * ENTERTAINMENT_RATE_PER_IMPULSE_LEVEL
    frequency = answers.entertainment_hours / ENTERTAINMENT_HOURS_BASELINE
    return float(round_half_up(base_rate * frequency))


def loan_payment(answers: QuestionnaireAnswers) -> float:
    if answers.has_loans != "Yes":
        return 0.0
    return float(answers.loan_repayment or 0.0)


def calculate_spending_breakdown(answers: QuestionnaireAnswers) -> SpendingBreakdown:
    housing = answers.housing_expenses + answers.utility_bills
    food = answers.groceries_weekly * WEEKS_PER_MONTH + answers.dining_monthly
    transportation = answers.transport_monthly
    entertainment = entertainment_cost(answers)
    loans = loan_payment(answers)

    total_expenses = (
        housing
        + food
        + transportation
        + entertainment
        + answers.shopping_monthly
        + answers.subscription_cost
        + loans
        + answers.monthly_investment
    )
    savings = max(0.0, answers.monthly_income - total_expenses)

    return SpendingBreakdown(
        housing=housing,
        food=food,
        transportation=transportation,
        entertainment=entertainment,
        shopping=answers.shopping_monthly,
        subscriptions=answers.subscription_cost,
        loans=loans,
        investments=answers.monthly_investment,
        savings=savings,
        # savings is the residual, so nothing is left unclassified
        other=0.0,
    )


def analyze_needs_vs_wants(answers: QuestionnaireAnswers, spending: SpendingBreakdown) -> NeedsWantsAnalysis:
    needs = NeedsBreakdown(
        housing=spending.housing,
        food_essential=float(round_half_up(spending.food * ESSENTIAL_FOOD_SHARE)),
        transportation=spending.transportation,
        utilities=answers.utility_bills,
        loan_payments=spending.loans,
    )
    wants = WantsBreakdown(
        dining_out=float(round_half_up(spending.food * (1 - ESSENTIAL_FOOD_SHARE))),
        entertainment=spending.entertainment,
        shopping=spending.shopping,
        subscriptions=spending.subscriptions,
        other=spending.other,
    )

    total_needs = sum(needs.model_dump().values())
    total_wants = sum(wants.model_dump().values())
    total_spending = total_needs + total_wants

    return NeedsWantsAnalysis(
        needs=needs,
        wants=wants,
        needs_percentage=percent_of(total_needs, total_spending),
        wants_percentage=percent_of(total_wants, total_spending),
    )
