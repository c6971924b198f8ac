import pytest
from pydantic import ValidationError

from balancify.core.questionnaire import QUESTIONNAIRE_STEPS, Questionnaire
from balancify.core.sample_payloads import SAMPLE_QUESTIONNAIRE
from balancify.core.session_store import MemoryBackend, SessionStore


def _filled(store=None) -> Questionnaire:
    questionnaire = Questionnaire(store)
    for field_id, value in SAMPLE_QUESTIONNAIRE.items():
        questionnaire.update(field_id, value)
    return questionnaire


def test_ten_steps_in_order():
    assert len(QUESTIONNAIRE_STEPS) == 10
    assert QUESTIONNAIRE_STEPS[0].title == "Salary & Income"
    assert QUESTIONNAIRE_STEPS[-1].title == "Commitment & Willingness"


def test_navigation():
    questionnaire = Questionnaire()
    assert questionnaire.is_first
    assert questionnaire.prev() == 0

    for _ in range(9):
        questionnaire.next()
    assert questionnaire.is_last
    assert questionnaire.progress == 100.0
    assert not questionnaire.is_finished

    questionnaire.next()
    assert questionnaire.is_finished
    assert questionnaire.step is None
    assert questionnaire.visible_fields() == []


def test_loan_fields_follow_has_loans():
    questionnaire = Questionnaire()
    questionnaire.current_step = 6
    questionnaire.update("has_loans", "No")
    assert [f.id for f in questionnaire.visible_fields()] == ["has_loans"]

    questionnaire.update("has_loans", "Yes")
    assert [f.id for f in questionnaire.visible_fields()] == ["has_loans", "loan_repayment", "loan_type"]


def test_side_income_amount_follows_side_income():
    questionnaire = Questionnaire()
    questionnaire.update("side_income", "No")
    assert "side_income_amount" not in [f.id for f in questionnaire.visible_fields()]
    questionnaire.update("side_income", "Yes")
    assert "side_income_amount" in [f.id for f in questionnaire.visible_fields()]


def test_number_coercion():
    questionnaire = Questionnaire()
    assert questionnaire.update("monthly_income", "abc") == 0.0
    assert questionnaire.update("monthly_income", "45000") == 45000.0
    assert questionnaire.update("monthly_income", -20) == 0.0
    assert questionnaire.update("household_size", "") == 1
    assert questionnaire.update("household_size", 0) == 1
    assert questionnaire.update("household_size", "4") == 4


def test_range_is_clamped():
    questionnaire = Questionnaire()
    assert questionnaire.update("impulse_shopping", 9) == 5
    assert questionnaire.update("impulse_shopping", 0) == 1
    assert questionnaire.update("saving_behavior", "7") == 7


def test_invalid_choice_rejected():
    questionnaire = Questionnaire()
    with pytest.raises(ValueError):
        questionnaire.update("housing_status", "Castle")


def test_unknown_field_rejected():
    with pytest.raises(KeyError):
        Questionnaire().update("favourite_colour", "blue")


def test_checkbox_drops_unknown_options():
    questionnaire = Questionnaire()
    assert questionnaire.update("subscriptions", ["Netflix", "Pirate Bay"]) == ["Netflix"]


def test_goal_builder_defaults_to_emergency_fund():
    goals = Questionnaire().value("financial_goals")
    assert goals[0]["description"] == "Emergency Fund"
    goals[0]["description"] = "changed"
    assert Questionnaire().value("financial_goals")[0]["description"] == "Emergency Fund"


def test_updates_are_persisted():
    backend = MemoryBackend()
    store = SessionStore(backend)
    questionnaire = Questionnaire(store)
    questionnaire.update("monthly_income", 70000)
    questionnaire.next()
    questionnaire.update("housing_expenses", 15000)

    session = store.load()
    assert session.form_data == {"monthly_income": 70000.0, "housing_expenses": 15000.0}
    assert session.current_step == 1


def test_resume_restores_progress():
    store = SessionStore(MemoryBackend())
    first = Questionnaire(store)
    first.update("monthly_income", 70000)
    first.next()
    first.next()

    second = Questionnaire(store)
    assert second.resume()
    assert second.current_step == 2
    assert second.value("monthly_income") == 70000.0


def test_resume_without_session():
    assert not Questionnaire(SessionStore(MemoryBackend())).resume()
    assert not Questionnaire().resume()


def test_reset_clears_everything():
    backend = MemoryBackend()
    store = SessionStore(backend)
    questionnaire = Questionnaire(store)
    questionnaire.update("monthly_income", 70000)
    questionnaire.next()

    questionnaire.reset()
    assert questionnaire.current_step == 0
    assert questionnaire.answers == {}
    assert backend.value is None


def test_filled_questionnaire_validates():
    answers = _filled().to_answers()
    assert answers.monthly_income == 100000
    assert answers.household_size == 2
    assert [goal.description for goal in answers.financial_goals] == ["Emergency Fund", "New laptop"]


def test_hidden_fields_are_not_submitted():
    questionnaire = _filled()
    questionnaire.update("loan_repayment", 5000)
    questionnaire.update("loan_type", "Car")
    data = questionnaire.submission_data()
    assert "loan_repayment" not in data
    assert "loan_type" not in data
    assert "side_income_amount" not in data


def test_incomplete_questionnaire_fails_validation():
    questionnaire = Questionnaire()
    questionnaire.update("monthly_income", 50000)
    with pytest.raises(ValidationError):
        questionnaire.to_answers()
