import time
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .models import AnalysisRecord, AnalysisResult, QuestionnaireAnswers, QuestionnaireRecord


def generate_id(prefix: str) -> str:
    return f"{prefix}_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"


def _now() -> datetime:
    return datetime.now(timezone.utc)


class MemStorage:
    """Process-local storage. Nothing survives a restart.

    There is no locking: concurrent writers to the same key race and the last
    write wins.
    """

    def __init__(self):
        self.questionnaires: Dict[str, QuestionnaireRecord] = {}
        self.analyses: Dict[str, AnalysisRecord] = {}
        self.sessions: Dict[str, Dict[str, Any]] = {}

    def create_questionnaire(self, data: QuestionnaireAnswers, user_id: Optional[str] = None) -> QuestionnaireRecord:
        record = QuestionnaireRecord(id=str(uuid.uuid4()), user_id=user_id, data=data, created_at=_now())
        self.questionnaires[record.id] = record
        return record

    def get_questionnaire(self, questionnaire_id: str) -> Optional[QuestionnaireRecord]:
        return self.questionnaires.get(questionnaire_id)

    def create_analysis(self, questionnaire_id: str, result: AnalysisResult) -> AnalysisRecord:
        record = AnalysisRecord(
            id=str(uuid.uuid4()),
            questionnaire_id=questionnaire_id,
            created_at=_now(),
            **dict(result),
        )
        self.analyses[record.id] = record
        return record

    def get_analysis(self, questionnaire_id: str) -> Optional[AnalysisRecord]:
        return next(
            (record for record in self.analyses.values() if record.questionnaire_id == questionnaire_id),
            None,
        )

    def create_financial_session(self, form_data: Dict[str, Any]) -> str:
        session_id = generate_id("session")
        self.sessions[session_id] = {"session_id": session_id, "form_data": form_data, "created_at": _now()}
        return session_id

    def get_financial_session(self, session_id: str) -> Optional[Dict[str, Any]]:
        entry = self.sessions.get(session_id)
        return entry["form_data"] if entry else None
