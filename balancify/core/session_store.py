"""Client-side persistence of an in-progress questionnaire.

A single session lives in one storage slot. Every save rewrites the whole
slot. Unreadable or expired data is treated as "no session". Storage errors
are logged and swallowed, so a broken slot never breaks the questionnaire.
"""

import logging
import os
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from pydantic import ValidationError

from .models import Session
from .storage import generate_id

logger = logging.getLogger(__name__)

SESSION_EXPIRY = timedelta(hours=24)
DEFAULT_SESSION_PATH = os.getenv(
    "BALANCIFY_SESSION_PATH",
    str(Path.home() / ".balancify" / "session.json"),
)
DEFAULT_TOTAL_STEPS = 10


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MemoryBackend:
    def __init__(self, value: Optional[str] = None):
        self.value = value

    def read(self) -> Optional[str]:
        return self.value

    def write(self, value: str) -> None:
        self.value = value

    def remove(self) -> None:
        self.value = None


class JsonFileBackend:
    def __init__(self, path: str | Path = DEFAULT_SESSION_PATH):
        self.path = Path(path)

    def read(self) -> Optional[str]:
        if not self.path.exists():
            return None
        return self.path.read_text(encoding="utf-8")

    def write(self, value: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(value, encoding="utf-8")

    def remove(self) -> None:
        self.path.unlink(missing_ok=True)


class SessionStore:
    def __init__(
        self,
        backend=None,
        clock: Callable[[], datetime] = _utcnow,
        expiry: timedelta = SESSION_EXPIRY,
    ):
        self.backend = backend if backend is not None else JsonFileBackend()
        self.clock = clock
        self.expiry = expiry

    def _read(self) -> Optional[Session]:
        try:
            raw = self.backend.read()
        except UnicodeDecodeError as exc:
            logger.warning("Discarding undecodable session data: %s", exc)
            self.clear()
            return None
        except OSError as exc:
            logger.warning("Failed to load session data: %s", exc)
            return None
        if not raw:
            return None
        try:
            # naive timestamps fail validation
            return Session.model_validate_json(raw)
        except ValidationError as exc:
            logger.warning("Discarding unreadable session data: %s", exc)
            self.clear()
            return None

    def _write(self, session: Session) -> bool:
        try:
            self.backend.write(session.model_dump_json())
        except OSError as exc:
            logger.warning("Failed to save session data: %s", exc)
            return False
        return True

    def _is_fresh(self, session: Session) -> bool:
        return self.clock() - session.start_time <= self.expiry

    def _new_session(self, user_name: str = "", total_steps: int = DEFAULT_TOTAL_STEPS) -> Session:
        now = self.clock()
        return Session(
            session_id=generate_id("session"),
            user_name=user_name,
            total_steps=total_steps,
            start_time=now,
            last_updated=now,
        )

    def create(self, user_name: str = "", total_steps: int = DEFAULT_TOTAL_STEPS) -> Session:
        """Start a fresh session, replacing whatever was stored."""
        session = self._new_session(user_name, total_steps)
        self._write(session)
        return session

    def load(self) -> Optional[Session]:
        session = self._read()
        if session is None:
            return None
        if not self._is_fresh(session):
            logger.info("Session %s expired, clearing it", session.session_id)
            self.clear()
            return None
        return session

    def is_valid(self) -> bool:
        session = self._read()
        return session is not None and self._is_fresh(session)

    def save(self, partial: Dict[str, Any]) -> Session:
        """Merge ``partial`` into the stored session and rewrite the slot.

        Top-level keys overwrite; ``form_data`` is merged key by key.
        """
        current = self.load() or self._new_session()
        merged = current.model_dump()
        merged.update({key: value for key, value in partial.items() if key != "form_data"})
        if partial.get("form_data"):
            merged["form_data"] = {**current.form_data, **partial["form_data"]}
        merged["last_updated"] = self.clock()

        session = Session.model_validate(merged)
        self._write(session)
        return session

    def save_form_progress(self, step_data: Dict[str, Any], current_step: int) -> Session:
        stored = self.load()
        furthest = max(current_step, stored.current_step if stored else 0)
        return self.save({"form_data": step_data, "current_step": furthest})

    def complete(self, questionnaire_id: Optional[str] = None, analysis_result: Optional[Dict[str, Any]] = None) -> Session:
        return self.save(
            {
                "is_active": False,
                "is_completed": True,
                "questionnaire_id": questionnaire_id,
                "analysis_result": analysis_result,
            }
        )

    def clear(self) -> None:
        try:
            self.backend.remove()
        except OSError as exc:
            logger.warning("Failed to clear session data: %s", exc)
