"""Durable key-value store: one JSON snapshot per key in the ``app_state`` table.

Every ``save`` commits before returning, so a crash right after an engine call
loses at most that call.
"""
import json
import logging
from typing import TypeVar

from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker

from cybershield.models.app_state import AppState

logger = logging.getLogger(__name__)

PROGRESS_KEY = "cybershield-progress"
SETTINGS_KEY = "cybershield-settings"
ONBOARDING_KEY = "cybershield-onboarding-completed"
THEME_KEY = "cybershield-theme"

ModelT = TypeVar("ModelT", bound=BaseModel)


class StateStore:
    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def get(self, key: str):
        """Return the decoded JSON value for ``key`` or None if never saved."""
        with self._session_factory() as db:
            raw = db.execute(select(AppState.value).where(AppState.key == key)).scalar_one_or_none()
        if raw is None:
            return None
        return json.loads(raw)

    def put(self, key: str, value) -> None:
        encoded = json.dumps(value, separators=(",", ":"))
        with self._session_factory() as db:
            row = db.get(AppState, key)
            if row is None:
                db.add(AppState(key=key, value=encoded))
            else:
                row.value = encoded
            db.commit()

    def delete(self, key: str) -> bool:
        with self._session_factory() as db:
            row = db.get(AppState, key)
            if row is None:
                return False
            db.delete(row)
            db.commit()
            return True

    def load_model(self, key: str, model: type[ModelT]) -> ModelT | None:
        """Load a pydantic snapshot; a corrupt snapshot is logged and ignored."""
        try:
            data = self.get(key)
            if data is None:
                return None
            return model.model_validate(data)
        except ValueError as e:
            logger.error(f"[StateStore] discarding unreadable snapshot {key!r}: {e}")
            return None

    def save_model(self, key: str, value: BaseModel) -> None:
        self.put(key, value.model_dump(mode="json", by_alias=True))
