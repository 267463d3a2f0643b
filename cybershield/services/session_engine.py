"""Session engine: the single active training attempt.

Mutators raise ``InactiveSessionError`` when no session is active; these are
sequencing bugs in the caller and are reported rather than ignored.
"""
import logging
import uuid

from cybershield.core.clock import Clock, utcnow
from cybershield.core.errors import InactiveSessionError
from cybershield.schemas.training import (
    ChatMessage,
    MessageMetadata,
    MessageRole,
    SessionFeedback,
    SessionState,
)
from cybershield.services.catalog import ModuleCatalog
from cybershield.services.scoring import apply_score_delta

logger = logging.getLogger(__name__)


class SessionEngine:
    def __init__(self, catalog: ModuleCatalog, state: SessionState | None = None, now: Clock = utcnow) -> None:
        self._catalog = catalog
        self._now = now
        self.state = state if state is not None else SessionState()

    def _require_active(self, operation: str) -> SessionState:
        if not self.state.is_active:
            raise InactiveSessionError(operation)
        return self.state

    def start_session(self, module_id: str) -> SessionState:
        # validate first: an unknown or locked module leaves the slot untouched
        self._catalog.require_unlocked(module_id)
        self.state = SessionState(
            session_id=f"session-{uuid.uuid4().hex}",
            module_id=module_id,
            is_active=True,
            start_time=self._now(),
        )
        self._catalog.mark_in_progress(module_id)
        logger.info(f"[Session] started {self.state.session_id} module={module_id}")
        return self.state

    def add_message(
        self,
        role: MessageRole | str,
        content: str,
        metadata: MessageMetadata | None = None,
    ) -> ChatMessage:
        state = self._require_active("add_message")
        message = ChatMessage(
            id=f"msg-{uuid.uuid4().hex}",
            role=MessageRole(role),
            content=content,
            timestamp=self._now(),
            metadata=metadata,
        )
        state.messages.append(message)
        return message

    def update_score(self, delta: int) -> int:
        state = self._require_active("update_score")
        state.score = apply_score_delta(state.score, delta)
        return state.score

    def next_scenario(self) -> int:
        state = self._require_active("next_scenario")
        state.scenario_index += 1
        # the transcript belongs to one scenario; the score spans the session
        state.messages = []
        return state.scenario_index

    def end_session(self, feedback: SessionFeedback | None) -> SessionState:
        state = self._require_active("end_session")
        state.is_active = False
        state.feedback = feedback
        logger.info(f"[Session] ended {state.session_id} score={state.score}")
        return state

    def reset_session(self) -> SessionState:
        self.state = SessionState()
        return self.state
