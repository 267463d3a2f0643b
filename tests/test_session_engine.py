import pytest
from pydantic import ValidationError

from cybershield.core.errors import InactiveSessionError, InvalidModuleError, ModuleLockedError
from cybershield.schemas.training import MessageMetadata, MessageRole, ModuleStatus, SessionFeedback
from cybershield.services.catalog import ModuleCatalog
from cybershield.services.progression import ProgressionEngine
from cybershield.services.session_engine import SessionEngine
from cybershield.services.state_store import StateStore


@pytest.fixture
def engine(catalog: ModuleCatalog, clock) -> SessionEngine:
    return SessionEngine(catalog, now=clock)


def test_empty_slot_by_default(engine: SessionEngine) -> None:
    assert engine.state.session_id is None
    assert engine.state.is_active is False


def test_start_session(engine: SessionEngine, catalog: ModuleCatalog, clock) -> None:
    state = engine.start_session("phishing-101")
    assert state.session_id.startswith("session-")
    assert state.is_active
    assert state.module_id == "phishing-101"
    assert state.start_time == clock.now
    assert state.score == 0
    assert state.scenario_index == 0
    assert catalog.require("phishing-101").status == ModuleStatus.IN_PROGRESS


def test_start_unknown_module_leaves_slot_untouched(engine: SessionEngine) -> None:
    engine.start_session("phishing-101")
    before = engine.state
    with pytest.raises(InvalidModuleError):
        engine.start_session("does-not-exist")
    assert engine.state is before
    assert engine.state.is_active


def test_restart_replaces_session(engine: SessionEngine) -> None:
    first = engine.start_session("phishing-101").session_id
    engine.update_score(40)
    second = engine.start_session("password-security")
    assert second.session_id != first
    assert second.score == 0


def test_mutators_require_active_session(engine: SessionEngine) -> None:
    with pytest.raises(InactiveSessionError):
        engine.add_message(MessageRole.USER, "hello")
    with pytest.raises(InactiveSessionError):
        engine.update_score(20)
    with pytest.raises(InactiveSessionError):
        engine.next_scenario()
    with pytest.raises(InactiveSessionError):
        engine.end_session(None)


def test_add_message(engine: SessionEngine, clock) -> None:
    engine.start_session("phishing-101")
    message = engine.add_message("assistant", "Spot the red flags.", MessageMetadata(is_attack=True, score_impact=20))
    assert message.id.startswith("msg-")
    assert message.role == MessageRole.ASSISTANT
    assert message.timestamp == clock.now
    assert engine.state.messages == [message]


def test_score_is_clamped(engine: SessionEngine) -> None:
    engine.start_session("phishing-101")
    engine.update_score(80)
    assert engine.update_score(40) == 100
    assert engine.update_score(-150) == 0


def test_next_scenario_clears_transcript_and_keeps_score(engine: SessionEngine) -> None:
    engine.start_session("phishing-101")
    engine.add_message(MessageRole.USER, "This is a threat.")
    engine.update_score(20)
    assert engine.next_scenario() == 1
    assert engine.state.messages == []
    assert engine.state.score == 20


def test_end_session_keeps_result(engine: SessionEngine) -> None:
    engine.start_session("phishing-101")
    engine.update_score(60)
    feedback = SessionFeedback(overall_score=60, correct_actions=3, total_actions=5)
    state = engine.end_session(feedback)
    assert state.is_active is False
    assert state.feedback == feedback
    assert state.score == 60
    with pytest.raises(InactiveSessionError):
        engine.update_score(20)


def test_reset_session(engine: SessionEngine) -> None:
    engine.start_session("phishing-101")
    state = engine.reset_session()
    assert state.session_id is None
    assert state.is_active is False
    assert state.messages == []


def test_start_locked_module_is_rejected(engine: SessionEngine, catalog: ModuleCatalog) -> None:
    engine.start_session("phishing-101")
    before = engine.state
    with pytest.raises(ModuleLockedError):
        engine.start_session("incident-response-101")
    assert engine.state is before
    assert catalog.require("incident-response-101").status == ModuleStatus.LOCKED


def test_start_unlocked_module_after_prerequisite(engine: SessionEngine, catalog: ModuleCatalog) -> None:
    catalog.record_result("phishing-101", 90, passed=True)
    state = engine.start_session("incident-response-101")
    assert state.is_active
    assert catalog.require("incident-response-101").status == ModuleStatus.IN_PROGRESS


def test_start_keeps_completed_status(engine: SessionEngine, catalog: ModuleCatalog, store: StateStore, clock) -> None:
    ProgressionEngine(store, catalog, now=clock).update_module_progress("phishing-101", 85, passed=True)
    engine.start_session("phishing-101")
    assert catalog.require("phishing-101").status == ModuleStatus.COMPLETED


def test_reset_empty_slot(engine: SessionEngine) -> None:
    state = engine.reset_session()
    assert state.session_id is None
    assert state.is_active is False
    assert state.score == 0


def test_reset_ended_session(engine: SessionEngine) -> None:
    engine.start_session("phishing-101")
    engine.update_score(40)
    engine.end_session(SessionFeedback(overall_score=40))
    state = engine.reset_session()
    assert state.session_id is None
    assert state.module_id is None
    assert state.score == 0
    assert state.feedback is None
    # the slot is reusable afterwards
    assert engine.start_session("password-security").is_active


def test_appended_message_is_immutable(engine: SessionEngine) -> None:
    engine.start_session("phishing-101")
    message = engine.add_message(MessageRole.ASSISTANT, "Explained.", MessageMetadata(is_attack=True))
    with pytest.raises(ValidationError):
        message.metadata.is_attack = False
    with pytest.raises(ValidationError):
        message.content = "edited"
    assert engine.state.messages[0].metadata.is_attack is True
