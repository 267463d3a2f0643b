import json

import pytest

from cybershield.core.errors import DuplicateBadgeError, InvalidArgumentError
from cybershield.schemas.progress import UserProgress
from cybershield.schemas.training import ModuleStatus
from cybershield.services.badges import BADGE_RULES
from cybershield.services.catalog import ModuleCatalog
from cybershield.services.progression import ProgressionEngine, initial_progress
from cybershield.services.state_store import PROGRESS_KEY, StateStore


@pytest.fixture
def engine(store: StateStore, catalog: ModuleCatalog, clock) -> ProgressionEngine:
    return ProgressionEngine(store, catalog, now=clock)


def test_initial_progress(engine: ProgressionEngine) -> None:
    p = engine.progress
    assert (p.level, p.xp, p.xp_to_next_level) == (1, 0, 100)
    assert p.streak == 0
    assert p.last_active_date is None
    assert p.badges == []


def test_add_xp_levels_up(engine: ProgressionEngine) -> None:
    p = engine.add_xp(150)
    assert (p.level, p.xp, p.xp_to_next_level) == (2, 50, 150)
    assert p.total_score == 150


def test_add_xp_exact_threshold(engine: ProgressionEngine) -> None:
    p = engine.add_xp(100)
    assert (p.level, p.xp) == (2, 0)


def test_add_xp_crosses_several_levels(engine: ProgressionEngine) -> None:
    p = engine.add_xp(400)
    # 400 - 100 - 150 = 150, short of the 225 needed for level 4
    assert (p.level, p.xp, p.xp_to_next_level) == (3, 150, 225)


def test_add_xp_rejects_negative(engine: ProgressionEngine) -> None:
    with pytest.raises(InvalidArgumentError):
        engine.add_xp(-1)
    assert engine.progress.xp == 0


def test_first_module_result(engine: ProgressionEngine, catalog: ModuleCatalog) -> None:
    badges = engine.update_module_progress("phishing-101", 80, passed=True)
    record = engine.progress.module_progress["phishing-101"]
    assert record.status == ModuleStatus.COMPLETED
    assert record.best_score == 80
    assert record.attempts == 1
    assert record.last_attempt_date == "2025-03-10"
    assert [b.id for b in badges] == ["first-steps"]
    assert catalog.require("incident-response-101").status == ModuleStatus.AVAILABLE


def test_module_result_never_regresses(engine: ProgressionEngine) -> None:
    engine.update_module_progress("phishing-101", 80, passed=True)
    badges = engine.update_module_progress("phishing-101", 40, passed=False)
    record = engine.progress.module_progress["phishing-101"]
    assert record.status == ModuleStatus.COMPLETED
    assert record.best_score == 80
    assert record.attempts == 2
    assert badges == []


def test_failed_first_attempt_is_in_progress(engine: ProgressionEngine) -> None:
    assert engine.update_module_progress("password-security", 30, passed=False) == []
    assert engine.progress.module_progress["password-security"].status == ModuleStatus.IN_PROGRESS


def test_module_result_rejects_out_of_range_score(engine: ProgressionEngine) -> None:
    with pytest.raises(InvalidArgumentError):
        engine.update_module_progress("phishing-101", 101, passed=True)
    assert engine.progress.module_progress == {}


def test_perfect_score_awards_all_matching_badges(engine: ProgressionEngine, clock) -> None:
    badges = engine.update_module_progress("phishing-101", 100, passed=True)
    assert [b.id for b in badges] == ["first-steps", "phishing-spotter", "perfect-score"]
    assert all(b.earned_at == clock.now for b in badges)
    assert [b.id for b in engine.progress.badges] == ["first-steps", "phishing-spotter", "perfect-score"]


def test_add_badge_rejects_duplicates(engine: ProgressionEngine) -> None:
    template = BADGE_RULES[0].template
    engine.add_badge(template)
    with pytest.raises(DuplicateBadgeError):
        engine.add_badge(template)
    assert len(engine.progress.badges) == 1
    assert template.earned_at is None


def test_streak_first_day(engine: ProgressionEngine) -> None:
    assert engine.update_streak() == []
    assert engine.progress.streak == 1
    assert engine.progress.last_active_date == "2025-03-10"


def test_streak_same_day_is_idempotent(engine: ProgressionEngine, clock) -> None:
    engine.update_streak()
    clock.advance(hours=8)
    engine.update_streak()
    assert engine.progress.streak == 1


def test_streak_consecutive_days_and_badge(engine: ProgressionEngine, clock) -> None:
    engine.update_streak()
    clock.advance(days=1)
    engine.update_streak()
    assert engine.progress.streak == 2
    clock.advance(days=1)
    badges = engine.update_streak()
    assert engine.progress.streak == 3
    assert [b.id for b in badges] == ["on-a-roll"]


def test_streak_resets_after_gap(engine: ProgressionEngine, clock) -> None:
    engine.update_streak()
    clock.advance(days=1)
    engine.update_streak()
    clock.advance(days=2)
    engine.update_streak()
    assert engine.progress.streak == 1
    assert engine.progress.last_active_date == "2025-03-13"


def test_progress_round_trips_through_json(engine: ProgressionEngine) -> None:
    engine.add_xp(275)
    engine.update_module_progress("phishing-101", 100, passed=True)
    engine.update_streak()
    p = engine.progress
    assert UserProgress.model_validate(json.loads(p.model_dump_json(by_alias=True))) == p


def test_progress_is_persisted_on_every_change(store: StateStore, clock) -> None:
    engine = ProgressionEngine(store, ModuleCatalog(), now=clock)
    engine.add_xp(120)
    engine.update_module_progress("phishing-101", 90, passed=True)

    catalog = ModuleCatalog()
    reloaded = ProgressionEngine(store, catalog, now=clock)
    assert reloaded.progress == engine.progress
    # catalog state follows the persisted progress
    assert catalog.require("phishing-101").status == ModuleStatus.COMPLETED
    assert catalog.require("incident-response-101").status == ModuleStatus.AVAILABLE


def test_reset_progress(engine: ProgressionEngine, store: StateStore, catalog: ModuleCatalog) -> None:
    engine.add_xp(500)
    engine.update_module_progress("phishing-101", 100, passed=True)
    p = engine.reset_progress()
    assert p == initial_progress()
    assert store.load_model(PROGRESS_KEY, UserProgress) == initial_progress()
    assert catalog.require("incident-response-101").status == ModuleStatus.LOCKED


def test_result_for_locked_module_does_not_unlock_it(engine: ProgressionEngine, catalog: ModuleCatalog, store) -> None:
    engine.update_module_progress("incident-response-101", 10, passed=False)
    assert catalog.require("incident-response-101").status == ModuleStatus.LOCKED

    restored = ModuleCatalog()
    ProgressionEngine(store, restored)
    assert restored.require("incident-response-101").status == ModuleStatus.LOCKED
