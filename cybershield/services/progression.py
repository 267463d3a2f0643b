"""Progression engine: XP and levels, daily streak, per-module results, badges.

The engine is the only writer of UserProgress. Every mutating call persists
the full snapshot through the StateStore before returning.
"""
import logging
from datetime import timedelta

from cybershield.core.clock import Clock, iso_day, utcnow
from cybershield.core.errors import DuplicateBadgeError, InvalidArgumentError
from cybershield.schemas.progress import Badge, ModuleProgress, UserProgress
from cybershield.schemas.training import ModuleStatus
from cybershield.services.badges import BADGE_RULES, BadgeRule, eligible_badges
from cybershield.services.catalog import ModuleCatalog
from cybershield.services.scoring import MAX_SCORE, MIN_SCORE, xp_to_next_level
from cybershield.services.state_store import PROGRESS_KEY, StateStore

logger = logging.getLogger(__name__)


def initial_progress() -> UserProgress:
    return UserProgress(level=1, xp=0, xp_to_next_level=xp_to_next_level(1))


class ProgressionEngine:
    def __init__(
        self,
        store: StateStore,
        catalog: ModuleCatalog | None = None,
        progress: UserProgress | None = None,
        rules: list[BadgeRule] = BADGE_RULES,
        now: Clock = utcnow,
    ) -> None:
        self._store = store
        self._catalog = catalog
        self._rules = rules
        self._now = now
        if progress is None:
            progress = store.load_model(PROGRESS_KEY, UserProgress) or initial_progress()
        self.progress = progress
        if catalog is not None:
            catalog.sync_from_progress(progress)

    def _persist(self) -> None:
        self._store.save_model(PROGRESS_KEY, self.progress)

    def add_xp(self, amount: int) -> UserProgress:
        """Add XP, levelling up as many times as the amount allows."""
        if amount < 0:
            raise InvalidArgumentError(f"XP amount must be >= 0, got {amount}")
        p = self.progress
        start_level = p.level
        p.xp += amount
        while p.xp >= p.xp_to_next_level:
            p.xp -= p.xp_to_next_level
            p.level += 1
            p.xp_to_next_level = xp_to_next_level(p.level)
        p.total_score += amount
        self._persist()
        if p.level > start_level:
            logger.info(f"[Progress] level up {start_level} -> {p.level}")
        return p

    def update_module_progress(self, module_id: str, score: int, passed: bool) -> list[Badge]:
        """Record one attempt; returns badges newly earned because of it."""
        if not MIN_SCORE <= score <= MAX_SCORE:
            raise InvalidArgumentError(f"Score must be within {MIN_SCORE}..{MAX_SCORE}, got {score}")
        record = self.progress.module_progress.get(module_id)
        if record is None:
            record = ModuleProgress(module_id=module_id, status=ModuleStatus.IN_PROGRESS)
            self.progress.module_progress[module_id] = record

        record.best_score = max(record.best_score, score)
        record.attempts += 1
        record.last_attempt_date = iso_day(self._now())
        # once completed, a later failed attempt does not demote the module
        if passed:
            record.status = ModuleStatus.COMPLETED
        elif record.status != ModuleStatus.COMPLETED:
            record.status = ModuleStatus.IN_PROGRESS

        if self._catalog is not None and module_id in self._catalog:
            self._catalog.record_result(module_id, score, passed)

        self._persist()
        return self._award_eligible_badges()

    def add_badge(self, badge: Badge) -> Badge:
        if any(b.id == badge.id for b in self.progress.badges):
            raise DuplicateBadgeError(badge.id)
        earned = badge.model_copy(update={"earned_at": self._now()})
        self.progress.badges.append(earned)
        self._persist()
        logger.info(f"[Progress] badge earned: {badge.id}")
        return earned

    def update_streak(self) -> list[Badge]:
        """Count consecutive training days; returns badges newly earned."""
        now = self._now()
        today = iso_day(now)
        yesterday = iso_day(now - timedelta(days=1))
        p = self.progress

        if p.last_active_date == yesterday:
            p.streak += 1
        elif p.last_active_date != today:
            p.streak = 1
        p.last_active_date = today

        self._persist()
        return self._award_eligible_badges()

    def reset_progress(self) -> UserProgress:
        self.progress = initial_progress()
        if self._catalog is not None:
            self._catalog.reset()
        self._persist()
        return self.progress

    def _award_eligible_badges(self) -> list[Badge]:
        # evaluate every rule against one snapshot before granting anything
        candidates = eligible_badges(self.progress, self._rules)
        return [self.add_badge(badge) for badge in candidates]
