"""Declarative badge rules: (predicate, template) pairs over UserProgress.

Predicates only read the progress snapshot they are given, so rules never
depend on each other and their order does not matter.
"""
from collections.abc import Callable
from dataclasses import dataclass

from cybershield.schemas.progress import Badge, BadgeRarity, UserProgress
from cybershield.schemas.training import ModuleStatus

Predicate = Callable[[UserProgress], bool]


@dataclass(frozen=True)
class BadgeRule:
    predicate: Predicate
    template: Badge

    @property
    def badge_id(self) -> str:
        return self.template.id


def completed_at_least(count: int) -> Predicate:
    def check(progress: UserProgress) -> bool:
        done = sum(1 for p in progress.module_progress.values() if p.status == ModuleStatus.COMPLETED)
        return done >= count

    return check


def streak_at_least(days: int) -> Predicate:
    return lambda progress: progress.streak >= days


def module_best_at_least(module_id: str, threshold: int) -> Predicate:
    def check(progress: UserProgress) -> bool:
        record = progress.module_progress.get(module_id)
        return record is not None and record.best_score >= threshold

    return check


def any_module_best_at_least(threshold: int) -> Predicate:
    return lambda progress: any(p.best_score >= threshold for p in progress.module_progress.values())


def _badge(id: str, name: str, description: str, icon: str, requirement: str, rarity: BadgeRarity) -> Badge:
    return Badge(id=id, name=name, description=description, icon=icon, requirement=requirement, rarity=rarity)


BADGE_RULES = [
    BadgeRule(
        completed_at_least(1),
        _badge("first-steps", "First Steps", "Completed your first training module",
               "🛡️", "Complete 1 module", BadgeRarity.COMMON),
    ),
    BadgeRule(
        module_best_at_least("phishing-101", 90),
        _badge("phishing-spotter", "Phishing Spotter", "Scored 90+ in the Phishing Detection Lab",
               "🎣", "Score at least 90 in phishing-101", BadgeRarity.RARE),
    ),
    BadgeRule(
        any_module_best_at_least(100),
        _badge("perfect-score", "Perfect Score", "Finished a module without a single mistake",
               "💯", "Score 100 in any module", BadgeRarity.EPIC),
    ),
    BadgeRule(
        completed_at_least(3),
        _badge("well-rounded", "Well Rounded", "Completed three different training modules",
               "🧭", "Complete 3 modules", BadgeRarity.RARE),
    ),
    BadgeRule(
        completed_at_least(4),
        _badge("cyber-guardian", "Cyber Guardian", "Completed every training module",
               "🏆", "Complete all 4 modules", BadgeRarity.LEGENDARY),
    ),
    BadgeRule(
        streak_at_least(3),
        _badge("on-a-roll", "On a Roll", "Trained three days in a row",
               "🔥", "Reach a 3-day streak", BadgeRarity.COMMON),
    ),
    BadgeRule(
        streak_at_least(7),
        _badge("dedicated-defender", "Dedicated Defender", "Trained every day for a week",
               "📅", "Reach a 7-day streak", BadgeRarity.RARE),
    ),
    BadgeRule(
        streak_at_least(30),
        _badge("unstoppable", "Unstoppable", "Trained every day for a month",
               "⚡", "Reach a 30-day streak", BadgeRarity.EPIC),
    ),
]


def eligible_badges(progress: UserProgress, rules: list[BadgeRule] = BADGE_RULES) -> list[Badge]:
    """Templates of every satisfied rule whose badge is not yet held, in rule order."""
    held = {b.id for b in progress.badges}
    return [r.template for r in rules if r.badge_id not in held and r.predicate(progress)]
