"""Score, XP and level computation; end-of-session feedback."""
import math

from cybershield.schemas.progress import BASE_XP_TO_NEXT_LEVEL
from cybershield.schemas.training import SessionFeedback

# Session score: starts at 0, +20 per correct judgement, clamp 0..100
MIN_SCORE = 0
MAX_SCORE = 100

# Each level needs 1.5x the XP of the previous one (100, 150, 225, 337, ...)
LEVEL_GROWTH = 1.5

LEVEL_TITLES = {
    1: "Security Novice",
    2: "Security Trainee",
    3: "Security Aware",
    4: "Security Defender",
    5: "Security Guardian",
    6: "Security Specialist",
    7: "Security Expert",
    8: "Security Master",
    9: "Security Champion",
    10: "Security Legend",
}

GRADE_BANDS = [
    (90, "A"),
    (80, "B"),
    (70, "C"),
    (60, "D"),
]

STRENGTHS = [
    "Good eye for suspicious sender addresses",
    "Recognized urgency manipulation tactics",
]

IMPROVEMENTS = [
    "Pay closer attention to sender email domains",
    "Be wary of requests for immediate action",
    "Always verify links before clicking",
]

PASS_ANALYSIS = (
    "Great job! You demonstrated solid phishing detection skills. "
    "Continue practicing to maintain your awareness."
)
FAIL_ANALYSIS = (
    "Keep practicing! Phishing attacks are becoming more sophisticated. "
    "Focus on examining sender addresses and link destinations carefully."
)


def apply_score_delta(current: int, delta: int) -> int:
    """Apply delta and clamp to 0..100."""
    return max(MIN_SCORE, min(MAX_SCORE, current + delta))


def xp_to_next_level(level: int) -> int:
    """XP needed to go from ``level`` to ``level + 1``."""
    threshold = BASE_XP_TO_NEXT_LEVEL
    for _ in range(1, level):
        threshold = math.floor(threshold * LEVEL_GROWTH)
    return threshold


def level_title(level: int) -> str:
    if level >= 10:
        return LEVEL_TITLES[10]
    return LEVEL_TITLES.get(level, "Unknown")


def score_grade(score: int) -> str:
    for floor, grade in GRADE_BANDS:
        if score >= floor:
            return grade
    return "F"


def final_score(correct: int, total: int) -> int:
    """Percentage of correct judgements, rounded half up."""
    if total <= 0:
        return 0
    return math.floor(correct / total * 100 + 0.5)


def session_xp(score: int, multiplier: float = LEVEL_GROWTH) -> int:
    return math.floor(score * multiplier + 0.5)


def build_feedback(
    correct: int,
    total: int,
    passed: bool,
    identified_red_flags: list[str] | None = None,
    missed_red_flags: list[str] | None = None,
) -> SessionFeedback:
    """Summarise a finished session the way the results view shows it."""
    return SessionFeedback(
        overall_score=final_score(correct, total),
        max_score=MAX_SCORE,
        correct_actions=correct,
        total_actions=total,
        identified_red_flags=identified_red_flags or [],
        missed_red_flags=missed_red_flags or [],
        strengths=list(STRENGTHS) if correct >= 3 else [],
        improvements=list(IMPROVEMENTS) if correct < 4 else [],
        detailed_analysis=PASS_ANALYSIS if passed else FAIL_ANALYSIS,
    )
