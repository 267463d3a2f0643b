from cybershield.services.scoring import (
    FAIL_ANALYSIS,
    PASS_ANALYSIS,
    apply_score_delta,
    build_feedback,
    final_score,
    level_title,
    score_grade,
    session_xp,
    xp_to_next_level,
)


def test_apply_score_delta_clamps() -> None:
    assert apply_score_delta(90, 20) == 100
    assert apply_score_delta(10, -50) == 0
    assert apply_score_delta(40, 20) == 60


def test_xp_curve_grows_by_half_and_floors() -> None:
    assert [xp_to_next_level(n) for n in range(1, 6)] == [100, 150, 225, 337, 505]


def test_level_titles() -> None:
    assert level_title(1) == "Security Novice"
    assert level_title(2) == "Security Trainee"
    assert level_title(10) == "Security Legend"
    assert level_title(42) == "Security Legend"
    assert level_title(0) == "Unknown"


def test_score_grade_bands() -> None:
    assert score_grade(100) == "A"
    assert score_grade(80) == "B"
    assert score_grade(79) == "C"
    assert score_grade(60) == "D"
    assert score_grade(59) == "F"


def test_final_score_rounds_half_up() -> None:
    assert final_score(3, 5) == 60
    assert final_score(2, 3) == 67
    assert final_score(1, 8) == 13
    assert final_score(0, 0) == 0


def test_session_xp() -> None:
    assert session_xp(60) == 90
    assert session_xp(75) == 113
    assert session_xp(0) == 0
    assert session_xp(80, multiplier=2) == 160


def test_build_feedback_for_failed_session() -> None:
    feedback = build_feedback(3, 5, passed=False, missed_red_flags=["Generic greeting"])
    assert feedback.overall_score == 60
    assert feedback.correct_actions == 3
    assert feedback.total_actions == 5
    assert feedback.strengths
    assert feedback.improvements
    assert feedback.missed_red_flags == ["Generic greeting"]
    assert feedback.detailed_analysis == FAIL_ANALYSIS


def test_build_feedback_for_perfect_session() -> None:
    feedback = build_feedback(5, 5, passed=True)
    assert feedback.overall_score == 100
    assert feedback.improvements == []
    assert feedback.detailed_analysis == PASS_ANALYSIS


def test_build_feedback_for_poor_session_has_no_strengths() -> None:
    assert build_feedback(1, 5, passed=False).strengths == []
