"""Tests for weighted averages and the final exam solver."""
from datetime import date

import pytest

from academic_planner.analytics import (
    averages_by_subject,
    classify_required_score,
    effective_weight,
    grade_band,
    overall_average,
    required_final_score,
    round2,
    weighted_average,
)
from academic_planner.models import Grade, GradeBand, RequiredScoreOutcome, Subject
from academic_planner.validation import ValidationError


def make_grade(score: float, weight=1.0, subject_id: str = "math", graded_at: date = date(2024, 1, 1)) -> Grade:
    return Grade(id=f"g-{score}-{weight}", subject_id=subject_id, score=score, weight=weight, graded_at=graded_at)


def test_weighted_average_example() -> None:
    # (8*2 + 6*1 + 10*3) / 6 = 8.666...
    grades = [make_grade(8, 2), make_grade(6, 1), make_grade(10, 3)]
    assert weighted_average(grades) == 8.67


def test_weighted_average_is_scale_invariant() -> None:
    grades = [make_grade(8, 2), make_grade(6, 1), make_grade(10, 3)]
    scaled = [make_grade(8, 20), make_grade(6, 10), make_grade(10, 30)]
    assert weighted_average(grades) == weighted_average(scaled)


def test_empty_and_zero_weight_averages() -> None:
    assert weighted_average([]) == 0
    assert weighted_average([make_grade(8, 0), make_grade(6, 0)]) == 0


def test_missing_weight_counts_as_one() -> None:
    assert effective_weight(None) == 1.0
    assert effective_weight("abc") == 1.0
    assert effective_weight("2") == 2.0
    assert weighted_average([make_grade(4, None), make_grade(10, 2)]) == 8.0


def test_round2_rounds_halves_up() -> None:
    assert round2(8.665) == 8.67
    assert round2(2.675) == 2.68
    assert round2(7.0) == 7.0


def test_averages_by_subject_groups_and_sorts() -> None:
    math = Subject(id="math", name="Maths")
    art = Subject(id="art", name="Art")
    history = Subject(id="history", name="History")
    grades = [
        make_grade(6, 1, "math", date(2024, 1, 10)),
        make_grade(9, 1, "art", date(2024, 1, 5)),
        make_grade(8, 1, "math", date(2024, 2, 1)),
        make_grade(2, 1, "orphan", date(2024, 2, 1)),
    ]

    groups = averages_by_subject(grades, [math, art, history])

    assert [g.subject.id for g in groups] == ["math", "art"]
    assert [g.graded_at for g in groups[0].grades] == [date(2024, 2, 1), date(2024, 1, 10)]
    assert groups[0].average == 7.0
    assert groups[1].average == 9.0
    # overall counts every grade, orphans included
    assert overall_average(grades) == 6.25


def test_required_final_score_reachable() -> None:
    # (8 - 7*0.6) / 0.4 = 9.5
    required = required_final_score(7, 40, 8)
    assert required == pytest.approx(9.5)
    assert classify_required_score(required) is RequiredScoreOutcome.REACHABLE


def test_required_final_score_small_weight() -> None:
    # (5.5 - 6*0.8) / 0.2 = 3.5
    assert required_final_score(6, 20, 5.5) == pytest.approx(3.5)


def test_required_final_score_unreachable() -> None:
    required = required_final_score(3, 20, 9)
    assert required == pytest.approx(33)
    assert classify_required_score(required) is RequiredScoreOutcome.UNREACHABLE


def test_required_final_score_already_secured() -> None:
    required = required_final_score(10, 10, 5)
    assert required <= 0
    assert classify_required_score(required) is RequiredScoreOutcome.ALREADY_SECURED


def test_full_weight_final_needs_the_target() -> None:
    assert required_final_score(2, 100, 7.5) == pytest.approx(7.5)


def test_required_score_grows_with_target() -> None:
    previous = None
    for target in (4, 5, 6, 7, 8):
        required = required_final_score(6, 30, target)
        if previous is not None:
            assert required > previous
        previous = required


def test_required_score_rejects_bad_inputs() -> None:
    with pytest.raises(ValidationError):
        required_final_score(6, 0, 7)
    with pytest.raises(ValidationError):
        required_final_score(6, 30, 11)


@pytest.mark.parametrize("score, band", [
    (9.5, GradeBand.EXCELLENT),
    (9, GradeBand.EXCELLENT),
    (7, GradeBand.GOOD),
    (5, GradeBand.PASS),
    (4.99, GradeBand.FAIL),
])
def test_grade_band(score: float, band: GradeBand) -> None:
    assert grade_band(score) is band


def test_half_weight_scenario() -> None:
    # (8.5*1 + 9.0*0.5) / 1.5 = 8.6667
    assert weighted_average([make_grade(8.5, 1.0), make_grade(9.0, 0.5)]) == 8.67


def test_required_score_scenarios() -> None:
    assert required_final_score(6.5, 40, 5.0) == pytest.approx(2.75)
    secured = required_final_score(9.5, 30, 5.0)
    assert secured <= 0
    assert classify_required_score(secured) is RequiredScoreOutcome.ALREADY_SECURED


def test_required_score_shrinks_as_more_is_banked() -> None:
    needed = [required_final_score(current, 35, 7) for current in (0, 2.5, 5, 7.5, 10)]
    assert needed == sorted(needed, reverse=True)


def test_in_domain_averages_stay_in_range() -> None:
    scores = [0, 3.3, 5, 6.75, 9.99, 10]
    weights = [0.1, 1, 2.5, 7, 100]
    for score in scores:
        for weight in weights:
            grades = [make_grade(score, weight), make_grade(10 - score, 1)]
            assert 0 <= weighted_average(grades) <= 10.0001


def test_out_of_range_scores_are_not_clamped() -> None:
    assert weighted_average([make_grade(12, 1)]) == 12.0
    assert weighted_average([make_grade(12, 1), make_grade(4, 1)]) == 8.0
    assert weighted_average([make_grade(-2, 1), make_grade(6, 3)]) == 4.0


def test_huge_values_are_averaged_without_error() -> None:
    assert weighted_average([make_grade(1e27, 1)]) == 1e27
    assert round2(1e300) == 1e300
    assert round2(float("inf")) == float("inf")


def test_negative_weights_count_as_one() -> None:
    assert effective_weight(-1) == 1.0
    assert effective_weight("-2.5") == 1.0
    # weights 2 and 1: (8*2 + 2*1) / 3
    assert weighted_average([make_grade(8, 2), make_grade(2, -1)]) == 6.0
