# -*- coding: utf-8 -*-
"""
Grade analytics: weighted averages per subject and overall, and the inverse
problem of the final exam score needed to reach a target average.
"""
from __future__ import annotations

import logging
import math
import typing as t
from decimal import ROUND_HALF_UP, Decimal, localcontext

from academic_planner.models import Grade, GradeBand, RequiredScoreOutcome, Subject, SubjectAverage
from academic_planner.validation import DEFAULT_WEIGHT, MAX_SCORE, is_number, validate_solver_inputs

logger = logging.getLogger(__name__)


def round2(value: float) -> float:
    """Round to two decimals, halves away from zero (8.665 -> 8.67).

    Non-finite values are returned as they are.
    """
    if not math.isfinite(value):
        return value
    # enough digits for the largest float plus two decimals
    with localcontext() as ctx:
        ctx.prec = 400
        return float(Decimal(repr(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def effective_weight(weight: t.Any) -> float:
    """Weight used in averages; absent, non-numeric or negative weights count as 1.0."""
    if is_number(weight):
        return float(weight) if weight >= 0 else DEFAULT_WEIGHT
    if isinstance(weight, str):
        try:
            return effective_weight(float(weight))
        except ValueError:
            pass
    return DEFAULT_WEIGHT


def weighted_average(grades: t.Iterable[Grade]) -> float:
    """Weighted average of ``score`` by ``weight``, rounded to two decimals.

    Returns 0 for an empty collection and when all weights add up to zero.
    Scores are not clamped.
    """
    total_weight = 0.0
    weighted_sum = 0.0
    for grade in grades:
        weight = effective_weight(grade.weight)
        total_weight += weight
        weighted_sum += grade.score * weight
    if total_weight == 0:
        return 0.0
    return round2(weighted_sum / total_weight)


def averages_by_subject(grades: t.Sequence[Grade], subjects: t.Sequence[Subject]) -> list[SubjectAverage]:
    """Group grades under their subject, newest grade first.

    Subjects without grades are left out. Grades whose subject is unknown are
    ignored here but still count towards ``overall_average``.
    """
    result = []
    for subject in subjects:
        subject_grades = [g for g in grades if g.subject_id == subject.id]
        if not subject_grades:
            continue
        subject_grades.sort(key=lambda g: g.graded_at, reverse=True)
        result.append(SubjectAverage(
            subject=subject,
            grades=subject_grades,
            average=weighted_average(subject_grades),
        ))
    return result


def overall_average(grades: t.Iterable[Grade]) -> float:
    """Weighted average over every grade, not an average of subject averages."""
    return weighted_average(grades)


def required_final_score(
        current_accumulated: float,
        final_weight_percent: float,
        target_average: float,
) -> float:
    """Score needed on a final worth ``final_weight_percent`` to reach ``target_average``.

    The accumulated average keeps the remaining ``100 - final_weight_percent``
    percent of the weight. The raw value is returned: above 10 means the target
    is out of reach, 0 or below means it is already secured.

    :param current_accumulated: Average obtained so far (0-10).
    :param final_weight_percent: Weight of the final exam, in (0, 100].
    :param target_average: Desired final average (0-10).
    :return: The unclamped required score.
    :raises ValidationError: If any argument is non-numeric or out of range.
    """
    validate_solver_inputs(current_accumulated, final_weight_percent, target_average)
    w = final_weight_percent / 100
    required = (target_average - current_accumulated * (1 - w)) / w
    logger.debug(
        "required final score %.4f (current=%s, weight=%s%%, target=%s)",
        required, current_accumulated, final_weight_percent, target_average,
    )
    return required


def classify_required_score(required: float) -> RequiredScoreOutcome:
    if required > MAX_SCORE:
        return RequiredScoreOutcome.UNREACHABLE
    if required <= 0:
        return RequiredScoreOutcome.ALREADY_SECURED
    return RequiredScoreOutcome.REACHABLE


def grade_band(score: float) -> GradeBand:
    if score >= 9:
        return GradeBand.EXCELLENT
    if score >= 7:
        return GradeBand.GOOD
    if score >= 5:
        return GradeBand.PASS
    return GradeBand.FAIL
