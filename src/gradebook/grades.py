"""Partial averages, the recovery cascade and grade helpers."""
import logging
from typing import Optional

from gradebook.attendance import attendance_percentage
from gradebook.config import PASSING_GRADE, WARNING_GRADE
from gradebook.models import (
    GRADE_EXTRA, GRADE_REMEDIAL_P1, GRADE_REMEDIAL_P2, GRADE_SPECIAL,
    Classification, FinalGrade, Group, RecoveryScores, SemesterSettings,
)

logger = logging.getLogger(__name__)


def grade_color(grade: Optional[float]) -> str:
    if grade is None:
        return ""
    if grade >= PASSING_GRADE:
        return "green"
    elif grade >= WARNING_GRADE:
        return "yellow"
    return "red"


def partial_average(
    group: Group,
    partial: int,
    evaluations: list,
    student_grades: dict,
    settings: SemesterSettings,
    student_attendance: dict,
) -> Optional[float]:
    """Weighted 0-10 average of one grading period for one student.

    Args:
        group: Group whose evaluation types for ``partial`` are used.
        partial: 1 or 2.
        evaluations: All evaluations of the group (any partial).
        student_grades: Evaluation id -> score or None.
        settings: Semester boundaries, for the attendance type.
        student_attendance: ISO date -> AttendanceStatus.

    Returns:
        The average renormalized over the weight of types that have data,
        or None when no type has any.
    """
    in_partial = [ev for ev in evaluations if ev.partial == partial]
    weighted_score = 0.0
    weight_counted = 0.0

    for eval_type in group.evaluation_types(partial):
        weight = eval_type.weight or 0
        if eval_type.is_attendance:
            pct = attendance_percentage(group, partial, settings, student_attendance)
            weighted_score += (pct / 100) * weight
            weight_counted += weight
            continue

        of_type = [ev for ev in in_partial if ev.type_id == eval_type.id]
        if not of_type:
            continue
        score_sum = 0.0
        max_sum = 0.0
        graded = False
        for ev in of_type:
            score = student_grades.get(ev.id)
            if score is None:
                continue
            score_sum += score
            max_sum += ev.max_score
            graded = True
        if graded and max_sum > 0:
            weighted_score += (score_sum / max_sum) * weight
            weight_counted += weight

    if weight_counted == 0:
        return None
    return (weighted_score / weight_counted) * 10


def final_grade(
    p1_avg: Optional[float],
    p2_avg: Optional[float],
    remedial_p1: Optional[float] = None,
    remedial_p2: Optional[float] = None,
    extra: Optional[float] = None,
    special: Optional[float] = None,
) -> FinalGrade:
    """Resolve the final score through ordinary, remedial, extra and special stages.

    A present special or extra score wins regardless of the ordinary result.
    """
    if p1_avg is None or p2_avg is None:
        return FinalGrade(None, Classification.NOT_AVAILABLE, False)

    effective_p1 = remedial_p1 if remedial_p1 is not None else p1_avg
    effective_p2 = remedial_p2 if remedial_p2 is not None else p2_avg
    ordinary_avg = (effective_p1 + effective_p2) / 2

    if special is not None:
        return FinalGrade(special, Classification.SPECIAL, special < PASSING_GRADE)
    if extra is not None:
        return FinalGrade(extra, Classification.EXTRA, extra < PASSING_GRADE)
    if ordinary_avg >= PASSING_GRADE:
        used_remedial = remedial_p1 is not None or remedial_p2 is not None
        classification = Classification.REMEDIAL if used_remedial else Classification.ORDINARY
        return FinalGrade(ordinary_avg, classification, False)
    return FinalGrade(ordinary_avg, Classification.ORDINARY, True)


def recovery_scores(student_grades: dict) -> RecoveryScores:
    return RecoveryScores(
        remedial_p1=student_grades.get(GRADE_REMEDIAL_P1),
        remedial_p2=student_grades.get(GRADE_REMEDIAL_P2),
        extra=student_grades.get(GRADE_EXTRA),
        special=student_grades.get(GRADE_SPECIAL),
    )


def needs_remedial(partial_avg: Optional[float]) -> bool:
    return partial_avg is not None and partial_avg < PASSING_GRADE


def can_take_extra(
    p1_avg: Optional[float],
    p2_avg: Optional[float],
    remedial_p1: Optional[float] = None,
    remedial_p2: Optional[float] = None,
) -> bool:
    """Extra exam applies when the ordinary average of effective partials fails."""
    if p1_avg is None or p2_avg is None:
        return False
    effective_p1 = remedial_p1 if remedial_p1 is not None else p1_avg
    effective_p2 = remedial_p2 if remedial_p2 is not None else p2_avg
    return (effective_p1 + effective_p2) / 2 < PASSING_GRADE


def can_take_special(extra: Optional[float]) -> bool:
    return extra is not None and extra < PASSING_GRADE


def needs_recovery(
    p1_avg: Optional[float], p2_avg: Optional[float], recovery: RecoveryScores,
) -> bool:
    result = final_grade(
        p1_avg, p2_avg,
        recovery.remedial_p1, recovery.remedial_p2, recovery.extra, recovery.special,
    )
    return result.is_failing or needs_remedial(p1_avg) or needs_remedial(p2_avg)


def weights_total(types) -> float:
    return sum(t.weight or 0 for t in types)


def weight_warnings(group: Group) -> list[str]:
    """One message per partial whose evaluation-type weights do not add up to 100."""
    warnings = []
    for partial in (1, 2):
        total = weights_total(group.evaluation_types(partial))
        if total != 100:
            logger.debug("group %s partial %d weights total %s", group.id, partial, total)
            warnings.append(f"Partial {partial} weights total {total:g}%, expected 100%")
    return warnings


def evaluation_averages(evaluations: list, group_grades: dict) -> dict:
    """Mean graded score per evaluation across a group's students."""
    results = {}
    for ev in evaluations:
        scores = [
            grades[ev.id] for grades in group_grades.values()
            if grades.get(ev.id) is not None
        ]
        if not scores:
            continue
        results[ev.id] = {
            "name": ev.name,
            "average": sum(scores) / len(scores),
            "max_score": ev.max_score,
        }
    return results
