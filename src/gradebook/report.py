"""Per-student and per-group report assembly."""
from gradebook.attendance import (
    attendance_percentage, attendance_risk, group_monthly_attendance,
    semester_attendance_percentage,
)
from gradebook.grades import (
    can_take_extra, can_take_special, evaluation_averages, final_grade,
    needs_recovery, needs_remedial, partial_average, recovery_scores, weight_warnings,
)
from gradebook.models import AttendanceRisk, Gradebook, Group, Student


def _require_group(book: Gradebook, group_id: str) -> Group:
    group = book.get_group(group_id)
    if group is None:
        raise KeyError(f"unknown group: {group_id}")
    return group


def student_report(book: Gradebook, group: Group, student: Student) -> dict:
    settings = book.settings
    evaluations = book.evaluations.get(group.id, [])
    grades = book.grades.get(group.id, {}).get(student.id, {})
    attendance = book.attendance.get(group.id, {}).get(student.id, {})

    p1_avg = partial_average(group, 1, evaluations, grades, settings, attendance)
    p2_avg = partial_average(group, 2, evaluations, grades, settings, attendance)
    recovery = recovery_scores(grades)
    final = final_grade(
        p1_avg, p2_avg,
        recovery.remedial_p1, recovery.remedial_p2, recovery.extra, recovery.special,
    )
    semester_pct = semester_attendance_percentage(group, settings, attendance)
    risk = attendance_risk(semester_pct, settings.low_attendance_threshold)
    return {
        "student_id": student.id,
        "name": student.name,
        "p1_attendance": attendance_percentage(group, 1, settings, attendance),
        "p2_attendance": attendance_percentage(group, 2, settings, attendance),
        "p1_average": p1_avg,
        "p2_average": p2_avg,
        "semester_attendance": semester_pct,
        "attendance_risk": risk,
        "fails_by_attendance": settings.fail_by_attendance and risk is AttendanceRisk.CRITICAL,
        "recovery": recovery,
        "final": final,
    }


def group_report(book: Gradebook, group_id: str) -> list[dict]:
    group = _require_group(book, group_id)
    return [student_report(book, group, s) for s in group.students]


def recovery_candidates(book: Gradebook, group_id: str) -> list[dict]:
    """Students failing overall or in a partial, with the stages open to them."""
    candidates = []
    for row in group_report(book, group_id):
        recovery = row["recovery"]
        if not needs_recovery(row["p1_average"], row["p2_average"], recovery):
            continue
        row["eligible"] = {
            "remedial_p1": needs_remedial(row["p1_average"]),
            "remedial_p2": needs_remedial(row["p2_average"]),
            "extra": can_take_extra(
                row["p1_average"], row["p2_average"],
                recovery.remedial_p1, recovery.remedial_p2,
            ),
            "special": can_take_special(recovery.extra),
        }
        candidates.append(row)
    return candidates


def group_summary(book: Gradebook, group_id: str) -> dict:
    group = _require_group(book, group_id)
    return {
        "monthly_attendance": group_monthly_attendance(
            group, book.settings, book.attendance.get(group.id, {}),
        ),
        "evaluation_averages": evaluation_averages(
            book.evaluations.get(group.id, []), book.grades.get(group.id, {}),
        ),
        "weight_warnings": weight_warnings(group),
    }
