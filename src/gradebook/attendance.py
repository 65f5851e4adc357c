"""Attendance percentages, monthly breakdowns and bulk marking."""
from gradebook.config import ATTENDANCE_TOLERANCE
from gradebook.models import AttendanceRisk, AttendanceStatus, Group, SemesterSettings
from gradebook.schedule import as_date, class_dates, month_key, partial_window, semester_window


def _status(attendance: dict, day: str) -> AttendanceStatus:
    return attendance.get(day, AttendanceStatus.PENDING)


def _percentage_over(dates: list[str], attendance: dict) -> float:
    # Pending days stay in the denominator.
    if not dates:
        return 100.0
    present = sum(1 for d in dates if _status(attendance, d).counts_as_present)
    return 100 * present / len(dates)


def attendance_percentage(
    group: Group, partial: int, settings: SemesterSettings, attendance: dict,
) -> float:
    """Share of a partial's class dates with a present-like status, 0-100.

    Returns 100 when the window holds no class dates.
    """
    start, end = partial_window(settings, partial)
    return _percentage_over(class_dates(start, end, group.class_days), attendance)


def semester_attendance_percentage(
    group: Group, settings: SemesterSettings, attendance: dict,
) -> float:
    start, end = semester_window(settings)
    return _percentage_over(class_dates(start, end, group.class_days), attendance)


def attendance_risk(
    percentage: float, threshold: float, tolerance: float = ATTENDANCE_TOLERANCE,
) -> AttendanceRisk:
    if percentage < threshold - tolerance:
        return AttendanceRisk.CRITICAL
    if percentage < threshold:
        return AttendanceRisk.AT_RISK
    return AttendanceRisk.OK


def student_monthly_attendance(
    group: Group, settings: SemesterSettings, attendance: dict,
) -> dict:
    """Per-month attendance over the semester, keyed ``YYYY-MM``.

    Unlike the partial percentage, only recorded days count here: a class
    is taken when it is marked present-like or absent. Months with nothing
    recorded are left out.
    """
    months = {}
    for day in class_dates(*semester_window(settings), group.class_days):
        status = _status(attendance, day)
        if status is AttendanceStatus.PENDING:
            continue
        bucket = months.setdefault(month_key(day), {"present": 0, "total_classes": 0})
        bucket["total_classes"] += 1
        if status.counts_as_present:
            bucket["present"] += 1
    for bucket in months.values():
        bucket["percentage"] = 100 * bucket["present"] / bucket["total_classes"]
    return months


def group_monthly_attendance(
    group: Group, settings: SemesterSettings, group_attendance: dict,
) -> dict:
    """Mean monthly percentage across students with attendance taken that month."""
    per_month = {}
    for student in group.students:
        monthly = student_monthly_attendance(group, settings, group_attendance.get(student.id, {}))
        for month, bucket in monthly.items():
            per_month.setdefault(month, []).append(bucket["percentage"])
    return {
        month: sum(values) / len(values)
        for month, values in sorted(per_month.items())
    }


def quick_attendance(group: Group, group_attendance: dict, day) -> dict:
    """Mark every student still pending on ``day`` as present.

    Returns a new student id -> date -> status mapping; the input is untouched.
    """
    day = as_date(day).isoformat()
    updated = {sid: dict(records) for sid, records in group_attendance.items()}
    for student in group.students:
        records = updated.setdefault(student.id, {})
        if _status(records, day) is AttendanceStatus.PENDING:
            records[day] = AttendanceStatus.PRESENT
    return updated


def bulk_update_attendance(
    group: Group,
    group_attendance: dict,
    start,
    end,
    status: AttendanceStatus,
    overwrite: bool = False,
) -> dict:
    """Set ``status`` on every class date in [start, end] for every student.

    Recorded entries are kept unless ``overwrite`` is set. Returns a new mapping.
    """
    dates = class_dates(start, end, group.class_days)
    updated = {sid: dict(records) for sid, records in group_attendance.items()}
    for student in group.students:
        records = updated.setdefault(student.id, {})
        for day in dates:
            if overwrite or _status(records, day) is AttendanceStatus.PENDING:
                records[day] = status
    return updated
