"""Load application backups (JSON or YAML) into a Gradebook."""
import json
import logging
from datetime import date, datetime
from pathlib import Path

import yaml

from gradebook.config import DEFAULT_LOW_ATTENDANCE_THRESHOLD
from gradebook.models import (
    AttendanceStatus, Evaluation, EvaluationType, Gradebook, Group,
    SemesterSettings, Student, Weekday,
)

logger = logging.getLogger(__name__)

WEEKDAY_NAMES = {
    "lunes": Weekday.MONDAY,
    "martes": Weekday.TUESDAY,
    "miércoles": Weekday.WEDNESDAY,
    "miercoles": Weekday.WEDNESDAY,
    "jueves": Weekday.THURSDAY,
    "viernes": Weekday.FRIDAY,
    "sábado": Weekday.SATURDAY,
    "sabado": Weekday.SATURDAY,
}
WEEKDAY_NAMES.update({day.name.lower(): day for day in Weekday})

STATUS_NAMES = {status.value.lower(): status for status in AttendanceStatus}
STATUS_NAMES.update({status.name.lower(): status for status in AttendanceStatus})


class BackupFormatError(ValueError):
    """Raised when a backup cannot be read or lacks required data."""


def read_backup_file(file_path: str) -> dict:
    path = Path(file_path)
    suffix = path.suffix.lower()
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise BackupFormatError(f"Cannot read backup {file_path}: {e}") from e
    try:
        if suffix in (".yaml", ".yml"):
            data = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise BackupFormatError(f"Backup {path.name} is not valid {suffix.lstrip('.') or 'json'}") from e
    if not isinstance(data, dict):
        raise BackupFormatError(f"Backup {path.name} must contain a mapping at the top level")
    return data


def _parse_date_field(settings: dict, *keys: str):
    for key in keys:
        value = settings.get(key)
        # YAML loads timestamps as datetime, a date subclass.
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        if value:
            try:
                return date.fromisoformat(value)
            except (TypeError, ValueError) as e:
                raise BackupFormatError(f"settings.{key} is not an ISO date: {value!r}") from e
    raise BackupFormatError(f"settings.{keys[0]} is required")


def parse_settings(settings: dict) -> SemesterSettings:
    threshold = settings.get("lowAttendanceThreshold")
    return SemesterSettings(
        semester_start=_parse_date_field(settings, "semesterStart"),
        # Older backups stored the first partial end as p1EvalEnd.
        first_partial_end=_parse_date_field(settings, "firstPartialEnd", "p1EvalEnd"),
        semester_end=_parse_date_field(settings, "semesterEnd"),
        low_attendance_threshold=(
            float(threshold) if threshold is not None else DEFAULT_LOW_ATTENDANCE_THRESHOLD
        ),
        fail_by_attendance=bool(settings.get("failByAttendance", False)),
    )


def _parse_types(raw_types: list) -> tuple:
    return tuple(
        EvaluationType(
            id=str(t["id"]),
            name=t.get("name", ""),
            weight=float(t.get("weight") or 0),
            is_attendance=bool(t.get("isAttendance", False)),
        )
        for t in raw_types or []
    )


def parse_group(raw: dict) -> Group:
    days = set()
    for name in raw.get("classDays", []):
        day = WEEKDAY_NAMES.get(str(name).lower())
        if day is None:
            logger.warning("group %s: ignoring unknown class day %r", raw.get("id"), name)
            continue
        days.add(day)
    types = raw.get("evaluationTypes") or {}
    return Group(
        id=str(raw["id"]),
        name=raw.get("name", ""),
        subject=raw.get("subject", ""),
        class_days=frozenset(days),
        students=tuple(
            Student(
                id=str(s["id"]),
                name=s.get("name", ""),
                enrollment_id=s.get("matricula", "") or "",
                nickname=s.get("nickname", "") or "",
            )
            for s in raw.get("students", [])
        ),
        partial1_types=_parse_types(types.get("partial1")),
        partial2_types=_parse_types(types.get("partial2")),
    )


def parse_status(value) -> AttendanceStatus:
    status = STATUS_NAMES.get(str(value).lower())
    if status is None:
        logger.warning("unknown attendance status %r, treating as pending", value)
        return AttendanceStatus.PENDING
    return status


def _parse_attendance(raw: dict) -> dict:
    return {
        str(group_id): {
            str(student_id): {str(day): parse_status(status) for day, status in records.items()}
            for student_id, records in (students or {}).items()
        }
        for group_id, students in (raw or {}).items()
    }


def _parse_evaluations(raw: dict) -> dict:
    return {
        str(group_id): [
            Evaluation(
                id=str(ev["id"]),
                name=ev.get("name", ""),
                max_score=float(ev["maxScore"]),
                partial=int(ev["partial"]),
                type_id=str(ev["typeId"]),
            )
            for ev in evaluations or []
        ]
        for group_id, evaluations in (raw or {}).items()
    }


def _parse_score(value):
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise BackupFormatError(f"grade is not a number: {value!r}") from e


def _parse_grades(raw: dict) -> dict:
    return {
        str(group_id): {
            str(student_id): {str(key): _parse_score(score) for key, score in scores.items()}
            for student_id, scores in (students or {}).items()
        }
        for group_id, students in (raw or {}).items()
    }


def parse_backup(data: dict) -> Gradebook:
    """Build a Gradebook from the parsed backup mapping."""
    if "groups" not in data or "settings" not in data:
        raise BackupFormatError("Backup must contain 'groups' and 'settings'")
    if not isinstance(data["settings"], dict):
        raise BackupFormatError("Backup 'settings' must be a mapping")
    try:
        return Gradebook(
            settings=parse_settings(data["settings"]),
            groups=tuple(parse_group(g) for g in data["groups"]),
            attendance=_parse_attendance(data.get("attendance")),
            evaluations=_parse_evaluations(data.get("evaluations")),
            grades=_parse_grades(data.get("grades")),
        )
    except BackupFormatError:
        raise
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise BackupFormatError(f"Malformed backup entry: {e!r}") from e


def load_backup(file_path: str) -> Gradebook:
    book = parse_backup(read_backup_file(file_path))
    logger.info(
        "loaded %d groups from %s", len(book.groups), Path(file_path).name,
    )
    return book
