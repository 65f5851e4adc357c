"""Data classes for the gradebook domain model."""
from dataclasses import dataclass, field
from datetime import date
from enum import Enum, IntEnum
from typing import Optional

# Recovery scores live in a student's grade mapping under these keys
# instead of an evaluation id.
GRADE_REMEDIAL_P1 = "GRADE_REMEDIAL_P1"
GRADE_REMEDIAL_P2 = "GRADE_REMEDIAL_P2"
GRADE_EXTRA = "GRADE_EXTRA"
GRADE_SPECIAL = "GRADE_SPECIAL"

RECOVERY_KEYS = (GRADE_REMEDIAL_P1, GRADE_REMEDIAL_P2, GRADE_EXTRA, GRADE_SPECIAL)


class Weekday(IntEnum):
    """Class days. Values match ``date.weekday()``; Sunday is never a class day."""
    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5


class AttendanceStatus(Enum):
    PENDING = "Pendiente"
    PRESENT = "Presente"
    ABSENT = "Ausente"
    LATE = "Retardo"
    JUSTIFIED = "Justificado"
    EXCHANGE = "Intercambio"

    @property
    def counts_as_present(self) -> bool:
        return self in _PRESENT_STATUSES


_PRESENT_STATUSES = frozenset({
    AttendanceStatus.PRESENT,
    AttendanceStatus.LATE,
    AttendanceStatus.JUSTIFIED,
    AttendanceStatus.EXCHANGE,
})


class Classification(Enum):
    NOT_AVAILABLE = "N/A"
    ORDINARY = "Ordinario"
    REMEDIAL = "Remedial"
    EXTRA = "Extra"
    SPECIAL = "Especial"


class AttendanceRisk(Enum):
    OK = "ok"
    AT_RISK = "at risk"
    CRITICAL = "critical"


@dataclass(frozen=True)
class Student:
    id: str
    name: str
    enrollment_id: str = ""
    nickname: str = ""


@dataclass(frozen=True)
class EvaluationType:
    id: str
    name: str
    weight: float  # percentage points, e.g. 30 for 30%
    is_attendance: bool = False


@dataclass(frozen=True)
class Evaluation:
    id: str
    name: str
    max_score: float
    partial: int  # 1 or 2
    type_id: str


@dataclass(frozen=True)
class Group:
    id: str
    name: str
    subject: str = ""
    class_days: frozenset = frozenset()  # of Weekday
    students: tuple = ()
    partial1_types: tuple = ()
    partial2_types: tuple = ()

    def evaluation_types(self, partial: int) -> tuple:
        if partial == 1:
            return self.partial1_types
        if partial == 2:
            return self.partial2_types
        raise ValueError(f"partial must be 1 or 2, got {partial!r}")


@dataclass(frozen=True)
class SemesterSettings:
    semester_start: date
    first_partial_end: date
    semester_end: date
    low_attendance_threshold: float = 80.0
    fail_by_attendance: bool = False


@dataclass(frozen=True)
class RecoveryScores:
    remedial_p1: Optional[float] = None
    remedial_p2: Optional[float] = None
    extra: Optional[float] = None
    special: Optional[float] = None


@dataclass(frozen=True)
class FinalGrade:
    score: Optional[float]
    classification: Classification
    is_failing: bool


@dataclass(frozen=True)
class Gradebook:
    """Everything the calculators read, as loaded from a backup.

    ``attendance`` is keyed group id -> student id -> ISO date -> status,
    ``evaluations`` group id -> list of Evaluation and ``grades``
    group id -> student id -> evaluation id (or recovery key) -> score.
    """
    settings: SemesterSettings
    groups: tuple = ()
    attendance: dict = field(default_factory=dict)
    evaluations: dict = field(default_factory=dict)
    grades: dict = field(default_factory=dict)

    def get_group(self, group_id: str) -> Optional[Group]:
        for group in self.groups:
            if group.id == group_id:
                return group
        return None
