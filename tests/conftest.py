import json
from datetime import date

import pytest

from gradebook.backup import parse_backup
from gradebook.models import EvaluationType, Group, SemesterSettings, Student, Weekday

P1_DATES = [
    "2024-01-08", "2024-01-10", "2024-01-15", "2024-01-17",
    "2024-01-22", "2024-01-24", "2024-01-29", "2024-01-31",
]
P2_DATES = [
    "2024-02-05", "2024-02-07", "2024-02-12", "2024-02-14",
    "2024-02-19", "2024-02-21", "2024-02-26", "2024-02-28",
]


@pytest.fixture
def settings():
    """Semester starting Monday 2024-01-08, first partial ends Friday 2024-02-02."""
    return SemesterSettings(
        semester_start=date(2024, 1, 8),
        first_partial_end=date(2024, 2, 2),
        semester_end=date(2024, 3, 1),
    )


@pytest.fixture
def p1_dates():
    return list(P1_DATES)


@pytest.fixture
def p2_dates():
    return list(P2_DATES)


@pytest.fixture
def group():
    """Monday/Wednesday group: P1 is exams 80% + attendance 20%, P2 is one project."""
    return Group(
        id="g1",
        name="3A",
        subject="Math",
        class_days=frozenset({Weekday.MONDAY, Weekday.WEDNESDAY}),
        students=(Student(id="s1", name="Ana"), Student(id="s2", name="Beto")),
        partial1_types=(
            EvaluationType(id="t1", name="Exams", weight=80),
            EvaluationType(id="t2", name="Attendance", weight=20, is_attendance=True),
        ),
        partial2_types=(EvaluationType(id="t3", name="Project", weight=100),),
    )


@pytest.fixture
def backup_data():
    ana = {d: "Presente" for d in P1_DATES + P2_DATES}
    beto = {d: "Presente" for d in P1_DATES[:4]}
    beto.update({d: "Ausente" for d in P1_DATES[4:]})
    return {
        "groups": [{
            "id": "g1",
            "name": "3A",
            "subject": "Math",
            "classDays": ["Lunes", "Miércoles"],
            "students": [
                {"id": "s1", "name": "Ana", "matricula": "A01"},
                {"id": "s2", "name": "Beto", "matricula": "A02", "nickname": "B"},
            ],
            "evaluationTypes": {
                "partial1": [
                    {"id": "t1", "name": "Exams", "weight": 80},
                    {"id": "t2", "name": "Asistencia", "weight": 20, "isAttendance": True},
                ],
                "partial2": [{"id": "t3", "name": "Project", "weight": 100}],
            },
        }],
        "evaluations": {"g1": [
            {"id": "e1", "name": "Exam 1", "maxScore": 10, "partial": 1, "typeId": "t1"},
            {"id": "e2", "name": "Project", "maxScore": 20, "partial": 2, "typeId": "t3"},
        ]},
        "grades": {"g1": {
            "s1": {"e1": 9, "e2": 18},
            "s2": {"e1": 5, "e2": 10, "GRADE_REMEDIAL_P1": 8},
        }},
        "attendance": {"g1": {"s1": ana, "s2": beto}},
        "settings": {
            "semesterStart": "2024-01-08",
            "firstPartialEnd": "2024-02-02",
            "semesterEnd": "2024-03-01",
            "lowAttendanceThreshold": 80,
        },
    }


@pytest.fixture
def backup_file(tmp_path, backup_data):
    path = tmp_path / "backup.json"
    path.write_text(json.dumps(backup_data))
    return str(path)


@pytest.fixture
def book(backup_data):
    return parse_backup(backup_data)
