"""Tests for data model classes."""
import dataclasses

import pytest

from gradebook.models import (
    AttendanceStatus, EvaluationType, Gradebook, Group, RecoveryScores,
    Student, Weekday,
)


def test_weekday_matches_date_weekday():
    assert Weekday.MONDAY == 0
    assert Weekday.SATURDAY == 5
    assert len(Weekday) == 6


def test_present_like_statuses():
    present = {s for s in AttendanceStatus if s.counts_as_present}
    assert present == {
        AttendanceStatus.PRESENT, AttendanceStatus.LATE,
        AttendanceStatus.JUSTIFIED, AttendanceStatus.EXCHANGE,
    }
    assert not AttendanceStatus.PENDING.counts_as_present
    assert not AttendanceStatus.ABSENT.counts_as_present


def test_student_defaults():
    s = Student(id="s1", name="Ana")
    assert s.enrollment_id == ""
    assert s.nickname == ""


def test_evaluation_type_default_not_attendance():
    t = EvaluationType(id="t1", name="Exams", weight=60)
    assert t.is_attendance is False


def test_group_evaluation_types(group):
    assert [t.id for t in group.evaluation_types(1)] == ["t1", "t2"]
    assert [t.id for t in group.evaluation_types(2)] == ["t3"]
    with pytest.raises(ValueError):
        group.evaluation_types(0)


def test_group_is_immutable(group):
    with pytest.raises(dataclasses.FrozenInstanceError):
        group.name = "other"


def test_recovery_scores_default_empty():
    r = RecoveryScores()
    assert (r.remedial_p1, r.remedial_p2, r.extra, r.special) == (None, None, None, None)


def test_gradebook_get_group(settings):
    book = Gradebook(settings=settings, groups=(Group(id="g1", name="3A"),))
    assert book.get_group("g1").name == "3A"
    assert book.get_group("g2") is None
    assert book.attendance == {}
