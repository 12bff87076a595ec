"""Writes that slip past the lookup checks are stopped by the unique constraints."""
import pytest

from app.errors import Conflict
from app.models import Attendance, CourseEnrollment
from app.services import attendance, enrollment


def test_duplicate_attendance_rejected_by_database(seed, actor_of, monkeypatch):
    enrollment.add_students(actor_of(seed.admin), seed.course, seed.students[:2])
    teacher = actor_of(seed.teacher_user)
    monkeypatch.setattr(attendance, "find_attendance", lambda *args: None)

    attendance.record_attendance(teacher, seed.course, seed.students[0], "2024-05-01")
    with pytest.raises(Conflict):
        attendance.record_attendance(teacher, seed.course, seed.students[0], "2024-05-01")

    # the session was rolled back and keeps working
    assert Attendance.query.count() == 1
    attendance.record_attendance(teacher, seed.course, seed.students[1], "2024-05-01")
    assert Attendance.query.count() == 2


def test_duplicate_enrollment_rejected_by_database(seed, actor_of, monkeypatch):
    admin = actor_of(seed.admin)
    monkeypatch.setattr(enrollment, "find_enrollment", lambda *args: None)

    enrollment.create_enrollment(admin, seed.course, seed.students[0])
    with pytest.raises(Conflict):
        enrollment.create_enrollment(admin, seed.course, seed.students[0])

    assert CourseEnrollment.query.count() == 1
    enrollment.create_enrollment(admin, seed.course, seed.students[1])
    assert CourseEnrollment.query.count() == 2
