import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.orm import selectinload

from ..dates import canonical_day
from ..errors import Conflict, ValidationError
from ..models import Attendance, AttendanceStatus, Course, Role, Student
from . import access
from .common import coerce_enum, get_or_raise, optional_text, unit_of_work
from .enrollment import has_active_enrollment

logger = logging.getLogger(__name__)

DUPLICATE_DAY = "Attendance record already exists for this student on this date"


@dataclass(frozen=True)
class AttendanceEntry:
    """One line of a bulk attendance sheet."""

    student_id: int
    status: AttendanceStatus = AttendanceStatus.PRESENT
    notes: Optional[str] = None


def _day(value):
    try:
        return canonical_day(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError(str(exc)) from None


def find_attendance(student_id, course_id, day):
    return Attendance.query.filter_by(student_id=student_id, course_id=course_id,
                                      day=day).one_or_none()


def record_attendance(actor, course_id, student_id, day, status=AttendanceStatus.PRESENT,
                      notes=None):
    day = _day(day)
    status = coerce_enum(AttendanceStatus, status, "Status")
    notes = optional_text(notes, "Notes", 500)
    course = get_or_raise(Course, course_id, "Course not found")
    teacher_id = access.require_course_owner(actor, course)
    student = get_or_raise(Student, student_id, "Student not found")

    if not has_active_enrollment(student.id, course.id):
        raise ValidationError("Student is not enrolled in this course")
    if find_attendance(student.id, course.id, day) is not None:
        raise Conflict(DUPLICATE_DAY)

    record = Attendance(student_id=student.id, course_id=course.id, teacher_id=teacher_id,
                        day=day, status=status, notes=notes)
    with unit_of_work(DUPLICATE_DAY) as session:
        session.add(record)
    logger.info("Attendance %s for student %s in %s on %s",
                status.value, student.id, course.code, day)
    return record


def record_bulk_attendance(actor, course_id, day, entries):
    """Write a whole sheet for one course and day in a single commit.

    Students without an active enrollment are skipped without error; a row
    already present for the day is overwritten in place, otherwise a new
    one is inserted. Returns the rows written, in entry order.
    """
    day = _day(day)
    course = get_or_raise(Course, course_id, "Course not found")
    teacher_id = access.require_course_owner(actor, course)

    lines = []
    for entry in entries or []:
        lines.append((int(entry.student_id),
                      coerce_enum(AttendanceStatus, entry.status, "Status"),
                      optional_text(entry.notes, "Notes", 500)))

    written, inserted, updated, skipped = [], 0, 0, 0
    with unit_of_work(DUPLICATE_DAY) as session:
        for student_id, status, notes in lines:
            if not has_active_enrollment(student_id, course.id):
                skipped += 1
                continue
            record = find_attendance(student_id, course.id, day)
            if record is not None:
                record.status = status
                record.notes = notes
                # the current owner takes over the row
                record.teacher_id = teacher_id
                updated += 1
            else:
                record = Attendance(student_id=student_id, course_id=course.id,
                                    teacher_id=teacher_id, day=day, status=status, notes=notes)
                session.add(record)
                inserted += 1
            if all(r is not record for r in written):
                written.append(record)
    logger.info("Bulk attendance for %s on %s: %d inserted, %d updated, %d skipped",
                course.code, day, inserted, updated, skipped)
    return written


def update_attendance(actor, attendance_id, day, status, notes=None):
    record = get_or_raise(Attendance, attendance_id, "Attendance record not found")
    access.require_record_owner(actor, record)
    day = _day(day)
    status = coerce_enum(AttendanceStatus, status, "Status")
    notes = optional_text(notes, "Notes", 500)

    if day != record.day:
        clash = find_attendance(record.student_id, record.course_id, day)
        if clash is not None:
            raise Conflict(DUPLICATE_DAY)
    with unit_of_work(DUPLICATE_DAY):
        record.day = day
        record.status = status
        record.notes = notes
    return record


def delete_attendance(actor, attendance_id):
    record = get_or_raise(Attendance, attendance_id, "Attendance record not found")
    access.require_record_owner(actor, record)
    with unit_of_work("Attendance record is in use") as session:
        session.delete(record)
    logger.info("Deleted attendance %s", attendance_id)


def _with_relations(query):
    return query.options(
        selectinload(Attendance.student).selectinload(Student.user),
        selectinload(Attendance.course),
        selectinload(Attendance.teacher),
    )


def list_attendance(actor):
    access.require_role(actor, Role.ADMIN)
    return _with_relations(Attendance.query).order_by(Attendance.day.desc(),
                                                      Attendance.id).all()


def get_attendance(actor, attendance_id):
    record = get_or_raise(Attendance, attendance_id, "Attendance record not found")
    access.require_record_reader(actor, record)
    return record


def course_attendance(actor, course_id, day=None):
    course = get_or_raise(Course, course_id, "Course not found")
    access.require_course_manager(actor, course)
    query = _with_relations(Attendance.query).filter(Attendance.course_id == course.id)
    if day is not None:
        query = query.filter(Attendance.day == _day(day))
    return query.order_by(Attendance.day.desc(), Attendance.student_id).all()


def my_attendance(actor, course_id=None):
    student_id = access.require_student_profile(actor)
    query = _with_relations(Attendance.query).filter(Attendance.student_id == student_id)
    if course_id is not None:
        query = query.filter(Attendance.course_id == course_id)
    return query.order_by(Attendance.day.desc()).all()


def attendance_summary(records):
    """Count of each status, for the student and teacher views."""
    counts = {s.value: 0 for s in AttendanceStatus}
    for r in records:
        counts[r.status.value] += 1
    return counts
