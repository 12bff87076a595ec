import logging

from sqlalchemy.orm import selectinload

from ..errors import Conflict, NotFound, ValidationError
from ..extensions import db
from ..models import Course, CourseEnrollment, EnrollmentStatus, Student, User
from . import access
from .common import get_or_raise, optional_text, unit_of_work

logger = logging.getLogger(__name__)


def find_enrollment(student_id, course_id):
    return CourseEnrollment.query.filter_by(student_id=student_id, course_id=course_id).one_or_none()


def has_active_enrollment(student_id, course_id):
    return (CourseEnrollment.query
            .filter_by(student_id=student_id, course_id=course_id,
                       status=EnrollmentStatus.ACTIVE)
            .first()) is not None


def create_enrollment(actor, course_id, student_id, comments=None):
    course = get_or_raise(Course, course_id, "Course not found")
    access.require_course_manager(actor, course)
    student = get_or_raise(Student, student_id, "Student not found")
    comments = optional_text(comments, "Comments", 500)

    # any earlier row, dropped or not, blocks a new one
    if find_enrollment(student.id, course.id) is not None:
        raise Conflict("Student is already enrolled in this course")

    enrollment = CourseEnrollment(student_id=student.id, course_id=course.id,
                                  status=EnrollmentStatus.ACTIVE, comments=comments)
    with unit_of_work("Student is already enrolled in this course") as session:
        session.add(enrollment)
    logger.info("Enrolled student %s in course %s", student.id, course.code)
    return enrollment


def add_students(actor, course_id, student_ids):
    """Enroll several students at once; nothing is written if any id fails."""
    course = get_or_raise(Course, course_id, "Course not found")
    access.require_course_manager(actor, course)
    ids = list(dict.fromkeys(int(i) for i in (student_ids or [])))
    if not ids:
        raise ValidationError("No students selected")

    found = {s.id for s in Student.query.filter(Student.id.in_(ids)).all()}
    missing = [i for i in ids if i not in found]
    if missing:
        raise NotFound(f"Unknown student ids: {', '.join(map(str, missing))}")
    taken = (db.session.query(CourseEnrollment.student_id)
             .filter(CourseEnrollment.course_id == course.id,
                     CourseEnrollment.student_id.in_(ids))
             .all())
    if taken:
        raise Conflict("Some students are already enrolled in this course")

    rows = [CourseEnrollment(student_id=i, course_id=course.id,
                             status=EnrollmentStatus.ACTIVE) for i in ids]
    with unit_of_work("Some students are already enrolled in this course") as session:
        session.add_all(rows)
    logger.info("Enrolled %d students in course %s", len(rows), course.code)
    return rows


def drop_enrollment(actor, course_id, student_id):
    course = get_or_raise(Course, course_id, "Course not found")
    access.require_course_manager(actor, course)
    enrollment = find_enrollment(student_id, course.id)
    if enrollment is None:
        raise NotFound("Enrollment not found")
    with unit_of_work("Enrollment changed concurrently"):
        enrollment.status = EnrollmentStatus.DROPPED
    logger.info("Dropped student %s from course %s", student_id, course.code)
    return enrollment


def course_roster(actor, course_id):
    course = get_or_raise(Course, course_id, "Course not found")
    access.require_course_manager(actor, course)
    return (CourseEnrollment.query
            .options(selectinload(CourseEnrollment.student).selectinload(Student.user))
            .join(Student).join(User)
            .filter(CourseEnrollment.course_id == course.id)
            .order_by(User.last_name, User.first_name)
            .all())


def available_students(actor, course_id):
    course = get_or_raise(Course, course_id, "Course not found")
    access.require_course_manager(actor, course)
    enrolled = db.select(CourseEnrollment.student_id).where(
        CourseEnrollment.course_id == course.id)
    return (Student.query.join(User)
            .filter(Student.is_active.is_(True), ~Student.id.in_(enrolled))
            .order_by(Student.student_no)
            .all())


def my_enrollments(actor):
    student_id = access.require_student_profile(actor)
    return (CourseEnrollment.query
            .options(selectinload(CourseEnrollment.course).selectinload(Course.teacher))
            .filter_by(student_id=student_id, status=EnrollmentStatus.ACTIVE)
            .order_by(CourseEnrollment.enrolled_at.desc())
            .all())


def student_enrollments(actor, student_id):
    student = get_or_raise(Student, student_id, "Student not found")
    access.require_student_viewer(actor, student.id)
    query = CourseEnrollment.query.filter(CourseEnrollment.student_id == student.id)
    if not access.sees_whole_record_of(actor, student.id):
        # teachers see the student only in courses they own
        query = query.join(Course).filter(Course.teacher_id == actor.acting_teacher_id)
    return query.order_by(CourseEnrollment.enrolled_at.desc()).all()
