import logging

from sqlalchemy.orm import selectinload

from ..errors import Forbidden, ValidationError
from ..models import Course, Grade, Role, Student
from . import access
from .common import get_or_raise, optional_text, require_non_empty, require_score, unit_of_work
from .enrollment import find_enrollment, has_active_enrollment

logger = logging.getLogger(__name__)


def record_grade(actor, course_id, student_id, exam_type, score, comments=None):
    # input checks come first so a bad score never reaches the session
    score = require_score(score)
    exam_type = require_non_empty(exam_type, "Exam type", 100)
    comments = optional_text(comments, "Comments", 500)

    course = get_or_raise(Course, course_id, "Course not found")
    teacher_id = access.require_course_owner(actor, course)
    student = get_or_raise(Student, student_id, "Student not found")
    if not has_active_enrollment(student.id, course.id):
        raise ValidationError("Student is not enrolled in this course")

    grade = Grade(student_id=student.id, course_id=course.id, teacher_id=teacher_id,
                  exam_type=exam_type, score=score, comments=comments)
    with unit_of_work("Grade could not be saved") as session:
        session.add(grade)
    logger.info("Grade %s=%.2f for student %s in %s", exam_type, score, student.id, course.code)
    return grade


def update_grade(actor, grade_id, exam_type, score, comments=None):
    score = require_score(score)
    exam_type = require_non_empty(exam_type, "Exam type", 100)
    comments = optional_text(comments, "Comments", 500)

    grade = get_or_raise(Grade, grade_id, "Grade not found")
    access.require_record_owner(actor, grade)
    with unit_of_work("Grade could not be saved"):
        grade.exam_type = exam_type
        grade.score = score
        grade.comments = comments
    return grade


def delete_grade(actor, grade_id):
    grade = get_or_raise(Grade, grade_id, "Grade not found")
    access.require_record_owner(actor, grade)
    with unit_of_work("Grade could not be deleted") as session:
        session.delete(grade)
    logger.info("Deleted grade %s", grade_id)


def _with_relations(query):
    return query.options(
        selectinload(Grade.student).selectinload(Student.user),
        selectinload(Grade.course),
        selectinload(Grade.teacher),
    )


def list_grades(actor):
    access.require_role(actor, Role.ADMIN)
    return _with_relations(Grade.query).order_by(Grade.created_at.desc()).all()


def get_grade(actor, grade_id):
    grade = get_or_raise(Grade, grade_id, "Grade not found")
    access.require_record_reader(actor, grade)
    return grade


def course_grades(actor, course_id):
    course = get_or_raise(Course, course_id, "Course not found")
    access.require_course_manager(actor, course)
    return (_with_relations(Grade.query)
            .filter(Grade.course_id == course.id)
            .order_by(Grade.student_id, Grade.created_at)
            .all())


def my_grades(actor, course_id=None):
    student_id = access.require_student_profile(actor)
    query = _with_relations(Grade.query).filter(Grade.student_id == student_id)
    if course_id is not None:
        if find_enrollment(student_id, course_id) is None:
            raise Forbidden("You are not enrolled in this course")
        query = query.filter(Grade.course_id == course_id)
    return query.order_by(Grade.created_at.desc()).all()


def student_grades(actor, student_id):
    student = get_or_raise(Student, student_id, "Student not found")
    access.require_student_viewer(actor, student.id)
    query = _with_relations(Grade.query).filter(Grade.student_id == student.id)
    if not access.sees_whole_record_of(actor, student.id):
        query = query.filter(Grade.teacher_id == actor.acting_teacher_id)
    return query.order_by(Grade.created_at.desc()).all()


def course_averages(grades):
    """Mean score per course id."""
    totals = {}
    for g in grades:
        acc = totals.setdefault(g.course_id, [0.0, 0])
        acc[0] += g.score
        acc[1] += 1
    return {cid: round(total / n, 2) for cid, (total, n) in totals.items()}
