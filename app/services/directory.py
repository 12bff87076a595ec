"""Course, student and teacher directory records."""
import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, List

from flask import current_app
from sqlalchemy import or_
from sqlalchemy.orm import selectinload

from ..errors import Conflict, ValidationError
from ..models import Course, CourseStatus, Role, Student, Teacher, User
from . import access
from .accounts import new_user, parse_date
from .common import (coerce_enum, get_or_raise, optional_int, optional_text,
                     require_non_empty, unit_of_work)
from .numbers import (employee_number_taken, next_employee_number, next_student_number,
                      student_number_taken)

logger = logging.getLogger(__name__)

MAX_PER_PAGE = 100


@dataclass
class Page:
    items: List[Any]
    total: int
    page: int
    per_page: int

    @property
    def pages(self):
        return max(1, (self.total + self.per_page - 1) // self.per_page)

    def to_dict(self):
        return {
            "items": [i.to_dict() for i in self.items],
            "total": self.total,
            "page": self.page,
            "per_page": self.per_page,
            "pages": self.pages,
        }


def _paginate(query, page, per_page):
    page = max(int(page or 1), 1)
    per_page = min(max(int(per_page or 10), 1), MAX_PER_PAGE)
    total = query.count()
    items = query.offset((page - 1) * per_page).limit(per_page).all()
    return Page(items=items, total=total, page=page, per_page=per_page)


def _credits(value):
    credits = optional_int(value, "Credits", 1, 10)
    if credits is None:
        raise ValidationError("Credits is required")
    return credits


# ---------- Courses ----------

def list_courses(actor, q=None, status=None):
    query = Course.query.options(selectinload(Course.teacher).selectinload(Teacher.user),
                                 selectinload(Course.enrollments))
    if q:
        like = f"%{q.strip()}%"
        query = query.filter(or_(Course.code.ilike(like), Course.name.ilike(like)))
    if status:
        query = query.filter(Course.status == coerce_enum(CourseStatus, status, "Status"))
    return query.order_by(Course.code).all()


def get_course(actor, course_id):
    return get_or_raise(Course, course_id, "Course not found")


def create_course(actor, *, code, name, credits, teacher_id, description=None):
    access.require_role(actor, Role.ADMIN)
    code = require_non_empty(code, "Course code", 20)
    name = require_non_empty(name, "Course name", 200)
    credits = _credits(credits)
    description = optional_text(description, "Description", 500)
    if Course.query.filter_by(code=code).first() is not None:
        raise Conflict("Course code already exists")
    teacher = get_or_raise(Teacher, teacher_id, "Teacher not found")

    course = Course(code=code, name=name, credits=credits, description=description,
                    teacher_id=teacher.id, status=CourseStatus.NOT_STARTED)
    with unit_of_work("Course code already exists") as session:
        session.add(course)
    logger.info("Created course %s", code)
    return course


def update_course(actor, course_id, *, name, credits, status, description=None, teacher_id=None):
    course = get_or_raise(Course, course_id, "Course not found")
    access.require_course_manager(actor, course)
    name = require_non_empty(name, "Course name", 200)
    credits = _credits(credits)
    status = coerce_enum(CourseStatus, status, "Status")
    description = optional_text(description, "Description", 500)
    if teacher_id is not None and teacher_id != course.teacher_id:
        # reassigning a course is an admin decision
        access.require_role(actor, Role.ADMIN)
        get_or_raise(Teacher, teacher_id, "Teacher not found")
    with unit_of_work("Course could not be updated"):
        course.name = name
        course.credits = credits
        course.status = status
        course.description = description
        if teacher_id is not None:
            course.teacher_id = teacher_id
    return course


def delete_course(actor, course_id):
    access.require_role(actor, Role.ADMIN)
    course = get_or_raise(Course, course_id, "Course not found")
    code = course.code
    with unit_of_work("Course could not be deleted") as session:
        session.delete(course)
    logger.info("Deleted course %s", code)


def teacher_courses(actor, teacher_id):
    teacher = get_or_raise(Teacher, teacher_id, "Teacher not found")
    access.require_directory_reader(actor)
    return Course.query.filter_by(teacher_id=teacher.id).order_by(Course.code).all()


def my_teacher_courses(actor):
    teacher_id = access.require_teacher_profile(actor)
    return (Course.query.options(selectinload(Course.enrollments))
            .filter_by(teacher_id=teacher_id).order_by(Course.code).all())


# ---------- Students ----------

STUDENT_SORTS = {
    "student_no": Student.student_no,
    "name": User.last_name,
    "department": Student.department,
    "year": Student.year,
}


def list_students(actor, q=None, sort="student_no", order="asc", page=1, per_page=10,
                  include_inactive=False):
    access.require_directory_reader(actor)
    query = Student.query.join(User).options(selectinload(Student.user))
    if not include_inactive:
        query = query.filter(Student.is_active.is_(True))
    if q:
        like = f"%{q.strip()}%"
        query = query.filter(or_(
            Student.student_no.ilike(like),
            User.first_name.ilike(like),
            User.last_name.ilike(like),
            User.email.ilike(like),
            Student.department.ilike(like),
        ))
    col = STUDENT_SORTS.get(sort, Student.student_no)
    query = query.order_by(col.desc() if order == "desc" else col.asc())
    return _paginate(query, page, per_page)


def get_student(actor, student_id):
    student = get_or_raise(Student, student_id, "Student not found")
    access.require_student_viewer(actor, student.id)
    return student


def my_student_profile(actor):
    return get_or_raise(Student, access.require_student_profile(actor),
                        "Student profile not found")


def create_student(actor, *, first_name, last_name, email, password=None, phone=None,
                   address=None, birth_date=None, student_no=None, department=None,
                   year=None):
    access.require_role(actor, Role.ADMIN)
    student_no = optional_text(student_no, "Student number", 32)
    if student_no and student_number_taken(student_no):
        raise Conflict("Student number already exists")
    user = new_user(email=email, password=password or current_app.config["DEFAULT_PASSWORD"],
                    first_name=first_name, last_name=last_name, phone=phone,
                    address=address, birth_date=birth_date, roles=[Role.STUDENT])
    user.student = Student(student_no=student_no or next_student_number(),
                           department=optional_text(department, "Department", 100),
                           year=optional_int(year, "Year", 1, 8))
    with unit_of_work("Student number or email already exists") as session:
        session.add(user)
    logger.info("Created student %s", user.student.student_no)
    return user.student


def _update_person(user, first_name, last_name, phone, address, birth_date):
    if first_name is not None:
        user.first_name = require_non_empty(first_name, "First name", 100)
    if last_name is not None:
        user.last_name = require_non_empty(last_name, "Last name", 100)
    if phone is not None:
        user.phone = optional_text(phone, "Phone", 32)
    if address is not None:
        user.address = optional_text(address, "Address", 200)
    if birth_date is not None:
        user.birth_date = parse_date(birth_date, "Birth date")


def update_student(actor, student_id, *, first_name=None, last_name=None, phone=None,
                   address=None, birth_date=None, student_no=None, department=None,
                   year=None, is_active=None):
    access.require_role(actor, Role.ADMIN)
    student = get_or_raise(Student, student_id, "Student not found")
    with unit_of_work("Student number already exists"):
        _update_person(student.user, first_name, last_name, phone, address, birth_date)
        if student_no is not None:
            student.student_no = require_non_empty(student_no, "Student number", 32)
        if department is not None:
            student.department = optional_text(department, "Department", 100)
        if year is not None:
            student.year = optional_int(year, "Year", 1, 8)
        if is_active is not None:
            student.is_active = bool(is_active)
    return student


def deactivate_student(actor, student_id):
    access.require_role(actor, Role.ADMIN)
    student = get_or_raise(Student, student_id, "Student not found")
    with unit_of_work("Student could not be deactivated"):
        student.is_active = False
    logger.info("Deactivated student %s", student.student_no)
    return student


# ---------- Teachers ----------

TEACHER_SORTS = {
    "employee_no": Teacher.employee_no,
    "name": User.last_name,
    "department": Teacher.department,
    "title": Teacher.title,
}


def list_teachers(actor, q=None, sort="employee_no", order="asc", page=1, per_page=10,
                  include_inactive=False):
    access.require_directory_reader(actor)
    query = Teacher.query.join(User).options(selectinload(Teacher.user))
    if not include_inactive:
        query = query.filter(Teacher.is_active.is_(True))
    if q:
        like = f"%{q.strip()}%"
        query = query.filter(or_(
            Teacher.employee_no.ilike(like),
            User.first_name.ilike(like),
            User.last_name.ilike(like),
            Teacher.department.ilike(like),
            Teacher.title.ilike(like),
        ))
    col = TEACHER_SORTS.get(sort, Teacher.employee_no)
    query = query.order_by(col.desc() if order == "desc" else col.asc())
    return _paginate(query, page, per_page)


def get_teacher(actor, teacher_id):
    teacher = get_or_raise(Teacher, teacher_id, "Teacher not found")
    access.require_directory_reader(actor)
    return teacher


def my_teacher_profile(actor):
    return get_or_raise(Teacher, access.require_teacher_profile(actor),
                        "Teacher profile not found")


def create_teacher(actor, *, first_name, last_name, email, password=None, phone=None,
                   address=None, birth_date=None, employee_no=None, department=None,
                   title=None, hire_date=None):
    access.require_role(actor, Role.ADMIN)
    employee_no = optional_text(employee_no, "Employee number", 32)
    if employee_no and employee_number_taken(employee_no):
        raise Conflict("Employee number already exists")
    user = new_user(email=email, password=password or current_app.config["DEFAULT_PASSWORD"],
                    first_name=first_name, last_name=last_name, phone=phone,
                    address=address, birth_date=birth_date, roles=[Role.TEACHER])
    user.teacher = Teacher(employee_no=employee_no or next_employee_number(),
                           department=optional_text(department, "Department", 100),
                           title=optional_text(title, "Title", 100),
                           hire_date=parse_date(hire_date, "Hire date") or date.today())
    with unit_of_work("Employee number or email already exists") as session:
        session.add(user)
    logger.info("Created teacher %s", user.teacher.employee_no)
    return user.teacher


def update_teacher(actor, teacher_id, *, first_name=None, last_name=None, phone=None,
                   address=None, birth_date=None, employee_no=None, department=None,
                   title=None, is_active=None):
    access.require_role(actor, Role.ADMIN)
    teacher = get_or_raise(Teacher, teacher_id, "Teacher not found")
    with unit_of_work("Employee number already exists"):
        _update_person(teacher.user, first_name, last_name, phone, address, birth_date)
        if employee_no is not None:
            teacher.employee_no = require_non_empty(employee_no, "Employee number", 32)
        if department is not None:
            teacher.department = optional_text(department, "Department", 100)
        if title is not None:
            teacher.title = optional_text(title, "Title", 100)
        if is_active is not None:
            teacher.is_active = bool(is_active)
    return teacher


def deactivate_teacher(actor, teacher_id):
    access.require_role(actor, Role.ADMIN)
    teacher = get_or_raise(Teacher, teacher_id, "Teacher not found")
    with unit_of_work("Teacher could not be deactivated"):
        teacher.is_active = False
    logger.info("Deactivated teacher %s", teacher.employee_no)
    return teacher
