from flask import jsonify, request
from flask_login import login_required

from ...services import directory, enrollment, grades
from . import bp
from .common import actor, listing, parse
from .schemas import StudentIn, StudentUpdateIn, TeacherIn, TeacherUpdateIn


def directory_args(default_sort):
    a = request.args
    return dict(
        q=(a.get("q") or "").strip() or None,
        sort=a.get("sort", default_sort),
        order=a.get("order", "asc"),
        page=a.get("page", 1, type=int),
        per_page=a.get("per_page", 10, type=int),
        include_inactive=a.get("include_inactive", "").lower() in ("1", "true", "yes"),
    )


# ---------- Students ----------

@bp.get("/students")
@login_required
def list_students():
    page = directory.list_students(actor(), **directory_args("student_no"))
    return jsonify(page.to_dict())


@bp.post("/students")
@login_required
def create_student():
    data = parse(StudentIn)
    student = directory.create_student(actor(), **data.model_dump())
    return jsonify(student.to_dict()), 201


@bp.get("/students/my-profile")
@login_required
def my_student_profile():
    return jsonify(directory.my_student_profile(actor()).to_dict())


@bp.get("/students/<int:student_id>")
@login_required
def get_student(student_id):
    return jsonify(directory.get_student(actor(), student_id).to_dict())


@bp.put("/students/<int:student_id>")
@login_required
def update_student(student_id):
    data = parse(StudentUpdateIn)
    student = directory.update_student(actor(), student_id, **data.model_dump())
    return jsonify(student.to_dict())


@bp.delete("/students/<int:student_id>")
@login_required
def delete_student(student_id):
    student = directory.deactivate_student(actor(), student_id)
    return jsonify(student.to_dict())


@bp.get("/students/<int:student_id>/courses")
@login_required
def student_courses(student_id):
    return listing(enrollment.student_enrollments(actor(), student_id))


@bp.get("/students/<int:student_id>/grades")
@login_required
def student_grades(student_id):
    return listing(grades.student_grades(actor(), student_id))


# ---------- Teachers ----------

@bp.get("/teachers")
@login_required
def list_teachers():
    page = directory.list_teachers(actor(), **directory_args("employee_no"))
    return jsonify(page.to_dict())


@bp.post("/teachers")
@login_required
def create_teacher():
    data = parse(TeacherIn)
    teacher = directory.create_teacher(actor(), **data.model_dump())
    return jsonify(teacher.to_dict()), 201


@bp.get("/teachers/my-profile")
@login_required
def my_teacher_profile():
    return jsonify(directory.my_teacher_profile(actor()).to_dict())


@bp.get("/teachers/<int:teacher_id>")
@login_required
def get_teacher(teacher_id):
    return jsonify(directory.get_teacher(actor(), teacher_id).to_dict())


@bp.put("/teachers/<int:teacher_id>")
@login_required
def update_teacher(teacher_id):
    data = parse(TeacherUpdateIn)
    teacher = directory.update_teacher(actor(), teacher_id, **data.model_dump())
    return jsonify(teacher.to_dict())


@bp.delete("/teachers/<int:teacher_id>")
@login_required
def delete_teacher(teacher_id):
    teacher = directory.deactivate_teacher(actor(), teacher_id)
    return jsonify(teacher.to_dict())


@bp.get("/teachers/<int:teacher_id>/courses")
@login_required
def teacher_courses(teacher_id):
    return listing(directory.teacher_courses(actor(), teacher_id))
