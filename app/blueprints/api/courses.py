from flask import jsonify, request
from flask_login import login_required

from ...services import directory, enrollment
from . import bp
from .common import actor, listing, parse
from .schemas import AddStudentsIn, CourseIn, CourseUpdateIn, EnrollIn


@bp.get("/courses")
@login_required
def list_courses():
    items = directory.list_courses(actor(), q=request.args.get("q"),
                                   status=request.args.get("status"))
    return listing(items)


@bp.post("/courses")
@login_required
def create_course():
    data = parse(CourseIn)
    course = directory.create_course(actor(), **data.model_dump())
    return jsonify(course.to_dict()), 201


@bp.get("/courses/<int:course_id>")
@login_required
def get_course(course_id):
    return jsonify(directory.get_course(actor(), course_id).to_dict())


@bp.put("/courses/<int:course_id>")
@login_required
def update_course(course_id):
    data = parse(CourseUpdateIn)
    course = directory.update_course(actor(), course_id, **data.model_dump())
    return jsonify(course.to_dict())


@bp.delete("/courses/<int:course_id>")
@login_required
def delete_course(course_id):
    directory.delete_course(actor(), course_id)
    return jsonify({"message": "Course deleted"})


@bp.get("/courses/<int:course_id>/students")
@login_required
def course_students(course_id):
    return listing(enrollment.course_roster(actor(), course_id))


@bp.post("/courses/<int:course_id>/enroll")
@login_required
def enroll(course_id):
    data = parse(EnrollIn)
    row = enrollment.create_enrollment(actor(), course_id, data.student_id, data.comments)
    return jsonify(row.to_dict()), 201


@bp.post("/courses/<int:course_id>/add-students")
@login_required
def add_students(course_id):
    data = parse(AddStudentsIn)
    rows = enrollment.add_students(actor(), course_id, data.student_ids)
    return listing(rows), 201


@bp.delete("/courses/<int:course_id>/students/<int:student_id>")
@login_required
def drop_student(course_id, student_id):
    row = enrollment.drop_enrollment(actor(), course_id, student_id)
    return jsonify(row.to_dict())


@bp.get("/courses/<int:course_id>/available-students")
@login_required
def available_students(course_id):
    return listing(enrollment.available_students(actor(), course_id))


@bp.get("/courses/my-courses")
@login_required
def my_courses():
    return listing(enrollment.my_enrollments(actor()))


@bp.get("/courses/my-teacher-courses")
@login_required
def my_teacher_courses():
    return listing(directory.my_teacher_courses(actor()))
