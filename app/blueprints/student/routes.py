from flask import flash, redirect, render_template, request, url_for
from flask_login import login_required

from app.blueprints.auth.routes import current_actor, role_required
from ...errors import DomainError
from ...services import attendance, directory, enrollment, grades
from . import bp


@bp.get("/courses")
@login_required
@role_required("student")
def my_courses():
    try:
        items = enrollment.my_enrollments(current_actor())
    except DomainError as e:
        flash(e.message); items = []
    return render_template("courses_student.html", items=items)


@bp.get("/grades")
@login_required
@role_required("student")
def my_grades():
    course_id = request.args.get("course_id", type=int)
    try:
        items = grades.my_grades(current_actor(), course_id)
    except DomainError as e:
        flash(e.message)
        return redirect(url_for("student.my_courses"))

    averages = grades.course_averages(items)
    courses = {}
    for g in items:
        entry = courses.setdefault(g.course_id, {
            "course": f"{g.course.name} ({g.course.code})",
            "rows": [],
            "average": averages[g.course_id],
        })
        entry["rows"].append(g)
    return render_template("grades.html", courses=list(courses.values()))


@bp.get("/attendance")
@login_required
@role_required("student")
def my_attendance():
    course_id = request.args.get("course_id", type=int)
    try:
        records = attendance.my_attendance(current_actor(), course_id)
    except DomainError as e:
        flash(e.message)
        return redirect(url_for("student.my_courses"))
    return render_template("attendance_student.html", records=records,
                           summary=attendance.attendance_summary(records))


@bp.get("/profile")
@login_required
@role_required("student")
def profile():
    try:
        person = directory.my_student_profile(current_actor())
    except DomainError as e:
        flash(e.message)
        return redirect(url_for("auth.account"))
    return render_template("profile_student.html", person=person, user=person.user)
