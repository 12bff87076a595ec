from flask import flash, redirect, render_template, request, url_for
from flask_login import login_required

from app.blueprints.auth.routes import current_actor, role_required
from ...dates import utcnow
from ...errors import DomainError
from ...models import AttendanceStatus, EnrollmentStatus
from ...services import attendance, directory, enrollment, grades
from ...services.attendance import AttendanceEntry
from . import bp


@bp.get("/courses")
@login_required
@role_required("teacher")
def my_courses():
    try:
        items = directory.my_teacher_courses(current_actor())
    except DomainError as e:
        flash(e.message); items = []
    return render_template("courses_teacher.html", items=items)


@bp.get("/courses/<int:cid>/roster")
@login_required
@role_required("teacher")
def roster(cid):
    actor = current_actor()
    try:
        course = directory.get_course(actor, cid)
        rows = enrollment.course_roster(actor, cid)
        available = enrollment.available_students(actor, cid)
    except DomainError as e:
        flash(e.message)
        return redirect(url_for("teacher.my_courses"))
    return render_template("roster.html", course=course, rows=rows, available=available,
                           manage_endpoint="teacher")


@bp.post("/courses/<int:cid>/roster")
@login_required
@role_required("teacher")
def add_to_roster(cid):
    ids = request.form.getlist("student_ids", type=int)
    try:
        rows = enrollment.add_students(current_actor(), cid, ids)
        flash(f"Enrolled {len(rows)} students")
    except DomainError as e:
        flash(e.message)
    return redirect(url_for("teacher.roster", cid=cid))


@bp.post("/courses/<int:cid>/roster/<int:sid>/drop")
@login_required
@role_required("teacher")
def drop_from_roster(cid, sid):
    try:
        enrollment.drop_enrollment(current_actor(), cid, sid); flash("Enrollment dropped")
    except DomainError as e:
        flash(e.message)
    return redirect(url_for("teacher.roster", cid=cid))


@bp.route("/courses/<int:cid>/gradebook", methods=["GET", "POST"])
@login_required
@role_required("teacher")
def gradebook(cid):
    actor = current_actor()
    if request.method == "POST":
        f = request.form
        try:
            grades.record_grade(actor, cid, f.get("student_id", type=int),
                                f.get("exam_type"), f.get("score"), f.get("comments"))
            flash("Grade saved")
        except DomainError as e:
            flash(e.message)
        return redirect(url_for("teacher.gradebook", cid=cid))

    try:
        course = directory.get_course(actor, cid)
        items = grades.course_grades(actor, cid)
        rows = enrollment.course_roster(actor, cid)
    except DomainError as e:
        flash(e.message)
        return redirect(url_for("teacher.my_courses"))
    active = [r for r in rows if r.status == EnrollmentStatus.ACTIVE]
    return render_template("gradebook.html", course=course, grades=items, rows=active,
                           average=grades.course_averages(items).get(course.id))


@bp.post("/grades/<int:gid>/delete")
@login_required
@role_required("teacher")
def delete_grade(gid):
    actor = current_actor()
    try:
        cid = grades.get_grade(actor, gid).course_id
        grades.delete_grade(actor, gid)
        flash("Deleted")
    except DomainError as e:
        flash(e.message)
        return redirect(url_for("teacher.my_courses"))
    return redirect(url_for("teacher.gradebook", cid=cid))


@bp.route("/courses/<int:cid>/attendance", methods=["GET", "POST"])
@login_required
@role_required("teacher")
def attendance_sheet(cid):
    actor = current_actor()
    day = request.values.get("date") or utcnow().date().isoformat()

    if request.method == "POST":
        entries = []
        for sid in request.form.getlist("student_ids", type=int):
            entries.append(AttendanceEntry(
                student_id=sid,
                status=request.form.get(f"status-{sid}", AttendanceStatus.PRESENT.value),
                notes=request.form.get(f"notes-{sid}")))
        try:
            rows = attendance.record_bulk_attendance(actor, cid, day, entries)
            flash(f"Saved attendance for {len(rows)} students")
        except DomainError as e:
            flash(e.message)
        return redirect(url_for("teacher.attendance_sheet", cid=cid, date=day))

    try:
        course = directory.get_course(actor, cid)
        rows = enrollment.course_roster(actor, cid)
        records = attendance.course_attendance(actor, cid, day)
    except DomainError as e:
        flash(e.message)
        return redirect(url_for("teacher.my_courses"))
    marked = {r.student_id: r for r in records}
    active = [r for r in rows if r.status == EnrollmentStatus.ACTIVE]
    return render_template("attendance_sheet.html", course=course, rows=active,
                           marked=marked, day=day, statuses=list(AttendanceStatus),
                           summary=attendance.attendance_summary(records))
