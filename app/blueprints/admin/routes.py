from flask import flash, redirect, render_template, request, url_for
from flask_login import login_required

from app.blueprints.auth.routes import current_actor, role_required
from ...errors import DomainError
from ...models import CourseStatus, Teacher
from ...services import directory, enrollment
from . import bp


def listing_args(default_sort):
    return dict(
        q=(request.args.get("q") or "").strip() or None,
        sort=request.args.get("sort", default_sort),
        order=request.args.get("order", "asc"),
        page=max(request.args.get("page", type=int) or 1, 1),
        per_page=min(max(request.args.get("per_page", type=int) or 10, 1), 100),
        include_inactive=bool(request.args.get("include_inactive")),
    )


def form_text(name):
    return (request.form.get(name) or "").strip() or None


# ---------- Courses ----------
@bp.get("/courses")
@login_required
@role_required("admin")
def courses():
    q = (request.args.get("q") or "").strip()
    status = request.args.get("status") or None
    try:
        items = directory.list_courses(current_actor(), q=q, status=status)
    except DomainError as e:
        flash(e.message); items = []
    teachers = Teacher.query.filter_by(is_active=True).order_by(Teacher.employee_no).all()
    return render_template("courses.html", items=items, teachers=teachers,
                           statuses=list(CourseStatus), q=q, status=status)


@bp.post("/courses")
@login_required
@role_required("admin")
def create_course():
    f = request.form
    try:
        directory.create_course(current_actor(), code=f.get("code"), name=f.get("name"),
                                credits=f.get("credits"),
                                teacher_id=f.get("teacher_id", type=int),
                                description=form_text("description"))
        flash("Course created")
    except DomainError as e:
        flash(e.message)
    return redirect(url_for("admin.courses"))


@bp.post("/courses/<int:cid>/update")
@login_required
@role_required("admin")
def update_course(cid):
    f = request.form
    try:
        directory.update_course(current_actor(), cid, name=f.get("name"),
                                credits=f.get("credits"), status=f.get("status"),
                                description=form_text("description"),
                                teacher_id=f.get("teacher_id", type=int))
        flash("Course updated")
    except DomainError as e:
        flash(e.message)
    return redirect(url_for("admin.courses"))


@bp.post("/courses/<int:cid>/delete")
@login_required
@role_required("admin")
def delete_course(cid):
    try:
        directory.delete_course(current_actor(), cid); flash("Deleted course")
    except DomainError as e:
        flash(e.message)
    return redirect(url_for("admin.courses"))


@bp.get("/courses/<int:cid>/roster")
@login_required
@role_required("admin")
def roster(cid):
    actor = current_actor()
    try:
        course = directory.get_course(actor, cid)
        rows = enrollment.course_roster(actor, cid)
        available = enrollment.available_students(actor, cid)
    except DomainError as e:
        flash(e.message)
        return redirect(url_for("admin.courses"))
    return render_template("roster.html", course=course, rows=rows, available=available,
                           manage_endpoint="admin")


@bp.post("/courses/<int:cid>/roster")
@login_required
@role_required("admin")
def add_to_roster(cid):
    ids = request.form.getlist("student_ids", type=int)
    try:
        rows = enrollment.add_students(current_actor(), cid, ids)
        flash(f"Enrolled {len(rows)} students")
    except DomainError as e:
        flash(e.message)
    return redirect(url_for("admin.roster", cid=cid))


@bp.post("/courses/<int:cid>/roster/<int:sid>/drop")
@login_required
@role_required("admin")
def drop_from_roster(cid, sid):
    try:
        enrollment.drop_enrollment(current_actor(), cid, sid); flash("Enrollment dropped")
    except DomainError as e:
        flash(e.message)
    return redirect(url_for("admin.roster", cid=cid))


# ---------- Students ----------
@bp.get("/students")
@login_required
@role_required("admin")
def students():
    args = listing_args("student_no")
    page = directory.list_students(current_actor(), **args)
    return render_template("students.html", page=page, items=page.items,
                           q=args["q"] or "", sort=args["sort"], order=args["order"])


@bp.post("/students")
@login_required
@role_required("admin")
def create_student():
    try:
        student = directory.create_student(
            current_actor(),
            first_name=form_text("first_name"), last_name=form_text("last_name"),
            email=form_text("email"), password=form_text("password"),
            phone=form_text("phone"), birth_date=form_text("birth_date"),
            student_no=form_text("student_no"), department=form_text("department"),
            year=form_text("year"))
        flash(f"Student {student.student_no} created")
    except DomainError as e:
        flash(e.message)
    return redirect(url_for("admin.students"))


@bp.post("/students/<int:sid>/update")
@login_required
@role_required("admin")
def update_student(sid):
    try:
        directory.update_student(
            current_actor(), sid,
            first_name=form_text("first_name"), last_name=form_text("last_name"),
            phone=form_text("phone"), student_no=form_text("student_no"),
            department=form_text("department"), year=form_text("year"))
        flash("Student updated")
    except DomainError as e:
        flash(e.message)
    return redirect(url_for("admin.students"))


@bp.post("/students/<int:sid>/delete")
@login_required
@role_required("admin")
def delete_student(sid):
    try:
        directory.deactivate_student(current_actor(), sid); flash("Student deactivated")
    except DomainError as e:
        flash(e.message)
    return redirect(url_for("admin.students"))


# ---------- Teachers ----------
@bp.get("/teachers")
@login_required
@role_required("admin")
def teachers():
    args = listing_args("employee_no")
    page = directory.list_teachers(current_actor(), **args)
    return render_template("teachers.html", page=page, items=page.items,
                           q=args["q"] or "", sort=args["sort"], order=args["order"])


@bp.post("/teachers")
@login_required
@role_required("admin")
def create_teacher():
    try:
        teacher = directory.create_teacher(
            current_actor(),
            first_name=form_text("first_name"), last_name=form_text("last_name"),
            email=form_text("email"), password=form_text("password"),
            phone=form_text("phone"), employee_no=form_text("employee_no"),
            department=form_text("department"), title=form_text("title"),
            hire_date=form_text("hire_date"))
        flash(f"Teacher {teacher.employee_no} created")
    except DomainError as e:
        flash(e.message)
    return redirect(url_for("admin.teachers"))


@bp.post("/teachers/<int:tid>/update")
@login_required
@role_required("admin")
def update_teacher(tid):
    try:
        directory.update_teacher(
            current_actor(), tid,
            first_name=form_text("first_name"), last_name=form_text("last_name"),
            phone=form_text("phone"), employee_no=form_text("employee_no"),
            department=form_text("department"), title=form_text("title"))
        flash("Teacher updated")
    except DomainError as e:
        flash(e.message)
    return redirect(url_for("admin.teachers"))


@bp.post("/teachers/<int:tid>/delete")
@login_required
@role_required("admin")
def delete_teacher(tid):
    try:
        directory.deactivate_teacher(current_actor(), tid); flash("Teacher deactivated")
    except DomainError as e:
        flash(e.message)
    return redirect(url_for("admin.teachers"))
