from functools import wraps

from flask import abort, flash, redirect, render_template, request, url_for
from flask_login import current_user, login_required, login_user, logout_user

from ...errors import DomainError
from ...models import Role
from ...services import accounts
from ...services.access import Actor
from . import bp


def role_required(*roles):
    roles = tuple(Role(r) for r in roles)

    def deco(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            if not current_user.is_authenticated or not current_user.has_role(*roles):
                abort(403)
            return f(*args, **kwargs)
        return wrapper
    return deco


def current_actor():
    return Actor.from_user(current_user)


def landing_url(user):
    if user.has_role(Role.ADMIN):
        return url_for("admin.courses")
    if user.has_role(Role.TEACHER):
        return url_for("teacher.my_courses")
    return url_for("student.my_courses")


@bp.get("/")
@login_required
def home():
    return redirect(landing_url(current_user))


@bp.route("/login", methods=["GET", "POST"])
def login():
    if request.method == "POST":
        try:
            user = accounts.authenticate(request.form.get("email", ""),
                                         request.form.get("password", ""))
        except DomainError as e:
            flash(e.message)
        else:
            login_user(user)
            nxt = request.args.get("next")
            if nxt and nxt.startswith("/") and not nxt.startswith("//"):
                return redirect(nxt)
            return redirect(landing_url(user))
    return render_template("login.html")


@bp.route("/register", methods=["GET", "POST"])
def register():
    if request.method == "POST":
        f = request.form
        try:
            user = accounts.register(
                email=f.get("email", ""),
                password=f.get("password", ""),
                confirm_password=f.get("confirm_password", ""),
                first_name=f.get("first_name", ""),
                last_name=f.get("last_name", ""),
                role=f.get("role", "student"),
                phone=f.get("phone"),
                address=f.get("address"),
                birth_date=f.get("birth_date"),
                student_no=f.get("student_no"),
                employee_no=f.get("employee_no"),
                department=f.get("department"),
                title=f.get("title"),
                year=f.get("year"),
            )
        except DomainError as e:
            flash(e.message)
        else:
            login_user(user)
            flash("Registration successful")
            return redirect(landing_url(user))
    return render_template("register.html")


@bp.get("/logout")
@login_required
def logout():
    logout_user()
    return redirect(url_for("auth.login"))


@bp.route("/account", methods=["GET", "POST"])
@login_required
def account():
    if request.method == "POST":
        try:
            accounts.change_password(current_user,
                                     request.form.get("old_password", ""),
                                     request.form.get("new_password", ""),
                                     request.form.get("confirm_password", ""))
        except DomainError as e:
            flash(e.message)
        else:
            flash("Password updated")
            return redirect(url_for("auth.account"))
    return render_template("account.html", user=current_user)
