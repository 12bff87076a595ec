from flask import jsonify
from flask_login import current_user, login_required, login_user, logout_user

from ...services import accounts
from . import bp
from .common import parse
from .schemas import LoginIn, PasswordIn, RegisterIn


@bp.post("/auth/register")
def register():
    data = parse(RegisterIn)
    user = accounts.register(**data.model_dump())
    login_user(user)
    return jsonify(user.to_dict()), 201


@bp.post("/auth/login")
def login():
    data = parse(LoginIn)
    user = accounts.authenticate(data.email, data.password)
    login_user(user)
    return jsonify(user.to_dict())


@bp.post("/auth/logout")
@login_required
def logout():
    logout_user()
    return jsonify({"message": "Logged out"})


@bp.get("/auth/profile")
@login_required
def profile():
    return jsonify(current_user.to_dict())


@bp.get("/auth/roles")
@login_required
def roles():
    return jsonify({"roles": sorted(r.value for r in current_user.roles)})


@bp.put("/auth/password")
@login_required
def change_password():
    data = parse(PasswordIn)
    accounts.change_password(current_user, data.old_password, data.new_password,
                             data.confirm_password)
    return jsonify({"message": "Password updated"})
