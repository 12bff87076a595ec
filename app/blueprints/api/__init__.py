from flask import Blueprint

bp = Blueprint("api", __name__)

from . import auth, courses, people, records  # noqa: E402,F401
