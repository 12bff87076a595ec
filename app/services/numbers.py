import logging
import random

from flask import current_app

from ..dates import utcnow
from ..errors import Conflict
from ..extensions import db
from ..models import Student, Teacher

logger = logging.getLogger(__name__)

STUDENT_PREFIX = "STU"
EMPLOYEE_PREFIX = "TCH"

# (low, high) bounds of the random suffix, tried in order
SUFFIX_WIDTHS = ((1000, 9999), (10_000_000, 99_999_999))


def generate_number(prefix, exists, *, attempts=20, year=None, rng=random):
    """Return ``prefix + year + random digits`` not yet taken.

    Each suffix width is tried ``attempts`` times before moving on to the
    wider one; :class:`Conflict` when every candidate collides.
    """
    year = year or utcnow().year
    for low, high in SUFFIX_WIDTHS:
        for _ in range(attempts):
            candidate = f"{prefix}{year}{rng.randint(low, high)}"
            if not exists(candidate):
                return candidate
        logger.warning("No free %s number with %d-digit suffix after %d attempts",
                       prefix, len(str(high)), attempts)
    raise Conflict(f"Could not generate a unique {prefix} number")


def student_number_taken(number):
    return db.session.query(Student.id).filter_by(student_no=number).first() is not None


def employee_number_taken(number):
    return db.session.query(Teacher.id).filter_by(employee_no=number).first() is not None


def next_student_number():
    return generate_number(STUDENT_PREFIX, student_number_taken,
                           attempts=current_app.config.get("NUMBER_ATTEMPTS", 20))


def next_employee_number():
    return generate_number(EMPLOYEE_PREFIX, employee_number_taken,
                           attempts=current_app.config.get("NUMBER_ATTEMPTS", 20))
