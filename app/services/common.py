import logging
import math
from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError

from ..errors import Conflict, NotFound, ValidationError
from ..extensions import db

logger = logging.getLogger(__name__)


@contextmanager
def unit_of_work(conflict_message):
    """Commit the session once the block finishes.

    A unique-constraint rejection from the database, raised while flushing
    inside the block or at commit, is turned into :class:`Conflict`.
    """
    try:
        yield db.session
        db.session.commit()
    except IntegrityError as exc:
        db.session.rollback()
        logger.warning("Write rejected by constraint: %s (%s)", conflict_message, exc.orig)
        raise Conflict(conflict_message) from None
    except Exception:
        db.session.rollback()
        raise


def get_or_raise(model, ident, message):
    obj = db.session.get(model, ident) if ident is not None else None
    if obj is None:
        raise NotFound(message)
    return obj


def require_non_empty(value, field_name, max_length=None):
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    value = str(value).strip()
    if max_length and len(value) > max_length:
        raise ValidationError(f"{field_name} must be at most {max_length} characters")
    return value


def optional_text(value, field_name, max_length):
    if value is None:
        return None
    value = str(value).strip()
    if len(value) > max_length:
        raise ValidationError(f"{field_name} must be at most {max_length} characters")
    return value or None


def require_score(score):
    try:
        value = float(score)
    except (TypeError, ValueError):
        raise ValidationError("Score must be a number") from None
    if math.isnan(value) or not 0 <= value <= 100:
        raise ValidationError("Score must be between 0 and 100")
    return value


def coerce_enum(enum_cls, value, field_name):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(f"{field_name} must be one of: {allowed}") from None


def optional_int(value, field_name, low, high):
    if value in (None, ""):
        return None
    try:
        value = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a whole number") from None
    if not low <= value <= high:
        raise ValidationError(f"{field_name} must be between {low} and {high}")
    return value
