from flask import jsonify, request
from flask_login import current_user
from pydantic import ValidationError as PayloadError

from ...errors import ValidationError
from ...services.access import Actor


def describe(exc):
    err = exc.errors()[0]
    field = ".".join(str(p) for p in err["loc"]) or "body"
    return f"{field}: {err['msg']}"


def parse(schema):
    """Validate the JSON body against ``schema``; malformed input is a 400."""
    try:
        return schema.model_validate(request.get_json(silent=True) or {})
    except PayloadError as exc:
        raise ValidationError(describe(exc)) from None


def actor():
    return Actor.from_user(current_user)


def listing(items):
    return jsonify([i.to_dict() for i in items])
