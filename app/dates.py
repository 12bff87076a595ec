from datetime import date, datetime, timezone


def utcnow():
    """Current time as a UTC-aware datetime.

    Wrapped so tests can patch it.
    """
    return datetime.now(timezone.utc)


def canonical_day(value):
    """Reduce an attendance timestamp to its UTC calendar day.

    Accepts a ``date``, a ``datetime`` or an ISO-8601 string. Aware
    datetimes are converted to UTC before the date is taken; naive
    datetimes and bare dates are read as UTC already. The result is the
    day used, with student and course, as the attendance uniqueness key.
    """
    if value is None:
        raise ValueError("date is required")
    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise ValueError("date is required")
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            value = datetime.fromisoformat(text)
        except ValueError:
            raise ValueError(f"Invalid date: {value!r}") from None
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    if isinstance(value, date):
        return value
    raise TypeError(f"Unsupported date value: {type(value)!r}")
