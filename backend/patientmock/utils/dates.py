"""Date helpers shared by the normalizer and projections.

Stored dates are free-form strings. Reformatting is best-effort: only a
value that looks like ``YYYY-MM-DD`` is touched, anything else passes
through unchanged.
"""

from datetime import datetime, timezone


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string with millisecond precision."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def to_us_date(value: str | None) -> str | None:
    """Convert ``YYYY-MM-DD`` to ``MM/DD/YYYY``.

    Detection is by the presence of ``-``, exactly three components and
    a four character first component. No calendar validation is done.

    Args:
        value: Stored date string.

    Returns:
        Reformatted string, or the input unchanged when it does not match.
    """
    if not value or not isinstance(value, str) or "-" not in value:
        return value

    parts = value.split("-")
    if len(parts) == 3 and len(parts[0]) == 4:
        year, month, day = parts
        return f"{month}/{day}/{year}"
    return value
