"""
Event payload validation.
"""

from core.calendar_grid import parse_date_key


class ValidationError(ValueError):
    """Client supplied a missing or malformed field."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__("\n".join(errors))


def is_blank(value: str | None) -> bool:
    """Check if a field is missing or only whitespace."""
    return value is None or not str(value).strip()


def check_date_key(value: str, field_name: str) -> str | None:
    """Return an error message if value is not a YYYY-MM-DD date."""
    try:
        parse_date_key(value)
    except ValueError:
        return f"{field_name} must be a valid date in YYYY-MM-DD form, got '{value}'"
    return None


def validate_new_event(date: str | None, title: str | None) -> tuple[str, str]:
    """
    Validate fields for a new event.

    Checks:
    1. Date and title are present and not blank
    2. Date is a real calendar date in YYYY-MM-DD form

    Returns:
        (date, title) with the title stripped

    Raises:
        ValidationError: listing every problem found
    """
    errors = []

    if is_blank(date):
        errors.append("Missing date")
    else:
        date_error = check_date_key(date, "date")
        if date_error:
            errors.append(date_error)

    if is_blank(title):
        errors.append("Missing title")

    if errors:
        raise ValidationError(errors)

    return date, title.strip()


def validate_date_range(start: str | None, end: str | None) -> tuple[str, str]:
    """
    Validate the bounds of an event listing.

    Raises:
        ValidationError: if either bound is missing or malformed
    """
    errors = []
    for field_name, value in (("start", start), ("end", end)):
        if is_blank(value):
            errors.append(f"Missing {field_name} date")
            continue
        date_error = check_date_key(value, field_name)
        if date_error:
            errors.append(date_error)

    if errors:
        raise ValidationError(errors)

    return start, end
