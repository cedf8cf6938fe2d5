from qaforum.errors import InvalidInputError


def require_text(value: str | None, field_name: str) -> str:
    """Return ``value`` stripped, or raise if it is missing or blank."""
    if value is None or not str(value).strip():
        raise InvalidInputError(f"{field_name} is required")
    return str(value).strip()
