from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date


# Form field name -> User attribute
FORM_FIELDS = {
    "firstName": "first_name",
    "lastName": "last_name",
    "email": "email",
    "dob": "dob",
}


class InvalidUserPayload(ValueError):
    """Raised when a submitted user form cannot be converted to column types."""


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def parse_date(s: str | None) -> date | None:
    """Parse YYYY-MM-DD date string."""
    s = _clean(s)
    if s is None:
        return None
    try:
        return date.fromisoformat(s)
    except ValueError as e:
        raise InvalidUserPayload(f"Date of birth must be YYYY-MM-DD (got {s!r}).") from e


@dataclass(frozen=True)
class UserPayload:
    """The four user fields submitted by the create and edit forms."""

    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    dob: date | None = None

    @classmethod
    def from_form(cls, form: Mapping[str, str]) -> "UserPayload":
        values: dict[str, object] = {attr: _clean(form.get(name)) for name, attr in FORM_FIELDS.items()}
        values["dob"] = parse_date(values["dob"])  # type: ignore[arg-type]
        return cls(**values)  # type: ignore[arg-type]

    def as_columns(self) -> dict[str, object]:
        return {attr: getattr(self, attr) for attr in FORM_FIELDS.values()}
