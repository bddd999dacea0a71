"""Domain record collected by the details form."""
from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Any, Mapping

USER_DATA_FIELDS: tuple[tuple[str, str], ...] = (
    ("first_name", "First name"),
    ("last_name", "Last name"),
    ("email", "Email"),
    ("phone", "Phone"),
    ("address", "Street address"),
    ("city", "City"),
    ("state", "State / Province"),
    ("postal_code", "Postal code"),
)


@dataclass(slots=True)
class UserData:
    """Personal details gathered across the form steps."""

    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    postal_code: str = ""

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        return tuple(field.name for field in fields(cls))

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> "UserData":
        """Bind a submitted form mapping.

        Only keys matching an attribute are used; anything else is ignored and
        attributes without a submitted value keep their default.
        """

        known = set(cls.field_names())
        values: dict[str, str] = {}
        for name, raw in form.items():
            if name not in known:
                continue
            values[name] = "" if raw is None else str(raw).strip()
        return cls(**values)

    @classmethod
    def from_dict(cls, payload: Any) -> "UserData":
        """Strict inverse of :meth:`to_dict` used when reading stored values."""

        if not isinstance(payload, Mapping):
            raise TypeError(f"expected a JSON object, got {type(payload).__name__}")

        known = set(cls.field_names())
        unknown = sorted(str(key) for key in payload if key not in known)
        if unknown:
            raise ValueError(f"unexpected fields for UserData: {', '.join(unknown)}")

        for name, value in payload.items():
            if not isinstance(value, str):
                raise TypeError(f"field '{name}' must be a string, got {type(value).__name__}")
        return cls(**dict(payload))

    def to_dict(self) -> dict[str, str]:
        payload = asdict(self)
        for name, value in payload.items():
            if not isinstance(value, str):
                raise TypeError(f"field '{name}' must be a string, got {type(value).__name__}")
        return payload


__all__ = ["USER_DATA_FIELDS", "UserData"]
