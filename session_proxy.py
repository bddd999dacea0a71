"""Typed access to values kept in the per-session store."""
from __future__ import annotations

import json
from typing import Any, TypeVar

from app_constants import FIRST_NAME_KEY, USER_DATA_KEY
from session_store import SessionStore
from user_data import UserData

T = TypeVar("T")


class SessionDataError(Exception):
    """Base class for failures converting session values to or from text."""

    def __init__(self, key: str, message: str):
        super().__init__(f"{message} (key={key!r})")
        self.key = key


class SerializationError(SessionDataError):
    """The value cannot be represented as JSON text."""


class DeserializationError(SessionDataError):
    """The stored text does not match the requested type."""


def _to_jsonable(value: Any) -> Any:
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    return value


def _from_jsonable(payload: Any, value_type: type[T]) -> T:
    from_dict = getattr(value_type, "from_dict", None)
    if callable(from_dict):
        return from_dict(payload)
    # bool is an int subclass; keep the two apart.
    if value_type in (int, float) and isinstance(payload, bool):
        raise TypeError(f"expected {value_type.__name__}, got bool")
    if value_type is float and isinstance(payload, int):
        return float(payload)  # type: ignore[return-value]
    if not isinstance(payload, value_type):
        raise TypeError(f"expected {value_type.__name__}, got {type(payload).__name__}")
    return payload


class SessionAccessor:
    """Get/set JSON-encoded values for one session of a :class:`SessionStore`."""

    def __init__(self, store: SessionStore, session_id: str):
        self._store = store
        self.session_id = session_id

    def set(self, key: str, value: Any) -> None:
        try:
            text = json.dumps(_to_jsonable(value), ensure_ascii=False, allow_nan=False)
        except (TypeError, ValueError) as exc:
            raise SerializationError(key, f"cannot serialize {type(value).__name__}: {exc}") from exc
        self._store.set_text(self.session_id, key, text)

    def get(self, key: str, value_type: type[T], default: T | None = None) -> T | None:
        text = self._store.get_text(self.session_id, key)
        if text is None:
            return default
        try:
            payload = json.loads(text)
        except ValueError as exc:
            raise DeserializationError(key, f"stored text is not valid JSON: {exc}") from exc
        if payload is None:
            return default
        try:
            return _from_jsonable(payload, value_type)
        except (TypeError, ValueError) as exc:
            raise DeserializationError(key, f"cannot read {value_type.__name__}: {exc}") from exc


class FormSessionProxy(SessionAccessor):
    """Named session fields shared by the form steps."""

    @property
    def first_name(self) -> str | None:
        return self.get(FIRST_NAME_KEY, str)

    @first_name.setter
    def first_name(self, value: str | None) -> None:
        self.set(FIRST_NAME_KEY, value)

    @property
    def user_data_values(self) -> UserData | None:
        return self.get(USER_DATA_KEY, UserData)

    @user_data_values.setter
    def user_data_values(self, value: UserData) -> None:
        self.set(USER_DATA_KEY, value)


__all__ = [
    "DeserializationError",
    "FormSessionProxy",
    "SerializationError",
    "SessionAccessor",
    "SessionDataError",
]
