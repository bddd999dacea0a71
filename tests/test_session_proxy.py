from __future__ import annotations

import pytest

from session_proxy import (
    DeserializationError,
    FormSessionProxy,
    SerializationError,
    SessionAccessor,
)
from session_store import MemorySessionStore
from user_data import UserData


@pytest.fixture
def store() -> MemorySessionStore:
    return MemorySessionStore()


def test_user_data_round_trip(store):
    proxy = FormSessionProxy(store, "session-a")
    value = UserData(first_name="Ada", last_name="Lovelace", city="Boston", postal_code="02101")

    proxy.set("UserDataValues", value)

    assert proxy.get("UserDataValues", UserData) == value
    assert proxy.user_data_values == value


def test_round_trip_keeps_non_ascii_text(store):
    accessor = SessionAccessor(store, "session-a")
    accessor.set("FirstName", "Zoë 한글")

    assert store.get_text("session-a", "FirstName") == '"Zoë 한글"'
    assert accessor.get("FirstName", str) == "Zoë 한글"


def test_absent_key_returns_default(store):
    proxy = FormSessionProxy(store, "fresh")

    assert proxy.first_name is None
    assert proxy.user_data_values is None
    assert proxy.get("FirstName", str, default="") == ""


def test_overwrite_keeps_latest_value(store):
    proxy = FormSessionProxy(store, "session-a")
    proxy.first_name = "Ada"
    proxy.first_name = "Grace"

    assert proxy.first_name == "Grace"


def test_sessions_are_isolated(store):
    first = FormSessionProxy(store, "session-a")
    second = FormSessionProxy(store, "session-b")

    first.first_name = "Ada"
    second.first_name = "Grace"

    assert first.first_name == "Ada"
    assert second.first_name == "Grace"


def test_stored_user_data_uses_field_names(store):
    proxy = FormSessionProxy(store, "session-a")
    proxy.user_data_values = UserData(first_name="Ada", city="Boston")

    text = store.get_text("session-a", "UserDataValues")
    assert '"first_name": "Ada"' in text
    assert '"city": "Boston"' in text


def test_cyclic_value_raises_serialization_error(store):
    accessor = SessionAccessor(store, "session-a")
    cyclic: list = []
    cyclic.append(cyclic)

    with pytest.raises(SerializationError) as excinfo:
        accessor.set("Loop", cyclic)

    assert excinfo.value.key == "Loop"
    assert store.get_text("session-a", "Loop") is None


def test_unsupported_value_raises_serialization_error(store):
    accessor = SessionAccessor(store, "session-a")

    with pytest.raises(SerializationError):
        accessor.set("Whenever", object())
    with pytest.raises(SerializationError):
        accessor.set("Ratio", float("nan"))


def test_malformed_text_raises_deserialization_error(store):
    store.set_text("session-a", "UserDataValues", "{not json")
    proxy = FormSessionProxy(store, "session-a")

    with pytest.raises(DeserializationError):
        _ = proxy.user_data_values


def test_schema_drift_raises_deserialization_error(store):
    store.set_text("session-a", "UserDataValues", '{"first_name": "Ada", "shoe_size": "42"}')
    proxy = FormSessionProxy(store, "session-a")

    with pytest.raises(DeserializationError) as excinfo:
        _ = proxy.user_data_values

    assert "shoe_size" in str(excinfo.value)


def test_wrong_type_raises_deserialization_error(store):
    store.set_text("session-a", "FirstName", "42")
    proxy = FormSessionProxy(store, "session-a")

    with pytest.raises(DeserializationError):
        _ = proxy.first_name


def test_bool_is_not_read_as_int(store):
    accessor = SessionAccessor(store, "session-a")
    accessor.set("Count", True)

    with pytest.raises(DeserializationError):
        accessor.get("Count", int)
    assert accessor.get("Count", bool) is True


def test_stored_null_reads_as_default(store):
    proxy = FormSessionProxy(store, "session-a")
    proxy.first_name = None

    assert proxy.first_name is None
    assert proxy.get("FirstName", str, default="") == ""


def test_user_data_with_non_text_field_fails_on_write(store):
    proxy = FormSessionProxy(store, "session-a")

    with pytest.raises(SerializationError) as excinfo:
        proxy.user_data_values = UserData(first_name=1)  # type: ignore[arg-type]

    assert excinfo.value.key == "UserDataValues"
    assert store.get_text("session-a", "UserDataValues") is None
