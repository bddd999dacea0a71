from __future__ import annotations

import pytest

testing = pytest.importorskip("streamlit.testing.v1")

APP_PATH = "../app.py"


def _start_app(monkeypatch, **query) -> "testing.AppTest":
    monkeypatch.setenv("SESSION_STORE_MODE", "memory")
    monkeypatch.setenv("ACTIVITY_LOG_ENABLED", "false")
    at = testing.AppTest.from_file(APP_PATH, default_timeout=30)
    for key, value in query.items():
        at.query_params[key] = value
    at.run()
    assert not at.exception
    return at


def _written_values(at) -> list[str]:
    return [element.value for element in at.markdown]


def test_full_flow_carries_values_to_confirm(monkeypatch):
    at = _start_app(monkeypatch)
    assert at.session_state["step"] == "index"

    at.text_input(key="start_name").input("Ada")
    at.button(key="start_submit").click().run()

    assert not at.exception
    assert at.session_state["step"] == "moredetail"
    assert at.text_input(key="detail_first_name").value == "Ada"

    at.text_input(key="detail_city").input("Boston")
    at.button(key="detail_submit").click().run()

    assert not at.exception
    assert at.session_state["step"] == "confirm"
    values = _written_values(at)
    assert "Ada" in values
    assert "Boston" in values


def test_confirm_opened_directly_shows_empty_record(monkeypatch):
    at = _start_app(monkeypatch, page="confirm")

    assert at.session_state["step"] == "confirm"
    assert at.info, "expected a notice that nothing was submitted"
    assert "Ada" not in _written_values(at)


def test_unknown_page_falls_back_to_start(monkeypatch):
    at = _start_app(monkeypatch, page="payment")

    assert at.session_state["step"] == "index"
    assert at.text_input(key="start_name").value == ""
