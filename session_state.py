"""Streamlit session helpers for navigating the form steps."""
from __future__ import annotations

import uuid

import streamlit as st

from app_constants import FORM_STEPS, STEP_START
from services.form_flow import Redirect

SESSION_ID_KEY = "form_session_id"
STEP_KEY = "step"
PAGE_QUERY_PARAM = "page"


def ensure_state() -> None:
    """Seed the session identifier and current step on the first script run.

    The starting step comes from the ``page`` query parameter when it names a
    known step, so any step can be opened directly.
    """

    if not st.session_state.get(SESSION_ID_KEY):
        st.session_state[SESSION_ID_KEY] = uuid.uuid4().hex

    if st.session_state.get(STEP_KEY) not in FORM_STEPS:
        requested = st.query_params.get(PAGE_QUERY_PARAM)
        st.session_state[STEP_KEY] = requested if requested in FORM_STEPS else STEP_START


def get_session_id() -> str:
    ensure_state()
    return str(st.session_state[SESSION_ID_KEY])


def current_step() -> str:
    step = st.session_state.get(STEP_KEY)
    return step if step in FORM_STEPS else STEP_START


def go_step(step: str) -> None:
    if step not in FORM_STEPS:
        raise ValueError(f"unknown form step: {step}")
    st.session_state[STEP_KEY] = step
    st.query_params[PAGE_QUERY_PARAM] = step


def follow_redirect(redirect: Redirect) -> None:
    go_step(redirect.step)
    st.rerun()


__all__ = [
    "PAGE_QUERY_PARAM",
    "SESSION_ID_KEY",
    "STEP_KEY",
    "current_step",
    "ensure_state",
    "follow_redirect",
    "get_session_id",
    "go_step",
]
