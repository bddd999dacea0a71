"""Confirm view: summarise what was submitted."""
from __future__ import annotations

from dataclasses import astuple

import streamlit as st

from app_constants import STEP_CONFIRM, STEP_TITLES
from services.form_flow import show_confirm
from telemetry import emit_log_event
from user_data import USER_DATA_FIELDS

from .context import FormPageContext

_VIEW_LOGGED_KEY = "confirm_view_logged"


def render_step(context: FormPageContext) -> None:
    data = show_confirm(context.session)

    st.subheader(STEP_TITLES[STEP_CONFIRM])

    if not any(astuple(data)):
        st.info("No details have been submitted in this session yet.")

    for name, label in USER_DATA_FIELDS:
        label_col, value_col = st.columns([1, 2])
        label_col.markdown(f"**{label}**")
        value_col.write(getattr(data, name) or "(empty)")

    if not st.session_state.get(_VIEW_LOGGED_KEY):
        emit_log_event(
            type="form",
            action="confirm view",
            result="success",
            params=[STEP_CONFIRM, "filled" if any(astuple(data)) else "empty"],
            client_ip=context.client_ip,
        )
        st.session_state[_VIEW_LOGGED_KEY] = True
