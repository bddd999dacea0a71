"""Start view: ask for the visitor's first name."""
from __future__ import annotations

import streamlit as st

from app_constants import STEP_START, STEP_TITLES
from services.form_flow import submit_start
from session_state import follow_redirect
from telemetry import emit_log_event

from .context import FormPageContext


def render_step(context: FormPageContext) -> None:
    st.subheader(STEP_TITLES[STEP_START])

    with st.form("start_form", clear_on_submit=False):
        name = st.text_input("First name", key="start_name")
        submitted = st.form_submit_button("Next →", width="stretch", key="start_submit")

    if submitted:
        redirect = submit_start(context.session, name)
        emit_log_event(
            type="form",
            action="start submit",
            result="success",
            params=[STEP_START, redirect.step],
            client_ip=context.client_ip,
        )
        follow_redirect(redirect)
