"""Detail view: collect the rest of the personal details."""
from __future__ import annotations

import streamlit as st

from app_constants import STEP_DETAIL, STEP_TITLES
from services.form_flow import show_detail, submit_detail
from session_state import follow_redirect
from telemetry import emit_log_event
from user_data import USER_DATA_FIELDS

from .context import FormPageContext


def render_step(context: FormPageContext) -> None:
    data = show_detail(context.session)

    st.subheader(STEP_TITLES[STEP_DETAIL])
    st.caption("Check your name and fill in the remaining fields.")

    submitted_values: dict[str, str] = {}
    with st.form("detail_form", clear_on_submit=False):
        left, right = st.columns(2)
        for idx, (name, label) in enumerate(USER_DATA_FIELDS):
            column = left if idx % 2 == 0 else right
            submitted_values[name] = column.text_input(
                label,
                value=getattr(data, name),
                key=f"detail_{name}",
            )
        submitted = st.form_submit_button("Review →", width="stretch", key="detail_submit")

    if submitted:
        redirect = submit_detail(context.session, submitted_values)
        emit_log_event(
            type="form",
            action="detail submit",
            result="success",
            params=[STEP_DETAIL, redirect.step],
            client_ip=context.client_ip,
        )
        follow_redirect(redirect)
