"""Telemetry helpers around the activity log module."""
from __future__ import annotations

from typing import Any, Sequence

import streamlit as st

from activity_log import log_event
from session_state import SESSION_ID_KEY
from utils.network import get_client_ip


def emit_log_event(
    *,
    type: str,
    action: str,
    result: str,
    params: Sequence[str | None] | None = None,
    client_ip: str | None = None,
) -> Any:
    """Wrapper around ``log_event`` that fills in the current form session."""

    session_id = st.session_state.get(SESSION_ID_KEY)
    return log_event(
        type=type,
        action=action,
        result=result,
        session_id=session_id,
        params=params,
        client_ip=client_ip if client_ip is not None else get_client_ip(),
    )


__all__ = ["emit_log_event"]
