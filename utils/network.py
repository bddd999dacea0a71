"""Request metadata helpers."""
from __future__ import annotations

from typing import Mapping, Optional

import streamlit as st

_FORWARDING_HEADERS = ("X-Real-IP", "CF-Connecting-IP")


def client_ip_from_headers(headers: Mapping[str, str] | None) -> Optional[str]:
    """Pick the originating client address from proxy headers, if any."""
    if not headers:
        return None
    forwarded_for = headers.get("X-Forwarded-For")
    if forwarded_for:
        first = forwarded_for.split(",")[0].strip()
        if first:
            return first
    for header_key in _FORWARDING_HEADERS:
        candidate = (headers.get(header_key) or "").strip()
        if candidate:
            return candidate
    return None


def get_client_ip() -> Optional[str]:
    """Best-effort visitor address for the current Streamlit session."""
    try:
        client_ip = client_ip_from_headers(st.context.headers)
        return client_ip or st.context.ip_address
    except Exception:
        # No websocket session behind this script run (bare mode, AppTest).
        return None


__all__ = ["client_ip_from_headers", "get_client_ip"]
