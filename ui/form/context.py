"""Shared context objects for the details form steps."""
from __future__ import annotations

from dataclasses import dataclass

from session_proxy import FormSessionProxy


@dataclass(slots=True)
class FormPageContext:
    session: FormSessionProxy
    client_ip: str | None = None


__all__ = ["FormPageContext"]
