"""Display and submit actions for each step of the details form."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

from app_constants import STEP_CONFIRM, STEP_DETAIL
from session_proxy import FormSessionProxy
from user_data import UserData

_LOGGER = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class Redirect:
    """Instruction to continue the flow on another step."""

    step: str


def submit_start(session: FormSessionProxy, name: str | None) -> Redirect:
    session.first_name = name
    _LOGGER.info("Session %s stored first name; continuing to %s", session.session_id, STEP_DETAIL)
    return Redirect(STEP_DETAIL)


def show_detail(session: FormSessionProxy) -> UserData:
    """Fresh record with the first name from the start step filled in."""

    data = UserData()
    data.first_name = session.first_name or ""
    return data


def submit_detail(session: FormSessionProxy, form: Mapping[str, Any]) -> Redirect:
    """Store the whole submitted record, replacing any earlier submission."""

    session.user_data_values = UserData.from_form(form)
    _LOGGER.info("Session %s stored user details; continuing to %s", session.session_id, STEP_CONFIRM)
    return Redirect(STEP_CONFIRM)


def show_confirm(session: FormSessionProxy) -> UserData:
    return session.user_data_values or UserData()


__all__ = ["Redirect", "show_confirm", "show_detail", "submit_detail", "submit_start"]
