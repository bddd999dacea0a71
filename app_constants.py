"""Shared constants for the details form flow."""
from __future__ import annotations

STEP_START = "index"
STEP_DETAIL = "moredetail"
STEP_CONFIRM = "confirm"

FORM_STEPS: tuple[str, ...] = (STEP_START, STEP_DETAIL, STEP_CONFIRM)

STEP_TITLES = {
    STEP_START: "1. Tell us your name",
    STEP_DETAIL: "2. A few more details",
    STEP_CONFIRM: "3. Please confirm",
}

# Session store keys shared between steps.
FIRST_NAME_KEY = "FirstName"
USER_DATA_KEY = "UserDataValues"


__all__ = [
    "FIRST_NAME_KEY",
    "FORM_STEPS",
    "STEP_CONFIRM",
    "STEP_DETAIL",
    "STEP_START",
    "STEP_TITLES",
    "USER_DATA_KEY",
]
