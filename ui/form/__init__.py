"""Helpers for orchestrating the details form steps."""
from __future__ import annotations

from app_constants import STEP_CONFIRM, STEP_DETAIL, STEP_START

from .context import FormPageContext
from . import confirm, detail, start


_STEP_RENDERERS = {
    STEP_START: start.render_step,
    STEP_DETAIL: detail.render_step,
    STEP_CONFIRM: confirm.render_step,
}


def render_current_step(context: FormPageContext, step: str) -> None:
    renderer = _STEP_RENDERERS.get(step)
    if renderer is None:
        return
    renderer(context)


__all__ = ["FormPageContext", "render_current_step"]
