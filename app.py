# app.py
from __future__ import annotations

import logging
import os
from pathlib import Path

import streamlit as st
from dotenv import find_dotenv, load_dotenv

# Load project-level environment variables before importing modules that depend on them
ROOT_ENV = find_dotenv(usecwd=True)
if ROOT_ENV:
    load_dotenv(ROOT_ENV, override=False)
ENV_PATH = Path(__file__).resolve().parent / ".env"
if ENV_PATH.is_file():
    load_dotenv(ENV_PATH, override=False)

from activity_log import init_activity_log
from app_constants import FORM_STEPS
from session_proxy import FormSessionProxy, SessionDataError
from session_state import current_step, ensure_state, get_session_id
from session_store import SessionStore, create_session_store
from ui.form import FormPageContext, render_current_step
from utils.network import get_client_ip

logging.basicConfig(
    level=(os.getenv("LOG_LEVEL") or "INFO").strip().upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
_LOGGER = logging.getLogger("details_form")

APP_ENV = (os.getenv("APP_ENV") or "production").strip().lower()
SHOW_ERROR_DETAILS = APP_ENV in {"development", "dev"}

st.set_page_config(page_title="Your details", page_icon="📝", layout="centered")


@st.cache_resource
def get_session_store() -> SessionStore:
    return create_session_store()


@st.cache_resource
def start_activity_log() -> bool:
    init_activity_log()
    return True


start_activity_log()
ensure_state()

step = current_step()
session = FormSessionProxy(get_session_store(), get_session_id())
context = FormPageContext(session=session, client_ip=get_client_ip())

st.title("📝 Your details")
st.progress((FORM_STEPS.index(step) + 1) / len(FORM_STEPS))

try:
    render_current_step(context, step)
except SessionDataError as exc:
    _LOGGER.exception("Session data failure on step '%s' (session %s)", step, session.session_id)
    if SHOW_ERROR_DETAILS:
        st.exception(exc)
    else:
        st.error("Something went wrong while processing your request. Please try again later.")
    st.stop()
