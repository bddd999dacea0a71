"""Locate Google service-account credentials for the Firestore backends."""
from __future__ import annotations

import json
import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping

import streamlit as st
from google.oauth2 import service_account

logger = logging.getLogger(__name__)

_REQUIRED_FIELDS = {"type", "project_id", "private_key", "client_email"}
_SECRET_SECTIONS = ("gcp_service_account", "google_credentials")
_ENV_JSON_KEYS = ("GOOGLE_CREDENTIALS_JSON", "GCP_SERVICE_ACCOUNT_INFO")
_DEFAULT_CREDENTIAL_FILE = Path("google-credential.json")


def _as_info(candidate: Any) -> dict[str, Any] | None:
    """Return a service-account mapping if ``candidate`` looks like one."""

    if isinstance(candidate, str):
        text = candidate.strip()
        if not text:
            return None
        try:
            candidate = json.loads(text)
        except ValueError:
            return None
    if not isinstance(candidate, Mapping):
        return None
    info = {str(key): value for key, value in candidate.items()}
    return info if _REQUIRED_FIELDS.issubset(info) else None


def _info_from_env() -> dict[str, Any] | None:
    for env_key in _ENV_JSON_KEYS:
        info = _as_info(os.getenv(env_key) or "")
        if info:
            return info
    return None


def _info_from_secrets() -> dict[str, Any] | None:
    try:
        secrets = st.secrets
        for section in _SECRET_SECTIONS:
            if section in secrets:
                info = _as_info(secrets[section])
                if info:
                    return info
    except FileNotFoundError:
        # No secrets.toml configured for this deployment.
        return None
    return None


def _credential_file() -> Path | None:
    env_path = os.getenv("GOOGLE_APPLICATION_CREDENTIALS")
    for path in (Path(env_path).expanduser() if env_path else None, _DEFAULT_CREDENTIAL_FILE):
        if path is not None and path.is_file():
            return path
    return None


@lru_cache(maxsize=1)
def get_service_account_credentials() -> service_account.Credentials | None:
    """Return credentials from a key file, the environment, or Streamlit secrets."""

    path = _credential_file()
    if path is not None:
        try:
            return service_account.Credentials.from_service_account_file(str(path))
        except ValueError as exc:
            logger.warning("Failed to load Google credentials from %s: %s", path, exc)

    info = _info_from_env() or _info_from_secrets()
    if info is None:
        return None
    try:
        return service_account.Credentials.from_service_account_info(info)
    except ValueError as exc:
        logger.warning("Failed to build Google credentials from mapping: %s", exc)
    return None


__all__ = ["get_service_account_credentials"]
