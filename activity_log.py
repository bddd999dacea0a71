"""Activity logging helpers backed by Firestore."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any, Mapping, MutableMapping, Sequence

from google.cloud import firestore

from google_credentials import get_service_account_credentials

_LOGGER = logging.getLogger(__name__)

ACTIVITY_LOG_ENABLED = (os.getenv("ACTIVITY_LOG_ENABLED", "false").strip().lower() in {"1", "true", "yes"})
_ACTIVITY_COLLECTION_RAW = os.getenv("FIRESTORE_ACTIVITY_COLLECTION", "form_activity").strip()
ACTIVITY_LOG_COLLECTION = _ACTIVITY_COLLECTION_RAW or "form_activity"

GCP_PROJECT_ID = (os.getenv("GCP_PROJECT_ID") or os.getenv("FIRESTORE_PROJECT_ID") or "").strip() or None

_PARAM_SLOTS = 3

_ACTIVITY_LOG_ACTIVE = False
_ACTIVITY_DISABLE_REASON: str | None = None


@dataclass(slots=True)
class ActivityLogEntry:
    """Structured representation of a recorded form event."""

    id: str
    type: str
    action: str
    result: str
    session_id: str | None
    client_ip: str | None
    timestamp: datetime
    params: tuple[str | None, ...]


def _ensure_firestore_ready() -> None:
    if GCP_PROJECT_ID:
        return

    credentials = get_service_account_credentials()
    project_id = getattr(credentials, "project_id", "") if credentials else ""
    if project_id:
        return
    raise RuntimeError(
        "Project ID for Firestore activity logging is not configured. Set GCP_PROJECT_ID via environment or credentials."
    )


@lru_cache(maxsize=1)
def _get_firestore_client():
    _ensure_firestore_ready()
    client_kwargs: MutableMapping[str, Any] = {}
    credentials = get_service_account_credentials()
    if credentials is not None:
        client_kwargs["credentials"] = credentials
    if GCP_PROJECT_ID:
        client_kwargs["project"] = GCP_PROJECT_ID
    return firestore.Client(**client_kwargs)


def _get_activity_collection():
    return _get_firestore_client().collection(ACTIVITY_LOG_COLLECTION)


def _disable_logging(reason: str) -> None:
    global _ACTIVITY_LOG_ACTIVE, _ACTIVITY_DISABLE_REASON
    if _ACTIVITY_LOG_ACTIVE or ACTIVITY_LOG_ENABLED:
        _LOGGER.warning("Disabling activity logging: %s", reason)
    _ACTIVITY_LOG_ACTIVE = False
    _ACTIVITY_DISABLE_REASON = reason


def init_activity_log() -> None:
    """Prepare Firestore collection access for activity logging."""

    global _ACTIVITY_LOG_ACTIVE, _ACTIVITY_DISABLE_REASON
    if not ACTIVITY_LOG_ENABLED:
        _ACTIVITY_LOG_ACTIVE = False
        _ACTIVITY_DISABLE_REASON = "ACTIVITY_LOG_ENABLED is false"
        return

    try:
        collection = _get_activity_collection()
        list(collection.limit(1).stream())  # pragma: no cover - warm up
    except Exception as exc:  # pragma: no cover - initialization failure surfaced later
        _disable_logging(str(exc))
        return

    _ACTIVITY_LOG_ACTIVE = True
    _ACTIVITY_DISABLE_REASON = None
    _LOGGER.debug("Activity logging enabled using Firestore collection '%s'", ACTIVITY_LOG_COLLECTION)


def is_activity_logging_enabled() -> bool:
    return _ACTIVITY_LOG_ACTIVE


def get_activity_logging_status() -> tuple[bool, str | None]:
    return _ACTIVITY_LOG_ACTIVE, _ACTIVITY_DISABLE_REASON


def _normalize_string(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def log_event(
    *,
    type: str,
    action: str,
    result: str,
    session_id: str | None,
    params: Sequence[str | None] | None = None,
    client_ip: str | None = None,
    metadata: Mapping[str, Any] | None = None,
) -> ActivityLogEntry | None:
    """Write one form event to Firestore.

    Returns the recorded entry, or ``None`` when logging is disabled or the
    write fails. A failed write disables logging for the rest of the process.
    """

    if not _ACTIVITY_LOG_ACTIVE:
        return None

    slots = list(params or [])[:_PARAM_SLOTS]
    slots += [None] * (_PARAM_SLOTS - len(slots))
    normalized_params = tuple(_normalize_string(value) or None for value in slots)

    now = datetime.now(timezone.utc)
    payload: MutableMapping[str, Any] = {
        "type": _normalize_string(type) or "unknown",
        "action": _normalize_string(action) or "unknown",
        "result": "fail" if _normalize_string(result).lower() in {"fail", "failure", "error"} else "success",
        "session_id": _normalize_string(session_id) or None,
        "client_ip": _normalize_string(client_ip) or None,
        "timestamp": now,
        "timestamp_iso": now.isoformat(),
    }
    for idx, value in enumerate(normalized_params, start=1):
        payload[f"param{idx}"] = value
    if metadata:
        payload["metadata"] = dict(metadata)

    try:
        doc_ref = _get_activity_collection().document()
        doc_ref.set(payload)
    except Exception as exc:  # pragma: no cover - avoid hard failure path in UI
        _disable_logging(str(exc))
        _LOGGER.warning("Failed to log activity event (%s: %s): %s", type, action, exc)
        return None

    return ActivityLogEntry(
        id=str(getattr(doc_ref, "id", "")),
        type=payload["type"],
        action=payload["action"],
        result=payload["result"],
        session_id=payload["session_id"],
        client_ip=payload["client_ip"],
        timestamp=now,
        params=normalized_params,
    )


__all__ = [
    "ACTIVITY_LOG_COLLECTION",
    "ACTIVITY_LOG_ENABLED",
    "ActivityLogEntry",
    "get_activity_logging_status",
    "init_activity_log",
    "is_activity_logging_enabled",
    "log_event",
]
