"""Per-session key/value storage with memory, sqlite and Firestore backends."""
from __future__ import annotations

import logging
import os
import sqlite3
import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from pathlib import Path
from typing import Callable, Protocol

from google.cloud import firestore

from google_credentials import get_service_account_credentials

_LOGGER = logging.getLogger(__name__)

SESSION_STORE_MODE = (os.getenv("SESSION_STORE_MODE") or "memory").strip().lower()
SESSION_DB_PATH = Path((os.getenv("SESSION_DB_PATH") or "session_state.db").strip())

_IDLE_TIMEOUT_RAW = (os.getenv("SESSION_IDLE_TIMEOUT_MINUTES") or "20").strip()
try:
    SESSION_IDLE_TIMEOUT = timedelta(minutes=int(_IDLE_TIMEOUT_RAW))
except ValueError:
    _LOGGER.warning("Invalid SESSION_IDLE_TIMEOUT_MINUTES=%r, using 20 minutes", _IDLE_TIMEOUT_RAW)
    SESSION_IDLE_TIMEOUT = timedelta(minutes=20)

_PROJECT_ID_RAW = (
    os.getenv("GCP_PROJECT_ID")
    or os.getenv("FIRESTORE_PROJECT_ID")
    or ""
)
GCP_PROJECT_ID = _PROJECT_ID_RAW.strip()
_SESSION_COLLECTION_RAW = (os.getenv("FIRESTORE_SESSION_COLLECTION") or "form_sessions").strip()
FIRESTORE_SESSION_COLLECTION = _SESSION_COLLECTION_RAW or "form_sessions"

_MEMORY_MODES = {"memory"}
_LOCAL_MODES = {"local", "sqlite"}
_REMOTE_MODES = {"remote", "firestore"}

_SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS sessions (
    session_id TEXT PRIMARY KEY,
    updated_at_utc TEXT NOT NULL
);
CREATE TABLE IF NOT EXISTS session_values (
    session_id TEXT NOT NULL,
    key TEXT NOT NULL,
    value TEXT NOT NULL,
    PRIMARY KEY (session_id, key)
);
"""

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _coerce_datetime(value) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        dt = value
    else:
        try:
            dt = datetime.fromisoformat(str(value))
        except ValueError:
            return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def _to_db_timestamp(value: datetime) -> str:
    # Fixed-width UTC text so sqlite can compare timestamps as strings.
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


def _is_expired(updated_at: datetime | None, now: datetime, idle_timeout: timedelta) -> bool:
    if updated_at is None:
        return True
    return now - updated_at > idle_timeout


class SessionStore(Protocol):
    """Text values scoped by an opaque session identifier."""

    def get_text(self, session_id: str, key: str) -> str | None: ...

    def set_text(self, session_id: str, key: str, text: str) -> None: ...


@dataclass(slots=True)
class _MemorySession:
    updated_at: datetime
    values: dict[str, str] = field(default_factory=dict)


class MemorySessionStore:
    """Process-local store; contents are lost when the server restarts."""

    def __init__(self, *, idle_timeout: timedelta = SESSION_IDLE_TIMEOUT, clock: Clock = _utcnow):
        self._sessions: dict[str, _MemorySession] = {}
        self._lock = threading.Lock()
        self._idle_timeout = idle_timeout
        self._clock = clock

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def _purge_expired(self, now: datetime) -> None:
        expired = [
            session_id
            for session_id, session in self._sessions.items()
            if _is_expired(session.updated_at, now, self._idle_timeout)
        ]
        for session_id in expired:
            del self._sessions[session_id]

    def get_text(self, session_id: str, key: str) -> str | None:
        now = self._clock()
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return None
            if _is_expired(session.updated_at, now, self._idle_timeout):
                del self._sessions[session_id]
                return None
            session.updated_at = now
            return session.values.get(key)

    def set_text(self, session_id: str, key: str, text: str) -> None:
        now = self._clock()
        with self._lock:
            self._purge_expired(now)
            session = self._sessions.get(session_id)
            if session is None:
                session = _MemorySession(updated_at=now)
                self._sessions[session_id] = session
            session.values[key] = text
            session.updated_at = now


def _connect(db_path: Path) -> sqlite3.Connection:
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn


class SqliteSessionStore:
    """Session values persisted in a local sqlite file."""

    def __init__(
        self,
        db_path: Path = SESSION_DB_PATH,
        *,
        idle_timeout: timedelta = SESSION_IDLE_TIMEOUT,
        clock: Clock = _utcnow,
    ):
        self.db_path = Path(db_path)
        self._idle_timeout = idle_timeout
        self._clock = clock
        with _connect(self.db_path) as conn:
            conn.executescript(_SCHEMA_SQL)
            conn.commit()

    def _drop_session(self, conn: sqlite3.Connection, session_id: str) -> None:
        conn.execute("DELETE FROM session_values WHERE session_id = ?", (session_id,))
        conn.execute("DELETE FROM sessions WHERE session_id = ?", (session_id,))

    def _purge_expired(self, conn: sqlite3.Connection, now: datetime) -> None:
        cutoff = _to_db_timestamp(now - self._idle_timeout)
        conn.execute(
            """
            DELETE FROM session_values WHERE session_id IN (
                SELECT session_id FROM sessions WHERE updated_at_utc < ?
            )
            """,
            (cutoff,),
        )
        conn.execute("DELETE FROM sessions WHERE updated_at_utc < ?", (cutoff,))

    def get_text(self, session_id: str, key: str) -> str | None:
        now = self._clock()
        with _connect(self.db_path) as conn:
            row = conn.execute(
                "SELECT updated_at_utc FROM sessions WHERE session_id = ?",
                (session_id,),
            ).fetchone()
            if row is None:
                return None
            if _is_expired(_coerce_datetime(row["updated_at_utc"]), now, self._idle_timeout):
                self._drop_session(conn, session_id)
                conn.commit()
                return None
            conn.execute(
                "UPDATE sessions SET updated_at_utc = ? WHERE session_id = ?",
                (_to_db_timestamp(now), session_id),
            )
            value_row = conn.execute(
                "SELECT value FROM session_values WHERE session_id = ? AND key = ?",
                (session_id, key),
            ).fetchone()
            conn.commit()
        return None if value_row is None else str(value_row["value"])

    def set_text(self, session_id: str, key: str, text: str) -> None:
        now = self._clock()
        with _connect(self.db_path) as conn:
            self._purge_expired(conn, now)
            conn.execute(
                """
                INSERT INTO sessions (session_id, updated_at_utc) VALUES (?, ?)
                ON CONFLICT(session_id) DO UPDATE SET updated_at_utc = excluded.updated_at_utc
                """,
                (session_id, _to_db_timestamp(now)),
            )
            conn.execute(
                """
                INSERT INTO session_values (session_id, key, value) VALUES (?, ?, ?)
                ON CONFLICT(session_id, key) DO UPDATE SET value = excluded.value
                """,
                (session_id, key, text),
            )
            conn.commit()


def _ensure_remote_ready() -> None:
    if GCP_PROJECT_ID:
        return

    credentials = get_service_account_credentials()
    project_id = getattr(credentials, "project_id", "") if credentials else ""
    if not project_id:
        raise RuntimeError(
            "GCP_PROJECT_ID must be set or provided via service-account credentials for session storage."
        )


@lru_cache(maxsize=1)
def _get_firestore_client():
    _ensure_remote_ready()
    client_kwargs: dict[str, object] = {}
    credentials = get_service_account_credentials()
    if credentials is not None:
        client_kwargs["credentials"] = credentials
    if GCP_PROJECT_ID:
        client_kwargs["project"] = GCP_PROJECT_ID
    elif credentials is not None:
        project_id = getattr(credentials, "project_id", "")
        if project_id:
            client_kwargs["project"] = project_id
    return firestore.Client(**client_kwargs)


def reset_session_store_cache() -> None:
    """Testing helper to reset cached Firestore clients."""

    _get_firestore_client.cache_clear()


class FirestoreSessionStore:
    """One Firestore document per session, values kept in a ``values`` map."""

    def __init__(
        self,
        collection_name: str = FIRESTORE_SESSION_COLLECTION,
        *,
        idle_timeout: timedelta = SESSION_IDLE_TIMEOUT,
        clock: Clock = _utcnow,
    ):
        self._collection = _get_firestore_client().collection(collection_name)
        self._idle_timeout = idle_timeout
        self._clock = clock

    def _purge_expired(self, now: datetime) -> None:
        query = self._collection.where("updated_at_utc", "<", now - self._idle_timeout)
        for snapshot in query.stream():
            snapshot.reference.delete()

    def get_text(self, session_id: str, key: str) -> str | None:
        now = self._clock()
        doc_ref = self._collection.document(session_id)
        snapshot = doc_ref.get()
        if not snapshot.exists:
            return None
        data = snapshot.to_dict() or {}
        if _is_expired(_coerce_datetime(data.get("updated_at_utc")), now, self._idle_timeout):
            doc_ref.delete()
            return None
        doc_ref.update({"updated_at_utc": now})
        values = data.get("values") or {}
        value = values.get(key)
        return None if value is None else str(value)

    def set_text(self, session_id: str, key: str, text: str) -> None:
        now = self._clock()
        self._purge_expired(now)
        doc_ref = self._collection.document(session_id)
        doc_ref.set({"values": {key: text}, "updated_at_utc": now}, merge=True)


def create_session_store(
    mode: str | None = None,
    *,
    db_path: Path = SESSION_DB_PATH,
    idle_timeout: timedelta = SESSION_IDLE_TIMEOUT,
) -> SessionStore:
    """Build the backend named by ``mode`` (defaults to ``SESSION_STORE_MODE``)."""

    selected = (mode or SESSION_STORE_MODE).strip().lower()
    if selected in _LOCAL_MODES:
        _LOGGER.debug("Using sqlite session store at %s", db_path)
        return SqliteSessionStore(db_path, idle_timeout=idle_timeout)
    if selected in _REMOTE_MODES:
        _LOGGER.debug("Using Firestore session collection '%s'", FIRESTORE_SESSION_COLLECTION)
        return FirestoreSessionStore(idle_timeout=idle_timeout)
    if selected not in _MEMORY_MODES:
        _LOGGER.warning("Unknown SESSION_STORE_MODE '%s'; falling back to memory", selected)
    return MemorySessionStore(idle_timeout=idle_timeout)


__all__ = [
    "FIRESTORE_SESSION_COLLECTION",
    "FirestoreSessionStore",
    "GCP_PROJECT_ID",
    "MemorySessionStore",
    "SESSION_DB_PATH",
    "SESSION_IDLE_TIMEOUT",
    "SESSION_STORE_MODE",
    "SessionStore",
    "SqliteSessionStore",
    "create_session_store",
    "reset_session_store_cache",
]
