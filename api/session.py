"""
api/session.py — in-memory client sessions (cookie based)

Each browser gets a UUID session ID; each session owns exactly one
TestSession plus the OpenAI API key entered by that client.
Sessions idle for SESSION_TTL seconds expire, and their countdown is torn down.
"""

import threading
import time
import uuid
from typing import Any, Optional

from config import DEFAULT_TIME_LIMIT_SECONDS, OPENAI_API_KEY, SESSION_TTL
from jee_cbt.services.test_flow import TestSession

_lock = threading.Lock()
_sessions: dict[str, dict[str, Any]] = {}
_timestamps: dict[str, float] = {}

def _default_session_factory() -> TestSession:
    return TestSession(time_limit_s=DEFAULT_TIME_LIMIT_SECONDS)


# Overridable so tests can build sessions with a manual ticker.
session_factory = _default_session_factory


def _new_state() -> dict[str, Any]:
    return {
        "api_key": OPENAI_API_KEY,
        "test": session_factory(),
    }


def create_session() -> str:
    """Create a new session and return its ID."""
    sid = uuid.uuid4().hex
    with _lock:
        _sessions[sid] = _new_state()
        _timestamps[sid] = time.time()
    return sid


def get_session(sid: str) -> Optional[dict[str, Any]]:
    """Session data for sid. None if missing or expired."""
    expired = None
    with _lock:
        if sid not in _sessions:
            return None
        if time.time() - _timestamps[sid] > SESSION_TTL:
            expired = _sessions.pop(sid)
            del _timestamps[sid]
        else:
            _timestamps[sid] = time.time()  # refresh on access
            return _sessions[sid]
    expired["test"].teardown()
    return None


def get(sid: str, key: str, default=None):
    """Read a value from the session."""
    session = get_session(sid)
    if session is None:
        return default
    return session.get(key, default)


def put(sid: str, key: str, value) -> None:
    """Write a value to the session."""
    with _lock:
        if sid in _sessions:
            _sessions[sid][key] = value
            _timestamps[sid] = time.time()


def get_test(sid: str) -> TestSession:
    """The session's TestSession. A missing session gets a fresh one."""
    session = get_session(sid)
    if session is None:
        with _lock:
            session = _sessions.setdefault(sid, _new_state())
            _timestamps[sid] = time.time()
    return session["test"]


def reset(sid: str) -> None:
    """Throw away the test attempt (API key is kept)."""
    old = None
    with _lock:
        if sid in _sessions:
            old = _sessions[sid]["test"]
            saved_key = _sessions[sid].get("api_key", "")
            _sessions[sid] = _new_state()
            _sessions[sid]["api_key"] = saved_key
            _timestamps[sid] = time.time()
    if old is not None:
        old.teardown()


def cleanup_expired() -> int:
    """Drop expired sessions. Returns how many were removed."""
    now = time.time()
    dropped: list[TestSession] = []
    with _lock:
        expired = [sid for sid, ts in _timestamps.items() if now - ts > SESSION_TTL]
        for sid in expired:
            dropped.append(_sessions.pop(sid)["test"])
            del _timestamps[sid]
    for test in dropped:
        test.teardown()
    return len(dropped)


def clear_all() -> None:
    """Tear down every session (app shutdown)."""
    with _lock:
        dropped = [s["test"] for s in _sessions.values()]
        _sessions.clear()
        _timestamps.clear()
    for test in dropped:
        test.teardown()
