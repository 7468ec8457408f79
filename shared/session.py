from typing import Optional

from fastapi import Header

# Callers that send no session header all share this cart and order history
DEFAULT_SESSION_ID = "default-session"


def resolve_session_id(session_id: Optional[str]) -> str:
    """Return the caller's session id, or the default session when absent."""
    return session_id or DEFAULT_SESSION_ID


def get_session_id(x_session_id: Optional[str] = Header(None)) -> str:
    """Extract session ID from header"""
    return resolve_session_id(x_session_id)


def get_optional_session_id(x_session_id: Optional[str] = Header(None)) -> Optional[str]:
    """Session ID from header, or None for global (unscoped) views."""
    return x_session_id or None
