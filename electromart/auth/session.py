"""Bearer session tokens (in-memory, per process)."""
import secrets
from datetime import datetime, timezone, timedelta
from typing import Dict, Optional

from electromart.services.models import AuthUser

SESSION_TTL = timedelta(days=7)

_web_sessions: Dict[str, dict] = {}


def create_web_session(user: AuthUser) -> str:
    """Create a new session for an authenticated user and return the token."""
    session_token = secrets.token_urlsafe(32)
    now = datetime.now(timezone.utc)
    _web_sessions[session_token] = {
        "user_id": user.id,
        "email": user.email,
        "role": user.role,
        "created_at": now.isoformat(),
        "expires_at": (now + SESSION_TTL).isoformat(),
    }
    return session_token


def verify_web_session_token(token: str) -> Optional[AuthUser]:
    """Return the session's user, or None for unknown or expired tokens."""
    session = _web_sessions.get(token)
    if not session:
        return None

    expires_at = datetime.fromisoformat(session["expires_at"])
    if datetime.now(timezone.utc) > expires_at:
        del _web_sessions[token]
        return None

    return AuthUser(id=session["user_id"], email=session["email"], role=session["role"])


def revoke_web_session(token: str) -> None:
    _web_sessions.pop(token, None)
