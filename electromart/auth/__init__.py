"""Authentication package."""
from .dependencies import verify_admin, verify_session
from .session import create_web_session, revoke_web_session, verify_web_session_token

__all__ = [
    "create_web_session",
    "revoke_web_session",
    "verify_web_session_token",
    "verify_session",
    "verify_admin",
]
