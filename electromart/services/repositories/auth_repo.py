"""Auth Repository - Supabase GoTrue email/password operations."""
from typing import Any

from .base import BaseRepository


class AuthRepository(BaseRepository):
    """Thin wrapper over `client.auth`. Errors from GoTrue propagate."""

    async def sign_in(self, email: str, password: str) -> Any:
        """Return the GoTrue user for valid credentials, else None."""
        response = await self.client.auth.sign_in_with_password(
            {"email": email, "password": password}
        )
        return response.user

    async def sign_up(self, email: str, password: str) -> Any:
        response = await self.client.auth.sign_up({"email": email, "password": password})
        return response.user
