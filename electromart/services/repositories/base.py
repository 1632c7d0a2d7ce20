"""Base repository with shared Supabase client."""

from supabase._async.client import AsyncClient


class BaseRepository:
    """Base class for all repositories.

    Holds the async Supabase client; every query is awaited.
    """

    def __init__(self, client: AsyncClient) -> None:
        self.client = client
