"""Session check."""

from __future__ import annotations

from fleet_console.client.cache import QueryCache
from fleet_console.client.fetcher import RemoteFetcher
from fleet_console.client.query_keys import QueryKey
from fleet_console.resources.records import SessionUser

AUTH_ME_PATH = "/api/auth/me"
AUTH_ME_KEY: QueryKey = (AUTH_ME_PATH,)

# Cached in place of a user so a missing session counts as loaded data
ANONYMOUS = "anonymous"


class SessionClient:
    def __init__(self, fetcher: RemoteFetcher, cache: QueryCache):
        self.fetcher = fetcher
        self.cache = cache

    async def me(self) -> SessionUser | None:
        """The signed-in user, or None when the session is missing or expired."""

        async def query_fn() -> SessionUser | str:
            body = await self.fetcher.get_json(
                AUTH_ME_PATH, fallback="Failed to fetch session", allow_unauthorized=True
            )
            if not isinstance(body, dict) or not body.get("user"):
                return ANONYMOUS
            return SessionUser.model_validate(body["user"])

        user = await self.cache.fetch_query(AUTH_ME_KEY, query_fn)
        return user if isinstance(user, SessionUser) else None
