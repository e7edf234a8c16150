"""Social-media service boundary.

Clients are built per task from the user's credentials (or anonymously for
read-only calls). Every method may fail; callers treat all failures the
same way at the task boundary.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol, TypeAlias

from .model import Credentials, Profile, SearchResult, Status


class SocialError(Exception):
    """Base error for social-media client failures."""

    pass


class SocialClient(Protocol):
    """Protocol for the social-media operations the commands consume."""

    async def verify_credentials(self) -> Profile:
        """Check the client's credentials, raising on rejection."""
        ...

    async def user(self, screen_name: str) -> Profile:
        ...

    async def user_timeline(self, screen_name: str, *, count: int) -> list[Status]:
        """Most recent posts by an account, newest first."""
        ...

    async def home_timeline(self, *, count: int = 1) -> list[Status]:
        """Most recent items from accounts the user follows, newest first."""
        ...

    async def create_friendship(self, screen_name: str) -> None:
        ...

    async def destroy_friendship(self, screen_name: str) -> None:
        ...

    async def post(self, text: str, *, source: str) -> Status:
        ...

    async def search(self, query: str, *, count: int) -> list[SearchResult]:
        ...


ClientFactory: TypeAlias = Callable[[Credentials | None], SocialClient]
"""Builds a client; None means an anonymous client for read-only calls."""
