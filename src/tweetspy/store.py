"""Storage collaborator for per-user records.

The command core only talks to storage through the UserStore protocol.
InMemoryUserStore is a complete implementation suitable for a single
process; hosts with a database supply their own.
"""

from __future__ import annotations

import dataclasses
from collections import Counter
from typing import Any, Protocol

from .model import TrackCount, User, UserRecord

USER_FIELDS: frozenset[str] = frozenset(
    f.name for f in dataclasses.fields(User) if f.name != "identity"
)


class UserStore(Protocol):
    """Protocol for persisted user state."""

    async def get(self, identity: str) -> User | None:
        """Return a snapshot of the user, or None if unknown."""
        ...

    async def create(self, user: User) -> None:
        """Persist a new user record."""
        ...

    async def update(self, identity: str, fields: dict[str, Any]) -> None:
        """Write one or more named fields in a single atomic call."""
        ...

    async def add_track(self, identity: str, query: str) -> bool:
        """Add a track. Returns False if the user already tracked it."""
        ...

    async def remove_track(self, identity: str, query: str) -> bool:
        """Remove a track. Returns False if the user was not tracking it."""
        ...

    async def tracks(self, identity: str) -> list[str]:
        """Return the user's track queries in no particular order."""
        ...

    async def top_tracks(self, limit: int) -> list[TrackCount]:
        """Return the most watched queries, highest count first."""
        ...


class InMemoryUserStore:
    """Dict-backed UserStore.

    Reads return copies so callers see snapshot semantics, the same as a
    database-backed store would give them.
    """

    def __init__(self) -> None:
        self._records: dict[str, UserRecord] = {}

    def _record(self, identity: str) -> UserRecord:
        try:
            return self._records[identity]
        except KeyError:
            raise KeyError(f"Unknown user {identity!r}") from None

    async def get(self, identity: str) -> User | None:
        record = self._records.get(identity)
        if record is None:
            return None
        return dataclasses.replace(record.user)

    async def create(self, user: User) -> None:
        if user.identity in self._records:
            raise ValueError(f"User {user.identity!r} already exists")
        self._records[user.identity] = UserRecord(user=dataclasses.replace(user))

    async def update(self, identity: str, fields: dict[str, Any]) -> None:
        unknown = set(fields) - USER_FIELDS
        if unknown:
            raise ValueError(f"Unknown user fields: {', '.join(sorted(unknown))}")
        record = self._record(identity)
        for name, value in fields.items():
            setattr(record.user, name, value)

    async def add_track(self, identity: str, query: str) -> bool:
        record = self._record(identity)
        if query in record.tracks:
            return False
        record.tracks.add(query)
        return True

    async def remove_track(self, identity: str, query: str) -> bool:
        record = self._record(identity)
        if query not in record.tracks:
            return False
        record.tracks.discard(query)
        return True

    async def tracks(self, identity: str) -> list[str]:
        return list(self._record(identity).tracks)

    async def top_tracks(self, limit: int) -> list[TrackCount]:
        counts: Counter[str] = Counter()
        for record in self._records.values():
            counts.update(record.tracks)
        ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
        return [TrackCount(query=q, watchers=n) for q, n in ranked[:limit]]
