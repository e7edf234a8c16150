"""Value types shared by the command core and its collaborators."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from pydantic import SecretStr


@dataclass(slots=True)
class User:
    """Snapshot of one user's persisted fields.

    Handlers receive a snapshot read at dispatch time; it may be stale if
    another in-flight command for the same user has written since.
    """

    identity: str
    active: bool = True
    auto_post: bool = False
    language: str | None = None
    username: str | None = None
    # Reversibly encoded, see gateway.encode_password
    password: str | None = None
    friend_timeline_id: int | None = None
    next_scan: datetime | None = None
    # Presence status as last reported by the chat transport
    status: str | None = None


@dataclass(frozen=True, slots=True)
class Credentials:
    """Decoded social-media credentials for one user."""

    username: str
    password: SecretStr


@dataclass(frozen=True, slots=True)
class Profile:
    screen_name: str
    name: str | None = None
    location: str | None = None


@dataclass(frozen=True, slots=True)
class Status:
    """A posted item as returned by the social network."""

    id: int
    text: str
    author: str


@dataclass(frozen=True, slots=True)
class SearchResult:
    from_user: str
    text: str


@dataclass(frozen=True, slots=True)
class TrackCount:
    query: str
    watchers: int


@dataclass(slots=True)
class UserRecord:
    """Storage-side record: the user fields plus the owned track set."""

    user: User
    tracks: set[str] = field(default_factory=set)
