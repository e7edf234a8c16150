"""User State Gateway.

Owns the rules for reading and mutating per-user state. Each write is a
single targeted store call. Synchronous handlers skip writes that would
not change the snapshot; queued tasks write unconditionally. Credentials
are kept in their encoded form at rest.
"""

from __future__ import annotations

import base64
import binascii
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from pydantic import SecretStr

from .logging import get_logger
from .model import Credentials, TrackCount, User

if TYPE_CHECKING:
    from collections.abc import Callable

    from .store import UserStore
    from .transport import ChatTransport

logger = get_logger(__name__)


def encode_password(password: str) -> str:
    """Obfuscate a password for storage.

    This is a reversible encoding, not encryption. Anyone with access to
    the store can recover the password.
    """
    return base64.b64encode(password.encode("utf-8")).decode("ascii")


def decode_password(encoded: str) -> str:
    """Reverse ``encode_password``.

    Whitespace is ignored, so encodings wrapped at a fixed line width
    still decode.
    """
    compact = "".join(encoded.split())
    try:
        return base64.b64decode(compact.encode("ascii"), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeError) as e:
        raise ValueError("Stored password is not validly encoded") from e


def _blank(value: str | None) -> bool:
    return value is None or not value.strip()


def is_logged_in(user: User) -> bool:
    return not (_blank(user.username) or _blank(user.password))


def _utcnow() -> datetime:
    return datetime.now(UTC)


class UserGateway:
    """Read/mutate surface over persisted user records."""

    def __init__(
        self,
        store: UserStore,
        transport: ChatTransport,
        *,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._store = store
        self._transport = transport
        self._clock = clock

    async def load(self, identity: str) -> User:
        """Return the user for an identity, creating a default record."""
        user = await self._store.get(identity)
        if user is None:
            user = User(identity=identity)
            await self._store.create(user)
            logger.info("gateway.user_created", identity=identity)
        return user

    async def update(self, user: User, **fields: Any) -> bool:
        """Persist the fields that differ from the snapshot.

        The snapshot is updated in place. Returns True if a write happened.
        """
        changed = {
            name: value
            for name, value in fields.items()
            if getattr(user, name) != value
        }
        if not changed:
            return False
        await self._store.update(user.identity, changed)
        for name, value in changed.items():
            setattr(user, name, value)
        logger.debug(
            "gateway.updated", identity=user.identity, fields=sorted(changed)
        )
        return True

    async def write(self, user: User, **fields: Any) -> None:
        """Persist the fields without comparing against the snapshot.

        Queued tasks use this, since their snapshot dates from dispatch time.
        """
        await self._store.update(user.identity, fields)
        for name, value in fields.items():
            setattr(user, name, value)
        logger.debug("gateway.written", identity=user.identity, fields=sorted(fields))

    async def set_active(self, user: User, active: bool) -> bool:
        """Flip the active flag, announcing availability only on change."""
        if user.active == active:
            return False
        user.active = active
        await self._transport.availability_changed(user)
        await self._store.update(user.identity, {"active": active})
        return True

    async def save_credentials(self, user: User, username: str, password: str) -> None:
        await self.write(
            user,
            username=username,
            password=encode_password(password),
            next_scan=self._clock(),
        )

    async def clear_credentials(self, user: User) -> None:
        # Both fields go together so they are never half-present.
        await self._store.update(user.identity, {"username": None, "password": None})
        user.username = None
        user.password = None

    def credentials(self, user: User) -> Credentials | None:
        """Decoded credentials, or None when absent or unreadable."""
        if user.username is None or user.password is None or not is_logged_in(user):
            return None
        try:
            password = decode_password(user.password)
        except ValueError:
            logger.warning("gateway.bad_password_encoding", identity=user.identity)
            return None
        return Credentials(username=user.username, password=SecretStr(password))

    async def track(self, user: User, query: str) -> bool:
        return await self._store.add_track(user.identity, query)

    async def untrack(self, user: User, query: str) -> bool:
        return await self._store.remove_track(user.identity, query)

    async def tracks(self, user: User) -> list[str]:
        return sorted(await self._store.tracks(user.identity))

    async def top_tracks(self, limit: int) -> list[TrackCount]:
        return await self._store.top_tracks(limit)
