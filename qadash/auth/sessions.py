"""
Session registry - opaque bearer tokens mapped to a user snapshot.

Sessions live in memory and are lost on restart. The store is an interface
so handlers receive it by injection and a persistent backend can replace the
in-memory one without touching them.

Lifecycle of a token:
    Active   - issued, not yet past ``expires``
    Expired  - past ``expires``; indistinguishable from absent, and removed
               by the lookup that notices it
    Deleted  - logged out
"""

from __future__ import annotations

import secrets
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from qadash.auth.positions import TierPosition, normalize
from qadash.core.models import User
from qadash.core.utils import utc_now


# 256 bits of entropy, hex-encoded
TOKEN_BYTES = 32


def generate_token() -> str:
    return secrets.token_hex(TOKEN_BYTES)


# =============================================================================
# Models
# =============================================================================


class SessionUser(BaseModel):
    """
    The identity a token resolves to.

    A snapshot taken at login: later edits to the user record are not
    reflected until the next login.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int
    email: str
    name: str
    role: str = ""
    position: TierPosition
    legacy_position: str
    team_id: int | None = None
    needs_password_reset: bool = False

    @classmethod
    def from_user(cls, user: User) -> SessionUser:
        """
        Raises:
            UnknownPositionError: the stored position is not recognised
        """
        return cls(
            id=user.id,
            email=user.email,
            name=user.name,
            role=user.role,
            position=normalize(user.position),
            legacy_position=user.position,
            team_id=user.team_id,
            needs_password_reset=user.needs_password_reset,
        )

    def to_public(self) -> dict[str, Any]:
        """Wire form returned by login/verify."""
        return self.model_dump(by_alias=True, mode="json", exclude={"legacy_position"})


@dataclass
class Session:
    token: str
    user: SessionUser
    expires: datetime

    def is_expired(self, now: datetime | None = None) -> bool:
        return (now or utc_now()) >= self.expires


# =============================================================================
# Session Store
# =============================================================================


class SessionStore(ABC):
    """Token → session storage."""

    @abstractmethod
    async def get(self, token: str) -> Session | None:
        """Return the active session for a token, or None if absent or expired."""
        pass

    @abstractmethod
    async def put(self, session: Session) -> None:
        pass

    @abstractmethod
    async def delete(self, token: str) -> bool:
        pass

    @abstractmethod
    async def sweep_expired(self) -> int:
        """Drop every expired session, returning how many were removed."""
        pass


class InMemorySessionStore(SessionStore):
    """Sessions in a process-local dict."""

    def __init__(self):
        self._sessions: dict[str, Session] = {}

    async def get(self, token: str) -> Session | None:
        session = self._sessions.get(token)
        if session is None:
            return None
        if session.is_expired():
            del self._sessions[token]
            return None
        return session

    async def put(self, session: Session) -> None:
        self._sessions[session.token] = session

    async def delete(self, token: str) -> bool:
        return self._sessions.pop(token, None) is not None

    async def sweep_expired(self) -> int:
        now = utc_now()
        expired = [t for t, s in self._sessions.items() if s.is_expired(now)]
        for token in expired:
            del self._sessions[token]
        return len(expired)

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, token: object) -> bool:
        return token in self._sessions


class SessionRegistry:
    """Issues and resolves tokens on top of a SessionStore."""

    def __init__(self, store: SessionStore, ttl: timedelta = timedelta(hours=24)):
        self.store = store
        self.ttl = ttl

    async def issue(self, user: SessionUser) -> Session:
        """Create a brand-new session. Existing sessions of the user are kept."""
        session = Session(
            token=generate_token(),
            user=user,
            expires=utc_now() + self.ttl,
        )
        await self.store.put(session)
        return session

    async def resolve(self, token: str | None) -> Session | None:
        if not token:
            return None
        return await self.store.get(token)

    async def revoke(self, token: str | None) -> bool:
        if not token:
            return False
        return await self.store.delete(token)


# =============================================================================
# Password Reset Codes
# =============================================================================


class ResetCodeRegistry:
    """
    Short reset codes handed out by forgot-password.

    Codes are kept per email; issuing a new one replaces the previous code.
    """

    def __init__(self, ttl: timedelta = timedelta(hours=1)):
        self.ttl = ttl
        self._codes: dict[str, tuple[str, datetime]] = {}  # email -> (code, expires)

    def issue(self, email: str) -> str:
        code = secrets.token_hex(4).upper()
        self._codes[email.lower()] = (code, utc_now() + self.ttl)
        return code

    def consume(self, email: str, code: str | None) -> bool:
        """Check a code and invalidate it. Expired codes are dropped."""
        entry = self._codes.get(email.lower())
        if entry is None:
            return False

        expected, expires = entry
        if utc_now() > expires:
            del self._codes[email.lower()]
            return False
        if not code or not secrets.compare_digest(expected, code.strip().upper()):
            return False

        del self._codes[email.lower()]
        return True

    def discard(self, email: str) -> None:
        self._codes.pop(email.lower(), None)
