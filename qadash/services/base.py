"""
Shared plumbing for services.

Services hold the request-handling logic: they take the caller's session
snapshot, check permissions, and read/write records through a typed
``Repository``. They raise ``qadash.core.errors`` exceptions and never
build HTTP responses themselves.
"""

from __future__ import annotations

from typing import Any, Generic, Iterable, TypeVar

from qadash.core.errors import ValidationError
from qadash.core.models import Record, TeamMember, User
from qadash.storage.base import Collections, RecordStore

MIN_PASSWORD_LENGTH = 6

R = TypeVar("R", bound=Record)


class Repository(Generic[R]):
    """Typed access to one collection of a RecordStore."""

    def __init__(self, store: RecordStore, collection: str, model: type[R]):
        self.store = store
        self.collection = collection
        self.model = model

    async def all(self) -> list[R]:
        return [self.model.from_record(r) for r in await self.store.list(self.collection)]

    async def get(self, id: int) -> R | None:
        data = await self.store.get(self.collection, id)
        return self.model.from_record(data) if data is not None else None

    async def create(self, data: dict[str, Any]) -> R:
        """
        Validate and append a record. ``data`` uses snake_case keys and may
        omit ``id`` to have one assigned.
        """
        payload = dict(data)
        if payload.get("id") is None:
            payload["id"] = await self.store.next_id(self.collection)
        return await self.insert(self.model.model_validate(payload))

    async def insert(self, record: R) -> R:
        """Append an already-built record, keeping its id."""
        stored = await self.store.create(self.collection, record.to_record())
        return self.model.from_record(stored)

    async def save(self, record: R) -> R:
        await self.store.put(self.collection, record.to_record())
        return record

    async def delete(self, id: int) -> bool:
        return await self.store.delete(self.collection, id)


class UserRepository(Repository[User]):
    def __init__(self, store: RecordStore):
        super().__init__(store, Collections.USERS, User)

    async def find_by_email(self, email: str) -> User | None:
        return find_by_email(await self.all(), email)


class TeamMemberRepository(Repository[TeamMember]):
    def __init__(self, store: RecordStore):
        super().__init__(store, Collections.TEAM_MEMBERS, TeamMember)

    async def find_by_email(self, email: str) -> TeamMember | None:
        return find_by_email(await self.all(), email)


def find_by_email(records: Iterable[R], email: str) -> R | None:
    """Case-insensitive email lookup."""
    wanted = email.strip().lower()
    for record in records:
        if getattr(record, "email", "").lower() == wanted:
            return record
    return None


# =============================================================================
# Input validation
# =============================================================================


def is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def require_fields(payload: dict[str, Any], labels: dict[str, str]) -> None:
    """
    Raise listing every missing field.

    ``labels`` maps payload keys to the names used in the error message.
    """
    missing = [label for key, label in labels.items() if is_blank(payload.get(key))]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")


def require_min_length(value: str, message: str, min_len: int = MIN_PASSWORD_LENGTH) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(message)
    return value
