"""Base class for records persisted in the key-value store."""

import uuid
from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def utc_now() -> datetime:
    return datetime.now(UTC)


class StoredRecord(BaseModel):
    """Shared id / created_at fields and camelCase storage keys.

    Records are written with ``model_dump(mode="json", by_alias=True)`` so the
    stored JSON keeps the ``fullName`` / ``cropDataId`` / ``createdAt`` layout,
    and read back with ``model_validate`` (aliases and field names accepted).
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    created_at: datetime = Field(default_factory=utc_now)

    def to_storage(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
