"""Queue item and result models."""

import uuid
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator


class QueueItem(BaseModel):
    """An item held by the queue. Immutable once created."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: uuid.UUID = Field(..., description="Unique identifier of the item")
    payload: str = Field(..., description="Payload text supplied by the caller")
    enqueued_at: datetime = Field(..., alias="enqueuedAt", description="UTC time the item was enqueued")

    @field_validator("payload")
    @classmethod
    def reject_blank_payload(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("payload must not be blank")
        return value

    @field_validator("enqueued_at")
    @classmethod
    def normalize_to_utc(cls, value: datetime) -> datetime:
        # Naive timestamps in old snapshots are taken to be UTC
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        try:
            return value.astimezone(timezone.utc)
        except OverflowError as e:
            raise ValueError(f"enqueuedAt out of range: {value.isoformat()}") from e

    @classmethod
    def create(cls, payload: str, enqueued_at: datetime) -> "QueueItem":
        """Factory method to create a QueueItem with a fresh id."""
        return cls(id=uuid.uuid4(), payload=payload, enqueued_at=enqueued_at)

    def to_record(self) -> dict:
        """Serialize to the camelCase dict stored in snapshots."""
        return self.model_dump(mode="json", by_alias=True)


class EnqueueResult(BaseModel):
    """Outcome of an enqueue: the item and its approximate position."""

    model_config = ConfigDict(frozen=True)

    item: QueueItem
    position: int = Field(..., ge=1, description="Queue length right after the append")


class QueueStatus(BaseModel):
    """Point-in-time queue size."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    count: int = Field(..., ge=0)
    is_empty: bool = Field(..., alias="isEmpty")

    @classmethod
    def from_count(cls, count: int) -> "QueueStatus":
        return cls(count=count, is_empty=count == 0)
