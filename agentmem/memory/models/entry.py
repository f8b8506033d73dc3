"""Memory entry and metadata models."""

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from agentmem.memory.enums import MemoryCategory


def utc_now() -> datetime:
    """Return current UTC time."""
    return datetime.now(UTC)


def ensure_utc(moment: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment


class MemoryMetadata(BaseModel):
    """Attributes attached to every memory entry.

    agent_id is the logical owner and determines the remote scope; the
    remaining fields correlate an entry to a run, a category, or the page
    it came from.
    """

    model_config = ConfigDict(extra="ignore", validate_assignment=True)

    agent_id: str = Field(..., min_length=1, description="Logical owner")
    session_id: str | None = Field(default=None, description="Session correlation id")
    task_id: str | None = Field(default=None, description="Task correlation id")
    tab_id: int | None = Field(default=None, description="Browser tab the entry came from")
    category: MemoryCategory | None = Field(default=None, description="Entry category")
    tags: list[str] | None = Field(default=None, description="Free-form keywords")
    importance: float | None = Field(
        default=None, ge=0.0, le=1.0, description="Prioritization hint"
    )
    expires_at: datetime | None = Field(default=None, description="Advisory expiry")
    url: str | None = Field(default=None, description="Source page URL")
    site: str | None = Field(default=None, description="Source page host")
    tool_name: str | None = Field(default=None, description="Tool that produced the entry")

    @field_validator("expires_at")
    @classmethod
    def _expires_at_utc(cls, value: datetime | None) -> datetime | None:
        return ensure_utc(value) if value is not None else None


class MemoryEntry(BaseModel):
    """The durable unit of memory.

    id is assigned by the remote store on first successful write and is
    None before persistence.
    """

    id: str | None = Field(default=None, description="Remote-assigned identifier")
    content: str = Field(..., description="Free-text payload")
    metadata: MemoryMetadata = Field(..., description="Entry metadata")
    created_at: datetime = Field(default_factory=utc_now, description="Creation time")
    updated_at: datetime | None = Field(default=None, description="Last update time")

    @model_validator(mode="before")
    @classmethod
    def _default_updated_at(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("updated_at") is None:
            data = dict(data)
            if data.get("created_at") is None:
                data["created_at"] = utc_now()
            data["updated_at"] = data["created_at"]
        return data

    @field_validator("created_at", "updated_at")
    @classmethod
    def _timestamps_utc(cls, value: datetime | None) -> datetime | None:
        return ensure_utc(value) if value is not None else None

    @property
    def is_persisted(self) -> bool:
        """Whether the entry carries a remote identifier."""
        return bool(self.id)

    def touch(self) -> None:
        """Update the updated_at timestamp to current time."""
        self.updated_at = utc_now()
