"""LogEntry model for scheduler output and status messages."""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .enums import LogLevel


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LogEntry(BaseModel):
    """Immutable record handed to a log sink.

    Produced by the scheduler for process output, launch failures and
    schedule status changes. Instances are frozen once created.
    """

    model_config = ConfigDict(frozen=True)

    message: str = Field(..., description="Human-readable message")
    level: LogLevel = Field(default=LogLevel.MESSAGE, description="Entry severity")
    timestamp: datetime = Field(
        default_factory=_utcnow, description="When the entry was created"
    )

    @field_validator("message", mode="before")
    @classmethod
    def coerce_message(cls, v: object) -> str:
        """Treat a missing message as an empty string."""
        if v is None:
            return ""
        return v if isinstance(v, str) else str(v)
