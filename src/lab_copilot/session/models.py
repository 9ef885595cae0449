"""Monitoring session state and classified log entries."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Annotated, Literal, Union
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

SessionStatus = Literal["not_started", "in_progress", "paused", "completed"]

LogKind = Literal["operator_transcript", "ai_agent_transcript", "ai_agent_interpretation"]

LOG_KIND_LABELS: dict[str, str] = {
    "operator_transcript": "Operator",
    "ai_agent_transcript": "AI Agent",
    "ai_agent_interpretation": "AI Vision",
}


def format_clock(seconds: float) -> str:
    """Render a duration in seconds as ``HH:MM:SS``."""

    total = max(int(seconds), 0)
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def status_label(status: str) -> str:
    return status.replace("_", " ").upper()


class _LogEntryBase(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str = Field(..., min_length=1, description="Unique identifier of the entry.")
    timestamp: datetime = Field(..., description="When the entry was recorded.")
    content: str = Field(..., description="Transcript text or interpretation.")

    @property
    def label(self) -> str:
        return LOG_KIND_LABELS[self.kind]  # type: ignore[attr-defined]


class OperatorTranscript(_LogEntryBase):
    """Speech transcribed from the operator."""

    kind: Literal["operator_transcript"] = "operator_transcript"


class AgentTranscript(_LogEntryBase):
    """Spoken response from the AI agent."""

    kind: Literal["ai_agent_transcript"] = "ai_agent_transcript"


class AgentInterpretation(_LogEntryBase):
    """Visual interpretation of the live feed by the AI agent."""

    kind: Literal["ai_agent_interpretation"] = "ai_agent_interpretation"
    confidence: float | None = Field(
        default=None, ge=0.0, le=1.0, description="Model confidence in the interpretation."
    )

    @property
    def confidence_percent(self) -> int | None:
        if self.confidence is None:
            return None
        return round(self.confidence * 100)


LogEntry = Annotated[
    Union[OperatorTranscript, AgentTranscript, AgentInterpretation],
    Field(discriminator="kind"),
]

LOG_ENTRY_ADAPTER: TypeAdapter[LogEntry] = TypeAdapter(LogEntry)


def build_log_entry(
    *,
    kind: str,
    content: str,
    timestamp: datetime,
    confidence: float | None = None,
    entry_id: str | None = None,
) -> LogEntry:
    """Validate and build the log entry variant matching ``kind``.

    ``confidence`` is only accepted for ``ai_agent_interpretation`` entries.
    """

    payload: dict[str, object] = {
        "id": entry_id or uuid4().hex,
        "kind": kind,
        "content": content,
        "timestamp": timestamp,
    }
    if confidence is not None:
        payload["confidence"] = confidence
    return LOG_ENTRY_ADAPTER.validate_python(payload)


@dataclass(slots=True)
class MonitoringSession:
    """Live state of one monitoring run.

    ``logs`` is replaced by a longer tuple on every append and never edited in
    place.
    """

    task_name: str
    chemicals: tuple[str, ...]
    procedures: tuple[str, ...]
    safety_controls: tuple[str, ...]
    estimated_duration_minutes: float
    start_time: datetime
    status: SessionStatus = "not_started"
    elapsed_seconds: int = 0
    logs: tuple[LogEntry, ...] = ()
    session_id: str = field(default_factory=lambda: uuid4().hex)


__all__ = [
    "AgentInterpretation",
    "AgentTranscript",
    "LOG_ENTRY_ADAPTER",
    "LOG_KIND_LABELS",
    "LogEntry",
    "LogKind",
    "MonitoringSession",
    "OperatorTranscript",
    "SessionStatus",
    "build_log_entry",
    "format_clock",
    "status_label",
]
