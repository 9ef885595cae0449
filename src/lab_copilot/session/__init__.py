"""Monitoring session engine, log entries and simulated feed."""

from .engine import SessionModel, SessionNotStartedError, SessionSeedProtocol
from .models import (
    LOG_KIND_LABELS,
    AgentInterpretation,
    AgentTranscript,
    LogEntry,
    LogKind,
    MonitoringSession,
    OperatorTranscript,
    SessionStatus,
    build_log_entry,
    format_clock,
    status_label,
)
from .simulator import DEFAULT_DRAFTS, LogDraft, MockLogFeed

__all__ = [
    "AgentInterpretation",
    "AgentTranscript",
    "DEFAULT_DRAFTS",
    "LOG_KIND_LABELS",
    "LogDraft",
    "LogEntry",
    "LogKind",
    "MockLogFeed",
    "MonitoringSession",
    "OperatorTranscript",
    "SessionModel",
    "SessionNotStartedError",
    "SessionSeedProtocol",
    "SessionStatus",
    "build_log_entry",
    "format_clock",
    "status_label",
]
