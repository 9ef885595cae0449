"""Time tracking and log stream for a monitoring session."""

from __future__ import annotations

import logging
import math
from datetime import datetime, timezone
from typing import Any, Callable, Protocol

from .models import (
    LogEntry,
    MonitoringSession,
    build_log_entry,
    format_clock,
    status_label,
)

logger = logging.getLogger(__name__)


class SessionNotStartedError(RuntimeError):
    """Raised when a session operation is used before :meth:`SessionModel.start`."""


class SessionSeedProtocol(Protocol):
    """Anything that describes the task a session monitors."""

    task_name: str
    chemicals: Any
    procedures: Any
    safety_controls: Any
    estimated_duration_minutes: float


class SessionModel:
    """Owns one monitoring session and derives its clock state.

    Elapsed time is banked in an accumulator whenever the session pauses or
    completes, and measured from a reference timestamp while it runs. The
    reference is re-based on resume and reset, so paused time never counts.
    The model owns no timer: an external driver calls :meth:`tick`.
    """

    def __init__(self, *, clock: Callable[[], datetime] | None = None) -> None:
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._session: MonitoringSession | None = None
        self._accumulated = 0.0
        self._reference: datetime | None = None

    @property
    def session(self) -> MonitoringSession | None:
        return self._session

    def _require_session(self) -> MonitoringSession:
        if self._session is None:
            raise SessionNotStartedError("No monitoring session has been started")
        return self._session

    def _running_seconds(self, now: datetime) -> float:
        if self._reference is None:
            return self._accumulated
        return self._accumulated + max((now - self._reference).total_seconds(), 0.0)

    def _advance(self, session: MonitoringSession, now: datetime) -> None:
        elapsed = math.floor(self._running_seconds(now))
        if elapsed > session.elapsed_seconds:
            session.elapsed_seconds = elapsed

    def _bank(self, session: MonitoringSession, now: datetime) -> None:
        # never bank less than is already displayed
        self._accumulated = max(self._running_seconds(now), float(session.elapsed_seconds))

    def start(self, seed: SessionSeedProtocol, now: datetime | None = None) -> MonitoringSession:
        """Begin monitoring ``seed``, replacing any previous session."""

        now = now or self._clock()
        session = MonitoringSession(
            task_name=seed.task_name,
            chemicals=tuple(seed.chemicals),
            procedures=tuple(seed.procedures),
            safety_controls=tuple(seed.safety_controls),
            estimated_duration_minutes=float(seed.estimated_duration_minutes),
            start_time=now,
            status="in_progress",
        )
        self._session = session
        self._accumulated = 0.0
        self._reference = now
        logger.info(
            "Started monitoring session",
            extra={"session_id": session.session_id, "task_name": session.task_name},
        )
        return session

    def tick(self, now: datetime | None = None) -> int:
        """Recompute elapsed seconds; only a running session moves."""

        session = self._require_session()
        if session.status == "in_progress":
            self._advance(session, now or self._clock())
        return session.elapsed_seconds

    def pause(self, now: datetime | None = None) -> bool:
        session = self._require_session()
        if session.status != "in_progress":
            logger.debug("Ignored pause", extra={"status": session.status})
            return False
        now = now or self._clock()
        self._advance(session, now)
        self._bank(session, now)
        self._reference = None
        session.status = "paused"
        logger.info(
            "Paused monitoring session",
            extra={"session_id": session.session_id, "elapsed_seconds": session.elapsed_seconds},
        )
        return True

    def resume(self, now: datetime | None = None) -> bool:
        session = self._require_session()
        if session.status != "paused":
            logger.debug("Ignored resume", extra={"status": session.status})
            return False
        self._reference = now or self._clock()
        session.status = "in_progress"
        logger.info("Resumed monitoring session", extra={"session_id": session.session_id})
        return True

    def reset(self, now: datetime | None = None) -> None:
        """Zero the clock and re-base the start time; status and logs are kept."""

        session = self._require_session()
        now = now or self._clock()
        session.elapsed_seconds = 0
        session.start_time = now
        self._accumulated = 0.0
        self._reference = now if session.status == "in_progress" else None
        logger.info("Reset monitoring session clock", extra={"session_id": session.session_id})

    def complete(self, now: datetime | None = None) -> bool:
        """Mark the session completed; this state is terminal."""

        session = self._require_session()
        if session.status == "completed":
            return False
        now = now or self._clock()
        if session.status == "in_progress":
            self._advance(session, now)
            self._bank(session, now)
        self._reference = None
        session.status = "completed"
        logger.info(
            "Completed monitoring session",
            extra={"session_id": session.session_id, "elapsed_seconds": session.elapsed_seconds},
        )
        return True

    def progress_ratio(self) -> float:
        session = self._require_session()
        total_seconds = session.estimated_duration_minutes * 60
        if total_seconds <= 0:
            return 1.0
        return min(session.elapsed_seconds / total_seconds, 1.0)

    def remaining_seconds(self) -> int:
        session = self._require_session()
        total_seconds = math.floor(session.estimated_duration_minutes * 60)
        return max(total_seconds - session.elapsed_seconds, 0)

    def is_overdue(self) -> bool:
        session = self._require_session()
        return session.elapsed_seconds > session.estimated_duration_minutes * 60

    def append_log(
        self,
        kind: str,
        content: str,
        confidence: float | None = None,
        now: datetime | None = None,
    ) -> LogEntry:
        """Record a classified entry with a fresh id and timestamp."""

        session = self._require_session()
        entry = build_log_entry(
            kind=kind,
            content=content,
            confidence=confidence,
            timestamp=now or self._clock(),
        )
        session.logs = (*session.logs, entry)
        logger.debug(
            "Appended log entry",
            extra={"session_id": session.session_id, "kind": entry.kind, "entry_id": entry.id},
        )
        return entry

    def snapshot(self) -> dict[str, Any]:
        """Return a JSON-compatible view of the session for display."""

        session = self._require_session()
        return {
            "session_id": session.session_id,
            "task_name": session.task_name,
            "chemicals": list(session.chemicals),
            "procedures": list(session.procedures),
            "safety_controls": list(session.safety_controls),
            "status": session.status,
            "status_label": status_label(session.status),
            "start_time": session.start_time.isoformat(),
            "estimated_duration_minutes": session.estimated_duration_minutes,
            "elapsed_seconds": session.elapsed_seconds,
            "elapsed_display": format_clock(session.elapsed_seconds),
            "estimated_display": format_clock(session.estimated_duration_minutes * 60),
            "progress_ratio": self.progress_ratio(),
            "remaining_seconds": self.remaining_seconds(),
            "logs": [
                {**entry.model_dump(mode="json"), "label": entry.label} for entry in session.logs
            ],
        }


__all__ = ["SessionModel", "SessionNotStartedError", "SessionSeedProtocol"]
