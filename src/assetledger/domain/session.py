"""Application session and per-operation audit context."""

from __future__ import annotations

import getpass
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

log = logging.getLogger(__name__)

type CurrentActor = Callable[[], str | None]

UNKNOWN_ACTOR = "unknown"


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass(frozen=True, slots=True)
class ApplicationSession:
    """Correlation id shared by every audit entry of one application run."""

    session_id: UUID = field(default_factory=uuid4)
    start_time: datetime = field(default_factory=_utcnow)

    def duration(self, now: datetime | None = None) -> timedelta:
        return (now or _utcnow()) - self.start_time

    @property
    def info(self) -> str:
        return f"Session {self.session_id} started at {self.start_time:%Y-%m-%d %H:%M:%S} UTC"


@dataclass(frozen=True, slots=True)
class AuditStamp:
    """Resolved attribution for one audit-producing operation."""

    session_id: UUID
    performed_by: str
    reason: str


def process_user() -> str | None:
    """Account the process runs under, mirroring store-side actor capture."""

    try:
        return getpass.getuser()
    except (OSError, KeyError):
        log.debug("Unable to determine process user", exc_info=True)
        return None


@dataclass(frozen=True, slots=True)
class SessionContext:
    application: ApplicationSession = field(default_factory=ApplicationSession)
    current_actor: CurrentActor | None = None

    @property
    def session_id(self) -> UUID:
        return self.application.session_id

    def resolve_actor(self, actor: str | None = None) -> str:
        for candidate in (actor, self._current_actor(), process_user()):
            if candidate and candidate.strip():
                return candidate.strip()
        return UNKNOWN_ACTOR

    def stamp(
        self,
        *,
        default_reason: str,
        session_id: UUID | None = None,
        actor: str | None = None,
        reason: str | None = None,
    ) -> AuditStamp:
        return AuditStamp(
            session_id=session_id or self.session_id,
            performed_by=self.resolve_actor(actor),
            reason=reason.strip() if reason and reason.strip() else default_reason,
        )

    def _current_actor(self) -> str | None:
        if self.current_actor is None:
            return None
        return self.current_actor()
