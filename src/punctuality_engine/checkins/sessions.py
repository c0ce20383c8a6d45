"""Same-day session reconstruction.

A closing event (exit, lunch_return) is paired with the most recent opening
event (entry, lunch_out) that strictly precedes it on the same day, provided
that opener is not already closed. Closers without such an opener are kept
as ``unpaired``.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from typing import Iterable, Optional

from ..core.enums import CheckInType, SessionKind
from .model import CheckInEvent

SESSION_TYPES = {
    SessionKind.WORK: (CheckInType.ENTRY, CheckInType.EXIT),
    SessionKind.LUNCH: (CheckInType.LUNCH_OUT, CheckInType.LUNCH_RETURN),
}


@dataclass(frozen=True)
class CheckInSession:
    kind: SessionKind
    opening: CheckInEvent
    closing: Optional[CheckInEvent] = None

    @property
    def is_open(self) -> bool:
        return self.closing is None


@dataclass(frozen=True)
class DaySessions:
    work: tuple[CheckInSession, ...] = ()
    lunch: tuple[CheckInSession, ...] = ()
    unpaired: tuple[CheckInEvent, ...] = ()

    def open_lunches(self) -> list[CheckInSession]:
        return [s for s in self.lunch if s.is_open]

    def all(self) -> tuple[CheckInSession, ...]:
        return self.work + self.lunch


def _pair(kind: SessionKind, ordered: list[CheckInEvent]) -> tuple[list[CheckInSession], list[CheckInEvent]]:
    opener_type, closer_type = SESSION_TYPES[kind]
    sessions: list[CheckInSession] = []
    unpaired: list[CheckInEvent] = []
    current: Optional[CheckInSession] = None

    for event in ordered:
        if event.checkin_type == opener_type:
            if current is not None:
                sessions.append(current)
            current = CheckInSession(kind=kind, opening=event)
        elif event.checkin_type == closer_type:
            if current is None or not current.opening.timestamp < event.timestamp:
                unpaired.append(event)
                continue
            sessions.append(replace(current, closing=event))
            current = None

    if current is not None:
        sessions.append(current)
    return sessions, unpaired


def build_sessions(events: Iterable[CheckInEvent], day: Optional[date] = None) -> DaySessions:
    ordered = sorted(
        (e for e in events if day is None or e.work_date == day),
        key=lambda e: e.timestamp,
    )
    work, unpaired_work = _pair(SessionKind.WORK, ordered)
    lunch, unpaired_lunch = _pair(SessionKind.LUNCH, ordered)
    return DaySessions(
        work=tuple(work),
        lunch=tuple(lunch),
        unpaired=tuple(sorted(unpaired_work + unpaired_lunch, key=lambda e: e.timestamp)),
    )


def find_opener(prior_events: Iterable[CheckInEvent], closing: CheckInEvent) -> Optional[CheckInEvent]:
    """Opener paired with ``closing`` given the events recorded before it that day."""

    candidates = [
        e for e in prior_events
        if e is not closing and e.work_date == closing.work_date and e.timestamp < closing.timestamp
    ]
    sessions = build_sessions(candidates + [closing], closing.work_date)
    for session in sessions.all():
        if session.closing is closing:
            return session.opening
    return None
