"""Replay of a session's ordered events into its live view.

Everything here is a pure function of its inputs. Events are always replayed
in sequence order; ``recorded_at`` only feeds time arithmetic. Malformed
pause/resume sequences degrade to best-effort values instead of raising.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta

from ledger.domain.events import EventType, Position
from ledger.domain.models import Session, SessionEvent

_ZERO = timedelta(0)


@dataclass(frozen=True)
class Break:
    """A pause and, once the player is back, its resume."""

    pause: SessionEvent
    resume: SessionEvent | None = None

    @property
    def is_open(self) -> bool:
        return self.resume is None

    def duration(self, until: datetime) -> timedelta:
        end = self.resume.recorded_at if self.resume is not None else until
        return max(end - self.pause.recorded_at, _ZERO)


@dataclass(frozen=True)
class LastHandInfo:
    recorded_at: datetime
    position: Position | None


@dataclass(frozen=True)
class LiveView:
    """Values derived from the event log at a reference time."""

    current_stack: int
    is_paused: bool
    total_elapsed: timedelta
    paused_duration: timedelta
    active_elapsed: timedelta
    hand_count: int
    last_hand: LastHandInfo | None
    breaks: tuple[Break, ...] = ()

    @property
    def elapsed_minutes(self) -> int:
        return int(self.active_elapsed.total_seconds() // 60)


def in_sequence(events: Iterable[SessionEvent]) -> list[SessionEvent]:
    """Return events ordered by sequence number."""
    return sorted(events, key=lambda event: event.sequence)


def pair_breaks(events: Iterable[SessionEvent]) -> list[Break]:
    """Pair each pause with the next resume that has no pause in between.

    A pause followed by another pause is superseded and yields no break. A
    resume with nothing open is ignored. A trailing pause is an open break.
    """
    breaks: list[Break] = []
    open_pause: SessionEvent | None = None
    for event in in_sequence(events):
        if event.is_a(EventType.SESSION_PAUSE):
            open_pause = event
        elif event.is_a(EventType.SESSION_RESUME) and open_pause is not None:
            breaks.append(Break(pause=open_pause, resume=event))
            open_pause = None
    if open_pause is not None:
        breaks.append(Break(pause=open_pause))
    return breaks


def current_stack(session: Session, events: Iterable[SessionEvent]) -> int:
    stack = session.initial_buy_in
    for event in in_sequence(events):
        if event.is_a(EventType.STACK_UPDATE):
            stack = event.payload.stack
        elif event.is_a(EventType.REBUY, EventType.ADDON) and event.payload.chips:
            stack += event.payload.chips
    return stack


def hand_count(events: Iterable[SessionEvent]) -> int:
    count = 0
    for event in events:
        if event.is_a(EventType.HAND_COMPLETE):
            count += 1
        elif event.is_a(EventType.HANDS_PASSED):
            count += event.payload.count
    return count


def last_hand(events: Iterable[SessionEvent]) -> LastHandInfo | None:
    for event in reversed(in_sequence(events)):
        if event.is_a(EventType.HAND_COMPLETE):
            return LastHandInfo(recorded_at=event.recorded_at, position=event.payload.position)
    return None


def derive_live_view(session: Session, events: Iterable[SessionEvent], now: datetime) -> LiveView:
    """Fold the session's events into its live view.

    ``now`` is the reference time for an in-progress session; an ended
    session is measured up to its end time instead.
    """
    ordered = in_sequence(events)
    reference = session.end_time or now

    breaks = pair_breaks(ordered)
    paused = sum((item.duration(reference) for item in breaks), _ZERO)
    total = max(reference - session.start_time, _ZERO)

    return LiveView(
        current_stack=current_stack(session, ordered),
        is_paused=bool(breaks) and breaks[-1].is_open,
        total_elapsed=total,
        paused_duration=paused,
        active_elapsed=max(total - paused, _ZERO),
        hand_count=hand_count(ordered),
        last_hand=last_hand(ordered),
        breaks=tuple(breaks),
    )


# Timeline grouping


@dataclass(frozen=True)
class EventItem:
    event: SessionEvent

    @property
    def at(self) -> datetime:
        return self.event.recorded_at


@dataclass(frozen=True)
class HandsItem:
    count: int
    started_at: datetime
    ended_at: datetime

    @property
    def at(self) -> datetime:
        return self.ended_at


@dataclass(frozen=True)
class BreakItem:
    pause: SessionEvent
    resume: SessionEvent | None

    @property
    def at(self) -> datetime:
        return (self.resume or self.pause).recorded_at

    @property
    def duration_minutes(self) -> int | None:
        if self.resume is None:
            return None
        seconds = (self.resume.recorded_at - self.pause.recorded_at).total_seconds()
        return round(seconds / 60)


TimelineItem = EventItem | HandsItem | BreakItem

_HAND_TYPES = (EventType.HAND_COMPLETE, EventType.HANDS_PASSED)


def group_timeline(events: Iterable[SessionEvent]) -> list[TimelineItem]:
    """Group events into display items, newest first.

    Runs of hand_complete / hands_passed collapse into one item, paired
    breaks into one item, and an open pause into an ongoing break.
    """
    ordered = in_sequence(events)
    breaks = pair_breaks(ordered)
    break_by_pause = {item.pause.id: item for item in breaks}
    paired_resumes = {item.resume.id for item in breaks if item.resume is not None}

    items: list[TimelineItem] = []
    index = 0
    while index < len(ordered):
        event = ordered[index]
        if event.is_a(*_HAND_TYPES):
            run = []
            while index < len(ordered) and ordered[index].is_a(*_HAND_TYPES):
                run.append(ordered[index])
                index += 1
            count = hand_count(run)
            if count > 0:
                items.append(HandsItem(count=count, started_at=run[0].recorded_at, ended_at=run[-1].recorded_at))
            continue

        index += 1
        if event.id in paired_resumes:
            continue
        if event.id in break_by_pause:
            matched = break_by_pause[event.id]
            items.append(BreakItem(pause=matched.pause, resume=matched.resume))
        else:
            # Superseded pauses and stray resumes show as plain entries.
            items.append(EventItem(event=event))

    # Stable sort keeps sequence order among equal timestamps before reversing.
    items.sort(key=lambda item: item.at)
    items.reverse()
    return items
