"""Event scheduling: creation, validation, conflicts, queries and statistics."""

from __future__ import annotations

import uuid
from collections import Counter
from dataclasses import dataclass
from datetime import datetime, time, timezone

from schedai.models import Event, EventData, Priority, Schedule, _parse_rfc3339

_NAIVE_FORMATS = (
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d",
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y",
)


class ScheduleError(Exception):
    """Raised when a scheduling operation cannot be carried out."""


def parse_datetime(text: str) -> datetime:
    """Parse RFC 3339 or one of the accepted plain formats (taken as UTC)."""
    try:
        return _parse_rfc3339(text)
    except ValueError:
        pass
    for fmt in _NAIVE_FORMATS:
        try:
            return datetime.strptime(text, fmt).replace(tzinfo=timezone.utc)
        except ValueError:
            continue
    raise ScheduleError(f"日時の形式が認識できません: {text}")


def _now(now: datetime | None) -> datetime:
    return now if now is not None else datetime.now(timezone.utc)


@dataclass(frozen=True)
class ScheduleStatistics:
    total_events: int
    upcoming_events: int
    past_events: int
    low_priority: int
    medium_priority: int
    high_priority: int
    urgent_priority: int


class Scheduler:
    """Manages a schedule, enforcing valid, non-overlapping events."""

    def __init__(self, schedule: Schedule | None = None) -> None:
        self.schedule = schedule if schedule is not None else Schedule()

    def load_schedule(self, schedule: Schedule) -> None:
        self.schedule = schedule

    @staticmethod
    def _span(event_data: EventData) -> tuple[datetime, datetime]:
        start = parse_datetime(event_data.start_time)
        end = parse_datetime(event_data.end_time)
        if end <= start:
            raise ScheduleError("終了時刻は開始時刻より後である必要があります")
        return start, end

    def _conflicts(
        self, start: datetime, end: datetime, exclude: uuid.UUID | None = None
    ) -> bool:
        return any(
            event.id != exclude and start < event.end_time and end > event.start_time
            for event in self.schedule.events
        )

    def create_event(self, event_data: EventData) -> uuid.UUID:
        """Add a new event and return its id."""
        start, end = self._span(event_data)
        if self._conflicts(start, end):
            raise ScheduleError("指定された時間帯に既に予定があります")
        event = Event(
            title=event_data.title,
            start_time=start,
            end_time=end,
            description=event_data.description,
            location=event_data.location,
            attendees=list(event_data.attendees),
            priority=event_data.priority,
        )
        self.schedule.add_event(event)
        return event.id

    def update_event(self, event_id: uuid.UUID, event_data: EventData) -> None:
        """Replace the editable fields of an existing event."""
        start, end = self._span(event_data)
        if self._conflicts(start, end, exclude=event_id):
            raise ScheduleError("指定された時間帯に既に他の予定があります")
        event = self.schedule.get_event(event_id)
        if event is None:
            raise ScheduleError("指定されたIDの予定が見つかりません")
        event.title = event_data.title
        event.start_time = start
        event.end_time = end
        event.description = event_data.description
        event.location = event_data.location
        event.attendees = list(event_data.attendees)
        event.priority = event_data.priority
        event.updated_at = datetime.now(timezone.utc)

    def delete_event(self, event_id: uuid.UUID) -> None:
        if not self.schedule.remove_event(event_id):
            raise ScheduleError("指定されたIDの予定が見つかりません")

    def get_event(self, event_id: uuid.UUID) -> Event | None:
        return self.schedule.get_event(event_id)

    def list_events(self) -> list[Event]:
        """All events ordered by start time."""
        return sorted(self.schedule.events, key=lambda event: event.start_time)

    def events_in_range(self, start: datetime, end: datetime) -> list[Event]:
        return self.schedule.events_in_range(start, end)

    def search_events(self, query: str) -> list[Event]:
        """Events whose title, description or location contains the query, ignoring case."""
        needle = query.lower()
        return [
            event
            for event in self.schedule.events
            if any(
                needle in text.lower()
                for text in (event.title, event.description, event.location)
                if text is not None
            )
        ]

    def upcoming_events(self, limit: int, now: datetime | None = None) -> list[Event]:
        """Up to ``limit`` events starting after ``now``, earliest first."""
        moment = _now(now)
        upcoming = sorted(
            (event for event in self.schedule.events if event.start_time > moment),
            key=lambda event: event.start_time,
        )
        return upcoming[:limit]

    def today_events(self, now: datetime | None = None) -> list[Event]:
        """Events starting on the current UTC day, 00:00:00 to 23:59:59."""
        day = _now(now).astimezone(timezone.utc).date()
        start = datetime.combine(day, time(0, 0, 0), tzinfo=timezone.utc)
        end = datetime.combine(day, time(23, 59, 59), tzinfo=timezone.utc)
        return self.events_in_range(start, end)

    def statistics(self, now: datetime | None = None) -> ScheduleStatistics:
        moment = _now(now)
        events = self.schedule.events
        total = len(events)
        upcoming = sum(1 for event in events if event.start_time > moment)
        counts = Counter(event.priority for event in events)
        return ScheduleStatistics(
            total_events=total,
            upcoming_events=upcoming,
            past_events=total - upcoming,
            low_priority=counts[Priority.LOW],
            medium_priority=counts[Priority.MEDIUM],
            high_priority=counts[Priority.HIGH],
            urgent_priority=counts[Priority.URGENT],
        )