"""Core data types: events, schedules and assistant request/response records."""

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

_RFC3339 = re.compile(
    r"^(\d{4}-\d{2}-\d{2})[Tt ](\d{2}:\d{2}:\d{2})(?:\.(\d+))?([Zz]|[+-]\d{2}:\d{2})$"
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _parse_rfc3339(text: str) -> datetime:
    """Parse an RFC 3339 timestamp and return it in UTC."""
    match = _RFC3339.match(text)
    if match is None:
        raise ValueError(f"not an RFC 3339 timestamp: {text!r}")
    date, time, fraction, offset = match.groups()
    micros = (fraction or "0")[:6].ljust(6, "0")
    if offset in ("Z", "z"):
        offset = "+00:00"
    parsed = datetime.fromisoformat(f"{date}T{time}.{micros}{offset}")
    return parsed.astimezone(timezone.utc)


def _format_timestamp(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


class Priority(Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    URGENT = "Urgent"


class EventStatus(Enum):
    SCHEDULED = "Scheduled"
    IN_PROGRESS = "InProgress"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class ActionType(Enum):
    CREATE_EVENT = "CreateEvent"
    UPDATE_EVENT = "UpdateEvent"
    DELETE_EVENT = "DeleteEvent"
    LIST_EVENTS = "ListEvents"
    SEARCH_EVENTS = "SearchEvents"
    GET_EVENT_DETAILS = "GetEventDetails"
    GENERAL_RESPONSE = "GeneralResponse"


@dataclass
class Event:
    """A single scheduled event; times are timezone-aware UTC datetimes."""

    title: str
    start_time: datetime
    end_time: datetime
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    description: str | None = None
    location: str | None = None
    attendees: list[str] = field(default_factory=list)
    priority: Priority = Priority.MEDIUM
    status: EventStatus = EventStatus.SCHEDULED
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        if self.updated_at is None:
            self.updated_at = self.created_at

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-ready mapping of this event."""
        return {
            "id": str(self.id),
            "title": self.title,
            "description": self.description,
            "start_time": _format_timestamp(self.start_time),
            "end_time": _format_timestamp(self.end_time),
            "location": self.location,
            "attendees": list(self.attendees),
            "priority": self.priority.value,
            "status": self.status.value,
            "created_at": _format_timestamp(self.created_at),
            "updated_at": _format_timestamp(self.updated_at),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Event:
        """Build an event from a mapping; raises ValueError if it is malformed."""
        try:
            attendees = data["attendees"]
            if not isinstance(attendees, list) or not all(isinstance(a, str) for a in attendees):
                raise ValueError("attendees must be a list of strings")
            title = data["title"]
            if not isinstance(title, str):
                raise ValueError("title must be a string")
            return cls(
                id=uuid.UUID(data["id"]),
                title=title,
                description=data.get("description"),
                start_time=_parse_rfc3339(data["start_time"]),
                end_time=_parse_rfc3339(data["end_time"]),
                location=data.get("location"),
                attendees=list(attendees),
                priority=Priority(data["priority"]),
                status=EventStatus(data["status"]),
                created_at=_parse_rfc3339(data["created_at"]),
                updated_at=_parse_rfc3339(data["updated_at"]),
            )
        except (KeyError, TypeError, AttributeError) as exc:
            raise ValueError(f"invalid event data: {exc}") from exc


@dataclass
class EventData:
    """Event fields as supplied by a user, with times still as text."""

    title: str
    start_time: str
    end_time: str
    description: str | None = None
    location: str | None = None
    attendees: list[str] = field(default_factory=list)
    priority: Priority = Priority.MEDIUM


@dataclass
class LLMRequest:
    user_input: str
    context: str | None = None


@dataclass
class LLMResponse:
    action: ActionType
    response_text: str
    event_data: EventData | None = None


@dataclass
class Schedule:
    """An ordered collection of events."""

    events: list[Event] = field(default_factory=list)

    def add_event(self, event: Event) -> None:
        self.events.append(event)

    def remove_event(self, event_id: uuid.UUID) -> bool:
        """Remove the event with the given id; return whether one was removed."""
        for position, event in enumerate(self.events):
            if event.id == event_id:
                del self.events[position]
                return True
        return False

    def get_event(self, event_id: uuid.UUID) -> Event | None:
        return next((event for event in self.events if event.id == event_id), None)

    def events_in_range(self, start: datetime, end: datetime) -> list[Event]:
        """Events whose start time lies within [start, end]."""
        return [event for event in self.events if start <= event.start_time <= end]

    def to_dict(self) -> dict[str, Any]:
        return {"events": [event.to_dict() for event in self.events]}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Schedule:
        """Build a schedule from a mapping; raises ValueError if it is malformed."""
        try:
            items = data["events"]
        except (KeyError, TypeError) as exc:
            raise ValueError(f"invalid schedule data: {exc}") from exc
        if not isinstance(items, list):
            raise ValueError("events must be a list")
        return cls(events=[Event.from_dict(item) for item in items])