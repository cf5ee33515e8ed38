"""Calendar service integration: providers, event conversion and a manager."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from schedai.models import Event, Schedule, _parse_rfc3339

DEFAULT_SUMMARY = "無題"


class CalendarError(Exception):
    """Raised when a calendar service operation fails."""


class CalendarProvider(ABC):
    """A remote calendar that events can be synchronised with."""

    @abstractmethod
    def sync_events(self, schedule: Schedule) -> None:
        """Bring the schedule in line with the remote calendar."""

    @abstractmethod
    def create_event(self, event: Event) -> str:
        """Create the event remotely and return its external id."""

    @abstractmethod
    def update_event(self, external_id: str, event: Event) -> None:
        """Replace the remote event with the given external id."""

    @abstractmethod
    def delete_event(self, external_id: str) -> None:
        """Delete the remote event with the given external id."""


class _UnavailableProvider(CalendarProvider):
    """A provider without a service connection.

    Each operation prepares its request payload, records it in
    ``rejected_requests`` and fails with a CalendarError.
    """

    service_name = ""

    def __init__(self) -> None:
        self.rejected_requests: list[tuple[str, dict[str, Any]]] = []

    def _encode(self, event: Event) -> dict[str, Any]:
        return event.to_dict()

    def _send(self, operation: str, payload: dict[str, Any]) -> None:
        self.rejected_requests.append((operation, payload))
        raise CalendarError(f"{self.service_name}連携は利用できません")

    def sync_events(self, schedule: Schedule) -> None:
        self._send("sync", {"event_ids": [str(event.id) for event in schedule.events]})

    def create_event(self, event: Event) -> str:
        payload = self._encode(event)
        self._send("create", payload)
        return str(payload.get("id", ""))

    def update_event(self, external_id: str, event: Event) -> None:
        self._send("update", {"id": external_id, "event": self._encode(event)})

    def delete_event(self, external_id: str) -> None:
        self._send("delete", {"id": external_id})


@dataclass
class GoogleCalendarEvent:
    id: str
    summary: str
    start_time: datetime
    end_time: datetime
    description: str | None = None
    location: str | None = None


def _optional_str(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def parse_google_datetime(value: Any) -> datetime:
    """Read a Google ``start``/``end`` object: ``dateTime`` or an all-day ``date``."""
    fields = value if isinstance(value, dict) else {}
    stamp = fields.get("dateTime")
    if isinstance(stamp, str):
        try:
            return _parse_rfc3339(stamp)
        except ValueError as exc:
            raise CalendarError(f"Failed to parse datetime: {exc}") from exc
    day = fields.get("date")
    if isinstance(day, str):
        try:
            parsed = datetime.strptime(day, "%Y-%m-%d")
        except ValueError as exc:
            raise CalendarError(f"Failed to parse date: {exc}") from exc
        return parsed.replace(tzinfo=timezone.utc)
    raise CalendarError("No valid datetime found")


def parse_google_event(item: dict[str, Any]) -> GoogleCalendarEvent:
    """Convert a Google Calendar API event item."""
    event_id = item.get("id")
    if not isinstance(event_id, str):
        raise CalendarError("Missing event ID")
    summary = item.get("summary")
    return GoogleCalendarEvent(
        id=event_id,
        summary=summary if isinstance(summary, str) else DEFAULT_SUMMARY,
        description=_optional_str(item.get("description")),
        location=_optional_str(item.get("location")),
        start_time=parse_google_datetime(item.get("start")),
        end_time=parse_google_datetime(item.get("end")),
    )


def _google_time(moment: datetime) -> dict[str, str]:
    return {
        "dateTime": moment.astimezone(timezone.utc).isoformat(),
        "timeZone": "UTC",
    }


def event_to_google_format(event: Event) -> dict[str, Any]:
    """Build the Google Calendar API representation of an event."""
    google_event: dict[str, Any] = {
        "summary": event.title,
        "start": _google_time(event.start_time),
        "end": _google_time(event.end_time),
    }
    if event.description is not None:
        google_event["description"] = event.description
    if event.location is not None:
        google_event["location"] = event.location
    if event.attendees:
        google_event["attendees"] = [{"email": email} for email in event.attendees]
    return google_event


class GoogleCalendarProvider(_UnavailableProvider):
    service_name = "Google Calendar"

    def __init__(self, access_token: str, calendar_id: str | None = None) -> None:
        super().__init__()
        self.access_token = access_token
        self.calendar_id = calendar_id if calendar_id is not None else "primary"

    def _encode(self, event: Event) -> dict[str, Any]:
        return event_to_google_format(event)


class NotionCalendarProvider(_UnavailableProvider):
    service_name = "Notion Calendar"

    def __init__(self, api_key: str, database_id: str) -> None:
        super().__init__()
        self.api_key = api_key
        self.database_id = database_id


class CalendarManager:
    """Forwards operations to every registered provider, reporting failures."""

    def __init__(self) -> None:
        self.providers: dict[str, CalendarProvider] = {}

    def add_provider(self, name: str, provider: CalendarProvider) -> None:
        self.providers[name] = provider

    def sync_all(self, schedule: Schedule) -> None:
        for name, provider in self.providers.items():
            try:
                provider.sync_events(schedule)
            except Exception as exc:  # a failing provider must not stop the others
                print(f"{name}との同期でエラーが発生しました: {exc}")
            else:
                print(f"{name}との同期が完了しました")

    def create_event_in_all(self, event: Event) -> dict[str, str]:
        """Create the event with every provider; map provider name to external id."""
        external_ids: dict[str, str] = {}
        for name, provider in self.providers.items():
            try:
                external_ids[name] = provider.create_event(event)
            except Exception as exc:  # a failing provider must not stop the others
                print(f"{name}でのイベント作成でエラーが発生しました: {exc}")
        return external_ids