from datetime import datetime, timedelta, timezone

import pytest

from schedai.calendar_sync import (
    CalendarError,
    CalendarManager,
    CalendarProvider,
    GoogleCalendarProvider,
    NotionCalendarProvider,
    event_to_google_format,
    parse_google_datetime,
    parse_google_event,
)
from schedai.models import Event, Schedule


def make_event(**changes):
    fields = dict(
        title="Review",
        start_time=datetime(2024, 4, 1, 9, 30, tzinfo=timezone.utc),
        end_time=datetime(2024, 4, 1, 10, 30, tzinfo=timezone.utc),
    )
    fields.update(changes)
    return Event(**fields)


class StubProvider(CalendarProvider):
    def __init__(self):
        self.synced = []
        self.created = []

    def sync_events(self, schedule):
        self.synced.append(schedule)

    def create_event(self, event):
        self.created.append(event)
        return "ext-1"

    def update_event(self, external_id, event):
        pass

    def delete_event(self, external_id):
        pass


def test_google_provider_default_calendar():
    provider = GoogleCalendarProvider(access_token="token")
    assert provider.calendar_id == "primary"
    assert provider.access_token == "token"


def test_google_provider_explicit_calendar():
    provider = GoogleCalendarProvider(access_token="token", calendar_id="team")
    assert provider.calendar_id == "team"


def test_notion_provider_keeps_settings():
    provider = NotionCalendarProvider(api_key="placeholder", database_id="db")
    assert (provider.api_key, provider.database_id) == ("placeholder", "db")


@pytest.mark.parametrize(
    "provider",
    [
        GoogleCalendarProvider(access_token="token"),
        NotionCalendarProvider(api_key="placeholder", database_id="db"),
    ],
)
def test_unavailable_providers_fail_every_operation(provider):
    event = make_event()
    with pytest.raises(CalendarError):
        provider.sync_events(Schedule())
    with pytest.raises(CalendarError):
        provider.create_event(event)
    with pytest.raises(CalendarError):
        provider.update_event("x", event)
    with pytest.raises(CalendarError):
        provider.delete_event("x")


def test_provider_is_abstract():
    with pytest.raises(TypeError):
        CalendarProvider()


def test_parse_datetime_with_offset():
    parsed = parse_google_datetime({"dateTime": "2024-03-01T10:00:00+09:00"})
    assert parsed == datetime(2024, 3, 1, 10, 0, tzinfo=timezone(timedelta(hours=9)))
    assert parsed.tzinfo == timezone.utc


def test_parse_all_day_date():
    parsed = parse_google_datetime({"date": "2024-05-06"})
    assert parsed == datetime(2024, 5, 6, tzinfo=timezone.utc)


def test_parse_datetime_missing():
    with pytest.raises(CalendarError, match="No valid datetime found"):
        parse_google_datetime({})


def test_parse_datetime_invalid():
    with pytest.raises(CalendarError, match="Failed to parse datetime"):
        parse_google_datetime({"dateTime": "yesterday"})


def test_parse_event_defaults():
    item = {"id": "abc", "start": {"date": "2024-05-06"}, "end": {"date": "2024-05-07"}}
    parsed = parse_google_event(item)
    assert parsed.id == "abc"
    assert parsed.summary == "無題"
    assert parsed.description is None
    assert parsed.location is None
    assert parsed.end_time > parsed.start_time


def test_parse_event_missing_id():
    with pytest.raises(CalendarError, match="Missing event ID"):
        parse_google_event({"start": {"date": "2024-05-06"}, "end": {"date": "2024-05-06"}})


def test_google_format_minimal():
    google_event = event_to_google_format(make_event())
    assert google_event["summary"] == "Review"
    assert google_event["start"]["timeZone"] == "UTC"
    assert "description" not in google_event
    assert "location" not in google_event
    assert "attendees" not in google_event


def test_google_format_optional_fields():
    event = make_event(
        description="Quarterly",
        location="Room 4",
        attendees=["a@example.com", "b@example.com"],
    )
    google_event = event_to_google_format(event)
    assert google_event["description"] == "Quarterly"
    assert google_event["location"] == "Room 4"
    assert google_event["attendees"] == [{"email": "a@example.com"}, {"email": "b@example.com"}]


def test_google_format_round_trip():
    event = make_event(description="Quarterly", location="Room 4")
    item = {"id": "e1", **event_to_google_format(event)}
    parsed = parse_google_event(item)
    assert parsed.summary == event.title
    assert parsed.description == event.description
    assert parsed.location == event.location
    assert parsed.start_time == event.start_time
    assert parsed.end_time == event.end_time


def test_create_event_in_all_collects_ids(capsys):
    manager = CalendarManager()
    stub = StubProvider()
    manager.add_provider("stub", stub)
    manager.add_provider("google", GoogleCalendarProvider(access_token="token"))
    event = make_event()
    assert manager.create_event_in_all(event) == {"stub": "ext-1"}
    assert stub.created == [event]
    assert "googleでのイベント作成でエラーが発生しました" in capsys.readouterr().out


def test_sync_all_reports_each_provider(capsys):
    manager = CalendarManager()
    stub = StubProvider()
    manager.add_provider("stub", stub)
    manager.add_provider("notion", NotionCalendarProvider(api_key="placeholder", database_id="db"))
    schedule = Schedule()
    manager.sync_all(schedule)
    output = capsys.readouterr().out
    assert stub.synced == [schedule]
    assert "stubとの同期が完了しました" in output
    assert "notionとの同期でエラーが発生しました" in output