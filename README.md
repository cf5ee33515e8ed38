# schedai

A small command-line schedule manager. Events are kept in a JSON file,
`schedule.json`, in the directory `.schedule_ai_agent` under your home
directory (`$HOME`, or `%USERPROFILE%` where `HOME` is not set). The tool
refuses to create an event whose time overlaps one you already have, and an
event's end must come after its start.

Messages are printed in Japanese.

## Installation

```
pip install .
```

This installs the `schedai` command. Its only dependency is `termcolor`.

## Usage

```
schedai [--verbose] [--no-color] [--version] COMMAND ...
```

`--verbose` reports when the schedule is loaded and saved, `--no-color`
turns off coloured output. Run without a command, `schedai` prints its help.

### Adding events

```
schedai add "Team meeting" --start "2024-05-01 09:00" --end "2024-05-01 10:00" \
    --description "Weekly sync" --location "Room 3" --priority high
```

`--start` and `--end` are required. They accept RFC 3339
(`2024-05-01T09:00:00Z`, `2024-05-01T18:00:00+09:00`) and the plain forms
`YYYY-MM-DD HH:MM:SS`, `YYYY-MM-DD HH:MM`, `YYYY-MM-DD`, `MM/DD/YYYY HH:MM`
and `MM/DD/YYYY`; times without a zone are taken as UTC, and all times are
stored and shown in UTC.

Priorities are `low`, `medium`, `high` and `urgent`; a missing or unknown
value means `medium`. On success the new event's id is printed.

### Listing and searching

```
schedai list                      # all events, in start order
schedai list --limit 5            # the first five of them
schedai list --today              # events starting today (UTC day)
schedai list --upcoming           # events starting after now, at most 10
schedai list --upcoming --limit 5
schedai search meeting            # title, description or location, ignoring case
```

A `--limit` that is not a whole number is ignored.

### Statistics

```
schedai stats
```

Shows the total number of events, how many start in the future and how many
do not, and how many there are of each priority.

### Backups and transfer

```
schedai backup                # copy the schedule to schedule_backup_<YYYYmmdd_HHMMSS>.json
schedai restore               # pick a backup by number, newest first, and restore it
schedai export out.json       # copy the stored schedule to another file
schedai import in.json        # replace the stored schedule with one read from a file
```

Backups live next to the schedule file. Restoring first backs up the
current schedule, so restoring the wrong file loses nothing. Restore and
import ask for a `y`/`n` confirmation before overwriting anything. Backup
and export fail with a message when no schedule has been saved yet.

## Library use

```python
from schedai.models import EventData, Priority
from schedai.scheduler import Scheduler, ScheduleError

scheduler = Scheduler()
event_id = scheduler.create_event(
    EventData(
        title="Dentist",
        start_time="2024-06-01 14:00",
        end_time="2024-06-01 15:00",
        priority=Priority.HIGH,
    )
)
for event in scheduler.list_events():
    print(event.title, event.start_time)
```

- `schedai.models` — `Event`, `EventData`, `Schedule`, the `Priority`,
  `EventStatus` and `ActionType` enums, and `to_dict`/`from_dict` for the
  JSON form.
- `schedai.scheduler` — `Scheduler` (create, update, delete, search,
  `upcoming_events`, `today_events`, `statistics`), `parse_datetime`, and
  `ScheduleError`, raised for bad times, overlaps and unknown ids.
- `schedai.storage` — `Storage(data_dir=None)` saves and loads the schedule
  file and handles backups (`backup_schedule`, `restore_schedule`,
  `list_backups`, `cleanup_old_backups`), export and import; problems raise
  `StorageError`.
- `schedai.app` — `CliApp`, the command operations with their console
  output, plus `format_events` and `parse_priority`.
- `schedai.calendar_sync` — the `CalendarProvider` interface,
  `CalendarManager`, and conversion to and from the Google Calendar event
  format (`event_to_google_format`, `parse_google_event`,
  `parse_google_datetime`).

## What it does not do

- There is no natural-language or assistant mode: events are managed only
  through the commands above. The `LLMRequest`, `LLMResponse` and
  `ActionType` types exist in `schedai.models` but nothing uses them.
- There is no configuration file and no command to manage one.
- Nothing is synchronised with external calendars. `GoogleCalendarProvider`
  and `NotionCalendarProvider` have no service connection: each operation
  records the request it would have sent in `rejected_requests` and raises
  `CalendarError`. `CalendarManager` reports such failures and carries on.
- Events cannot be edited or deleted from the command line; use
  `Scheduler.update_event` and `Scheduler.delete_event` from Python.