"""Command operations on the stored schedule, with console output."""

from __future__ import annotations

import sys
import uuid
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import TextIO

from termcolor import colored

from schedai.models import Event, EventData, Priority
from schedai.scheduler import Scheduler, ScheduleError, ScheduleStatistics
from schedai.storage import Storage, StorageError

_PRIORITY_COLORS = {
    Priority.LOW: "white",
    Priority.MEDIUM: "blue",
    Priority.HIGH: "yellow",
    Priority.URGENT: "red",
}

_PRIORITY_NAMES = {
    "low": Priority.LOW,
    "high": Priority.HIGH,
    "urgent": Priority.URGENT,
}

_TIME_FORMAT = "%Y-%m-%d %H:%M"
_OVERWRITE_PROMPT = "現在のスケジュールが上書きされます。続行しますか？"

Painter = Callable[..., str]


def parse_priority(value: str | None) -> Priority:
    """Map a priority name to a Priority; anything unknown is medium."""
    return _PRIORITY_NAMES.get(value or "", Priority.MEDIUM)


def _render_events(events: Iterable[Event], paint: Painter | None = None) -> str:
    def style(text: str, color: str | None = None, *attrs: str) -> str:
        if paint is None:
            return text
        return paint(text, color, *attrs)

    lines: list[str] = []
    for number, event in enumerate(events, start=1):
        priority = event.priority
        lines.append(
            f"{style(str(number), 'cyan')}. {style(event.title, None, 'bold')} "
            f"{style(f'[{priority.value}]', _PRIORITY_COLORS[priority])}"
        )
        start = style(event.start_time.strftime(_TIME_FORMAT), "green")
        end = style(event.end_time.strftime(_TIME_FORMAT), "green")
        lines.append(f"   {start} ～ {end}")
        if event.description is not None:
            lines.append(f"   {style(event.description, None, 'dark')}")
        if event.location is not None:
            lines.append(f"   📍 {style(event.location, 'blue')}")
        if event.attendees:
            lines.append(f"   👥 {style(', '.join(event.attendees), 'magenta')}")
        lines.append(f"   ID: {style(str(event.id), None, 'dark')}")
        lines.append("")
    return "\n".join(lines) + ("\n" if lines else "")


def format_events(events: Iterable[Event]) -> str:
    """Plain-text listing of events, numbered from 1."""
    return _render_events(events)


def _ask_confirm(prompt: str) -> bool:
    while True:
        answer = input(f"{prompt} [y/n] ").strip().lower()
        if answer in ("y", "yes"):
            return True
        if answer in ("n", "no"):
            return False


def _ask_choice(prompt: str, items: list[str]) -> int:
    for number, item in enumerate(items, start=1):
        print(f"  {number}. {item}")
    while True:
        answer = input(f"{prompt}: ").strip()
        if answer.isdigit() and 1 <= int(answer) <= len(items):
            return int(answer) - 1


class CliApp:
    """Runs schedule commands against a storage directory and reports to a stream."""

    def __init__(
        self,
        storage: Storage | None = None,
        verbose: bool = False,
        out: TextIO | None = None,
        confirm: Callable[[str], bool] | None = None,
        choose: Callable[[str, list[str]], int] | None = None,
        color: bool | None = None,
    ) -> None:
        self.storage = storage if storage is not None else Storage()
        self.verbose = verbose
        self.out = out if out is not None else sys.stdout
        self.confirm = confirm if confirm is not None else _ask_confirm
        self.choose = choose if choose is not None else _ask_choice
        self.color = color
        self.scheduler = Scheduler()
        try:
            self.scheduler.load_schedule(self.storage.load_schedule())
        except (StorageError, OSError) as exc:
            if verbose:
                self._say(f"{self._paint('警告', 'yellow')}: {exc}")
        else:
            if verbose:
                self._say(self._paint("スケジュールを読み込みました。", "green"))

    def _paint(self, text: str, color: str | None = None, *attrs: str) -> str:
        if self.color is False:
            return text
        return colored(text, color, attrs=list(attrs) or None)

    def _say(self, text: str = "") -> None:
        print(text, file=self.out)

    def _show_events(self, events: Iterable[Event]) -> None:
        self.out.write(_render_events(events, self._paint))

    def _save(self) -> None:
        self.storage.save_schedule(self.scheduler.schedule)
        if self.verbose:
            self._say(self._paint("スケジュールを保存しました。", None, "dark"))

    def add_event(
        self,
        title: str,
        start: str,
        end: str,
        description: str | None = None,
        location: str | None = None,
        priority: str | None = None,
    ) -> uuid.UUID | None:
        """Create and store an event; return its id, or None if it was refused."""
        event_data = EventData(
            title=title,
            start_time=start,
            end_time=end,
            description=description,
            location=location,
            priority=parse_priority(priority),
        )
        try:
            event_id = self.scheduler.create_event(event_data)
        except ScheduleError as exc:
            self._say(f"{self._paint('エラー', 'red')}: {exc}")
            return None
        self._say(self._paint("予定を作成しました。", "green"))
        self._say(f"イベントID: {self._paint(str(event_id), 'cyan')}")
        self._save()
        return event_id

    def list_events(
        self, upcoming: bool = False, today: bool = False, limit: int | None = None
    ) -> list[Event]:
        """Show today's, upcoming or all events and return those shown."""
        if today:
            events = self.scheduler.today_events()
            heading = "今日の予定"
        elif upcoming:
            events = self.scheduler.upcoming_events(limit if limit is not None else 10)
            heading = "今後の予定"
        else:
            events = self.scheduler.list_events()
            if limit is not None:
                events = events[:limit]
            heading = "全ての予定"
        if not events:
            self._say(self._paint("予定がありません。", "yellow"))
        else:
            self._say(self._paint(f"=== {heading} ===", "blue", "bold"))
            self._show_events(events)
        return events

    def search_events(self, query: str) -> list[Event]:
        events = self.scheduler.search_events(query)
        if not events:
            self._say(self._paint(f"「{query}」に一致する予定が見つかりませんでした。", "yellow"))
        else:
            self._say(self._paint(f"=== 検索結果: {query} ===", "blue", "bold"))
            self._show_events(events)
        return events

    def show_statistics(self) -> ScheduleStatistics:
        stats = self.scheduler.statistics()
        self._say(self._paint("=== 予定統計 ===", "blue", "bold"))
        self._say(f"総予定数: {self._paint(str(stats.total_events), 'cyan')}")
        self._say(f"今後の予定: {self._paint(str(stats.upcoming_events), 'green')}")
        self._say(f"過去の予定: {self._paint(str(stats.past_events), 'yellow')}")
        self._say()
        self._say(self._paint("優先度別:", None, "bold"))
        self._say(f"  低: {self._paint(str(stats.low_priority), 'white')}")
        self._say(f"  中: {self._paint(str(stats.medium_priority), 'blue')}")
        self._say(f"  高: {self._paint(str(stats.high_priority), 'yellow')}")
        self._say(f"  緊急: {self._paint(str(stats.urgent_priority), 'red')}")
        return stats

    def backup(self) -> Path | None:
        """Back up the stored schedule; return the backup path, or None on failure."""
        try:
            backup_path = self.storage.backup_schedule()
        except (StorageError, OSError) as exc:
            self._say(f"{self._paint('バックアップエラー', 'red')}: {exc}")
            return None
        self._say(self._paint("バックアップを作成しました。", "green"))
        self._say(f"ファイル: {self._paint(str(backup_path), 'cyan')}")
        return backup_path

    def restore(self) -> bool:
        """Let the user pick a backup and restore it; return whether it was restored."""
        backups = self.storage.list_backups()
        if not backups:
            self._say(self._paint("利用可能なバックアップがありません。", "yellow"))
            return False
        selection = self.choose(
            "復元するバックアップを選択してください", [path.name for path in backups]
        )
        if not self.confirm(_OVERWRITE_PROMPT):
            return False
        try:
            self.storage.restore_schedule(backups[selection])
        except (StorageError, OSError) as exc:
            self._say(f"{self._paint('復元エラー', 'red')}: {exc}")
            return False
        self._say(self._paint("スケジュールを復元しました。", "green"))
        self._say(self._paint("アプリケーションを再起動してください。", "yellow"))
        return True

    def export(self, path: Path | str) -> bool:
        """Copy the stored schedule to ``path``; return whether it was written."""
        try:
            self.storage.export_schedule(Path(path))
        except (StorageError, OSError) as exc:
            self._say(f"{self._paint('エクスポートエラー', 'red')}: {exc}")
            return False
        self._say(self._paint("スケジュールをエクスポートしました。", "green"))
        self._say(f"ファイル: {self._paint(str(path), 'cyan')}")
        return True

    def import_schedule(self, path: Path | str) -> bool:
        """Replace the stored schedule with one read from ``path`` after confirmation."""
        if not self.confirm(_OVERWRITE_PROMPT):
            return False
        try:
            schedule = self.storage.import_schedule(Path(path))
        except (StorageError, OSError) as exc:
            self._say(f"{self._paint('インポートエラー', 'red')}: {exc}")
            return False
        self.storage.save_schedule(schedule)
        self._say(self._paint("スケジュールをインポートしました。", "green"))
        self._say(self._paint("アプリケーションを再起動してください。", "yellow"))
        return True