"""JSON file storage for schedules, with backups, export and import."""

from __future__ import annotations

import json
import os
import shutil
from datetime import datetime, timezone
from pathlib import Path

from schedai.models import Schedule

SCHEDULE_FILENAME = "schedule.json"
BACKUP_PREFIX = "schedule_backup_"
BACKUP_SUFFIX = ".json"


class StorageError(Exception):
    """Raised when schedule data cannot be read, written or found."""


def default_data_directory() -> Path:
    """The application's data directory inside the user's home directory."""
    home = os.environ.get("HOME") or os.environ.get("USERPROFILE")
    if not home:
        raise StorageError("ホームディレクトリが見つかりません")
    return Path(home) / ".schedule_ai_agent"


def _read_schedule(path: Path) -> Schedule:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return Schedule.from_dict(data)
    except (json.JSONDecodeError, UnicodeDecodeError, ValueError) as exc:
        raise StorageError(f"スケジュールを読み込めません: {exc}") from exc


class Storage:
    """Keeps the schedule in a JSON file inside a data directory."""

    def __init__(self, data_dir: Path | str | None = None) -> None:
        self.data_dir = Path(data_dir) if data_dir is not None else default_data_directory()
        self.schedule_file = self.data_dir / SCHEDULE_FILENAME
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def save_schedule(self, schedule: Schedule) -> None:
        text = json.dumps(schedule.to_dict(), indent=2, ensure_ascii=False)
        self.schedule_file.write_text(text, encoding="utf-8")

    def load_schedule(self) -> Schedule:
        """Load the stored schedule, or an empty one if nothing is stored."""
        if not self.schedule_file.exists():
            return Schedule()
        return _read_schedule(self.schedule_file)

    def backup_schedule(self) -> Path:
        """Copy the schedule file to a timestamped backup and return its path."""
        if not self.schedule_file.exists():
            raise StorageError("バックアップするスケジュールファイルが存在しません")
        stamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
        backup_file = self.data_dir / f"{BACKUP_PREFIX}{stamp}{BACKUP_SUFFIX}"
        shutil.copy(self.schedule_file, backup_file)
        return backup_file

    def restore_schedule(self, backup_file: Path | str) -> None:
        """Replace the schedule with a backup, backing up the current one first."""
        backup_file = Path(backup_file)
        if not backup_file.exists():
            raise StorageError("指定されたバックアップファイルが存在しません")
        if self.schedule_file.exists():
            try:
                self.backup_schedule()
            except (OSError, StorageError):
                pass
        shutil.copy(backup_file, self.schedule_file)

    def export_schedule(self, export_path: Path | str) -> None:
        if not self.schedule_file.exists():
            raise StorageError("エクスポートするスケジュールファイルが存在しません")
        shutil.copy(self.schedule_file, Path(export_path))

    def import_schedule(self, import_path: Path | str) -> Schedule:
        """Read a schedule from another file without storing it."""
        import_path = Path(import_path)
        if not import_path.exists():
            raise StorageError("インポートするファイルが存在しません")
        return _read_schedule(import_path)

    def list_backups(self) -> list[Path]:
        """Backup files in the data directory, newest first."""
        if not self.data_dir.exists():
            return []
        backups = [
            path
            for path in self.data_dir.iterdir()
            if path.is_file()
            and path.name.startswith(BACKUP_PREFIX)
            and path.name.endswith(BACKUP_SUFFIX)
        ]

        def modified(path: Path) -> float:
            try:
                return path.stat().st_mtime
            except OSError:
                return 0.0

        return sorted(backups, key=lambda path: (modified(path), path.name), reverse=True)

    def cleanup_old_backups(self, keep_count: int) -> int:
        """Delete all but the newest ``keep_count`` backups; return how many went."""
        deleted = 0
        for backup in self.list_backups()[keep_count:]:
            try:
                backup.unlink()
            except OSError:
                continue
            deleted += 1
        return deleted