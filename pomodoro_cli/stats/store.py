"""Per-day statistics file.

The file is a JSON array with one object per calendar day, oldest
first::

    [
      {"id": "2024/6/1", "totalBreakTime": 1800,
       "totalWorkTime": 9000, "completedWorkSessions": 6}
    ]

Saving on a day that matches the last record adds to it; any other day
appends a new record.
"""

from __future__ import annotations

import json
import os
import tempfile
from dataclasses import dataclass
from datetime import date
from pathlib import Path

from ..log import get_logger
from .totals import Accumulators

logger = get_logger(__name__)


_KEYS = ("id", "totalBreakTime", "totalWorkTime", "completedWorkSessions")


class StatsFileError(Exception):
    """The statistics file exists but cannot be trusted."""

    def __init__(self, path: Path, problem: str) -> None:
        super().__init__(f"{path}: {problem}")
        self.path = path
        self.problem = problem


def date_key(day: date) -> str:
    """``YYYY/M/D`` without zero padding."""
    return f"{day.year}/{day.month}/{day.day}"


@dataclass
class DailyRecord:
    id: str
    total_work_seconds: int = 0
    total_break_seconds: int = 0
    completed_work_sessions: int = 0

    @classmethod
    def from_json(cls, data: object, *, index: int, path: Path) -> "DailyRecord":
        if not isinstance(data, dict):
            raise StatsFileError(path, f"record {index} is not an object")
        missing = [k for k in _KEYS if k not in data]
        if missing:
            raise StatsFileError(
                path, f"record {index} is missing {', '.join(missing)}"
            )
        if not isinstance(data["id"], str):
            raise StatsFileError(path, f"record {index} has a non-string id")
        for key in _KEYS[1:]:
            value = data[key]
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise StatsFileError(
                    path, f"record {index} has an invalid {key}: {value!r}"
                )
        return cls(
            id=data["id"],
            total_work_seconds=data["totalWorkTime"],
            total_break_seconds=data["totalBreakTime"],
            completed_work_sessions=data["completedWorkSessions"],
        )

    def to_json(self) -> dict:
        return {
            "id": self.id,
            "totalBreakTime": self.total_break_seconds,
            "totalWorkTime": self.total_work_seconds,
            "completedWorkSessions": self.completed_work_sessions,
        }

    def add(self, totals: Accumulators) -> None:
        self.total_work_seconds += totals.total_work_seconds
        self.total_break_seconds += totals.total_break_seconds
        self.completed_work_sessions += totals.completed_work_sessions


class StatsStore:
    """Reads and merges :class:`DailyRecord` entries in one JSON file."""

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> list[DailyRecord]:
        """All records, oldest first.  A missing file is an empty history."""
        if not self._path.exists():
            return []
        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as exc:
            raise StatsFileError(self._path, f"cannot be read ({exc})") from exc
        if not raw.strip():
            return []
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise StatsFileError(self._path, f"invalid JSON ({exc})") from exc
        if not isinstance(data, list):
            raise StatsFileError(self._path, "expected a JSON array of records")
        return [
            DailyRecord.from_json(item, index=i, path=self._path)
            for i, item in enumerate(data)
        ]

    def save(self, totals: Accumulators, today: date | None = None) -> DailyRecord:
        """Fold *totals* into today's record and write the file.

        Raises :class:`StatsFileError` without touching the file when the
        existing content is malformed.
        """
        key = date_key(today or date.today())
        records = self.load()

        if records and records[-1].id == key:
            record = records[-1]
            record.add(totals)
        else:
            record = DailyRecord(id=key)
            record.add(totals)
            records.append(record)

        self._write(records)
        logger.info(
            "Saved stats for %s: work=%ss break=%ss sessions=%s",
            record.id,
            record.total_work_seconds,
            record.total_break_seconds,
            record.completed_work_sessions,
        )
        return record

    def _write(self, records: list[DailyRecord]) -> None:
        """Replace the file in one step so a failed write keeps the old history."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps([r.to_json() for r in records], indent=2) + "\n"
        fd, tmp_name = tempfile.mkstemp(
            dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
