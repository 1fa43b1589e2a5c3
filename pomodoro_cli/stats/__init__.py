"""Statistics package."""

from .store import DailyRecord, StatsFileError, StatsStore, date_key
from .report import build_table
from .totals import Accumulators

__all__ = [
    "DailyRecord",
    "StatsFileError",
    "StatsStore",
    "date_key",
    "build_table",
    "Accumulators",
]
