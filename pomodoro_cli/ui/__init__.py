"""Terminal presentation helpers."""

from .console import format_clock, format_duration, get_console

__all__ = ["format_clock", "format_duration", "get_console"]
