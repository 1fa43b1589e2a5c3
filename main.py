#!/usr/bin/env python3
"""Pomodoro CLI entry point.

Run with:
    python main.py
    python -m pomodoro_cli
    pomodoro
"""

from pomodoro_cli.__main__ import run


if __name__ == "__main__":
    run()
