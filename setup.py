"""setuptools setup for Pomodoro CLI.

Install for development:
    pip install -e ".[test]"
"""

from setuptools import find_packages, setup

setup(
    name="pomodoro-cli",
    version="0.1.0",
    description="Interactive command-line Pomodoro timer with daily statistics",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    install_requires=[
        "PyQt6>=6.5",
        "numpy>=1.24",
        "plyer>=2.1",
        "platformdirs>=3.0",
        "rich>=13.0",
        "typer>=0.9",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "pomodoro=pomodoro_cli.__main__:run",
        ],
    },
)
