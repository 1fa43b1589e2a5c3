"""Desktop notifications through plyer."""

from __future__ import annotations

from plyer import notification

from .log import get_logger

logger = get_logger(__name__)


NOTIFICATION_TITLE = "Pomodoro Timer"
NOTIFICATION_TIMEOUT = 10  # seconds


class DesktopNotifier:
    """Send "session started/ended" banners.  Never raises."""

    def __init__(self, *, enabled: bool = True, title: str = NOTIFICATION_TITLE) -> None:
        self.enabled = enabled
        self.title = title

    def send(self, message: str) -> bool:
        """Show *message*.  Returns False when disabled or delivery failed."""
        if not self.enabled:
            return False
        try:
            notification.notify(
                title=self.title,
                message=message,
                app_name=self.title,
                timeout=NOTIFICATION_TIMEOUT,
            )
        except Exception:
            logger.exception("Desktop notification failed: %s", message)
            return False
        return True

    def session_started(self, label: str) -> bool:
        return self.send(f"{label} Started.")

    def session_ended(self, label: str) -> bool:
        return self.send(f"{label} ended.")
