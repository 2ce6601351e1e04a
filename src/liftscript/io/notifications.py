"""
Rest-over notifications.

Best effort only: a failing or missing notifier never affects a session.
"""

import logging
import threading
from typing import Callable

logger = logging.getLogger(__name__)


class NullNotifier:
    """Notifier used when notifications are disabled."""

    def schedule_one_shot(self, after_seconds: int) -> None:
        pass

    def cancel_scheduled(self) -> None:
        pass


class TimerNotifier:
    """
    Fires a callback once after a delay on a daemon timer thread.

    Only one notification is pending at a time; scheduling replaces it.
    """

    def __init__(self, alert: Callable[[], None]):
        self._alert = alert
        self._timer: threading.Timer | None = None
        self._lock = threading.Lock()

    def _fire(self) -> None:
        try:
            self._alert()
        except Exception as e:
            logger.warning("Rest notification failed: %s", e)

    def schedule_one_shot(self, after_seconds: int) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(after_seconds, self._fire)
            self._timer.daemon = True
            self._timer.start()

    def cancel_scheduled(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._timer is not None and self._timer.is_alive()
