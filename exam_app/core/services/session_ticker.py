"""Background one-second clock for server-held assessment sessions."""

from __future__ import annotations

from collections.abc import Callable
import logging
from threading import Event, Thread

from exam_app.constants.quiz_constants import TICK_INTERVAL_SECONDS

logger = logging.getLogger(__name__)


class SessionTicker:
    """Calls ``on_tick`` once per interval on a daemon thread until stopped."""

    def __init__(
        self,
        on_tick: Callable[[], object],
        interval_seconds: float = TICK_INTERVAL_SECONDS,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("Tick interval must be positive.")
        self._on_tick = on_tick
        self._interval = interval_seconds
        self._stop_event = Event()
        self._thread: Thread | None = None

    def start(self) -> Thread:
        if self._thread is not None and self._thread.is_alive():
            return self._thread
        self._stop_event.clear()
        self._thread = Thread(target=self._run, name="SessionTicker", daemon=True)
        self._thread.start()
        logger.info("Session ticker started (%.2fs interval)", self._interval)
        return self._thread

    def stop(self, timeout: float | None = None) -> None:
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        logger.info("Session ticker stopped")

    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def _run(self) -> None:
        while not self._stop_event.wait(self._interval):
            try:
                self._on_tick()
            except Exception:
                # Keep the clock alive for the remaining sessions.
                logger.exception("Session tick failed")
