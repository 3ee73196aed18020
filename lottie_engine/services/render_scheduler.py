"""Debounce policy for preview re-renders.

Editors can fire many mutations per second (a color picker drag emits one per
pointer move). Only the last pending render inside the window is run.
"""
from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from lottie_engine.utils.config import settings

logger = logging.getLogger(__name__)

Work = Callable[[], None]


class DebouncedScheduler:
    """Cancel-then-enqueue scheduler driven by an injectable clock.

    ``schedule`` never runs work itself; the host calls ``poll`` from its
    event loop (or ``flush`` to force it).
    """

    def __init__(self, window_ms: Optional[float] = None, clock: Callable[[], float] = time.monotonic):
        self.window = (settings.render_debounce_ms if window_ms is None else window_ms) / 1000.0
        self.clock = clock
        self._work: Optional[Work] = None
        self._due: Optional[float] = None

    @property
    def pending(self) -> bool:
        return self._work is not None

    def schedule(self, work: Work) -> None:
        if self._work is not None:
            logger.debug("Superseding pending render")
        self._work = work
        self._due = self.clock() + self.window

    def cancel(self) -> None:
        self._work = None
        self._due = None

    def poll(self) -> bool:
        """Run the pending work if its window has elapsed; returns whether it ran."""
        if self._work is None or self.clock() < self._due:
            return False
        return self.flush()

    def flush(self) -> bool:
        work = self._work
        self.cancel()
        if work is None:
            return False
        work()
        return True


class ImmediateScheduler:
    """Runs work synchronously; for batch tools and tests."""

    pending = False

    def schedule(self, work: Work) -> None:
        work()

    def cancel(self) -> None:
        pass

    def poll(self) -> bool:
        return False

    def flush(self) -> bool:
        return False
