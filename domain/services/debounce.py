from __future__ import annotations

import asyncio
from collections.abc import Callable


class Debouncer:
    """Runs a callback once a quiet period has passed since the last schedule()."""

    def __init__(self, delay_seconds: float) -> None:
        self.delay_seconds = delay_seconds
        self._handle: asyncio.TimerHandle | None = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def schedule(self, callback: Callable[[], None]) -> None:
        self.cancel()
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No event loop to wait on: the interaction has already settled.
            callback()
            return

        def fire() -> None:
            self._handle = None
            callback()

        self._handle = loop.call_later(self.delay_seconds, fire)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
