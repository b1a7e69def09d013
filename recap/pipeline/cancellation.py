from __future__ import annotations

import threading


class CancellationToken:
    """Run-scoped cancellation flag with an interruptible wait."""

    def __init__(self) -> None:
        self._event = threading.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    def wait(self, timeout_s: float) -> bool:
        """Sleep up to timeout_s; returns True as soon as the token is cancelled."""
        return self._event.wait(timeout_s)


__all__ = ["CancellationToken"]
