"""Catching termination signals while waiting."""

from __future__ import annotations

import collections
import contextlib
import signal
import time
from typing import Any, Iterator, Optional

SIGNALS = (signal.SIGINT, signal.SIGTERM)
EMOJI_SIGNAL = "🚨"
_POLL_INTERVAL = 0.02


def _install(handler) -> dict:
    return {sig: signal.signal(sig, handler) for sig in SIGNALS}


def _restore(previous: dict) -> None:
    for sig, handler in previous.items():
        signal.signal(sig, handler if handler is not None else signal.SIG_DFL)


class SignalHandle:
    """Catches the signals in ``SIGNALS`` and keeps them until waited for."""

    def __init__(self) -> None:
        self._caught: collections.deque[signal.Signals] = collections.deque()
        self._previous = _install(self._on_signal)

    def _on_signal(self, signum: int, frame: Any) -> None:
        self._caught.append(signal.Signals(signum))

    def wait_for_signals_until(self, ppfmt, deadline: float) -> bool:
        """Wait until ``deadline`` (a ``time.monotonic()`` value).

        Returns True if a caught signal interrupted the wait.
        """
        while True:
            if self._caught:
                sig = self._caught.popleft()
                ppfmt.noticef(EMOJI_SIGNAL, "Caught signal: %s", sig)
                return True
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                return False
            time.sleep(min(remaining, _POLL_INTERVAL))

    def close(self) -> None:
        """Restore the signal handlers that were in place before."""
        _restore(self._previous)
        self._previous = {}

    def __enter__(self) -> "SignalHandle":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()


def setup() -> SignalHandle:
    """Start catching the signals in ``SIGNALS``."""
    return SignalHandle()


class _Cancellation:
    """A cancellation flag set by a signal or by hand."""

    def __init__(self) -> None:
        self._cancelled = False
        self._cause: Optional[signal.Signals] = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def cause(self) -> Optional[signal.Signals]:
        """The signal that cancelled, or None if cancelled by hand or not at all."""
        return self._cause

    def cancel(self, cause: Optional[signal.Signals] = None) -> None:
        if not self._cancelled:
            self._cause = cause
            self._cancelled = True

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until cancelled or until ``timeout`` seconds pass."""
        deadline = None if timeout is None else time.monotonic() + timeout
        while not self._cancelled:
            if deadline is None:
                time.sleep(_POLL_INTERVAL)
                continue
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                break
            time.sleep(min(remaining, _POLL_INTERVAL))
        return self._cancelled


@contextlib.contextmanager
def notify_context() -> Iterator[_Cancellation]:
    """Yield a cancellation that the signals in ``SIGNALS`` will trigger."""
    scope = _Cancellation()

    def handler(signum: int, frame: Any) -> None:
        scope.cancel(signal.Signals(signum))

    previous = _install(handler)
    try:
        yield scope
    finally:
        _restore(previous)