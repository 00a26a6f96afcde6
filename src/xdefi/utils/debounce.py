"""Debouncing for rapidly changing input values.

A Debouncer holds two values: the latest input and the settled value. The
settled value only catches up with the input once no new input has arrived
for the quiet period.
"""

import asyncio
import logging
from typing import Callable, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Debouncer(Generic[T]):
    """Collapses a stream of input values into settled values.

    Runs on the current asyncio event loop. Each update cancels the pending
    timer and starts a new one, so a burst of updates settles once, on the
    last value.

    Example:
        debouncer = Debouncer(0.45, initial="")
        debouncer.subscribe(lambda amount: print("settled", amount))
        debouncer.update("1")
        debouncer.update("10")  # only "10" settles, 0.45s after this call
    """

    def __init__(self, quiet_period: float, initial: T):
        """Initialize the debouncer.

        Args:
            quiet_period: Seconds without input required before settling
            initial: Starting value for both input and settled value
        """
        if quiet_period < 0:
            raise ValueError(f"quiet_period must be non-negative, got {quiet_period}")
        self.quiet_period = quiet_period
        self._value: T = initial
        self._latest: T = initial
        self._handle: Optional[asyncio.TimerHandle] = None
        self._listeners: list[Callable[[T], None]] = []
        self._closed = False

    @property
    def value(self) -> T:
        """The settled value."""
        return self._value

    @property
    def latest(self) -> T:
        """The most recent input value."""
        return self._latest

    @property
    def pending(self) -> bool:
        """True while an input change is waiting out the quiet period."""
        return self._handle is not None

    @property
    def closed(self) -> bool:
        return self._closed

    def subscribe(self, listener: Callable[[T], None]) -> Callable[[], None]:
        """Register a listener for settled values.

        Returns:
            Callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def update(self, value: T) -> None:
        """Record a new input value and restart the quiet period."""
        if self._closed:
            return

        self._latest = value
        self._cancel_timer()

        # Back at the settled value: nothing left to emit
        if value == self._value:
            return

        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.quiet_period, self._settle)

    def close(self) -> None:
        """Cancel any pending timer without emitting and stop accepting input."""
        if self._closed:
            return
        if self.pending:
            logger.debug(f"Debouncer closed with pending value {self._latest!r}; dropped")
        self._cancel_timer()
        self._listeners.clear()
        self._closed = True

    def _cancel_timer(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _settle(self) -> None:
        self._handle = None
        if self._closed:
            return

        self._value = self._latest
        for listener in list(self._listeners):
            listener(self._value)
