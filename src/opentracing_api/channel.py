"""
Unbounded multi-producer, single-consumer channel for finished spans.

Tracers keep the sending end and hand out the receiving end, which the
reporter drains. Closing the receiver makes every later send fail.
"""

import queue
import threading
import weakref
from datetime import timedelta
from typing import Generic, Optional, Tuple, TypeVar

from .errors import SendError

T = TypeVar("T")


class ReceiverClosed(Exception):
    """The receiving end of the channel was closed."""


class _ChannelState(Generic[T]):
    def __init__(self):
        self.queue: "queue.Queue[T]" = queue.Queue()
        self.lock = threading.Lock()
        self.closed = False


def _close_state(state: _ChannelState) -> None:
    with state.lock:
        state.closed = True


class SpanSender(Generic[T]):
    """Sending end of a span channel. Safe to share between threads."""

    def __init__(self, state: _ChannelState[T]):
        self._state = state

    def send(self, item: T) -> None:
        """
        Queue an item for the receiver.

        Raises:
            SendError: If the receiving end is closed
        """
        with self._state.lock:
            if self._state.closed:
                raise SendError("Span receiver is closed, was the reporter stopped?")
            self._state.queue.put(item)


class SpanReceiver(Generic[T]):
    """
    Receiving end of a span channel.

    The channel is closed when the receiver is closed or garbage collected.
    """

    def __init__(self, state: _ChannelState[T]):
        self._state = state
        self._finalizer = weakref.finalize(self, _close_state, state)

    @property
    def closed(self) -> bool:
        return self._state.closed

    def recv(self, timeout: Optional[timedelta] = None) -> T:
        """
        Wait for the next item.

        Args:
            timeout: How long to wait, forever if None

        Returns:
            The next item in FIFO order

        Raises:
            queue.Empty: If no item arrived within the timeout
            ReceiverClosed: If the receiver is closed and drained
        """
        if self._state.closed and self._state.queue.empty():
            raise ReceiverClosed("Span receiver is closed")
        seconds = timeout.total_seconds() if timeout is not None else None
        return self._state.queue.get(timeout=seconds)

    def try_recv(self) -> Optional[T]:
        """Return the next item if one is queued, None otherwise."""
        try:
            return self._state.queue.get_nowait()
        except queue.Empty:
            return None

    def close(self) -> None:
        """Close the channel; later sends raise SendError."""
        self._finalizer()


def span_channel() -> Tuple[SpanSender, SpanReceiver]:
    """Create a connected (sender, receiver) pair."""
    state: _ChannelState = _ChannelState()
    return SpanSender(state), SpanReceiver(state)
