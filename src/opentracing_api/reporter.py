"""
Background reporting of finished spans.
"""

from dataclasses import dataclass, replace
from datetime import timedelta
from typing import Callable, Optional
import logging
import os
import queue
import threading
import time
import weakref

from .channel import ReceiverClosed, SpanReceiver
from .span import FinishedSpan

STOP_DELAY_ENV = "OPENTRACING_REPORTER_STOP_DELAY"
RECV_TIMEOUT_ENV = "OPENTRACING_REPORTER_RECV_TIMEOUT"


@dataclass
class ReporterConfig:
    """Configuration for a reporter thread."""
    stop_delay: timedelta = timedelta(seconds=2)
    recv_timeout: timedelta = timedelta(milliseconds=50)
    thread_name: str = "OpenTracingReporter"

    @classmethod
    def from_env(cls) -> "ReporterConfig":
        """
        Build a configuration from environment variables.

        OPENTRACING_REPORTER_STOP_DELAY and OPENTRACING_REPORTER_RECV_TIMEOUT
        are read as seconds; unset variables keep the defaults.

        Returns:
            ReporterConfig instance
        """
        config = cls()
        stop_delay = os.getenv(STOP_DELAY_ENV)
        if stop_delay:
            config.stop_delay = timedelta(seconds=float(stop_delay))
        recv_timeout = os.getenv(RECV_TIMEOUT_ENV)
        if recv_timeout:
            config.recv_timeout = timedelta(seconds=float(recv_timeout))
        return config


def _drain(
    receiver: SpanReceiver,
    sink: Callable[[FinishedSpan], None],
    stopping: threading.Event,
    recv_timeout: timedelta,
    logger: logging.Logger,
) -> None:
    # Runs on the reporter thread; holds no reference to the ReporterThread.
    while not stopping.is_set():
        try:
            span = receiver.recv(recv_timeout)
        except queue.Empty:
            continue
        except ReceiverClosed:
            logger.error("Span receiver closed while the reporter was running, stopping")
            return
        try:
            sink(span)
        except Exception as e:
            logger.exception(f"Reporter sink failed for span '{span.name}': {e}")


def _shutdown(
    thread: threading.Thread,
    receiver: SpanReceiver,
    stopping: threading.Event,
    stop_delay: timedelta,
    logger: logging.Logger,
) -> None:
    time.sleep(stop_delay.total_seconds())
    stopping.set()
    if thread is not threading.current_thread():
        thread.join()
    receiver.close()
    logger.debug(f"Stopped reporter thread '{thread.name}'")


class ReporterThread:
    """
    Drains finished spans on a dedicated thread and passes them to a sink.

    Stopping waits for stop_delay so spans finished just before the call can
    still arrive, then stops the thread and closes the receiver. A reporter
    that is garbage collected, or still running at interpreter exit, is
    stopped the same way.

    Example:
        tracer, receiver = FileTracer.new()
        with ReporterThread(receiver, lambda span: FileTracer.write_trace(span, sys.stderr)):
            run_application(tracer)
    """

    def __init__(
        self,
        receiver: SpanReceiver,
        sink: Callable[[FinishedSpan], None],
        config: Optional[ReporterConfig] = None,
        stop_delay: Optional[timedelta] = None,
    ):
        """
        Initialize the reporter and start its thread.

        Args:
            receiver: Receiving end of the tracer's span channel
            sink: Called on the reporter thread with each finished span
            config: Reporter configuration, defaults to ReporterConfig()
            stop_delay: Overrides config.stop_delay
        """
        self.config = config or ReporterConfig()
        if stop_delay is not None:
            self.config = replace(self.config, stop_delay=stop_delay)
        self.logger = logging.getLogger(self.__class__.__name__)
        self._stop_lock = threading.Lock()
        stopping = threading.Event()
        self._thread = threading.Thread(
            target=_drain,
            args=(receiver, sink, stopping, self.config.recv_timeout, self.logger),
            name=self.config.thread_name,
            daemon=True,
        )
        self._thread.start()
        self._finalizer = weakref.finalize(
            self, _shutdown, self._thread, receiver, stopping, self.config.stop_delay, self.logger
        )
        self.logger.debug(f"Started reporter thread '{self.config.thread_name}'")

    def __enter__(self) -> "ReporterThread":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()

    @property
    def running(self) -> bool:
        return self._thread.is_alive()

    def stop(self) -> None:
        """
        Stop the reporter thread. Calling stop more than once is a no-op.

        No sink calls happen once stop returns. When called from the sink
        itself, the current span is the last one passed to the sink.
        """
        with self._stop_lock:
            self._finalizer()
