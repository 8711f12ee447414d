"""
Process wide tracer holder for code that cannot receive a Tracer explicitly.

The global tracer must be initialised once, early in the application start
up and before any concurrent use. Initialising it twice or reading it before
initialisation are programming errors and raise GlobalTracerError.
"""

from typing import Optional, Union
import logging
import threading

from .carrier import ExtractFormat, InjectFormat
from .errors import GlobalTracerError
from .models.reference import StartOptions
from .span import Span
from .span_context import SpanContext
from .tracer import Tracer

logger = logging.getLogger(__name__)


class ExclusiveTracer(Tracer):
    """
    Tracer handle that serialises every call to the backend under a lock.

    Used by GlobalTracer for backends that declare thread_safe = False.
    """

    def __init__(self, tracer: Tracer):
        super().__init__(tracer.backend)
        self._lock = threading.RLock()

    def extract(self, fmt: ExtractFormat) -> Optional[SpanContext]:
        with self._lock:
            return super().extract(fmt)

    def inject(self, context: SpanContext, fmt: InjectFormat) -> None:
        with self._lock:
            super().inject(context, fmt)

    def span(self, name: str, options: Optional[StartOptions] = None) -> Span:
        with self._lock:
            return super().span(name, options)


class GlobalTracer:
    """Initialise-once holder of the process wide Tracer."""

    _tracer: Optional[Tracer] = None
    _lock = threading.Lock()

    @classmethod
    def init(cls, tracer: Tracer) -> Tracer:
        """
        Set the global tracer.

        Args:
            tracer: The tracer shared by the whole process

        Returns:
            The global tracer handle, same as GlobalTracer.get()

        Raises:
            GlobalTracerError: If the global tracer is already initialised
        """
        with cls._lock:
            if cls._tracer is not None:
                raise GlobalTracerError("GlobalTracer already initialised")
            handle: Union[Tracer, ExclusiveTracer] = tracer
            if not tracer.backend.thread_safe:
                handle = ExclusiveTracer(tracer)
            cls._tracer = handle
        logger.debug(f"Initialised global tracer with backend {type(tracer.backend).__name__}")
        return handle

    @classmethod
    def get(cls) -> Tracer:
        """
        Access the global tracer.

        Raises:
            GlobalTracerError: If GlobalTracer.init was not called
        """
        tracer = cls._tracer
        if tracer is None:
            raise GlobalTracerError("GlobalTracer not initialised, call GlobalTracer.init first")
        return tracer

    @classmethod
    def is_initialised(cls) -> bool:
        return cls._tracer is not None

    @classmethod
    def _reset(cls) -> None:
        # Tests only.
        with cls._lock:
            cls._tracer = None
