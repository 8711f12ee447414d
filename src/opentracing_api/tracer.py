"""
Tracer façade and the interface tracing backends implement.
"""

from abc import ABC, abstractmethod
from typing import BinaryIO, Mapping, MutableMapping, Optional, Union
import logging

from .carrier import ExtractFormat, InjectFormat, MapCarrier
from .errors import CarrierIoError
from .models.reference import StartOptions
from .span import Span
from .span_context import SpanContext


class TracerBackend(ABC):
    """
    Abstract interface for tracing backends.

    A backend decides the identifier scheme of its spans and where finished
    spans are shipped. Backends may support only some carrier formats and
    must raise UnsupportedFormatError for the others.
    """

    # Whether one instance can be used from many threads without locking.
    thread_safe: bool = True

    @abstractmethod
    def extract(self, fmt: ExtractFormat) -> Optional[SpanContext]:
        """
        Decode a span context from a carrier.

        Args:
            fmt: The carrier and its format

        Returns:
            The decoded context, or None if the carrier has no tracing fields

        Raises:
            ParseError: If tracing fields are present but malformed
            UnsupportedFormatError: If the format is not supported
        """
        pass

    @abstractmethod
    def inject(self, context: SpanContext, fmt: InjectFormat) -> None:
        """
        Encode a span context, baggage included, into a carrier.

        Args:
            context: The context to encode
            fmt: The carrier and its format
        """
        pass

    @abstractmethod
    def span(self, name: str, options: StartOptions) -> Span:
        """
        Create a new span with fresh identifiers.

        Args:
            name: Operation name
            options: Start options to apply

        Returns:
            The new span
        """
        pass


class Tracer:
    """
    Entry point to create and propagate spans.

    Every application and the libraries it uses should share a single
    Tracer for the whole process, ideally passed around explicitly.
    GlobalTracer is available where that is not practical.
    """

    def __init__(self, backend: TracerBackend):
        self._backend = backend
        self.logger = logging.getLogger(self.__class__.__name__)

    @property
    def backend(self) -> TracerBackend:
        return self._backend

    def extract(self, fmt: ExtractFormat) -> Optional[SpanContext]:
        """
        Extract a span context from a carrier.

        Args:
            fmt: The carrier and its format

        Returns:
            The span context or None if the carrier holds no context

        Raises:
            ParseError: If the carrier holds a malformed context
            CarrierIoError: If reading a stream carrier failed
        """
        try:
            return self._backend.extract(fmt)
        except OSError as e:
            self.logger.error(f"Failed to read {fmt.kind.value} carrier: {e}")
            raise CarrierIoError(f"Failed to read {fmt.kind.value} carrier: {e}") from e

    def extract_binary(self, carrier: BinaryIO) -> Optional[SpanContext]:
        return self.extract(ExtractFormat.binary(carrier))

    def extract_http_headers(self, carrier: Union[MapCarrier, Mapping[str, str]]) -> Optional[SpanContext]:
        return self.extract(ExtractFormat.http_headers(carrier))

    def extract_textmap(self, carrier: Union[MapCarrier, Mapping[str, str]]) -> Optional[SpanContext]:
        return self.extract(ExtractFormat.text_map(carrier))

    def inject(self, context: SpanContext, fmt: InjectFormat) -> None:
        """
        Inject a span context into a carrier.

        Raises:
            CarrierIoError: If writing a stream carrier failed
        """
        try:
            self._backend.inject(context, fmt)
        except OSError as e:
            self.logger.error(f"Failed to write {fmt.kind.value} carrier: {e}")
            raise CarrierIoError(f"Failed to write {fmt.kind.value} carrier: {e}") from e

    def inject_binary(self, context: SpanContext, carrier: BinaryIO) -> None:
        self.inject(context, InjectFormat.binary(carrier))

    def inject_http_headers(self, context: SpanContext, carrier: Union[MapCarrier, MutableMapping[str, str]]) -> None:
        self.inject(context, InjectFormat.http_headers(carrier))

    def inject_textmap(self, context: SpanContext, carrier: Union[MapCarrier, MutableMapping[str, str]]) -> None:
        self.inject(context, InjectFormat.text_map(carrier))

    def span(self, name: str, options: Optional[StartOptions] = None) -> Span:
        """
        Start a new span.

        Args:
            name: Operation name
            options: References and start time, defaults to a root span started now

        Returns:
            The new span
        """
        return self._backend.span(name, options or StartOptions())
