"""
Tracer backend that writes finished spans as human readable text.

Useful for development and debugging: point the reporter sink at
FileTracer.write_trace with any text stream.
"""

from dataclasses import dataclass, replace
from datetime import timedelta
from decimal import Decimal
from typing import Iterator, Optional, TextIO, Tuple
import logging
import random

from ..carrier import ExtractFormat, Format, InjectFormat
from ..channel import SpanReceiver, SpanSender, span_channel
from ..errors import ParseError, UnsupportedFormatError
from ..models.log import Log
from ..models.reference import ReferenceKind, SpanReference, StartOptions
from ..models.values import format_value
from ..span import FinishedSpan, Span
from ..span_context import BackendContext, SpanContext
from ..tracer import Tracer, TracerBackend

BAGGAGE_KEY_PREFIX = "Baggage-"
SPAN_ID_KEY = "SpanID"
TRACE_ID_KEY = "TraceID"

_MAX_ID = 2 ** 64

_REFERENCE_LABELS = {
    ReferenceKind.CHILD_OF: "Child of span ID",
    ReferenceKind.FOLLOWS_FROM: "Follows from span ID",
}


@dataclass
class FileTracerContext(BackendContext):
    """Identifiers of a FileTracer span."""
    trace_id: int
    span_id: int

    def clone(self) -> "FileTracerContext":
        return replace(self)

    def reference_span(self, reference: SpanReference) -> None:
        parent = reference.context.expect(FileTracerContext, "FileTracer")
        self.trace_id = parent.trace_id


def _parse_id(key: str, value: str) -> int:
    if not (value.isascii() and value.isdigit()):
        raise ParseError(key, value)
    parsed = int(value)
    if parsed >= _MAX_ID:
        raise ParseError(key, value)
    return parsed


def _new_id() -> int:
    return random.getrandbits(64)


class FileTracer(TracerBackend):
    """
    Tracer backend for text maps and HTTP headers.

    The binary format is not supported.
    """

    def __init__(self, sender: SpanSender):
        self.sender = sender
        self.logger = logging.getLogger(self.__class__.__name__)

    @classmethod
    def new(cls) -> Tuple[Tracer, SpanReceiver]:
        """
        Create a FileTracer wrapped in a Tracer.

        Returns:
            The tracer and the receiving end of its span channel
        """
        sender, receiver = span_channel()
        return Tracer(cls(sender)), receiver

    def extract(self, fmt: ExtractFormat) -> Optional[SpanContext]:
        """Extract a span context from a text map or HTTP headers."""
        if fmt.kind not in (Format.HTTP_HEADERS, Format.TEXT_MAP):
            raise UnsupportedFormatError("Unsupported extraction format")
        carrier = fmt.carrier

        trace_id = carrier.get(TRACE_ID_KEY)
        if trace_id is None:
            self.logger.debug(f"No {TRACE_ID_KEY} in carrier, nothing to extract")
            return None
        trace_id = _parse_id(TRACE_ID_KEY, trace_id)

        span_id = carrier.get(SPAN_ID_KEY)
        if span_id is None:
            return None
        span_id = _parse_id(SPAN_ID_KEY, span_id)

        context = SpanContext(FileTracerContext(trace_id=trace_id, span_id=span_id))
        items = carrier.find_items(lambda key: key.startswith(BAGGAGE_KEY_PREFIX))
        for key, value in items:
            context.set_baggage_item(key[len(BAGGAGE_KEY_PREFIX):], value)
        return context

    def inject(self, context: SpanContext, fmt: InjectFormat) -> None:
        """Inject a span context into a text map or HTTP headers."""
        inner = context.expect(FileTracerContext, "FileTracer")
        if fmt.kind not in (Format.HTTP_HEADERS, Format.TEXT_MAP):
            raise UnsupportedFormatError("Unsupported injection format")
        carrier = fmt.carrier
        carrier.set(TRACE_ID_KEY, str(inner.trace_id))
        carrier.set(SPAN_ID_KEY, str(inner.span_id))
        for key, value in context.baggage_items():
            carrier.set(f"{BAGGAGE_KEY_PREFIX}{key}", value)

    def span(self, name: str, options: StartOptions) -> Span:
        context = SpanContext(FileTracerContext(trace_id=_new_id(), span_id=_new_id()))
        return Span(name, context, options, self.sender)

    @staticmethod
    def format_trace(span: FinishedSpan) -> str:
        """
        Render a finished span as text.

        Tag and log keys are sorted; references and baggage items keep the
        order they were added in.
        """
        context = span.context.expect(FileTracerContext, "FileTracer")
        lines = [
            f"==>> Trace ID: {context.trace_id}",
            f"===> Span ID: {context.span_id}",
            f"===> Span Duration: {_format_duration(span.duration)}",
            "===> References: [",
        ]
        for reference in span.references:
            parent = reference.context.expect(FileTracerContext, "FileTracer")
            lines.append(f"===>   * {_REFERENCE_LABELS[reference.kind]}: {parent.span_id}")
        lines.append("===> ]")

        lines.append("===> Baggage items: [")
        for key, value in span.context.baggage_items():
            lines.append(f"===>   * {key}: {value}")
        lines.append("===> ]")

        lines.append("===> Tags: [")
        for key in sorted(span.tags):
            lines.append(f"===>   * {key}: {format_value(span.tags[key])}")
        lines.append("===> ]")

        lines.append("===> Logs: [")
        for log in span.logs:
            lines.extend(_format_log(log))
        lines.append("===> ]")
        return "".join(f"{line}\n" for line in lines)

    @staticmethod
    def write_trace(span: FinishedSpan, file: TextIO) -> None:
        """
        Write a finished span to a text stream.

        Args:
            span: Span created by a FileTracer
            file: Destination stream
        """
        file.write(FileTracer.format_trace(span))


def _format_duration(duration: timedelta) -> str:
    # Plain decimal seconds: no exponent, no trailing ".0" on whole values.
    seconds = duration.total_seconds()
    if seconds.is_integer():
        return str(int(seconds))
    return format(Decimal(repr(seconds)), "f")


def _format_log(log: Log) -> Iterator[str]:
    timestamp = int(log.timestamp.timestamp()) if log.timestamp else 0
    yield f"===>   - {timestamp}:"
    for key in sorted(log.fields):
        yield f"===>     * {key}: {format_value(log.fields[key])}"
