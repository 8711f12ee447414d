"""
Tracer backend that records nothing.
"""

from dataclasses import dataclass, replace
from typing import Optional, Tuple
import random

from ..carrier import ExtractFormat, InjectFormat
from ..channel import SpanReceiver, SpanSender, span_channel
from ..models.reference import SpanReference, StartOptions
from ..span import FinishedSpan, Span
from ..span_context import BackendContext, SpanContext
from ..tracer import Tracer, TracerBackend


@dataclass
class NoopTracerContext(BackendContext):
    trace_id: bytes
    span_id: int

    def clone(self) -> "NoopTracerContext":
        return replace(self)

    def reference_span(self, reference: SpanReference) -> None:
        parent = reference.context.expect(NoopTracerContext, "NoopTracer")
        self.trace_id = parent.trace_id


class NoopTracer(TracerBackend):
    """
    Tracer backend for code paths where tracing is disabled.

    Spans are still created and finished so instrumented code behaves the
    same, but extract never finds a context, inject writes nothing and
    report discards the span.
    """

    def __init__(self, sender: SpanSender):
        self.sender = sender

    @classmethod
    def new(cls) -> Tuple[Tracer, SpanReceiver]:
        sender, receiver = span_channel()
        return Tracer(cls(sender)), receiver

    def extract(self, fmt: ExtractFormat) -> Optional[SpanContext]:
        return None

    def inject(self, context: SpanContext, fmt: InjectFormat) -> None:
        pass

    def span(self, name: str, options: StartOptions) -> Span:
        context = SpanContext(NoopTracerContext(
            trace_id=random.getrandbits(128).to_bytes(16, "big"),
            span_id=random.getrandbits(64),
        ))
        return Span(name, context, options, self.sender)

    @staticmethod
    def report(span: FinishedSpan) -> None:
        """Reporter sink that drops the span."""
        del span
