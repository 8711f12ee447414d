"""
Tracer backend that creates spans but cannot propagate them.
"""

from dataclasses import dataclass, replace
from typing import Optional, Tuple
import random

from ..carrier import ExtractFormat, InjectFormat
from ..channel import SpanReceiver, SpanSender, span_channel
from ..errors import MessageError
from ..models.reference import SpanReference, StartOptions
from ..span import FinishedSpan, Span
from ..span_context import BackendContext, SpanContext
from ..tracer import Tracer, TracerBackend


@dataclass
class NullTracerContext(BackendContext):
    trace_id: int
    span_id: int

    def clone(self) -> "NullTracerContext":
        return replace(self)

    def reference_span(self, reference: SpanReference) -> None:
        parent = reference.context.expect(NullTracerContext, "NullTracer")
        self.trace_id = parent.trace_id


class NullTracer(TracerBackend):
    """
    Tracer backend without carrier support.

    Extract and inject always fail with a MessageError, which makes it
    suitable for processes that must never accept or forward trace state.
    """

    def __init__(self, sender: SpanSender):
        self.sender = sender

    @classmethod
    def new(cls) -> Tuple[Tracer, SpanReceiver]:
        sender, receiver = span_channel()
        return Tracer(cls(sender)), receiver

    def extract(self, fmt: ExtractFormat) -> Optional[SpanContext]:
        raise MessageError(f"NullTracer cannot extract from {fmt.kind.value} carriers")

    def inject(self, context: SpanContext, fmt: InjectFormat) -> None:
        raise MessageError(f"NullTracer cannot inject into {fmt.kind.value} carriers")

    def span(self, name: str, options: StartOptions) -> Span:
        context = SpanContext(NullTracerContext(
            trace_id=random.getrandbits(64),
            span_id=random.getrandbits(64),
        ))
        return Span(name, context, options, self.sender)

    @staticmethod
    def report(span: FinishedSpan) -> None:
        """Reporter sink that drops the span."""
        del span
