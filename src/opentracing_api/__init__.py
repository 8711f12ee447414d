"""
OpenTracing API - A backend independent distributed tracing API.

This package provides:
- Spans and span contexts that backends extend with their own identifiers
- ChildOf and FollowsFrom references with forward baggage propagation
- Carrier formats to inject and extract span contexts across processes
- A reporter thread that ships finished spans to a sink
- A process wide GlobalTracer for code without dependency injection
"""

__version__ = "0.1.0"

from .carrier import DictCarrier, ExtractFormat, Format, InjectFormat, MapCarrier
from .channel import SpanReceiver, SpanSender, span_channel
from .errors import (
    AutoFinishError,
    CarrierIoError,
    GlobalTracerError,
    MessageError,
    ParseError,
    SendError,
    SpanFinishedError,
    TracingError,
    UnsupportedContextError,
    UnsupportedFormatError,
)
from .fail import fail_span, failing_span
from .global_tracer import GlobalTracer
from .models import (
    Log,
    LogValue,
    ReferenceKind,
    SpanReference,
    StartOptions,
    TagValue,
)
from .reporter import ReporterConfig, ReporterThread
from .span import AutoFinishingSpan, AutoFinishPolicy, FinishedSpan, Span
from .span_context import BackendContext, SpanContext
from .tracer import Tracer, TracerBackend

__all__ = [
    "Tracer",
    "TracerBackend",
    "Span",
    "FinishedSpan",
    "AutoFinishingSpan",
    "AutoFinishPolicy",
    "SpanContext",
    "BackendContext",
    "SpanReference",
    "ReferenceKind",
    "StartOptions",
    "Log",
    "LogValue",
    "TagValue",
    "GlobalTracer",
    "ReporterThread",
    "ReporterConfig",
    "fail_span",
    "failing_span",
    # Carriers
    "Format",
    "ExtractFormat",
    "InjectFormat",
    "MapCarrier",
    "DictCarrier",
    "span_channel",
    "SpanSender",
    "SpanReceiver",
    # Errors
    "TracingError",
    "CarrierIoError",
    "ParseError",
    "SendError",
    "MessageError",
    "UnsupportedFormatError",
    "UnsupportedContextError",
    "SpanFinishedError",
    "AutoFinishError",
    "GlobalTracerError",
]
