"""
Spans: in-flight operations and their finished, shippable snapshots.
"""

from enum import Enum
from typing import Dict, List, Optional
from datetime import datetime, timedelta, timezone
import logging
from pydantic import BaseModel, Field

from .channel import SpanSender
from .errors import AutoFinishError, SendError, SpanFinishedError
from .models.log import Log
from .models.reference import SpanReference, StartOptions
from .models.values import TagValue, validate_tag_value
from .span_context import SpanContext

logger = logging.getLogger(__name__)


class FinishedSpan(BaseModel):
    """
    A span that represents a finished operation.

    Finished spans are immutable and are sent by tracers to a receiver so
    they can be shipped to the distributed tracer.
    """
    name: str = Field(..., description="Name of the operation")
    context: SpanContext = Field(..., description="Span context of the operation")
    start_time: datetime = Field(..., description="When the operation started")
    finish_time: datetime = Field(..., description="When the operation finished")
    tags: Dict[str, TagValue] = Field(default_factory=dict, description="Span tags")
    logs: List[Log] = Field(default_factory=list, description="Structured logs in the order they were added")
    references: List[SpanReference] = Field(default_factory=list, description="Referenced span contexts")

    class Config:
        """Pydantic configuration."""
        arbitrary_types_allowed = True
        frozen = True

    @property
    def duration(self) -> timedelta:
        return self.finish_time - self.start_time


class Span:
    """
    Model of an in-progress operation.

    A span is to a distributed trace what a stack frame is to a stack trace.
    Spans are created by Tracer.span, populated with the mutators below and
    completed with finish(). A span that is never finished is never reported.
    """

    def __init__(self, name: str, context: SpanContext, options: Optional[StartOptions], sender: SpanSender):
        """
        Initialize a span and apply the start options.

        This is meant to be called by TracerBackend.span implementations.

        Args:
            name: Operation name
            context: Fresh span context created by the backend
            options: Start options, or None for defaults
            sender: Sending end of the tracer's span channel
        """
        options = options or StartOptions()
        self._context = context
        self._name = name
        self._sender = sender
        self._start_time = options.start or datetime.now(timezone.utc)
        self._finish_time: Optional[datetime] = None
        self._tags: Dict[str, TagValue] = {}
        self._logs: List[Log] = []
        self._references: List[SpanReference] = []
        self._finished = False
        for reference in options.references:
            self.reference_span(reference)

    def __repr__(self) -> str:
        state = "finished" if self._finished else "building"
        return f"Span(name={self._name!r}, {state}, context={self._context!r})"

    def _check_building(self) -> None:
        if self._finished:
            raise SpanFinishedError(f"Span '{self._name}' was already finished")

    @property
    def context(self) -> SpanContext:
        return self._context

    @property
    def operation_name(self) -> str:
        return self._name

    @property
    def start_time(self) -> datetime:
        return self._start_time

    @property
    def tags(self) -> Dict[str, TagValue]:
        return dict(self._tags)

    @property
    def logs(self) -> List[Log]:
        return list(self._logs)

    @property
    def references(self) -> List[SpanReference]:
        return list(self._references)

    @property
    def finished(self) -> bool:
        return self._finished

    def auto_finish(self, policy: "AutoFinishPolicy" = None) -> "AutoFinishingSpan":
        """
        Wrap the span so it is finished when the enclosing with block exits.

        Args:
            policy: What to do if finishing fails, AutoFinishPolicy.RAISE by default

        Returns:
            AutoFinishingSpan context manager
        """
        return AutoFinishingSpan(self, policy or AutoFinishPolicy.RAISE)

    def child_of(self, parent: SpanContext) -> None:
        """Mark this span as a child of the given context."""
        self.reference_span(SpanReference.child_of(parent))

    def follows(self, parent: SpanContext) -> None:
        """Mark this span as a follower of the given context."""
        self.reference_span(SpanReference.follows_from(parent))

    def reference_span(self, reference: SpanReference) -> None:
        """
        Add a reference to another span context.

        The backend context is updated and the referenced baggage items are
        copied into this span before the reference is recorded.
        """
        self._check_building()
        self._context.reference_span(reference)
        self._references.append(reference)

    def get_baggage_item(self, key: str) -> Optional[str]:
        return self._context.get_baggage_item(key)

    def set_baggage_item(self, key: str, value: str) -> None:
        """
        Add or update a baggage item.

        Baggage items are forwarded to spans that reference this span, and to
        the spans that reference those. They are never propagated backwards.
        """
        self._check_building()
        self._context.set_baggage_item(key, value)

    def log(self, log: Log) -> None:
        """Attach a log event, timestamped now if it has no timestamp."""
        self._check_building()
        log.at_or_now()
        self._logs.append(log)

    def tag(self, key: str, value: TagValue) -> None:
        """
        Set a tag on the span.

        Args:
            key: Tag name
            value: Tag value (bool, int, float or str)
        """
        self._check_building()
        self._tags[key] = validate_tag_value(value)

    def set_operation_name(self, name: str) -> None:
        self._check_building()
        self._name = name

    def set_finish_time(self, finish_time: datetime) -> None:
        """
        Set the finish time explicitly.

        The span can still be populated afterwards, so the operation can be
        timed first and annotated without skewing its duration.
        """
        self._check_building()
        self._finish_time = finish_time

    def finish(self) -> None:
        """
        Finish the span and send it to the tracer's receiver.

        The span is consumed: it cannot be used afterwards, even if sending
        fails.

        Raises:
            SendError: If the receiving end of the span channel is closed
            SpanFinishedError: If the span was already finished
        """
        self._check_building()
        self._finished = True
        finished = FinishedSpan(
            name=self._name,
            context=self._context,
            start_time=self._start_time,
            finish_time=self._finish_time or datetime.now(timezone.utc),
            tags=dict(self._tags),
            logs=list(self._logs),
            references=list(self._references),
        )
        self._sender.send(finished)
        logger.debug(f"Finished span '{self._name}'")


class AutoFinishPolicy(str, Enum):
    """What an AutoFinishingSpan does when finishing fails."""
    RAISE = "raise"
    LOG = "log"


class AutoFinishingSpan:
    """
    A span wrapper that finishes the span when the with block exits.

    The wrapper always holds a live span until the block exits, at which
    point the span is finished exactly once. If finishing fails the
    configured policy decides: RAISE raises AutoFinishError, LOG logs the
    failure and carries on. An exception already propagating out of the
    block is never replaced; the finish failure is logged instead.

    Example:
        with tracer.span("work").auto_finish() as span:
            span.tag("items", 3)
    """

    def __init__(self, span: Span, policy: AutoFinishPolicy = AutoFinishPolicy.RAISE):
        self._span = span
        self.policy = policy
        self.logger = logging.getLogger(self.__class__.__name__)

    def __enter__(self) -> "AutoFinishingSpan":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._span.finished:
            return
        try:
            self._span.finish()
        except SendError as e:
            if self.policy is AutoFinishPolicy.RAISE and exc_val is None:
                raise AutoFinishError("Failed to auto-finish span") from e
            self.logger.warning(f"Failed to auto-finish span '{self._span.operation_name}': {e}")

    @property
    def span(self) -> Span:
        return self._span

    @property
    def context(self) -> SpanContext:
        return self._span.context

    def log(self, log: Log) -> None:
        self._span.log(log)

    def tag(self, key: str, value: TagValue) -> None:
        self._span.tag(key, value)

    def set_baggage_item(self, key: str, value: str) -> None:
        self._span.set_baggage_item(key, value)
