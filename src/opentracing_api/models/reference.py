"""
Relations between spans and the options used to start a span.
"""

from enum import Enum
from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, Field

from ..span_context import SpanContext


class ReferenceKind(str, Enum):
    """Known relationships between a span and a referenced context."""
    CHILD_OF = "child_of"
    FOLLOWS_FROM = "follows_from"


class SpanReference(BaseModel):
    """A relation to another span context."""
    kind: ReferenceKind = Field(..., description="Type of relationship")
    context: SpanContext = Field(..., description="The referenced span context")

    class Config:
        """Pydantic configuration."""
        arbitrary_types_allowed = True
        frozen = True

    @classmethod
    def child_of(cls, parent: SpanContext) -> "SpanReference":
        return cls(kind=ReferenceKind.CHILD_OF, context=parent)

    @classmethod
    def follows_from(cls, parent: SpanContext) -> "SpanReference":
        return cls(kind=ReferenceKind.FOLLOWS_FROM, context=parent)


class StartOptions(BaseModel):
    """
    Initial attributes of a span, passed to Tracer.span.

    By default a span has no references, which makes it a root span, and
    starts when Tracer.span is called.

    Example:
        options = StartOptions().child_of(parent.context.clone()).start_time(now)
        span = tracer.span("query", options)
    """
    references: List[SpanReference] = Field(default_factory=list, description="References to apply in order")
    start: Optional[datetime] = Field(None, description="Explicit start time of the operation")

    class Config:
        """Pydantic configuration."""
        arbitrary_types_allowed = True

    def child_of(self, parent: SpanContext) -> "StartOptions":
        """Declare a ChildOf relationship for the span to be."""
        return self.reference_span(SpanReference.child_of(parent))

    def follows(self, parent: SpanContext) -> "StartOptions":
        """Declare a FollowsFrom relationship for the span to be."""
        return self.reference_span(SpanReference.follows_from(parent))

    def reference_span(self, reference: SpanReference) -> "StartOptions":
        self.references.append(reference)
        return self

    def start_time(self, start_time: datetime) -> "StartOptions":
        """Set the start time of the operation."""
        self.start = start_time
        return self
