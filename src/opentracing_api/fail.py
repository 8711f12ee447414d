"""
Helpers to record failed operations on spans.
"""

from contextlib import contextmanager
from typing import Iterator, Union

from .models.log import Log
from .span import AutoFinishingSpan, Span


def fail_span(span: Union[Span, AutoFinishingSpan], error: BaseException) -> None:
    """
    Mark a span as failed with the given error.

    Sets the "error" tag and logs an error event carrying the message, kind
    and representation of the error.

    Args:
        span: The span (or auto-finishing span) of the failed operation
        error: The error that made the operation fail
    """
    span.tag("error", True)
    span.log(
        Log()
        .log("event", "error")
        .log("message", str(error))
        .log("error.kind", type(error).__name__)
        .log("error.object", repr(error))
    )


@contextmanager
def failing_span(span: Union[Span, AutoFinishingSpan]) -> Iterator[Union[Span, AutoFinishingSpan]]:
    """
    Record any exception raised in the block on the span, then re-raise it.

    Example:
        with failing_span(span):
            connect()
    """
    try:
        yield span
    except Exception as e:
        fail_span(span, e)
        raise
