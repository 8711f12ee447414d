"""
Error kinds raised by the tracing API.

Recoverable errors derive from TracingError and are returned to the caller
of an explicit operation (extract, inject, finish). Contract violations
derive from RuntimeError: they signal a wiring or programming mistake and
are not meant to be handled.
"""


class TracingError(Exception):
    """Base class for recoverable tracing errors."""


class CarrierIoError(TracingError):
    """Reading from or writing to a carrier stream failed."""


class ParseError(TracingError):
    """A tracing field was present in a carrier but could not be decoded."""

    def __init__(self, key: str, value: str):
        self.key = key
        self.value = value
        super().__init__(f"Unable to parse carrier field '{key}': {value!r}")


class SendError(TracingError):
    """A finished span could not be sent because the receiver is closed."""


class MessageError(TracingError):
    """Backend specific failure described by a free text message."""


class UnsupportedFormatError(RuntimeError):
    """A backend was asked to use a carrier format it does not support."""


class UnsupportedContextError(RuntimeError):
    """A span context was created by a different backend."""


class SpanFinishedError(RuntimeError):
    """A span was used after it was finished."""


class AutoFinishError(RuntimeError):
    """An auto-finishing span failed to finish on scope exit."""


class GlobalTracerError(RuntimeError):
    """The global tracer was initialised twice or used before init."""
