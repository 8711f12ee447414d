"""
Value models attached to spans: tags, logs, references and start options.
"""

from .values import TagValue, LogValue, format_value
from .log import Log
from .reference import ReferenceKind, SpanReference, StartOptions

__all__ = [
    "TagValue",
    "LogValue",
    "format_value",
    "Log",
    "ReferenceKind",
    "SpanReference",
    "StartOptions",
]
