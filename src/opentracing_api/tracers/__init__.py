# Reference tracer backends
from .file import FileTracer, FileTracerContext
from .noop import NoopTracer, NoopTracerContext
from .null import NullTracer, NullTracerContext

__all__ = [
    "FileTracer",
    "FileTracerContext",
    "NoopTracer",
    "NoopTracerContext",
    "NullTracer",
    "NullTracerContext",
]
