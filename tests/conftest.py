"""
Shared fixtures for the opentracing_api test suite.
"""

import pytest

from opentracing_api import SpanContext
from opentracing_api.tracers import FileTracer, FileTracerContext, NoopTracer


def pytest_configure(config):
    config.addinivalue_line("markers", "integration: end to end tests running real threads")


def make_file_context(trace_id: int, span_id: int) -> SpanContext:
    """Build a span context as FileTracer would."""
    return SpanContext(FileTracerContext(trace_id=trace_id, span_id=span_id))


@pytest.fixture
def file_context():
    """Factory for FileTracer span contexts with known IDs."""
    return make_file_context


@pytest.fixture
def file_tracer():
    """A FileTracer and the receiving end of its span channel."""
    return FileTracer.new()


@pytest.fixture
def noop_tracer():
    """A NoopTracer and the receiving end of its span channel."""
    return NoopTracer.new()
