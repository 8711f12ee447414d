"""
Unit tests for the Tracer façade using a backend that supports every format.
"""

import io
import pytest

from opentracing_api import (
    BackendContext,
    CarrierIoError,
    ExtractFormat,
    Format,
    InjectFormat,
    ReferenceKind,
    Span,
    SpanContext,
    SpanReference,
    StartOptions,
    Tracer,
    TracerBackend,
    span_channel,
)


class NamedContext(BackendContext):
    def __init__(self, name: str):
        self.name = name

    def clone(self) -> "NamedContext":
        return NamedContext(self.name)

    def reference_span(self, reference: SpanReference) -> None:
        pass


class StreamingBackend(TracerBackend):
    """Backend encoding contexts as text lines, headers or lower case text maps."""

    def __init__(self):
        self.sender, self.receiver = span_channel()

    def extract(self, fmt):
        if fmt.kind is Format.BINARY:
            lines = fmt.carrier.read().decode("utf-8").splitlines()
            if not lines:
                return None
            context = SpanContext(NamedContext(lines[0].strip()))
            for line in lines[1:]:
                key, value = line.split(":", 1)
                context.set_baggage_item(key, value)
            return context

        name_key, prefix = ("Span-Name", "Baggage-") if fmt.kind is Format.HTTP_HEADERS else ("span-name", "baggage-")
        name = fmt.carrier.get(name_key)
        if name is None:
            return None
        context = SpanContext(NamedContext(name))
        for key, value in fmt.carrier.find_items(lambda k: k.startswith(prefix)):
            context.set_baggage_item(key[len(prefix):], value)
        return context

    def inject(self, context, fmt):
        inner = context.expect(NamedContext, "StreamingBackend")
        if fmt.kind is Format.BINARY:
            fmt.carrier.write(f"{inner.name}\n".encode("utf-8"))
            for key, value in context.baggage_items():
                fmt.carrier.write(f"{key}:{value}\n".encode("utf-8"))
            return
        name_key, prefix = ("Span-Name", "Baggage-") if fmt.kind is Format.HTTP_HEADERS else ("span-name", "baggage-")
        fmt.carrier.set(name_key, inner.name)
        for key, value in context.baggage_items():
            fmt.carrier.set(f"{prefix}{key}", value)

    def span(self, name, options):
        return Span(name, SpanContext(NamedContext(name)), options, self.sender)


class BrokenStream(io.RawIOBase):
    def read(self, size=-1):
        raise OSError("stream closed by peer")

    def write(self, data):
        raise OSError("disk full")


@pytest.fixture
def backend():
    return StreamingBackend()


@pytest.fixture
def tracer(backend):
    return Tracer(backend)


def make_context(name: str, **baggage) -> SpanContext:
    context = SpanContext(NamedContext(name))
    for key, value in baggage.items():
        context.set_baggage_item(key, value)
    return context


class TestTracerExtract:
    """Test cases for Tracer.extract."""

    def test_binary(self, tracer):
        """Test extracting from a byte stream."""
        stream = io.BytesIO(b"test-span\na:b\nc:d\n")
        context = tracer.extract_binary(stream)
        assert context.expect(NamedContext, "StreamingBackend").name == "test-span"
        assert dict(context.baggage_items()) == {"a": "b", "c": "d"}

    def test_http_headers(self, tracer):
        """Test extracting from HTTP headers."""
        headers = {"Span-Name": "test-span", "Baggage-a": "b"}
        context = tracer.extract_http_headers(headers)
        assert context.downcast(NamedContext).name == "test-span"
        assert context.get_baggage_item("a") == "b"

    def test_textmap(self, tracer):
        """Test extracting from a text map."""
        context = tracer.extract_textmap({"span-name": "test-span", "baggage-a": "b"})
        assert context.downcast(NamedContext).name == "test-span"
        assert context.get_baggage_item("a") == "b"

    def test_missing_context(self, tracer):
        """Test that an empty carrier yields no context."""
        assert tracer.extract_http_headers({}) is None
        assert tracer.extract(ExtractFormat.binary(io.BytesIO(b""))) is None

    def test_stream_failure(self, tracer):
        """Test that stream errors surface as CarrierIoError."""
        with pytest.raises(CarrierIoError) as info:
            tracer.extract_binary(BrokenStream())
        assert isinstance(info.value.__cause__, OSError)


class TestTracerInject:
    """Test cases for Tracer.inject."""

    def test_binary(self, tracer):
        """Test injecting into a byte stream."""
        stream = io.BytesIO()
        tracer.inject_binary(make_context("test-span", a="b"), stream)
        assert stream.getvalue() == b"test-span\na:b\n"

    def test_http_headers(self, tracer):
        """Test injecting into HTTP headers."""
        headers = {}
        tracer.inject_http_headers(make_context("test-span", a="b"), headers)
        assert headers == {"Span-Name": "test-span", "Baggage-a": "b"}

    def test_textmap(self, tracer):
        """Test injecting into a text map."""
        text_map = {}
        tracer.inject(make_context("test-span", a="b"), InjectFormat.text_map(text_map))
        assert text_map == {"span-name": "test-span", "baggage-a": "b"}

    def test_stream_failure(self, tracer):
        """Test that stream errors surface as CarrierIoError."""
        with pytest.raises(CarrierIoError):
            tracer.inject_binary(make_context("test-span"), BrokenStream())

    def test_inject_then_extract(self, tracer):
        """Test that a context survives a trip through HTTP headers."""
        headers = {}
        tracer.inject_http_headers(make_context("remote", user="42"), headers)
        context = tracer.extract_http_headers(headers)
        assert context.downcast(NamedContext).name == "remote"
        assert context.get_baggage_item("user") == "42"


class TestTracerSpan:
    """Test cases for Tracer.span."""

    def test_default_options(self, tracer):
        """Test that spans can be created without options."""
        span = tracer.span("root")
        assert span.operation_name == "root"
        assert span.references == []

    def test_options_are_applied(self, tracer):
        """Test that start options reach the backend."""
        parent = make_context("parent", a="b")
        span = tracer.span("child", StartOptions().follows(parent))
        assert span.references[0].kind is ReferenceKind.FOLLOWS_FROM
        assert span.get_baggage_item("a") == "b"

    def test_finished_span_reaches_backend_receiver(self, tracer, backend):
        """Test that finished spans are sent on the backend channel."""
        tracer.span("work").finish()
        assert backend.receiver.try_recv().name == "work"
