"""
Unit tests for span contexts and the reference protocol.
"""

import pytest

from opentracing_api import BackendContext, SpanContext, SpanReference, UnsupportedContextError


class RecordingContext(BackendContext):
    """Backend context recording the baggage it sees when referenced."""

    def __init__(self, name: str):
        self.name = name
        self.seen_baggage = []

    def clone(self) -> "RecordingContext":
        context = RecordingContext(self.name)
        context.seen_baggage = list(self.seen_baggage)
        return context

    def reference_span(self, reference: SpanReference) -> None:
        parent = reference.context.expect(RecordingContext, "RecordingBackend")
        self.name = f"{parent.name}/child"
        self.seen_baggage.append(self.owner_baggage())

    def owner_baggage(self):
        return dict(self.owner.baggage_items())


class OtherContext(BackendContext):
    def clone(self) -> "OtherContext":
        return OtherContext()

    def reference_span(self, reference: SpanReference) -> None:
        pass


def make_context(name: str) -> SpanContext:
    inner = RecordingContext(name)
    context = SpanContext(inner)
    inner.owner = context
    return context


class TestSpanContext:
    """Test cases for SpanContext."""

    def test_new_context_has_no_baggage(self):
        """Test that a wrapped backend context starts with empty baggage."""
        assert list(make_context("a").baggage_items()) == []

    def test_downcast(self):
        """Test type safe access to the backend context."""
        context = make_context("some-id")
        inner = context.downcast(RecordingContext)
        assert inner is not None
        assert inner.name == "some-id"

    def test_downcast_wrong_type(self):
        """Test that guessing the wrong backend returns None."""
        assert make_context("a").downcast(OtherContext) is None

    def test_expect_wrong_type(self):
        """Test that expect fails loudly on a backend mismatch."""
        with pytest.raises(UnsupportedContextError, match="was it created by OtherBackend"):
            make_context("a").expect(OtherContext, "OtherBackend")

    def test_set_baggage_item(self):
        """Test adding and overwriting baggage items."""
        context = make_context("a")
        context.set_baggage_item("key", "value")
        context.set_baggage_item("other", "1")
        context.set_baggage_item("key", "new")
        assert list(context.baggage_items()) == [("key", "new"), ("other", "1")]
        assert context.get_baggage_item("key") == "new"
        assert context.get_baggage_item("missing") is None

    def test_clone_is_independent(self):
        """Test that clones deep copy the backend context and the baggage."""
        context = make_context("a")
        context.set_baggage_item("key", "value")
        clone = context.clone()

        clone.set_baggage_item("key", "changed")
        clone.downcast(RecordingContext).name = "b"

        assert context.get_baggage_item("key") == "value"
        assert context.downcast(RecordingContext).name == "a"
        assert clone.get_baggage_item("key") == "changed"

    def test_repr_shows_baggage(self):
        """Test the debug representation."""
        context = make_context("a")
        context.set_baggage_item("key", "value")
        assert repr(context) == "SpanContext(inner=RecordingContext, baggage={'key': 'value'})"


class TestReferenceProtocol:
    """Test cases for SpanContext.reference_span."""

    @pytest.mark.parametrize("make_reference", [SpanReference.child_of, SpanReference.follows_from])
    def test_baggage_is_copied_from_parent(self, make_reference):
        """Test forward propagation of baggage for both reference kinds."""
        parent = make_context("parent")
        parent.set_baggage_item("a", "b")
        child = make_context("child")

        child.reference_span(make_reference(parent))

        assert child.get_baggage_item("a") == "b"

    def test_parent_baggage_overwrites_on_collision(self):
        """Test that referenced baggage wins over existing items with the same key."""
        parent = make_context("parent")
        parent.set_baggage_item("a", "parent")
        child = make_context("child")
        child.set_baggage_item("a", "child")

        child.reference_span(SpanReference.child_of(parent))

        assert child.get_baggage_item("a") == "parent"

    def test_backend_hook_runs_before_baggage_copy(self):
        """Test that the backend sees the baggage as it was before the copy."""
        parent = make_context("parent")
        parent.set_baggage_item("a", "b")
        child = make_context("child")
        child.set_baggage_item("own", "1")

        child.reference_span(SpanReference.child_of(parent))

        inner = child.downcast(RecordingContext)
        assert inner.name == "parent/child"
        assert inner.seen_baggage == [{"own": "1"}]
        assert dict(child.baggage_items()) == {"own": "1", "a": "b"}

    def test_baggage_does_not_propagate_backwards(self):
        """Test that items set on the child do not appear on the parent."""
        parent = make_context("parent")
        parent.set_baggage_item("a", "b")
        child = make_context("child")
        child.reference_span(SpanReference.child_of(parent))

        child.set_baggage_item("c", "d")

        assert parent.get_baggage_item("c") is None
        assert dict(parent.baggage_items()) == {"a": "b"}
