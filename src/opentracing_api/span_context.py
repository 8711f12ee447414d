"""
Span contexts: the propagatable identity of a span.

A SpanContext pairs an opaque, backend specific context (trace and span IDs,
flags, ...) with the baggage items shared by every tracing backend.
"""

from abc import ABC, abstractmethod
from typing import Dict, Iterator, Optional, Tuple, Type, TypeVar, TYPE_CHECKING

from .errors import UnsupportedContextError

if TYPE_CHECKING:
    from .models.reference import SpanReference


ContextT = TypeVar("ContextT", bound="BackendContext")


class BackendContext(ABC):
    """
    Abstract interface for the backend specific part of a span context.

    Each tracing backend defines one subclass holding its identifiers.
    """

    @abstractmethod
    def clone(self) -> "BackendContext":
        """
        Return an independent copy of this context.

        Returns:
            A new context with the same identifiers
        """
        pass

    @abstractmethod
    def reference_span(self, reference: "SpanReference") -> None:
        """
        Update this context when the owning span references another context.

        Called before baggage items are copied from the referenced context,
        so backends can inherit identifiers such as the trace ID.

        Args:
            reference: The relation being added
        """
        pass


class SpanContext:
    """Backend context plus baggage items."""

    def __init__(self, inner: BackendContext):
        self._inner = inner
        self._baggage: Dict[str, str] = {}

    def __repr__(self) -> str:
        return f"SpanContext(inner={type(self._inner).__name__}, baggage={self._baggage!r})"

    def clone(self) -> "SpanContext":
        """Deep copy the backend context and the baggage items."""
        context = SpanContext(self._inner.clone())
        context._baggage = dict(self._baggage)
        return context

    def downcast(self, context_type: Type[ContextT]) -> Optional[ContextT]:
        """
        Access the backend context as the given type.

        Args:
            context_type: The BackendContext subclass the caller expects

        Returns:
            The backend context, or None if it is of a different type
        """
        if isinstance(self._inner, context_type):
            return self._inner
        return None

    def expect(self, context_type: Type[ContextT], backend: str) -> ContextT:
        """
        Like downcast but fails loudly on a mismatch.

        Raises:
            UnsupportedContextError: If the context was made by another backend
        """
        inner = self.downcast(context_type)
        if inner is None:
            raise UnsupportedContextError(
                f"Unsupported span context, was it created by {backend}?"
            )
        return inner

    def baggage_items(self) -> Iterator[Tuple[str, str]]:
        """Iterate over (key, value) baggage pairs in insertion order."""
        return iter(list(self._baggage.items()))

    def get_baggage_item(self, key: str) -> Optional[str]:
        return self._baggage.get(key)

    def set_baggage_item(self, key: str, value: str) -> None:
        """Add or replace a baggage item."""
        self._baggage[key] = value

    def reference_span(self, reference: "SpanReference") -> None:
        """
        Apply a new reference to this context.

        The backend context is updated first, then every baggage item of the
        referenced context is copied here, overwriting items with the same key.

        Args:
            reference: The relation being added
        """
        self._inner.reference_span(reference)
        for key, value in reference.context.baggage_items():
            self.set_baggage_item(key, value)
