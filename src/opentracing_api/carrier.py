"""
Carriers and formats used to propagate span contexts across process boundaries.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, BinaryIO, Callable, Iterator, List, Mapping, MutableMapping, Optional, Tuple, Union


class Format(str, Enum):
    """Carrier media recognised by tracers."""
    BINARY = "binary"
    HTTP_HEADERS = "http_headers"
    TEXT_MAP = "text_map"


class MapCarrier(ABC):
    """Abstract interface for key/value carriers such as HTTP headers."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Look up a value by key.

        Args:
            key: The key to look up

        Returns:
            The value, or None if the key is not in the carrier
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store a value, replacing any value with the same key."""
        pass

    @abstractmethod
    def items(self) -> Iterator[Tuple[str, str]]:
        """Enumerate all (key, value) pairs in the carrier."""
        pass

    def find_items(self, predicate: Callable[[str], bool]) -> List[Tuple[str, str]]:
        """
        Collect the items whose key matches a predicate.

        Args:
            predicate: Called with each key

        Returns:
            List of matching (key, value) pairs
        """
        return [(key, value) for key, value in self.items() if predicate(key)]


class DictCarrier(MapCarrier):
    """MapCarrier backed by any mutable mapping of strings."""

    def __init__(self, mapping: Optional[MutableMapping[str, str]] = None):
        self.mapping = mapping if mapping is not None else {}

    def get(self, key: str) -> Optional[str]:
        return self.mapping.get(key)

    def set(self, key: str, value: str) -> None:
        self.mapping[key] = value

    def items(self) -> Iterator[Tuple[str, str]]:
        return iter(list(self.mapping.items()))


def as_map_carrier(carrier: Union[MapCarrier, Mapping[str, str]]) -> MapCarrier:
    """Wrap plain mappings in a DictCarrier, pass MapCarriers through."""
    if isinstance(carrier, MapCarrier):
        return carrier
    if isinstance(carrier, Mapping):
        return DictCarrier(carrier)
    raise TypeError(f"Unsupported map carrier type: {type(carrier).__name__}")


@dataclass(frozen=True)
class ExtractFormat:
    """A carrier to extract a span context from, tagged with its format."""
    kind: Format
    carrier: Any

    @classmethod
    def binary(cls, stream: BinaryIO) -> "ExtractFormat":
        return cls(Format.BINARY, stream)

    @classmethod
    def http_headers(cls, carrier: Union[MapCarrier, Mapping[str, str]]) -> "ExtractFormat":
        return cls(Format.HTTP_HEADERS, as_map_carrier(carrier))

    @classmethod
    def text_map(cls, carrier: Union[MapCarrier, Mapping[str, str]]) -> "ExtractFormat":
        return cls(Format.TEXT_MAP, as_map_carrier(carrier))


@dataclass(frozen=True)
class InjectFormat:
    """A carrier to inject a span context into, tagged with its format."""
    kind: Format
    carrier: Any

    @classmethod
    def binary(cls, stream: BinaryIO) -> "InjectFormat":
        return cls(Format.BINARY, stream)

    @classmethod
    def http_headers(cls, carrier: Union[MapCarrier, MutableMapping[str, str]]) -> "InjectFormat":
        return cls(Format.HTTP_HEADERS, as_map_carrier(carrier))

    @classmethod
    def text_map(cls, carrier: Union[MapCarrier, MutableMapping[str, str]]) -> "InjectFormat":
        return cls(Format.TEXT_MAP, as_map_carrier(carrier))
