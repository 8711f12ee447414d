"""
Unit tests for carriers and formats.
"""

import io
import pytest

from opentracing_api import DictCarrier, ExtractFormat, Format, InjectFormat, MapCarrier


class TestDictCarrier:
    """Test cases for the mapping backed carrier."""

    def test_get_and_set(self):
        """Test reading and writing keys."""
        carrier = DictCarrier()
        carrier.set("a", "d")
        carrier.set("b", "e")
        assert carrier.get("a") == "d"
        assert carrier.get("b") == "e"
        assert carrier.get("missing") is None

    def test_set_writes_through(self):
        """Test that the wrapped mapping is updated in place."""
        headers = {}
        DictCarrier(headers).set("TraceID", "1")
        assert headers == {"TraceID": "1"}

    def test_items(self):
        """Test enumerating all pairs."""
        carrier = DictCarrier({"a": "1", "b": "2"})
        assert sorted(carrier.items()) == [("a", "1"), ("b", "2")]

    def test_find_items(self):
        """Test finding items by key prefix."""
        carrier = DictCarrier({"aa": "d", "ab": "e", "bc": "f"})
        items = sorted(carrier.find_items(lambda key: key.startswith("a")))
        assert items == [("aa", "d"), ("ab", "e")]


class TestFormats:
    """Test cases for format tagged carriers."""

    def test_map_formats_wrap_dicts(self):
        """Test that plain dicts are wrapped in a DictCarrier."""
        headers = {"k": "v"}
        for fmt in (ExtractFormat.http_headers(headers), InjectFormat.text_map(headers)):
            assert isinstance(fmt.carrier, MapCarrier)
            assert fmt.carrier.get("k") == "v"

    def test_map_carrier_passes_through(self):
        """Test that MapCarrier instances are used as they are."""
        carrier = DictCarrier()
        assert ExtractFormat.text_map(carrier).carrier is carrier

    def test_format_kinds(self):
        """Test that each constructor tags the right format."""
        stream = io.BytesIO()
        assert ExtractFormat.binary(stream).kind is Format.BINARY
        assert ExtractFormat.http_headers({}).kind is Format.HTTP_HEADERS
        assert InjectFormat.text_map({}).kind is Format.TEXT_MAP
        assert InjectFormat.binary(stream).carrier is stream

    def test_rejects_non_mapping(self):
        """Test that map formats reject carriers that are not mappings."""
        with pytest.raises(TypeError):
            ExtractFormat.http_headers(["TraceID", "1"])
