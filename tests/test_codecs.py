"""Tests for the per-encoding codecs."""

from __future__ import annotations

import logging
import pickle
from datetime import datetime, timezone

import pytest

from polyconfig.codecs import (
    Codec,
    EnumListCodec,
    JsonCodec,
    PropertiesCodec,
    SerializedCodec,
    YamlCodec,
    get_codec,
    normalize_yaml_keys,
    register_codec,
    registered_encodings,
    unregister_codec,
)
from polyconfig.codecs import properties
from polyconfig.codecs.properties import format_value, timestamp
from polyconfig.encoding import Encoding
from polyconfig.errors import CodecError

FIXED_NOW = datetime(2026, 10, 17, 9, 5, 0, tzinfo=timezone.utc)


@pytest.fixture
def fixed_clock(monkeypatch: pytest.MonkeyPatch) -> None:
    """Pin the properties header clock."""
    monkeypatch.setattr(properties, "_now", lambda: FIXED_NOW)


class TestRegistry:
    """Test the encoding -> codec registry."""

    def test_every_concrete_encoding_has_a_codec(self) -> None:
        """All five encodings are registered on import."""
        assert isinstance(get_codec(Encoding.PROPERTIES), PropertiesCodec)
        assert isinstance(get_codec(Encoding.JSON), JsonCodec)
        assert isinstance(get_codec(Encoding.YAML), YamlCodec)
        assert isinstance(get_codec(Encoding.SERIALIZED), SerializedCodec)
        assert isinstance(get_codec(Encoding.ENUM), EnumListCodec)

    def test_reserved_and_detect_have_no_codec(self) -> None:
        """EXPORT and DETECT are never decodable."""
        assert get_codec(Encoding.EXPORT) is None
        assert get_codec(Encoding.DETECT) is None
        assert get_codec(None) is None

    def test_register_custom_codec(self) -> None:
        """A codec can be plugged in for the reserved encoding."""

        class ExportCodec(Codec):
            encoding = Encoding.EXPORT

            def decode(self, content, *, source="<memory>", log=None):
                return {"raw": content}

            def encode(self, document, **options):
                return str(document.get("raw", ""))

        codec = ExportCodec()
        register_codec(codec)
        try:
            assert get_codec(Encoding.EXPORT) is codec
            assert Encoding.EXPORT in registered_encodings()
        finally:
            unregister_codec(Encoding.EXPORT)
        assert get_codec(Encoding.EXPORT) is None


class TestPropertiesCodec:
    """Test the key=value codec."""

    def test_boolean_coercion(self) -> None:
        """Boolean words are recognised in any case."""
        data = PropertiesCodec().decode("enabled=Yes\r\ndebug=off\r\n")
        assert data == {"enabled": True, "debug": False}

    @pytest.mark.parametrize("word", ["on", "TRUE", "yes", "On"])
    def test_true_words(self, word: str) -> None:
        """on/true/yes decode to True."""
        assert PropertiesCodec().decode(f"flag={word}") == {"flag": True}

    @pytest.mark.parametrize("word", ["off", "False", "NO"])
    def test_false_words(self, word: str) -> None:
        """off/false/no decode to False."""
        assert PropertiesCodec().decode(f"flag={word}") == {"flag": False}

    def test_values_trimmed_and_kept_as_strings(self) -> None:
        """Other values are trimmed strings."""
        data = PropertiesCodec().decode("port=  25565  \nmotd=Hello world\n")
        assert data == {"port": "25565", "motd": "Hello world"}

    def test_key_character_set(self) -> None:
        """Keys may contain letters, digits, '-', '_' and '.'."""
        data = PropertiesCodec().decode("server-ip.v4_main=127.0.0.1\n")
        assert data == {"server-ip.v4_main": "127.0.0.1"}

    def test_comments_and_blank_lines_skipped(self) -> None:
        """Lines without '=' contribute nothing."""
        text = "#Properties Config file\r\n#Sat Oct 17 09:05:00 UTC 2026\r\n\r\nname=x\r\n"
        assert PropertiesCodec().decode(text) == {"name": "x"}

    def test_duplicate_keys_overwrite_and_warn(self, caplog: pytest.LogCaptureFixture) -> None:
        """The last duplicate wins and a warning names key and file."""
        with caplog.at_level(logging.WARNING, logger="polyconfig"):
            data = PropertiesCodec().decode("a=1\na=2\n", source="server.properties")
        assert data == {"a": "2"}
        assert "Repeated property a" in caplog.text
        assert "server.properties" in caplog.text

    def test_encode_layout(self, fixed_clock: None) -> None:
        """Header, timestamp and CRLF-terminated key=value lines."""
        text = PropertiesCodec().encode({"enabled": True, "debug": False, "name": "srv", "port": 25565})
        assert text == (
            "#Properties Config file\r\n"
            "#Sat Oct 17 09:05:00 UTC 2026\r\n"
            "enabled=on\r\n"
            "debug=off\r\n"
            "name=srv\r\n"
            "port=25565\r\n"
        )

    def test_encode_flattens_lists(self, fixed_clock: None) -> None:
        """Array values are joined with ';'."""
        text = PropertiesCodec().encode({"ops": ["alice", "bob"]})
        assert "ops=alice;bob\r\n" in text

    def test_format_value(self) -> None:
        """Nested mappings flatten their values; None is empty."""
        assert format_value({"x": 1, "y": True}) == "1;on"
        assert format_value(None) == ""
        assert format_value(1.5) == "1.5"

    def test_timestamp_single_digit_day(self) -> None:
        """The day of month is not zero-padded."""
        stamp = timestamp(datetime(2026, 3, 5, 7, 0, 9, tzinfo=timezone.utc))
        assert stamp == "Thu Mar 5 07:00:09 UTC 2026"

    def test_timestamp_naive_is_local(self) -> None:
        """A naive time is labelled with the local zone, not assumed UTC."""
        naive = datetime(2026, 3, 5, 7, 0, 9)
        local = naive.astimezone()
        assert timestamp(naive) == f"Thu Mar 5 07:00:09 {local:%Z} 2026"

    def test_line_breaks_are_escaped(self) -> None:
        """A multi-line value cannot inject another key."""
        codec = PropertiesCodec()
        text = codec.encode({"motd": "hi\nadmin=yes", "crlf": "a\r\nb"})
        assert "motd=hi\\nadmin=yes\r\n" in text
        assert codec.decode(text) == {"motd": "hi\\nadmin=yes", "crlf": "a\\r\\nb"}

    def test_duplicate_warning_goes_to_given_logger(self) -> None:
        """A logger passed to decode receives the warning."""
        records: list[logging.LogRecord] = []
        handler = logging.Handler()
        handler.emit = records.append  # type: ignore[method-assign]
        custom = logging.getLogger("test.properties.custom")
        custom.addHandler(handler)
        try:
            PropertiesCodec().decode("a=1\na=2\n", source="x.properties", log=custom)
        finally:
            custom.removeHandler(handler)
        assert [r.getMessage() for r in records] == ["Repeated property a in x.properties"]

    def test_round_trip_strings_and_bools(self) -> None:
        """Scalar strings and booleans survive encode/decode."""
        codec = PropertiesCodec()
        data = {"a": "hello", "b": True, "c": False, "d.e": "x"}
        assert codec.decode(codec.encode(data)) == data


class TestJsonCodec:
    """Test the JSON codec."""

    def test_decode_nested(self) -> None:
        """Nested objects, arrays and scalars decode."""
        data = JsonCodec().decode('{"a": {"b": [1, 2]}, "c": true, "d": null}')
        assert data == {"a": {"b": [1, 2]}, "c": True, "d": None}

    def test_malformed_raises(self) -> None:
        """Malformed JSON raises CodecError naming the source."""
        with pytest.raises(CodecError, match="app.json"):
            JsonCodec().decode("{not json", source="app.json")

    def test_non_mapping_is_returned_as_is(self) -> None:
        """The codec does not enforce a mapping root; the store does."""
        assert JsonCodec().decode("[1, 2]") == [1, 2]

    def test_large_integers_preserved(self) -> None:
        """Big integers are written back digit for digit."""
        codec = JsonCodec()
        text = '{"id": 123456789012345678901234567890}'
        encoded = codec.encode(codec.decode(text))
        assert "123456789012345678901234567890" in encoded
        assert codec.decode(encoded)["id"] == 123456789012345678901234567890

    def test_encode_is_pretty_and_unicode(self) -> None:
        """Output is indented with four spaces and keeps non-ASCII text."""
        encoded = JsonCodec().encode({"name": "café", "nested": {"a": 1}})
        assert '\n    "name": "café"' in encoded
        assert '\n        "a": 1' in encoded

    def test_encode_options(self) -> None:
        """Options are forwarded to json.dumps."""
        encoded = JsonCodec().encode({"b": 1, "a": 2}, indent=None, sort_keys=True)
        assert encoded == '{"a": 2, "b": 1}'

    def test_encode_unserializable_raises(self) -> None:
        """Documents json cannot represent raise CodecError."""
        with pytest.raises(CodecError):
            JsonCodec().encode({"a": object()})


class TestYamlCodec:
    """Test the YAML codec."""

    def test_normalize_quotes_bare_block_keys(self) -> None:
        """Bareword keys alone on a line get quoted, indentation kept."""
        text = "server:\n  on:\n    port: 1\n"
        assert normalize_yaml_keys(text) == '"server":\n  "on":\n    port: 1\n'

    def test_normalize_leaves_other_lines(self) -> None:
        """Keys with values, quoted keys and list items are untouched."""
        text = 'a: 1\n"b":\n- c\nkey with space:\n'
        assert normalize_yaml_keys(text) == text

    def test_reserved_word_keys_stay_strings(self) -> None:
        """Keys like 'on' and 'no' do not become booleans."""
        data = YamlCodec().decode("on:\n  x: 1\nno:\n  y: 2\n")
        assert data == {"on": {"x": 1}, "no": {"y": 2}}

    def test_crlf_input(self) -> None:
        """Windows line endings are handled."""
        data = YamlCodec().decode("yes:\r\n  a: b\r\n")
        assert data == {"yes": {"a": "b"}}

    def test_empty_document_is_none(self) -> None:
        """An empty file decodes to None (the store substitutes defaults)."""
        assert YamlCodec().decode("") is None

    def test_malformed_raises(self) -> None:
        """Invalid YAML raises CodecError."""
        with pytest.raises(CodecError):
            YamlCodec().decode("invalid: yaml: :")

    def test_encode_unicode_and_order(self) -> None:
        """Output keeps insertion order and non-ASCII text."""
        encoded = YamlCodec().encode({"zeta": "ü", "alpha": {"b": 1}})
        assert encoded == "zeta: ü\nalpha:\n  b: 1\n"

    def test_round_trip(self) -> None:
        """Scalars and structure survive encode/decode."""
        codec = YamlCodec()
        data = {"name": "srv", "port": 8080, "ratio": 0.5, "debug": False, "db": {"hosts": ["a", "b"]}}
        assert codec.decode(codec.encode(data)) == data


class TestSerializedCodec:
    """Test the pickle codec."""

    def test_is_binary(self) -> None:
        """The store must read and write bytes for this codec."""
        assert SerializedCodec().binary is True

    def test_round_trip_keeps_types(self) -> None:
        """Bools, strings, numbers and nesting keep their types."""
        codec = SerializedCodec()
        data = {"flag": True, "text": "1", "num": 1, "nested": {"x": 1.5}}
        decoded = codec.decode(codec.encode(data))
        assert decoded == data
        assert decoded["flag"] is True
        assert isinstance(decoded["text"], str)

    def test_protocol_option(self) -> None:
        """The pickle protocol can be chosen."""
        encoded = SerializedCodec().encode({"a": 1}, protocol=2)
        assert encoded[:2] == b"\x80\x02"
        assert pickle.loads(encoded) == {"a": 1}

    def test_corrupt_input_raises(self) -> None:
        """Garbage raises CodecError."""
        with pytest.raises(CodecError):
            SerializedCodec().decode(b"definitely not a pickle")


class TestEnumListCodec:
    """Test the newline-separated list codec."""

    def test_decode_scenario(self) -> None:
        """CRLF/LF mixes and blank lines are normalised away."""
        data = EnumListCodec().decode("foo\r\nbar\r\n\r\nbaz\n")
        assert data == {"foo": True, "bar": True, "baz": True}

    def test_encode_scenario(self) -> None:
        """Keys are written in insertion order joined by CRLF."""
        assert EnumListCodec().encode({"foo": True, "bar": True, "baz": True}) == "foo\r\nbar\r\nbaz"

    def test_encode_ignores_values(self) -> None:
        """Only keys are written."""
        assert EnumListCodec().encode({"a": 1, "b": {"c": 2}}) == "a\r\nb"

    def test_lines_are_trimmed(self) -> None:
        """Surrounding whitespace is stripped from each token."""
        assert EnumListCodec().decode("  alice \n\tbob\n") == {"alice": True, "bob": True}

    def test_empty(self) -> None:
        """An empty file is an empty mapping."""
        assert EnumListCodec().decode("") == {}
