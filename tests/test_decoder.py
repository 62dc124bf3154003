# tenantsync Decoder Tests
# Tests for content envelope unwrapping and structured parsing

import base64
import json

import pytest

from tenantsync.core.decoder import ContentDecoder
from tenantsync.errors import ContentDecodeError


@pytest.fixture
def decoder() -> ContentDecoder:
    return ContentDecoder()


class TestUnwrap:
    """Tests for provider envelope handling."""

    def test_plain_string(self, decoder: ContentDecoder):
        assert decoder.unwrap("abc") == "abc"

    def test_bytes(self, decoder: ContentDecoder):
        assert decoder.unwrap("grüße".encode("utf-8")) == "grüße"

    def test_envelope(self, decoder: ContentDecoder):
        assert decoder.unwrap({"content": "abc", "path": "x"}) == "abc"

    def test_base64_envelope(self, decoder: ContentDecoder):
        encoded = base64.b64encode(b"function () {}").decode("ascii")
        assert decoder.unwrap({"content": encoded, "encoding": "base64"}) == "function () {}"

    def test_missing_content(self, decoder: ContentDecoder):
        with pytest.raises(ContentDecodeError, match="no 'content'"):
            decoder.unwrap({"path": "x"}, "rules/x.js")

    def test_invalid_base64(self, decoder: ContentDecoder):
        with pytest.raises(ContentDecodeError, match="base64"):
            decoder.unwrap({"content": "***", "encoding": "base64"}, "rules/x.js")

    def test_invalid_utf8(self, decoder: ContentDecoder):
        with pytest.raises(ContentDecodeError, match="UTF-8"):
            decoder.unwrap(b"\xff\xfe\xfa")

    def test_unsupported_type(self, decoder: ContentDecoder):
        with pytest.raises(ContentDecodeError, match="unsupported"):
            decoder.unwrap(42, "rules/x.js")


class TestDecode:
    """Tests for extension-based decoding."""

    def test_json_is_parsed(self, decoder: ContentDecoder):
        document = {"enabled": True, "order": [1, 2], "nested": {"a": None}}
        assert decoder.decode("rules/rule1.json", {"content": json.dumps(document)}) == document

    def test_json_extension_case_insensitive(self, decoder: ContentDecoder):
        assert decoder.decode("rules/RULE1.JSON", '{"a": 1}') == {"a": 1}

    def test_script_is_verbatim(self, decoder: ContentDecoder):
        script = "function (user) {\r\n  return user; // {not json}\n}\n"
        assert decoder.decode("rules/rule1.js", {"content": script}) == script

    def test_json_looking_script_stays_text(self, decoder: ContentDecoder):
        assert decoder.decode("pages/login.html", '{"a": 1}') == '{"a": 1}'

    def test_invalid_json_names_path(self, decoder: ContentDecoder):
        with pytest.raises(ContentDecodeError) as exc_info:
            decoder.decode("$/TFVC-test/tenant/rules/broken.json", {"content": "{not json"})
        assert exc_info.value.path == "$/TFVC-test/tenant/rules/broken.json"
        assert "broken.json" in str(exc_info.value)

    def test_custom_structured_extensions(self):
        decoder = ContentDecoder(structured_extensions=(".json", ".JSON5"))
        assert decoder.is_structured("a.json5")
        assert not decoder.is_structured("a.js")

    def test_line_wrapped_base64(self, decoder: ContentDecoder):
        script = "function (user, context, callback) {\n  callback(null, user, context);\n}\n" * 4
        encoded = base64.encodebytes(script.encode("utf-8")).decode("ascii")
        assert "\n" in encoded.rstrip("\n")
        assert decoder.decode("rules/rule1.js", {"content": encoded, "encoding": "base64"}) == script

    def test_line_wrapped_base64_bytes(self, decoder: ContentDecoder):
        encoded = base64.encodebytes(b'{"enabled": true}') + b"\r\n"
        assert decoder.decode("rules/rule1.json", {"content": encoded, "encoding": "base64"}) == {"enabled": True}

    def test_non_ascii_base64_rejected(self, decoder: ContentDecoder):
        with pytest.raises(ContentDecodeError, match="base64"):
            decoder.unwrap({"content": "aGVsbG8=é", "encoding": "base64"}, "rules/x.js")

    def test_json_with_byte_order_mark(self, decoder: ContentDecoder):
        assert decoder.decode("tenant.json", b'\xef\xbb\xbf{"a": 1}') == {"a": 1}

    def test_script_keeps_byte_order_mark(self, decoder: ContentDecoder):
        assert decoder.decode("rules/rule1.js", "\ufeffx") == "\ufeffx"
