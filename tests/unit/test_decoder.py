"""Unit tests for response body decoding."""

import pytest

from unioauth.decoder import decode_body


@pytest.mark.unit
class TestDecodeBody:
    """Test cases for the JSON / form / text fallback chain."""

    def test_json_object(self):
        assert decode_body('{"a":1}') == {"a": 1}

    def test_json_array(self):
        assert decode_body('[1, "two"]') == [1, "two"]

    def test_form_encoded_pairs(self):
        assert decode_body("a=1&b=2") == {"a": "1", "b": "2"}

    def test_form_encoded_values_are_unquoted(self):
        assert decode_body("name=John+Doe&path=%2Fhome") == {"name": "John Doe", "path": "/home"}

    def test_form_encoded_keeps_blank_values(self):
        assert decode_body("a=&b=2") == {"a": "", "b": "2"}

    def test_form_encoded_repeated_key_last_wins(self):
        assert decode_body("a=1&a=2") == {"a": "2"}

    def test_bracketed_keys_stay_flat(self):
        assert decode_body("user[id]=7&user%5Bname%5D=ann") == {"user[id]": "7", "user[name]": "ann"}

    def test_plain_text_passthrough(self):
        assert decode_body("not json or kv") == "not json or kv"

    def test_empty_body(self):
        assert decode_body("") == ""

    def test_json_scalar_is_not_structured(self):
        """JSON scalars are not objects/arrays and stay opaque strings."""
        assert decode_body("123") == "123"
        assert decode_body('"quoted"') == '"quoted"'

    def test_invalid_json_with_equals_falls_back_to_pairs(self):
        assert decode_body("{broken=json") == {"{broken": "json"}
