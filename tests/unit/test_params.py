"""Unit tests for request parameter encoding."""

import pytest

from unioauth.params import FileUpload, append_query, encode_body, encode_params


@pytest.mark.unit
class TestEncodeBody:
    """Test cases for body encoding selection."""

    def test_plain_params_are_url_encoded(self):
        body = encode_body({"note": "hi there", "n": 1})

        assert body.multipart is False
        assert body.file_keys == frozenset()
        assert body.urlencode() == "note=hi+there&n=1"

    def test_marked_key_and_value_select_multipart(self):
        body = encode_body({"@file": "@/tmp/a.png", "note": "hi"})

        assert body.multipart is True
        assert body.params == {"file": "@/tmp/a.png", "note": "hi"}
        assert body.file_keys == frozenset({"file"})

    def test_file_fields_strip_marker_from_path(self):
        body = encode_body({"@file": "@/tmp/a.png", "note": "hi"})

        assert body.file_fields() == {"file": FileUpload("/tmp/a.png")}
        assert body.form_fields() == {"note": "hi"}

    def test_marked_key_alone_is_not_a_file(self):
        body = encode_body({"@mention": "someone"})

        assert body.multipart is False
        assert body.params == {"@mention": "someone"}

    def test_marked_value_alone_is_not_a_file(self):
        body = encode_body({"handle": "@someone"})

        assert body.multipart is False

    def test_scanning_stops_at_first_file(self):
        """Only the first @key/@value pair is converted."""
        body = encode_body({"@a": "@/tmp/a.png", "@b": "@/tmp/b.png"})

        assert body.file_keys == frozenset({"a"})
        assert body.params == {"a": "@/tmp/a.png", "@b": "@/tmp/b.png"}
        assert body.form_fields() == {"@b": "@/tmp/b.png"}

    def test_file_upload_values_select_multipart(self):
        upload = FileUpload("/tmp/report.csv", content_type="text/csv")
        body = encode_body({"report": upload, "title": "Q3"})

        assert body.multipart is True
        assert body.file_fields() == {"report": upload}
        assert body.form_fields() == {"title": "Q3"}

    def test_file_upload_alongside_marker(self):
        body = encode_body({"@a": "@/tmp/a.png", "b": FileUpload("/tmp/b.png")})

        assert body.file_keys == frozenset({"a", "b"})

    def test_sequence_values_repeat_in_form_fields(self):
        body = encode_body({"@f": "@/tmp/f", "tag": ["x", "y"]})

        assert body.form_fields() == {"tag": ["x", "y"]}

    def test_empty_params(self):
        body = encode_body(None)

        assert body.multipart is False
        assert body.urlencode() == ""


@pytest.mark.unit
class TestQueryEncoding:
    """Test cases for query string construction."""

    def test_append_to_url_without_query(self):
        assert append_query("https://x.test/a", {"b": "1"}) == "https://x.test/a?b=1"

    def test_append_to_url_with_query(self):
        assert append_query("https://x.test/a?z=0", {"b": "1"}) == "https://x.test/a?z=0&b=1"

    def test_nothing_to_append(self):
        assert append_query("https://x.test/a", {}) == "https://x.test/a"
        assert append_query("https://x.test/a", None) == "https://x.test/a"

    def test_none_values_are_dropped(self):
        assert encode_params({"a": None, "b": "2"}) == "b=2"

    def test_bools_and_sequences(self):
        assert encode_params({"flag": True, "off": False, "id": [1, 2]}) == (
            "flag=1&off=0&id=1&id=2"
        )

    def test_values_are_escaped(self):
        assert encode_params({"redirect_uri": "https://a.test/cb?x=1"}) == (
            "redirect_uri=https%3A%2F%2Fa.test%2Fcb%3Fx%3D1"
        )


@pytest.mark.unit
class TestFileUpload:
    """Test cases for FileUpload."""

    def test_from_marker(self):
        assert FileUpload.from_marker("@/tmp/a.png").path == "/tmp/a.png"

    def test_filename_defaults_to_basename(self):
        assert FileUpload("/tmp/dir/a.png").effective_filename == "a.png"

    def test_content_type_guessed(self):
        assert FileUpload("/tmp/a.png").effective_content_type == "image/png"

    def test_content_type_fallback(self):
        assert FileUpload("/tmp/blob").effective_content_type == "application/octet-stream"

    def test_explicit_overrides(self):
        upload = FileUpload("/tmp/x", filename="y.txt", content_type="text/plain")
        assert upload.effective_filename == "y.txt"
        assert upload.effective_content_type == "text/plain"
