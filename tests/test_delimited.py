"""Tests for delimited record decoding."""

import pytest

from rdfserving.errors import BadRequestError, MalformedRequestError
from rdfserving.io import decode, decode_record, encode


class TestDecode:
    """Tests for splitting a line into tokens."""

    def test_simple_line(self) -> None:
        assert decode("red,3.5,1.2,yes") == ["red", "3.5", "1.2", "yes"]

    def test_empty_trailing_field(self) -> None:
        """Test that a trailing delimiter yields an empty last token."""
        assert decode("red,3.5,1.2,") == ["red", "3.5", "1.2", ""]

    def test_quoted_field_with_delimiter(self) -> None:
        assert decode('"dark, red",1') == ["dark, red", "1"]

    def test_escaped_quotes(self) -> None:
        assert decode('"say ""hi""",2') == ['say "hi"', "2"]

    def test_custom_delimiter(self) -> None:
        assert decode("a\tb\tc", delimiter="\t") == ["a", "b", "c"]

    def test_empty_line(self) -> None:
        assert decode("") == []

    def test_encode_quotes_when_needed(self) -> None:
        """Test that encoding quotes only tokens that need it."""
        assert encode(["dark, red", "1", 'say "hi"']) == '"dark, red",1,"say ""hi"""'

    def test_encode_is_inverse_of_decode(self) -> None:
        tokens = ["dark, red", "", "3.5", 'x"y']
        assert decode(encode(tokens)) == tokens


class TestDecodeRecord:
    """Tests for schema-width record decoding."""

    def test_correct_width(self) -> None:
        assert decode_record("red,3.5,1.2,", 4) == ["red", "3.5", "1.2", ""]

    def test_missing_line(self) -> None:
        with pytest.raises(MalformedRequestError, match="No input"):
            decode_record(None, 4)

    def test_too_few_columns(self) -> None:
        with pytest.raises(MalformedRequestError, match="Wrong column count"):
            decode_record("red,3.5", 4)

    def test_too_many_columns(self) -> None:
        with pytest.raises(MalformedRequestError, match="expected 4, got 5"):
            decode_record("red,3.5,1.2,yes,extra", 4)

    def test_empty_line_is_wrong_width(self) -> None:
        with pytest.raises(MalformedRequestError):
            decode_record("", 4)

    def test_unterminated_quote(self) -> None:
        with pytest.raises(MalformedRequestError, match="Bad input line"):
            decode_record('"red,3.5,1.2,yes', 4)

    def test_is_bad_request(self) -> None:
        """Test that malformed input maps to HTTP 400."""
        with pytest.raises(BadRequestError) as exc_info:
            decode_record("a", 2)
        assert exc_info.value.status_code == 400
