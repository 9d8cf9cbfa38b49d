"""
Test 4: Encoding Helper Tests
- base64url uses -_ and drops padding
- Strict decoder rejects foreign characters
- JSON is RFC 8785 canonical; failures surface as EncodingError
"""
import pytest
from ecsign.errors import EncodingError
from ecsign.schemas import TokenHeader
from ecsign.security import (
    base64url_decode_nopad_strict,
    base64url_encode_nopad,
    json_decode,
    json_encode,
)


class TestBase64Url:
    def test_url_safe_alphabet(self):
        """bytes fb ff are '+/8=' in standard base64."""
        assert base64url_encode_nopad(b"\xfb\xff") == "-_8"

    @pytest.mark.parametrize("data", [b"a", b"ab", b"abc", b"abcd"])
    def test_padding_restored_on_decode(self, data):
        encoded = base64url_encode_nopad(data)
        assert "=" not in encoded
        assert base64url_decode_nopad_strict(encoded) == data

    @pytest.mark.parametrize("value", ["", "+/8", "ab=", "a b", None])
    def test_bad_input_rejected(self, value):
        with pytest.raises(ValueError, match="BAD_B64URL_CHARS"):
            base64url_decode_nopad_strict(value)


class TestJson:
    def test_key_order_canonical(self):
        assert json_encode({"z": 1, "a": 2}) == json_encode({"a": 2, "z": 1}) == b'{"a":2,"z":1}'

    def test_model_drops_unset_optional_fields(self):
        assert json_encode(TokenHeader(kid="K", typ=None)) == b'{"alg":"ES256","kid":"K"}'

    def test_unencodable_value(self):
        with pytest.raises(EncodingError):
            json_encode({"raw": b"\x00"})

    def test_non_string_key(self):
        with pytest.raises(EncodingError):
            json_encode({1: "a"})

    def test_decode_round_trip(self):
        assert json_decode(b'{"exp":123,"iss":"X"}') == {"exp": 123, "iss": "X"}

    @pytest.mark.parametrize("data", [b"{", b"\xff\xfe\x00", "not json"])
    def test_decode_failure(self, data):
        with pytest.raises(EncodingError):
            json_decode(data)
