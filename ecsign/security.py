import base64
import json
import re
import jcs
from typing import Any, Mapping, Union
from pydantic import BaseModel

from ecsign.errors import EncodingError

_B64URL_RE = re.compile(r"^[A-Za-z0-9_-]+$")

def base64url_decode_nopad_strict(s: str) -> bytes:
    """Strict base64url decoder with character validation."""
    if not isinstance(s, str) or not s or not _B64URL_RE.match(s):
        raise ValueError("BAD_B64URL_CHARS")

    # Add padding to multiple of 4
    pad = (-len(s)) % 4
    s_padded = s + ("=" * pad)

    # Strict decode with altchars
    return base64.b64decode(s_padded, altchars=b"-_", validate=True)

def base64url_encode_nopad(data: bytes) -> str:
    """Encodes bytes to base64url without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")

def json_encode(obj: Union[Mapping[str, Any], BaseModel]) -> bytes:
    """
    Encodes a header or payload as RFC 8785 (JCS) canonical JSON.
    Pydantic models are dumped first, dropping unset optional fields.
    """
    if isinstance(obj, BaseModel):
        obj = obj.model_dump(exclude_none=True)
    try:
        return jcs.canonicalize(obj)
    except (TypeError, ValueError, AttributeError) as exc:
        raise EncodingError(f"cannot encode {type(obj).__name__} as JSON: {exc}") from exc

def json_decode(data: Union[bytes, str]) -> Any:
    try:
        return json.loads(data)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise EncodingError(f"invalid JSON: {exc}") from exc
