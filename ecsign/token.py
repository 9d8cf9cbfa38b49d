"""
Compact JWS (ES256) token assembly.

    base64url(JSON(header)) . base64url(JSON(payload)) . base64url(R || S)
"""
import logging
from typing import Any, Dict, Mapping, NamedTuple, Optional, Union
from pydantic import BaseModel

from ecsign.der import ES256_PART_LENGTH, der_to_raw
from ecsign.errors import EncodingError
from ecsign.security import (
    base64url_decode_nopad_strict,
    base64url_encode_nopad,
    json_decode,
    json_encode,
)
from ecsign.signer import EcdsaSigner, KeyMaterial, Signer

logger = logging.getLogger(__name__)

Claims = Union[Mapping[str, Any], BaseModel]

class DecodedToken(NamedTuple):
    header: Dict[str, Any]
    payload: Dict[str, Any]
    signature: bytes
    signing_input: bytes

def sign(payload: Claims, header: Claims, key: KeyMaterial, signer: Optional[Signer] = None) -> str:
    """
    Produce header.payload.signature for the given claims.

    Errors from JSON encoding (EncodingError), the signer (SigningError) and
    the DER conversion (MalformedDer) propagate unchanged.
    """
    signer = signer or EcdsaSigner()

    segments = [
        base64url_encode_nopad(json_encode(header)),
        base64url_encode_nopad(json_encode(payload)),
    ]
    signing_input = ".".join(segments).encode("ascii")

    der = signer.sign(signing_input, key)
    # cryptography always emits canonical DER
    raw = der_to_raw(der, ES256_PART_LENGTH, strict=True)
    segments.append(base64url_encode_nopad(raw))

    logger.debug("Assembled ES256 token, signing input is %d bytes", len(signing_input))
    return ".".join(segments)

def _decode_object(segment: str, name: str) -> Dict[str, Any]:
    try:
        data = base64url_decode_nopad_strict(segment)
    except ValueError as exc:
        raise EncodingError(f"{name} is not base64url") from exc
    obj = json_decode(data)
    if not isinstance(obj, dict):
        raise EncodingError(f"{name} must be a JSON object")
    return obj

def decode_unverified(token: str) -> DecodedToken:
    """Split a compact token into its parts without checking the signature."""
    if not isinstance(token, str):
        raise EncodingError("token must be a string")
    parts = token.split(".")
    if len(parts) != 3 or not all(parts):
        raise EncodingError("token must have exactly three non-empty segments")

    header = _decode_object(parts[0], "header")
    payload = _decode_object(parts[1], "payload")
    try:
        signature = base64url_decode_nopad_strict(parts[2])
    except ValueError as exc:
        raise EncodingError("signature is not base64url") from exc

    signing_input = f"{parts[0]}.{parts[1]}".encode("ascii")
    return DecodedToken(header, payload, signature, signing_input)
