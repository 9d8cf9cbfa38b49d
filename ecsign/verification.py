import logging
import re
import time
from typing import Any, Dict, Optional
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec
from pydantic import ValidationError

from ecsign.der import ES256_PART_LENGTH, raw_to_der
from ecsign.errors import ECSignError
from ecsign.registry import KeyRegistry, lookup_key_strict
from ecsign.schemas import SIG_PATTERN, TokenHeader
from ecsign.token import DecodedToken, decode_unverified

logger = logging.getLogger(__name__)

_SIG_RE = re.compile(SIG_PATTERN)

class TokenInvalidError(ECSignError):
    pass

class Verifier:
    def __init__(self, registry: KeyRegistry, leeway: int = 0):
        self.registry = registry
        self.leeway = leeway

    def verify(self, token: str, now: Optional[int] = None) -> bool:
        """
        Complete verification flow for an ES256 compact token.
        Returns False for any rejected token; the reason is logged.
        """
        try:
            self._verify(token, now)
        except TokenInvalidError as exc:
            logger.warning("Rejected token: %s", exc)
            return False
        return True

    def claims(self, token: str, now: Optional[int] = None) -> Dict[str, Any]:
        """Return the payload of a verified token, raising TokenInvalidError otherwise."""
        return self._verify(token, now).payload

    def _verify(self, token: str, now: Optional[int]) -> DecodedToken:
        # 1. Structure
        try:
            decoded = decode_unverified(token)
        except ECSignError as exc:
            raise TokenInvalidError(f"malformed token: {exc}") from exc

        # 2. Header (strict schema, alg pinned to ES256)
        try:
            header = TokenHeader.model_validate(decoded.header)
        except ValidationError as exc:
            raise TokenInvalidError("header rejected") from exc

        # 3. Signature
        if not _SIG_RE.match(token.rsplit(".", 1)[1]) or len(decoded.signature) != 2 * ES256_PART_LENGTH:
            raise TokenInvalidError("signature must be 64 raw bytes")
        try:
            public_key = lookup_key_strict(self.registry, header.kid)
        except ECSignError as exc:
            raise TokenInvalidError(str(exc)) from exc
        if not self._verify_es256(decoded, public_key):
            raise TokenInvalidError("signature mismatch")

        # 4. Time window (exclusive upper bound): iat <= now < exp
        now = int(time.time()) if now is None else now
        exp = decoded.payload.get("exp")
        iat = decoded.payload.get("iat")
        if exp is not None and not (isinstance(exp, int) and now < exp + self.leeway):
            raise TokenInvalidError("token expired")
        if iat is not None and not (isinstance(iat, int) and iat <= now + self.leeway):
            raise TokenInvalidError("token issued in the future")

        return decoded

    def _verify_es256(self, decoded: DecodedToken, key: ec.EllipticCurvePublicKey) -> bool:
        """Core signature verification over the raw signature re-encoded as DER."""
        der = raw_to_der(decoded.signature, ES256_PART_LENGTH)
        try:
            key.verify(der, decoded.signing_input, ec.ECDSA(hashes.SHA256()))
        except InvalidSignature:
            return False
        return True
