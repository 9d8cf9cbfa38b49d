"""Tokens for the App Store Connect API."""
import logging
import time
from typing import List, Optional

from ecsign.config import MAX_TOKEN_LIFETIME, ECSignConfig
from ecsign.schemas import APP_STORE_CONNECT_AUDIENCE, AppStoreConnectClaims, TokenHeader
from ecsign.signer import Signer, load_private_key
from ecsign.token import sign

logger = logging.getLogger(__name__)

def build_claims(
    issuer_id: str,
    lifetime: int = MAX_TOKEN_LIFETIME,
    now: Optional[int] = None,
    audience: str = APP_STORE_CONNECT_AUDIENCE,
    bundle_id: Optional[str] = None,
    scope: Optional[List[str]] = None,
) -> AppStoreConnectClaims:
    if not 1 <= lifetime <= MAX_TOKEN_LIFETIME:
        raise ValueError(f"lifetime must be between 1 and {MAX_TOKEN_LIFETIME} seconds")
    iat = int(time.time()) if now is None else now
    return AppStoreConnectClaims(
        iss=issuer_id,
        iat=iat,
        exp=iat + lifetime,
        aud=audience,
        bid=bundle_id,
        scope=scope,
    )

class AppStoreConnectTokenFactory:
    def __init__(self, config: ECSignConfig, signer: Optional[Signer] = None):
        if not (config.issuer_id and config.key_id and config.private_key_path):
            raise ValueError("issuer_id, key_id and private_key_path are required")
        self.config = config
        self.signer = signer

        with open(config.private_key_path, "rb") as f:
            self._key = load_private_key(f.read())

    def create_token(self, now: Optional[int] = None) -> str:
        """Issue a fresh token; the caller decides when to rotate it."""
        claims = build_claims(
            self.config.issuer_id,
            lifetime=self.config.token_lifetime,
            now=now,
            audience=self.config.audience,
            bundle_id=self.config.bundle_id,
            scope=self.config.scope,
        )
        header = TokenHeader(kid=self.config.key_id)
        logger.info("Issuing App Store Connect token for kid=%s, expires at %d", header.kid, claims.exp)
        return sign(claims, header, self._key, signer=self.signer)
