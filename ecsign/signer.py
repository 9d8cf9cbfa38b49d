import logging
from abc import ABC, abstractmethod
from typing import Optional, Union
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec

from ecsign.errors import SigningError

logger = logging.getLogger(__name__)

KeyMaterial = Union[str, bytes, ec.EllipticCurvePrivateKey]

def _as_bytes(material: Union[str, bytes]) -> bytes:
    return material.encode("utf-8") if isinstance(material, str) else material

def load_private_key(material: KeyMaterial, password: Optional[bytes] = None) -> ec.EllipticCurvePrivateKey:
    """
    Load a P-256 private key from PEM text, or pass an already loaded key through.
    Raises SigningError if the key is unreadable, not EC, or on another curve.
    """
    if isinstance(material, ec.EllipticCurvePrivateKey):
        key = material
    else:
        try:
            key = serialization.load_pem_private_key(_as_bytes(material), password=password)
        except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
            raise SigningError(f"unable to load private key: {exc}") from exc

    if not isinstance(key, ec.EllipticCurvePrivateKey):
        raise SigningError(f"ES256 requires an EC private key, got {type(key).__name__}")
    if not isinstance(key.curve, ec.SECP256R1):
        raise SigningError(f"ES256 requires curve P-256, got {key.curve.name}")
    return key

def load_public_key(material: Union[str, bytes, ec.EllipticCurvePublicKey]) -> ec.EllipticCurvePublicKey:
    """Load a P-256 public key from PEM text."""
    if isinstance(material, ec.EllipticCurvePublicKey):
        key = material
    else:
        try:
            key = serialization.load_pem_public_key(_as_bytes(material))
        except (ValueError, UnsupportedAlgorithm) as exc:
            raise SigningError(f"unable to load public key: {exc}") from exc

    if not isinstance(key, ec.EllipticCurvePublicKey) or not isinstance(key.curve, ec.SECP256R1):
        raise SigningError("ES256 requires a P-256 public key")
    return key


class Signer(ABC):
    """Signing primitive: returns a DER-encoded ECDSA signature over message."""

    @abstractmethod
    def sign(self, message: bytes, key: KeyMaterial) -> bytes:
        """Sign message (digest computed internally) and return DER bytes."""
        pass

class EcdsaSigner(Signer):
    """ECDSA P-256 / SHA-256 signer backed by the cryptography package."""

    def sign(self, message: bytes, key: KeyMaterial) -> bytes:
        private_key = load_private_key(key)
        try:
            der = private_key.sign(message, ec.ECDSA(hashes.SHA256()))
        except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
            raise SigningError(f"ECDSA signing failed: {exc}") from exc
        logger.debug("Signed %d byte message, DER signature is %d bytes", len(message), len(der))
        return der
