from abc import ABC, abstractmethod
from typing import Dict, Optional
from cryptography.hazmat.primitives.asymmetric.ec import EllipticCurvePublicKey

from ecsign.errors import ECSignError

class KeyRegistry(ABC):
    """Registry interface for kid lookup."""

    @abstractmethod
    def get_key(self, kid: str) -> Optional[EllipticCurvePublicKey]:
        """Get specific key by kid (strict)."""
        pass

class InMemoryKeyRegistry(KeyRegistry):
    """Simple in-memory registry, one public key per kid."""

    def __init__(self):
        self._keys: Dict[str, EllipticCurvePublicKey] = {}

    def add_key(self, kid: str, key: EllipticCurvePublicKey):
        self._keys[kid] = key

    def remove_key(self, kid: str):
        self._keys.pop(kid, None)

    def get_key(self, kid: str) -> Optional[EllipticCurvePublicKey]:
        return self._keys.get(kid)

class KeyNotFoundError(ECSignError, LookupError):
    pass

def lookup_key_strict(registry: KeyRegistry, kid: str) -> EllipticCurvePublicKey:
    """
    Lookup public key by key identifier (strict mode).
    Raises KeyNotFoundError if kid unknown.
    """
    key = registry.get_key(kid)
    if key is None:
        raise KeyNotFoundError(f"kid {kid} unknown or revoked")
    return key
