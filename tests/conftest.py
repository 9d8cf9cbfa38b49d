"""
Test fixtures.
"""
import pytest
import json
from pathlib import Path
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec
from ecsign.registry import InMemoryKeyRegistry
from ecsign.signer import Signer
from ecsign.verification import Verifier

# Test Key (deterministic for reproducibility)
PRIV_SCALAR = 0x3A1F5C7E9B2D4F6081A3C5E7092B4D6F8E0C2A4B6D8F1E3C5A7B9D0F2E4C6A8B
KID = "test-key-01"

HEADER = {"alg": "ES256", "kid": KID}
PAYLOAD = {"iss": "57246542-96fe-1a63-e053-0824d011072a", "iat": 1700000000, "exp": 1700001200}

# Vectors directory relative to this file
VECTORS_DIR = Path(__file__).parent.parent / "vectors"

class StaticSigner(Signer):
    """Signer stub returning a fixed DER blob (or raising) for error-path tests."""
    def __init__(self, der: bytes = b"", error: Exception = None):
        self.der = der
        self.error = error
        self.messages = []
    def sign(self, message, key):
        self.messages.append(message)
        if self.error is not None:
            raise self.error
        return self.der

@pytest.fixture
def private_key():
    return ec.derive_private_key(PRIV_SCALAR, ec.SECP256R1())

@pytest.fixture
def public_key(private_key):
    return private_key.public_key()

@pytest.fixture
def private_key_pem(private_key):
    return private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption()
    )

@pytest.fixture
def registry(public_key):
    reg = InMemoryKeyRegistry()
    reg.add_key(KID, public_key)
    return reg

@pytest.fixture
def verifier(registry):
    return Verifier(registry)

def load_vector(name: str) -> dict:
    """Load a test vector JSON file."""
    with open(VECTORS_DIR / name, "r") as f:
        return json.load(f)

def der_vectors() -> list:
    return load_vector("der_vectors.json")["vectors"]
