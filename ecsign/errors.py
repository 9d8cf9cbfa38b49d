class ECSignError(Exception):
    """Base class for every error raised by ecsign."""


class InvalidLength(ECSignError, ValueError):
    """Raw signature is not exactly 2 * part_length bytes."""


class MalformedDer(ECSignError, ValueError):
    """DER signature violates the SEQUENCE { INTEGER, INTEGER } grammar."""


class EncodingError(ECSignError, ValueError):
    """JSON or base64url encoding/decoding failed."""


class SigningError(ECSignError):
    """Key is unusable or the signing primitive failed."""
