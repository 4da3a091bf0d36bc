"""
Key Derivation Functions for sealedtoken.

Derives the two working keys of an Encryptor from one shared secret:
- The secret is the HMAC key and a fixed label is the message
- Distinct labels keep the encryption and authentication keys independent
- All of a long secret's entropy reaches the keys instead of being truncated
"""

import logging
import secrets
from dataclasses import dataclass
from typing import Union

from cryptography.hazmat.primitives import hmac

from .algorithms import HashAlgorithm, DEFAULT_HASH


logger = logging.getLogger(__name__)


class KeyDerivationError(Exception):
    """Raised when key derivation fails."""
    pass


# Labels are part of the envelope format; changing them invalidates every
# token issued under the same secret.
ENCRYPTION_LABEL = b"EncryptedCookie Encryption"
AUTHENTICATION_LABEL = b"EncryptedCookie Authentication"

MIN_SECRET_LENGTH = 32  # bytes


@dataclass(frozen=True)
class DerivedKeys:
    """
    Purpose-bound keys derived from one secret.

    Fields:
        encryption_key: Key for the block cipher (digest-size bytes)
        authentication_key: Key for the MAC (digest-size bytes)
    """
    encryption_key: bytes
    authentication_key: bytes

    def __repr__(self) -> str:
        return f"DerivedKeys(<{len(self.encryption_key)}-byte keys>)"


def _secret_bytes(secret: Union[bytes, bytearray, str]) -> bytes:
    if isinstance(secret, str):
        try:
            return secret.encode('utf-8')
        except UnicodeEncodeError as e:
            raise KeyDerivationError("Secret text is not encodable as UTF-8") from e
    if isinstance(secret, (bytes, bytearray, memoryview)):
        return bytes(secret)
    raise KeyDerivationError(
        f"Secret must be bytes or str, got {type(secret).__name__}"
    )


def derive_key(label: bytes, secret: Union[bytes, str],
               hash_algorithm: HashAlgorithm = DEFAULT_HASH) -> bytes:
    """
    Derive a single purpose-bound key.

    Computed as HMAC(key=secret, message=label).

    Args:
        label: Fixed domain-separation label
        secret: Shared secret material
        hash_algorithm: Digest used for the HMAC

    Returns:
        Derived key, digest_size bytes long

    Raises:
        KeyDerivationError: If the secret has an unsupported type
    """
    h = hmac.HMAC(_secret_bytes(secret), hash_algorithm.hash())
    h.update(label)
    return h.finalize()


def derive_keys(secret: Union[bytes, str],
                hash_algorithm: HashAlgorithm = DEFAULT_HASH) -> DerivedKeys:
    """
    Derive the encryption and authentication keys for an Encryptor.

    Args:
        secret: Shared secret material, ideally 32+ bytes of entropy
        hash_algorithm: Digest used for the HMAC

    Returns:
        DerivedKeys holding both keys

    Raises:
        KeyDerivationError: If the secret has an unsupported type
    """
    secret = _secret_bytes(secret)
    if len(secret) < MIN_SECRET_LENGTH:
        logger.warning(
            "Secret is %d bytes; at least %d bytes of entropy are recommended",
            len(secret), MIN_SECRET_LENGTH
        )

    return DerivedKeys(
        encryption_key=derive_key(ENCRYPTION_LABEL, secret, hash_algorithm),
        authentication_key=derive_key(AUTHENTICATION_LABEL, secret, hash_algorithm),
    )


def generate_secret(nbytes: int = MIN_SECRET_LENGTH) -> str:
    """
    Generate a fresh hex secret.

    Args:
        nbytes: Bytes of entropy; the result has 2 * nbytes hex characters

    Returns:
        Hex string suitable for passing straight to Encryptor
    """
    if nbytes <= 0:
        raise ValueError("Secret length must be positive")
    return secrets.token_hex(nbytes)
