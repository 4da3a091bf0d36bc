"""
Supported cipher and digest algorithms.

The sets are closed: only audited block cipher modes and SHA-2 digests
that produce at least a 256-bit output are offered.
"""

from enum import Enum

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers import algorithms


class CipherAlgorithm(Enum):
    """Block cipher and mode used for the confidentiality layer."""

    AES_256_CBC = "aes-256-cbc"
    AES_192_CBC = "aes-192-cbc"
    AES_128_CBC = "aes-128-cbc"

    @property
    def key_size(self) -> int:
        """Get the required key size in bytes."""
        return _CIPHER_KEY_SIZES[self]

    @property
    def block_size(self) -> int:
        """Get the cipher block size (and IV size) in bytes."""
        return algorithms.AES.block_size // 8


class HashAlgorithm(Enum):
    """Digest used for both key derivation and message authentication."""

    SHA256 = "sha256"
    SHA384 = "sha384"
    SHA512 = "sha512"

    @property
    def digest_size(self) -> int:
        """Get the digest (and tag) size in bytes."""
        return self.hash().digest_size

    def hash(self) -> hashes.HashAlgorithm:
        """Create a fresh hash algorithm instance for the cryptography backend."""
        return _HASH_FACTORIES[self]()


_CIPHER_KEY_SIZES = {
    CipherAlgorithm.AES_256_CBC: 32,
    CipherAlgorithm.AES_192_CBC: 24,
    CipherAlgorithm.AES_128_CBC: 16,
}

_HASH_FACTORIES = {
    HashAlgorithm.SHA256: hashes.SHA256,
    HashAlgorithm.SHA384: hashes.SHA384,
    HashAlgorithm.SHA512: hashes.SHA512,
}

DEFAULT_CIPHER = CipherAlgorithm.AES_256_CBC
DEFAULT_HASH = HashAlgorithm.SHA256
