"""
Encrypt-then-MAC pipeline for sealedtoken.

Encryption:
1. Encrypt plaintext under the encryption key with a fresh IV → (iv, ciphertext)
2. Tag iv || ciphertext under the authentication key
3. Encode tag || iv || ciphertext as base64

Decryption:
1. Decode base64 and split off the tag
2. Verify the tag in constant time; stop on mismatch
3. Decrypt iv || ciphertext

Every decryption failure yields the same DECRYPT_FAILURE result so that
callers (and attackers) cannot tell which step rejected the input.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Union

from ..config import EncryptorConfig
from ..crypto.algorithms import CipherAlgorithm, HashAlgorithm, DEFAULT_CIPHER, DEFAULT_HASH
from ..crypto.cipher import CipherEngine
from ..crypto.kdf import derive_keys
from ..crypto.mac import MacEngine
from .envelope import build_envelope, parse_envelope, decode_envelope, EnvelopeFormatError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DecryptResult:
    """
    Outcome of a decryption attempt.

    Fields:
        ok: Whether the token authenticated and decrypted
        plaintext: Recovered message, None on failure
    """
    ok: bool
    plaintext: Optional[bytes] = None


DECRYPT_FAILURE = DecryptResult(ok=False)


class Encryptor:
    """
    Authenticated symmetric encryption of opaque byte payloads.

    Holds only the two derived keys; safe to share between threads.
    """

    def __init__(self, secret: Union[bytes, str],
                 cipher_algorithm: Union[str, CipherAlgorithm] = DEFAULT_CIPHER,
                 hash_algorithm: Union[str, HashAlgorithm] = DEFAULT_HASH,
                 config: Optional[EncryptorConfig] = None):
        """
        Initialize the encryptor.

        Args:
            secret: Shared secret with at least 32 bytes of entropy,
                e.g. the output of generate_secret()
            cipher_algorithm: Cipher name or CipherAlgorithm
            hash_algorithm: Digest name or HashAlgorithm
            config: Pre-built configuration; overrides the algorithm arguments

        Raises:
            ConfigError: If an algorithm is not supported
            KeyDerivationError: If the secret has an unsupported type
        """
        if config is None:
            config = EncryptorConfig.from_names(cipher_algorithm, hash_algorithm)

        self.config = config
        self._cipher = CipherEngine(config.cipher_algorithm)
        self._mac = MacEngine(config.hash_algorithm)
        self._keys = derive_keys(secret, config.hash_algorithm)

        logger.debug("Encryptor ready (%s, %s)",
                     self._cipher.algorithm_name, self._mac.algorithm_name)

    @property
    def tag_size(self) -> int:
        """Get the authentication tag size in bytes."""
        return self._mac.tag_size

    def encrypt(self, message: Union[bytes, bytearray, memoryview, str]) -> str:
        """
        Encrypt and authenticate a message.

        Args:
            message: Payload bytes; str is encoded as UTF-8

        Returns:
            Single-line base64 token of tag || iv || ciphertext

        Raises:
            TypeError: If message is not bytes-like or str
            ResourceError: If the entropy source fails
        """
        if isinstance(message, str):
            message = message.encode('utf-8')
        elif isinstance(message, (bytearray, memoryview)):
            message = bytes(message)
        elif not isinstance(message, bytes):
            raise TypeError(f"Message must be bytes or str, got {type(message).__name__}")

        iv, ciphertext = self._cipher.encrypt(message, self._keys.encryption_key)
        tag = self._mac.tag(self._keys.authentication_key, iv + ciphertext)

        return build_envelope(tag, iv, ciphertext).encode()

    def try_decrypt(self, token: Union[str, bytes]) -> DecryptResult:
        """
        Verify and decrypt a token.

        Args:
            token: Text produced by encrypt()

        Returns:
            DecryptResult with the plaintext, or DECRYPT_FAILURE
        """
        try:
            envelope = parse_envelope(decode_envelope(token), self.tag_size)
        except EnvelopeFormatError:
            logger.debug("Rejected token at decode")
            return DECRYPT_FAILURE

        if not self._mac.verify(envelope.tag, self._keys.authentication_key, envelope.body):
            logger.debug("Rejected token at authentication")
            return DECRYPT_FAILURE

        plaintext = self._cipher.decrypt(envelope.body, self._keys.encryption_key)
        if plaintext is None:
            logger.debug("Rejected token at cipher")
            return DECRYPT_FAILURE

        return DecryptResult(ok=True, plaintext=plaintext)

    def decrypt(self, token: Union[str, bytes]) -> Optional[bytes]:
        """
        Verify and decrypt a token.

        Args:
            token: Text produced by encrypt()

        Returns:
            Plaintext, or None for any malformed, foreign or tampered token
        """
        return self.try_decrypt(token).plaintext

    def get_algorithm_info(self) -> dict:
        """
        Get information about current algorithms.

        Returns:
            Dictionary with algorithm details
        """
        info = self.config.describe()
        info['mac'] = self._mac.algorithm_name
        return info

    def __repr__(self) -> str:
        return (f"Encryptor(cipher={self._cipher.algorithm_name!r}, "
                f"hash={self.config.hash_algorithm.value!r})")


def create_encryptor(secret: Union[bytes, str],
                     cipher_algorithm: Union[str, CipherAlgorithm] = DEFAULT_CIPHER,
                     hash_algorithm: Union[str, HashAlgorithm] = DEFAULT_HASH) -> Encryptor:
    """
    Create an encryptor from a shared secret.

    Args:
        secret: Shared secret material
        cipher_algorithm: Cipher name or CipherAlgorithm
        hash_algorithm: Digest name or HashAlgorithm

    Returns:
        Ready-to-use Encryptor
    """
    return Encryptor(secret, cipher_algorithm, hash_algorithm)
