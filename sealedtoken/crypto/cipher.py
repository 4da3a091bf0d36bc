"""
Block cipher encryption for sealedtoken.

Provides randomized-IV CBC encryption with PKCS#7 padding. Decryption never
raises for bad input: every malformed, truncated or badly padded body
produces the same None result.
"""

from typing import Optional, Tuple

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from .algorithms import CipherAlgorithm, DEFAULT_CIPHER
from .utils import generate_random_bytes


class CipherEngine:
    """
    CBC block cipher with a fresh random IV per message.
    """

    def __init__(self, algorithm: CipherAlgorithm = DEFAULT_CIPHER):
        """
        Initialize cipher engine.

        Args:
            algorithm: Block cipher and mode to use
        """
        self.algorithm = algorithm

    @property
    def algorithm_name(self) -> str:
        """Get the name of the current algorithm."""
        return self.algorithm.value

    @property
    def key_size(self) -> int:
        """Get the required key size in bytes."""
        return self.algorithm.key_size

    @property
    def iv_size(self) -> int:
        """Get the IV size in bytes."""
        return self.algorithm.block_size

    @property
    def block_size(self) -> int:
        """Get the block size in bytes."""
        return self.algorithm.block_size

    def _cipher(self, key: bytes, iv: bytes) -> Cipher:
        # Derived keys are digest-sized; the cipher takes the leading bytes
        if len(key) < self.key_size:
            raise ValueError(f"{self.algorithm_name} requires a {self.key_size}-byte key")
        return Cipher(algorithms.AES(key[:self.key_size]), modes.CBC(iv))

    def encrypt(self, plaintext: bytes, key: bytes) -> Tuple[bytes, bytes]:
        """
        Encrypt plaintext under a fresh random IV.

        Args:
            plaintext: Data to encrypt
            key: Encryption key (at least key_size bytes)

        Returns:
            Tuple of (iv, ciphertext); the ciphertext is the padded length

        Raises:
            ResourceError: If no IV can be drawn from the entropy source
        """
        iv = generate_random_bytes(self.iv_size)

        padder = padding.PKCS7(self.block_size * 8).padder()
        padded = padder.update(plaintext) + padder.finalize()

        encryptor = self._cipher(key, iv).encryptor()
        ciphertext = encryptor.update(padded) + encryptor.finalize()

        return iv, ciphertext

    def decrypt(self, iv_and_ciphertext: bytes, key: bytes) -> Optional[bytes]:
        """
        Decrypt an IV-prefixed ciphertext body.

        Args:
            iv_and_ciphertext: iv || ciphertext as produced by encrypt()
            key: Encryption key

        Returns:
            Plaintext, or None if the body is short, unaligned or badly padded
        """
        iv = iv_and_ciphertext[:self.iv_size]
        ciphertext = iv_and_ciphertext[self.iv_size:]

        if len(iv) != self.iv_size or not ciphertext:
            return None
        if len(ciphertext) % self.block_size:
            return None

        try:
            decryptor = self._cipher(key, iv).decryptor()
            padded = decryptor.update(ciphertext) + decryptor.finalize()

            unpadder = padding.PKCS7(self.block_size * 8).unpadder()
            return unpadder.update(padded) + unpadder.finalize()
        except MemoryError:
            raise
        except Exception:
            # Backend errors must not escape the uniform failure result
            return None


def create_cipher_engine(algorithm: CipherAlgorithm = DEFAULT_CIPHER) -> CipherEngine:
    """
    Create a cipher engine instance.

    Args:
        algorithm: Block cipher and mode to use

    Returns:
        CipherEngine instance
    """
    return CipherEngine(algorithm)
