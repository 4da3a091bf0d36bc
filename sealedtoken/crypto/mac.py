"""
Message authentication for sealedtoken.

Tags are HMAC(authentication_key, message). Verification recomputes the tag
and compares it in constant time over fixed-length buffers.
"""

from cryptography.hazmat.primitives import hmac

from .algorithms import HashAlgorithm, DEFAULT_HASH
from .utils import constant_time_compare


class MacEngine:
    """
    HMAC tagging and constant-time verification.
    """

    def __init__(self, algorithm: HashAlgorithm = DEFAULT_HASH):
        """
        Initialize MAC engine.

        Args:
            algorithm: Digest used for the HMAC
        """
        self.algorithm = algorithm

    @property
    def algorithm_name(self) -> str:
        """Get the name of the current algorithm."""
        return f"HMAC-{self.algorithm.name}"

    @property
    def tag_size(self) -> int:
        """Get the authentication tag size in bytes."""
        return self.algorithm.digest_size

    def tag(self, auth_key: bytes, message: bytes) -> bytes:
        """
        Compute the authentication tag for a message.

        Args:
            auth_key: Authentication key
            message: Data to authenticate

        Returns:
            tag_size-byte tag
        """
        h = hmac.HMAC(auth_key, self.algorithm.hash())
        h.update(message)
        return h.finalize()

    def verify(self, candidate_tag: bytes, auth_key: bytes, message: bytes) -> bool:
        """
        Verify a candidate tag against a message.

        Args:
            candidate_tag: Tag received alongside the message
            auth_key: Authentication key
            message: Data the tag claims to cover

        Returns:
            True if the tag is valid, False otherwise
        """
        expected = self.tag(auth_key, message)

        # Compare equal-length buffers only so the length never shapes timing
        length_ok = len(candidate_tag) == len(expected)
        candidate = bytes(candidate_tag) if length_ok else bytes(len(expected))

        return constant_time_compare(expected, candidate) and length_ok


def create_mac_engine(algorithm: HashAlgorithm = DEFAULT_HASH) -> MacEngine:
    """
    Create a MAC engine instance.

    Args:
        algorithm: Digest used for the HMAC

    Returns:
        MacEngine instance
    """
    return MacEngine(algorithm)
