"""
Cryptographic utilities for random number generation, comparison and text encoding.

This module wraps the trusted primitives the rest of sealedtoken consumes:
the operating system's secure random source, constant-time comparison and
the base64 codec used for envelopes.
"""

import base64
import binascii
import secrets
from typing import Union


class ResourceError(Exception):
    """Raised when the system entropy source cannot supply random bytes."""
    pass


def generate_random_bytes(length: int) -> bytes:
    """
    Generate cryptographically secure random bytes.

    Args:
        length: Number of random bytes to generate

    Returns:
        Cryptographically secure random bytes

    Raises:
        ResourceError: If the entropy source is unavailable
    """
    try:
        return secrets.token_bytes(length)
    except (OSError, NotImplementedError) as e:
        raise ResourceError(f"Secure random source unavailable: {e}") from e


def constant_time_compare(a: bytes, b: bytes) -> bool:
    """
    Compare two byte sequences in constant time.

    This prevents timing attacks when comparing sensitive data like
    authentication tags or keys.

    Args:
        a: First byte sequence
        b: Second byte sequence

    Returns:
        True if sequences are equal, False otherwise
    """
    return secrets.compare_digest(a, b)


def b64encode_line(data: bytes) -> str:
    """
    Encode bytes as standard, padded base64 on a single line.

    Args:
        data: Bytes to encode

    Returns:
        ASCII base64 text with no line breaks
    """
    return base64.b64encode(data).decode('ascii')


def b64decode_strict(text: Union[str, bytes]) -> bytes:
    """
    Decode canonical base64 text.

    Only the exact output of b64encode_line() is accepted: characters outside
    the standard alphabet, missing padding, whitespace and non-zero trailing
    bits are all rejected, so every distinct text maps to distinct bytes.

    Args:
        text: Base64 text as str or ASCII bytes

    Returns:
        Decoded bytes

    Raises:
        ValueError: If the text is not canonical base64
    """
    if isinstance(text, str):
        try:
            text = text.encode('ascii')
        except UnicodeEncodeError as e:
            raise ValueError("Base64 text must be ASCII") from e
    elif not isinstance(text, (bytes, bytearray)):
        raise ValueError(f"Expected str or bytes, got {type(text).__name__}")

    text = bytes(text)
    try:
        decoded = base64.b64decode(text, validate=True)
    except binascii.Error as e:
        raise ValueError(f"Invalid base64: {e}") from e

    # b64decode ignores the unused low bits of the final quantum
    if base64.b64encode(decoded) != text:
        raise ValueError("Non-canonical base64 encoding")

    return decoded
