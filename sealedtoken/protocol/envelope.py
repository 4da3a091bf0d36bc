"""
Envelope structure and encoding for sealedtoken.

The envelope layout is fixed, tag first:

body = iv || ciphertext
envelope = tag || body
token = base64(envelope)
"""

from dataclasses import dataclass
from typing import Union

from ..crypto.utils import b64encode_line, b64decode_strict


class EnvelopeFormatError(Exception):
    """Raised when an envelope cannot be decoded or split."""
    pass


@dataclass
class Envelope:
    """
    Authenticated ciphertext envelope.

    Fields:
        tag: MAC over body
        body: iv || ciphertext
    """
    tag: bytes
    body: bytes

    @property
    def size(self) -> int:
        """Get total envelope size in bytes."""
        return len(self.tag) + len(self.body)

    def to_bytes(self) -> bytes:
        """Serialize envelope to bytes."""
        return self.tag + self.body

    def encode(self) -> str:
        """Serialize envelope to its text form."""
        return encode_envelope(self.to_bytes())

    def __len__(self) -> int:
        """Get envelope size."""
        return self.size


def build_envelope(tag: bytes, iv: bytes, ciphertext: bytes) -> Envelope:
    """
    Build an envelope from its parts.

    Args:
        tag: MAC over iv || ciphertext
        iv: Cipher IV
        ciphertext: Encrypted, padded message

    Returns:
        Envelope
    """
    return Envelope(tag=tag, body=iv + ciphertext)


def parse_envelope(data: bytes, tag_size: int) -> Envelope:
    """
    Split raw envelope bytes into tag and body.

    Only the tag boundary is checked here; the IV/ciphertext split belongs
    to the cipher, after authentication.

    Args:
        data: tag || iv || ciphertext
        tag_size: Tag length in bytes

    Returns:
        Envelope

    Raises:
        EnvelopeFormatError: If data is shorter than one tag
    """
    if len(data) < tag_size:
        raise EnvelopeFormatError(f"Envelope too short: {len(data)} bytes")

    return Envelope(tag=data[:tag_size], body=data[tag_size:])


def encode_envelope(data: bytes) -> str:
    """Encode raw envelope bytes as single-line base64."""
    return b64encode_line(data)


def decode_envelope(text: Union[str, bytes]) -> bytes:
    """
    Decode envelope text to raw bytes.

    Raises:
        EnvelopeFormatError: If the text is not canonical base64
    """
    try:
        return b64decode_strict(text)
    except ValueError as e:
        raise EnvelopeFormatError("Invalid envelope encoding") from e
