"""
Protocol layer components for sealedtoken.

This module provides the encrypt-then-MAC pipeline including:
- Envelope layout and base64 encoding
- The Encryptor facade and its decryption result type
"""

from .envelope import Envelope, EnvelopeFormatError
from .encryptor import Encryptor, DecryptResult, DECRYPT_FAILURE, create_encryptor

__all__ = [
    'Envelope',
    'EnvelopeFormatError',
    'Encryptor',
    'DecryptResult',
    'DECRYPT_FAILURE',
    'create_encryptor'
]
