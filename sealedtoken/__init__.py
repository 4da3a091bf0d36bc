"""
sealedtoken: authenticated symmetric encryption for opaque payloads.

Encrypts values that must travel through an untrusted channel (cookies,
client-held tokens) with AES-CBC and authenticates them with HMAC in
encrypt-then-MAC order. Tampered or foreign tokens decrypt to None.

Key Features:
- Two independent keys derived from one shared secret
- Fresh random IV per message
- Constant-time tag verification before any decryption
- Single uniform failure result for every bad token

Basic Usage:
    >>> from sealedtoken import Encryptor, generate_secret
    >>>
    >>> encryptor = Encryptor(generate_secret())
    >>> token = encryptor.encrypt(b"hello world")
    >>> encryptor.decrypt(token)
    b'hello world'
    >>> encryptor.decrypt("not a token") is None
    True
"""

__version__ = "1.0.0"
__author__ = "sealedtoken developers"

# High-level interface
from .protocol.encryptor import Encryptor, DecryptResult, DECRYPT_FAILURE, create_encryptor
from .protocol.envelope import Envelope, EnvelopeFormatError

# Configuration
from .config import (
    ConfigError,
    EncryptorConfig,
    SealedTokenConfig,
    load_secret,
    save_secret,
    secret_from_env,
)

# Cryptographic primitives
from .crypto.algorithms import CipherAlgorithm, HashAlgorithm
from .crypto.kdf import derive_key, derive_keys, generate_secret, DerivedKeys, KeyDerivationError
from .crypto.cipher import CipherEngine
from .crypto.mac import MacEngine
from .crypto.utils import ResourceError


__all__ = [
    # Version info
    '__version__',

    # High-level interface
    'Encryptor',
    'DecryptResult',
    'DECRYPT_FAILURE',
    'create_encryptor',
    'Envelope',
    'EnvelopeFormatError',

    # Configuration
    'ConfigError',
    'EncryptorConfig',
    'SealedTokenConfig',
    'load_secret',
    'save_secret',
    'secret_from_env',

    # Cryptographic primitives
    'CipherAlgorithm',
    'HashAlgorithm',
    'derive_key',
    'derive_keys',
    'generate_secret',
    'DerivedKeys',
    'KeyDerivationError',
    'CipherEngine',
    'MacEngine',
    'ResourceError',
]
