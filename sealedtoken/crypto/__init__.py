"""
Cryptographic primitives for sealedtoken.

This module provides the core cryptographic functions including:
- Key derivation (HMAC with domain-separation labels)
- Block cipher encryption (AES-CBC with PKCS#7 padding)
- Message authentication (HMAC with constant-time verification)
"""

from .algorithms import CipherAlgorithm, HashAlgorithm, DEFAULT_CIPHER, DEFAULT_HASH
from .kdf import derive_key, derive_keys, generate_secret, DerivedKeys, KeyDerivationError
from .cipher import CipherEngine, create_cipher_engine
from .mac import MacEngine, create_mac_engine
from .utils import generate_random_bytes, constant_time_compare, ResourceError

__all__ = [
    'CipherAlgorithm',
    'HashAlgorithm',
    'DEFAULT_CIPHER',
    'DEFAULT_HASH',
    'derive_key',
    'derive_keys',
    'generate_secret',
    'DerivedKeys',
    'KeyDerivationError',
    'CipherEngine',
    'create_cipher_engine',
    'MacEngine',
    'create_mac_engine',
    'generate_random_bytes',
    'constant_time_compare',
    'ResourceError',
]
