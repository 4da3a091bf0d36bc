"""
Configuration management for sealedtoken.

Algorithm selection is validated once, when an Encryptor is built, against
the closed sets in crypto.algorithms. The module also carries small helpers
for provisioning the shared secret from a file or the environment; the
Encryptor itself never stores the secret.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional, Union

from .crypto.algorithms import CipherAlgorithm, HashAlgorithm, DEFAULT_CIPHER, DEFAULT_HASH
from .crypto.kdf import generate_secret


logger = logging.getLogger(__name__)

DEFAULT_SECRET_ENV = "SEALEDTOKEN_SECRET"


class ConfigError(Exception):
    """Raised when configuration operations fail."""
    pass


def _normalize(name: str) -> str:
    return name.strip().lower().replace("_", "-")


def parse_cipher_algorithm(value: Union[str, CipherAlgorithm]) -> CipherAlgorithm:
    """
    Resolve a cipher algorithm name.

    Args:
        value: CipherAlgorithm member or name such as "aes-256-cbc"

    Returns:
        Matching CipherAlgorithm

    Raises:
        ConfigError: If the cipher is not supported
    """
    if isinstance(value, CipherAlgorithm):
        return value
    if isinstance(value, str):
        name = _normalize(value)
        for algorithm in CipherAlgorithm:
            if algorithm.value == name:
                return algorithm
    supported = ", ".join(a.value for a in CipherAlgorithm)
    raise ConfigError(f"Unsupported cipher algorithm {value!r} (supported: {supported})")


def parse_hash_algorithm(value: Union[str, HashAlgorithm]) -> HashAlgorithm:
    """
    Resolve a hash algorithm name.

    Args:
        value: HashAlgorithm member or name such as "SHA256" or "sha-256"

    Returns:
        Matching HashAlgorithm

    Raises:
        ConfigError: If the digest is not supported
    """
    if isinstance(value, HashAlgorithm):
        return value
    if isinstance(value, str):
        name = _normalize(value).replace("-", "")
        for algorithm in HashAlgorithm:
            if algorithm.value == name:
                return algorithm
    supported = ", ".join(a.value for a in HashAlgorithm)
    raise ConfigError(f"Unsupported hash algorithm {value!r} (supported: {supported})")


@dataclass(frozen=True)
class EncryptorConfig:
    """
    Validated algorithm selection for an Encryptor.

    Fields:
        cipher_algorithm: Block cipher and mode
        hash_algorithm: Digest for key derivation and MAC
    """
    cipher_algorithm: CipherAlgorithm = DEFAULT_CIPHER
    hash_algorithm: HashAlgorithm = DEFAULT_HASH

    def __post_init__(self):
        """Validate field types."""
        if not isinstance(self.cipher_algorithm, CipherAlgorithm):
            raise ConfigError(f"Unsupported cipher algorithm {self.cipher_algorithm!r}")
        if not isinstance(self.hash_algorithm, HashAlgorithm):
            raise ConfigError(f"Unsupported hash algorithm {self.hash_algorithm!r}")
        if self.hash_algorithm.digest_size < self.cipher_algorithm.key_size:
            raise ConfigError(
                f"{self.hash_algorithm.value} cannot key {self.cipher_algorithm.value}"
            )

    @classmethod
    def from_names(cls, cipher: Union[str, CipherAlgorithm] = DEFAULT_CIPHER,
                   hash: Union[str, HashAlgorithm] = DEFAULT_HASH) -> 'EncryptorConfig':
        """
        Build a configuration from algorithm names.

        Raises:
            ConfigError: If either name is not supported
        """
        return cls(
            cipher_algorithm=parse_cipher_algorithm(cipher),
            hash_algorithm=parse_hash_algorithm(hash),
        )

    def describe(self) -> dict:
        """Get a summary of the selected algorithms."""
        return {
            'cipher': self.cipher_algorithm.value,
            'hash': self.hash_algorithm.value,
            'key_size': self.cipher_algorithm.key_size,
            'iv_size': self.cipher_algorithm.block_size,
            'tag_size': self.hash_algorithm.digest_size,
        }


def load_secret(path: str) -> bytes:
    """
    Load a shared secret from a file.

    The file content is used verbatim apart from one trailing newline, so a
    hex secret is used as its 64 ASCII characters rather than decoded.

    Args:
        path: Path to the secret file

    Returns:
        Secret bytes

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file is empty
    """
    with open(path, 'rb') as f:
        data = f.read()

    if data.endswith(b'\r\n'):
        data = data[:-2]
    elif data.endswith(b'\n'):
        data = data[:-1]

    if not data:
        raise ValueError(f"Secret file is empty: {path}")
    return data


def save_secret(path: str, secret: Union[bytes, str]) -> None:
    """
    Write a shared secret to a file with owner-only permissions.

    Args:
        path: Destination path
        secret: Secret bytes or text
    """
    if isinstance(secret, str):
        secret = secret.encode('utf-8')

    # rw------- from creation; fchmod also covers a pre-existing file
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    try:
        os.fchmod(fd, 0o600)
    except (OSError, AttributeError, NotImplementedError):
        logger.warning("Could not set restrictive permissions on %s", path)

    with os.fdopen(fd, 'wb') as f:
        f.write(secret)


def secret_from_env(var: str = DEFAULT_SECRET_ENV) -> bytes:
    """
    Read the shared secret from an environment variable.

    Raises:
        ConfigError: If the variable is unset or empty
    """
    value = os.environ.get(var)
    if not value:
        raise ConfigError(f"Environment variable {var} is not set")
    return value.encode('utf-8')


class SealedTokenConfig:
    """
    Directory-backed secret provisioning.

    Keeps one secret file under a configuration directory so a host
    application can create it once and load it at startup.
    """

    def __init__(self, config_dir: Optional[str] = None):
        """
        Initialize configuration.

        Args:
            config_dir: Directory for configuration files. Defaults to ~/.sealedtoken/
        """
        if config_dir is None:
            config_dir = os.path.expanduser("~/.sealedtoken")

        self.config_dir = config_dir
        self.secret_file_path = os.path.join(config_dir, "secret")

        os.makedirs(config_dir, exist_ok=True)

    def get_secret(self) -> bytes:
        """
        Load the provisioned secret.

        Raises:
            ConfigError: If the secret cannot be loaded
        """
        try:
            return load_secret(self.secret_file_path)
        except FileNotFoundError:
            raise ConfigError(f"Secret file not found: {self.secret_file_path}")
        except ValueError as e:
            raise ConfigError(f"Invalid secret file: {e}")
        except OSError as e:
            raise ConfigError(f"Failed to load secret: {e}")

    def set_secret(self, secret: Union[bytes, str]) -> None:
        """
        Store a secret supplied by the caller.

        Raises:
            ConfigError: If the secret is empty or cannot be saved
        """
        if not secret:
            raise ConfigError("Secret must not be empty")

        try:
            save_secret(self.secret_file_path, secret)
        except OSError as e:
            raise ConfigError(f"Failed to save secret: {e}")
        logger.info("Secret saved to %s", self.secret_file_path)

    def create_new_secret(self, nbytes: int = 32) -> bytes:
        """
        Generate and store a fresh hex secret.

        Returns:
            The generated secret

        Raises:
            ConfigError: If the secret cannot be saved
        """
        secret = generate_secret(nbytes).encode('ascii')
        self.set_secret(secret)
        return secret

    def secret_exists(self) -> bool:
        """Check if a secret file exists."""
        return os.path.exists(self.secret_file_path)
