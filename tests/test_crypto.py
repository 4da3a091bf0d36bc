"""
Tests for the sealedtoken cryptographic primitives.
"""

import pytest
import hashlib
import hmac
import logging
import secrets
from sealedtoken.crypto import utils
from sealedtoken.crypto.algorithms import CipherAlgorithm, HashAlgorithm
from sealedtoken.crypto.cipher import CipherEngine, create_cipher_engine
from sealedtoken.crypto.kdf import (
    derive_key,
    derive_keys,
    generate_secret,
    DerivedKeys,
    KeyDerivationError,
    ENCRYPTION_LABEL,
    AUTHENTICATION_LABEL,
)
from sealedtoken.crypto.mac import MacEngine, create_mac_engine
from sealedtoken.crypto.utils import (
    generate_random_bytes,
    constant_time_compare,
    b64encode_line,
    b64decode_strict,
    ResourceError,
)
from sealedtoken import Encryptor


class TestKeyDerivation:
    """Test HMAC-based key derivation."""

    def test_secret_is_hmac_key(self):
        """Test that the secret keys the HMAC and the label is the message."""
        secret = b"s" * 64

        expected = hmac.new(secret, ENCRYPTION_LABEL, hashlib.sha256).digest()
        reversed_roles = hmac.new(ENCRYPTION_LABEL, secret, hashlib.sha256).digest()

        assert derive_key(ENCRYPTION_LABEL, secret) == expected
        assert derive_key(ENCRYPTION_LABEL, secret) != reversed_roles

    def test_derive_keys_uses_both_labels(self):
        """Test that derive_keys matches two single derivations."""
        secret = generate_secret()

        keys = derive_keys(secret)

        assert keys.encryption_key == derive_key(ENCRYPTION_LABEL, secret)
        assert keys.authentication_key == derive_key(AUTHENTICATION_LABEL, secret)

    @pytest.mark.parametrize("algorithm,name", [
        (HashAlgorithm.SHA256, "sha256"),
        (HashAlgorithm.SHA384, "sha384"),
        (HashAlgorithm.SHA512, "sha512"),
    ])
    def test_key_length_is_digest_size(self, algorithm, name):
        """Test derived key lengths for each digest."""
        secret = b"k" * 40

        keys = derive_keys(secret, algorithm)

        assert len(keys.encryption_key) == algorithm.digest_size
        assert keys.authentication_key == hmac.new(secret, AUTHENTICATION_LABEL, name).digest()

    def test_str_and_bytes_secrets_agree(self):
        """Test that str secrets are UTF-8 encoded."""
        secret = generate_secret()

        assert derive_keys(secret) == derive_keys(secret.encode('utf-8'))

    def test_whole_secret_contributes(self):
        """Test that bytes beyond the key size still change the keys."""
        base = b"a" * 64

        assert derive_keys(base) != derive_keys(base[:-1] + b"b")

    def test_deterministic(self):
        """Test that derivation is repeatable."""
        assert derive_keys(b"x" * 32) == derive_keys(b"x" * 32)

    @pytest.mark.parametrize("secret", [None, 42, 3.14, ["secret"]])
    def test_invalid_secret_type(self, secret):
        """Test that unsupported secret types are rejected."""
        with pytest.raises(KeyDerivationError):
            derive_keys(secret)

    def test_short_secret_warns(self, caplog):
        """Test that short secrets are accepted with a warning."""
        with caplog.at_level(logging.WARNING, logger="sealedtoken.crypto.kdf"):
            keys = derive_keys(b"short")

        assert isinstance(keys, DerivedKeys)
        assert "recommended" in caplog.text

    def test_long_secret_does_not_warn(self, caplog):
        """Test that a full-length secret logs nothing."""
        with caplog.at_level(logging.WARNING, logger="sealedtoken.crypto.kdf"):
            derive_keys(generate_secret())

        assert caplog.records == []

    def test_derived_keys_immutable(self):
        """Test that derived keys cannot be reassigned."""
        keys = derive_keys(generate_secret())

        with pytest.raises(AttributeError):
            keys.encryption_key = b"other"

    def test_generate_secret(self):
        """Test generated secret format."""
        secret = generate_secret()

        assert len(secret) == 64
        assert bytes.fromhex(secret)
        assert generate_secret() != secret
        assert len(generate_secret(48)) == 96

        with pytest.raises(ValueError):
            generate_secret(0)


class TestCipherEngine:
    """Test CBC encryption and decryption."""

    def test_roundtrip(self):
        """Test basic cipher round-trip."""
        engine = create_cipher_engine()
        key = generate_random_bytes(32)

        iv, ciphertext = engine.encrypt(b"cipher engine", key)

        assert engine.decrypt(iv + ciphertext, key) == b"cipher engine"

    @pytest.mark.parametrize("algorithm", list(CipherAlgorithm))
    def test_digest_sized_keys(self, algorithm):
        """Test that longer derived keys are accepted for every cipher."""
        engine = CipherEngine(algorithm)
        key = generate_random_bytes(64)

        iv, ciphertext = engine.encrypt(b"data", key)

        assert engine.key_size == algorithm.key_size
        assert engine.decrypt(iv + ciphertext, key) == b"data"

    def test_only_leading_key_bytes_used(self):
        """Test that the cipher consumes the first key_size bytes."""
        engine = CipherEngine(CipherAlgorithm.AES_128_CBC)
        key = generate_random_bytes(32)

        iv, ciphertext = engine.encrypt(b"data", key)

        assert engine.decrypt(iv + ciphertext, key[:16] + b"\x00" * 16) == b"data"

    def test_short_key_rejected_on_encrypt(self):
        """Test that encryption with a short key is a programming error."""
        engine = CipherEngine()

        with pytest.raises(ValueError):
            engine.encrypt(b"data", b"k" * 16)

    def test_short_key_fails_decrypt(self):
        """Test that decryption with a short key returns None."""
        engine = CipherEngine()
        iv, ciphertext = engine.encrypt(b"data", b"k" * 32)

        assert engine.decrypt(iv + ciphertext, b"k" * 16) is None

    @pytest.mark.parametrize("length", [0, 1, 15, 16, 17, 47])
    def test_malformed_lengths(self, length):
        """Test inputs shorter than an IV or not block aligned."""
        engine = CipherEngine()

        assert engine.decrypt(b"\x00" * length, b"k" * 32) is None

    def test_wrong_key(self):
        """Test that a wrong key never yields the plaintext."""
        engine = CipherEngine()
        iv, ciphertext = engine.encrypt(b"secret data here", b"a" * 32)

        assert engine.decrypt(iv + ciphertext, b"b" * 32) != b"secret data here"

    def test_algorithm_properties(self):
        """Test reported algorithm properties."""
        engine = CipherEngine()

        assert engine.algorithm_name == "aes-256-cbc"
        assert engine.key_size == 32
        assert engine.iv_size == 16
        assert engine.block_size == 16

    def test_entropy_failure_is_fatal(self, monkeypatch):
        """Test that an unavailable random source raises ResourceError."""
        def unavailable(length):
            raise OSError("no entropy")

        monkeypatch.setattr(utils.secrets, "token_bytes", unavailable)

        with pytest.raises(ResourceError):
            CipherEngine().encrypt(b"data", b"k" * 32)

    def test_entropy_failure_surfaces_from_encryptor(self, monkeypatch):
        """Test that the encryptor does not mask a broken random source."""
        encryptor = Encryptor(generate_secret())

        def unavailable(length):
            raise OSError("no entropy")

        monkeypatch.setattr(utils.secrets, "token_bytes", unavailable)

        with pytest.raises(ResourceError):
            encryptor.encrypt(b"data")


class TestMacEngine:
    """Test HMAC tagging and verification."""

    def test_tag_matches_hmac(self):
        """Test tag output against the standard library HMAC."""
        mac = create_mac_engine()
        key = b"a" * 32

        assert mac.tag(key, b"message") == hmac.new(key, b"message", hashlib.sha256).digest()

    @pytest.mark.parametrize("algorithm", list(HashAlgorithm))
    def test_tag_size(self, algorithm):
        """Test tag sizes per digest."""
        mac = MacEngine(algorithm)

        assert len(mac.tag(b"k" * 32, b"m")) == mac.tag_size == algorithm.digest_size

    def test_verify_valid(self):
        """Test verification of a correct tag."""
        mac = MacEngine()
        tag = mac.tag(b"k" * 32, b"message")

        assert mac.verify(tag, b"k" * 32, b"message")

    def test_verify_wrong_key_or_message(self):
        """Test rejection under another key or message."""
        mac = MacEngine()
        tag = mac.tag(b"k" * 32, b"message")

        assert not mac.verify(tag, b"j" * 32, b"message")
        assert not mac.verify(tag, b"k" * 32, b"messagf")

    @pytest.mark.parametrize("length", [0, 1, 16, 31, 33, 64])
    def test_verify_wrong_length(self, length):
        """Test candidates of the wrong length."""
        mac = MacEngine()
        tag = mac.tag(b"k" * 32, b"message")
        candidate = (tag * 3)[:length]

        assert not mac.verify(candidate, b"k" * 32, b"message")

    def test_verify_zero_tag(self):
        """Test that an all-zero candidate of the right length is rejected."""
        mac = MacEngine()

        assert not mac.verify(bytes(32), b"k" * 32, b"message")

    def test_algorithm_name(self):
        """Test reported MAC name."""
        assert MacEngine(HashAlgorithm.SHA384).algorithm_name == "HMAC-SHA384"


class TestUtils:
    """Test random, comparison and encoding helpers."""

    def test_random_bytes(self):
        """Test random byte generation."""
        assert len(generate_random_bytes(16)) == 16
        assert generate_random_bytes(16) != generate_random_bytes(16)

    def test_constant_time_compare(self):
        """Test constant-time comparison results."""
        assert constant_time_compare(b"abc", b"abc")
        assert not constant_time_compare(b"abc", b"abd")
        assert not constant_time_compare(b"abc", b"ab")

    def test_b64_roundtrip(self):
        """Test base64 helpers on arbitrary data."""
        data = secrets.token_bytes(100)

        encoded = b64encode_line(data)

        assert "\n" not in encoded
        assert b64decode_strict(encoded) == data
        assert b64decode_strict(encoded.encode('ascii')) == data

    @pytest.mark.parametrize("text", [
        "QQ",        # missing padding
        "QR==",      # non-zero trailing bits
        "QQ==\n",    # trailing newline
        "Q Q==",     # embedded space
        "QQ-_",      # URL-safe alphabet
        "ÿÿÿÿ",      # non-ASCII
    ])
    def test_b64_rejects_non_canonical(self, text):
        """Test rejection of every non-canonical encoding."""
        with pytest.raises(ValueError):
            b64decode_strict(text)

    def test_b64_rejects_non_text(self):
        """Test rejection of non-text input."""
        with pytest.raises(ValueError):
            b64decode_strict(12345)
