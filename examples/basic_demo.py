#!/usr/bin/env python3
"""
Basic example demonstrating sealedtoken encryption.

This example shows:
1. Secret generation
2. Encrypting and decrypting a token
3. Tamper detection
4. Algorithm selection
"""

import sys
import os

# Add the sealedtoken package to the path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sealedtoken import Encryptor, ConfigError, generate_secret


def main():
    print("sealedtoken - Encrypt-then-MAC Demo")
    print("=" * 60)

    # 1. Generate secret
    print("\n1. Generating shared secret...")
    secret = generate_secret()
    print(f"   Secret: {secret[:16]}... ({len(secret)} hex characters)")

    # 2. Encrypt and decrypt
    print("\n2. Encrypting a message...")
    encryptor = Encryptor(secret)
    message = b"hello world"
    token = encryptor.encrypt(message)
    print(f"   Token: {token}")
    print(f"   Decrypted: {encryptor.decrypt(token)!r}")

    # 3. Tamper detection
    print("\n3. Tampering with the token...")
    tampered = ("A" if token[0] != "A" else "B") + token[1:]
    print(f"   Decrypted: {encryptor.decrypt(tampered)!r}")
    print(f"   Same message twice differs: {encryptor.encrypt(message) != token}")

    # 4. Algorithms
    print("\n4. Algorithm selection...")
    strong = Encryptor(secret, cipher_algorithm="aes-256-cbc", hash_algorithm="sha512")
    print(f"   {strong.get_algorithm_info()}")
    try:
        Encryptor(secret, hash_algorithm="md5")
    except ConfigError as e:
        print(f"   Rejected: {e}")

    print("\nDone.")


if __name__ == "__main__":
    main()
