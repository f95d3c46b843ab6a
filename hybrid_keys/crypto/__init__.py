"""
Cryptographic primitives for hybrid_keys.

This module provides:
- AES-256-CBC session keys
- RSA-4096 key pairs (OAEP key wrapping, PKCS#1 v1.5 signatures)
- Sealing a payload for a recipient (encrypt, wrap, sign)
- Zeroable key buffers
"""

from hybrid_keys.crypto.asymmetric import KeyPair, PrivateKey, PublicKey, generate_key_pair
from hybrid_keys.crypto.key_exchange import open_sealed, seal
from hybrid_keys.crypto.secure_bytes import SecureBytes
from hybrid_keys.crypto.symmetric import SymmetricKey, random_iv

__all__ = [
    "SecureBytes",
    "SymmetricKey",
    "random_iv",
    "PrivateKey",
    "PublicKey",
    "KeyPair",
    "generate_key_pair",
    "seal",
    "open_sealed",
]
