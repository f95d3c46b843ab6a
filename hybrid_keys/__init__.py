"""
Hybrid key management: AES-256-CBC session keys exchanged under RSA-4096.

Example:
    ```python
    from hybrid_keys import SymmetricKey, generate_key_pair, random_iv

    recipient = generate_key_pair()
    session_key = SymmetricKey.generate()

    iv = random_iv()
    ciphertext = session_key.encrypt(iv, b"payload")
    wrapped = recipient.public_key.wrap_key(session_key)

    # On the recipient side
    key = recipient.private_key.unwrap_key(wrapped)
    assert key.decrypt(iv, ciphertext) == b"payload"
    ```
"""

from hybrid_keys.config import HybridKeysConfig
from hybrid_keys.crypto.asymmetric import KeyPair, PrivateKey, PublicKey, generate_key_pair
from hybrid_keys.crypto.key_exchange import open_sealed, seal
from hybrid_keys.crypto.symmetric import SymmetricKey, random_iv
from hybrid_keys.encoding import BASE64, HEX, STRING, UTF8, Codec, get_codec
from hybrid_keys.exceptions import (
    CryptoBackendError,
    CryptoError,
    DecodeError,
    DecryptionError,
    HybridKeysError,
    InvalidCiphertextLengthError,
    InvalidIVLengthError,
    InvalidKeyFormatError,
    InvalidKeyLengthError,
    InvalidSignatureFormatError,
    KeyDestroyedError,
    KeyTooLargeError,
    PaddingError,
    SignatureMismatchError,
    UnwrapError,
)
from hybrid_keys.models.crypto import SealedMessage
from hybrid_keys.services.exchange_service import KeyExchangeService

__version__ = "0.1.0"

__all__ = [
    # Keys
    "SymmetricKey",
    "PrivateKey",
    "PublicKey",
    "KeyPair",
    "generate_key_pair",
    "random_iv",
    # Key exchange
    "SealedMessage",
    "seal",
    "open_sealed",
    "KeyExchangeService",
    "HybridKeysConfig",
    # Encoding
    "Codec",
    "BASE64",
    "HEX",
    "STRING",
    "UTF8",
    "get_codec",
    # Exceptions
    "HybridKeysError",
    "DecodeError",
    "CryptoError",
    "InvalidKeyLengthError",
    "InvalidIVLengthError",
    "DecryptionError",
    "InvalidCiphertextLengthError",
    "PaddingError",
    "UnwrapError",
    "InvalidSignatureFormatError",
    "SignatureMismatchError",
    "KeyTooLargeError",
    "InvalidKeyFormatError",
    "KeyDestroyedError",
    "CryptoBackendError",
]
