"""
hybrid_keys exception hierarchy.

All exceptions inherit from HybridKeysError for easy catching.
"""

from typing import Any


class HybridKeysError(Exception):
    """Base exception for all hybrid_keys errors."""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        if self.context:
            ctx = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({ctx})"
        return self.message


class DecodeError(HybridKeysError):
    """Text could not be decoded into bytes (or bytes into text) for a given format."""

    def __init__(self, message: str, *, encoding: str) -> None:
        super().__init__(message, encoding=encoding)
        self.encoding = encoding


class CryptoError(HybridKeysError):
    """Cryptographic operation failed."""


class InvalidKeyLengthError(CryptoError):
    """Raw symmetric key has the wrong length."""

    def __init__(self, message: str, *, length: int) -> None:
        super().__init__(message, length=length)
        self.length = length


class InvalidIVLengthError(CryptoError):
    """Initialization vector has the wrong length."""

    def __init__(self, message: str, *, length: int) -> None:
        super().__init__(message, length=length)
        self.length = length


class DecryptionError(CryptoError):
    """Ciphertext could not be decrypted (bad length, bad padding, wrong key or IV)."""

    def __init__(self, message: str = "Decryption failed") -> None:
        super().__init__(message)


# Length and padding failures are reported as one kind.
InvalidCiphertextLengthError = DecryptionError
PaddingError = DecryptionError


class UnwrapError(CryptoError):
    """Wrapped key could not be recovered."""

    def __init__(self, message: str = "Key unwrap failed") -> None:
        super().__init__(message)


class InvalidSignatureFormatError(CryptoError):
    """Signature is malformed (wrong length for the key)."""

    def __init__(self, message: str, *, length: int, expected: int) -> None:
        super().__init__(message, length=length, expected=expected)
        self.length = length
        self.expected = expected


class SignatureMismatchError(CryptoError):
    """A required signature did not verify."""


class KeyTooLargeError(CryptoError):
    """Key material exceeds what the wrapping key can encrypt."""

    def __init__(self, message: str, *, length: int, capacity: int) -> None:
        super().__init__(message, length=length, capacity=capacity)
        self.length = length
        self.capacity = capacity


class InvalidKeyFormatError(CryptoError):
    """Serialized key could not be loaded or is not a supported key."""

    def __init__(self, message: str, *, key_format: str) -> None:
        super().__init__(message, key_format=key_format)
        self.key_format = key_format


class KeyDestroyedError(CryptoError):
    """Key material has been zeroed and can no longer be used."""


class CryptoBackendError(CryptoError):
    """The underlying crypto library or entropy source failed."""
