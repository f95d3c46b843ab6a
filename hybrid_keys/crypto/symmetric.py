"""
AES-256-CBC session keys.

The key object never stores an IV: callers pass one to every
``encrypt``/``decrypt`` call and are responsible for its uniqueness.
"""

import os
from typing import Self

import structlog
from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from hybrid_keys.crypto.secure_bytes import SecureBytes, secure_zero
from hybrid_keys.encoding import Buffer
from hybrid_keys.exceptions import (
    CryptoBackendError,
    DecryptionError,
    InvalidIVLengthError,
    InvalidKeyLengthError,
    KeyDestroyedError,
)
from hybrid_keys.models.crypto import SUITE

logger = structlog.get_logger(__name__)

_BLOCK_BITS = SUITE.aes_block_size * 8


def random_iv() -> bytes:
    """Return a fresh random 16-byte IV."""
    try:
        return os.urandom(SUITE.aes_block_size)
    except (OSError, NotImplementedError) as e:
        msg = f"Entropy source failed: {e}"
        raise CryptoBackendError(msg) from e


class SymmetricKey:
    """
    A 256-bit AES key used in CBC mode with PKCS#7 padding.

    The raw bytes are only reachable through ``export()``. ``destroy()`` (or
    leaving a ``with`` block) zeros this object's copy of the key.

    Example:
        key = SymmetricKey.generate()
        iv = random_iv()
        ciphertext = key.encrypt(iv, b"payload")
        assert key.decrypt(iv, ciphertext) == b"payload"
    """

    __slots__ = ("_material",)

    def __init__(self, material: SecureBytes) -> None:
        """
        Args:
            material: Raw key bytes. Use ``generate`` or ``import_raw`` instead
                of calling this directly.
        """
        if len(material) != SUITE.aes_key_size:
            msg = f"AES key must be {SUITE.aes_key_size} bytes, got {len(material)}"
            raise InvalidKeyLengthError(msg, length=len(material))
        self._material = material

    @classmethod
    def generate(cls, *, lock_memory: bool = False) -> Self:
        """
        Create a key from the OS CSPRNG.

        Raises:
            CryptoBackendError: If the entropy source fails.
        """
        try:
            raw = bytearray(os.urandom(SUITE.aes_key_size))
        except (OSError, NotImplementedError) as e:
            msg = f"Entropy source failed: {e}"
            raise CryptoBackendError(msg) from e
        logger.debug("Generated symmetric key", algorithm="AES-256-CBC")
        return cls._from_bytearray(raw, lock_memory=lock_memory)

    @classmethod
    def import_raw(cls, raw: Buffer, *, lock_memory: bool = False) -> Self:
        """
        Load a key from its 32 raw bytes.

        Raises:
            InvalidKeyLengthError: If ``raw`` is not exactly 32 bytes.
        """
        if len(raw) != SUITE.aes_key_size:
            msg = f"AES key must be {SUITE.aes_key_size} bytes, got {len(raw)}"
            raise InvalidKeyLengthError(msg, length=len(raw))
        return cls._from_bytearray(bytearray(raw), lock_memory=lock_memory)

    @classmethod
    def _from_bytearray(cls, raw: bytearray, *, lock_memory: bool) -> Self:
        try:
            return cls(SecureBytes(raw, lock=lock_memory))
        finally:
            secure_zero(raw)

    def export(self) -> bytes:
        """Return the 32 raw key bytes. The returned copy is not zeroed by ``destroy``."""
        return bytes(self._live_material())

    def encrypt(self, iv: Buffer, plaintext: Buffer) -> bytes:
        """
        Pad with PKCS#7 and encrypt with AES-CBC.

        The result is always a whole number of blocks, and one full padding
        block longer when the plaintext is already block aligned.

        Raises:
            InvalidIVLengthError: If ``iv`` is not 16 bytes.
        """
        self._check_iv(iv)
        padder = padding.PKCS7(_BLOCK_BITS).padder()
        padded = padder.update(bytes(plaintext)) + padder.finalize()
        encryptor = self._cipher(iv).encryptor()
        return encryptor.update(padded) + encryptor.finalize()

    def decrypt(self, iv: Buffer, ciphertext: Buffer) -> bytes:
        """
        Decrypt AES-CBC and strip PKCS#7 padding.

        Raises:
            InvalidIVLengthError: If ``iv`` is not 16 bytes.
            DecryptionError: On a bad ciphertext length or bad padding. Both
                cases raise the same error with the same message.
        """
        self._check_iv(iv)
        data = bytes(ciphertext)
        if not data or len(data) % SUITE.aes_block_size:
            raise DecryptionError()

        decryptor = self._cipher(iv).decryptor()
        padded = decryptor.update(data) + decryptor.finalize()
        unpadder = padding.PKCS7(_BLOCK_BITS).unpadder()
        try:
            return unpadder.update(padded) + unpadder.finalize()
        except ValueError:
            raise DecryptionError() from None

    def destroy(self) -> None:
        """Zero the key material. Idempotent."""
        self._material.clear()

    @property
    def is_destroyed(self) -> bool:
        return self._material.is_cleared

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *_: object) -> None:
        self.destroy()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SymmetricKey):
            return NotImplemented
        return self._material == other._material

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        state = "destroyed" if self.is_destroyed else "AES-256-CBC"
        return f"SymmetricKey(<{state}>)"

    def _cipher(self, iv: Buffer) -> Cipher:
        return Cipher(algorithms.AES(bytes(self._live_material())), modes.CBC(bytes(iv)))

    def _live_material(self) -> SecureBytes:
        if self._material.is_cleared:
            msg = "Symmetric key has been destroyed"
            raise KeyDestroyedError(msg)
        return self._material

    @staticmethod
    def _check_iv(iv: Buffer) -> None:
        if len(iv) != SUITE.aes_block_size:
            msg = f"IV must be {SUITE.aes_block_size} bytes, got {len(iv)}"
            raise InvalidIVLengthError(msg, length=len(iv))
