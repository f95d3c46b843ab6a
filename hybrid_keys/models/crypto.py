"""
Cryptographic domain models.
"""

from dataclasses import dataclass
from typing import Final


@dataclass(frozen=True)
class CipherSuite:
    """
    The fixed algorithm parameters shared by both parties.

    Attributes:
        aes_key_size: AES key length in bytes (AES-256).
        aes_block_size: AES block length in bytes, also the CBC IV length.
        rsa_key_size: RSA modulus length in bits.
        rsa_public_exponent: RSA public exponent.
        hash_size: Digest length in bytes of the hash used by OAEP, MGF1 and signatures.
    """

    aes_key_size: int = 32
    aes_block_size: int = 16
    rsa_key_size: int = 4096
    rsa_public_exponent: int = 65537
    hash_size: int = 32

    @property
    def rsa_modulus_bytes(self) -> int:
        """Length of a wrapped key or signature in bytes."""
        return self.rsa_key_size // 8

    @property
    def oaep_capacity(self) -> int:
        """Largest plaintext RSA-OAEP can encrypt under this modulus and hash."""
        return self.rsa_modulus_bytes - 2 * self.hash_size - 2


SUITE: Final = CipherSuite()


@dataclass(frozen=True, kw_only=True)
class SealedMessage:
    """
    A payload encrypted for one recipient.

    Attributes:
        wrapped_key: Session key, RSA-OAEP encrypted to the recipient.
        iv: CBC initialization vector used for the payload.
        ciphertext: AES-CBC encrypted payload.
        signature: Sender's PKCS#1 v1.5 signature over ``signed_payload``, if signed.
    """

    wrapped_key: bytes
    iv: bytes
    ciphertext: bytes
    signature: bytes | None = None

    @property
    def signed_payload(self) -> bytes:
        """The bytes covered by the signature: wrapped_key || iv || ciphertext."""
        return self.wrapped_key + self.iv + self.ciphertext

    @property
    def is_signed(self) -> bool:
        return self.signature is not None
