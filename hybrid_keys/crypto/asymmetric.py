"""
RSA-4096 identity keys.

A PrivateKey can unwrap session keys and sign; its PublicKey can wrap
session keys and verify. Padding and hash parameters are fixed:
RSA-OAEP with SHA-256 (and MGF1-SHA-256) for wrapping, RSASSA-PKCS1-v1_5
with SHA-256 for signatures.
"""

import base64
import hashlib
from dataclasses import dataclass
from typing import Any, Self

import structlog
from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from hybrid_keys.crypto.symmetric import SymmetricKey
from hybrid_keys.encoding import Buffer
from hybrid_keys.exceptions import (
    CryptoBackendError,
    InvalidKeyFormatError,
    InvalidSignatureFormatError,
    KeyTooLargeError,
    UnwrapError,
)
from hybrid_keys.models.crypto import SUITE

logger = structlog.get_logger(__name__)

_JWK_ALG = "RSA-OAEP-256"


def _oaep() -> padding.OAEP:
    return padding.OAEP(
        mgf=padding.MGF1(algorithm=hashes.SHA256()),
        algorithm=hashes.SHA256(),
        label=None,
    )


def _check_rsa_parameters(key_size: int, public_exponent: int, key_format: str) -> None:
    if key_size != SUITE.rsa_key_size:
        msg = f"RSA key must be {SUITE.rsa_key_size} bits, got {key_size}"
        raise InvalidKeyFormatError(msg, key_format=key_format)
    if public_exponent != SUITE.rsa_public_exponent:
        msg = f"RSA public exponent must be {SUITE.rsa_public_exponent}, got {public_exponent}"
        raise InvalidKeyFormatError(msg, key_format=key_format)


def _b64url_uint(value: int) -> str:
    raw = value.to_bytes((value.bit_length() + 7) // 8 or 1, "big")
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def _b64url_uint_decode(text: str) -> int:
    padded = text + "=" * (-len(text) % 4)
    return int.from_bytes(base64.urlsafe_b64decode(padded), "big")


class PublicKey:
    """
    The public half of an RSA-4096 key pair: wrap and verify only.
    """

    __slots__ = ("_key", "_fingerprint")

    def __init__(self, key: rsa.RSAPublicKey, *, key_format: str = "spki") -> None:
        _check_rsa_parameters(key.key_size, key.public_numbers().e, key_format)
        self._key = key
        self._fingerprint: str | None = None

    @classmethod
    def import_spki(cls, spki: Buffer) -> Self:
        """
        Load a DER-encoded SubjectPublicKeyInfo.

        Raises:
            InvalidKeyFormatError: If the data is not a supported RSA public key.
        """
        try:
            key = serialization.load_der_public_key(bytes(spki))
        except (ValueError, TypeError, UnsupportedAlgorithm) as e:
            msg = f"Failed to load SPKI public key: {e}"
            raise InvalidKeyFormatError(msg, key_format="spki") from e
        if not isinstance(key, rsa.RSAPublicKey):
            msg = f"Expected an RSA public key, got {type(key).__name__}"
            raise InvalidKeyFormatError(msg, key_format="spki")
        return cls(key)

    @classmethod
    def from_jwk(cls, jwk: dict[str, Any]) -> Self:
        """
        Load an RSA public key from its JSON Web Key form.

        Raises:
            InvalidKeyFormatError: If the JWK is not an RSA public key.
        """
        if jwk.get("kty") != "RSA":
            msg = f"Expected kty 'RSA', got {jwk.get('kty')!r}"
            raise InvalidKeyFormatError(msg, key_format="jwk")
        alg = jwk.get("alg")
        if alg is not None and alg != _JWK_ALG:
            msg = f"Expected alg {_JWK_ALG!r}, got {alg!r}"
            raise InvalidKeyFormatError(msg, key_format="jwk")
        try:
            numbers = rsa.RSAPublicNumbers(
                e=_b64url_uint_decode(jwk["e"]),
                n=_b64url_uint_decode(jwk["n"]),
            )
            key = numbers.public_key()
        except (KeyError, TypeError, ValueError) as e:
            msg = f"Invalid RSA JWK: {e}"
            raise InvalidKeyFormatError(msg, key_format="jwk") from e
        return cls(key, key_format="jwk")

    def export(self) -> bytes:
        """Return the DER-encoded SubjectPublicKeyInfo."""
        return self._key.public_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )

    def to_jwk(self) -> dict[str, Any]:
        """Return the public key as a JSON Web Key dictionary."""
        numbers = self._key.public_numbers()
        return {
            "kty": "RSA",
            "alg": _JWK_ALG,
            "n": _b64url_uint(numbers.n),
            "e": _b64url_uint(numbers.e),
            "ext": True,
            "key_ops": ["encrypt"],
        }

    @property
    def fingerprint(self) -> str:
        """Hex SHA-256 of the SPKI encoding."""
        if self._fingerprint is None:
            self._fingerprint = hashlib.sha256(self.export()).hexdigest()
        return self._fingerprint

    @property
    def modulus_bytes(self) -> int:
        return SUITE.rsa_modulus_bytes

    @property
    def wrap_capacity(self) -> int:
        """Largest key, in bytes, that RSA-OAEP-SHA-256 can wrap under this modulus."""
        return SUITE.oaep_capacity

    def wrap_key(self, key: SymmetricKey) -> bytes:
        """
        Encrypt a session key's raw bytes with RSA-OAEP.

        Returns:
            The wrapped key, exactly ``modulus_bytes`` (512) long.

        Raises:
            KeyTooLargeError: If the raw key does not fit in one OAEP block.
            CryptoBackendError: If the backend fails to encrypt.
        """
        raw = key.export()
        if len(raw) > self.wrap_capacity:
            msg = "Key material exceeds RSA-OAEP capacity"
            raise KeyTooLargeError(msg, length=len(raw), capacity=self.wrap_capacity)
        try:
            wrapped = self._key.encrypt(raw, _oaep())
        except ValueError as e:
            msg = f"RSA-OAEP encryption failed: {e}"
            raise CryptoBackendError(msg) from e

        logger.debug("Wrapped session key", fingerprint=self.fingerprint)
        return wrapped

    def verify(self, signature: Buffer, data: Buffer) -> bool:
        """
        Check a PKCS#1 v1.5 SHA-256 signature.

        Returns:
            True if ``signature`` signs ``data`` under this key, False otherwise.

        Raises:
            InvalidSignatureFormatError: If the signature length is not the modulus length.
        """
        if len(signature) != self.modulus_bytes:
            msg = "Signature length does not match key size"
            raise InvalidSignatureFormatError(
                msg, length=len(signature), expected=self.modulus_bytes
            )
        try:
            self._key.verify(bytes(signature), bytes(data), padding.PKCS1v15(), hashes.SHA256())
        except InvalidSignature:
            return False
        return True

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PublicKey):
            return NotImplemented
        return self.fingerprint == other.fingerprint

    def __hash__(self) -> int:
        return hash(self.fingerprint)

    def __repr__(self) -> str:
        return f"PublicKey(RSA-{self._key.key_size}, fingerprint={self.fingerprint[:16]})"


class PrivateKey:
    """
    The private half of an RSA-4096 key pair: unwrap and sign.

    Example:
        private_key = PrivateKey.generate()
        public_key = private_key.get_public_key()
        wrapped = public_key.wrap_key(SymmetricKey.generate())
        session_key = private_key.unwrap_key(wrapped)
    """

    __slots__ = ("_key",)

    def __init__(self, key: rsa.RSAPrivateKey, *, key_format: str = "pkcs8") -> None:
        _check_rsa_parameters(key.key_size, key.public_key().public_numbers().e, key_format)
        self._key = key

    @classmethod
    def generate(cls) -> Self:
        """
        Generate a fresh RSA-4096 key pair (e = 65537). Slow.

        Raises:
            CryptoBackendError: If the backend or entropy source fails.
        """
        try:
            key = rsa.generate_private_key(
                public_exponent=SUITE.rsa_public_exponent,
                key_size=SUITE.rsa_key_size,
            )
        except Exception as e:
            msg = f"RSA key generation failed: {e}"
            raise CryptoBackendError(msg) from e
        private_key = cls(key)
        logger.debug(
            "Generated RSA key pair",
            key_size=SUITE.rsa_key_size,
            fingerprint=private_key.get_public_key().fingerprint,
        )
        return private_key

    @classmethod
    def import_pkcs8(cls, pkcs8: Buffer) -> Self:
        """
        Load an unencrypted DER-encoded PKCS#8 private key.

        Raises:
            InvalidKeyFormatError: If the data is not a supported RSA private key.
        """
        try:
            key = serialization.load_der_private_key(bytes(pkcs8), password=None)
        except (ValueError, TypeError, UnsupportedAlgorithm) as e:
            msg = f"Failed to load PKCS#8 private key: {e}"
            raise InvalidKeyFormatError(msg, key_format="pkcs8") from e
        if not isinstance(key, rsa.RSAPrivateKey):
            msg = f"Expected an RSA private key, got {type(key).__name__}"
            raise InvalidKeyFormatError(msg, key_format="pkcs8")
        return cls(key)

    def export(self) -> bytes:
        """Return the unencrypted DER-encoded PKCS#8 private key."""
        return self._key.private_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )

    def get_public_key(self) -> PublicKey:
        """Build a new PublicKey for this key's modulus and public exponent."""
        return PublicKey(self._key.public_key(), key_format="pkcs8")

    @property
    def public_key(self) -> PublicKey:
        """A new PublicKey on every access, same as ``get_public_key()``."""
        return self.get_public_key()

    @property
    def modulus_bytes(self) -> int:
        return SUITE.rsa_modulus_bytes

    def unwrap_key(self, wrapped: Buffer, *, lock_memory: bool = False) -> SymmetricKey:
        """
        Recover a session key wrapped with the matching public key.

        Raises:
            UnwrapError: On any failure. The cause is deliberately not reported.
        """
        if len(wrapped) != self.modulus_bytes:
            logger.warning("Key unwrap failed")
            raise UnwrapError()
        try:
            raw = self._key.decrypt(bytes(wrapped), _oaep())
        except ValueError:
            logger.warning("Key unwrap failed")
            raise UnwrapError() from None

        if len(raw) != SUITE.aes_key_size:
            logger.warning("Key unwrap failed")
            raise UnwrapError()
        return SymmetricKey.import_raw(raw, lock_memory=lock_memory)

    def sign(self, data: Buffer) -> bytes:
        """
        Sign ``data`` with RSASSA-PKCS1-v1_5 over SHA-256.

        Returns:
            A deterministic signature of ``modulus_bytes`` (512) bytes.
        """
        return self._key.sign(bytes(data), padding.PKCS1v15(), hashes.SHA256())

    def __repr__(self) -> str:
        return f"PrivateKey(RSA-{self._key.key_size})"


@dataclass(frozen=True)
class KeyPair:
    """A generated private key together with its derived public key."""

    private_key: PrivateKey
    public_key: PublicKey


def generate_key_pair() -> KeyPair:
    """Generate an RSA-4096 key pair. See ``PrivateKey.generate``."""
    private_key = PrivateKey.generate()
    return KeyPair(private_key=private_key, public_key=private_key.get_public_key())
