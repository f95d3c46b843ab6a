import dataclasses

import pytest

from hybrid_keys.crypto.asymmetric import KeyPair
from hybrid_keys.crypto.key_exchange import open_sealed, seal
from hybrid_keys.crypto.symmetric import SymmetricKey, random_iv
from hybrid_keys.exceptions import (
    DecryptionError,
    InvalidSignatureFormatError,
    SignatureMismatchError,
    UnwrapError,
)


def _tamper(data: bytes) -> bytes:
    mutated = bytearray(data)
    mutated[-1] ^= 0x01
    return bytes(mutated)


def test_seal_then_open_unsigned(key_pair: KeyPair) -> None:
    message = seal(b"secret payload", key_pair.public_key)

    assert message.signature is None
    assert open_sealed(message, key_pair.private_key) == b"secret payload"


def test_seal_then_open_signed(key_pair: KeyPair, other_key_pair: KeyPair) -> None:
    sender, recipient = other_key_pair, key_pair

    message = seal(b"signed payload", recipient.public_key, sender=sender.private_key)
    payload = open_sealed(message, recipient.private_key, sender=sender.public_key)

    assert payload == b"signed payload"
    assert sender.public_key.verify(message.signature, message.signed_payload)


def test_seal_signs_wrapped_key_iv_and_ciphertext(key_pair: KeyPair, other_key_pair: KeyPair) -> None:
    message = seal(b"data", key_pair.public_key, sender=other_key_pair.private_key)

    signed = message.wrapped_key + message.iv + message.ciphertext
    assert other_key_pair.public_key.verify(message.signature, signed)


def test_seal_draws_fresh_iv_and_session_key(key_pair: KeyPair) -> None:
    first = seal(b"same", key_pair.public_key)
    second = seal(b"same", key_pair.public_key)

    assert len(first.iv) == 16
    assert first.iv != second.iv
    assert first.ciphertext != second.ciphertext


def test_seal_with_supplied_session_key_and_iv(key_pair: KeyPair) -> None:
    session_key = SymmetricKey.generate()
    iv = random_iv()

    message = seal(b"payload", key_pair.public_key, session_key=session_key, iv=iv)

    assert message.iv == iv
    assert message.ciphertext == session_key.encrypt(iv, b"payload")
    assert not session_key.is_destroyed
    assert key_pair.private_key.unwrap_key(message.wrapped_key) == session_key


def test_open_requires_signature_when_sender_given(key_pair: KeyPair, other_key_pair: KeyPair) -> None:
    message = seal(b"payload", key_pair.public_key)

    with pytest.raises(SignatureMismatchError, match="not signed"):
        open_sealed(message, key_pair.private_key, sender=other_key_pair.public_key)


def test_open_rejects_tampered_ciphertext(key_pair: KeyPair, other_key_pair: KeyPair) -> None:
    message = seal(b"payload", key_pair.public_key, sender=other_key_pair.private_key)
    tampered = dataclasses.replace(message, ciphertext=_tamper(message.ciphertext))

    with pytest.raises(SignatureMismatchError, match="does not match"):
        open_sealed(tampered, key_pair.private_key, sender=other_key_pair.public_key)


def test_open_rejects_signature_from_other_sender(key_pair: KeyPair, other_key_pair: KeyPair) -> None:
    message = seal(b"payload", key_pair.public_key, sender=key_pair.private_key)

    with pytest.raises(SignatureMismatchError):
        open_sealed(message, key_pair.private_key, sender=other_key_pair.public_key)


def test_open_rejects_malformed_signature(key_pair: KeyPair, other_key_pair: KeyPair) -> None:
    message = seal(b"payload", key_pair.public_key, sender=other_key_pair.private_key)
    truncated = dataclasses.replace(message, signature=message.signature[:-1])

    with pytest.raises(InvalidSignatureFormatError):
        open_sealed(truncated, key_pair.private_key, sender=other_key_pair.public_key)


def test_open_with_wrong_recipient_raises_unwrap_error(
    key_pair: KeyPair, other_key_pair: KeyPair
) -> None:
    message = seal(b"payload", key_pair.public_key)

    with pytest.raises(UnwrapError):
        open_sealed(message, other_key_pair.private_key)


def test_open_unsigned_message_with_truncated_ciphertext(key_pair: KeyPair) -> None:
    message = seal(b"payload", key_pair.public_key)
    truncated = dataclasses.replace(message, ciphertext=message.ciphertext[:-1])

    with pytest.raises(DecryptionError):
        open_sealed(truncated, key_pair.private_key)


def test_seal_empty_payload(key_pair: KeyPair) -> None:
    message = seal(b"", key_pair.public_key)

    assert len(message.ciphertext) == 16
    assert open_sealed(message, key_pair.private_key) == b""
