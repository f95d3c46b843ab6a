import dataclasses

import pytest

from hybrid_keys.models.crypto import SUITE, CipherSuite, SealedMessage


def test_suite_fixed_parameters() -> None:
    assert SUITE.aes_key_size == 32
    assert SUITE.aes_block_size == 16
    assert SUITE.rsa_key_size == 4096
    assert SUITE.rsa_public_exponent == 65537


def test_suite_derived_sizes() -> None:
    assert SUITE.rsa_modulus_bytes == 512
    assert SUITE.oaep_capacity == 446


def test_suite_is_frozen() -> None:
    with pytest.raises(dataclasses.FrozenInstanceError):
        SUITE.rsa_key_size = 2048  # type: ignore[misc]


def test_oaep_capacity_follows_modulus() -> None:
    suite = CipherSuite(rsa_key_size=2048)

    assert suite.oaep_capacity == 256 - 66


def test_sealed_message_signed_payload_concatenates_fields() -> None:
    message = SealedMessage(wrapped_key=b"K" * 4, iv=b"I" * 2, ciphertext=b"C" * 3)

    assert message.signed_payload == b"KKKKIICCC"
    assert message.is_signed is False


def test_sealed_message_is_signed_with_signature() -> None:
    message = SealedMessage(wrapped_key=b"k", iv=b"i", ciphertext=b"c", signature=b"s")

    assert message.is_signed is True


def test_sealed_message_requires_keyword_arguments() -> None:
    with pytest.raises(TypeError):
        SealedMessage(b"k", b"i", b"c")  # type: ignore[misc]
