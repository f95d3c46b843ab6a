"""
Sealing a payload for one recipient.

Sender side:
    1. Encrypt the payload with a session key under a fresh IV.
    2. Wrap the session key with the recipient's public key.
    3. Optionally sign wrapped_key || iv || ciphertext with the sender's private key.

Recipient side runs the same steps in reverse: verify, unwrap, decrypt.
Key rotation and replay protection are left to the caller.
"""

import structlog

from hybrid_keys.crypto.asymmetric import PrivateKey, PublicKey
from hybrid_keys.crypto.symmetric import SymmetricKey, random_iv
from hybrid_keys.encoding import Buffer
from hybrid_keys.exceptions import SignatureMismatchError
from hybrid_keys.models.crypto import SealedMessage

logger = structlog.get_logger(__name__)


def seal(
    payload: Buffer,
    recipient: PublicKey,
    *,
    sender: PrivateKey | None = None,
    session_key: SymmetricKey | None = None,
    iv: Buffer | None = None,
) -> SealedMessage:
    """
    Encrypt ``payload`` so only the holder of ``recipient``'s private key can read it.

    Args:
        payload: Data to encrypt.
        recipient: Recipient's public key, used to wrap the session key.
        sender: Sender's private key. When given, the message is signed.
        session_key: Session key to reuse. A new one is generated if omitted.
        iv: CBC IV. A random one is drawn if omitted; never reuse an IV with
            the same session key.

    Returns:
        The sealed message.
    """
    owns_key = session_key is None
    key = SymmetricKey.generate() if session_key is None else session_key
    try:
        message_iv = random_iv() if iv is None else bytes(iv)
        ciphertext = key.encrypt(message_iv, payload)
        wrapped_key = recipient.wrap_key(key)
    finally:
        if owns_key:
            key.destroy()

    message = SealedMessage(wrapped_key=wrapped_key, iv=message_iv, ciphertext=ciphertext)
    if sender is not None:
        message = SealedMessage(
            wrapped_key=wrapped_key,
            iv=message_iv,
            ciphertext=ciphertext,
            signature=sender.sign(message.signed_payload),
        )

    logger.debug(
        "Sealed message",
        recipient=recipient.fingerprint,
        signed=message.is_signed,
        size=len(ciphertext),
    )
    return message


def open_sealed(
    message: SealedMessage,
    recipient: PrivateKey,
    *,
    sender: PublicKey | None = None,
) -> bytes:
    """
    Verify, unwrap and decrypt a sealed message.

    Args:
        message: The sealed message.
        recipient: Recipient's private key.
        sender: Expected sender's public key. When given, the message must
            carry a valid signature from it.

    Returns:
        The decrypted payload.

    Raises:
        SignatureMismatchError: If ``sender`` is given and the signature is
            missing or does not verify.
        InvalidSignatureFormatError: If the signature is malformed.
        UnwrapError: If the session key cannot be recovered.
        DecryptionError: If the payload cannot be decrypted.
    """
    if sender is not None:
        _verify_sender(message, sender)

    with recipient.unwrap_key(message.wrapped_key) as session_key:
        return session_key.decrypt(message.iv, message.ciphertext)


def _verify_sender(message: SealedMessage, sender: PublicKey) -> None:
    if message.signature is None:
        msg = "Message is not signed"
        raise SignatureMismatchError(msg, sender=sender.fingerprint)
    if not sender.verify(message.signature, message.signed_payload):
        logger.warning("Sender signature mismatch", sender=sender.fingerprint)
        msg = "Signature does not match sender key"
        raise SignatureMismatchError(msg, sender=sender.fingerprint)
