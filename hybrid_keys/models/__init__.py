"""
Domain models for hybrid_keys.

These are immutable (frozen) dataclasses.
"""

from hybrid_keys.models.crypto import SUITE, CipherSuite, SealedMessage

__all__ = [
    "SUITE",
    "CipherSuite",
    "SealedMessage",
]
