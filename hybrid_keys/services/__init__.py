"""
Async services for hybrid_keys.
"""

from hybrid_keys.services.exchange_service import KeyExchangeService

__all__ = [
    "KeyExchangeService",
]
