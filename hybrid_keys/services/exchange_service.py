"""
Async facade over the key primitives.

RSA generation and private-key operations can take a long time, so every
operation is run on a worker thread. Independent calls may run in parallel;
keys are immutable and safe to share between them.
"""

import asyncio
import functools
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Self, TypeVar

import structlog

from hybrid_keys.config import HybridKeysConfig
from hybrid_keys.crypto.asymmetric import KeyPair, PrivateKey, PublicKey, generate_key_pair
from hybrid_keys.crypto.key_exchange import open_sealed, seal
from hybrid_keys.crypto.symmetric import SymmetricKey
from hybrid_keys.encoding import Buffer
from hybrid_keys.models.crypto import SealedMessage

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class KeyExchangeService:
    """
    Runs key operations off the event loop.

    Example:
        ```python
        async with KeyExchangeService() as service:
            alice, bob = await asyncio.gather(
                service.generate_key_pair(), service.generate_key_pair()
            )
            message = await service.seal(b"hi", bob.public_key, sender=alice.private_key)
            payload = await service.open(message, bob.private_key, sender=alice.public_key)
        ```

    Args:
        config: Service configuration. Uses defaults if not provided.
    """

    def __init__(self, config: HybridKeysConfig | None = None) -> None:
        self._config = config or HybridKeysConfig()
        self._executor: ThreadPoolExecutor | None = None

    async def __aenter__(self) -> Self:
        self._ensure_executor()
        return self

    async def __aexit__(
        self, exc_type: type | None, exc_val: BaseException | None, exc_tb: object
    ) -> None:
        await self.close()

    @property
    def config(self) -> HybridKeysConfig:
        return self._config

    @property
    def is_running(self) -> bool:
        return self._executor is not None

    async def close(self) -> None:
        """Wait for running operations and release the worker threads."""
        if self._executor is None:
            return
        executor, self._executor = self._executor, None
        await asyncio.to_thread(executor.shutdown, wait=True)
        logger.debug("Key exchange service closed")

    # Symmetric keys

    async def generate_symmetric_key(self) -> SymmetricKey:
        return await self._run(SymmetricKey.generate, lock_memory=self._config.lock_memory)

    async def import_symmetric_key(self, raw: Buffer) -> SymmetricKey:
        return await self._run(
            SymmetricKey.import_raw, raw, lock_memory=self._config.lock_memory
        )

    async def export_symmetric_key(self, key: SymmetricKey) -> bytes:
        return await self._run(key.export)

    async def encrypt(self, key: SymmetricKey, iv: Buffer, plaintext: Buffer) -> bytes:
        return await self._run(key.encrypt, iv, plaintext)

    async def decrypt(self, key: SymmetricKey, iv: Buffer, ciphertext: Buffer) -> bytes:
        return await self._run(key.decrypt, iv, ciphertext)

    # Asymmetric keys

    async def generate_private_key(self) -> PrivateKey:
        return await self._run(PrivateKey.generate)

    async def generate_key_pair(self) -> KeyPair:
        return await self._run(generate_key_pair)

    async def import_private_key(self, pkcs8: Buffer) -> PrivateKey:
        return await self._run(PrivateKey.import_pkcs8, pkcs8)

    async def export_private_key(self, key: PrivateKey) -> bytes:
        return await self._run(key.export)

    async def import_public_key(self, spki: Buffer) -> PublicKey:
        return await self._run(PublicKey.import_spki, spki)

    async def export_public_key(self, key: PublicKey) -> bytes:
        return await self._run(key.export)

    async def get_public_key(self, key: PrivateKey) -> PublicKey:
        return await self._run(key.get_public_key)

    async def wrap_key(self, public_key: PublicKey, key: SymmetricKey) -> bytes:
        return await self._run(public_key.wrap_key, key)

    async def unwrap_key(self, private_key: PrivateKey, wrapped: Buffer) -> SymmetricKey:
        return await self._run(
            private_key.unwrap_key, wrapped, lock_memory=self._config.lock_memory
        )

    async def sign(self, private_key: PrivateKey, data: Buffer) -> bytes:
        return await self._run(private_key.sign, data)

    async def verify(self, public_key: PublicKey, signature: Buffer, data: Buffer) -> bool:
        return await self._run(public_key.verify, signature, data)

    # Key exchange

    async def seal(
        self,
        payload: Buffer,
        recipient: PublicKey,
        *,
        sender: PrivateKey | None = None,
        session_key: SymmetricKey | None = None,
        iv: Buffer | None = None,
    ) -> SealedMessage:
        """Seal ``payload`` for ``recipient``. See ``hybrid_keys.crypto.key_exchange.seal``."""
        return await self._run(
            seal, payload, recipient, sender=sender, session_key=session_key, iv=iv
        )

    async def open(
        self,
        message: SealedMessage,
        recipient: PrivateKey,
        *,
        sender: PublicKey | None = None,
    ) -> bytes:
        """Open a sealed message. See ``hybrid_keys.crypto.key_exchange.open_sealed``."""
        return await self._run(open_sealed, message, recipient, sender=sender)

    def _ensure_executor(self) -> ThreadPoolExecutor:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self._config.max_workers,
                thread_name_prefix=self._config.thread_name_prefix,
            )
            logger.debug("Key exchange service started", max_workers=self._config.max_workers)
        return self._executor

    async def _run(self, func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        executor = self._ensure_executor()
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(executor, functools.partial(func, *args, **kwargs))
