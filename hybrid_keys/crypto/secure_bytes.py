"""Zeroable storage for raw key material."""

import ctypes
import ctypes.util
import hmac
import platform
from typing import Self

import structlog

logger = structlog.get_logger(__name__)

_libc: ctypes.CDLL | None = None

if platform.system() in ("Linux", "Darwin"):
    try:
        _libc = ctypes.CDLL(ctypes.util.find_library("c"), use_errno=True)
        _libc.mlock.argtypes = [ctypes.c_void_p, ctypes.c_size_t]
        _libc.mlock.restype = ctypes.c_int
        _libc.munlock.argtypes = [ctypes.c_void_p, ctypes.c_size_t]
        _libc.munlock.restype = ctypes.c_int
    except (OSError, AttributeError, TypeError):
        _libc = None


def _address_of(data: bytearray) -> int:
    return ctypes.addressof((ctypes.c_char * len(data)).from_buffer(data))


def secure_zero(data: bytearray) -> None:
    """Overwrite a bytearray with zeros in place."""
    if not data:
        return
    ctypes.memset(_address_of(data), 0, len(data))


def _mlock(data: bytearray) -> bool:
    if _libc is None or not data:
        return False
    return _libc.mlock(_address_of(data), len(data)) == 0


def _munlock(data: bytearray) -> None:
    if _libc is None or not data:
        return
    _libc.munlock(_address_of(data), len(data))


class SecureBytes:
    """
    Owns a private copy of secret bytes and zeros it on ``clear()``.

    Clearing happens explicitly, on context-manager exit, or when the object
    is garbage collected. Copies handed out by ``bytes(obj)`` are not tracked.
    """

    __slots__ = ("_data", "_cleared", "_locked")

    def __init__(self, data: bytes | bytearray | memoryview, *, lock: bool = False) -> None:
        self._data = bytearray(data)
        self._cleared = False
        self._locked = False
        if lock:
            self._locked = _mlock(self._data)
            if not self._locked:
                logger.debug("mlock unavailable for key buffer", size=len(self._data))

    def __del__(self) -> None:
        self.clear()

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *_: object) -> None:
        self.clear()

    def clear(self) -> None:
        """Zero the buffer and release the memory lock. Idempotent."""
        if self._cleared:
            return
        secure_zero(self._data)
        if self._locked:
            _munlock(self._data)
            self._locked = False
        self._cleared = True

    def __bytes__(self) -> bytes:
        self._ensure_live()
        return bytes(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        if self._cleared:
            return "SecureBytes(<cleared>)"
        return f"SecureBytes(<{len(self._data)} bytes>)"

    def __eq__(self, other: object) -> bool:
        """Constant-time comparison; a cleared buffer equals nothing."""
        if isinstance(other, SecureBytes):
            other_data = None if other._cleared else other._data
        elif isinstance(other, (bytes, bytearray)):
            other_data = other
        else:
            return NotImplemented
        if self._cleared or other_data is None:
            return False
        return hmac.compare_digest(self._data, other_data)

    def __hash__(self) -> int:
        raise TypeError("SecureBytes is not hashable")

    @property
    def is_cleared(self) -> bool:
        return self._cleared

    @property
    def is_locked(self) -> bool:
        return self._locked

    def _ensure_live(self) -> None:
        if self._cleared:
            raise RuntimeError("SecureBytes has been cleared")
