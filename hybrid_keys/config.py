"""
hybrid_keys runtime configuration.
"""

from dataclasses import dataclass


@dataclass(frozen=True, kw_only=True)
class HybridKeysConfig:
    """
    Execution settings. Algorithm parameters are fixed and not configurable.

    Attributes:
        max_workers: Size of the worker pool for async operations.
            ``None`` lets the executor pick its default.
        thread_name_prefix: Name prefix for worker threads.
        lock_memory: Ask the OS to lock raw key buffers in RAM (best effort).
    """

    max_workers: int | None = None
    thread_name_prefix: str = "hybrid-keys"
    lock_memory: bool = False

    def __post_init__(self) -> None:
        if self.max_workers is not None and self.max_workers <= 0:
            msg = "max_workers must be positive"
            raise ValueError(msg)
        if not self.thread_name_prefix:
            msg = "thread_name_prefix must not be empty"
            raise ValueError(msg)
