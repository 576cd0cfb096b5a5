"""Redis integration for tandem.

This module provides the Redis implementation of the RecordCache interface
using redis-py's asyncio client.

Usage:
    >>> from tandem.integrations.redis import (
    ...     RedisConfig,
    ...     RedisConnectionManager,
    ...     RedisRecordCache,
    ... )
    >>>
    >>> manager = RedisConnectionManager(RedisConfig(uri="redis://localhost:6379/0"))
    >>> await manager.connect()
    >>> cache = RedisRecordCache(manager)
"""

from .cache import RedisRecordCache
from .config import RedisConfig
from .connection import RedisConnectionManager

__all__ = [
    "RedisConfig",
    "RedisConnectionManager",
    "RedisRecordCache",
]
