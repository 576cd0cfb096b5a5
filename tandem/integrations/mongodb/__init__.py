"""MongoDB integration for tandem.

This module provides the MongoDB implementation of the RecordStore
interface using the async PyMongo driver.

Usage:
    >>> from tandem.integrations.mongodb import (
    ...     MongoDBConfig,
    ...     MongoDBConnectionManager,
    ...     MongoRecordStore,
    ... )
    >>>
    >>> config = MongoDBConfig(
    ...     uri="mongodb://localhost:27017",
    ...     database="myapp"
    ... )
    >>> manager = MongoDBConnectionManager(config)
    >>> await manager.connect()
    >>> store = MongoRecordStore(manager)
"""

from .config import MongoDBConfig
from .connection import MongoDBConnectionManager
from .store import MongoRecordStore

__all__ = [
    "MongoDBConfig",
    "MongoDBConnectionManager",
    "MongoRecordStore",
]
