"""Data services configuration using pydantic-settings."""

from pydantic_settings import BaseSettings

from .integrations.mongodb.config import MongoDBConfig
from .integrations.redis.config import RedisConfig


class DataServicesConfig(BaseSettings):
    """Connection settings for the store and the cache.

    Supplied once at startup and immutable afterwards. All settings can be
    configured via environment variables with the TANDEM_ prefix:

    - TANDEM_DB_URI=mongodb://localhost:27017
    - TANDEM_DB_DATABASE=myapp
    - TANDEM_DB_APP_NAME=myapp
    - TANDEM_CACHE_URI=redis://localhost:6379/0

    Attributes:
        db_uri: MongoDB connection URI.
        db_database: MongoDB database name.
        db_app_name: Application name reported to MongoDB.
        cache_uri: Redis connection URI.

    Example:
        >>> config = DataServicesConfig()
        >>> services = await DataServices.connect(config)
    """

    db_uri: str
    db_database: str
    db_app_name: str
    cache_uri: str

    model_config = {"env_prefix": "TANDEM_", "frozen": True}

    def mongodb_config(self) -> MongoDBConfig:
        """Settings for the MongoDB connection manager."""
        return MongoDBConfig(
            uri=self.db_uri,
            database=self.db_database,
            app_name=self.db_app_name,
        )

    def redis_config(self) -> RedisConfig:
        """Settings for the Redis connection manager."""
        return RedisConfig(uri=self.cache_uri)
