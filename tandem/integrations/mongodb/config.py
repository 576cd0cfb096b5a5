"""Settings for the MongoDB record store."""

from typing import Any

from pydantic import BaseModel, Field


class MongoDBConfig(BaseModel):
    """How to reach MongoDB and how the record store uses it.

    Only ``uri`` is required. Pool and timeout settings map one-to-one onto
    ``AsyncMongoClient`` options (see ``client_options``); optional ones left
    as None fall back to the driver's defaults.

    Examples:
        >>> MongoDBConfig(uri="mongodb://localhost:27017", database="billing")
        >>> MongoDBConfig(uri="mongodb://localhost:27017", unique_ids=False)
    """

    model_config = {"frozen": True}

    uri: str = Field(..., examples=["mongodb://localhost:27017"])
    database: str = "tandem"
    app_name: str | None = Field(
        default=None,
        description="Reported to the server in the connection handshake",
    )
    unique_ids: bool = Field(
        default=True,
        description="Guard every record collection with a unique index on its id field",
    )

    max_pool_size: int = Field(default=100, ge=1)
    min_pool_size: int = Field(default=0, ge=0)
    max_idle_time_ms: int | None = Field(default=None, ge=0)
    server_selection_timeout_ms: int = Field(default=30_000, ge=0)
    connect_timeout_ms: int = Field(default=20_000, ge=0)
    socket_timeout_ms: int | None = Field(default=None, ge=0)

    def client_options(self) -> dict[str, Any]:
        """Keyword arguments for ``AsyncMongoClient``; unset optional settings are left out."""
        options: dict[str, Any] = {
            "maxPoolSize": self.max_pool_size,
            "minPoolSize": self.min_pool_size,
            "serverSelectionTimeoutMS": self.server_selection_timeout_ms,
            "connectTimeoutMS": self.connect_timeout_ms,
        }
        optional = {
            "appname": self.app_name,
            "maxIdleTimeMS": self.max_idle_time_ms,
            "socketTimeoutMS": self.socket_timeout_ms,
        }
        options.update((key, value) for key, value in optional.items() if value is not None)
        return options
