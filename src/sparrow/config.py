"""Application and database configuration.

Both configs are frozen dataclasses: immutable after creation,
IDE-autocompletable, no string-key dict lookups at runtime.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from sparrow.errors import ConfigurationError

# Upper bound on concurrent pool connections; excess acquisitions queue.
DEFAULT_POOL_SIZE = 10

SUPPORTED_DRIVERS = ("postgresql", "sqlite")


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(port=3000, log_level="debug")
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8000

    # Logging (forwarded to uvicorn)
    log_level: str = "info"
    access_log: bool = True

    # ASGI lifespan handling: "on", "off", or "auto"
    lifespan: str = "on"

    # Seconds listen() waits for the server to bind before giving up
    startup_timeout: float = 10.0


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    """Database connection configuration.

    Built from the mapping given to ``app.database()``::

        DatabaseConfig.from_mapping({
            "user": "app",
            "password": "secret",
            "database": "shop",
        })

    Keys this class does not know are kept in ``options`` and passed
    straight through to the driver's pool constructor.
    """

    database: str
    user: str | None = None
    password: str | None = None
    host: str = "localhost"
    port: int | None = None
    driver: str = "postgresql"
    pool_size: int = DEFAULT_POOL_SIZE
    echo: bool = False
    options: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> "DatabaseConfig":
        """Validate a plain mapping and build a config from it.

        Raises ``ConfigurationError`` for an unknown driver or a missing
        required key. Network drivers need ``user``, ``password`` and
        ``database``; SQLite only needs ``database`` (a file path or
        ``:memory:``).
        """
        values = dict(config)
        driver = values.pop("driver", "postgresql")
        if driver not in SUPPORTED_DRIVERS:
            msg = (
                f"Unsupported database driver: {driver!r}. "
                f"Supported: {', '.join(SUPPORTED_DRIVERS)}"
            )
            raise ConfigurationError(msg)

        required = ("database",) if driver == "sqlite" else ("user", "password", "database")
        missing = [key for key in required if values.get(key) is None]
        if missing:
            msg = f"Database config is missing required key(s): {', '.join(missing)}"
            raise ConfigurationError(msg)

        return cls(
            database=values.pop("database"),
            user=values.pop("user", None),
            password=values.pop("password", None),
            host=values.pop("host", None) or "localhost",
            port=values.pop("port", None),
            driver=driver,
            pool_size=values.pop("pool_size", DEFAULT_POOL_SIZE),
            echo=bool(values.pop("echo", False)),
            options=values,
        )
