"""Tests for sparrow.config — AppConfig and DatabaseConfig."""

import dataclasses

import pytest

from sparrow.config import DEFAULT_POOL_SIZE, AppConfig, DatabaseConfig
from sparrow.errors import ConfigurationError


class TestAppConfig:
    def test_defaults(self) -> None:
        config = AppConfig()
        assert config.host == "127.0.0.1"
        assert config.port == 8000
        assert config.log_level == "info"
        assert config.startup_timeout == 10.0

    def test_frozen(self) -> None:
        config = AppConfig()
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.port = 9000  # type: ignore[misc]


class TestDatabaseConfig:
    def test_defaults(self) -> None:
        config = DatabaseConfig.from_mapping(
            {"user": "root", "password": "admin", "database": "testdb"}
        )
        assert config.host == "localhost"
        assert config.driver == "postgresql"
        assert config.pool_size == DEFAULT_POOL_SIZE == 10
        assert config.options == {}

    def test_extra_keys_pass_through(self) -> None:
        config = DatabaseConfig.from_mapping(
            {
                "host": "db.internal",
                "user": "root",
                "password": "admin",
                "database": "testdb",
                "command_timeout": 5,
            }
        )
        assert config.host == "db.internal"
        assert config.options == {"command_timeout": 5}

    def test_missing_required_keys(self) -> None:
        with pytest.raises(ConfigurationError, match="user, password"):
            DatabaseConfig.from_mapping({"database": "testdb"})

    def test_sqlite_only_needs_database(self) -> None:
        config = DatabaseConfig.from_mapping({"driver": "sqlite", "database": ":memory:"})
        assert config.driver == "sqlite"
        assert config.user is None

    def test_unknown_driver(self) -> None:
        with pytest.raises(ConfigurationError, match="Unsupported database driver"):
            DatabaseConfig.from_mapping({"driver": "oracle", "database": "x"})

    def test_input_mapping_not_mutated(self) -> None:
        raw = {"user": "root", "password": "admin", "database": "testdb", "ssl": True}
        DatabaseConfig.from_mapping(raw)
        assert raw == {"user": "root", "password": "admin", "database": "testdb", "ssl": True}
