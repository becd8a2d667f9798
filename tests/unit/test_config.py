# tests/unit/test_config.py

"""
Tests for configuration loading and precedence.
"""

from pathlib import Path

import pytest

from tsqlr.config import DatabaseConfig, RunnerConfig, load_config
from tsqlr.exceptions import ConfigurationError

CREDENTIALS = {"server": "db.local", "database": "app", "user": "sa", "password": "secret"}


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "tsqlr.toml"
    path.write_text(
        """
[database]
server = "file-server"
database = "file-db"
user = "file-user"
password = "file-pass"
port = 14330

[runner]
query_timeout = 30
redraw_interval = 0.5

[global]
log_level = "DEBUG"
""",
        encoding="utf-8",
    )
    return path


def test_defaults_from_overrides_only() -> None:
    config = load_config(None, CREDENTIALS)

    assert config.database == DatabaseConfig(**CREDENTIALS)
    assert config.database.port == 1433
    assert config.runner == RunnerConfig()
    assert config.runner.query_timeout == 10
    assert config.global_config.log_level == "INFO"


def test_file_values(config_file: Path) -> None:
    config = load_config(config_file)

    assert config.database.server == "file-server"
    assert config.database.port == 14330
    assert config.runner.query_timeout == 30
    assert config.runner.login_timeout == 5
    assert config.runner.redraw_interval == 0.5
    assert config.global_config.numeric_log_level == 10


def test_overrides_beat_file(config_file: Path) -> None:
    config = load_config(config_file, {"server": "cli-server", "query_timeout": 3, "user": None})

    assert config.database.server == "cli-server"
    assert config.database.user == "file-user"
    assert config.runner.query_timeout == 3


def test_missing_credentials_named() -> None:
    with pytest.raises(ConfigurationError) as exc_info:
        load_config(None, {"server": "db.local"})

    message = str(exc_info.value)
    assert "-d database (or $TSQLR_DATABASE)" in message
    assert "-p password (or $TSQLR_PASSWORD)" in message
    assert "-s server" not in message


def test_password_hidden_from_repr() -> None:
    config = load_config(None, CREDENTIALS)
    assert "secret" not in repr(config)


def test_invalid_timeout() -> None:
    with pytest.raises(ConfigurationError, match="query_timeout"):
        load_config(None, {**CREDENTIALS, "query_timeout": 0})


def test_invalid_log_level() -> None:
    with pytest.raises(ConfigurationError, match="Invalid log_level"):
        load_config(None, {**CREDENTIALS, "log_level": "LOUD"})


def test_unknown_database_key(tmp_path: Path) -> None:
    path = tmp_path / "bad.toml"
    path.write_text('[database]\nhostname = "x"\n' + "".join(f'{k} = "{v}"\n' for k, v in CREDENTIALS.items()))
    with pytest.raises(ConfigurationError, match="Invalid configuration"):
        load_config(path)


def test_invalid_toml(tmp_path: Path) -> None:
    path = tmp_path / "broken.toml"
    path.write_text("[database\n")
    with pytest.raises(ConfigurationError, match="Invalid TOML"):
        load_config(path)

# 🔼⚙️
