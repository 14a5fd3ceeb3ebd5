from __future__ import annotations

from pathlib import Path  # noqa: TC003

import pytest

from assetledger.config import (
    ConfigurationError,
    get_database_config,
    get_storage_config,
    storage,
)


def test_data_dir_prefers_explicit_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    custom = tmp_path / "custom-data"
    monkeypatch.setenv("ASSETLEDGER_DATA_DIR", str(custom))

    result = get_storage_config().resolve_data_dir()

    assert result == custom.resolve()


def test_database_uri_uses_env_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URI", "sqlite:///override.db")

    assert storage.get_database_uri() == "sqlite:///override.db"


def test_database_uri_creates_data_dir(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv("DATABASE_URI", raising=False)
    monkeypatch.setenv("ASSETLEDGER_DATA_DIR", str(tmp_path / "data-dir"))

    uri = storage.get_database_uri()

    expected_path = (tmp_path / "data-dir" / storage.DEFAULT_DB_FILENAME).resolve()
    assert uri == f"sqlite+pysqlite:///{expected_path}"
    assert expected_path.parent.exists()


def test_busy_timeout_defaults_and_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URI", "sqlite:///override.db")
    monkeypatch.delenv("ASSETLEDGER_BUSY_TIMEOUT", raising=False)
    assert get_database_config().busy_timeout_seconds == storage.DEFAULT_BUSY_TIMEOUT_SECONDS

    monkeypatch.setenv("ASSETLEDGER_BUSY_TIMEOUT", "12.5")
    config = get_database_config()

    assert config.busy_timeout_seconds == 12.5
    assert config.is_sqlite


@pytest.mark.parametrize("raw", ["soon", "0", "-3"])
def test_invalid_busy_timeout_raises(monkeypatch: pytest.MonkeyPatch, raw: str) -> None:
    monkeypatch.setenv("ASSETLEDGER_BUSY_TIMEOUT", raw)

    with pytest.raises(ConfigurationError):
        get_database_config()
