from __future__ import annotations

import pytest

from assetledger.config import ConfigurationError, InventoryConfig, get_inventory_config


def test_defaults_without_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "ASSETLEDGER_AUDIT_RETENTION_DAYS",
        "ASSETLEDGER_DEFAULT_DEVICE_TYPE",
        "ASSETLEDGER_DISCOVERY_METHOD",
    ):
        monkeypatch.delenv(name, raising=False)

    assert get_inventory_config() == InventoryConfig()


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ASSETLEDGER_AUDIT_RETENTION_DAYS", "90")
    monkeypatch.setenv("ASSETLEDGER_DEFAULT_DEVICE_TYPE", " PC ")
    monkeypatch.setenv("ASSETLEDGER_DISCOVERY_METHOD", "Network Scan")

    config = get_inventory_config()

    assert config.audit_retention_days == 90
    assert config.default_device_type == "PC"
    assert config.default_discovery_method == "Network Scan"


@pytest.mark.parametrize("raw", ["a year", "0"])
def test_invalid_retention_raises(monkeypatch: pytest.MonkeyPatch, raw: str) -> None:
    monkeypatch.setenv("ASSETLEDGER_AUDIT_RETENTION_DAYS", raw)

    with pytest.raises(ConfigurationError) as exc:
        get_inventory_config()

    assert "ASSETLEDGER_AUDIT_RETENTION_DAYS" in str(exc.value)
