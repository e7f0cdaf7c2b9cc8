"""Unit tests for the charger registry and authorization."""

from unittest.mock import AsyncMock, MagicMock
import pytest

from enovates_evse.authorization import StaticAuthorization, require_authorization
from enovates_evse.chargers.enovates import EnovatesCharger, new_enovates_from_config
from enovates_evse.chargers.registry import ChargerRegistry, register_default_chargers
from enovates_evse.exceptions import PermissionDenied, UnknownChargerType

# pylint: disable=C0116,W0621


@pytest.fixture
def registry():
    return ChargerRegistry()


def test_registry_starts_empty(registry):
    assert registry.types() == []


def test_register_default_chargers(registry):
    register_default_chargers(registry)
    assert registry.types() == ["enovates"]


def test_duplicate_type_is_rejected(registry):
    registry.add("enovates", new_enovates_from_config)
    with pytest.raises(ValueError):
        registry.add("Enovates", new_enovates_from_config)


@pytest.mark.asyncio
async def test_create_unknown_type(registry, authorized):
    with pytest.raises(UnknownChargerType):
        await registry.create("wallbox", {}, authorized)


@pytest.mark.asyncio
async def test_create_calls_factory(registry, authorized):
    factory = AsyncMock(return_value="charger")
    registry.add("test", factory)
    config = {"host": "10.0.0.2"}
    assert await registry.create("TEST", config, authorized) == "charger"
    factory.assert_awaited_once_with(config, authorized)


@pytest.mark.asyncio
async def test_create_enovates(registry, authorized, monkeypatch):
    monkeypatch.setattr("enovates_evse.chargers.enovates.ModbusTransport", MagicMock())
    register_default_chargers(registry)
    charger = await registry.create("enovates", {"host": "10.0.0.2"}, authorized)
    assert isinstance(charger, EnovatesCharger)
    await charger.close()


def test_static_authorization():
    assert StaticAuthorization(True).is_authorized()
    assert not StaticAuthorization(False).is_authorized()


def test_require_authorization():
    require_authorization(StaticAuthorization(True), "Enovates")
    with pytest.raises(PermissionDenied) as exc_info:
        require_authorization(StaticAuthorization(False), "Enovates")
    assert "Enovates" in str(exc_info.value)
    assert isinstance(exc_info.value, PermissionError)
