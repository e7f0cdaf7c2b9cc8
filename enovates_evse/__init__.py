"""
Enovates EVSE - Python client for Enovates chargers over Modbus

Example usage:
    from enovates_evse import ChargerRegistry, StaticAuthorization, register_default_chargers

    registry = register_default_chargers(ChargerRegistry())
    charger = await registry.create(
        "enovates", {"host": "192.168.1.50"}, StaticAuthorization(True)
    )
    async with charger:
        await charger.set_max_current(16)
        print(await charger.status(), await charger.currents())
"""

from .authorization import Authorization, StaticAuthorization
from .chargers.base_charger import BaseCharger, ChargeStatus
from .chargers.enovates import ChargerInfo, EnovatesCharger, new_enovates_from_config
from .chargers.modbus_transport import ModbusSettings, ModbusTransport, RegisterTransport
from .chargers.registry import ChargerRegistry, register_default_chargers
from .exceptions import (
    EVSEError,
    InvalidArgument,
    PermissionDenied,
    ProtocolDecodeError,
    TransportError,
    UnknownChargerType,
)

__version__ = "0.1.0"
__all__ = [
    "Authorization",
    "StaticAuthorization",
    "BaseCharger",
    "ChargeStatus",
    "ChargerInfo",
    "EnovatesCharger",
    "new_enovates_from_config",
    "ModbusSettings",
    "ModbusTransport",
    "RegisterTransport",
    "ChargerRegistry",
    "register_default_chargers",
    "EVSEError",
    "InvalidArgument",
    "PermissionDenied",
    "ProtocolDecodeError",
    "TransportError",
    "UnknownChargerType",
]
