"""A generic module for Modbus communication with an EVSE"""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass

import pymodbus.client as modbusClient
from pymodbus import FramerType
from pymodbus.exceptions import ModbusException

from ..exceptions import TransportError
from ..log_wrapper import get_class_method_logger, python_log_sink


class RegisterTransport(ABC):
    """Request/response access to the holding registers of one Modbus device."""

    @abstractmethod
    async def read_registers(self, address: int, count: int) -> bytes:
        """Read count holding registers starting at address.
        Returns the register contents big-endian, two bytes per register."""
        raise NotImplementedError("Subclasses must implement read_registers()")

    @abstractmethod
    async def write_register(self, address: int, value: int):
        """Write a single unsigned 16-bit holding register."""
        raise NotImplementedError("Subclasses must implement write_register()")


@dataclass
class ModbusSettings:
    """Communication settings for a Modbus TCP or Modbus RTU (serial) device.

    Either host (TCP) or device (serial) must be set.
    """

    host: str | None = None
    port: int = 502
    device: str | None = None
    baudrate: int = 9600
    comset: str = "8N1"
    device_id: int = 1

    @classmethod
    def from_config(cls, communication_config: dict) -> "ModbusSettings":
        """Create settings from a communication config dict.

        Args:
            communication_config (dict): With 'host' and optionally 'port' for TCP,
              or 'device' and optionally 'baudrate' and 'comset' for RTU.
              'id' is the Modbus device id, defaults to 1.

        Raises:
            ValueError: If neither host nor device is given, or comset is malformed.
        """
        host = communication_config.get("host", None)
        device = communication_config.get("device", None)
        if not host and not device:
            raise ValueError("Either host or device is required for Modbus communication")

        settings = cls(
            host=host,
            port=int(communication_config.get("port", 502)),
            device=device,
            baudrate=int(communication_config.get("baudrate", 9600)),
            comset=str(communication_config.get("comset", "8N1")).upper(),
            device_id=int(communication_config.get("id", 1)),
        )
        # Validates the comset early, not at first connect.
        settings.serial_parameters()
        return settings

    @property
    def is_serial(self) -> bool:
        return not self.host

    def serial_parameters(self) -> tuple[int, str, int]:
        """Split comset, e.g. "8N1", into bytesize, parity and stopbits."""
        if (
            len(self.comset) != 3
            or self.comset[0] not in "5678"
            or self.comset[1] not in "NEO"
            or self.comset[2] not in "12"
        ):
            raise ValueError(f"Invalid comset '{self.comset}', expected e.g. '8N1'")
        return int(self.comset[0]), self.comset[1], int(self.comset[2])


class ModbusTransport(RegisterTransport):
    """Modbus transport for EVSE's based on the pymodbus async clients.

    Requests are serialised with a lock, so one transport can be shared by the
    driver and its keep-alive task. Reconnection and framing are left to pymodbus:
    a closed connection is re-opened at the next request.
    """

    def __init__(self, settings: ModbusSettings, ad_log=None):
        self._settings = settings
        self._log = get_class_method_logger(ad_log or python_log_sink(__name__))
        self._lock = asyncio.Lock()

        if settings.is_serial:
            bytesize, parity, stopbits = settings.serial_parameters()
            self._mbc = modbusClient.AsyncModbusSerialClient(
                port=settings.device,
                framer=FramerType.RTU,
                baudrate=settings.baudrate,
                bytesize=bytesize,
                parity=parity,
                stopbits=stopbits,
            )
        else:
            self._mbc = modbusClient.AsyncModbusTcpClient(
                host=settings.host,
                port=settings.port,
            )

    async def _ensure_connected(self, address: int):
        if self._mbc.connected:
            return
        self._log("Connecting Modbus client", level="DEBUG")
        try:
            await self._mbc.connect()
        except ModbusException as me:
            raise TransportError(f"Cannot connect: {me}", address=address) from me
        if not self._mbc.connected:
            raise TransportError("Modbus client could not connect", address=address)

    async def read_registers(self, address: int, count: int) -> bytes:
        async with self._lock:
            await self._ensure_connected(address)
            try:
                result = await self._mbc.read_holding_registers(
                    address, count=count, device_id=self._settings.device_id
                )
            except ModbusException as me:
                self._log(f"ModbusException {me}", level="WARNING")
                raise TransportError(
                    f"Reading {count} register(s) at {address} failed: {me}",
                    address=address,
                ) from me

        if result is None or result.isError():
            raise TransportError(
                f"Error response reading {count} register(s) at {address}: {result}",
                address=address,
            )
        if len(result.registers) != count:
            raise TransportError(
                f"Expected {count} register(s) at {address}, got {len(result.registers)}",
                address=address,
            )
        return b"".join(reg.to_bytes(2, "big") for reg in result.registers)

    async def write_register(self, address: int, value: int):
        async with self._lock:
            await self._ensure_connected(address)
            try:
                result = await self._mbc.write_register(
                    address, value, device_id=self._settings.device_id
                )
            except ModbusException as me:
                self._log(f"ModbusException {me}", level="WARNING")
                raise TransportError(
                    f"Writing {value} to register {address} failed: {me}",
                    address=address,
                ) from me

        if result is None or result.isError():
            raise TransportError(
                f"Error response writing {value} to register {address}: {result}",
                address=address,
            )

    def close(self):
        """Close the underlying Modbus connection."""
        self._mbc.close()
