from unittest.mock import MagicMock
import pytest

from enovates_evse.authorization import StaticAuthorization
from enovates_evse.chargers.modbus_transport import RegisterTransport
from enovates_evse.exceptions import TransportError


class FakeRegisterTransport(RegisterTransport):
    """In-memory holding registers, records every request."""

    def __init__(self, registers: dict[int, int] | None = None):
        self.registers: dict[int, int] = dict(registers or {})
        self.reads: list[tuple[int, int]] = []
        self.writes: list[tuple[int, int]] = []
        self.fail: bool = False

    async def read_registers(self, address: int, count: int) -> bytes:
        self.reads.append((address, count))
        if self.fail:
            raise TransportError("read failed", address=address)
        return b"".join(
            self.registers.get(address + i, 0).to_bytes(2, "big") for i in range(count)
        )

    async def write_register(self, address: int, value: int):
        self.writes.append((address, value))
        if self.fail:
            raise TransportError("write failed", address=address)
        self.registers[address] = value


@pytest.fixture
def transport():
    return FakeRegisterTransport()


@pytest.fixture
def authorized():
    return StaticAuthorization(True)


@pytest.fixture
def mock_log():
    return MagicMock()
