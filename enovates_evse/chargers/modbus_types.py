"""Type definitions for Modbus-related configuration"""

from dataclasses import dataclass
import struct


@dataclass(frozen=True)
class MBR:
    """
    A dataclass representing a ModBus Register (MBR) to read/write.

    Attributes:
        address (int): The starting Modbus holding register address as documented
                       by the charger vendor.

        data_type (str): The data type to interpret the registers as. Defaults to "uint16".
                        Valid options:
                        - "uint16": Unsigned 16-bit integer, big-endian (default).
                        - "uint32": Unsigned 32-bit integer, big-endian (requires length >= 2).

        length (int): Number of consecutive registers to read.
                      For "uint16" with length > 1 every register holds its own value,
                      e.g. one value per phase.

        divisor (int): The raw value is divided by this to get the value in its unit.
                       With the default 1 the raw int is returned as is.
    """

    address: int
    data_type: str = "uint16"
    length: int = 1
    divisor: int = 1

    @property
    def value_count(self) -> int:
        """Number of values held by the registers of this MBR."""
        if self.data_type == "uint32":
            return self.length // 2
        return self.length

    def _scale(self, raw_value: int) -> int | float:
        if self.divisor == 1:
            return raw_value
        return raw_value / self.divisor

    def decode_raw(self, data: bytes) -> list[int]:
        """
        Decode the bytes of a register read into unscaled integers.

        Args:
            data (bytes): Big-endian register contents, two bytes per register.

        Returns:
            list[int]: One raw value per value held by this MBR.

        Raises:
            ValueError: When data is too short or the data_type is not supported.
        """
        if len(data) < self.length * 2:
            raise ValueError(
                f"MBR at {self.address} needs {self.length * 2} bytes, got {len(data)}"
            )

        if self.data_type == "uint16":
            return list(struct.unpack(f">{self.length}H", data[: self.length * 2]))

        if self.data_type == "uint32":
            if self.length < 2:
                raise ValueError("uint32 requires length >= 2")
            count = self.value_count
            return list(struct.unpack(f">{count}I", data[: count * 4]))

        raise ValueError(f"Unsupported data_type: {self.data_type}")

    def decode(self, data: bytes) -> int | float:
        """Decode a single value, scaled with the divisor."""
        return self._scale(self.decode_raw(data)[0])

    def decode_values(self, data: bytes) -> tuple:
        """Decode all values held by this MBR, e.g. L1, L2, L3, scaled with the divisor."""
        return tuple(self._scale(raw) for raw in self.decode_raw(data))

    def encode(self, value: int) -> int:
        """
        Encode a Python int into a 16-bit register value for writing.

        Args:
            value (int): The value in the unit of the register (the divisor is not applied).

        Returns:
            int: The register value.

        Raises:
            ValueError: When the value does not fit in an unsigned 16-bit register.
        """
        if self.data_type != "uint16":
            raise ValueError(f"Writing {self.data_type} is not supported")
        value = int(value)
        if not 0 <= value <= 0xFFFF:
            raise ValueError(f"Value {value} does not fit register {self.address}")
        return value
