"""Exceptions raised by the EVSE drivers and their Modbus transport."""


class EVSEError(Exception):
    """Base class for all errors raised by this package."""


class TransportError(EVSEError):
    """Reading from or writing to the charger failed at the Modbus level."""

    def __init__(self, message: str, address: int | None = None):
        super().__init__(message)
        self.address = address


class ProtocolDecodeError(EVSEError):
    """A register returned a value outside its documented range."""

    def __init__(self, message: str, raw_value: int, address: int | None = None):
        super().__init__(message)
        self.raw_value = raw_value
        self.address = address


class InvalidArgument(EVSEError, ValueError):
    """Caller supplied value rejected before anything was written to the charger."""


class PermissionDenied(EVSEError, PermissionError):
    """The injected authorization did not allow creating the charger."""


class UnknownChargerType(EVSEError, KeyError):
    """No factory is registered for the requested charger type."""
