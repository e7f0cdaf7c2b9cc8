from abc import ABC, abstractmethod
from enum import Enum

from pyee.asyncio import AsyncIOEventEmitter

from ..log_wrapper import get_class_method_logger, python_log_sink


class ChargeStatus(Enum):
    """IEC 61851 mode 3 state of the charging session."""

    A = "A"  # No vehicle connected
    B = "B"  # Vehicle connected, not charging
    C = "C"  # Charging

    @property
    def description(self) -> str:
        return _CHARGE_STATUS_DESCRIPTIONS[self]


_CHARGE_STATUS_DESCRIPTIONS: dict[ChargeStatus, str] = {
    ChargeStatus.A: "No car connected",
    ChargeStatus.B: "Connected, not charging",
    ChargeStatus.C: "Charging",
}


class BaseCharger(AsyncIOEventEmitter, ABC):
    """Contract for a charger that is controlled by offering a charge current.

    Events:
    - `evse_polled`: emitted at every keep-alive poll, argument `stop` (bool),
      True when polling has stopped.
    - `charger_enabled_changed`: emitted after charging has been enabled or
      disabled, argument `enabled` (bool).

    A listener that raises does not affect the charger, the error is logged.
    """

    def __init__(self, ad_log=None):
        super().__init__()
        self._log = get_class_method_logger(ad_log or python_log_sink(__name__))
        # Without an error listener pyee re-raises listener errors at the emitter.
        self.add_listener("error", self._handle_listener_error)

    #################### STATUS METHODS ####################

    @abstractmethod
    async def status(self) -> ChargeStatus:
        raise NotImplementedError("Subclasses must implement status()")

    @abstractmethod
    async def is_enabled(self) -> bool:
        """True if the charger currently offers current to the car."""
        raise NotImplementedError("Subclasses must implement is_enabled()")

    #################### ACTIONS ####################

    @abstractmethod
    async def set_enabled(self, enable: bool):
        raise NotImplementedError("Subclasses must implement set_enabled()")

    @abstractmethod
    async def set_max_current(self, amps: int):
        """Set the maximum charge current in A. This (re-)enables charging."""
        raise NotImplementedError("Subclasses must implement set_max_current()")

    @abstractmethod
    async def close(self):
        """Stop background activity of the charger. The transport is left open."""
        raise NotImplementedError("Subclasses must implement close()")

    async def __aenter__(self):
        return self

    async def __aexit__(self, *_args):
        await self.close()

    ################### Protected event emitters #####################

    def _emit_enabled_changed(self, enabled: bool):
        self.emit("charger_enabled_changed", enabled)

    def _emit_polled(self, stop: bool = False):
        self.emit("evse_polled", stop=stop)

    def _handle_listener_error(self, error: Exception):
        self._log(f"Error in event listener: {error!r}", level="WARNING")
