"""Client to control an Enovates Electric Vehicle Supply Equipment (EVSE).

The Enovates charger is controlled by writing the offered current (mA) to a
holding register; writing 0 stops charging. The charger falls back to a safe
state when it does not receive any Modbus traffic for some time, so the client
keeps polling the mode 3 state in the background for as long as it is open.
"""

import asyncio
from dataclasses import dataclass

from ..authorization import Authorization, require_authorization
from ..exceptions import InvalidArgument, ProtocolDecodeError
from . import register_map as rm
from .base_charger import BaseCharger, ChargeStatus
from .modbus_transport import ModbusSettings, ModbusTransport, RegisterTransport
from .modbus_types import MBR


@dataclass
class ChargerInfo:
    """Identification and configuration block of the charger (registers 51..57)."""

    phases: int
    max_amp_per_phase: int
    ocpp_status: int
    load_shedding: bool
    lock_state: int
    contactor_state: int
    led_index: int

    def __str__(self) -> str:
        return (
            f"Enovates EVSE: {self.phases} phase(s), max {self.max_amp_per_phase} A per phase, "
            f"OCPP status {self.ocpp_status}, load shedding "
            f"{'enabled' if self.load_shedding else 'disabled'}, lock state {self.lock_state}, "
            f"contactor {self.contactor_state}, LED {self.led_index}"
        )


class EnovatesCharger(BaseCharger):
    """Client to control an Enovates EVSE"""

    _CHARGER_NAME: str = "Enovates"

    # The lowest current the IEC 61851 allows to offer to a car.
    MIN_CURRENT_A: int = 6
    DEFAULT_CURRENT_MA: int = MIN_CURRENT_A * 1000

    # The charger stops a session when it is not contacted for a while.
    KEEP_ALIVE_INTERVAL_SECONDS: float = 30

    # Raw mode 3 state -> ChargeStatus. 1, 2 and 3 are sub states of "connected".
    _MODE3_STATE_MAPPING: dict[int, ChargeStatus] = {
        0: ChargeStatus.A,
        1: ChargeStatus.B,
        2: ChargeStatus.B,
        3: ChargeStatus.B,
        4: ChargeStatus.C,
    }

    def __init__(
        self,
        transport: RegisterTransport,
        authorization: Authorization,
        ad_log=None,
        keep_alive_interval: float | None = None,
    ):
        """Create the client and start the keep-alive polling.

        Must be called from within a running event loop. Call close() (or use the
        client as an async context manager) to stop the polling.

        Args:
            transport: Shared register transport, it is not closed by this client.
            authorization: Checked before anything else, see PermissionDenied.
            ad_log: Optional log sink with the signature of Hass.log (msg, level).
            keep_alive_interval: Seconds between keep-alive polls, defaults to
              KEEP_ALIVE_INTERVAL_SECONDS.

        Raises:
            PermissionDenied: If the authorization does not allow this charger.
        """
        require_authorization(authorization, self._CHARGER_NAME)
        super().__init__(ad_log=ad_log)
        self._transport = transport

        # Last commanded maximum current in mA, written when charging gets enabled.
        self._current_ma: int = self.DEFAULT_CURRENT_MA

        if keep_alive_interval is None:
            keep_alive_interval = self.KEEP_ALIVE_INTERVAL_SECONDS
        self._keep_alive_interval = keep_alive_interval
        self._keep_alive_task: asyncio.Task | None = asyncio.get_running_loop().create_task(
            self._keep_alive()
        )

        self._log(f"{self._CHARGER_NAME} client initialised.")

    @property
    def max_current_ma(self) -> int:
        """The current set-point in mA that is offered when charging is enabled."""
        return self._current_ma

    @property
    def is_closed(self) -> bool:
        return self._keep_alive_task is None

    ######################################################################
    #                           STATUS METHODS                           #
    ######################################################################

    async def status(self) -> ChargeStatus:
        """Read the mode 3 state.

        Raises:
            ProtocolDecodeError: The charger reported a state that is not A, B or C.
            TransportError: The register could not be read.
        """
        raw_state = await self._read(rm.MBR_MODE3_STATE)
        charge_status = self._MODE3_STATE_MAPPING.get(raw_state, None)
        if charge_status is None:
            raise ProtocolDecodeError(
                f"Invalid mode 3 state: {raw_state}",
                raw_value=raw_state,
                address=rm.MBR_MODE3_STATE.address,
            )
        return charge_status

    async def is_enabled(self) -> bool:
        return await self._read(rm.MBR_CURRENT_OFFERED) > 0

    async def currents(self) -> tuple[float, float, float]:
        """Measured current per phase (L1, L2, L3) in A."""
        return await self._read_values(rm.MBR_CURRENTS)

    async def voltages(self) -> tuple[float, float, float]:
        """Measured voltage per phase (L1, L2, L3) in V."""
        return await self._read_values(rm.MBR_VOLTAGES)

    async def total_energy(self) -> float:
        """Total imported energy in kWh."""
        return await self._read(rm.MBR_ENERGY)

    async def max_amps(self) -> int:
        """The hardware maximum current per phase in A."""
        return await self._read(rm.MBR_MAX_AMP)

    async def get_charger_info(self) -> ChargerInfo:
        """Read the identification block in one request, mainly for logging at startup."""
        values = await self._read_values(rm.INFO_BLOCK)
        charger_info = ChargerInfo(
            phases=values[0],
            max_amp_per_phase=values[1],
            ocpp_status=values[2],
            load_shedding=values[3] > 0,
            lock_state=values[4],
            contactor_state=values[5],
            led_index=values[6],
        )
        self._log(str(charger_info))
        return charger_info

    ######################################################################
    #                               ACTIONS                              #
    ######################################################################

    async def set_enabled(self, enable: bool):
        """Offer the current set-point to the car, or 0 mA to stop charging."""
        current_ma = self._current_ma if enable else 0
        await self._transport.write_register(
            rm.MBR_CURRENT_OFFERED.address, rm.MBR_CURRENT_OFFERED.encode(current_ma)
        )
        self._log(f"Offered current set to {current_ma} mA.", level="DEBUG")
        self._emit_enabled_changed(enable)

    async def set_max_current(self, amps: int):
        """Set the current set-point and enable charging with it.

        There is no register to store a set-point without offering it, so this
        always (re-)enables charging.

        Raises:
            InvalidArgument: amps not an int, below MIN_CURRENT_A or too high for the
              register, nothing is written in that case.
        """
        if not isinstance(amps, int) or isinstance(amps, bool):
            raise InvalidArgument(f"Invalid current {amps!r}, whole amps expected")
        if amps < self.MIN_CURRENT_A:
            raise InvalidArgument(
                f"Invalid current {amps} A, minimum is {self.MIN_CURRENT_A} A"
            )
        current_ma = amps * 1000
        try:
            rm.MBR_CURRENT_OFFERED.encode(current_ma)
        except ValueError as ve:
            raise InvalidArgument(f"Invalid current {amps} A: {ve}") from ve

        self._current_ma = current_ma
        await self.set_enabled(True)

    ######################################################################
    #                             KEEP ALIVE                             #
    ######################################################################

    async def _keep_alive(self):
        """Poll the state until cancelled. Failures are ignored, the next poll is a retry."""
        while True:
            await asyncio.sleep(self._keep_alive_interval)
            try:
                await self.status()
            except Exception as e:  # pylint: disable=broad-exception-caught
                self._log(f"Keep-alive poll failed: {e}", level="DEBUG")
            self._emit_polled(stop=False)

    async def close(self):
        """Stop the keep-alive polling. Calling it again has no effect."""
        task = self._keep_alive_task
        if task is None:
            return
        self._keep_alive_task = None
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        except Exception as e:  # pylint: disable=broad-exception-caught
            self._log(f"Keep-alive task had stopped: {e!r}", level="WARNING")
        self._emit_polled(stop=True)
        self._log(f"{self._CHARGER_NAME} client closed.")

    ######################################################################
    #                               UTILS                                #
    ######################################################################

    async def _read(self, mbr: MBR) -> int | float:
        data = await self._transport.read_registers(mbr.address, mbr.length)
        return mbr.decode(data)

    async def _read_values(self, mbr: MBR) -> tuple:
        data = await self._transport.read_registers(mbr.address, mbr.length)
        return mbr.decode_values(data)


async def new_enovates_from_config(
    communication_config: dict,
    authorization: Authorization,
    transport: RegisterTransport | None = None,
    ad_log=None,
) -> EnovatesCharger:
    """Create an Enovates client from a communication config.

    Args:
        communication_config (dict): See ModbusSettings.from_config.
        authorization: Checked before the config is decoded or a connection is set up.
        transport: Use this transport instead of creating a ModbusTransport.
        ad_log: Optional log sink with the signature of Hass.log (msg, level).

    Raises:
        PermissionDenied: If the authorization does not allow this charger.
        ValueError: If the communication config is incomplete.
    """
    require_authorization(authorization, EnovatesCharger._CHARGER_NAME)
    if transport is None:
        settings = ModbusSettings.from_config(communication_config)
        transport = ModbusTransport(settings, ad_log=ad_log)
    return EnovatesCharger(transport, authorization, ad_log=ad_log)
