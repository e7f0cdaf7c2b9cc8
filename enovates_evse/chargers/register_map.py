"""
Enovates Modbus Register Map

This module defines the Modbus holding registers of the Enovates charger.
These registers are used for reading status and measurements and for
controlling the offered charge current via Modbus TCP or RTU.
"""

from .modbus_types import MBR

# Identification / configuration block (51..57), read in one go by get_charger_info
MBR_PHASES = MBR(address=51)  # Number of connector output phases
MBR_MAX_AMP = MBR(address=52)  # Max Amp per phase, hardware limit in A
MBR_OCPP_STATUS = MBR(address=53)
MBR_LOAD_SHEDDING = MBR(address=54)  # 0 = disabled, 1 = enabled
MBR_LOCK_STATE = MBR(address=55)
MBR_CONTACTOR = MBR(address=56)
MBR_LED = MBR(address=57)  # LED index

INFO_BLOCK = MBR(address=51, length=7)

# Measurements
MBR_CURRENTS = MBR(address=201, length=3, divisor=1000)  # L1..L3, mA -> A
MBR_VOLTAGES = MBR(address=204, length=3, divisor=10)  # L1..L3, 0.1 V -> V
MBR_POWER_TOTAL = MBR(address=207)  # Power active total, not decoded by the driver
MBR_ENERGY = MBR(address=214, data_type="uint32", length=2, divisor=1000)  # Wh -> kWh

# State
MBR_MODE3_STATE = MBR(address=301)  # IEC 61851 mode 3 state, numeric

# Control
MBR_CURRENT_OFFERED = MBR(address=401)  # mA, 0 = charging disabled
