"""Physical and electrical constants for LED power planning.

All distances are integer micrometers, matching the geometry files.

This module provides:
- LED strip density and per-LED current draw
- Junction box and circuit ratings
- Voltage-drop distance limit for the feed wire gauge
- Default panel striping parameters
"""

from __future__ import annotations

# Unit conversion
MICRONS_PER_FOOT = 304_800
MICRONS_PER_METER = 1_000_000

# LED strips (60 LEDs per meter)
LEDS_PER_MICRON = 0.00006
STRIPS_PER_EDGE = 3

# Worst-case draw per LED in amps. Overridable via [physics] in config.
MAX_CURRENT_PER_LED = 0.03

# Each box holds 4 power supplies, each split into 4 fused 15 A circuits
CIRCUIT_MAX_CURRENT = 15
CIRCUITS_PER_BOX = 16
BOX_MAX_CURRENT = CIRCUIT_MAX_CURRENT * CIRCUITS_PER_BOX  # 240 A

# 1 V drop on 12 AWG feed wire
VOLTAGE_DROP_DISTANCE_FEET = 17
VOLTAGE_DROP_THRESHOLD = VOLTAGE_DROP_DISTANCE_FEET * MICRONS_PER_FOOT

# Panel striping
PANEL_ROW_PITCH = 50_800  # 2 in between LED rows
PANEL_MAX_STRIP_LENGTH = 5 * MICRONS_PER_METER

__all__ = [
    "MICRONS_PER_FOOT",
    "MICRONS_PER_METER",
    "LEDS_PER_MICRON",
    "STRIPS_PER_EDGE",
    "MAX_CURRENT_PER_LED",
    "CIRCUIT_MAX_CURRENT",
    "CIRCUITS_PER_BOX",
    "BOX_MAX_CURRENT",
    "VOLTAGE_DROP_DISTANCE_FEET",
    "VOLTAGE_DROP_THRESHOLD",
    "PANEL_ROW_PITCH",
    "PANEL_MAX_STRIP_LENGTH",
]
