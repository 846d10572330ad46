"""
Unit conversion for pressure, flow rate, length and temperature.

Pressure, flow rate and length convert linearly through their base unit
(Pa, m³/s, m). Temperature is affine and always pivots through Celsius.
Unit tokens form a closed set per family; anything else raises UnknownUnitError.
"""

from typing import Dict, Literal

from .constants import (
    BAR_to_PA, DEG_C_to_K, FT_to_M, GPM_to_M3S, INCH_to_M, KGFCM2_to_PA,
    KPA_to_PA, LPM_to_M3S, LPS_to_M3S, M3H_to_M3S, MM_to_M, MMH2O_to_PA,
    MPA_to_PA, PSI_to_PA,
)
from .errors import UnknownUnitError

PressureUnit = Literal["Pa", "kPa", "MPa", "bar", "psi", "kgf/cm2", "mmH2O"]
FlowRateUnit = Literal["m3/s", "m3/h", "L/min", "L/s", "USgpm"]
LengthUnit = Literal["mm", "m", "in", "ft"]
TemperatureUnit = Literal["C", "K", "F"]
Quantity = Literal["pressure", "flow_rate", "length", "temperature"]

PRESSURE_TO_PA: Dict[str, float] = {
    "Pa": 1.0,
    "kPa": KPA_to_PA,
    "MPa": MPA_to_PA,
    "bar": BAR_to_PA,
    "psi": PSI_to_PA,
    "kgf/cm2": KGFCM2_to_PA,
    "mmH2O": MMH2O_to_PA,
}

FLOW_RATE_TO_M3S: Dict[str, float] = {
    "m3/s": 1.0,
    "m3/h": M3H_to_M3S,
    "L/min": LPM_to_M3S,
    "L/s": LPS_to_M3S,
    "USgpm": GPM_to_M3S,
}

LENGTH_TO_M: Dict[str, float] = {
    "mm": MM_to_M,
    "m": 1.0,
    "in": INCH_to_M,
    "ft": FT_to_M,
}

TEMPERATURE_UNITS = ("C", "K", "F")


def _factor(table: Dict[str, float], unit: str, family: str) -> float:
    try:
        return table[unit]
    except KeyError:
        raise UnknownUnitError(
            f"Unknown {family} unit: {unit!r}. Valid units: {', '.join(table)}"
        ) from None


def _linear(value: float, from_unit: str, to_unit: str, table: Dict[str, float], family: str) -> float:
    from_factor = _factor(table, from_unit, family)
    to_factor = _factor(table, to_unit, family)
    if from_unit == to_unit:
        return value
    return value * from_factor / to_factor


def convert_pressure(value: float, from_unit: PressureUnit, to_unit: PressureUnit) -> float:
    return _linear(value, from_unit, to_unit, PRESSURE_TO_PA, "pressure")


def convert_flow_rate(value: float, from_unit: FlowRateUnit, to_unit: FlowRateUnit) -> float:
    return _linear(value, from_unit, to_unit, FLOW_RATE_TO_M3S, "flow rate")


def flow_rate_to_m3s(value: float, unit: FlowRateUnit) -> float:
    """Convert a flow rate to m³/s."""
    return value * _factor(FLOW_RATE_TO_M3S, unit, "flow rate")


def convert_length(value: float, from_unit: LengthUnit, to_unit: LengthUnit) -> float:
    return _linear(value, from_unit, to_unit, LENGTH_TO_M, "length")


def convert_temperature(value: float, from_unit: TemperatureUnit, to_unit: TemperatureUnit) -> float:
    """Convert a temperature, routing through °C because the scales have offsets."""
    for unit in (from_unit, to_unit):
        if unit not in TEMPERATURE_UNITS:
            raise UnknownUnitError(
                f"Unknown temperature unit: {unit!r}. Valid units: {', '.join(TEMPERATURE_UNITS)}"
            )
    if from_unit == to_unit:
        return value

    if from_unit == "C":
        celsius = value
    elif from_unit == "K":
        celsius = value - DEG_C_to_K
    else:
        celsius = (value - 32.0) * 5.0 / 9.0

    if to_unit == "C":
        return celsius
    if to_unit == "K":
        return celsius + DEG_C_to_K
    return celsius * 9.0 / 5.0 + 32.0


_CONVERTERS = {
    "pressure": convert_pressure,
    "flow_rate": convert_flow_rate,
    "length": convert_length,
    "temperature": convert_temperature,
}


def convert(value: float, from_unit: str, to_unit: str, quantity: Quantity) -> float:
    """Convert ``value`` between two units of the named quantity family."""
    try:
        converter = _CONVERTERS[quantity]
    except KeyError:
        raise UnknownUnitError(
            f"Unknown quantity: {quantity!r}. Valid quantities: {', '.join(_CONVERTERS)}"
        ) from None
    return converter(value, from_unit, to_unit)


def units_for(quantity: Quantity) -> tuple:
    """Enumerate the valid unit tokens of a quantity family."""
    if quantity == "temperature":
        return TEMPERATURE_UNITS
    tables = {"pressure": PRESSURE_TO_PA, "flow_rate": FLOW_RATE_TO_M3S, "length": LENGTH_TO_M}
    try:
        return tuple(tables[quantity])
    except KeyError:
        raise UnknownUnitError(f"Unknown quantity: {quantity!r}") from None
