"""
Shared input resolution for the tool layer using Pydantic models.

Tools accept a quantity in SI or in one of several alternative units; these
models pick the first value supplied, convert it to the engine's units and
record where it came from.
"""

import logging
from typing import ClassVar, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field

from .constants import DEFAULT_WATER_DENSITY, DEFAULT_WATER_VISCOSITY
from .units import convert_length, convert_pressure, flow_rate_to_m3s

logger = logging.getLogger("hydraulics-mcp.input_resolver")


class UnitChoice(BaseModel):
    """A quantity given in exactly one of several units; the first set field wins."""

    UNITS: ClassVar[Tuple[Tuple[str, str], ...]] = ()

    def _first(self):
        for field, unit in self.UNITS:
            value = getattr(self, field)
            if value is not None:
                return value, unit
        return None, None


class FlowRateInput(UnitChoice):
    """Volumetric flow rate in any supported unit, resolved to m³/s."""

    m3_s: Optional[float] = Field(None, ge=0, description="Flow rate in m³/s")
    m3_h: Optional[float] = Field(None, ge=0, description="Flow rate in m³/h")
    l_min: Optional[float] = Field(None, ge=0, description="Flow rate in L/min")
    l_s: Optional[float] = Field(None, ge=0, description="Flow rate in L/s")
    gpm: Optional[float] = Field(None, ge=0, description="Flow rate in US GPM")

    UNITS: ClassVar[Tuple[Tuple[str, str], ...]] = (
        ("m3_s", "m3/s"), ("m3_h", "m3/h"), ("l_min", "L/min"), ("l_s", "L/s"), ("gpm", "USgpm"),
    )

    def get_m3_s(self) -> Optional[float]:
        value, unit = self._first()
        if value is None:
            return None
        return flow_rate_to_m3s(value, unit)

    def get_source(self) -> str:
        value, unit = self._first()
        if value is None:
            return "Not specified"
        if unit == "m3/s":
            return "SI (m³/s)"
        return f"{value} {unit} -> {self.get_m3_s():.6g} m³/s"


class LengthInput(UnitChoice):
    """Length in m, mm, in or ft, resolved to m."""

    m: Optional[float] = Field(None, description="Length in meters")
    mm: Optional[float] = Field(None, description="Length in millimeters")
    inch: Optional[float] = Field(None, description="Length in inches")
    ft: Optional[float] = Field(None, description="Length in feet")

    UNITS: ClassVar[Tuple[Tuple[str, str], ...]] = (("m", "m"), ("mm", "mm"), ("inch", "in"), ("ft", "ft"))

    def get_m(self) -> Optional[float]:
        value, unit = self._first()
        if value is None:
            return None
        return convert_length(value, unit, "m")

    def get_source(self) -> str:
        value, unit = self._first()
        if value is None:
            return "Not specified"
        if unit == "m":
            return "SI (m)"
        return f"{value} {unit} -> {self.get_m():.6g} m"


class PressureInput(UnitChoice):
    """Pressure in Pa, kPa, bar or psi, resolved to kPa."""

    kpa: Optional[float] = Field(None, description="Pressure in kPa")
    pa: Optional[float] = Field(None, description="Pressure in Pa")
    bar: Optional[float] = Field(None, description="Pressure in bar")
    psi: Optional[float] = Field(None, description="Pressure in psi")

    UNITS: ClassVar[Tuple[Tuple[str, str], ...]] = (("kpa", "kPa"), ("pa", "Pa"), ("bar", "bar"), ("psi", "psi"))

    def get_kpa(self) -> Optional[float]:
        value, unit = self._first()
        if value is None:
            return None
        return convert_pressure(value, unit, "kPa")

    def get_source(self) -> str:
        value, unit = self._first()
        if value is None:
            return "Not specified"
        if unit == "kPa":
            return "kPa"
        return f"{value} {unit} -> {self.get_kpa():.4f} kPa"


class LiquidInput(BaseModel):
    """Liquid density and viscosity; water at 20 °C only when defaults are allowed."""

    density: Optional[float] = Field(None, gt=0, description="Density in kg/m³")
    viscosity: Optional[float] = Field(None, gt=0, description="Dynamic viscosity in Pa·s")
    viscosity_cp: Optional[float] = Field(None, gt=0, description="Dynamic viscosity in cP")
    allow_defaults: bool = Field(True, description="Fall back to water at 20 °C for missing properties")

    def resolve(self) -> Dict[str, object]:
        result = {"density": self.density, "viscosity": self.viscosity, "warnings": [], "errors": []}
        if result["viscosity"] is None and self.viscosity_cp is not None:
            result["viscosity"] = self.viscosity_cp * 1e-3

        if result["density"] is None:
            if self.allow_defaults:
                result["density"] = DEFAULT_WATER_DENSITY
                result["warnings"].append(f"Using default density {DEFAULT_WATER_DENSITY} kg/m³ (water, 20 °C)")
            else:
                result["errors"].append("Missing fluid density")
        if result["viscosity"] is None:
            if self.allow_defaults:
                result["viscosity"] = DEFAULT_WATER_VISCOSITY
                result["warnings"].append(f"Using default viscosity {DEFAULT_WATER_VISCOSITY} Pa·s (water, 20 °C)")
            else:
                result["errors"].append("Missing fluid viscosity")
        return result


class InputResolver:
    """
    Input resolution with consistent logging shared by every tool.

    Resolved values are logged to ``results_log``; missing required values to
    ``error_log``. Tools return an error as soon as ``error_log`` is non-empty.
    """

    def __init__(self, tool_name: str):
        self.tool_name = tool_name
        self.results_log: List[str] = []
        self.error_log: List[str] = []

    def resolve_flow_rate(self, required: bool = True, **kwargs) -> Optional[float]:
        """Resolve flow rate to m³/s."""
        flow_input = FlowRateInput(**kwargs)
        result = flow_input.get_m3_s()
        if result is not None:
            self.results_log.append(f"Flow rate: {flow_input.get_source()}")
        elif required:
            self.error_log.append("Missing flow rate input")
        return result

    def resolve_length(self, name: str, required: bool = True, **kwargs) -> Optional[float]:
        """Resolve a length to meters."""
        length_input = LengthInput(**kwargs)
        result = length_input.get_m()
        if result is not None:
            self.results_log.append(f"{name}: {length_input.get_source()}")
        elif required:
            self.error_log.append(f"Missing {name.lower()} input")
        return result

    def resolve_pressure(self, name: str, default: Optional[float] = None, **kwargs) -> Optional[float]:
        """Resolve a pressure to kPa, falling back to ``default`` when given."""
        pressure_input = PressureInput(**kwargs)
        result = pressure_input.get_kpa()
        if result is not None:
            self.results_log.append(f"{name}: {pressure_input.get_source()}")
        elif default is not None:
            result = default
            self.results_log.append(f"{name}: default {default} kPa")
        else:
            self.error_log.append(f"Missing {name.lower()} input")
        return result

    def resolve_liquid(self, **kwargs) -> Dict[str, object]:
        """Resolve liquid density and viscosity."""
        result = LiquidInput(**kwargs).resolve()
        if not result["errors"]:
            self.results_log.append(
                f"Fluid: density {result['density']} kg/m³, viscosity {result['viscosity']} Pa·s"
            )
        for warning in result["warnings"]:
            logger.info(f"{self.tool_name}: {warning}")
        self.results_log.extend(result["warnings"])
        self.error_log.extend(result["errors"])
        return result

    def get_logs(self) -> Dict[str, List[str]]:
        return {
            "log": self.results_log.copy(),
            "errors": self.error_log.copy(),
        }
