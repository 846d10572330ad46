"""
Pump requirements from the design duty: specific speed, pump type, BEP window
and an estimated shaft power.
"""

import logging
import math
from typing import List, Optional, Sequence

from pydantic import Field

from .constants import DEFAULT_WATER_DENSITY, G_GRAVITY, M3H_to_M3S, NPSHR_SAFETY_FACTOR
from .errors import InvalidInputError
from .models import FrozenModel, Reference
from .references import load_table

logger = logging.getLogger("hydraulics-mcp.pump_requirements")

SPECIFIC_SPEED_REF = Reference(
    source="Pump Handbook, 4th Ed., Karassik et al.",
    page="Ch. 2",
    equation="Ns = N × √Q / H^(3/4)  (Q: m³/min, H: m)",
)

POWER_REF = Reference(
    source="Basic fluid mechanics",
    equation="P = ρgQH / (η × 1000)  [kW]",
)

BEP_FLOW_RANGE = (0.9, 1.1)
OPERATING_FLOW_RANGE = (0.7, 1.2)


class EfficiencyRange(FrozenModel):
    min: float
    max: float

    @property
    def midpoint(self) -> float:
        return (self.min + self.max) / 2.0


class PumpTypeClassification(FrozenModel):
    type: str
    ns_min: float
    ns_max: float
    typical_efficiency_pct: EfficiencyRange = Field(..., alias="typicalEfficiency_pct")
    description: str = ""


class SpecificSpeedResult(FrozenModel):
    ns: float
    pump_type: str
    typical_efficiency_pct: EfficiencyRange
    reference: Reference


class FlowRange(FrozenModel):
    min_m3h: float
    max_m3h: float


class BEPRecommendation(FrozenModel):
    bep_flow_range: FlowRange
    operating_range: FlowRange


class PumpSuggestion(FrozenModel):
    specific_speed: SpecificSpeedResult
    bep: BEPRecommendation
    max_npshr_m: Optional[float] = None
    estimated_power_kw: float
    references: List[Reference]


def load_pump_classifications() -> List[PumpTypeClassification]:
    """Pump type bands by specific speed, in ascending Ns order."""
    table = load_table("pump_types.json")
    return [PumpTypeClassification(**c) for c in table["classifications"]]


def classify_pump_type(ns: float, classifications: Sequence[PumpTypeClassification]) -> PumpTypeClassification:
    """Band containing ``ns``; values beyond every band fall back to the last one."""
    for c in classifications:
        if c.ns_min <= ns < c.ns_max:
            return c
    return classifications[-1]


def specific_speed(
    speed_rpm: float,
    flow_m3h: float,
    head_m: float,
    classifications: Optional[Sequence[PumpTypeClassification]] = None,
) -> SpecificSpeedResult:
    """
    Specific speed Ns = N × √Q / H^0.75 with Q in m³/min, and the pump type it implies.

    Raises:
        InvalidInputError: speed, flow or head is not positive
    """
    if flow_m3h <= 0 or head_m <= 0 or speed_rpm <= 0:
        raise InvalidInputError("flow, head, and speed must be positive")
    if classifications is None:
        classifications = load_pump_classifications()

    flow_m3min = flow_m3h / 60.0
    ns = speed_rpm * math.sqrt(flow_m3min) / head_m ** 0.75
    band = classify_pump_type(ns, classifications)
    return SpecificSpeedResult(
        ns=ns,
        pump_type=band.type,
        typical_efficiency_pct=band.typical_efficiency_pct,
        reference=SPECIFIC_SPEED_REF,
    )


def bep_recommendation(design_flow_m3h: float) -> BEPRecommendation:
    """BEP flow at 90-110% and allowable operation at 70-120% of the design flow."""
    if design_flow_m3h <= 0:
        zero = FlowRange(min_m3h=0.0, max_m3h=0.0)
        return BEPRecommendation(bep_flow_range=zero, operating_range=zero)
    return BEPRecommendation(
        bep_flow_range=FlowRange(
            min_m3h=design_flow_m3h * BEP_FLOW_RANGE[0],
            max_m3h=design_flow_m3h * BEP_FLOW_RANGE[1],
        ),
        operating_range=FlowRange(
            min_m3h=design_flow_m3h * OPERATING_FLOW_RANGE[0],
            max_m3h=design_flow_m3h * OPERATING_FLOW_RANGE[1],
        ),
    )


def hydraulic_power_kw(density: float, flow_m3h: float, head_m: float, efficiency: float) -> float:
    """Shaft power P = ρgQH/(η·1000) in kW, efficiency as a fraction."""
    if efficiency <= 0:
        raise InvalidInputError(f"Efficiency must be positive, got {efficiency}")
    return density * G_GRAVITY * flow_m3h * M3H_to_M3S * head_m / (efficiency * 1000.0)


def pump_suggestion(
    design_flow_m3h: float,
    total_head_m: float,
    speed_rpm: float,
    npsha_m: Optional[float] = None,
    density: float = DEFAULT_WATER_DENSITY,
    classifications: Optional[Sequence[PumpTypeClassification]] = None,
) -> PumpSuggestion:
    """
    Characteristics a pump should have for the design duty.

    Args:
        design_flow_m3h: Design flow in m³/h
        total_head_m: Total dynamic head at the design flow in m
        speed_rpm: Shaft speed in rpm
        npsha_m: NPSH available in m; sets the maximum allowable NPSHr with a 20% margin
        density: Liquid density in kg/m³
        classifications: Pump type bands; the bundled table when omitted

    Returns:
        PumpSuggestion with specific speed and type, BEP windows, max NPSHr and
        estimated power at the midpoint of the type's typical efficiency
    """
    ns_result = specific_speed(speed_rpm, design_flow_m3h, total_head_m, classifications)
    bep = bep_recommendation(design_flow_m3h)

    max_npshr = npsha_m * NPSHR_SAFETY_FACTOR if npsha_m is not None else None

    eta = ns_result.typical_efficiency_pct.midpoint / 100.0
    power = hydraulic_power_kw(density, design_flow_m3h, total_head_m, eta)

    logger.debug(f"Ns={ns_result.ns:.1f} ({ns_result.pump_type}), eta={eta:.2f}, P={power:.2f} kW")

    return PumpSuggestion(
        specific_speed=ns_result,
        bep=bep,
        max_npshr_m=max_npshr,
        estimated_power_kw=power,
        references=[SPECIFIC_SPEED_REF, POWER_REF],
    )
