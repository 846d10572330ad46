"""
Pump selection: system resistance curve, operating point and NPSH available.

The resistance curve models the system as H = H_static + K·Q², with K fitted
from the friction head at the design flow. The operating point is the first
crossing of the pump curve and the resistance curve in ascending flow.
"""

import logging
from typing import List, Optional, Sequence

import numpy as np

from .constants import DEFAULT_CURVE_POINTS, DEFAULT_MAX_FLOW_RATIO, G_GRAVITY, KPA_to_PA
from .errors import InvalidInputError, LookupFailure
from .interpolate import is_ascending, linear_interpolate
from .models import OperatingPoint, PumpCurvePoint, ResistanceCurvePoint, SystemResult

logger = logging.getLogger("hydraulics-mcp.pump_selection")


def resistance_curve(
    static_head_m: float,
    friction_head_m: float,
    design_flow_m3h: float,
    num_points: int = DEFAULT_CURVE_POINTS,
    max_flow_ratio: float = DEFAULT_MAX_FLOW_RATIO,
) -> List[ResistanceCurvePoint]:
    """
    Sample the system resistance curve H(Q) = H_static + K·Q².

    Args:
        static_head_m: Static head (elevation difference) in m
        friction_head_m: Friction head at the design flow in m
        design_flow_m3h: Design flow in m³/h
        num_points: Number of intervals; num_points + 1 points are returned
        max_flow_ratio: Last sampled flow as a multiple of the design flow

    Returns:
        Points from Q = 0 to max_flow_ratio × design flow. A non-positive design
        flow gives the single point (0, static head).
    """
    if design_flow_m3h <= 0:
        return [ResistanceCurvePoint(flow_m3h=0.0, head_m=static_head_m)]
    if num_points < 1:
        raise InvalidInputError(f"num_points must be at least 1, got {num_points}")

    k = friction_head_m / (design_flow_m3h * design_flow_m3h)
    flows = np.linspace(0.0, design_flow_m3h * max_flow_ratio, num_points + 1)
    heads = static_head_m + k * flows ** 2
    return [ResistanceCurvePoint(flow_m3h=float(q), head_m=float(h)) for q, h in zip(flows, heads)]


def resistance_curve_from_system(
    system_result: SystemResult,
    design_flow_m3h: float,
    num_points: int = DEFAULT_CURVE_POINTS,
    max_flow_ratio: float = DEFAULT_MAX_FLOW_RATIO,
) -> List[ResistanceCurvePoint]:
    """Resistance curve of a system computed at its design flow.

    Static head is the summed elevation head; friction head is the sum of
    straight-pipe and fitting heads.
    """
    static_head = system_result.head_elevation_total_m
    friction_head = system_result.head_friction_total_m + system_result.head_fittings_total_m
    return resistance_curve(static_head, friction_head, design_flow_m3h, num_points, max_flow_ratio)


def find_operating_point(
    pump_curve: Sequence[PumpCurvePoint],
    resistance: Sequence[ResistanceCurvePoint],
) -> Optional[OperatingPoint]:
    """
    Intersect a pump curve with a resistance curve.

    Each pump-curve interval is checked for a sign change of
    (pump head − resistance head); the first interval with one wins and the
    crossing is located by linear interpolation. Intervals outside the sampled
    resistance curve are skipped.

    Returns:
        The operating point, or None when the curves do not cross

    Raises:
        InvalidInputError: pump curve flows are not strictly ascending
    """
    if len(pump_curve) < 2 or len(resistance) < 2:
        return None

    pump_flows = [p.flow_m3h for p in pump_curve]
    if not is_ascending(pump_flows):
        raise InvalidInputError("Pump curve flows must be strictly ascending")

    res_flows = [p.flow_m3h for p in resistance]
    res_heads = [p.head_m for p in resistance]

    for lower, upper in zip(pump_curve[:-1], pump_curve[1:]):
        try:
            hr1 = linear_interpolate(lower.flow_m3h, res_flows, res_heads)
            hr2 = linear_interpolate(upper.flow_m3h, res_flows, res_heads)
        except LookupFailure:
            continue

        diff1 = lower.head_m - hr1
        diff2 = upper.head_m - hr2
        if diff1 * diff2 > 0:
            continue

        span = abs(diff1) + abs(diff2)
        t = abs(diff1) / span if span > 0 else 0.0
        flow = lower.flow_m3h + t * (upper.flow_m3h - lower.flow_m3h)
        head = lower.head_m + t * (upper.head_m - lower.head_m)

        try:
            efficiency = linear_interpolate(flow, pump_flows, [p.efficiency_pct for p in pump_curve])
            npshr = linear_interpolate(flow, pump_flows, [p.npshr_m for p in pump_curve])
        except LookupFailure:
            efficiency = lower.efficiency_pct
            npshr = lower.npshr_m

        logger.debug(f"Operating point between {lower.flow_m3h} and {upper.flow_m3h} m³/h: "
                     f"Q={flow:.3f} m³/h H={head:.3f} m")
        return OperatingPoint(flow_m3h=flow, head_m=head, efficiency_pct=efficiency, npshr_m=npshr)

    logger.debug("Pump curve and resistance curve do not cross")
    return None


def npsh_available(
    atmospheric_pressure_kpa: float,
    vapor_pressure_kpa: float,
    suction_static_head_m: float,
    suction_friction_loss_m: float,
    density: float,
) -> float:
    """
    NPSHa = (Pa − Pv)/(ρg) + hs − hf   [m]

    Args:
        atmospheric_pressure_kpa: Pressure on the suction liquid surface in kPa
        vapor_pressure_kpa: Liquid vapor pressure in kPa
        suction_static_head_m: Liquid level above the pump centerline in m (negative for suction lift)
        suction_friction_loss_m: Suction line loss in m
        density: Liquid density in kg/m³

    A negative result means cavitation and is returned as is.
    """
    return ((atmospheric_pressure_kpa - vapor_pressure_kpa) * KPA_to_PA / (density * G_GRAVITY)
            + suction_static_head_m
            - suction_friction_loss_m)
