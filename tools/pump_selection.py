import json
import logging
from typing import Dict, List, Optional

from hydraulics.constants import (
    DEFAULT_ATMOSPHERIC_PRESSURE_KPA, DEFAULT_CURVE_POINTS, DEFAULT_MAX_FLOW_RATIO,
    DEFAULT_WATER_DENSITY, DEFAULT_WATER_VAPOR_PRESSURE_KPA,
)
from hydraulics.errors import HydraulicsError
from hydraulics.input_resolver import InputResolver
from hydraulics.json_helpers import round_floats, safe_json_dumps
from hydraulics.models import PumpCurvePoint
from hydraulics.pump_selection import find_operating_point, npsh_available, resistance_curve

logger = logging.getLogger("hydraulics-mcp.select_pump_operating_point")


def select_pump_operating_point(
    pump_curve: List[Dict[str, float]],
    static_head_m: float,
    friction_head_m: float,
    design_flow_m3h: float,
    num_points: int = DEFAULT_CURVE_POINTS,
    max_flow_ratio: float = DEFAULT_MAX_FLOW_RATIO,
    # --- NPSH available (optional) ---
    suction_static_head_m: Optional[float] = None,      # Liquid level above pump centerline
    suction_friction_loss_m: float = 0.0,
    atmospheric_pressure_kpa: Optional[float] = None,
    atmospheric_pressure_psi: Optional[float] = None,
    vapor_pressure_kpa: Optional[float] = None,
    vapor_pressure_psi: Optional[float] = None,
    density: float = DEFAULT_WATER_DENSITY,
) -> str:
    """Find where a pump curve meets the system resistance curve.

    The resistance curve is H = static_head + K·Q² with K fitted so that the
    friction head equals friction_head_m at design_flow_m3h. The first crossing in
    ascending flow is the operating point; efficiency and NPSHr are interpolated
    from the pump curve there.

    Args:
        pump_curve: Points {"flow_m3h", "head_m", "efficiency_pct", "npshr_m"},
            sorted by strictly ascending flow
        static_head_m: Static head of the system in m
        friction_head_m: Friction plus fitting head at the design flow in m
        design_flow_m3h: Design flow in m³/h
        suction_static_head_m: Set to also compute NPSHa and the NPSH margin

    Returns:
        JSON string with the sampled resistance curve, the operating point (null
        when the curves do not cross) and optional NPSH results
    """
    resolver = InputResolver("select_pump_operating_point")

    try:
        points = [PumpCurvePoint(**p) for p in pump_curve]
        resolver.results_log.append(f"Pump curve: {len(points)} points")

        curve = resistance_curve(static_head_m, friction_head_m, design_flow_m3h, num_points, max_flow_ratio)
        operating_point = find_operating_point(points, curve)

        output = {
            "resistance_curve": [p.model_dump() for p in curve],
            "operating_point": operating_point.model_dump() if operating_point else None,
        }
        if operating_point is None:
            resolver.results_log.append("Pump curve and resistance curve do not cross: no operating point")
        else:
            resolver.results_log.append(
                f"Operating point: {operating_point.flow_m3h:.3f} m³/h at {operating_point.head_m:.3f} m"
            )

        if suction_static_head_m is not None:
            pa = resolver.resolve_pressure(
                "Atmospheric pressure", default=DEFAULT_ATMOSPHERIC_PRESSURE_KPA,
                kpa=atmospheric_pressure_kpa, psi=atmospheric_pressure_psi,
            )
            pv = resolver.resolve_pressure(
                "Vapor pressure", default=DEFAULT_WATER_VAPOR_PRESSURE_KPA,
                kpa=vapor_pressure_kpa, psi=vapor_pressure_psi,
            )
            npsha = npsh_available(pa, pv, suction_static_head_m, suction_friction_loss_m, density)
            output["npsha_m"] = npsha
            if npsha < 0:
                resolver.results_log.append(f"WARNING: NPSHa is negative ({npsha:.2f} m); the pump will cavitate")
            if operating_point is not None:
                margin = npsha - operating_point.npshr_m
                output["npsh_margin_m"] = margin
                if margin < 0:
                    resolver.results_log.append(
                        f"WARNING: NPSHr {operating_point.npshr_m:.2f} m exceeds NPSHa {npsha:.2f} m"
                    )

        output = round_floats(output)
        output["log"] = resolver.results_log
        return safe_json_dumps(output)

    except HydraulicsError as e:
        logger.error(f"Error in select_pump_operating_point: {e}", exc_info=True)
        return json.dumps({"error": str(e), "log": resolver.results_log})
    except Exception as e:
        logger.error(f"Error in select_pump_operating_point: {e}", exc_info=True)
        return json.dumps({"error": f"Calculation error: {str(e)}", "log": resolver.results_log})
