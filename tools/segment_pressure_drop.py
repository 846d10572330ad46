import json
import logging
from typing import Dict, List, Optional, Union

from hydraulics.errors import HydraulicsError
from hydraulics.input_resolver import InputResolver
from hydraulics.json_helpers import round_floats, safe_json_dumps
from hydraulics.segment import calculate_segment_pressure_drop as segment_pressure_drop
from hydraulics.units import convert_pressure
from tools.segment_inputs import build_segment

logger = logging.getLogger("hydraulics-mcp.calculate_segment_pressure_drop")


def segment_result_summary(result) -> Dict[str, object]:
    """Flat, rounded view of a SegmentResult for tool output."""
    summary = {
        "velocity_m_s": result.velocity_m_s,
        "reynolds_number": result.reynolds,
        "flow_regime": result.flow_regime,
        "friction_factor": result.friction_factor,
        "friction_factor_method": result.friction_factor_method,
        "dp_friction_pa": result.dp_friction,
        "dp_fittings_pa": result.dp_fittings,
        "dp_elevation_pa": result.dp_elevation,
        "dp_total_pa": result.dp_total,
        "dp_total_kpa": convert_pressure(result.dp_total, "Pa", "kPa"),
        "head_friction_m": result.head_friction_m,
        "head_fittings_m": result.head_fittings_m,
        "head_elevation_m": result.head_elevation_m,
        "head_total_m": result.head_total_m,
        "fitting_details": [fd.model_dump() for fd in result.fitting_details],
        "references": [ref.model_dump() for ref in result.references],
        "warnings": [w.model_dump() for w in result.warnings],
    }
    return round_floats(summary)


def calculate_segment_pressure_drop(
    # --- Pipe ---
    nominal_size: Optional[Union[str, float]] = None,   # NPS, e.g. "2" or "1-1/2"
    schedule: str = "40",
    inner_diameter_mm: Optional[float] = None,          # Custom bore instead of NPS
    inner_diameter_in: Optional[float] = None,
    material: Optional[str] = None,                     # e.g. "carbon_steel_new"
    roughness_mm: Optional[float] = None,               # Overrides material

    # --- Fluid (water at 20 °C when omitted) ---
    density: Optional[float] = None,                    # kg/m³
    viscosity: Optional[float] = None,                  # Pa·s
    viscosity_cp: Optional[float] = None,               # cP
    temperature_c: float = 20.0,

    # --- Flow (any one) ---
    flow_rate_m3_s: Optional[float] = None,
    flow_rate_m3_h: Optional[float] = None,
    flow_rate_l_min: Optional[float] = None,
    flow_rate_gpm: Optional[float] = None,

    # --- Geometry ---
    length_m: Optional[float] = None,
    length_ft: Optional[float] = None,
    elevation_change_m: Optional[float] = None,         # Signed, positive uphill
    elevation_change_ft: Optional[float] = None,

    fittings: Optional[List[Dict[str, Union[str, int, float]]]] = None,
) -> str:
    """Calculate the itemized pressure drop of one pipe segment.

    Friction (Churchill, or 64/Re in laminar flow), fitting losses (Crane L/D,
    Darby 3-K, fixed K or valve Cv) and the elevation term are computed at the
    segment velocity and reported in Pa and in meters of head, with the
    engineering reference of every component.

    Args:
        nominal_size: Nominal pipe size; dimensions from ASME B36.10M tables
        schedule: Pipe schedule (default "40")
        inner_diameter_mm: Inner diameter for a non-standard pipe
        material: Material id from list_materials
        roughness_mm: Absolute roughness, overrides material
        density: Liquid density in kg/m³
        viscosity: Dynamic viscosity in Pa·s
        flow_rate_m3_h: Volumetric flow (also m3_s, l_min or gpm)
        length_m: Straight length (or length_ft)
        elevation_change_m: Outlet minus inlet elevation (or elevation_change_ft)
        fittings: List of {"fitting_id": ..., "quantity": ..., "cv_override": ...}

    Returns:
        JSON string with velocity, Reynolds number, friction factor, pressure
        and head components, fitting breakdown, references and warnings
    """
    resolver = InputResolver("calculate_segment_pressure_drop")

    try:
        segment = build_segment(resolver, {
            "nominal_size": nominal_size,
            "schedule": schedule,
            "inner_diameter_mm": inner_diameter_mm,
            "inner_diameter_in": inner_diameter_in,
            "material": material,
            "roughness_mm": roughness_mm,
            "density": density,
            "viscosity": viscosity,
            "viscosity_cp": viscosity_cp,
            "temperature_c": temperature_c,
            "flow_rate_m3_s": flow_rate_m3_s,
            "flow_rate_m3_h": flow_rate_m3_h,
            "flow_rate_l_min": flow_rate_l_min,
            "flow_rate_gpm": flow_rate_gpm,
            "length_m": length_m,
            "length_ft": length_ft,
            "elevation_change_m": elevation_change_m,
            "elevation_change_ft": elevation_change_ft,
            "fittings": fittings,
        })

        logs = resolver.get_logs()
        if segment is None:
            return json.dumps({"errors": logs["errors"], "log": logs["log"]})

        result = segment_pressure_drop(segment)
        resolver.results_log.append(
            f"Segment: Re={result.reynolds:.0f} ({result.flow_regime}), dP total {result.dp_total:.1f} Pa"
        )

        output = segment_result_summary(result)
        output["log"] = resolver.results_log
        return safe_json_dumps(output)

    except HydraulicsError as e:
        logger.error(f"Error in calculate_segment_pressure_drop: {e}", exc_info=True)
        return json.dumps({"error": str(e), "log": resolver.results_log})
    except Exception as e:
        logger.error(f"Error in calculate_segment_pressure_drop: {e}", exc_info=True)
        return json.dumps({"error": f"Calculation error: {str(e)}", "log": resolver.results_log})
