import json
import logging
from typing import Any, Dict, List, Optional

from hydraulics.errors import HydraulicsError
from hydraulics.input_resolver import InputResolver
from hydraulics.json_helpers import round_floats, safe_json_dumps
from hydraulics.models import SystemInput, SystemResult
from hydraulics.system import calculate_system_pressure_drop as system_pressure_drop
from hydraulics.system import solve_flow_rate, with_flow_rate
from hydraulics.units import convert_flow_rate, convert_pressure
from tools.segment_inputs import build_segment
from tools.segment_pressure_drop import segment_result_summary

logger = logging.getLogger("hydraulics-mcp.calculate_system_pressure_drop")

FLOW_KEYS = ("flow_rate_m3_s", "flow_rate_m3_h", "flow_rate_l_min", "flow_rate_gpm")

# Each group is one quantity; a segment that sets any key of a group keeps its own value
SHARED_GROUPS = (
    FLOW_KEYS,
    ("density",),
    ("viscosity", "viscosity_cp"),
    ("temperature_c",),
    ("material", "roughness_mm"),
)


def merge_shared(spec: Dict[str, Any], shared: Dict[str, Any]) -> Dict[str, Any]:
    """Segment description with the shared defaults filled in group by group."""
    merged = dict(spec)
    for group in SHARED_GROUPS:
        if any(merged.get(key) is not None for key in group):
            continue
        for key in group:
            if shared.get(key) is not None:
                merged[key] = shared[key]
    return merged


def system_result_summary(result: SystemResult) -> Dict[str, Any]:
    """JSON-ready totals and per-segment results of a system calculation."""
    output = round_floats({
        "dp_friction_total_pa": result.dp_friction_total,
        "dp_fittings_total_pa": result.dp_fittings_total,
        "dp_elevation_total_pa": result.dp_elevation_total,
        "dp_total_pa": result.dp_total,
        "dp_total_kpa": convert_pressure(result.dp_total, "Pa", "kPa"),
        "head_friction_total_m": result.head_friction_total_m,
        "head_fittings_total_m": result.head_fittings_total_m,
        "head_elevation_total_m": result.head_elevation_total_m,
        "head_total_m": result.head_total_m,
        "references": [ref.model_dump() for ref in result.references],
    })
    output["segments"] = [segment_result_summary(r) for r in result.segment_results]
    return output


def calculate_system_pressure_drop(
    segments: List[Dict[str, Any]],
    # --- Shared defaults for all segments ---
    flow_rate_m3_h: Optional[float] = None,
    flow_rate_m3_s: Optional[float] = None,
    flow_rate_l_min: Optional[float] = None,
    flow_rate_gpm: Optional[float] = None,
    density: Optional[float] = None,
    viscosity: Optional[float] = None,
    viscosity_cp: Optional[float] = None,
    temperature_c: Optional[float] = None,
    material: Optional[str] = None,
    roughness_mm: Optional[float] = None,
    # --- Solve mode ---
    target_pressure_drop_kpa: Optional[float] = None,
) -> str:
    """Calculate the total pressure drop of pipe segments connected in series.

    Each segment is a dict with the same keys as calculate_segment_pressure_drop
    (nominal_size, schedule, material, length_m, elevation_change_m, fittings, ...).
    Flow rate, fluid properties and material given at the top level apply to every
    segment that does not set its own. A segment value in any unit replaces the
    whole shared quantity: a segment flow_rate_m3_h overrides a shared
    flow_rate_m3_s, a segment viscosity_cp overrides a shared viscosity and a
    segment material overrides a shared roughness_mm.

    With target_pressure_drop_kpa the common flow rate that produces that total
    pressure drop is solved for instead, and the system is reported at that flow.

    Returns:
        JSON string with per-segment results, friction/fittings/elevation/total
        in Pa and m of head, and the de-duplicated reference list
    """
    resolver = InputResolver("calculate_system_pressure_drop")

    try:
        shared = {
            "flow_rate_m3_h": flow_rate_m3_h,
            "flow_rate_m3_s": flow_rate_m3_s,
            "flow_rate_l_min": flow_rate_l_min,
            "flow_rate_gpm": flow_rate_gpm,
            "density": density,
            "viscosity": viscosity,
            "viscosity_cp": viscosity_cp,
            "temperature_c": temperature_c,
            "material": material,
            "roughness_mm": roughness_mm,
        }
        solving = target_pressure_drop_kpa is not None

        segment_inputs = []
        for i, spec in enumerate(segments or []):
            merged = merge_shared(spec, shared)
            if solving and not any(merged.get(k) is not None for k in FLOW_KEYS):
                # Placeholder flow; replaced by the solved value
                merged["flow_rate_m3_s"] = 0.0
            segment = build_segment(resolver, merged, label=f"Segment {i + 1}")
            if segment is not None:
                segment_inputs.append(segment)

        logs = resolver.get_logs()
        if logs["errors"]:
            return json.dumps({"errors": logs["errors"], "log": logs["log"]})

        system = SystemInput(segments=tuple(segment_inputs))
        output: Dict[str, Any] = {}

        if solving:
            target_pa = convert_pressure(target_pressure_drop_kpa, "kPa", "Pa")
            flow = solve_flow_rate(system, target_pa)
            system = with_flow_rate(system, flow)
            output["solved_flow_rate_m3_s"] = flow
            output["solved_flow_rate_m3_h"] = convert_flow_rate(flow, "m3/s", "m3/h")
            output = round_floats(output)
            resolver.results_log.append(
                f"Solved flow rate {output['solved_flow_rate_m3_h']:.4f} m³/h for "
                f"target {target_pressure_drop_kpa} kPa"
            )

        result = system_pressure_drop(system)
        resolver.results_log.append(
            f"System of {len(result.segment_results)} segments: dP total {result.dp_total:.1f} Pa"
        )

        output.update(system_result_summary(result))
        output["log"] = resolver.results_log
        return safe_json_dumps(output)

    except HydraulicsError as e:
        logger.error(f"Error in calculate_system_pressure_drop: {e}", exc_info=True)
        return json.dumps({"error": str(e), "log": resolver.results_log})
    except Exception as e:
        logger.error(f"Error in calculate_system_pressure_drop: {e}", exc_info=True)
        return json.dumps({"error": f"Calculation error: {str(e)}", "log": resolver.results_log})
