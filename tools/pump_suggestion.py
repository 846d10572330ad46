import json
import logging
from typing import Optional

from hydraulics.constants import DEFAULT_WATER_DENSITY, FT_to_M
from hydraulics.errors import HydraulicsError
from hydraulics.input_resolver import InputResolver
from hydraulics.json_helpers import round_floats, safe_json_dumps
from hydraulics.pump_requirements import pump_suggestion
from hydraulics.units import convert_flow_rate

logger = logging.getLogger("hydraulics-mcp.suggest_pump")


def suggest_pump(
    speed_rpm: float,
    design_flow_m3h: Optional[float] = None,
    design_flow_gpm: Optional[float] = None,
    total_head_m: Optional[float] = None,
    total_head_ft: Optional[float] = None,
    npsha_m: Optional[float] = None,
    density: float = DEFAULT_WATER_DENSITY,
) -> str:
    """Suggest pump characteristics for a design duty.

    Computes the specific speed Ns = N·√Q / H^0.75 (Q in m³/min, H in m) and the
    pump type it implies, the recommended BEP flow window (90-110% of design) and
    operating window (70-120%), the maximum allowable NPSHr (80% of NPSHa) and the
    estimated power at the type's typical efficiency.

    Args:
        speed_rpm: Pump shaft speed in rpm
        design_flow_m3h: Design flow in m³/h (or design_flow_gpm)
        total_head_m: Total dynamic head in m (or total_head_ft)
        npsha_m: NPSH available in m
        density: Liquid density in kg/m³

    Returns:
        JSON string with specific speed, pump type, BEP windows, max NPSHr,
        estimated power and references
    """
    resolver = InputResolver("suggest_pump")

    try:
        flow_m3s = resolver.resolve_flow_rate(m3_h=design_flow_m3h, gpm=design_flow_gpm)
        head_m = resolver.resolve_length("Total head", m=total_head_m, ft=total_head_ft)

        logs = resolver.get_logs()
        if logs["errors"]:
            return json.dumps({"errors": logs["errors"], "log": logs["log"]})

        flow_m3h = convert_flow_rate(flow_m3s, "m3/s", "m3/h")
        suggestion = pump_suggestion(flow_m3h, head_m, speed_rpm, npsha_m=npsha_m, density=density)
        resolver.results_log.append(
            f"Specific speed {suggestion.specific_speed.ns:.1f} -> {suggestion.specific_speed.pump_type}"
        )

        output = suggestion.model_dump()
        output["estimated_power_hp"] = suggestion.estimated_power_kw / 0.7457
        output["total_head_ft"] = head_m / FT_to_M
        output = round_floats(output)
        output["log"] = resolver.results_log
        return safe_json_dumps(output)

    except HydraulicsError as e:
        logger.error(f"Error in suggest_pump: {e}", exc_info=True)
        return json.dumps({"error": str(e), "log": resolver.results_log})
    except Exception as e:
        logger.error(f"Error in suggest_pump: {e}", exc_info=True)
        return json.dumps({"error": f"Calculation error: {str(e)}", "log": resolver.results_log})
