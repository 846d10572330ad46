import json
import logging
from typing import Any, Dict, List, Optional, Union

from hydraulics.errors import HydraulicsError
from hydraulics.input_resolver import InputResolver
from hydraulics.json_helpers import round_floats, safe_json_dumps
from hydraulics.models import SystemInput
from hydraulics.route import RouteAnalysis, RouteNode, analyze_route, route_to_segments
from hydraulics.system import calculate_system_pressure_drop as system_pressure_drop
from tools.segment_inputs import build_fittings, build_fluid, build_material, build_pipe
from tools.system_pressure_drop import system_result_summary

logger = logging.getLogger("hydraulics-mcp.calculate_route_pressure_drop")

ELBOW_CONNECTIONS = ("welded", "threaded")


def build_route_nodes(nodes: Optional[List[Dict[str, Any]]]) -> List[RouteNode]:
    """Route nodes from dicts such as {"x": 0, "y": 5, "z": 2, "fittings": [...]}; missing coordinates are 0."""
    result = []
    for i, node in enumerate(nodes or []):
        result.append(RouteNode(
            id=str(node.get("id", i)),
            position=(float(node.get("x", 0.0)), float(node.get("y", 0.0)), float(node.get("z", 0.0))),
            fittings=tuple(build_fittings(node.get("fittings"))),
        ))
    return result


def route_analysis_summary(analysis: RouteAnalysis) -> Dict[str, Any]:
    summary = {
        "total_length_m": analysis.total_length_m,
        "total_elevation_m": analysis.total_elevation_m,
        "elbow_count_90": analysis.elbow_count_90,
        "elbow_count_45": analysis.elbow_count_45,
        "elbow_count_180": analysis.elbow_count_180,
        "straight_runs": [
            {"from_node": r.from_node, "to_node": r.to_node, "length_m": r.length_m, "elevation_m": r.elevation_m}
            for r in analysis.straight_runs
        ],
        "elbows": [
            {
                "node_index": e.node_index,
                "angle_deg": e.angle_deg,
                "standard_angle": e.standard_angle,
                "fitting_id": e.fitting_id,
            }
            for e in analysis.elbows
        ],
        "warnings": [w.model_dump() for w in analysis.warnings],
    }
    return round_floats(summary)


def calculate_route_pressure_drop(
    nodes: List[Dict[str, Any]],
    # --- Pipe ---
    nominal_size: Optional[Union[str, float]] = None,
    schedule: str = "40",
    inner_diameter_mm: Optional[float] = None,
    inner_diameter_in: Optional[float] = None,
    material: Optional[str] = None,
    roughness_mm: Optional[float] = None,

    # --- Fluid (water at 20 °C when omitted) ---
    density: Optional[float] = None,
    viscosity: Optional[float] = None,
    viscosity_cp: Optional[float] = None,
    temperature_c: float = 20.0,

    # --- Flow (any one) ---
    flow_rate_m3_h: Optional[float] = None,
    flow_rate_m3_s: Optional[float] = None,
    flow_rate_l_min: Optional[float] = None,
    flow_rate_gpm: Optional[float] = None,

    # --- Elbows placed at direction changes ---
    elbow_connection: str = "welded",
    long_radius_elbows: bool = True,
) -> str:
    """Calculate the pressure drop along a 3-D pipe route.

    The route is a polyline of nodes in meters (z is elevation). Each pair of
    consecutive nodes becomes a straight segment; every change of direction
    adds an elbow rounded to 45°, 90° or 180°. Bends more than 5° away from a
    standard angle are reported as warnings. Extra fittings (valves, entrance,
    exit) are listed on the node where they sit and are charged to the segment
    leaving that node; fittings on the last node go to the last segment.

    Args:
        nodes: List of {"x": ..., "y": ..., "z": ..., "fittings": [...]} in flow order
        nominal_size: Nominal pipe size, or inner_diameter_mm for a custom bore
        material: Material id from list_materials, or roughness_mm
        flow_rate_m3_h: Volumetric flow (also m3_s, l_min or gpm)
        elbow_connection: "welded" or "threaded"
        long_radius_elbows: Long radius 90° elbows for welded connections

    Returns:
        JSON string with the route geometry (runs, elbows, totals), the system
        pressure drop and per-segment results
    """
    resolver = InputResolver("calculate_route_pressure_drop")

    try:
        if elbow_connection not in ELBOW_CONNECTIONS:
            return json.dumps({
                "error": f"Unknown elbow connection: {elbow_connection}",
                "valid_connections": list(ELBOW_CONNECTIONS),
            })

        pipe = build_pipe(resolver, nominal_size, schedule, inner_diameter_mm, inner_diameter_in)
        pipe_material = build_material(resolver, material, roughness_mm)
        fluid = build_fluid(resolver, density, viscosity, viscosity_cp, temperature_c)
        flow = resolver.resolve_flow_rate(
            m3_s=flow_rate_m3_s, m3_h=flow_rate_m3_h, l_min=flow_rate_l_min, gpm=flow_rate_gpm,
        )

        logs = resolver.get_logs()
        if logs["errors"]:
            return json.dumps({"errors": logs["errors"], "log": logs["log"]})

        route = build_route_nodes(nodes)
        segments = route_to_segments(
            route, pipe, pipe_material, fluid, flow,
            connection=elbow_connection, long_radius=long_radius_elbows,
        )
        analysis = analyze_route(route, elbow_connection, long_radius_elbows)
        resolver.results_log.append(
            f"Route: {len(route)} nodes, {analysis.total_length_m:.2f} m, "
            f"{len(analysis.elbows)} elbows ({elbow_connection})"
        )
        for warning in analysis.warnings:
            logger.info(f"calculate_route_pressure_drop: node bend {warning.message_params}")

        result = system_pressure_drop(SystemInput(segments=tuple(segments)))
        resolver.results_log.append(
            f"System of {len(result.segment_results)} segments: dP total {result.dp_total:.1f} Pa"
        )

        output: Dict[str, Any] = {"route": route_analysis_summary(analysis)}
        output.update(system_result_summary(result))
        output["log"] = resolver.results_log
        return safe_json_dumps(output)

    except HydraulicsError as e:
        logger.error(f"Error in calculate_route_pressure_drop: {e}", exc_info=True)
        return json.dumps({"error": str(e), "log": resolver.results_log})
    except Exception as e:
        logger.error(f"Error in calculate_route_pressure_drop: {e}", exc_info=True)
        return json.dumps({"error": f"Calculation error: {str(e)}", "log": resolver.results_log})
