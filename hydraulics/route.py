"""
Pipe route geometry: straight runs and elbows from a 3-D polyline of nodes.

A route is an ordered list of node positions in meters with z as elevation.
Consecutive nodes bound one straight run. At every interior node the change of
direction is measured and rounded to the nearest standard elbow angle
(0, 45, 90 or 180°); a 0° node is a straight-through joint and adds no fitting.

route_to_segments turns a route into the series segments consumed by
calculate_system_pressure_drop:

    segment i = run i
              + fittings listed on node i
              + the elbow detected at node i + 1
              + (last segment only) fittings listed on the last node
"""

import logging
from typing import Dict, List, Literal, Optional, Sequence, Tuple

import numpy as np
from pydantic import Field

from .errors import InvalidInputError
from .models import (
    CalcWarning, FittingInput, FluidProperties, FrozenModel, PipeMaterial, PipeSpec, SegmentInput,
)

logger = logging.getLogger("hydraulics-mcp.route")

ElbowConnection = Literal["welded", "threaded"]

STANDARD_ANGLES = (0, 45, 90, 180)
DEFAULT_ANGLE_TOLERANCE_DEG = 5.0

Point = Tuple[float, float, float]


class RouteNode(FrozenModel):
    id: str = ""
    position: Point = Field(..., description="x, y, z in m; z is elevation")
    fittings: Tuple[FittingInput, ...] = Field((), description="Fittings at this node other than the elbow")


class StraightRun(FrozenModel):
    from_node: int
    to_node: int
    length_m: float
    elevation_m: float
    direction: Point


class DetectedElbow(FrozenModel):
    node_index: int
    angle_deg: float
    standard_angle: int
    fitting_id: str
    warning: Optional[CalcWarning] = None


class RouteAnalysis(FrozenModel):
    straight_runs: Tuple[StraightRun, ...] = ()
    elbows: Tuple[DetectedElbow, ...] = ()
    total_length_m: float = 0.0
    total_elevation_m: float = 0.0
    elbow_count_90: int = 0
    elbow_count_45: int = 0
    elbow_count_180: int = 0
    warnings: Tuple[CalcWarning, ...] = ()


def _run_vectors(points: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Lengths and unit directions of the runs between consecutive points."""
    deltas = np.diff(points, axis=0)
    lengths = np.linalg.norm(deltas, axis=1)
    coincident = np.flatnonzero(lengths == 0)
    if coincident.size:
        i = int(coincident[0])
        raise InvalidInputError(f"Route nodes {i} and {i + 1} are at the same position")
    return lengths, deltas / lengths[:, np.newaxis]


def _positions(nodes: Sequence[RouteNode]) -> np.ndarray:
    return np.array([node.position for node in nodes], dtype=float)


def straight_runs(nodes: Sequence[RouteNode]) -> List[StraightRun]:
    """
    One straight run per pair of consecutive nodes.

    Raises:
        InvalidInputError: fewer than two nodes, or two consecutive nodes coincide
    """
    if len(nodes) < 2:
        raise InvalidInputError(f"A route needs at least 2 nodes, got {len(nodes)}")
    points = _positions(nodes)
    lengths, directions = _run_vectors(points)
    rises = np.diff(points[:, 2])
    return [
        StraightRun(
            from_node=i,
            to_node=i + 1,
            length_m=float(lengths[i]),
            elevation_m=float(rises[i]),
            direction=tuple(float(c) for c in directions[i]),
        )
        for i in range(len(lengths))
    ]


def bend_angle(a: Point, b: Point, c: Point) -> float:
    """Angle in degrees between directions a→b and b→c; 0 is straight, 180 a U-turn."""
    _, directions = _run_vectors(np.array([a, b, c], dtype=float))
    cos_angle = np.clip(np.dot(directions[0], directions[1]), -1.0, 1.0)
    return float(np.degrees(np.arccos(cos_angle)))


def classify_angle(
    angle_deg: float,
    tolerance_deg: float = DEFAULT_ANGLE_TOLERANCE_DEG,
) -> Tuple[int, Optional[CalcWarning]]:
    """
    Nearest standard elbow angle, with a warning when the bend is off by more
    than the tolerance. Ties go to the smaller angle. Bends that round to 0° are
    straight joints and never warn.
    """
    deviations = np.abs(angle_deg - np.array(STANDARD_ANGLES, dtype=float))
    best = int(np.argmin(deviations))
    standard = STANDARD_ANGLES[best]
    deviation = float(deviations[best])
    if standard == 0 or deviation <= tolerance_deg:
        return standard, None
    return standard, CalcWarning(
        severity="caution", category="route",
        message_key="warn.bend_angle_deviation",
        message_params={"angle": round(angle_deg, 1), "standard": standard, "deviation": round(deviation, 1)},
    )


def elbow_fitting_id(standard_angle: int, connection: ElbowConnection = "welded", long_radius: bool = True) -> str:
    """Catalog id of the elbow for a standard angle; empty for a straight joint."""
    if standard_angle == 0:
        return ""
    if standard_angle == 180:
        return f"return_bend_180_{connection}"
    if standard_angle == 90:
        if connection == "threaded":
            return "elbow_90_std_threaded"
        return "elbow_90_lr_welded" if long_radius else "elbow_90_std_welded"
    if standard_angle == 45:
        return "elbow_45_std"
    raise InvalidInputError(f"Not a standard elbow angle: {standard_angle}")


def detect_elbows(
    nodes: Sequence[RouteNode],
    connection: ElbowConnection = "welded",
    long_radius: bool = True,
    tolerance_deg: float = DEFAULT_ANGLE_TOLERANCE_DEG,
) -> List[DetectedElbow]:
    """Elbows at the interior nodes of a route, skipping straight joints."""
    elbows = []
    for i in range(1, len(nodes) - 1):
        angle = bend_angle(nodes[i - 1].position, nodes[i].position, nodes[i + 1].position)
        standard, warning = classify_angle(angle, tolerance_deg)
        if standard == 0:
            continue
        elbows.append(DetectedElbow(
            node_index=i,
            angle_deg=angle,
            standard_angle=standard,
            fitting_id=elbow_fitting_id(standard, connection, long_radius),
            warning=warning,
        ))
    return elbows


def analyze_route(
    nodes: Sequence[RouteNode],
    connection: ElbowConnection = "welded",
    long_radius: bool = True,
) -> RouteAnalysis:
    """Runs, elbows and totals of a route; an empty analysis below two nodes."""
    if len(nodes) < 2:
        return RouteAnalysis()

    runs = straight_runs(nodes)
    elbows = detect_elbows(nodes, connection, long_radius)
    counts = {angle: sum(1 for e in elbows if e.standard_angle == angle) for angle in (45, 90, 180)}

    return RouteAnalysis(
        straight_runs=tuple(runs),
        elbows=tuple(elbows),
        total_length_m=float(sum(run.length_m for run in runs)),
        total_elevation_m=float(sum(run.elevation_m for run in runs)),
        elbow_count_90=counts[90],
        elbow_count_45=counts[45],
        elbow_count_180=counts[180],
        warnings=tuple(e.warning for e in elbows if e.warning is not None),
    )


def route_to_segments(
    nodes: Sequence[RouteNode],
    pipe: PipeSpec,
    material: PipeMaterial,
    fluid: FluidProperties,
    flow_rate_m3s: float,
    connection: ElbowConnection = "welded",
    long_radius: bool = True,
) -> List[SegmentInput]:
    """
    Series segments for a route, all sharing one pipe, material, fluid and flow.

    Args:
        nodes: Route nodes in flow order
        pipe, material, fluid: Applied to every segment
        flow_rate_m3s: Volumetric flow rate in m³/s
        connection: Elbow end connection used to pick catalog ids
        long_radius: Use long radius 90° elbows for welded connections

    Raises:
        InvalidInputError: fewer than two nodes, or two consecutive nodes coincide
    """
    runs = straight_runs(nodes)
    elbows: Dict[int, DetectedElbow] = {e.node_index: e for e in detect_elbows(nodes, connection, long_radius)}

    segments = []
    for i, run in enumerate(runs):
        fittings = list(nodes[i].fittings)
        elbow = elbows.get(i + 1)
        if elbow is not None:
            fittings.append(FittingInput(fitting_id=elbow.fitting_id))
        if i == len(runs) - 1:
            fittings.extend(nodes[-1].fittings)
        segments.append(SegmentInput(
            pipe=pipe,
            material=material,
            fluid=fluid,
            flow_rate_m3s=flow_rate_m3s,
            length_m=run.length_m,
            elevation_m=run.elevation_m,
            fittings=tuple(fittings),
        ))

    logger.debug(f"Route of {len(nodes)} nodes -> {len(segments)} segments, {len(elbows)} elbows")
    return segments
