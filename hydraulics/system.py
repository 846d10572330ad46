"""
Series pipe system: segment aggregation and common flow solve.

Segments in series carry the same flow and fluid; that is the caller's
responsibility and is not re-derived here.
"""

import logging
from typing import Optional

from scipy.optimize import brentq

from .constants import SOLVER_FLOW_MAX, SOLVER_FLOW_MIN
from .errors import SolverError
from .fittings import FittingCatalog, load_default_catalog
from .models import SystemInput, SystemResult
from .references import dedupe_references
from .segment import calculate_segment_pressure_drop
from .straight_pipe import pressure_to_head

logger = logging.getLogger("hydraulics-mcp.system")


def calculate_system_pressure_drop(system: SystemInput, catalog: Optional[FittingCatalog] = None) -> SystemResult:
    """
    Total pressure drop of segments connected in series.

    Component totals are plain sums over segments. The grand total head is
    converted from the grand total pressure with the first segment's density
    rather than summed from segment heads.

    An empty system is valid and yields an all-zero result.
    """
    if not system.segments:
        return SystemResult()
    if catalog is None:
        catalog = load_default_catalog()

    segment_results = [calculate_segment_pressure_drop(seg, catalog) for seg in system.segments]

    dp_friction_total = sum(r.dp_friction for r in segment_results)
    dp_fittings_total = sum(r.dp_fittings for r in segment_results)
    dp_elevation_total = sum(r.dp_elevation for r in segment_results)
    dp_total = dp_friction_total + dp_fittings_total + dp_elevation_total

    density = system.segments[0].fluid.density
    references = dedupe_references(ref for r in segment_results for ref in r.references)

    logger.debug(f"System of {len(segment_results)} segments: dP total {dp_total:.1f} Pa, "
                 f"{len(references)} references")

    return SystemResult(
        segment_results=tuple(segment_results),
        dp_friction_total=dp_friction_total,
        dp_fittings_total=dp_fittings_total,
        dp_elevation_total=dp_elevation_total,
        dp_total=dp_total,
        head_friction_total_m=sum(r.head_friction_m for r in segment_results),
        head_fittings_total_m=sum(r.head_fittings_m for r in segment_results),
        head_elevation_total_m=sum(r.head_elevation_m for r in segment_results),
        head_total_m=pressure_to_head(dp_total, density),
        references=tuple(references),
    )


def with_flow_rate(system: SystemInput, flow_rate_m3s: float) -> SystemInput:
    """Copy of ``system`` with every segment carrying ``flow_rate_m3s``."""
    segments = tuple(seg.model_copy(update={"flow_rate_m3s": flow_rate_m3s}) for seg in system.segments)
    return SystemInput(segments=segments)


def solve_flow_rate(
    system: SystemInput,
    target_dp_pa: float,
    flow_min: float = SOLVER_FLOW_MIN,
    flow_max: float = SOLVER_FLOW_MAX,
    catalog: Optional[FittingCatalog] = None,
) -> float:
    """
    Find the common flow rate at which the system pressure drop equals a target.

    Args:
        system: Segments in series; their own flow rates are ignored
        target_dp_pa: Required total pressure drop in Pa
        flow_min: Lower bound of the search in m³/s
        flow_max: Upper bound of the search in m³/s
        catalog: Fitting coefficient catalog

    Returns:
        Flow rate in m³/s

    Raises:
        SolverError: The system is empty or the target is not bracketed by the bounds
    """
    if not system.segments:
        raise SolverError("Cannot solve flow rate for an empty system")
    if catalog is None:
        catalog = load_default_catalog()

    def objective(q: float) -> float:
        result = calculate_system_pressure_drop(with_flow_rate(system, q), catalog)
        return result.dp_total - target_dp_pa

    f_low = objective(flow_min)
    f_high = objective(flow_max)
    if f_low * f_high > 0:
        raise SolverError(
            f"Target pressure drop {target_dp_pa:.1f} Pa is not reached between "
            f"{flow_min:g} and {flow_max:g} m³/s (dP range {f_low + target_dp_pa:.1f} "
            f"to {f_high + target_dp_pa:.1f} Pa)"
        )

    try:
        flow = brentq(objective, flow_min, flow_max, xtol=1e-12, rtol=1e-10, maxiter=200)
    except (ValueError, RuntimeError) as e:
        raise SolverError(f"Flow rate search did not converge: {e}") from e

    logger.info(f"Solved flow rate {flow:.6g} m³/s for target dP {target_dp_pa:.1f} Pa")
    return flow
