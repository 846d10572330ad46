"""
Pressure drop of a single pipe segment.

    area → velocity → Re → friction factor → straight loss
         → fitting losses → elevation ρgΔz → total → heads

Every pressure component is also reported as head with the segment density,
so head_total_m = dp_total / (ρg).
"""

import logging
from typing import Optional

from .calc_warnings import segment_warnings
from .constants import MM_to_M
from .fittings import FittingCatalog, PipeContext, load_default_catalog, resolve_fittings, total_fitting_loss
from .friction import classify_flow, friction_factor
from .models import SegmentInput, SegmentResult
from .references import dedupe_references
from .straight_pipe import (
    elevation_pressure, flow_area, pressure_to_head, reynolds_number,
    straight_pipe_loss, velocity,
)

logger = logging.getLogger("hydraulics-mcp.segment")


def calculate_segment_pressure_drop(segment: SegmentInput, catalog: Optional[FittingCatalog] = None) -> SegmentResult:
    """
    Itemized pressure drop for one segment.

    Args:
        segment: Pipe, material, fluid, flow, length, elevation and fittings
        catalog: Fitting coefficient catalog; the bundled tables when omitted

    Returns:
        SegmentResult with friction, fittings and elevation components in Pa and m,
        their sum, the per-fitting breakdown, de-duplicated references and warnings

    Raises:
        FittingNotFoundError: A fitting id is not in the catalog
        InvalidInputError: Non-physical pipe or fluid values
    """
    if catalog is None:
        catalog = load_default_catalog()
    pipe, material, fluid = segment.pipe, segment.material, segment.fluid
    density = fluid.density

    area = flow_area(pipe.id_mm)
    v = velocity(segment.flow_rate_m3s, area)

    if v == 0:
        # No flow: only the static elevation term remains
        reynolds = 0.0
        regime = "laminar"
        f = 0.0
        f_method = "no-flow"
        friction_refs = []
    else:
        reynolds = reynolds_number(density, v, pipe.id_mm * MM_to_M, fluid.viscosity)
        regime = classify_flow(reynolds)
        friction = friction_factor(reynolds, material.roughness_mm, pipe.id_mm)
        f = friction.f
        f_method = friction.method
        friction_refs = [friction.reference]

    dp_friction = straight_pipe_loss(f, segment.length_m, pipe.id_mm, density, v)

    context = PipeContext(
        id_mm=pipe.id_mm,
        reynolds=reynolds,
        density=density,
        velocity=v,
        roughness_mm=material.roughness_mm,
        nps=pipe.nps,
    )
    fitting_details = resolve_fittings(segment.fittings, catalog, context)
    _, dp_fittings, _ = total_fitting_loss(
        ((fd.k_value, fd.quantity) for fd in fitting_details), density, v
    )

    dp_elevation = elevation_pressure(density, segment.elevation_m)

    dp_total = dp_friction + dp_fittings + dp_elevation

    references = dedupe_references(
        friction_refs
        + [fluid.reference, material.reference]
        + [fd.reference for fd in fitting_details]
    )

    warnings = segment_warnings(
        reynolds=reynolds,
        flow_regime=regime,
        velocity_m_s=v,
        roughness_mm=material.roughness_mm,
        id_mm=pipe.id_mm,
        fitting_details=fitting_details,
        elevation_m=segment.elevation_m,
        friction_factor=f,
        length_m=segment.length_m,
    )

    logger.debug(f"Segment NPS {pipe.nps}: V={v:.4f} m/s Re={reynolds:.0f} f={f:.5f} "
                 f"dP={dp_friction:.1f}+{dp_fittings:.1f}+{dp_elevation:.1f}={dp_total:.1f} Pa")

    return SegmentResult(
        velocity_m_s=v,
        reynolds=reynolds,
        flow_regime=regime,
        friction_factor=f,
        friction_factor_method=f_method,
        dp_friction=dp_friction,
        dp_fittings=dp_fittings,
        dp_elevation=dp_elevation,
        dp_total=dp_total,
        head_friction_m=pressure_to_head(dp_friction, density),
        head_fittings_m=pressure_to_head(dp_fittings, density),
        head_elevation_m=segment.elevation_m,
        head_total_m=pressure_to_head(dp_total, density),
        fitting_details=tuple(fitting_details),
        references=tuple(references),
        warnings=tuple(warnings),
    )
