"""
Applicability warnings for a computed segment.

Warnings flag conditions where a correlation is near or outside its stated
range, or where the result deserves a second look. They never interrupt a
calculation and carry a message key plus parameters; presentation text is left
to the caller.
"""

from typing import List, Sequence

from .constants import DARBY_3K_D_MAX_IN, DARBY_3K_D_MIN_IN, INCH_to_M, MM_to_M
from .models import CalcWarning, FittingResult, FlowRegime

VERY_LOW_REYNOLDS = 100.0
HIGH_VELOCITY_M_S = 3.0
LOW_VELOCITY_M_S = 0.5
HIGH_RELATIVE_ROUGHNESS = 0.001
LARGE_ELEVATION_M = 30.0


def segment_warnings(
    reynolds: float,
    flow_regime: FlowRegime,
    velocity_m_s: float,
    roughness_mm: float,
    id_mm: float,
    fitting_details: Sequence[FittingResult],
    elevation_m: float,
    friction_factor: float,
    length_m: float,
) -> List[CalcWarning]:
    """Collect every warning that applies to one segment result, in check order."""
    warnings: List[CalcWarning] = []

    if 0 < reynolds < VERY_LOW_REYNOLDS:
        warnings.append(CalcWarning(
            severity="caution", category="friction",
            message_key="warn.very_low_reynolds",
            message_params={"re": round(reynolds)},
        ))

    if flow_regime == "transitional":
        warnings.append(CalcWarning(
            severity="warning", category="friction",
            message_key="warn.transitional_flow",
            message_params={"re": round(reynolds)},
        ))

    if velocity_m_s > HIGH_VELOCITY_M_S:
        warnings.append(CalcWarning(
            severity="warning", category="velocity",
            message_key="warn.high_velocity",
            message_params={"v": round(velocity_m_s, 2)},
        ))

    if 0 < velocity_m_s < LOW_VELOCITY_M_S:
        warnings.append(CalcWarning(
            severity="info", category="velocity",
            message_key="warn.low_velocity",
            message_params={"v": round(velocity_m_s, 3)},
        ))

    relative_roughness = roughness_mm / id_mm
    if relative_roughness > HIGH_RELATIVE_ROUGHNESS:
        warnings.append(CalcWarning(
            severity="info", category="friction",
            message_key="warn.high_relative_roughness",
            message_params={
                "eps_d": round(relative_roughness, 5),
                "roughness": roughness_mm,
                "id": round(id_mm, 1),
            },
        ))

    # Darby 3-K constants were fitted for 1/2" to 24" pipe
    id_inch = id_mm * MM_to_M / INCH_to_M
    has_3k = any(f.method == "3k" for f in fitting_details)
    if has_3k and (id_inch < DARBY_3K_D_MIN_IN or id_inch > DARBY_3K_D_MAX_IN):
        warnings.append(CalcWarning(
            severity="warning", category="fittings",
            message_key="warn.3k_diameter_range",
            message_params={"d_inch": round(id_inch, 2)},
        ))

    if length_m > 0 and fitting_details:
        sum_k = sum(f.k_value * f.quantity for f in fitting_details)
        f_ld = friction_factor * length_m / (id_mm * MM_to_M)
        if f_ld > 0 and sum_k > f_ld:
            warnings.append(CalcWarning(
                severity="info", category="fittings",
                message_key="warn.fittings_dominant",
                message_params={"sum_k": round(sum_k, 1), "f_ld": round(f_ld, 1)},
            ))

    if abs(elevation_m) > LARGE_ELEVATION_M:
        warnings.append(CalcWarning(
            severity="info", category="elevation",
            message_key="warn.large_elevation",
            message_params={"dz": round(elevation_m, 1)},
        ))

    return warnings
