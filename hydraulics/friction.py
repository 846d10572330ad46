"""
Darcy friction factor.

- Laminar (Re < 2100): f = 64/Re, exact.
- Churchill (1977): single explicit formula covering laminar, transitional and
  turbulent flow; the default for everything above the laminar threshold.
- Swamee-Jain (1976): explicit turbulent-only approximation, kept for comparison.
- von Kármán: Reynolds-independent fully turbulent f_T used by the Crane L/D
  fitting method.

Correlations are evaluated with the ``fluids`` library.
"""

import logging
from typing import Literal

import fluids.friction

from .constants import LAMINAR_REYNOLDS, TURBULENT_REYNOLDS
from .errors import InvalidInputError, InvalidReynoldsNumber, InvalidRoughness
from .models import FlowRegime, FrozenModel, Reference

logger = logging.getLogger("hydraulics-mcp.friction")

FrictionMethod = Literal["churchill", "swamee-jain"]

LAMINAR_REF = Reference(
    source="Hagen-Poiseuille",
    equation="f = 64/Re",
)

CHURCHILL_REF = Reference(
    source="Churchill, S.W., 1977",
    equation="f = 8×[(8/Re)¹² + (A+B)^(-3/2)]^(1/12)",
)

SWAMEE_JAIN_REF = Reference(
    source="Swamee & Jain, 1976",
    equation="f = 0.25/[log₁₀(ε/(3.7D) + 5.74/Re⁰·⁹)]²",
)

VON_KARMAN_REF = Reference(
    source="Crane TP-410, Von Kármán equation",
    equation="f_T = 1/[2×log₁₀(3.71D/ε)]²",
)


class FrictionFactorResult(FrozenModel):
    f: float
    method: str
    regime: FlowRegime
    reference: Reference


def classify_flow(reynolds: float) -> FlowRegime:
    """Laminar below 2100, transitional below 4000, turbulent otherwise."""
    if reynolds < LAMINAR_REYNOLDS:
        return "laminar"
    if reynolds < TURBULENT_REYNOLDS:
        return "transitional"
    return "turbulent"


def _check_reynolds(reynolds: float) -> None:
    if reynolds <= 0:
        raise InvalidReynoldsNumber(f"Reynolds number must be positive, got {reynolds}")


def _relative_roughness(roughness_mm: float, id_mm: float) -> float:
    if id_mm <= 0:
        raise InvalidInputError(f"Internal diameter must be positive, got {id_mm} mm")
    if roughness_mm < 0:
        raise InvalidRoughness(f"Roughness cannot be negative, got {roughness_mm} mm")
    return roughness_mm / id_mm


def churchill_friction_factor(reynolds: float, roughness_mm: float, id_mm: float) -> FrictionFactorResult:
    """
    Churchill (1977) Darcy friction factor, valid over the whole Reynolds range.

        f = 8 × [(8/Re)¹² + (A + B)^(-3/2)]^(1/12)
        A = [2.457 × ln(1/((7/Re)^0.9 + 0.27 ε/D))]¹⁶
        B = (37530/Re)¹⁶

    Args:
        reynolds: Reynolds number (> 0)
        roughness_mm: Absolute roughness ε in mm
        id_mm: Internal diameter D in mm
    """
    _check_reynolds(reynolds)
    eD = _relative_roughness(roughness_mm, id_mm)
    f = fluids.friction.Churchill_1977(Re=reynolds, eD=eD)
    return FrictionFactorResult(f=f, method="churchill", regime=classify_flow(reynolds), reference=CHURCHILL_REF)


def swamee_jain_friction_factor(reynolds: float, roughness_mm: float, id_mm: float) -> FrictionFactorResult:
    """
    Swamee-Jain (1976) explicit approximation, turbulent flow only.

    Stated validity: 5000 ≤ Re ≤ 1e8 and 1e-6 ≤ ε/D ≤ 1e-2. Outside that domain the
    value is still returned; callers wanting all-regime behavior use Churchill.
    """
    _check_reynolds(reynolds)
    eD = _relative_roughness(roughness_mm, id_mm)
    f = fluids.friction.Swamee_Jain_1976(Re=reynolds, eD=eD)
    return FrictionFactorResult(f=f, method="swamee-jain", regime=classify_flow(reynolds), reference=SWAMEE_JAIN_REF)


def laminar_friction_factor(reynolds: float) -> FrictionFactorResult:
    _check_reynolds(reynolds)
    return FrictionFactorResult(f=64.0 / reynolds, method="laminar", regime="laminar", reference=LAMINAR_REF)


_TURBULENT_METHODS = {
    "churchill": churchill_friction_factor,
    "swamee-jain": swamee_jain_friction_factor,
}


def friction_factor(
    reynolds: float,
    roughness_mm: float,
    id_mm: float,
    method: FrictionMethod = "churchill",
) -> FrictionFactorResult:
    """Resolve the Darcy friction factor for a pipe flow.

    Laminar flow uses the exact 64/Re; above the laminar threshold the selected
    correlation is used (Churchill by default).

    Raises:
        InvalidReynoldsNumber: reynolds <= 0
        InvalidRoughness: negative roughness
        ValueError: unknown method
    """
    _check_reynolds(reynolds)
    if reynolds < LAMINAR_REYNOLDS:
        return laminar_friction_factor(reynolds)
    try:
        correlation = _TURBULENT_METHODS[method]
    except KeyError:
        raise ValueError(
            f"Unknown friction factor method: {method}. Valid methods: {', '.join(_TURBULENT_METHODS)}"
        ) from None
    result = correlation(reynolds, roughness_mm, id_mm)
    logger.debug("Friction factor Re=%.1f eps=%.4g mm D=%.2f mm -> f=%.6f (%s)",
                 reynolds, roughness_mm, id_mm, result.f, result.method)
    return result


def fully_turbulent_friction_factor(roughness_mm: float, id_mm: float) -> FrictionFactorResult:
    """
    Fully turbulent friction factor f_T from the von Kármán rough-pipe limit.

        f_T = 1 / [2 × log₁₀(3.71 D/ε)]²

    Independent of Reynolds number; Churchill converges to it as Re → ∞.

    Raises:
        InvalidRoughness: roughness_mm <= 0 (the rough-pipe limit is undefined)
        InvalidInputError: id_mm <= 0
    """
    if roughness_mm <= 0:
        raise InvalidRoughness(f"Roughness must be positive for the fully turbulent limit, got {roughness_mm} mm")
    if id_mm <= 0:
        raise InvalidInputError(f"Internal diameter must be positive, got {id_mm} mm")
    f = fluids.friction.von_Karman(eD=roughness_mm / id_mm)
    return FrictionFactorResult(f=f, method="von-karman", regime="turbulent", reference=VON_KARMAN_REF)
