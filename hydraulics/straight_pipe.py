"""
Straight-pipe loss (Darcy-Weisbach), pressure/head conversion and pipe geometry.

    ΔP  = f × (L/D) × (ρV²/2)   [Pa]
    h   = ΔP / (ρg)             [m]
"""

import math

import fluids.core

from .constants import G_GRAVITY, MM_to_M
from .errors import InvalidInputError


def flow_area(id_mm: float) -> float:
    """Flow cross-section A = π(D/2)² in m² for an internal diameter in mm."""
    id_m = id_mm * MM_to_M
    return math.pi * (id_m / 2.0) ** 2


def velocity(flow_rate_m3s: float, area_m2: float) -> float:
    """Mean velocity V = Q/A in m/s."""
    if area_m2 <= 0:
        raise InvalidInputError(f"Flow area must be positive, got {area_m2} m²")
    return flow_rate_m3s / area_m2


def reynolds_number(density: float, velocity_m_s: float, id_m: float, viscosity: float) -> float:
    """Re = ρVD/μ."""
    if viscosity <= 0:
        raise InvalidInputError(f"Viscosity must be positive, got {viscosity} Pa·s")
    return fluids.core.Reynolds(V=velocity_m_s, D=id_m, rho=density, mu=viscosity)


def straight_pipe_loss(f: float, length_m: float, id_mm: float, density: float, velocity_m_s: float) -> float:
    """
    Pressure loss of a straight pipe run.

    Args:
        f: Darcy friction factor
        length_m: Pipe length in m
        id_mm: Internal diameter in mm
        density: Fluid density in kg/m³
        velocity_m_s: Mean velocity in m/s

    Returns:
        Pressure loss in Pa; exactly 0.0 for zero length or zero velocity
    """
    if length_m == 0 or velocity_m_s == 0:
        return 0.0
    K = fluids.core.K_from_f(fd=f, L=length_m, D=id_mm * MM_to_M)
    return fluids.core.dP_from_K(K=K, rho=density, V=velocity_m_s)


def pressure_to_head(dp_pa: float, density: float) -> float:
    """h = ΔP/(ρg)"""
    return fluids.core.head_from_P(P=dp_pa, rho=density, g=G_GRAVITY)


def head_to_pressure(head_m: float, density: float) -> float:
    """ΔP = ρgh"""
    return fluids.core.P_from_head(head=head_m, rho=density, g=G_GRAVITY)


def elevation_pressure(density: float, dz_m: float) -> float:
    """Pressure change ρgΔz for a signed elevation change; positive is uphill."""
    return density * G_GRAVITY * dz_m
