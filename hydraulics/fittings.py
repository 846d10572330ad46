"""
Fitting loss coefficients and velocity-head loss aggregation.

Every catalog entry is resolved to a dimensionless K by one of the methods below,
selected by the entry's ``method`` tag:

- fixed_k:  tabulated K (entrances and exits, Crane TP-410 A-29)
- 3k:       Darby 3-K, K = K₁/Re + K_i×(1 + K_d/D^0.3), D in inches
- crane_ld: Crane equivalent length, K = f_T × (L/D)
- cv:       per-instance valve Cv override, K = 894 × d⁴ / Cv², d in inches

The loss of every fitting in a segment is K × ρV²/2 at the single segment velocity.
"""

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Tuple

import fluids.fittings

from .constants import G_GRAVITY, INCH_to_M, MM_to_M
from .errors import FittingNotFoundError, InvalidInputError
from .friction import fully_turbulent_friction_factor
from .models import FittingInput, FittingResult, FrozenModel, KValueMethod, Reference
from .references import load_table, table_reference

logger = logging.getLogger("hydraulics-mcp.fittings")

CV_REF = Reference(source="Crane TP-410", equation="K = 894 × d⁴ / Cv²")


class CatalogEntry(FrozenModel):
    """One fitting type. Only the coefficients of its own method are set."""

    id: str
    description: str
    method: KValueMethod
    reference: Reference
    k: Optional[float] = None
    ld_ratio: Optional[float] = None
    k1: Optional[float] = None
    ki: Optional[float] = None
    kd: Optional[float] = None


@dataclass(frozen=True)
class PipeContext:
    """Conditions of the segment a fitting is installed in."""

    id_mm: float
    reynolds: float
    density: float
    velocity: float
    roughness_mm: float
    nps: Optional[str] = None


# ---------------------------------------------------------------------------
# K value calculations
# ---------------------------------------------------------------------------

def k_crane(ld_ratio: float, ft: float) -> float:
    """K = f_T × (L/D)"""
    return ft * ld_ratio


def k_3k(reynolds: float, id_mm: float, k1: float, ki: float, kd: float) -> float:
    """
    Darby 3-K coefficient.

    Args:
        reynolds: Reynolds number; zero flow drops the K₁/Re term
        id_mm: Internal diameter in mm (converted to inches for the correlation)
        k1, ki, kd: Darby constants for the fitting type
    """
    id_inch = id_mm * MM_to_M / INCH_to_M
    re = reynolds if reynolds > 0 else float("inf")
    return fluids.fittings.Darby3K(NPS=id_inch, Re=re, K1=k1, Ki=ki, Kd=kd)


def k_from_cv(cv: float, id_mm: float) -> float:
    """Convert a valve flow coefficient Cv (US gpm at 1 psi) to K."""
    if cv <= 0:
        raise InvalidInputError(f"Cv must be positive, got {cv}")
    id_inch = id_mm * MM_to_M / INCH_to_M
    return 894.0 * id_inch ** 4 / (cv * cv)


def fitting_loss(k: float, density: float, velocity: float) -> Tuple[float, float]:
    """
    Loss of a coefficient K at the given velocity.

    Returns:
        (dp_pa, head_m) with ΔP = K × ρV²/2 and h = K × V²/(2g)
    """
    dp_pa = k * density * velocity * velocity / 2.0
    head_m = k * velocity * velocity / (2.0 * G_GRAVITY)
    return dp_pa, head_m


def total_fitting_loss(items: Iterable[Tuple[float, int]], density: float, velocity: float) -> Tuple[float, float, float]:
    """
    Aggregate loss of (K, quantity) pairs sharing one velocity.

    Returns:
        (total_k, dp_pa, head_m) with total_k = Σ K_i × q_i
    """
    total_k = sum(k * quantity for k, quantity in items)
    dp_pa, head_m = fitting_loss(total_k, density, velocity)
    return total_k, dp_pa, head_m


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

def _resolve_fixed_k(entry: CatalogEntry, context: PipeContext, catalog: "FittingCatalog") -> float:
    return entry.k


def _resolve_3k(entry: CatalogEntry, context: PipeContext, catalog: "FittingCatalog") -> float:
    return k_3k(context.reynolds, context.id_mm, entry.k1, entry.ki, entry.kd)


def _resolve_crane_ld(entry: CatalogEntry, context: PipeContext, catalog: "FittingCatalog") -> float:
    return k_crane(entry.ld_ratio, catalog.ft_for(context))


_K_RESOLVERS: Dict[str, Callable[[CatalogEntry, PipeContext, "FittingCatalog"], float]] = {
    "fixed_k": _resolve_fixed_k,
    "3k": _resolve_3k,
    "crane_ld": _resolve_crane_ld,
}


class FittingCatalog:
    """Read-only map from fitting id to catalog entry, plus the Crane f_T table."""

    def __init__(self, entries: Iterable[CatalogEntry], ft_values: Optional[Mapping[str, float]] = None):
        self._entries: Dict[str, CatalogEntry] = {}
        for entry in entries:
            if entry.method not in _K_RESOLVERS:
                raise InvalidInputError(f"Catalog entry {entry.id} has unsupported method {entry.method}")
            self._entries[entry.id] = entry
        self._ft_values = dict(ft_values or {})

    def __contains__(self, fitting_id: str) -> bool:
        return fitting_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> List[CatalogEntry]:
        return list(self._entries.values())

    def resolve(self, fitting_id: str) -> CatalogEntry:
        """Look up a fitting type; unknown ids are an error, never defaulted."""
        try:
            return self._entries[fitting_id]
        except KeyError:
            logger.warning(f"Fitting not found in catalog: {fitting_id}")
            raise FittingNotFoundError(fitting_id) from None

    def ft_for(self, context: PipeContext) -> float:
        """Crane f_T for the pipe: tabulated by NPS, else the von Kármán limit."""
        if context.nps is not None and context.nps in self._ft_values:
            return self._ft_values[context.nps]
        logger.debug(f"No tabulated f_T for NPS {context.nps}; using von Kármán")
        return fully_turbulent_friction_factor(context.roughness_mm, context.id_mm).f

    def k_value(self, entry: CatalogEntry, context: PipeContext) -> float:
        return _K_RESOLVERS[entry.method](entry, context, self)


@lru_cache(maxsize=None)
def load_default_catalog() -> FittingCatalog:
    """Load the bundled coefficient tables once per process."""
    entries: List[CatalogEntry] = []

    crane = load_table("crane_tp410.json")
    crane_ref = table_reference(crane)
    for item in crane["fittings"]:
        entries.append(CatalogEntry(
            id=item["id"], description=item["description"], method="crane_ld",
            ld_ratio=item["ldRatio"], reference=crane_ref,
        ))

    darby = load_table("darby_3k.json")
    darby_ref = table_reference(darby)
    for item in darby["fittings"]:
        entries.append(CatalogEntry(
            id=item["id"], description=item["description"], method="3k",
            k1=item["k1"], ki=item["ki"], kd=item["kd"], reference=darby_ref,
        ))

    fixed = load_table("entrance_exit.json")
    fixed_ref = table_reference(fixed)
    for item in fixed["entrances"] + fixed["exits"]:
        entries.append(CatalogEntry(
            id=item["id"], description=item["description"], method="fixed_k",
            k=item["k"], reference=fixed_ref,
        ))

    ft_values = load_table("ft_values.json")["values"]
    catalog = FittingCatalog(entries, ft_values)
    logger.info(f"Loaded fitting catalog with {len(catalog)} entries")
    return catalog


# ---------------------------------------------------------------------------
# Resolution of fitting instances
# ---------------------------------------------------------------------------

def resolve_fitting(fitting: FittingInput, catalog: FittingCatalog, context: PipeContext) -> FittingResult:
    """Resolve one fitting instance to its K, loss and reference."""
    if fitting.cv_override is not None:
        k = k_from_cv(fitting.cv_override, context.id_mm)
        description = f"Cv={fitting.cv_override} (user input)"
        method = "cv"
        reference = CV_REF
    else:
        entry = catalog.resolve(fitting.fitting_id)
        k = catalog.k_value(entry, context)
        description = entry.description
        method = entry.method
        reference = entry.reference

    dp_pa, head_m = fitting_loss(k, context.density, context.velocity)
    return FittingResult(
        id=fitting.fitting_id,
        description=description,
        quantity=fitting.quantity,
        k_value=k,
        method=method,
        dp_pa=dp_pa * fitting.quantity,
        head_loss_m=head_m * fitting.quantity,
        reference=reference,
    )


def resolve_fittings(
    fittings: Iterable[FittingInput],
    catalog: FittingCatalog,
    context: PipeContext,
) -> List[FittingResult]:
    """One breakdown entry per fitting instance, in input order."""
    return [resolve_fitting(fitting, catalog, context) for fitting in fittings]


def list_fittings(catalog: Optional[FittingCatalog] = None) -> List[dict]:
    """Summaries of every catalog entry, grouped by method then id."""
    if catalog is None:
        catalog = load_default_catalog()
    order = {method: i for i, method in enumerate(_K_RESOLVERS)}
    rows = sorted(catalog.entries, key=lambda e: (order[e.method], e.id))
    return [
        {"id": e.id, "description": e.description, "method": e.method, "source": e.reference.source}
        for e in rows
    ]
