"""
Pipe dimension and material roughness lookup.

Pipe dimensions come from the ASME B36.10M/B36.19M schedule tables in
``fluids.piping``; roughness values from the bundled Crane table.
"""

import logging
from fractions import Fraction
from typing import List, Union

import fluids.piping

from .errors import InvalidInputError, MaterialNotFoundError, PipeSpecNotFoundError
from .models import PipeMaterial, PipeSpec
from .references import load_table, table_reference

logger = logging.getLogger("hydraulics-mcp.pipe_data")

# Metric designation for nominal pipe sizes
NPS_TO_DN = {
    "1/8": 6, "1/4": 8, "3/8": 10, "1/2": 15, "3/4": 20, "1": 25,
    "1-1/4": 32, "1-1/2": 40, "2": 50, "2-1/2": 65, "3": 80, "3-1/2": 90,
    "4": 100, "5": 125, "6": 150, "8": 200, "10": 250, "12": 300,
    "14": 350, "16": 400, "18": 450, "20": 500, "24": 600,
}


def parse_nps(nps: Union[str, float, int]) -> float:
    """
    Nominal pipe size as a number of inches.

    Accepts numbers and the usual designations: "2", "1/2", "1-1/2", "2.5".
    """
    if isinstance(nps, (int, float)):
        value = float(nps)
    else:
        text = nps.strip().replace('"', "")
        try:
            if "-" in text:
                whole, frac = text.split("-", 1)
                value = float(int(whole) + Fraction(frac))
            else:
                value = float(Fraction(text))
        except (ValueError, ZeroDivisionError):
            raise InvalidInputError(f"Cannot parse nominal pipe size: {nps!r}") from None
    if value <= 0:
        raise InvalidInputError(f"Nominal pipe size must be positive, got {nps!r}")
    return value


def format_nps(value: float) -> str:
    """Inverse of parse_nps for standard sizes: 1.5 -> "1-1/2"."""
    frac = Fraction(value).limit_denominator(8)
    whole = frac.numerator // frac.denominator
    rest = frac - whole
    if rest == 0:
        return str(whole)
    if whole == 0:
        return f"{rest.numerator}/{rest.denominator}"
    return f"{whole}-{rest.numerator}/{rest.denominator}"


def resolve_pipe_spec(nps: Union[str, float, int], schedule: str = "40") -> PipeSpec:
    """
    Standard pipe dimensions for a nominal size and schedule.

    Raises:
        PipeSpecNotFoundError: Unknown schedule, or the size is not a standard
            size of that schedule
    """
    requested = parse_nps(nps)
    try:
        NPS, Di, Do, t = fluids.piping.nearest_pipe(NPS=requested, schedule=schedule)
    except (ValueError, KeyError) as e:
        logger.warning(f"No pipe for NPS {nps} schedule {schedule}: {e}")
        raise PipeSpecNotFoundError(f"No pipe for NPS {nps} schedule {schedule}: {e}") from e

    if abs(NPS - requested) > 1e-9:
        logger.warning(f"NPS {nps} is not a standard size of schedule {schedule}")
        raise PipeSpecNotFoundError(
            f"NPS {nps} is not a standard size of schedule {schedule} (nearest larger: {NPS})"
        )

    label = format_nps(NPS)
    return PipeSpec(
        nps=label,
        dn=NPS_TO_DN.get(label),
        od_mm=Do * 1000.0,
        wall_mm=t * 1000.0,
        id_mm=Di * 1000.0,
        schedule=schedule,
    )


def _materials_table() -> dict:
    return load_table("surface_roughness.json")


def list_materials() -> List[PipeMaterial]:
    table = _materials_table()
    reference = table_reference(table)
    return [PipeMaterial(reference=reference, **m) for m in table["materials"]]


def resolve_material(material_id: str) -> PipeMaterial:
    """
    Roughness entry for a material id such as "carbon_steel_new".

    Raises:
        MaterialNotFoundError: Unknown material id
    """
    for material in list_materials():
        if material.id == material_id:
            return material
    logger.warning(f"Material not found: {material_id}")
    raise MaterialNotFoundError(f"Material not found: {material_id}")
