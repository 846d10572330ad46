import json
import logging
from typing import Optional

from hydraulics.errors import HydraulicsError
from hydraulics.fittings import list_fittings as catalog_fittings
from hydraulics.pipe_data import list_materials as roughness_materials
from hydraulics.pipe_data import resolve_pipe_spec

logger = logging.getLogger("hydraulics-mcp.reference_data")


def list_fittings(method: Optional[str] = None) -> str:
    """List the fitting ids available for pressure-drop calculations.

    Args:
        method: Restrict to one K method: "crane_ld", "3k" or "fixed_k"

    Returns:
        JSON string with id, description, K method and source of every fitting.
        Any fitting can also take a "cv_override" to use a valve Cv instead.
    """
    try:
        fittings = catalog_fittings()
        if method is not None:
            fittings = [f for f in fittings if f["method"] == method]
        return json.dumps({"fittings": fittings, "count": len(fittings)}, ensure_ascii=False)
    except Exception as e:
        logger.error(f"Error in list_fittings: {e}", exc_info=True)
        return json.dumps({"error": str(e)})


def list_materials() -> str:
    """List pipe materials and their absolute roughness in mm.

    Returns:
        JSON string with id, name and roughness of every material
    """
    try:
        materials = [
            {"id": m.id, "name": m.name, "roughness_mm": m.roughness_mm, "source": m.reference.source}
            for m in roughness_materials()
        ]
        return json.dumps({"materials": materials, "count": len(materials)})
    except Exception as e:
        logger.error(f"Error in list_materials: {e}", exc_info=True)
        return json.dumps({"error": str(e)})


def get_pipe_dimensions(nominal_size: str, schedule: str = "40") -> str:
    """Standard pipe dimensions (ASME B36.10M/B36.19M) for a nominal size.

    Args:
        nominal_size: Nominal pipe size, e.g. "2", "1-1/2" or "3/4"
        schedule: Pipe schedule (default "40")

    Returns:
        JSON string with outer diameter, wall thickness and inner diameter in mm
    """
    try:
        pipe = resolve_pipe_spec(nominal_size, schedule)
        return json.dumps(pipe.model_dump())
    except HydraulicsError as e:
        logger.error(f"Error in get_pipe_dimensions: {e}", exc_info=True)
        return json.dumps({"error": str(e)})
