import json
import logging

from hydraulics.errors import UnknownUnitError
from hydraulics.units import convert, units_for

logger = logging.getLogger("hydraulics-mcp.convert_units")


def convert_units(value: float, from_unit: str, to_unit: str, quantity: str) -> str:
    """Convert a value between units of one quantity.

    Args:
        value: Value to convert
        from_unit: Unit of the value
        to_unit: Target unit
        quantity: "pressure" (Pa, kPa, MPa, bar, psi, kgf/cm2, mmH2O),
            "flow_rate" (m3/s, m3/h, L/min, L/s, USgpm), "length" (mm, m, in, ft)
            or "temperature" (C, K, F)

    Returns:
        JSON string with the converted value
    """
    try:
        result = convert(value, from_unit, to_unit, quantity)
        return json.dumps({
            "value": value,
            "from_unit": from_unit,
            "to_unit": to_unit,
            "quantity": quantity,
            "result": result,
        })
    except UnknownUnitError as e:
        logger.error(f"Error in convert_units: {e}", exc_info=True)
        payload = {"error": str(e)}
        try:
            payload["valid_units"] = list(units_for(quantity))
        except UnknownUnitError:
            payload["valid_quantities"] = ["pressure", "flow_rate", "length", "temperature"]
        return json.dumps(payload)
