"""
Tools package for the Hydraulics MCP server.

Each tool takes plain keyword inputs (SI or alternative units), calls the
hydraulics engine and returns a JSON string.
"""

from .segment_pressure_drop import calculate_segment_pressure_drop
from .system_pressure_drop import calculate_system_pressure_drop
from .route_pressure_drop import calculate_route_pressure_drop
from .pump_selection import select_pump_operating_point
from .pump_suggestion import suggest_pump
from .unit_conversion import convert_units
from .reference_data import list_fittings, list_materials, get_pipe_dimensions

__all__ = [
    'calculate_segment_pressure_drop',
    'calculate_system_pressure_drop',
    'calculate_route_pressure_drop',
    'select_pump_operating_point',
    'suggest_pump',
    'convert_units',
    'list_fittings',
    'list_materials',
    'get_pipe_dimensions',
]
