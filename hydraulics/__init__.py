"""
Hydraulic calculation engine for hydraulics-mcp.

Pressure drop of liquid-filled pipe segments and series systems, and pump
operating point selection against the system resistance curve. Every computed
quantity carries the engineering reference it was derived from.
"""

from .errors import (
    HydraulicsError,
    InvalidInputError,
    InvalidReynoldsNumber,
    InvalidRoughness,
    LookupFailure,
    FittingNotFoundError,
    InterpolationRangeError,
    PipeSpecNotFoundError,
    MaterialNotFoundError,
    SolverError,
    UnknownUnitError,
)
from .models import (
    Reference,
    FluidProperties,
    PipeSpec,
    PipeMaterial,
    FittingInput,
    FittingResult,
    CalcWarning,
    SegmentInput,
    SegmentResult,
    SystemInput,
    SystemResult,
    PumpCurvePoint,
    ResistanceCurvePoint,
    OperatingPoint,
)
from .fittings import FittingCatalog, load_default_catalog
from .segment import calculate_segment_pressure_drop
from .system import calculate_system_pressure_drop, solve_flow_rate
from .route import RouteNode, analyze_route, route_to_segments
from .pump_selection import find_operating_point, npsh_available, resistance_curve
from .pump_requirements import pump_suggestion
from .units import convert

__all__ = [
    'HydraulicsError',
    'InvalidInputError',
    'InvalidReynoldsNumber',
    'InvalidRoughness',
    'LookupFailure',
    'FittingNotFoundError',
    'InterpolationRangeError',
    'PipeSpecNotFoundError',
    'MaterialNotFoundError',
    'SolverError',
    'UnknownUnitError',

    'Reference',
    'FluidProperties',
    'PipeSpec',
    'PipeMaterial',
    'FittingInput',
    'FittingResult',
    'CalcWarning',
    'SegmentInput',
    'SegmentResult',
    'SystemInput',
    'SystemResult',
    'PumpCurvePoint',
    'ResistanceCurvePoint',
    'OperatingPoint',

    'FittingCatalog',
    'load_default_catalog',
    'calculate_segment_pressure_drop',
    'calculate_system_pressure_drop',
    'solve_flow_rate',
    'RouteNode',
    'analyze_route',
    'route_to_segments',
    'resistance_curve',
    'find_operating_point',
    'npsh_available',
    'pump_suggestion',
    'convert',
]
