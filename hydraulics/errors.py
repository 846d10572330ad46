"""
Error taxonomy for the hydraulics engine.

InvalidInputError covers non-physical arguments to a formula and always fails fast.
LookupFailure covers table lookups (fittings, interpolation, pipe data); the
operating-point search recovers from interpolation failures locally, everything
else surfaces to the caller. A missing operating point is not an error: it is
returned as None.
"""


class HydraulicsError(Exception):
    """Base class for all engine errors."""


class InvalidInputError(HydraulicsError, ValueError):
    """A physical argument is outside the domain of the formula."""


class InvalidReynoldsNumber(InvalidInputError):
    """Reynolds number is zero or negative."""


class InvalidRoughness(InvalidInputError):
    """Roughness is zero or negative where a rough-pipe limit is required."""


class LookupFailure(HydraulicsError, LookupError):
    """A key or query value is outside a reference table."""


class FittingNotFoundError(LookupFailure):
    """Fitting identifier is not present in the coefficient catalog."""

    def __init__(self, fitting_id: str):
        self.fitting_id = fitting_id
        super().__init__(f"Fitting not found: {fitting_id}")


class InterpolationRangeError(LookupFailure):
    """Interpolation target lies outside the table's x range."""


class PipeSpecNotFoundError(LookupFailure):
    """No pipe matches the requested nominal size and schedule."""


class MaterialNotFoundError(LookupFailure):
    """Material identifier is not present in the roughness table."""


class SolverError(HydraulicsError):
    """A numerical root search could not bracket or converge on a solution."""


class UnknownUnitError(ValueError):
    """Unit token is not part of its family's enumeration."""
