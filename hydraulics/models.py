"""
Value objects shared by every calculation module.

All models are frozen pydantic models; sequences are stored as tuples so a
result cannot be modified after it is computed.
"""

from typing import Dict, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

FlowRegime = Literal["laminar", "transitional", "turbulent"]
KValueMethod = Literal["crane_ld", "3k", "fixed_k", "cv"]
WarningSeverity = Literal["info", "caution", "warning"]


class FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class Reference(FrozenModel):
    """Citation attached to every computed quantity."""

    source: str = Field(..., description="Source citation")
    page: Optional[str] = Field(None, description="Page or table identifier")
    equation: Optional[str] = Field(None, description="Equation as printed in the source")

    @property
    def key(self) -> Tuple[str, str, str]:
        """Composite value key used for de-duplication."""
        return (self.source, self.page or "", self.equation or "")


class FluidProperties(FrozenModel):
    """Supplied fluid properties; never derived by the engine."""

    density: float = Field(..., gt=0, description="Density in kg/m³")
    viscosity: float = Field(..., gt=0, description="Dynamic viscosity in Pa·s")
    temperature: float = Field(20.0, description="Temperature in °C")
    pressure: float = Field(0.0, description="Vapor pressure context in kPa")
    reference: Reference


class PipeSpec(FrozenModel):
    """Pipe dimensions. Only id_mm enters the hydraulic calculation."""

    standard: str = "ASME B36.10M"
    nps: str = Field(..., description="Nominal pipe size identifier, e.g. '2' or '1-1/2'")
    dn: Optional[int] = None
    od_mm: float = Field(..., gt=0)
    wall_mm: float = Field(..., ge=0)
    id_mm: float = Field(..., gt=0, description="Internal diameter in mm")
    schedule: Optional[str] = None


class PipeMaterial(FrozenModel):
    id: str
    name: str
    roughness_mm: float = Field(..., ge=0, description="Absolute roughness in mm")
    reference: Reference


class FittingInput(FrozenModel):
    fitting_id: str
    quantity: int = Field(1, ge=0)
    cv_override: Optional[float] = Field(None, gt=0, description="Valve Cv replacing the catalog entry")


class FittingResult(FrozenModel):
    id: str
    description: str
    quantity: int
    k_value: float
    method: KValueMethod
    dp_pa: float
    head_loss_m: float
    reference: Reference


class CalcWarning(FrozenModel):
    severity: WarningSeverity
    category: str
    message_key: str
    message_params: Dict[str, Union[float, int, str]] = Field(default_factory=dict)


class SegmentInput(FrozenModel):
    pipe: PipeSpec
    material: PipeMaterial
    fluid: FluidProperties
    flow_rate_m3s: float = Field(..., ge=0)
    length_m: float = Field(..., ge=0)
    elevation_m: float = Field(0.0, description="Signed elevation change, negative downhill")
    fittings: Tuple[FittingInput, ...] = ()


class SegmentResult(FrozenModel):
    velocity_m_s: float
    reynolds: float
    flow_regime: FlowRegime
    friction_factor: float
    friction_factor_method: str

    dp_friction: float
    dp_fittings: float
    dp_elevation: float
    dp_total: float

    head_friction_m: float
    head_fittings_m: float
    head_elevation_m: float
    head_total_m: float

    fitting_details: Tuple[FittingResult, ...] = ()
    references: Tuple[Reference, ...] = ()
    warnings: Tuple[CalcWarning, ...] = ()


class SystemInput(FrozenModel):
    """Series segments sharing one flow rate and one fluid (caller's responsibility)."""

    segments: Tuple[SegmentInput, ...] = ()


class SystemResult(FrozenModel):
    segment_results: Tuple[SegmentResult, ...] = ()

    dp_friction_total: float = 0.0
    dp_fittings_total: float = 0.0
    dp_elevation_total: float = 0.0
    dp_total: float = 0.0

    head_friction_total_m: float = 0.0
    head_fittings_total_m: float = 0.0
    head_elevation_total_m: float = 0.0
    head_total_m: float = 0.0

    references: Tuple[Reference, ...] = ()


class PumpCurvePoint(FrozenModel):
    flow_m3h: float
    head_m: float
    efficiency_pct: float = 0.0
    npshr_m: float = 0.0


class ResistanceCurvePoint(FrozenModel):
    flow_m3h: float
    head_m: float


class OperatingPoint(FrozenModel):
    flow_m3h: float
    head_m: float
    efficiency_pct: float
    npshr_m: float
