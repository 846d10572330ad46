"""
Segment input assembly shared by the pressure-drop tools.

A segment is described by plain keyword values (nominal size or inner diameter,
material id or roughness, flow in any supported unit, fittings as dicts) and
turned into a validated SegmentInput. Resolution notes and missing inputs are
recorded on the caller's InputResolver.
"""

from typing import Any, Dict, List, Optional, Union

from hydraulics.constants import DEFAULT_WATER_DENSITY, DEFAULT_WATER_VISCOSITY
from hydraulics.input_resolver import InputResolver
from hydraulics.models import (
    FittingInput, FluidProperties, PipeMaterial, PipeSpec, Reference, SegmentInput,
)
from hydraulics.pipe_data import resolve_material, resolve_pipe_spec

USER_INPUT_REF = Reference(source="User input")
WATER_20C_REF = Reference(source="IAPWS-IF97", page="Water at 20 °C")

FittingSpec = Dict[str, Union[str, int, float]]


def build_pipe(
    resolver: InputResolver,
    nominal_size: Optional[Union[str, float]] = None,
    schedule: str = "40",
    inner_diameter_mm: Optional[float] = None,
    inner_diameter_in: Optional[float] = None,
) -> Optional[PipeSpec]:
    """Standard pipe by NPS and schedule, or a custom bore by inner diameter."""
    if nominal_size is not None:
        pipe = resolve_pipe_spec(nominal_size, schedule)
        resolver.results_log.append(
            f"Pipe: NPS {pipe.nps} sch {schedule} -> ID {pipe.id_mm:.2f} mm"
        )
        return pipe

    id_m = resolver.resolve_length("Pipe inner diameter", mm=inner_diameter_mm, inch=inner_diameter_in)
    if id_m is None:
        return None
    id_mm = id_m * 1000.0
    return PipeSpec(standard="custom", nps="custom", od_mm=id_mm, wall_mm=0.0, id_mm=id_mm)


def build_material(
    resolver: InputResolver,
    material: Optional[str] = None,
    roughness_mm: Optional[float] = None,
) -> Optional[PipeMaterial]:
    """Catalog material by id, or a user roughness (which takes precedence)."""
    if roughness_mm is not None:
        resolver.results_log.append(f"Roughness: user input {roughness_mm} mm")
        return PipeMaterial(id="custom", name="User roughness", roughness_mm=roughness_mm, reference=USER_INPUT_REF)
    if material is not None:
        resolved = resolve_material(material)
        resolver.results_log.append(f"Material: {resolved.name} ({resolved.roughness_mm} mm)")
        return resolved
    resolver.error_log.append("Missing pipe material or roughness_mm")
    return None


def build_fluid(
    resolver: InputResolver,
    density: Optional[float] = None,
    viscosity: Optional[float] = None,
    viscosity_cp: Optional[float] = None,
    temperature_c: float = 20.0,
) -> Optional[FluidProperties]:
    """Supplied liquid properties; water at 20 °C fills whatever is missing."""
    props = resolver.resolve_liquid(density=density, viscosity=viscosity, viscosity_cp=viscosity_cp)
    if props["errors"]:
        return None
    is_default_water = props["density"] == DEFAULT_WATER_DENSITY and props["viscosity"] == DEFAULT_WATER_VISCOSITY
    return FluidProperties(
        density=props["density"],
        viscosity=props["viscosity"],
        temperature=temperature_c,
        reference=WATER_20C_REF if is_default_water else USER_INPUT_REF,
    )


def build_fittings(fittings: Optional[List[FittingSpec]]) -> List[FittingInput]:
    """Fitting dicts such as {"fitting_id": "elbow_90_lr_welded", "quantity": 4}."""
    result = []
    for item in fittings or []:
        fitting_id = item.get("fitting_id") or item.get("type")
        if not fitting_id:
            raise ValueError(f"Fitting entry without fitting_id: {item}")
        result.append(FittingInput(
            fitting_id=str(fitting_id),
            quantity=int(item.get("quantity", 1)),
            cv_override=item.get("cv_override"),
        ))
    return result


def build_segment(resolver: InputResolver, spec: Dict[str, Any], label: str = "Segment") -> Optional[SegmentInput]:
    """
    SegmentInput from a tool-style description.

    Recognized keys: nominal_size, schedule, inner_diameter_mm, inner_diameter_in,
    material, roughness_mm, density, viscosity, viscosity_cp, temperature_c,
    flow_rate_m3_s, flow_rate_m3_h, flow_rate_l_min, flow_rate_gpm, length_m,
    length_ft, elevation_change_m, elevation_change_ft, fittings.

    Returns None when a required value is missing; the reason is in the
    resolver's error log.
    """
    errors_before = len(resolver.error_log)

    pipe = build_pipe(
        resolver,
        nominal_size=spec.get("nominal_size"),
        schedule=str(spec.get("schedule", "40")),
        inner_diameter_mm=spec.get("inner_diameter_mm"),
        inner_diameter_in=spec.get("inner_diameter_in"),
    )
    material = build_material(resolver, spec.get("material"), spec.get("roughness_mm"))
    fluid = build_fluid(
        resolver,
        density=spec.get("density"),
        viscosity=spec.get("viscosity"),
        viscosity_cp=spec.get("viscosity_cp"),
        temperature_c=20.0 if spec.get("temperature_c") is None else spec["temperature_c"],
    )
    flow = resolver.resolve_flow_rate(
        m3_s=spec.get("flow_rate_m3_s"),
        m3_h=spec.get("flow_rate_m3_h"),
        l_min=spec.get("flow_rate_l_min"),
        gpm=spec.get("flow_rate_gpm"),
    )
    length = resolver.resolve_length(f"{label} length", m=spec.get("length_m"), ft=spec.get("length_ft"))
    elevation = resolver.resolve_length(
        f"{label} elevation change", required=False,
        m=spec.get("elevation_change_m"), ft=spec.get("elevation_change_ft"),
    )

    if len(resolver.error_log) > errors_before:
        return None

    return SegmentInput(
        pipe=pipe,
        material=material,
        fluid=fluid,
        flow_rate_m3s=flow,
        length_m=length,
        elevation_m=elevation or 0.0,
        fittings=tuple(build_fittings(spec.get("fittings"))),
    )
