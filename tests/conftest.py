"""
Shared fixtures: 2" and 3" schedule 40 steel pipe, water at 20 °C, a sample pump curve.
"""

import pytest

from hydraulics.fittings import load_default_catalog
from hydraulics.models import (
    FittingInput, FluidProperties, PipeMaterial, PipeSpec, PumpCurvePoint, Reference, SegmentInput,
)


@pytest.fixture
def water():
    return FluidProperties(
        density=998.2,
        viscosity=1.002e-3,
        temperature=20.0,
        reference=Reference(source="IAPWS-IF97", page="Water at 20 °C"),
    )


@pytest.fixture
def pipe_2in():
    return PipeSpec(nps="2", dn=50, od_mm=60.3, wall_mm=3.91, id_mm=52.50, schedule="40")


@pytest.fixture
def pipe_3in():
    return PipeSpec(nps="3", dn=80, od_mm=88.9, wall_mm=5.49, id_mm=77.93, schedule="40")


@pytest.fixture
def carbon_steel():
    return PipeMaterial(
        id="carbon_steel_new",
        name="Carbon steel (new)",
        roughness_mm=0.046,
        reference=Reference(source="Moody, 1944"),
    )


@pytest.fixture
def catalog():
    return load_default_catalog()


@pytest.fixture
def make_segment(pipe_2in, carbon_steel, water):
    """Factory for a 2" carbon steel water segment; keyword overrides replace fields."""
    def _make(**overrides):
        fields = dict(
            pipe=pipe_2in,
            material=carbon_steel,
            fluid=water,
            flow_rate_m3s=10.0 / 3600.0,
            length_m=50.0,
            elevation_m=0.0,
            fittings=(),
        )
        fields.update(overrides)
        return SegmentInput(**fields)
    return _make


@pytest.fixture
def four_lr_elbows():
    return (FittingInput(fitting_id="elbow_90_lr_welded", quantity=4),)


@pytest.fixture
def sample_pump_curve():
    rows = [
        (0, 25.0, 0, 1.0),
        (6, 23.5, 38, 1.1),
        (12, 20.0, 63, 1.5),
        (18, 14.5, 72, 2.2),
        (24, 7.0, 58, 3.5),
        (27, 3.0, 40, 4.5),
    ]
    return [
        PumpCurvePoint(flow_m3h=q, head_m=h, efficiency_pct=eff, npshr_m=npshr)
        for q, h, eff, npshr in rows
    ]
