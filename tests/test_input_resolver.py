"""Tests for tool input resolution and JSON output helpers."""

import json
import math

import numpy as np
import pytest

from hydraulics.input_resolver import FlowRateInput, InputResolver, LengthInput, LiquidInput, PressureInput
from hydraulics.json_helpers import round_floats, safe_json_dumps, sanitize_for_json
from hydraulics.models import Reference


class TestUnitInputs:

    def test_flow_rate_first_value_wins(self):
        flow = FlowRateInput(m3_h=36.0, gpm=100.0)
        assert flow.get_m3_s() == pytest.approx(0.01)
        assert "m3/h" in flow.get_source()

    def test_flow_rate_si_source(self):
        assert FlowRateInput(m3_s=0.01).get_source() == "SI (m³/s)"

    def test_nothing_given(self):
        assert FlowRateInput().get_m3_s() is None
        assert LengthInput().get_m() is None
        assert PressureInput().get_kpa() is None

    def test_length_units(self):
        assert LengthInput(ft=100.0).get_m() == pytest.approx(30.48)
        assert LengthInput(inch=2.0).get_m() == pytest.approx(0.0508)

    def test_pressure_units(self):
        assert PressureInput(bar=1.0).get_kpa() == pytest.approx(100.0)
        assert PressureInput(psi=14.696).get_kpa() == pytest.approx(101.325, rel=1e-4)

    def test_liquid_defaults(self):
        result = LiquidInput().resolve()
        assert result["density"] == 998.2
        assert result["viscosity"] == 1.002e-3
        assert len(result["warnings"]) == 2

    def test_liquid_centipoise(self):
        result = LiquidInput(density=850.0, viscosity_cp=12.0).resolve()
        assert result["viscosity"] == pytest.approx(0.012)
        assert result["warnings"] == []

    def test_liquid_without_defaults(self):
        result = LiquidInput(allow_defaults=False).resolve()
        assert result["errors"] == ["Missing fluid density", "Missing fluid viscosity"]


class TestInputResolver:

    def test_logs_resolved_values(self):
        resolver = InputResolver("test")
        assert resolver.resolve_flow_rate(l_s=2.0) == pytest.approx(0.002)
        assert resolver.resolve_length("Pipe length", ft=10.0) == pytest.approx(3.048)
        logs = resolver.get_logs()
        assert len(logs["log"]) == 2
        assert logs["errors"] == []

    def test_missing_required(self):
        resolver = InputResolver("test")
        resolver.resolve_flow_rate()
        resolver.resolve_length("Pipe length")
        assert resolver.get_logs()["errors"] == ["Missing flow rate input", "Missing pipe length input"]

    def test_optional_length(self):
        resolver = InputResolver("test")
        assert resolver.resolve_length("Elevation", required=False) is None
        assert resolver.error_log == []

    def test_pressure_default(self):
        resolver = InputResolver("test")
        assert resolver.resolve_pressure("Vapor pressure", default=2.339) == 2.339
        assert "default" in resolver.results_log[0]


class TestJsonHelpers:

    def test_non_finite_become_null(self):
        assert sanitize_for_json({"a": float("inf"), "b": [1.0, float("nan")]}) == {"a": None, "b": [1.0, None]}

    def test_numpy_values(self):
        assert sanitize_for_json({"n": np.int64(3), "x": np.float64(1.5), "arr": np.array([1.0, 2.0])}) == \
            {"n": 3, "x": 1.5, "arr": [1.0, 2.0]}

    def test_models_are_dumped(self):
        data = json.loads(safe_json_dumps({"ref": Reference(source="Crane TP-410")}))
        assert data["ref"] == {"source": "Crane TP-410", "page": None, "equation": None}

    def test_unicode_kept(self):
        assert "°" in safe_json_dumps({"t": "20 °C"})

    def test_round_significant_figures(self):
        assert round_floats(0.000123456789, 3) == 0.000123
        assert round_floats({"a": [123456.789]}, 4) == {"a": [123500.0]}
        assert round_floats("text") == "text"
        assert math.isinf(round_floats(float("inf")))
