#!/usr/bin/env python3
"""
pytest tests for the hydraulics MCP server tools.
Every tool returns a JSON string; these tests check the contract of each one.
"""

import json
import pytest

# Import the tools (package installed via pip install -e .)
from tools.segment_pressure_drop import calculate_segment_pressure_drop
from tools.system_pressure_drop import calculate_system_pressure_drop
from tools.route_pressure_drop import calculate_route_pressure_drop
from tools.pump_selection import select_pump_operating_point
from tools.pump_suggestion import suggest_pump
from tools.unit_conversion import convert_units
from tools.reference_data import get_pipe_dimensions, list_fittings, list_materials


PUMP_CURVE = [
    {"flow_m3h": 0, "head_m": 25.0, "efficiency_pct": 0, "npshr_m": 1.0},
    {"flow_m3h": 6, "head_m": 23.5, "efficiency_pct": 38, "npshr_m": 1.1},
    {"flow_m3h": 12, "head_m": 20.0, "efficiency_pct": 63, "npshr_m": 1.5},
    {"flow_m3h": 18, "head_m": 14.5, "efficiency_pct": 72, "npshr_m": 2.2},
    {"flow_m3h": 24, "head_m": 7.0, "efficiency_pct": 58, "npshr_m": 3.5},
]


class TestSegmentPressureDrop:
    """calculate_segment_pressure_drop tool."""

    def test_standard_pipe(self):
        """Water in 2" sch 40 steel with fittings and a 5 m rise."""
        result = json.loads(calculate_segment_pressure_drop(
            nominal_size="2",
            material="carbon_steel_new",
            flow_rate_m3_h=10.0,
            length_m=50.0,
            elevation_change_m=5.0,
            fittings=[
                {"fitting_id": "entrance_sharp"},
                {"fitting_id": "elbow_90_lr_welded", "quantity": 4},
                {"fitting_id": "exit_all"},
            ],
        ))

        assert "error" not in result and "errors" not in result
        assert result["velocity_m_s"] == pytest.approx(1.283, rel=1e-3)
        assert result["flow_regime"] == "turbulent"
        assert len(result["fitting_details"]) == 3
        assert result["dp_total_pa"] == pytest.approx(
            result["dp_friction_pa"] + result["dp_fittings_pa"] + result["dp_elevation_pa"], rel=1e-6
        )
        assert result["dp_total_kpa"] == pytest.approx(result["dp_total_pa"] / 1000, rel=1e-6)
        assert result["head_elevation_m"] == pytest.approx(5.0)
        assert any(ref["source"] == "IAPWS-IF97" for ref in result["references"])
        assert result["log"]

    def test_alternative_units(self):
        """US units resolve to the same segment as SI."""
        si = json.loads(calculate_segment_pressure_drop(
            nominal_size="2", material="carbon_steel_new", flow_rate_m3_s=0.00630902, length_m=30.48,
        ))
        us = json.loads(calculate_segment_pressure_drop(
            nominal_size="2", material="carbon_steel_new", flow_rate_gpm=100.0, length_ft=100.0,
        ))
        assert us["dp_total_pa"] == pytest.approx(si["dp_total_pa"], rel=1e-5)

    def test_custom_bore_and_fluid(self):
        result = json.loads(calculate_segment_pressure_drop(
            inner_diameter_mm=50.0,
            roughness_mm=0.05,
            density=900.0,
            viscosity_cp=500.0,
            flow_rate_m3_h=10.0,
            length_m=20.0,
        ))
        assert result["flow_regime"] == "laminar"
        assert result["friction_factor_method"] == "laminar"
        assert any(ref["source"] == "User input" for ref in result["references"])

    def test_missing_flow_rate(self):
        result = json.loads(calculate_segment_pressure_drop(
            nominal_size="2", material="carbon_steel_new", length_m=50.0,
        ))
        assert "errors" in result
        assert "Missing flow rate input" in result["errors"]

    def test_missing_material(self):
        result = json.loads(calculate_segment_pressure_drop(
            nominal_size="2", flow_rate_m3_h=10.0, length_m=50.0,
        ))
        assert "errors" in result

    def test_unknown_fitting(self):
        result = json.loads(calculate_segment_pressure_drop(
            nominal_size="2", material="carbon_steel_new", flow_rate_m3_h=10.0, length_m=50.0,
            fittings=[{"fitting_id": "elbow_91"}],
        ))
        assert "error" in result
        assert "elbow_91" in result["error"]

    def test_unknown_pipe_size(self):
        result = json.loads(calculate_segment_pressure_drop(
            nominal_size="2.2", material="carbon_steel_new", flow_rate_m3_h=10.0, length_m=50.0,
        ))
        assert "error" in result

    def test_valve_cv_override(self):
        result = json.loads(calculate_segment_pressure_drop(
            nominal_size="2", material="carbon_steel_new", flow_rate_m3_h=10.0, length_m=10.0,
            fittings=[{"fitting_id": "control_valve", "cv_override": 40}],
        ))
        assert result["fitting_details"][0]["method"] == "cv"


class TestSystemPressureDrop:
    """calculate_system_pressure_drop tool."""

    SEGMENTS = [
        {"nominal_size": "2", "length_m": 30.0, "elevation_change_m": 2.0,
         "fittings": [{"fitting_id": "elbow_90_lr_welded", "quantity": 4}]},
        {"nominal_size": "3", "length_m": 80.0, "elevation_change_m": 6.0},
    ]

    def test_shared_flow_and_material(self):
        result = json.loads(calculate_system_pressure_drop(
            self.SEGMENTS, flow_rate_m3_h=10.0, material="carbon_steel_new",
        ))
        assert "error" not in result and "errors" not in result
        assert len(result["segments"]) == 2
        assert result["dp_total_pa"] == pytest.approx(
            sum(seg["dp_total_pa"] for seg in result["segments"]), rel=1e-6
        )
        assert result["head_elevation_total_m"] == pytest.approx(8.0)

    def test_solve_flow_rate(self):
        forward = json.loads(calculate_system_pressure_drop(
            self.SEGMENTS, flow_rate_m3_h=10.0, material="carbon_steel_new",
        ))
        solved = json.loads(calculate_system_pressure_drop(
            self.SEGMENTS, material="carbon_steel_new",
            target_pressure_drop_kpa=forward["dp_total_kpa"],
        ))
        assert solved["solved_flow_rate_m3_h"] == pytest.approx(10.0, rel=1e-4)
        assert solved["dp_total_pa"] == pytest.approx(forward["dp_total_pa"], rel=1e-4)

    def test_unreachable_target(self):
        result = json.loads(calculate_system_pressure_drop(
            self.SEGMENTS, material="carbon_steel_new", target_pressure_drop_kpa=0.001,
        ))
        assert "error" in result

    def test_missing_flow_without_target(self):
        result = json.loads(calculate_system_pressure_drop(self.SEGMENTS, material="carbon_steel_new"))
        assert "errors" in result

    def test_segment_flow_in_other_unit_overrides_shared_flow(self):
        """5 m³/h on the segment wins over a shared 0.01 m³/s."""
        result = json.loads(calculate_system_pressure_drop(
            [{"nominal_size": "2", "length_m": 10.0, "flow_rate_m3_h": 5.0}],
            flow_rate_m3_s=0.01, material="carbon_steel_new",
        ))
        assert result["segments"][0]["velocity_m_s"] == pytest.approx(0.6416, rel=1e-3)

    def test_segment_viscosity_cp_overrides_shared_viscosity(self):
        result = json.loads(calculate_system_pressure_drop(
            [{"nominal_size": "2", "length_m": 10.0, "viscosity_cp": 100.0}],
            flow_rate_m3_h=10.0, viscosity=1e-3, material="carbon_steel_new",
        ))
        segment = result["segments"][0]
        assert segment["reynolds_number"] < 1000
        assert segment["flow_regime"] == "laminar"

    def test_segment_material_overrides_shared_roughness(self):
        shared_material = json.loads(calculate_system_pressure_drop(
            [{"nominal_size": "2", "length_m": 10.0}],
            flow_rate_m3_h=10.0, material="carbon_steel_new",
        ))
        segment_material = json.loads(calculate_system_pressure_drop(
            [{"nominal_size": "2", "length_m": 10.0, "material": "carbon_steel_new"}],
            flow_rate_m3_h=10.0, roughness_mm=1.0,
        ))
        assert segment_material["dp_total_pa"] == pytest.approx(shared_material["dp_total_pa"], rel=1e-9)

    def test_shared_centipoise_and_roughness(self):
        """Shared viscosity_cp and roughness_mm reach segments that set neither."""
        result = json.loads(calculate_system_pressure_drop(
            [{"nominal_size": "2", "length_m": 10.0}],
            flow_rate_m3_h=10.0, viscosity_cp=100.0, roughness_mm=0.05, temperature_c=40.0,
        ))
        assert "errors" not in result
        assert result["segments"][0]["flow_regime"] == "laminar"
        assert any(ref["source"] == "User input" for ref in result["references"])

    def test_empty_system(self):
        result = json.loads(calculate_system_pressure_drop([]))
        assert result["dp_total_pa"] == 0.0
        assert result["segments"] == []


class TestRoutePressureDrop:
    """calculate_route_pressure_drop tool."""

    NODES = [
        {"x": 0, "y": 0, "z": 0, "fittings": [{"fitting_id": "entrance_sharp"}]},
        {"x": 10, "y": 0, "z": 0},
        {"x": 10, "y": 0, "z": 5},
        {"x": 10, "y": 8, "z": 5, "fittings": [{"fitting_id": "exit_all"}]},
    ]

    def test_riser_route(self):
        result = json.loads(calculate_route_pressure_drop(
            self.NODES, nominal_size="2", material="carbon_steel_new", flow_rate_m3_h=10.0,
        ))
        assert "error" not in result and "errors" not in result
        route = result["route"]
        assert route["total_length_m"] == pytest.approx(23.0)
        assert route["elbow_count_90"] == 2
        assert [e["fitting_id"] for e in route["elbows"]] == ["elbow_90_lr_welded"] * 2
        assert len(result["segments"]) == 3
        assert result["head_elevation_total_m"] == pytest.approx(5.0)

    def test_matches_equivalent_system(self):
        """The route gives the same answer as the segments written out by hand."""
        route = json.loads(calculate_route_pressure_drop(
            self.NODES, nominal_size="2", material="carbon_steel_new", flow_rate_m3_h=10.0,
        ))
        elbow = {"fitting_id": "elbow_90_lr_welded"}
        system = json.loads(calculate_system_pressure_drop(
            [
                {"nominal_size": "2", "length_m": 10.0, "fittings": [{"fitting_id": "entrance_sharp"}, elbow]},
                {"nominal_size": "2", "length_m": 5.0, "elevation_change_m": 5.0, "fittings": [elbow]},
                {"nominal_size": "2", "length_m": 8.0, "fittings": [{"fitting_id": "exit_all"}]},
            ],
            flow_rate_m3_h=10.0, material="carbon_steel_new",
        ))
        assert route["dp_total_pa"] == pytest.approx(system["dp_total_pa"], rel=1e-6)

    def test_threaded_elbows(self):
        result = json.loads(calculate_route_pressure_drop(
            self.NODES, nominal_size="2", material="carbon_steel_new", flow_rate_m3_h=10.0,
            elbow_connection="threaded",
        ))
        assert {e["fitting_id"] for e in result["route"]["elbows"]} == {"elbow_90_std_threaded"}

    def test_off_standard_bend_warning(self):
        nodes = [{"x": 0, "y": 0}, {"x": 10, "y": 0}, {"x": 15, "y": 8.660254}]
        result = json.loads(calculate_route_pressure_drop(
            nodes, nominal_size="2", material="carbon_steel_new", flow_rate_m3_h=10.0,
        ))
        assert result["route"]["elbow_count_45"] == 1
        assert result["route"]["warnings"][0]["message_key"] == "warn.bend_angle_deviation"

    def test_unknown_connection(self):
        result = json.loads(calculate_route_pressure_drop(
            self.NODES, nominal_size="2", material="carbon_steel_new", flow_rate_m3_h=10.0,
            elbow_connection="flanged",
        ))
        assert "error" in result
        assert result["valid_connections"] == ["welded", "threaded"]

    def test_single_node(self):
        result = json.loads(calculate_route_pressure_drop(
            self.NODES[:1], nominal_size="2", material="carbon_steel_new", flow_rate_m3_h=10.0,
        ))
        assert "at least 2 nodes" in result["error"]

    def test_missing_flow_rate(self):
        result = json.loads(calculate_route_pressure_drop(self.NODES, nominal_size="2", material="carbon_steel_new"))
        assert "Missing flow rate input" in result["errors"]


class TestPumpOperatingPoint:
    """select_pump_operating_point tool."""

    def test_operating_point_and_npsh(self):
        result = json.loads(select_pump_operating_point(
            pump_curve=PUMP_CURVE,
            static_head_m=10.0,
            friction_head_m=8.0,
            design_flow_m3h=15.0,
            suction_static_head_m=2.0,
        ))
        assert len(result["resistance_curve"]) == 21
        op = result["operating_point"]
        assert 12.0 < op["flow_m3h"] < 18.0
        assert result["npsha_m"] == pytest.approx(12.112, rel=1e-3)
        assert result["npsh_margin_m"] == pytest.approx(result["npsha_m"] - op["npshr_m"], rel=1e-6)

    def test_no_crossing(self):
        result = json.loads(select_pump_operating_point(
            pump_curve=PUMP_CURVE, static_head_m=30.0, friction_head_m=8.0, design_flow_m3h=15.0,
        ))
        assert result["operating_point"] is None
        assert "npsha_m" not in result

    def test_psi_pressures(self):
        result = json.loads(select_pump_operating_point(
            pump_curve=PUMP_CURVE, static_head_m=10.0, friction_head_m=8.0, design_flow_m3h=15.0,
            suction_static_head_m=0.0, atmospheric_pressure_psi=14.696, vapor_pressure_psi=0.339,
        ))
        assert result["npsha_m"] == pytest.approx(10.11, rel=2e-3)

    def test_unsorted_curve(self):
        result = json.loads(select_pump_operating_point(
            pump_curve=list(reversed(PUMP_CURVE)), static_head_m=10.0, friction_head_m=8.0, design_flow_m3h=15.0,
        ))
        assert "error" in result


class TestSuggestPump:
    """suggest_pump tool."""

    def test_radial_duty(self):
        result = json.loads(suggest_pump(speed_rpm=1450, design_flow_m3h=60.0, total_head_m=20.0, npsha_m=8.0))
        assert result["specific_speed"]["pump_type"] == "radial"
        assert result["specific_speed"]["ns"] == pytest.approx(153.3, rel=2e-3)
        assert result["estimated_power_kw"] == pytest.approx(5.02, rel=1e-3)
        assert result["max_npshr_m"] == pytest.approx(6.4)
        assert result["total_head_ft"] == pytest.approx(65.617, rel=1e-4)

    def test_us_units(self):
        result = json.loads(suggest_pump(speed_rpm=1750, design_flow_gpm=200.0, total_head_ft=100.0))
        assert "specific_speed" in result
        assert result["max_npshr_m"] is None

    def test_missing_head(self):
        result = json.loads(suggest_pump(speed_rpm=1450, design_flow_m3h=60.0))
        assert "errors" in result

    def test_zero_speed(self):
        result = json.loads(suggest_pump(speed_rpm=0, design_flow_m3h=60.0, total_head_m=20.0))
        assert "must be positive" in result["error"]


class TestUnitConversion:
    """convert_units tool."""

    def test_pressure(self):
        result = json.loads(convert_units(1.0, "bar", "kPa", "pressure"))
        assert result["result"] == pytest.approx(100.0)

    def test_temperature(self):
        result = json.loads(convert_units(212.0, "F", "C", "temperature"))
        assert result["result"] == pytest.approx(100.0)

    def test_unknown_unit(self):
        result = json.loads(convert_units(1.0, "atm", "kPa", "pressure"))
        assert "error" in result
        assert "kPa" in result["valid_units"]

    def test_unknown_quantity(self):
        result = json.loads(convert_units(1.0, "L", "m3", "volume"))
        assert "error" in result
        assert "pressure" in result["valid_quantities"]


class TestReferenceData:
    """list_fittings, list_materials and get_pipe_dimensions tools."""

    def test_list_fittings(self):
        result = json.loads(list_fittings())
        assert result["count"] == len(result["fittings"])
        ids = {f["id"] for f in result["fittings"]}
        assert {"entrance_sharp", "elbow_90_lr_welded", "crane_elbow_90_std"} <= ids

    def test_list_fittings_by_method(self):
        result = json.loads(list_fittings(method="fixed_k"))
        assert result["count"] == 4
        assert all(f["method"] == "fixed_k" for f in result["fittings"])

    def test_list_materials(self):
        result = json.loads(list_materials())
        assert result["count"] >= 10
        assert any(m["id"] == "carbon_steel_new" for m in result["materials"])

    def test_pipe_dimensions(self):
        result = json.loads(get_pipe_dimensions("2", "40"))
        assert result["id_mm"] == pytest.approx(52.5, abs=0.05)
        assert result["dn"] == 50

    def test_pipe_dimensions_unknown(self):
        result = json.loads(get_pipe_dimensions("2", "999"))
        assert "error" in result
