"""Tests for fitting K values, the coefficient catalog and loss aggregation."""

import pytest

from hydraulics.errors import FittingNotFoundError, InvalidInputError, LookupFailure
from hydraulics.fittings import (
    CatalogEntry, FittingCatalog, PipeContext, fitting_loss, k_3k, k_crane,
    k_from_cv, list_fittings, resolve_fitting, resolve_fittings, total_fitting_loss,
)
from hydraulics.friction import fully_turbulent_friction_factor
from hydraulics.models import FittingInput, Reference


@pytest.fixture
def context_2in():
    return PipeContext(id_mm=52.5, reynolds=67100.0, density=998.2, velocity=1.283,
                       roughness_mm=0.046, nps="2")


def darby(re, d_inch, k1, ki, kd):
    return k1 / re + ki * (1 + kd / d_inch ** 0.3)


class TestKValues:

    def test_crane_ld(self):
        assert k_crane(30, 0.019) == pytest.approx(0.57)

    def test_3k_matches_darby_equation(self):
        d_inch = 52.5 / 25.4
        expected = darby(67100.0, d_inch, 800, 0.071, 4.2)
        assert k_3k(67100.0, 52.5, 800, 0.071, 4.2) == pytest.approx(expected, rel=1e-9)

    def test_3k_zero_reynolds_drops_k1_term(self):
        d_inch = 52.5 / 25.4
        expected = 0.071 * (1 + 4.2 / d_inch ** 0.3)
        assert k_3k(0.0, 52.5, 800, 0.071, 4.2) == pytest.approx(expected)

    def test_3k_laminar_dominated_by_k1(self):
        assert k_3k(100.0, 52.5, 800, 0.071, 4.2) > 8.0

    def test_cv_formula(self):
        d_inch = 52.5 / 25.4
        assert k_from_cv(50.0, 52.5) == pytest.approx(894.0 * d_inch ** 4 / 50.0 ** 2)

    @pytest.mark.parametrize("cv", [0.0, -10.0])
    def test_cv_must_be_positive(self, cv):
        with pytest.raises(InvalidInputError):
            k_from_cv(cv, 52.5)


class TestLoss:

    def test_single_loss(self):
        dp, head = fitting_loss(1.5, 998.2, 1.283)
        assert 1000 < dp < 1500
        assert dp == pytest.approx(1.5 * 998.2 * 1.283 ** 2 / 2)
        assert head == pytest.approx(1.5 * 1.283 ** 2 / (2 * 9.80665))

    def test_total_uses_quantities(self):
        total_k, dp, head = total_fitting_loss([(0.3, 4), (0.5, 1), (1.0, 1)], 998.2, 2.0)
        assert total_k == pytest.approx(2.7)
        assert dp == pytest.approx(2.7 * 998.2 * 4.0 / 2)
        assert head == pytest.approx(2.7 * 4.0 / (2 * 9.80665))

    def test_total_of_nothing(self):
        assert total_fitting_loss([], 998.2, 2.0) == (0, 0.0, 0.0)


class TestDefaultCatalog:

    def test_all_methods_present(self, catalog):
        methods = {entry.method for entry in catalog.entries}
        assert methods == {"crane_ld", "3k", "fixed_k"}
        assert len(catalog) > 30

    def test_entrance_and_exit(self, catalog, context_2in):
        assert catalog.k_value(catalog.resolve("entrance_sharp"), context_2in) == 0.5
        assert catalog.k_value(catalog.resolve("exit_all"), context_2in) == 1.0

    def test_crane_uses_tabulated_ft(self, catalog, context_2in):
        entry = catalog.resolve("crane_elbow_90_std")
        assert catalog.k_value(entry, context_2in) == pytest.approx(0.019 * 30)

    def test_crane_falls_back_to_von_karman(self, catalog):
        context = PipeContext(id_mm=50.0, reynolds=1e5, density=998.2, velocity=1.0,
                              roughness_mm=0.046, nps="custom")
        entry = catalog.resolve("crane_elbow_90_std")
        ft = fully_turbulent_friction_factor(0.046, 50.0).f
        assert catalog.k_value(entry, context) == pytest.approx(ft * 30)

    def test_3k_entry(self, catalog, context_2in):
        entry = catalog.resolve("valve_gate_full")
        expected = darby(67100.0, 52.5 / 25.4, 300, 0.037, 3.9)
        assert catalog.k_value(entry, context_2in) == pytest.approx(expected)

    def test_unknown_fitting(self, catalog):
        with pytest.raises(FittingNotFoundError) as exc_info:
            catalog.resolve("elbow_91")
        assert exc_info.value.fitting_id == "elbow_91"
        assert isinstance(exc_info.value, LookupFailure)
        assert isinstance(exc_info.value, LookupError)

    def test_contains(self, catalog):
        assert "elbow_90_lr_welded" in catalog
        assert "elbow_91" not in catalog

    def test_list_fittings(self, catalog):
        rows = list_fittings(catalog)
        assert len(rows) == len(catalog)
        assert {"id", "description", "method", "source"} <= set(rows[0])
        assert rows[0]["method"] == "fixed_k"
        assert rows[-1]["method"] == "crane_ld"


class TestInjectedCatalog:

    def test_custom_entries(self, context_2in):
        catalog = FittingCatalog([
            CatalogEntry(id="strainer", description="Y-strainer", method="fixed_k", k=2.5,
                         reference=Reference(source="Vendor data")),
        ])
        result = resolve_fitting(FittingInput(fitting_id="strainer", quantity=2), catalog, context_2in)
        assert result.k_value == 2.5
        assert result.reference.source == "Vendor data"
        assert "elbow_90_lr_welded" not in catalog

    def test_empty_catalog_rejects_everything(self, context_2in):
        with pytest.raises(FittingNotFoundError):
            resolve_fitting(FittingInput(fitting_id="exit_all"), FittingCatalog([]), context_2in)

    def test_cv_method_not_allowed_in_catalog(self):
        with pytest.raises(InvalidInputError):
            FittingCatalog([
                CatalogEntry(id="v", description="valve", method="cv", reference=Reference(source="x")),
            ])


class TestResolveFittings:

    def test_quantity_multiplies_loss(self, catalog, context_2in):
        one = resolve_fitting(FittingInput(fitting_id="elbow_90_lr_welded"), catalog, context_2in)
        four = resolve_fitting(FittingInput(fitting_id="elbow_90_lr_welded", quantity=4), catalog, context_2in)
        assert four.k_value == one.k_value
        assert four.dp_pa == pytest.approx(4 * one.dp_pa)
        assert four.head_loss_m == pytest.approx(4 * one.head_loss_m)
        assert four.quantity == 4

    def test_one_entry_per_instance_in_order(self, catalog, context_2in):
        fittings = [
            FittingInput(fitting_id="entrance_sharp"),
            FittingInput(fitting_id="elbow_90_lr_welded", quantity=2),
            FittingInput(fitting_id="elbow_90_lr_welded", quantity=1),
            FittingInput(fitting_id="exit_all"),
        ]
        details = resolve_fittings(fittings, catalog, context_2in)
        assert [d.id for d in details] == ["entrance_sharp", "elbow_90_lr_welded", "elbow_90_lr_welded", "exit_all"]

    def test_cv_override_replaces_catalog(self, catalog, context_2in):
        result = resolve_fitting(
            FittingInput(fitting_id="valve_globe_full", cv_override=50.0), catalog, context_2in,
        )
        assert result.method == "cv"
        assert result.k_value == pytest.approx(k_from_cv(50.0, 52.5))
        assert "894" in result.reference.equation

    def test_cv_override_with_unknown_id(self, catalog, context_2in):
        result = resolve_fitting(FittingInput(fitting_id="control_valve", cv_override=50.0), catalog, context_2in)
        assert result.id == "control_valve"

    def test_zero_quantity(self, catalog, context_2in):
        result = resolve_fitting(FittingInput(fitting_id="exit_all", quantity=0), catalog, context_2in)
        assert result.dp_pa == 0.0
