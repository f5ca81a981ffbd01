"""
Tests for the book run cost formula.
"""

from __future__ import annotations

import math

import pytest

from app.models.catalog import CoverType, PaperType
from app.models.parameters import CostParameters
from app.services.pricing import (
    MARGIN_MULTIPLIER,
    CostEngine,
    EstimateValidationError,
    per_copy,
    sheets_per_copy,
)


def _paper(cost: float = 0.10) -> PaperType:
    return PaperType(id=1, name="Bond 90 g", cost_per_sheet=cost)


def _cover(cost: float = 2.00) -> CoverType:
    return CoverType(id=1, name="Spiral", additional_cost=cost)


def _params(depr: float = 5.0, energy: float = 0.12, royalty: float = 10.0, admin: float = 15.0) -> CostParameters:
    return CostParameters(
        id=1,
        equipment_depreciation_pct=depr,
        energy_cost_per_kwh=energy,
        author_royalty_pct=royalty,
        admin_overhead_pct=admin,
    )


def test_reference_example() -> None:
    """200 pages, 1000 copies at 0.10/sheet and 2.00 cover."""
    e = CostEngine().estimate(200, 1000, _paper(), _cover(), _params())

    assert e.sheets_per_copy == 100
    assert e.paper_cost_total == pytest.approx(10000)
    assert e.cover_cost_total == pytest.approx(2000)
    assert e.base_cost == pytest.approx(12000)
    assert e.depreciation == pytest.approx(600)
    assert e.energy_cost == pytest.approx(60)
    assert e.royalty_cost == pytest.approx(1200)
    assert e.admin_cost == pytest.approx(1800)
    assert e.total_cost == pytest.approx(15660)
    assert e.suggested_price == pytest.approx(21924)


@pytest.mark.parametrize("pages", [0, 1, 2, 3, 99, 100, 101, 512])
def test_sheets_per_copy_rounds_up(pages: int) -> None:
    assert sheets_per_copy(pages) == math.ceil(pages / 2)


def test_zero_pages_is_zero_sheets() -> None:
    assert sheets_per_copy(0) == 0


def test_odd_page_count_uses_an_extra_sheet() -> None:
    e = CostEngine().estimate(201, 10, _paper(1.0), _cover(0.0), _params(0, 0, 0, 0))
    assert e.sheets_per_copy == 101
    assert e.total_cost == pytest.approx(1010)


@pytest.mark.parametrize(
    "pages,run,sheet,cover,depr,energy,royalty,admin",
    [
        (200, 1000, 0.10, 2.00, 5, 0.12, 10, 15),
        (37, 250, 0.07, 1.25, 0, 0.3, 8, 12.5),
        (480, 3, 0.22, 4.00, 7.5, 0, 0, 0),
        (1, 1, 0.01, 0.0, 100, 1.0, 100, 100),
    ],
)
def test_total_cost_matches_closed_form(pages, run, sheet, cover, depr, energy, royalty, admin) -> None:
    e = CostEngine().estimate(pages, run, _paper(sheet), _cover(cover), _params(depr, energy, royalty, admin))
    expected = e.base_cost * (1 + depr / 100 + royalty / 100 + admin / 100) + run * 0.5 * energy
    assert e.total_cost == pytest.approx(expected)


def test_suggested_price_is_fixed_margin_on_total() -> None:
    e = CostEngine().estimate(37, 250, _paper(0.07), _cover(1.25), _params(3, 0.3, 8, 12.5))
    assert e.suggested_price == e.total_cost * MARGIN_MULTIPLIER
    assert MARGIN_MULTIPLIER == 1.4


def test_per_copy_figures() -> None:
    e = CostEngine().estimate(200, 1000, _paper(), _cover(), _params())
    assert e.cost_per_copy == pytest.approx(e.total_cost / 1000)
    assert e.price_per_copy == pytest.approx(e.suggested_price / 1000)
    assert e.cost_per_copy == pytest.approx(15.66)


def test_per_copy_refuses_zero_print_run() -> None:
    with pytest.raises(ValueError):
        per_copy(100.0, 0)


@pytest.mark.parametrize(
    "kwargs,issue",
    [
        ({"paper_type": None}, "missing_paper_type"),
        ({"cover_type": None}, "missing_cover_type"),
        ({"parameters": None}, "missing_parameters"),
        ({"page_count": 0}, "invalid_page_count"),
        ({"print_run": 0}, "invalid_print_run"),
        ({"print_run": -5}, "invalid_print_run"),
    ],
)
def test_estimate_refused_without_required_data(kwargs, issue) -> None:
    args = {
        "page_count": 200,
        "print_run": 1000,
        "paper_type": _paper(),
        "cover_type": _cover(),
        "parameters": _params(),
    }
    args.update(kwargs)
    with pytest.raises(EstimateValidationError) as exc:
        CostEngine().estimate(**args)
    assert exc.value.issues == [issue]


def test_all_issues_reported_sorted() -> None:
    with pytest.raises(EstimateValidationError) as exc:
        CostEngine().estimate(0, 0, None, None, _params())
    assert exc.value.issues == ["invalid_page_count", "invalid_print_run", "missing_cover_type", "missing_paper_type"]


def test_as_dict_reports_breakdown() -> None:
    out = CostEngine().estimate(200, 1000, _paper(), _cover(), _params()).as_dict()
    assert out["total_cost"] == pytest.approx(15660)
    assert out["suggested_price"] == pytest.approx(21924)
    assert out["price_per_copy"] == pytest.approx(21.924)
    assert set(out["breakdown"]) == {"paper", "cover", "base", "depreciation", "energy", "royalty", "admin"}
    assert out["energy_kwh_per_copy"] == 0.5
