import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from app.models.catalog import CoverType, PaperType
from app.models.parameters import CostParameters

# Fixed assumptions of the formula; not part of CostParameters.
ENERGY_KWH_PER_COPY = 0.5
MARGIN_MULTIPLIER = 1.4
PAGES_PER_SHEET = 2


class EstimateValidationError(ValueError):
    """Raised when an estimate is requested without the data it needs."""

    def __init__(self, issues: List[str]):
        self.issues = sorted(issues)
        super().__init__("cannot estimate: " + ", ".join(self.issues))


def sheets_per_copy(page_count: int) -> int:
    return math.ceil(page_count / PAGES_PER_SHEET)


def per_copy(amount: float, print_run: int) -> float:
    if print_run <= 0:
        raise ValueError("per-copy figures need a positive print run")
    return amount / print_run


@dataclass(frozen=True)
class CostEstimate:
    page_count: int
    print_run: int
    sheets_per_copy: int
    paper_cost_total: float
    cover_cost_total: float
    base_cost: float
    depreciation: float
    energy_cost: float
    royalty_cost: float
    admin_cost: float
    total_cost: float
    suggested_price: float

    @property
    def cost_per_copy(self) -> float:
        return per_copy(self.total_cost, self.print_run)

    @property
    def price_per_copy(self) -> float:
        return per_copy(self.suggested_price, self.print_run)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "page_count": self.page_count,
            "print_run": self.print_run,
            "sheets_per_copy": self.sheets_per_copy,
            "total_cost": self.total_cost,
            "suggested_price": self.suggested_price,
            "cost_per_copy": self.cost_per_copy,
            "price_per_copy": self.price_per_copy,
            "energy_kwh_per_copy": ENERGY_KWH_PER_COPY,
            "margin_multiplier": MARGIN_MULTIPLIER,
            "breakdown": {
                "paper": self.paper_cost_total,
                "cover": self.cover_cost_total,
                "base": self.base_cost,
                "depreciation": self.depreciation,
                "energy": self.energy_cost,
                "royalty": self.royalty_cost,
                "admin": self.admin_cost,
            },
        }


class CostEngine:
    """Book run cost formula.

    The base cost is paper plus cover for the whole run. Depreciation,
    royalty and admin overhead are percentages of the base; energy is
    charged per copy; the suggested price applies a fixed margin on the
    total.
    """

    def check(
        self,
        page_count: int,
        print_run: int,
        paper_type: Optional[PaperType],
        cover_type: Optional[CoverType],
        parameters: Optional[CostParameters],
    ) -> List[str]:
        issues: List[str] = []
        if paper_type is None:
            issues.append("missing_paper_type")
        if cover_type is None:
            issues.append("missing_cover_type")
        if parameters is None:
            issues.append("missing_parameters")
        if not page_count or page_count <= 0:
            issues.append("invalid_page_count")
        if not print_run or print_run <= 0:
            issues.append("invalid_print_run")
        return sorted(issues)

    def estimate(
        self,
        page_count: int,
        print_run: int,
        paper_type: Optional[PaperType],
        cover_type: Optional[CoverType],
        parameters: Optional[CostParameters],
    ) -> CostEstimate:
        issues = self.check(page_count, print_run, paper_type, cover_type, parameters)
        if issues:
            raise EstimateValidationError(issues)

        sheets = sheets_per_copy(page_count)
        paper_cost = sheets * paper_type.cost_per_sheet * print_run
        cover_cost = cover_type.additional_cost * print_run
        base = paper_cost + cover_cost

        depreciation = base * parameters.equipment_depreciation_pct / 100
        energy = print_run * ENERGY_KWH_PER_COPY * parameters.energy_cost_per_kwh
        royalty = base * parameters.author_royalty_pct / 100
        admin = base * parameters.admin_overhead_pct / 100

        total = base + depreciation + energy + royalty + admin

        return CostEstimate(
            page_count=page_count,
            print_run=print_run,
            sheets_per_copy=sheets,
            paper_cost_total=paper_cost,
            cover_cost_total=cover_cost,
            base_cost=base,
            depreciation=depreciation,
            energy_cost=energy,
            royalty_cost=royalty,
            admin_cost=admin,
            total_cost=total,
            suggested_price=total * MARGIN_MULTIPLIER,
        )
