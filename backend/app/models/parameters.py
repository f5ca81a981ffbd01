from datetime import datetime
from typing import Optional

from sqlalchemy import CheckConstraint, UniqueConstraint
from sqlmodel import SQLModel, Field


class CostParameters(SQLModel, table=True):
    """Global cost coefficients. The table holds at most one row.

    Percentages are plain numbers (``15`` means 15 % of the base cost).
    """

    __tablename__ = "cost_parameters"
    __table_args__ = (
        CheckConstraint("singleton_key = 1", name="ck_cost_parameters_single_row"),
        UniqueConstraint("singleton_key", name="uq_cost_parameters_single_row"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    singleton_key: int = Field(default=1)
    equipment_depreciation_pct: float
    energy_cost_per_kwh: float
    author_royalty_pct: float
    admin_overhead_pct: float
    updated_at: Optional[datetime] = None


class CostParametersUpdate(SQLModel):
    equipment_depreciation_pct: float
    energy_cost_per_kwh: float
    author_royalty_pct: float
    admin_overhead_pct: float
