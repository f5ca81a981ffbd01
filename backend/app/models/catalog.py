from typing import Optional
from sqlmodel import SQLModel, Field


class PaperType(SQLModel, table=True):
    __tablename__ = "paper_type"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True)
    cost_per_sheet: float
    description: Optional[str] = None


class CoverType(SQLModel, table=True):
    __tablename__ = "cover_type"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True)
    # added per copy on top of the paper cost
    additional_cost: float
    description: Optional[str] = None
