from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict
from sqlmodel import SQLModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Project(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    title: str
    author: Optional[str] = None
    isbn: Optional[str] = None
    page_count: int
    print_run: int
    # weak references: a project keeps its id even if the material row goes away
    paper_type_id: Optional[int] = Field(default=None, foreign_key="paper_type.id")
    cover_type_id: Optional[int] = Field(default=None, foreign_key="cover_type.id")
    cover_image_url: Optional[str] = None
    estimated_cost: float
    suggested_price: float
    created_at: datetime = Field(default_factory=_utcnow, index=True)


class ProjectRead(SQLModel):
    """A project row joined with the names of its materials."""

    id: int
    title: str
    author: Optional[str] = None
    isbn: Optional[str] = None
    page_count: int
    print_run: int
    paper_type_id: Optional[int] = None
    cover_type_id: Optional[int] = None
    paper_type_name: Optional[str] = None
    cover_type_name: Optional[str] = None
    cover_image_url: Optional[str] = None
    estimated_cost: float
    suggested_price: float
    created_at: datetime

    @property
    def price_per_copy(self) -> Optional[float]:
        if not self.print_run:
            return None
        return self.suggested_price / self.print_run


class ProjectDraft(BaseModel):
    """Unsaved estimator input. Replaced wholesale (``model_copy``) on change."""

    model_config = ConfigDict(frozen=True)

    title: str = ""
    author: Optional[str] = None
    isbn: Optional[str] = None
    page_count: int = 0
    print_run: int = 0
    paper_type_id: Optional[int] = None
    cover_type_id: Optional[int] = None
