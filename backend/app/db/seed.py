"""Default reference data and cost parameters for a fresh database."""
import logging

from sqlmodel import select

from app.db.session import get_session
from app.models.catalog import CoverType, PaperType
from app.models.parameters import CostParameters

logger = logging.getLogger(__name__)

DEFAULT_PAPER_TYPES = [
    ("Bond 75 g", 0.08, "Uncoated bond paper for text-heavy books"),
    ("Bond 90 g", 0.10, "Heavier uncoated bond, less show-through"),
    ("Couché 115 g", 0.18, "Coated paper for illustrated interiors"),
    ("Cream book 80 g", 0.12, "Cream-toned paper for literary titles"),
]

DEFAULT_COVER_TYPES = [
    ("Softcover", 1.50, "Perfect-bound paperback with laminated 300 g cover"),
    ("Hardcover", 4.00, "Case-bound with printed board cover"),
    ("Spiral", 2.00, "Wire-o binding with plastic covers"),
]

DEFAULT_PARAMETERS = {
    "equipment_depreciation_pct": 5.0,
    "energy_cost_per_kwh": 0.12,
    "author_royalty_pct": 10.0,
    "admin_overhead_pct": 15.0,
}


def seed_reference_data() -> None:
    """Fill empty reference tables and create the parameters row if it is missing."""
    session = get_session()
    try:
        if session.exec(select(PaperType)).first() is None:
            for name, cost, description in DEFAULT_PAPER_TYPES:
                session.add(PaperType(name=name, cost_per_sheet=cost, description=description))
            logger.info("Seeded %d paper types", len(DEFAULT_PAPER_TYPES))
        if session.exec(select(CoverType)).first() is None:
            for name, cost, description in DEFAULT_COVER_TYPES:
                session.add(CoverType(name=name, additional_cost=cost, description=description))
            logger.info("Seeded %d cover types", len(DEFAULT_COVER_TYPES))
        if session.exec(select(CostParameters)).first() is None:
            session.add(CostParameters(**DEFAULT_PARAMETERS))
            logger.info("Seeded default cost parameters")
        session.commit()
    finally:
        session.close()
