import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from app.models.project import ProjectDraft
from app.services.backend import BackendError
from app.services.estimator import EstimatorService
from app.services.pricing import EstimateValidationError

logger = logging.getLogger(__name__)
router = APIRouter()


class EstimateRequest(BaseModel):
    page_count: int = 0
    print_run: int = 0
    paper_type_id: Optional[int] = None
    cover_type_id: Optional[int] = None


@router.post("/")
def estimate_cost(req: EstimateRequest) -> Dict[str, Any]:
    """Price a book run without saving anything."""
    draft = ProjectDraft(
        page_count=req.page_count,
        print_run=req.print_run,
        paper_type_id=req.paper_type_id,
        cover_type_id=req.cover_type_id,
    )
    try:
        estimate = EstimatorService().calculate(draft)
    except EstimateValidationError as e:
        raise HTTPException(
            status_code=400,
            detail={"message": "Missing data to perform the calculation", "issues": e.issues},
        )
    except BackendError as e:
        logger.error("Estimate failed: %s", e)
        raise HTTPException(status_code=500, detail="Failed to perform the calculation")
    return estimate.as_dict()
