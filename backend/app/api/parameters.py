import logging

from fastapi import APIRouter, HTTPException

from app.models.parameters import CostParameters, CostParametersUpdate
from app.services.backend import BackendError, PressBackend, RecordNotFound

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/", response_model=CostParameters)
def get_parameters():
    try:
        return PressBackend().get_parameters()
    except RecordNotFound:
        raise HTTPException(status_code=404, detail="Cost parameters not found")
    except BackendError as e:
        logger.error("Failed to load cost parameters: %s", e)
        raise HTTPException(status_code=500, detail="Failed to load the cost parameters")


@router.put("/{parameters_id}", response_model=CostParameters)
def update_parameters(parameters_id: int, values: CostParametersUpdate):
    """Overwrite all four coefficients; the last write wins."""
    try:
        return PressBackend().update_parameters(parameters_id, values)
    except RecordNotFound:
        raise HTTPException(status_code=404, detail="Cost parameters not found")
    except BackendError as e:
        logger.error("Failed to update cost parameters id=%s: %s", parameters_id, e)
        raise HTTPException(status_code=500, detail="Failed to save the parameters")
