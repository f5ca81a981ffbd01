import logging
from typing import List

from fastapi import APIRouter, HTTPException

from app.models.catalog import CoverType, PaperType
from app.services.backend import BackendError, PressBackend

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/paper-types", response_model=List[PaperType])
def paper_types():
    try:
        return PressBackend().list_paper_types()
    except BackendError as e:
        logger.error("Failed to list paper types: %s", e)
        raise HTTPException(status_code=500, detail="Failed to load paper types")


@router.get("/cover-types", response_model=List[CoverType])
def cover_types():
    try:
        return PressBackend().list_cover_types()
    except BackendError as e:
        logger.error("Failed to list cover types: %s", e)
        raise HTTPException(status_code=500, detail="Failed to load cover types")
