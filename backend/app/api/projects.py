import logging
from typing import List, Optional

from fastapi import APIRouter, File, Form, HTTPException, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from app.models.project import ProjectDraft, ProjectRead
from app.services.backend import BackendError, PressBackend, RecordNotFound
from app.services.estimator import CoverUpload, EstimatorService
from app.services.pricing import EstimateValidationError
from app.utils.image_check import InvalidCoverImage

logger = logging.getLogger(__name__)
router = APIRouter()


async def read_cover(upload: Optional[UploadFile]) -> Optional[CoverUpload]:
    """Turn a multipart file field into a CoverUpload; an empty file input means no cover."""
    if upload is None or not upload.filename:
        return None
    content = await upload.read()
    logger.debug("Cover upload filename=%s content_type=%s size=%s", upload.filename, upload.content_type, len(content))
    return CoverUpload(filename=upload.filename, content_type=upload.content_type, content=content)


@router.get("/", response_model=List[ProjectRead])
def list_projects():
    try:
        return PressBackend().list_projects()
    except BackendError as e:
        logger.error("Failed to list projects: %s", e)
        raise HTTPException(status_code=500, detail="Failed to load the projects")


@router.post("/")
async def create_project(
    title: str = Form(""),
    author: Optional[str] = Form(None),
    isbn: Optional[str] = Form(None),
    page_count: int = Form(0),
    print_run: int = Form(0),
    paper_type_id: Optional[int] = Form(None),
    cover_type_id: Optional[int] = Form(None),
    cover: Optional[UploadFile] = File(None),
):
    """Validate, price and save a project, uploading the cover image first when given."""
    draft = ProjectDraft(
        title=title,
        author=author or None,
        isbn=isbn or None,
        page_count=page_count,
        print_run=print_run,
        paper_type_id=paper_type_id,
        cover_type_id=cover_type_id,
    )
    upload = await read_cover(cover)
    try:
        project = await run_in_threadpool(EstimatorService().save, draft, upload)
    except EstimateValidationError as e:
        raise HTTPException(status_code=400, detail={"message": "Project data is incomplete", "issues": e.issues})
    except InvalidCoverImage as e:
        logger.warning("Rejected cover upload filename=%s: %s", getattr(cover, "filename", None), e)
        raise HTTPException(status_code=400, detail="Please select a valid image file")
    except BackendError as e:
        logger.error("Failed to save project title=%s: %s", title, e)
        raise HTTPException(status_code=500, detail="Failed to save the project")

    return JSONResponse(
        {
            "id": project.id,
            "title": project.title,
            "cover_image_url": project.cover_image_url,
            "estimated_cost": project.estimated_cost,
            "suggested_price": project.suggested_price,
        },
        status_code=201,
    )


@router.delete("/{project_id}")
def delete_project(project_id: int):
    try:
        PressBackend().delete_project(project_id)
    except RecordNotFound:
        raise HTTPException(status_code=404, detail="Project not found")
    except BackendError as e:
        logger.error("Failed to delete project id=%s: %s", project_id, e)
        raise HTTPException(status_code=500, detail="Failed to delete the project")
    return {"ok": True, "id": project_id}
