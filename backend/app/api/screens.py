"""Server-rendered screens: calculator, projects and settings tabs.

Every handler builds a fresh immutable state, applies the outcome of at most
one backend operation to it, and renders it. Failures become a notification
on the screen; the response is always a page.
"""
import logging
from typing import Optional

from fastapi import APIRouter, File, Form, UploadFile
from fastapi.concurrency import run_in_threadpool
from starlette.responses import HTMLResponse

from app.api.projects import read_cover
from app.models.project import ProjectDraft
from app.services.backend import BackendError, PressBackend
from app.services.estimator import EstimatorService, MissingRequiredFields
from app.services.pricing import EstimateValidationError
from app.ui import render, state as ui
from app.utils.image_check import InvalidCoverImage

logger = logging.getLogger(__name__)
router = APIRouter()


def _to_int(value: Optional[str]) -> int:
    try:
        return int((value or "").strip())
    except ValueError:
        return 0


def _to_float(value: Optional[str]) -> float:
    try:
        return float((value or "").strip())
    except ValueError:
        return 0.0


def _to_id(value: Optional[str]) -> Optional[int]:
    value = (value or "").strip()
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def draft_from_form(
    title: Optional[str],
    author: Optional[str],
    isbn: Optional[str],
    page_count: Optional[str],
    print_run: Optional[str],
    paper_type_id: Optional[str],
    cover_type_id: Optional[str],
) -> ProjectDraft:
    return ProjectDraft(
        title=(title or "").strip(),
        author=(author or "").strip() or None,
        isbn=(isbn or "").strip() or None,
        page_count=_to_int(page_count),
        print_run=_to_int(print_run),
        paper_type_id=_to_id(paper_type_id),
        cover_type_id=_to_id(cover_type_id),
    )


def _page(tab: str, body: str) -> HTMLResponse:
    return HTMLResponse(content=render.render_shell(tab, body))


# calculator


def load_estimator(service: EstimatorService) -> ui.EstimatorState:
    try:
        paper_types, cover_types = service.load_references()
    except BackendError as e:
        logger.error("Error loading estimator reference data: %s", e)
        return ui.estimator_failed(ui.EstimatorState(), ui.MSG_LOAD_FAILED)
    return ui.estimator_loaded(paper_types, cover_types)


def calculator_page() -> HTMLResponse:
    return _page("calculator", render.render_estimator(load_estimator(EstimatorService())))


@router.get("/calculator")
def calculator():
    return calculator_page()


def _calculate(service: EstimatorService, state: ui.EstimatorState) -> ui.EstimatorState:
    try:
        estimate = service.calculate(state.draft)
    except EstimateValidationError as e:
        logger.info("Calculation refused: %s", e.issues)
        return ui.estimate_refused(state)
    except BackendError as e:
        logger.error("Error in calculation: %s", e)
        return ui.estimator_failed(state, ui.MSG_CALCULATION_FAILED)
    return ui.estimate_computed(state, estimate)


async def _save(service: EstimatorService, state: ui.EstimatorState, cover: Optional[UploadFile]) -> ui.EstimatorState:
    try:
        upload = await read_cover(cover)
        project = await run_in_threadpool(service.save, state.draft, upload)
    except MissingRequiredFields as e:
        logger.info("Save refused: %s", e.issues)
        return ui.estimator_failed(state, ui.MSG_REQUIRED_FIELDS)
    except EstimateValidationError as e:
        logger.info("Save refused, estimate not possible: %s", e.issues)
        return ui.estimate_refused(state)
    except InvalidCoverImage as e:
        logger.warning("Rejected cover image: %s", e)
        return ui.estimator_failed(state, ui.MSG_INVALID_IMAGE)
    except BackendError as e:
        logger.error("Error saving project: %s", e)
        return ui.estimator_failed(state, ui.MSG_SAVE_FAILED)
    logger.info("Project saved from calculator id=%s", project.id)
    return ui.project_saved(state)


@router.post("/calculator")
async def calculator_submit(
    action: str = Form("calculate"),
    title: Optional[str] = Form(None),
    author: Optional[str] = Form(None),
    isbn: Optional[str] = Form(None),
    page_count: Optional[str] = Form(None),
    print_run: Optional[str] = Form(None),
    paper_type_id: Optional[str] = Form(None),
    cover_type_id: Optional[str] = Form(None),
    cover: Optional[UploadFile] = File(None),
):
    service = EstimatorService()
    draft = draft_from_form(title, author, isbn, page_count, print_run, paper_type_id, cover_type_id)
    state = ui.with_draft(await run_in_threadpool(load_estimator, service), draft)

    if action == "save":
        state = await _save(service, state, cover)
    else:
        state = await run_in_threadpool(_calculate, service, state)
    return _page("calculator", render.render_estimator(state))


# settings


def load_parameters(backend: PressBackend) -> ui.ParametersState:
    try:
        return ui.parameters_loaded(backend.get_parameters())
    except BackendError as e:
        logger.error("Error loading parameters: %s", e)
        return ui.parameters_unavailable()


@router.get("/settings")
def settings():
    return _page("settings", render.render_parameters(load_parameters(PressBackend())))


@router.post("/settings")
def settings_submit(
    id: Optional[str] = Form(None),
    equipment_depreciation_pct: Optional[str] = Form(None),
    energy_cost_per_kwh: Optional[str] = Form(None),
    author_royalty_pct: Optional[str] = Form(None),
    admin_overhead_pct: Optional[str] = Form(None),
):
    params_id = _to_id(id)
    if params_id is None:
        logger.warning("Parameters form posted without a valid id: %r", id)
        return _page("settings", render.render_parameters(ui.parameters_unavailable()))

    values = ui.ParameterValues(
        id=params_id,
        equipment_depreciation_pct=_to_float(equipment_depreciation_pct),
        energy_cost_per_kwh=_to_float(energy_cost_per_kwh),
        author_royalty_pct=_to_float(author_royalty_pct),
        admin_overhead_pct=_to_float(admin_overhead_pct),
    )
    state = ui.parameters_edited(ui.ParametersState(), values)
    try:
        saved = PressBackend().update_parameters(params_id, values.as_update())
    except BackendError as e:
        logger.error("Error saving parameters: %s", e)
        state = ui.parameters_save_failed(state)
    else:
        state = ui.parameters_saved(state, saved)
    return _page("settings", render.render_parameters(state))


# projects


def load_projects(backend: PressBackend) -> ui.ProjectsState:
    try:
        return ui.projects_loaded(backend.list_projects())
    except BackendError as e:
        logger.error("Error loading projects: %s", e)
        return ui.projects_unavailable()


@router.get("/projects")
def projects():
    return _page("projects", render.render_projects(load_projects(PressBackend())))


@router.post("/projects/{project_id}/delete")
def project_delete(project_id: int, confirm: Optional[str] = Form(None)):
    """First post asks for confirmation; a post with confirm=yes deletes."""
    backend = PressBackend()
    state = load_projects(backend)
    if confirm != "yes":
        state = ui.delete_requested(state, project_id)
        return _page("projects", render.render_projects(state))

    try:
        backend.delete_project(project_id)
    except BackendError as e:
        logger.error("Error deleting project id=%s: %s", project_id, e)
        state = ui.delete_failed(state)
    else:
        state = ui.project_removed(state, project_id)
    return _page("projects", render.render_projects(state))
