"""Immutable per-screen view state.

Each screen state is a frozen record. Transitions are plain functions that
return a new record; the render functions in ``app.ui.render`` only read
them.
"""
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Optional, Sequence, Tuple

from app.models.catalog import CoverType, PaperType
from app.models.parameters import CostParameters, CostParametersUpdate
from app.models.project import ProjectDraft, ProjectRead
from app.services.pricing import CostEstimate

SUCCESS = "success"
ERROR = "error"

# estimator
MSG_LOAD_FAILED = "Failed to load the initial data"
MSG_MISSING_DATA = "Missing data to perform the calculation"
MSG_CALCULATED = "Calculation completed successfully"
MSG_CALCULATION_FAILED = "Failed to perform the calculation"
MSG_REQUIRED_FIELDS = "Please fill in the required fields"
MSG_INVALID_IMAGE = "Please select a valid image file"
MSG_PROJECT_SAVED = "Project saved successfully"
MSG_SAVE_FAILED = "Failed to save the project"
# parameters
MSG_PARAMETERS_LOAD_FAILED = "Could not load the cost parameters"
MSG_PARAMETERS_SAVED = "Parameters updated successfully"
MSG_PARAMETERS_SAVE_FAILED = "Failed to save the parameters"
# projects
MSG_PROJECTS_LOAD_FAILED = "Failed to load the projects"
MSG_PROJECT_DELETED = "Project deleted successfully"
MSG_DELETE_FAILED = "Failed to delete the project"


@dataclass(frozen=True)
class Notification:
    level: str
    message: str


def success(message: str) -> Notification:
    return Notification(SUCCESS, message)


def error(message: str) -> Notification:
    return Notification(ERROR, message)


@dataclass(frozen=True)
class EstimatorState:
    draft: ProjectDraft = field(default_factory=ProjectDraft)
    paper_types: Tuple[PaperType, ...] = ()
    cover_types: Tuple[CoverType, ...] = ()
    estimate: Optional[CostEstimate] = None
    notification: Optional[Notification] = None


def estimator_loaded(paper_types: Sequence[PaperType], cover_types: Sequence[CoverType]) -> EstimatorState:
    return EstimatorState(paper_types=tuple(paper_types), cover_types=tuple(cover_types))


def with_draft(state: EstimatorState, draft: ProjectDraft) -> EstimatorState:
    return replace(state, draft=draft)


def estimate_computed(state: EstimatorState, estimate: CostEstimate) -> EstimatorState:
    return replace(state, estimate=estimate, notification=success(MSG_CALCULATED))


def estimate_refused(state: EstimatorState, message: str = MSG_MISSING_DATA) -> EstimatorState:
    return replace(state, estimate=None, notification=error(message))


def project_saved(state: EstimatorState) -> EstimatorState:
    return replace(state, draft=ProjectDraft(), estimate=None, notification=success(MSG_PROJECT_SAVED))


def estimator_failed(state: EstimatorState, message: str) -> EstimatorState:
    # the draft stays as the user left it
    return replace(state, notification=error(message))


@dataclass(frozen=True)
class ParameterValues:
    id: int
    equipment_depreciation_pct: float
    energy_cost_per_kwh: float
    author_royalty_pct: float
    admin_overhead_pct: float
    updated_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, params: CostParameters) -> "ParameterValues":
        return cls(
            id=params.id,
            equipment_depreciation_pct=params.equipment_depreciation_pct,
            energy_cost_per_kwh=params.energy_cost_per_kwh,
            author_royalty_pct=params.author_royalty_pct,
            admin_overhead_pct=params.admin_overhead_pct,
            updated_at=params.updated_at,
        )

    def as_update(self) -> CostParametersUpdate:
        return CostParametersUpdate(
            equipment_depreciation_pct=self.equipment_depreciation_pct,
            energy_cost_per_kwh=self.energy_cost_per_kwh,
            author_royalty_pct=self.author_royalty_pct,
            admin_overhead_pct=self.admin_overhead_pct,
        )


@dataclass(frozen=True)
class ParametersState:
    values: Optional[ParameterValues] = None
    notification: Optional[Notification] = None


def parameters_loaded(params: CostParameters) -> ParametersState:
    return ParametersState(values=ParameterValues.from_record(params))


def parameters_unavailable() -> ParametersState:
    return ParametersState(values=None, notification=error(MSG_PARAMETERS_LOAD_FAILED))


def parameters_edited(state: ParametersState, values: ParameterValues) -> ParametersState:
    return replace(state, values=values, notification=None)


def parameters_saved(state: ParametersState, params: CostParameters) -> ParametersState:
    return replace(state, values=ParameterValues.from_record(params), notification=success(MSG_PARAMETERS_SAVED))


def parameters_save_failed(state: ParametersState) -> ParametersState:
    return replace(state, notification=error(MSG_PARAMETERS_SAVE_FAILED))


@dataclass(frozen=True)
class ProjectsState:
    projects: Tuple[ProjectRead, ...] = ()
    pending_delete: Optional[int] = None
    notification: Optional[Notification] = None


def projects_loaded(projects: Sequence[ProjectRead]) -> ProjectsState:
    return ProjectsState(projects=tuple(projects))


def projects_unavailable() -> ProjectsState:
    return ProjectsState(notification=error(MSG_PROJECTS_LOAD_FAILED))


def delete_requested(state: ProjectsState, project_id: int) -> ProjectsState:
    return replace(state, pending_delete=project_id, notification=None)


def project_removed(state: ProjectsState, project_id: int) -> ProjectsState:
    remaining = tuple(p for p in state.projects if p.id != project_id)
    return replace(state, projects=remaining, pending_delete=None, notification=success(MSG_PROJECT_DELETED))


def delete_failed(state: ProjectsState) -> ProjectsState:
    return replace(state, pending_delete=None, notification=error(MSG_DELETE_FAILED))
