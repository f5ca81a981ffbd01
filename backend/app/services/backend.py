"""Generic data access for the press estimator.

``PressBackend`` is the single seam between the screens/API and the
persistence and storage services. Every call opens its own session and
closes it before returning; database and storage failures are logged here
and re-raised as ``BackendError``.
"""
import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Callable, Iterator, List, Optional

from sqlalchemy.exc import MultipleResultsFound, NoResultFound, SQLAlchemyError
from sqlmodel import Session, col, select

from app.db.session import get_session
from app.models.catalog import CoverType, PaperType
from app.models.parameters import CostParameters, CostParametersUpdate
from app.models.project import Project, ProjectRead
from app.services.storage import StorageError, get_storage, unique_object_path

logger = logging.getLogger(__name__)


class BackendError(Exception):
    pass


class RecordNotFound(BackendError):
    pass


class PressBackend:
    def __init__(self, session_factory: Callable[[], Session] = get_session, storage=None):
        self.session_factory = session_factory
        self.storage = storage if storage is not None else get_storage()

    @contextmanager
    def _session(self, action: str) -> Iterator[Session]:
        session = self.session_factory()
        try:
            yield session
        except SQLAlchemyError as e:
            session.rollback()
            logger.exception("Backend call failed action=%s: %s", action, e)
            raise BackendError(f"{action} failed") from e
        finally:
            session.close()

    # reference data

    def list_paper_types(self) -> List[PaperType]:
        with self._session("list_paper_types") as session:
            return list(session.exec(select(PaperType).order_by(col(PaperType.name))).all())

    def list_cover_types(self) -> List[CoverType]:
        with self._session("list_cover_types") as session:
            return list(session.exec(select(CoverType).order_by(col(CoverType.name))).all())

    def get_paper_type(self, paper_type_id: int) -> Optional[PaperType]:
        with self._session("get_paper_type") as session:
            return session.get(PaperType, paper_type_id)

    def get_cover_type(self, cover_type_id: int) -> Optional[CoverType]:
        with self._session("get_cover_type") as session:
            return session.get(CoverType, cover_type_id)

    # parameters

    def get_parameters(self) -> CostParameters:
        """Return the single parameters row; zero or several rows is an error."""
        with self._session("get_parameters") as session:
            try:
                return session.exec(select(CostParameters)).one()
            except NoResultFound as e:
                logger.warning("No cost parameters row found")
                raise RecordNotFound("cost parameters not found") from e
            except MultipleResultsFound as e:
                logger.error("More than one cost parameters row found")
                raise BackendError("cost parameters are not unique") from e

    def update_parameters(self, parameters_id: int, values: CostParametersUpdate) -> CostParameters:
        with self._session("update_parameters") as session:
            params = session.get(CostParameters, parameters_id)
            if params is None:
                logger.warning("Update requested for missing parameters id=%s", parameters_id)
                raise RecordNotFound(f"cost parameters {parameters_id} not found")
            params.equipment_depreciation_pct = values.equipment_depreciation_pct
            params.energy_cost_per_kwh = values.energy_cost_per_kwh
            params.author_royalty_pct = values.author_royalty_pct
            params.admin_overhead_pct = values.admin_overhead_pct
            params.updated_at = datetime.now(timezone.utc)
            session.add(params)
            session.commit()
            session.refresh(params)
            logger.info("Cost parameters updated id=%s", params.id)
            return params

    # projects

    def insert_project(self, project: Project) -> Project:
        with self._session("insert_project") as session:
            session.add(project)
            session.commit()
            session.refresh(project)
            logger.info("Created project id=%s title=%s", project.id, project.title)
            return project

    def list_projects(self) -> List[ProjectRead]:
        stmt = (
            select(Project, PaperType.name, CoverType.name)
            .outerjoin(PaperType, col(Project.paper_type_id) == col(PaperType.id))
            .outerjoin(CoverType, col(Project.cover_type_id) == col(CoverType.id))
            .order_by(col(Project.created_at).desc(), col(Project.id).desc())
        )
        with self._session("list_projects") as session:
            rows = session.exec(stmt).all()
            return [
                ProjectRead(**project.model_dump(), paper_type_name=paper_name, cover_type_name=cover_name)
                for project, paper_name, cover_name in rows
            ]

    def delete_project(self, project_id: int) -> None:
        with self._session("delete_project") as session:
            project = session.get(Project, project_id)
            if project is None:
                logger.warning("Delete requested for missing project id=%s", project_id)
                raise RecordNotFound(f"project {project_id} not found")
            session.delete(project)
            session.commit()
            logger.info("Deleted project id=%s", project_id)

    # storage

    def upload_cover(
        self,
        content: bytes,
        filename: Optional[str],
        content_type: Optional[str],
        image_format: Optional[str] = None,
    ) -> str:
        """Store a cover image under a fresh unique path and return its public URL."""
        path = unique_object_path(filename, content_type, image_format=image_format)
        try:
            self.storage.upload(path, content, content_type)
        except StorageError as e:
            raise BackendError("cover upload failed") from e
        return self.storage.public_url(path)
