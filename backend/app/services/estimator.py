import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from app.models.project import Project, ProjectDraft
from app.services.backend import PressBackend, RecordNotFound
from app.services.pricing import CostEngine, CostEstimate, EstimateValidationError
from app.services.validation import Validator
from app.utils.image_check import InvalidCoverImage, inspect_image

logger = logging.getLogger(__name__)


class MissingRequiredFields(EstimateValidationError):
    """Title, page count or print run missing when saving a project."""


@dataclass(frozen=True)
class CoverUpload:
    filename: Optional[str]
    content_type: Optional[str]
    content: bytes


class EstimatorService:
    """Calculate and save book projects from an estimator draft."""

    def __init__(
        self,
        backend: Optional[PressBackend] = None,
        engine: Optional[CostEngine] = None,
        validator: Optional[Validator] = None,
    ):
        self.backend = backend or PressBackend()
        self.engine = engine or CostEngine()
        self.validator = validator or Validator()

    def load_references(self) -> Tuple[list, list]:
        return self.backend.list_paper_types(), self.backend.list_cover_types()

    def calculate(self, draft: ProjectDraft) -> CostEstimate:
        issues = self.validator.validate_for_estimate(draft)
        if issues:
            logger.info("Estimate refused issues=%s", issues)
            raise EstimateValidationError(issues)

        paper = self.backend.get_paper_type(draft.paper_type_id)
        cover = self.backend.get_cover_type(draft.cover_type_id)
        try:
            params = self.backend.get_parameters()
        except RecordNotFound:
            params = None

        estimate = self.engine.estimate(draft.page_count, draft.print_run, paper, cover, params)
        logger.info(
            "Estimated pages=%s run=%s total=%.2f price=%.2f",
            draft.page_count, draft.print_run, estimate.total_cost, estimate.suggested_price,
        )
        return estimate

    def check_cover(self, cover: CoverUpload) -> str:
        """Reject non-image uploads; return the format Pillow decoded."""
        issues = self.validator.validate_cover(cover.filename, cover.content_type)
        if issues:
            raise InvalidCoverImage(",".join(issues))
        fmt, size = inspect_image(cover.content)
        logger.debug("Cover image format=%s size=%s", fmt, size)
        return fmt

    def save(self, draft: ProjectDraft, cover: Optional[CoverUpload] = None) -> Project:
        """Validate, price, upload the cover (if any) and insert the project.

        Totals are always recomputed from the draft, never taken from the client.
        """
        issues = self.validator.validate_for_save(draft)
        if issues:
            logger.info("Save refused issues=%s", issues)
            raise MissingRequiredFields(issues)
        image_format = None
        if cover is not None:
            image_format = self.check_cover(cover)

        estimate = self.calculate(draft)

        cover_url = None
        if cover is not None:
            cover_url = self.backend.upload_cover(
                cover.content, cover.filename, cover.content_type, image_format=image_format
            )

        project = Project(
            title=draft.title.strip(),
            author=draft.author or None,
            isbn=draft.isbn or None,
            page_count=draft.page_count,
            print_run=draft.print_run,
            paper_type_id=draft.paper_type_id,
            cover_type_id=draft.cover_type_id,
            cover_image_url=cover_url,
            estimated_cost=estimate.total_cost,
            suggested_price=estimate.suggested_price,
        )
        return self.backend.insert_project(project)
