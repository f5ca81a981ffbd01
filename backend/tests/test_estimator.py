"""
Tests for EstimatorService: calculating and saving projects from drafts.
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest
from sqlmodel import select

from app.db.session import get_session
from app.models.parameters import CostParameters
from app.models.project import ProjectDraft
from app.services.backend import BackendError, PressBackend
from app.services.estimator import CoverUpload, EstimatorService, MissingRequiredFields
from app.services.pricing import EstimateValidationError
from app.utils.image_check import InvalidCoverImage


def _ids(backend: PressBackend) -> tuple[int, int]:
    paper = next(p for p in backend.list_paper_types() if p.name == "Bond 90 g")
    cover = next(c for c in backend.list_cover_types() if c.name == "Spiral")
    return paper.id, cover.id


@pytest.fixture
def service(backend: PressBackend, seeded: None) -> EstimatorService:
    return EstimatorService(backend=backend)


@pytest.fixture
def draft(backend: PressBackend, seeded: None) -> ProjectDraft:
    paper_id, cover_id = _ids(backend)
    return ProjectDraft(
        title="Tropical Botany",
        page_count=200,
        print_run=1000,
        paper_type_id=paper_id,
        cover_type_id=cover_id,
    )


def test_calculate_uses_stored_materials_and_parameters(service: EstimatorService, draft: ProjectDraft) -> None:
    e = service.calculate(draft)
    assert e.total_cost == pytest.approx(15660)
    assert e.suggested_price == pytest.approx(21924)


def test_calculate_refuses_incomplete_draft(service: EstimatorService, draft: ProjectDraft) -> None:
    with pytest.raises(EstimateValidationError) as exc:
        service.calculate(draft.model_copy(update={"cover_type_id": None, "print_run": 0}))
    assert exc.value.issues == ["invalid_print_run", "missing_cover_type"]


def test_calculate_refuses_unknown_material(service: EstimatorService, draft: ProjectDraft) -> None:
    with pytest.raises(EstimateValidationError) as exc:
        service.calculate(draft.model_copy(update={"paper_type_id": 9999}))
    assert exc.value.issues == ["missing_paper_type"]


def test_calculate_without_parameters_row(service: EstimatorService, draft: ProjectDraft) -> None:
    session = get_session()
    try:
        for row in session.exec(select(CostParameters)).all():
            session.delete(row)
        session.commit()
    finally:
        session.close()

    with pytest.raises(EstimateValidationError) as exc:
        service.calculate(draft)
    assert exc.value.issues == ["missing_parameters"]


def test_save_persists_computed_totals(service: EstimatorService, backend: PressBackend, draft: ProjectDraft) -> None:
    project = service.save(draft)

    assert project.id is not None
    rows = backend.list_projects()
    assert len(rows) == 1
    row = rows[0]
    assert row.title == "Tropical Botany"
    assert row.author is None and row.isbn is None
    assert row.estimated_cost == pytest.approx(15660)
    assert row.suggested_price == pytest.approx(21924)
    assert row.paper_type_name == "Bond 90 g"
    assert row.cover_type_name == "Spiral"


def test_save_requires_title(service: EstimatorService, backend: PressBackend, draft: ProjectDraft) -> None:
    with pytest.raises(MissingRequiredFields) as exc:
        service.save(draft.model_copy(update={"title": ""}))
    assert exc.value.issues == ["missing_title"]
    assert backend.list_projects() == []


def test_save_with_cover_stores_url(
    service: EstimatorService, backend: PressBackend, draft: ProjectDraft, png_bytes: bytes, storage_root: Path
) -> None:
    project = service.save(draft, CoverUpload("front.png", "image/png", png_bytes))

    assert project.cover_image_url.startswith("/storage/covers/covers/")
    assert backend.list_projects()[0].cover_image_url == project.cover_image_url
    assert len(list((storage_root / "covers" / "covers").iterdir())) == 1


def test_save_names_cover_after_decoded_format(
    service: EstimatorService, backend: PressBackend, draft: ProjectDraft, png_bytes: bytes, storage_root: Path
) -> None:
    cover = CoverUpload("cover", "image/../../fixed", png_bytes)

    first = service.save(draft, cover)
    second = service.save(draft, cover)

    assert first.cover_image_url != second.cover_image_url
    for project in (first, second):
        assert "/.." not in project.cover_image_url
        assert project.cover_image_url.endswith(".png")
    assert len(list((storage_root / "covers" / "covers").iterdir())) == 2
    assert len(backend.list_projects()) == 2


def test_save_rejects_non_image_before_upload(
    service: EstimatorService, backend: PressBackend, draft: ProjectDraft, storage_root: Path
) -> None:
    with pytest.raises(InvalidCoverImage):
        service.save(draft, CoverUpload("notes.txt", "text/plain", b"hello"))
    with pytest.raises(InvalidCoverImage):
        service.save(draft, CoverUpload("fake.png", "image/png", b"not really a png"))

    assert backend.list_projects() == []
    assert not (storage_root / "covers").exists()


def test_save_propagates_backend_failure(draft: ProjectDraft, backend: PressBackend) -> None:
    failing = MagicMock(wraps=backend)
    failing.insert_project.side_effect = BackendError("insert_project failed")
    service = EstimatorService(backend=failing)

    with pytest.raises(BackendError):
        service.save(draft)
    assert backend.list_projects() == []
