"""
Tests for draft validation.
"""

from __future__ import annotations

from app.models.project import ProjectDraft
from app.services.validation import Validator


def test_complete_draft_passes_both_checks() -> None:
    draft = ProjectDraft(title="Atlas", page_count=120, print_run=300, paper_type_id=1, cover_type_id=2)
    v = Validator()
    assert v.validate_for_estimate(draft) == []
    assert v.validate_for_save(draft) == []


def test_estimate_needs_materials_and_counts() -> None:
    issues = Validator().validate_for_estimate(ProjectDraft(title="Atlas"))
    assert issues == ["invalid_page_count", "invalid_print_run", "missing_cover_type", "missing_paper_type"]


def test_save_needs_title_and_counts_but_not_materials() -> None:
    v = Validator()
    assert v.validate_for_save(ProjectDraft(title="  ", page_count=10, print_run=5)) == ["missing_title"]
    assert v.validate_for_save(ProjectDraft(title="Atlas", page_count=0, print_run=5)) == ["invalid_page_count"]
    assert v.validate_for_save(ProjectDraft(title="Atlas", page_count=10, print_run=5)) == []


def test_cover_must_be_image() -> None:
    v = Validator()
    assert v.validate_cover("cover.png", "image/png") == []
    assert v.validate_cover("notes.txt", "text/plain") == ["unsupported_cover_type:text/plain"]
    assert v.validate_cover("cover", None) == ["unsupported_cover_type:unknown"]
