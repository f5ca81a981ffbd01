from typing import List, Optional

from app.models.project import ProjectDraft


class Validator:
    """Validation of estimator drafts before any backend call.

    Rules:
    - calculating needs a paper type, a cover type, and positive page count and print run
    - saving needs a title, a positive page count and a positive print run
    - a cover upload must declare an image/* content type

    Issues are returned sorted so callers and tests see a stable order.
    """

    def _add_issue(self, issues: List[str], issue: str) -> None:
        if issue not in issues:
            issues.append(issue)

    def _check_counts(self, draft: ProjectDraft, issues: List[str]) -> None:
        if draft.page_count <= 0:
            self._add_issue(issues, "invalid_page_count")
        if draft.print_run <= 0:
            self._add_issue(issues, "invalid_print_run")

    def validate_for_estimate(self, draft: ProjectDraft) -> List[str]:
        issues: List[str] = []
        if draft.paper_type_id is None:
            self._add_issue(issues, "missing_paper_type")
        if draft.cover_type_id is None:
            self._add_issue(issues, "missing_cover_type")
        self._check_counts(draft, issues)
        return sorted(issues)

    def validate_for_save(self, draft: ProjectDraft) -> List[str]:
        issues: List[str] = []
        if not draft.title.strip():
            self._add_issue(issues, "missing_title")
        self._check_counts(draft, issues)
        return sorted(issues)

    def validate_cover(self, filename: Optional[str], content_type: Optional[str]) -> List[str]:
        issues: List[str] = []
        if not filename:
            self._add_issue(issues, "missing_cover_filename")
        if not (content_type or "").startswith("image/"):
            self._add_issue(issues, f"unsupported_cover_type:{content_type or 'unknown'}")
        return sorted(issues)
