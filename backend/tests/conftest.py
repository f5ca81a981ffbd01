"""
Shared fixtures: a throwaway SQLite database and local storage bucket per test.
"""

from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import Iterator

import pytest
from PIL import Image
from sqlmodel import SQLModel

from app.db.seed import seed_reference_data
from app.db.session import get_engine, reset_engine
from app.models import catalog, parameters, project  # noqa: F401  (registers tables)
from app.services.backend import PressBackend
from app.services.storage import LocalBucket


@pytest.fixture
def storage_root(tmp_path: Path) -> Path:
    return tmp_path / "storage"


@pytest.fixture
def db(tmp_path: Path, storage_root: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'press.db'}")
    monkeypatch.setenv("STORAGE_ROOT", str(storage_root))
    monkeypatch.delenv("STORAGE_URL", raising=False)
    reset_engine()
    SQLModel.metadata.create_all(get_engine())
    yield
    reset_engine()


@pytest.fixture
def seeded(db: None) -> None:
    seed_reference_data()


@pytest.fixture
def backend(db: None, storage_root: Path) -> PressBackend:
    return PressBackend(storage=LocalBucket(str(storage_root), "covers"))


@pytest.fixture
def png_bytes() -> bytes:
    buf = BytesIO()
    Image.new("RGB", (16, 24), color=(200, 30, 30)).save(buf, "PNG")
    return buf.getvalue()
