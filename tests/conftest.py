"""
Pytest configuration for the cheese shop service.

Provides fixtures for:
- A temporary catalog data file and the gateway that writes it
- Initialised stores with a fixed clock
- A FastAPI test client whose lifespan points at the temporary file
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Generator

import pytest
from fastapi.testclient import TestClient

from cheese_shop.catalog.errors import PersistenceError
from cheese_shop.catalog.storage import CatalogFile
from cheese_shop.catalog.store import CatalogStore
from cheese_shop.config import Settings
from cheese_shop.main import create_app

FIXED_NOW = datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)


class FlakyCatalogFile(CatalogFile):
    """A ``CatalogFile`` whose saves can be made to fail on demand."""

    def __init__(self, path: Path):
        super().__init__(path)
        self.fail_saves = False
        self.saves = 0

    def save(self, cheeses) -> None:
        if self.fail_saves:
            raise PersistenceError(f"unable to write {self.path}")
        self.saves += 1
        super().save(cheeses)


@pytest.fixture
def data_file(tmp_path: Path) -> Path:
    return tmp_path / "data" / "cheeses.json"


@pytest.fixture
def catalog_file(data_file: Path) -> FlakyCatalogFile:
    return FlakyCatalogFile(data_file)


@pytest.fixture
def store(catalog_file: FlakyCatalogFile) -> CatalogStore:
    """A store initialised from a missing file, i.e. holding the seed."""
    s = CatalogStore(catalog_file, clock=lambda: FIXED_NOW)
    s.init()
    return s


@pytest.fixture
def settings(data_file: Path) -> Settings:
    return Settings(data_file=data_file, log_level="DEBUG")


@pytest.fixture
def client(settings: Settings) -> Generator[TestClient, None, None]:
    with TestClient(create_app(settings)) as c:
        yield c


@pytest.fixture
def now() -> datetime:
    return FIXED_NOW
