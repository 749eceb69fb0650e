from __future__ import annotations

import dataclasses
import sys
from pathlib import Path

import pytest

# Make the animalsos package importable when running from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from animalsos.core import config as core_config  # noqa: E402
from animalsos.repositories.document_storage import DocumentStorage  # noqa: E402
from animalsos.repositories.memory_storage import MemoryStorage  # noqa: E402


@pytest.fixture()
def memory_storage():
    storage = MemoryStorage(seed_data=False)
    yield storage
    storage.close()


@pytest.fixture()
def document_storage(tmp_path):
    """Document store on a temporary SQLite file, disposed after the test."""
    storage = DocumentStorage.connect(f"sqlite:///{tmp_path / 'documents.db'}")
    yield storage
    storage.close()


@pytest.fixture(params=["memory", "document"])
def storage(request, tmp_path):
    """Runs the test once per backend; both must behave the same."""
    if request.param == "memory":
        backend = MemoryStorage(seed_data=False)
    else:
        backend = DocumentStorage.connect(f"sqlite:///{tmp_path / 'contract.db'}")
    yield backend
    backend.close()


@pytest.fixture()
def settings(monkeypatch):
    """Fresh Settings for the dev defaults, with the cache cleared before and after."""
    for name in ("STORAGE_BACKEND", "DATABASE_URL", "SEED_SAMPLE_DATA", "SEED_ADMIN_PASSWORD", "CORS_ORIGINS"):
        monkeypatch.delenv(name, raising=False)
    core_config.get_settings.cache_clear()
    yield dataclasses.replace(core_config.get_settings(), log_level="WARNING")
    core_config.get_settings.cache_clear()
