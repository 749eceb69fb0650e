"""
Persistence adapters.

Two interchangeable backends implement ``Storage``: an in-memory one for
development and a document store backed by SQLAlchemy. ``create_storage`` is
the only place that picks one; services and routers receive the instance.
"""
from __future__ import annotations

import logging

from animalsos.core.config import STORAGE_DOCUMENT, STORAGE_MEMORY, Settings
from animalsos.core.security import hash_password
from animalsos.repositories import seed
from animalsos.repositories.base import Storage
from animalsos.repositories.document_storage import DocumentStorage
from animalsos.repositories.memory_storage import MemoryStorage
from animalsos.services.session_store import MemorySessionStore

logger = logging.getLogger(__name__)

__all__ = ["Storage", "MemoryStorage", "DocumentStorage", "create_storage"]


def create_storage(settings: Settings) -> Storage:
    """Build the storage backend named by ``settings.storage_backend``."""
    backend = settings.storage_backend
    if backend == STORAGE_MEMORY:
        storage: Storage = MemoryStorage(
            seed_data=settings.seed_sample_data,
            admin_password=settings.seed_admin_password,
            session_store=MemorySessionStore(
                ttl_seconds=settings.session_ttl_seconds,
                check_period=settings.session_prune_interval_seconds,
            ),
        )
    elif backend == STORAGE_DOCUMENT:
        storage = DocumentStorage.connect(
            settings.database_url,
            session_ttl_seconds=settings.session_ttl_seconds,
            session_check_period=settings.session_prune_interval_seconds,
        )
        if settings.seed_sample_data:
            storage.seed_vets()
            if storage.get_user_by_username(seed.ADMIN_USERNAME) is None:
                storage.create_user(seed.admin_user(hash_password(settings.seed_admin_password)))
                logger.info("Created initial admin account")
    else:
        raise RuntimeError(f"Unknown STORAGE_BACKEND {backend!r}; expected 'memory' or 'document'.")
    logger.info("Using %s storage backend", storage.backend_name)
    return storage
