"""Utility script to create the document-store schema for DATABASE_URL."""
from __future__ import annotations

from sqlalchemy.exc import SQLAlchemyError

from animalsos.core.config import get_settings

from .session import Base, create_db_engine
from . import models  # noqa: F401  # ensure models are imported for metadata


def create_all(url: str | None = None) -> None:
    engine = create_db_engine(url if url is not None else get_settings().database_url)
    try:
        Base.metadata.create_all(bind=engine)
    finally:
        engine.dispose()


if __name__ == "__main__":
    try:
        create_all()
        print("Database tables created successfully.")
    except SQLAlchemyError as exc:
        raise SystemExit(f"Failed to create tables: {exc}") from exc
