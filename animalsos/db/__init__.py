"""Database helpers (engine/session factories and document tables)."""

from .session import Base, create_db_engine, make_sessionmaker

__all__ = ["Base", "create_db_engine", "make_sessionmaker"]
