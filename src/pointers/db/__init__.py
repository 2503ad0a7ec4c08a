"""Database configuration and utilities."""

from .session import Base, SessionLocal, engine, get_db, make_engine
from .types import ULIDType

__all__ = ["Base", "SessionLocal", "ULIDType", "engine", "get_db", "make_engine"]
