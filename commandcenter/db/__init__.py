"""Database package."""

from commandcenter.db.base import Base, BaseModel
from commandcenter.db.session import DBSession, get_db_session

__all__ = ["Base", "BaseModel", "DBSession", "get_db_session"]
