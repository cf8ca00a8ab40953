"""Database package."""
from hoa_intake.db.base import Base
from hoa_intake.db.session import AsyncSessionLocal, get_session

__all__ = ["Base", "AsyncSessionLocal", "get_session"]
