from .database import Database
from .models import RangeResult, Session, SessionBounds, SessionType
from .repository import SessionRepository
from .store import AsyncSessionStore

__all__ = [
    "Database", "Session", "SessionBounds", "SessionType", "RangeResult",
    "SessionRepository", "AsyncSessionStore",
]
