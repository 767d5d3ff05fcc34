"""Hub database access - engine and sessions."""

from src.funnelhub.core.db.engine import dispose_engine, get_engine
from src.funnelhub.core.db.session import get_session

__all__ = [
    "dispose_engine",
    "get_engine",
    "get_session",
]
