from skillroute.db.database import create_db_engine, get_engine, init_db, make_session_factory, session_scope
from skillroute.db.models import Base, ReviewItemRecord
from skillroute.db.repository import ItemStore, ReviewItemRepository

__all__ = [
    "Base",
    "ReviewItemRecord",
    "ItemStore",
    "ReviewItemRepository",
    "create_db_engine",
    "get_engine",
    "init_db",
    "make_session_factory",
    "session_scope",
]
