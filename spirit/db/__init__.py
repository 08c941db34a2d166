from spirit.db.models import Base, Reflection
from spirit.db.database import build_engine, build_session_maker, init_db, drop_db

__all__ = [
    "Base",
    "Reflection",
    "build_engine",
    "build_session_maker",
    "init_db",
    "drop_db",
]
