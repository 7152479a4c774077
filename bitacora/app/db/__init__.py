from bitacora.app.db.base import Base, is_object_id, new_object_id
from bitacora.app.db.session import Database, get_db

__all__ = [
    "Base",
    "Database",
    "get_db",
    "is_object_id",
    "new_object_id",
]
