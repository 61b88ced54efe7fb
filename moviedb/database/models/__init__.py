# moviedb/database/models/__init__.py

from moviedb.database.core.main import Base
from moviedb.database.models.kv_entry import KeyValueEntry

__all__ = [
    "Base",
    "KeyValueEntry",
]
