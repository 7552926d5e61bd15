from dexkeep.db.database import get_session, init_db
from dexkeep.db.operations import (
    add_collection_entry,
    collection_to_model,
    entry_to_model,
    get_collection,
    get_or_create_collection,
    remove_collection_entry,
    update_collection_entry,
)

__all__ = [
    "add_collection_entry",
    "collection_to_model",
    "entry_to_model",
    "get_collection",
    "get_or_create_collection",
    "get_session",
    "init_db",
    "remove_collection_entry",
    "update_collection_entry",
]
