from dexkeep.api.collection import router as collection_router
from dexkeep.api.decks import router as decks_router
from dexkeep.api.health import router as health_router
from dexkeep.api.scanner import router as scanner_router

__all__ = [
    "collection_router",
    "decks_router",
    "health_router",
    "scanner_router",
]
