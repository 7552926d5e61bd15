from dexkeep.models.card import CardRecord, ElementType, Rarity
from dexkeep.models.collection import Collection, CollectionEntry, Condition
from dexkeep.models.deck import (
    DeckFormat,
    DeckSuggestion,
    Difficulty,
    MetaAnalysis,
    MetaShare,
    MetaTier,
    Playstyle,
    SuggestedDeck,
    TournamentResult,
)
from dexkeep.models.failure import (
    ApiResponse,
    CardNotInCatalogError,
    CatalogEmptyError,
    EmptyImageError,
    EntryNotFoundError,
    FailureDetail,
    FailureKind,
    IdentificationServiceError,
    InvalidArgumentError,
    InvalidInputError,
    KnownError,
    OutcomeType,
    RequestInProgressError,
)

__all__ = [
    "ApiResponse",
    "CardNotInCatalogError",
    "CardRecord",
    "CatalogEmptyError",
    "Collection",
    "CollectionEntry",
    "Condition",
    "DeckFormat",
    "DeckSuggestion",
    "Difficulty",
    "ElementType",
    "EmptyImageError",
    "EntryNotFoundError",
    "FailureDetail",
    "FailureKind",
    "IdentificationServiceError",
    "InvalidArgumentError",
    "InvalidInputError",
    "KnownError",
    "MetaAnalysis",
    "MetaShare",
    "MetaTier",
    "OutcomeType",
    "Playstyle",
    "Rarity",
    "RequestInProgressError",
    "SuggestedDeck",
    "TournamentResult",
]
