from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from dexkeep.models.card import ElementType


class DeckFormat(str, Enum):
    """Play format a deck is built for."""

    STANDARD = "Standard"
    EXPANDED = "Expanded"
    CASUAL = "Casual"


class Playstyle(str, Enum):
    """Preferred way of playing, chosen by the user."""

    AGGRESSIVE = "aggressive"
    CONTROL = "control"
    COMBO = "combo"
    MIDRANGE = "midrange"


class Difficulty(str, Enum):
    """How hard a deck is to pilot."""

    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"


class MetaTier(str, Enum):
    """Competitive standing of a deck archetype."""

    TIER_1 = "Tier 1"
    TIER_2 = "Tier 2"
    TIER_3 = "Tier 3"
    ROGUE = "Rogue"


@dataclass(frozen=True, slots=True)
class DeckSuggestion:
    """
    A suggested deck.

    Attributes:
        id: Suggestion identifier
        name: Deck name (e.g., "Charizard ex Aggro")
        format: Format the deck is legal in
        archetype: Play pattern label (Aggro, Control, ...)
        win_rate: Tournament win rate as a percentage (0-100)
        difficulty: How hard the deck is to pilot
        meta_tier: Competitive tier
        key_cards: Names of the cards the deck is built around, in display order
        description: One-paragraph summary
        total_cost: Market price of the full list
        cards_owned: Cards of the list already in the collection
        cards_needed: Cards still missing
    """

    id: str
    name: str
    format: DeckFormat
    archetype: str
    win_rate: int
    difficulty: Difficulty
    meta_tier: MetaTier
    key_cards: tuple[str, ...]
    description: str
    total_cost: Decimal
    cards_owned: int
    cards_needed: int

    def total_cards(self) -> int:
        """Size of the full deck list."""
        return self.cards_owned + self.cards_needed


@dataclass(frozen=True, slots=True)
class SuggestedDeck:
    """A deck suggestion with how much of it the user already owns."""

    deck: DeckSuggestion
    completion_percentage: int


@dataclass(frozen=True, slots=True)
class MetaShare:
    """Share of the tournament field played by one elemental type."""

    element_type: ElementType
    share_percentage: int


@dataclass(frozen=True, slots=True)
class TournamentResult:
    """A top finish in recent tournaments."""

    deck_name: str
    placement: str


@dataclass(frozen=True, slots=True)
class MetaAnalysis:
    """Snapshot of the current competitive metagame."""

    period_days: int
    shares: tuple[MetaShare, ...]
    top_results: tuple[TournamentResult, ...]
