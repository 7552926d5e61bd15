"""
Deck suggestions for demo mode.

Returns a curated list of Standard decks with how much of each the user
already owns, plus a snapshot of the current metagame.

The suggestions do not yet depend on the requested format or playstyle.
Both are validated so callers get the same errors they will get once
ranking is implemented.
"""

import asyncio
import logging
from decimal import Decimal

from dexkeep.config import settings
from dexkeep.models.card import ElementType
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
from dexkeep.models.failure import InvalidArgumentError
from dexkeep.services.collection_query import completion_percentage

logger = logging.getLogger(__name__)

DECK_SUGGESTIONS: tuple[DeckSuggestion, ...] = (
    DeckSuggestion(
        id="1",
        name="Pikachu ex Control",
        format=DeckFormat.STANDARD,
        archetype="Control",
        win_rate=68,
        difficulty=Difficulty.INTERMEDIATE,
        meta_tier=MetaTier.TIER_1,
        key_cards=("Pikachu ex", "Professor's Research", "Ultra Ball", "Electric Generator"),
        description=(
            "A consistent electric-type deck that controls the game pace "
            "with powerful Pikachu ex attacks."
        ),
        total_cost=Decimal("124.50"),
        cards_owned=18,
        cards_needed=42,
    ),
    DeckSuggestion(
        id="2",
        name="Charizard ex Aggro",
        format=DeckFormat.STANDARD,
        archetype="Aggro",
        win_rate=72,
        difficulty=Difficulty.BEGINNER,
        meta_tier=MetaTier.TIER_1,
        key_cards=("Charizard ex", "Charmander", "Fire Energy", "Quick Ball"),
        description="Fast-paced fire deck that aims to deal massive damage quickly.",
        total_cost=Decimal("89.25"),
        cards_owned=25,
        cards_needed=35,
    ),
    DeckSuggestion(
        id="3",
        name="Gardevoir Control",
        format=DeckFormat.STANDARD,
        archetype="Control",
        win_rate=65,
        difficulty=Difficulty.ADVANCED,
        meta_tier=MetaTier.TIER_2,
        key_cards=("Gardevoir ex", "Kirlia", "Psychic Energy", "Professor Sada's Vitality"),
        description="Technical psychic deck with complex combos and late-game power.",
        total_cost=Decimal("156.75"),
        cards_owned=12,
        cards_needed=48,
    ),
)

# Tournament data from the last 30 days
META_ANALYSIS = MetaAnalysis(
    period_days=30,
    shares=(
        MetaShare(ElementType.ELECTRIC, 34),
        MetaShare(ElementType.FIRE, 28),
        MetaShare(ElementType.PSYCHIC, 21),
    ),
    top_results=(
        TournamentResult("Pikachu ex Control", "1st Place"),
        TournamentResult("Charizard ex Aggro", "2nd Place"),
        TournamentResult("Gardevoir Control", "Top 4"),
    ),
)


def parse_format(value: str | DeckFormat) -> DeckFormat:
    """
    Parse a deck format, ignoring case.

    Raises:
        InvalidArgumentError: If the value is not a known format
    """
    if isinstance(value, DeckFormat):
        return value
    for deck_format in DeckFormat:
        if deck_format.value.lower() == str(value).strip().lower():
            return deck_format
    raise InvalidArgumentError("format", value, [f.value for f in DeckFormat])


def parse_playstyle(value: str | Playstyle) -> Playstyle:
    """
    Parse a playstyle, ignoring case.

    Raises:
        InvalidArgumentError: If the value is not a known playstyle
    """
    if isinstance(value, Playstyle):
        return value
    for playstyle in Playstyle:
        if playstyle.value == str(value).strip().lower():
            return playstyle
    raise InvalidArgumentError("playstyle", value, [p.value for p in Playstyle])


def get_suggested_decks() -> list[SuggestedDeck]:
    """Pair every curated deck with its completion percentage."""
    return [
        SuggestedDeck(
            deck=deck,
            completion_percentage=completion_percentage(deck.cards_owned, deck.cards_needed),
        )
        for deck in DECK_SUGGESTIONS
    ]


async def suggest_decks(
    deck_format: str | DeckFormat,
    playstyle: str | Playstyle,
    latency_seconds: float | None = None,
) -> list[SuggestedDeck]:
    """
    Suggest decks for a format and playstyle.

    Inputs are validated before the simulated processing delay, so a bad
    request fails immediately.

    Args:
        deck_format: Standard, Expanded or Casual
        playstyle: aggressive, control, combo or midrange
        latency_seconds: Simulated processing time; defaults to settings

    Returns:
        Suggestions in curated order.

    Raises:
        InvalidArgumentError: If format or playstyle is not recognized
    """
    parsed_format = parse_format(deck_format)
    parsed_playstyle = parse_playstyle(playstyle)

    if latency_seconds is None:
        latency_seconds = settings.suggestion_latency_seconds
    if latency_seconds > 0:
        await asyncio.sleep(latency_seconds)

    suggestions = get_suggested_decks()
    logger.info(
        "Generated %d deck suggestions for %s/%s",
        len(suggestions),
        parsed_format.value,
        parsed_playstyle.value,
    )
    return suggestions


def get_meta_analysis() -> MetaAnalysis:
    """Get the current metagame snapshot."""
    return META_ANALYSIS
