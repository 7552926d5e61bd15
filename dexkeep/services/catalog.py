"""
Built-in card data for demo mode.

Provides the catalog the scanner identifies cards from and a sample
collection shown to users who haven't added any cards yet.

DESIGN PRINCIPLE: Sample data is intentionally minimal. Prices are fixed
snapshots, not live market data.
"""

from datetime import date
from decimal import Decimal

from dexkeep.models.card import CardRecord, ElementType, Rarity
from dexkeep.models.collection import Collection, CollectionEntry, Condition
from dexkeep.models.failure import CardNotInCatalogError

PIKACHU_V = CardRecord(
    id="swsh4-25",
    name="Pikachu V",
    set_name="Vivid Voltage",
    rarity=Rarity.ULTRA_RARE,
    element_type=ElementType.ELECTRIC,
    price=Decimal("24.99"),
)

CHARIZARD_VMAX = CardRecord(
    id="swsh12-123",
    name="Charizard VMAX",
    set_name="Silver Tempest",
    rarity=Rarity.SECRET_RARE,
    element_type=ElementType.FIRE,
    price=Decimal("89.99"),
)

GARDEVOIR_EX = CardRecord(
    id="swsh9-64",
    name="Gardevoir ex",
    set_name="Brilliant Stars",
    rarity=Rarity.ULTRA_RARE,
    element_type=ElementType.PSYCHIC,
    price=Decimal("15.50"),
)

LUCARIO_V = CardRecord(
    id="swsh10-78",
    name="Lucario V",
    set_name="Astral Radiance",
    rarity=Rarity.ULTRA_RARE,
    element_type=ElementType.FIGHTING,
    price=Decimal("12.75"),
)

# Cards the scanner can recognize
IDENTIFICATION_CATALOG: tuple[CardRecord, ...] = (PIKACHU_V, CHARIZARD_VMAX, GARDEVOIR_EX)

# Every card known to the app, for adding by id
CARD_CATALOG: dict[str, CardRecord] = {
    card.id: card for card in (*IDENTIFICATION_CATALOG, LUCARIO_V)
}

SAMPLE_COLLECTION: tuple[CollectionEntry, ...] = (
    CollectionEntry(PIKACHU_V, quantity=2, condition=Condition.MINT, date_added=date(2024, 1, 15)),
    CollectionEntry(
        CHARIZARD_VMAX, quantity=1, condition=Condition.NEAR_MINT, date_added=date(2024, 1, 10)
    ),
    CollectionEntry(
        GARDEVOIR_EX, quantity=3, condition=Condition.MINT, date_added=date(2024, 1, 20)
    ),
    CollectionEntry(
        LUCARIO_V, quantity=1, condition=Condition.LIGHTLY_PLAYED, date_added=date(2024, 1, 5)
    ),
)


def get_identification_catalog() -> list[CardRecord]:
    """Get the cards the scanner stub picks from."""
    return list(IDENTIFICATION_CATALOG)


def get_catalog_card(card_id: str) -> CardRecord:
    """
    Look up a card by id.

    Raises:
        CardNotInCatalogError: If no card has this id
    """
    card = CARD_CATALOG.get(card_id)
    if card is None:
        raise CardNotInCatalogError(card_id)
    return card


def get_sample_collection() -> Collection:
    """
    Get the sample collection for demo mode.

    Returns a fresh Collection so callers can edit it without touching the template.
    """
    return Collection(entries=list(SAMPLE_COLLECTION))
