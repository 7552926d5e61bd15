"""
Response models shared by several routers.

Prices are Decimals and serialize as strings ("24.99") to keep cents exact.
"""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field

from dexkeep.models.card import CardRecord
from dexkeep.models.collection import CollectionEntry
from dexkeep.services.collection_query import CollectionStats


class CardResponse(BaseModel):
    """A catalog card."""

    id: str
    name: str
    set_name: str
    rarity: str
    element_type: str
    price: Decimal
    image_url: str

    @classmethod
    def from_model(cls, card: CardRecord) -> "CardResponse":
        return cls(
            id=card.id,
            name=card.name,
            set_name=card.set_name,
            rarity=card.rarity.value,
            element_type=card.element_type.value,
            price=card.price,
            image_url=card.image_url,
        )


class EntryResponse(BaseModel):
    """An owned card."""

    card: CardResponse
    quantity: int
    condition: str
    date_added: date
    value: Decimal = Field(..., description="Price times quantity")

    @classmethod
    def from_model(cls, entry: CollectionEntry) -> "EntryResponse":
        return cls(
            card=CardResponse.from_model(entry.card),
            quantity=entry.quantity,
            condition=entry.condition.value,
            date_added=entry.date_added,
            value=entry.value,
        )


class StatsResponse(BaseModel):
    """Totals over the whole collection, independent of filters."""

    total_value: Decimal
    total_cards: int
    unique_cards: int

    @classmethod
    def from_model(cls, stats: CollectionStats) -> "StatsResponse":
        return cls(
            total_value=stats.total_value,
            total_cards=stats.total_cards,
            unique_cards=stats.unique_cards,
        )
