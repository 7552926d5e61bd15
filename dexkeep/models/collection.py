from dataclasses import dataclass, field, replace
from datetime import date
from decimal import Decimal
from enum import Enum

from dexkeep.models.card import CardRecord, ElementType, Rarity
from dexkeep.models.failure import EntryNotFoundError


class Condition(str, Enum):
    """Physical condition of an owned card, ordered worst to best."""

    HEAVILY_PLAYED = "Heavily Played"
    MODERATELY_PLAYED = "Moderately Played"
    LIGHTLY_PLAYED = "Lightly Played"
    NEAR_MINT = "Near Mint"
    MINT = "Mint"

    @property
    def rank(self) -> int:
        return _CONDITION_ORDER.index(self)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Condition):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Condition):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Condition):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Condition):
            return NotImplemented
        return self.rank >= other.rank


_CONDITION_ORDER = list(Condition)


@dataclass(frozen=True, slots=True)
class CollectionEntry:
    """
    An owned card.

    Attributes:
        card: Catalog record for the card
        quantity: Copies owned (always at least 1)
        condition: Physical condition
        date_added: When the card entered the collection
    """

    card: CardRecord
    quantity: int
    condition: Condition = Condition.NEAR_MINT
    date_added: date = field(default_factory=date.today)

    def __post_init__(self) -> None:
        if self.quantity < 1:
            raise ValueError(f"Quantity for '{self.card.name}' must be positive")

    @property
    def card_id(self) -> str:
        return self.card.id

    @property
    def name(self) -> str:
        return self.card.name

    @property
    def set_name(self) -> str:
        return self.card.set_name

    @property
    def rarity(self) -> Rarity:
        return self.card.rarity

    @property
    def element_type(self) -> ElementType:
        return self.card.element_type

    @property
    def price(self) -> Decimal:
        return self.card.price

    @property
    def value(self) -> Decimal:
        """Market value of every copy owned."""
        return self.card.price * self.quantity


@dataclass
class Collection:
    """
    A user's card collection.

    Entries keep the order in which cards were first added. Each card id
    appears at most once; adding the same card again stacks the quantity.
    """

    entries: list[CollectionEntry] = field(default_factory=list)

    def get(self, card_id: str) -> CollectionEntry:
        """Get the entry for a card, raising if it is not owned."""
        return self.entries[self._index(card_id)]

    def owns(self, card_id: str) -> bool:
        """Check if collection contains a card."""
        return any(e.card_id == card_id for e in self.entries)

    def add(
        self,
        card: CardRecord,
        quantity: int = 1,
        condition: Condition = Condition.NEAR_MINT,
        date_added: date | None = None,
    ) -> CollectionEntry:
        """
        Add copies of a card.

        Stacks onto the existing entry when the card is already owned,
        keeping that entry's condition and date added.
        """
        if quantity < 1:
            raise ValueError("Quantity to add must be positive")

        for i, entry in enumerate(self.entries):
            if entry.card_id == card.id:
                stacked = replace(entry, quantity=entry.quantity + quantity)
                self.entries[i] = stacked
                return stacked

        entry = CollectionEntry(
            card=card,
            quantity=quantity,
            condition=condition,
            date_added=date_added or date.today(),
        )
        self.entries.append(entry)
        return entry

    def update(
        self,
        card_id: str,
        quantity: int | None = None,
        condition: Condition | None = None,
    ) -> CollectionEntry | None:
        """
        Edit quantity and/or condition of an owned card.

        A quantity of 0 removes the entry and returns None.
        """
        index = self._index(card_id)
        entry = self.entries[index]

        if quantity is not None:
            if quantity < 0:
                raise ValueError("Quantity cannot be negative")
            if quantity == 0:
                del self.entries[index]
                return None
            entry = replace(entry, quantity=quantity)
        if condition is not None:
            entry = replace(entry, condition=condition)

        self.entries[index] = entry
        return entry

    def remove(self, card_id: str) -> CollectionEntry:
        """Remove an owned card entirely."""
        return self.entries.pop(self._index(card_id))

    def total_cards(self) -> int:
        """Total number of cards in collection."""
        return sum(e.quantity for e in self.entries)

    def unique_cards(self) -> int:
        """Number of unique cards in collection."""
        return len(self.entries)

    def total_value(self) -> Decimal:
        """Market value of the whole collection."""
        return sum((e.value for e in self.entries), Decimal("0"))

    def _index(self, card_id: str) -> int:
        for i, entry in enumerate(self.entries):
            if entry.card_id == card_id:
                return i
        raise EntryNotFoundError(card_id)
