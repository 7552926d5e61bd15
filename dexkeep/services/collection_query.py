"""
Collection query service.

Filters, sorts and totals a user's collection for the inventory screen.

Supports queries like:
- "Show my Charizards" -> search_text="charizard"
- "What Psychic cards do I have?" -> element_type="psychic"
- "Show my Ultra Rares, most valuable first" -> rarity="ultrarare", sort_key=SortKey.PRICE

Totals always describe the whole collection. Applying a filter never makes
the collection appear smaller.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any

from dexkeep.config import FILTER_ALL
from dexkeep.models.card import ElementType, Rarity
from dexkeep.models.collection import CollectionEntry
from dexkeep.models.failure import InvalidArgumentError


class SortKey(str, Enum):
    """Ordering of the visible entries."""

    NONE = "none"  # collection order
    DATE_ADDED = "date_added"  # newest first
    NAME = "name"
    PRICE = "price"  # highest first
    QUANTITY = "quantity"  # highest first
    CONDITION = "condition"  # best first
    VALUE = "value"  # highest first

    @classmethod
    def parse(cls, value: "str | SortKey") -> "SortKey":
        try:
            return cls(value)
        except ValueError:
            raise InvalidArgumentError("sort key", value, [k.value for k in cls]) from None


@dataclass(frozen=True, slots=True)
class CollectionQueryParams:
    """
    Search, filter and sort settings for one query.

    Attributes:
        search_text: Substring of card name or set name (case-insensitive)
        element_type: "all" or an elemental type (case-insensitive)
        rarity: "all" or a rarity key; whitespace is ignored ("ultrarare")
        sort_key: Ordering of the visible entries
    """

    search_text: str = ""
    element_type: str = FILTER_ALL
    rarity: str = FILTER_ALL
    sort_key: SortKey = SortKey.NONE


@dataclass(frozen=True, slots=True)
class CollectionStats:
    """Totals over the full collection."""

    total_value: Decimal
    total_cards: int
    unique_cards: int


@dataclass(frozen=True, slots=True)
class CollectionQueryResult:
    """Visible entries plus full-collection totals."""

    entries: list[CollectionEntry]
    stats: CollectionStats


def query_collection(
    entries: Sequence[CollectionEntry],
    params: CollectionQueryParams | None = None,
) -> CollectionQueryResult:
    """
    Filter and sort a collection.

    All filters are ANDed together - an entry must match ALL criteria.
    With the default sort key the result keeps the collection's order.

    Args:
        entries: Collection entries in collection order
        params: Query settings; defaults match everything

    Returns:
        CollectionQueryResult with the visible entries and collection totals

    Raises:
        InvalidArgumentError: If a filter or the sort key is not recognized
    """
    if params is None:
        params = CollectionQueryParams()

    check_filters(params)
    visible = [e for e in entries if matches(e, params)]

    sort_key = SortKey.parse(params.sort_key)
    if sort_key is not SortKey.NONE:
        visible = sort_entries(visible, sort_key)

    return CollectionQueryResult(entries=visible, stats=compute_stats(entries))


def check_filters(params: CollectionQueryParams) -> None:
    """Reject type and rarity filters that name no known value."""
    if params.element_type.lower() != FILTER_ALL:
        if params.element_type.lower() not in _ELEMENT_TYPE_KEYS:
            raise InvalidArgumentError(
                "type", params.element_type, [FILTER_ALL, *(t.value for t in ElementType)]
            )

    if params.rarity.lower() != FILTER_ALL:
        if _rarity_key(params.rarity) not in _RARITY_KEYS:
            raise InvalidArgumentError("rarity", params.rarity, [FILTER_ALL, *_RARITY_KEYS])


def matches(entry: CollectionEntry, params: CollectionQueryParams) -> bool:
    """Check an entry against the search text and both filters."""
    # Search filter: name OR set name
    if params.search_text:
        needle = params.search_text.lower()
        if needle not in entry.name.lower() and needle not in entry.set_name.lower():
            return False

    # Element type filter
    if params.element_type.lower() != FILTER_ALL:
        if entry.element_type.value.lower() != params.element_type.lower():
            return False

    # Rarity filter ("Ultra Rare" matches key "ultrarare")
    if params.rarity.lower() != FILTER_ALL:
        if _rarity_key(entry.rarity.value) != _rarity_key(params.rarity):
            return False

    return True


def compute_stats(entries: Sequence[CollectionEntry]) -> CollectionStats:
    """Total value, total quantity and unique count of a collection."""
    return CollectionStats(
        total_value=sum((e.price * e.quantity for e in entries), Decimal("0")),
        total_cards=sum(e.quantity for e in entries),
        unique_cards=len(entries),
    )


def sort_entries(entries: Sequence[CollectionEntry], sort_key: SortKey) -> list[CollectionEntry]:
    """Sort entries stably by the given key."""
    if sort_key is SortKey.NONE:
        return list(entries)
    if sort_key is SortKey.NAME:
        return sorted(entries, key=lambda e: e.name.lower())
    if sort_key is SortKey.DATE_ADDED:
        return sorted(entries, key=lambda e: e.date_added, reverse=True)
    if sort_key is SortKey.PRICE:
        return sorted(entries, key=lambda e: e.price, reverse=True)
    if sort_key is SortKey.QUANTITY:
        return sorted(entries, key=lambda e: e.quantity, reverse=True)
    if sort_key is SortKey.CONDITION:
        return sorted(entries, key=lambda e: e.condition.rank, reverse=True)
    return sorted(entries, key=lambda e: e.value, reverse=True)


def completion_percentage(owned: int, needed: int) -> int:
    """
    Percentage of a deck list already owned, rounded half up.

    Returns 0 when the list is empty (owned + needed == 0).
    """
    total = owned + needed
    if total <= 0:
        return 0
    percentage = Decimal(owned) * 100 / Decimal(total)
    return int(percentage.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def summarize_collection(entries: Sequence[CollectionEntry]) -> dict[str, Any]:
    """
    Get a summary of the collection for the statistics panel.

    Returns the collection totals plus quantity breakdowns by rarity,
    elemental type and condition.
    """
    stats = compute_stats(entries)
    summary: dict[str, Any] = {
        "total_value": stats.total_value,
        "total_cards": stats.total_cards,
        "unique_cards": stats.unique_cards,
        "by_rarity": {},
        "by_type": {},
        "by_condition": {},
    }

    for entry in entries:
        rarity = entry.rarity.value
        summary["by_rarity"][rarity] = summary["by_rarity"].get(rarity, 0) + entry.quantity

        element_type = entry.element_type.value
        summary["by_type"][element_type] = summary["by_type"].get(element_type, 0) + entry.quantity

        condition = entry.condition.value
        summary["by_condition"][condition] = (
            summary["by_condition"].get(condition, 0) + entry.quantity
        )

    return summary


def _rarity_key(value: str) -> str:
    return "".join(value.split()).lower()


_ELEMENT_TYPE_KEYS = frozenset(t.value.lower() for t in ElementType)
_RARITY_KEYS = [_rarity_key(r.value) for r in Rarity]
