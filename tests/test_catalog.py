"""Tests for built-in catalog and sample collection."""

from decimal import Decimal

import pytest

from dexkeep.models.collection import Condition
from dexkeep.models.failure import CardNotInCatalogError
from dexkeep.services.catalog import (
    CARD_CATALOG,
    IDENTIFICATION_CATALOG,
    SAMPLE_COLLECTION,
    get_catalog_card,
    get_identification_catalog,
    get_sample_collection,
)


class TestCatalog:
    def test_identification_catalog_not_empty(self) -> None:
        assert len(IDENTIFICATION_CATALOG) == 3

    def test_ids_are_unique(self) -> None:
        ids = [card.id for card in CARD_CATALOG.values()]
        assert len(ids) == len(set(ids))

    def test_every_scannable_card_is_addable(self) -> None:
        for card in IDENTIFICATION_CATALOG:
            assert get_catalog_card(card.id) is card

    def test_get_catalog_card_unknown(self) -> None:
        with pytest.raises(CardNotInCatalogError) as exc_info:
            get_catalog_card("base1-4")

        assert exc_info.value.status_code == 404

    def test_get_identification_catalog_returns_copy(self) -> None:
        catalog = get_identification_catalog()
        catalog.clear()

        assert len(get_identification_catalog()) == 3


class TestSampleCollection:
    def test_sample_collection_contents(self) -> None:
        collection = get_sample_collection()

        assert [e.name for e in collection.entries] == [
            "Pikachu V",
            "Charizard VMAX",
            "Gardevoir ex",
            "Lucario V",
        ]
        assert collection.get("swsh10-78").condition == Condition.LIGHTLY_PLAYED

    def test_sample_collection_value(self) -> None:
        assert get_sample_collection().total_value() == Decimal("199.22")

    def test_get_sample_collection_returns_copy(self) -> None:
        """Editing one copy does not affect the template or other copies."""
        first = get_sample_collection()
        first.remove("swsh4-25")

        second = get_sample_collection()

        assert second.unique_cards() == 4
        assert len(SAMPLE_COLLECTION) == 4
        assert first.entries is not second.entries
