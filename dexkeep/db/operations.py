"""
Database CRUD operations.

Async functions for reading and editing stored collections. Edits follow the
same rules as the in-memory ``Collection``: adding an owned card stacks its
quantity, and a quantity of 0 removes the entry.

Concurrent requests for the same user are safe: creating a collection or an
entry that another request created first falls back to the stored row, and
stacking increments the quantity in SQL.
"""

from collections.abc import Sequence
from datetime import date

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from dexkeep.models.card import CardRecord, ElementType, Rarity
from dexkeep.models.collection import Collection, CollectionEntry, Condition
from dexkeep.models.db import CollectionEntryDB, UserCollectionDB
from dexkeep.models.failure import EntryNotFoundError


async def get_collection(session: AsyncSession, user_id: str) -> UserCollectionDB | None:
    """
    Get a user's collection by user_id.

    Returns None if no collection exists for this user. Entries are always
    reloaded, so the result reflects rows written by other sessions.
    """
    result = await session.execute(
        select(UserCollectionDB)
        .where(UserCollectionDB.user_id == user_id)
        .options(selectinload(UserCollectionDB.entries))
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_or_create_collection(
    session: AsyncSession,
    user_id: str,
    seed: Sequence[CollectionEntry] = (),
) -> tuple[UserCollectionDB, bool]:
    """
    Get existing collection or create new one.

    Args:
        session: Database session
        user_id: Owner of the collection
        seed: Entries a new collection starts with, in order

    Returns:
        Tuple of (collection, created) where created is True if new.
    """
    collection = await get_collection(session, user_id)
    if collection:
        return collection, False

    collection = UserCollectionDB(
        user_id=user_id,
        entries=[
            _new_entry(e.card, e.quantity, e.condition, e.date_added) for e in seed
        ],
    )
    try:
        async with session.begin_nested():
            session.add(collection)
    except IntegrityError:
        # Created by a concurrent request
        existing = await get_collection(session, user_id)
        if existing is None:
            raise
        return existing, False

    return collection, True


async def add_collection_entry(
    session: AsyncSession,
    user_id: str,
    card: CardRecord,
    quantity: int = 1,
    condition: Condition = Condition.NEAR_MINT,
    date_added: date | None = None,
) -> CollectionEntryDB:
    """
    Add copies of a card to a user's collection.

    Creates the collection if needed. If the card is already owned its
    quantity increases and condition/date added are left unchanged.
    """
    if quantity < 1:
        raise ValueError("Quantity to add must be positive")

    collection, _ = await get_or_create_collection(session, user_id)

    existing = _find_entry(collection, card.id)
    if existing is None:
        entry = _new_entry(card, quantity, condition, date_added or date.today())
        entry.collection_id = collection.id
        try:
            async with session.begin_nested():
                session.add(entry)
            return entry
        except IntegrityError:
            # Added by a concurrent request; stack onto it instead
            existing = await _select_entry(session, collection.id, card.id)

    await session.execute(
        update(CollectionEntryDB)
        .where(CollectionEntryDB.id == existing.id)
        .values(quantity=CollectionEntryDB.quantity + quantity)
        .execution_options(synchronize_session=False)
    )
    await session.refresh(existing)
    return existing


async def update_collection_entry(
    session: AsyncSession,
    user_id: str,
    card_id: str,
    quantity: int | None = None,
    condition: Condition | None = None,
) -> CollectionEntryDB | None:
    """
    Edit quantity and/or condition of an owned card.

    A quantity of 0 deletes the entry and returns None.

    Raises:
        EntryNotFoundError: If the user does not own this card
    """
    if quantity is not None and quantity < 0:
        raise ValueError("Quantity cannot be negative")

    collection, entry = await _get_entry_or_fail(session, user_id, card_id)

    if quantity is not None:
        if quantity == 0:
            # delete-orphan cascade removes the row
            collection.entries.remove(entry)
            await session.flush()
            return None
        entry.quantity = quantity
    if condition is not None:
        entry.condition = condition.value

    await session.flush()
    return entry


async def remove_collection_entry(session: AsyncSession, user_id: str, card_id: str) -> None:
    """
    Remove an owned card entirely.

    Raises:
        EntryNotFoundError: If the user does not own this card
    """
    collection, entry = await _get_entry_or_fail(session, user_id, card_id)
    collection.entries.remove(entry)
    await session.flush()


def entry_to_model(entry: CollectionEntryDB) -> CollectionEntry:
    """Convert a stored entry to a domain model."""
    card = CardRecord(
        id=entry.card_id,
        name=entry.name,
        set_name=entry.set_name,
        rarity=Rarity(entry.rarity),
        element_type=ElementType(entry.element_type),
        price=entry.price,
        image_url=entry.image_url,
    )
    return CollectionEntry(
        card=card,
        quantity=entry.quantity,
        condition=Condition(entry.condition),
        date_added=entry.date_added,
    )


def collection_to_model(collection: UserCollectionDB) -> Collection:
    """Convert a stored collection to a domain model, keeping insertion order."""
    ordered = sorted(collection.entries, key=lambda e: e.id)
    return Collection(entries=[entry_to_model(e) for e in ordered])


def _find_entry(collection: UserCollectionDB, card_id: str) -> CollectionEntryDB | None:
    for entry in collection.entries:
        if entry.card_id == card_id:
            return entry
    return None


async def _get_entry_or_fail(
    session: AsyncSession, user_id: str, card_id: str
) -> tuple[UserCollectionDB, CollectionEntryDB]:
    collection = await get_collection(session, user_id)
    entry = _find_entry(collection, card_id) if collection else None
    if collection is None or entry is None:
        raise EntryNotFoundError(card_id)
    return collection, entry


async def _select_entry(
    session: AsyncSession, collection_id: int, card_id: str
) -> CollectionEntryDB:
    result = await session.execute(
        select(CollectionEntryDB).where(
            CollectionEntryDB.collection_id == collection_id,
            CollectionEntryDB.card_id == card_id,
        )
    )
    return result.scalar_one()


def _new_entry(
    card: CardRecord, quantity: int, condition: Condition, date_added: date
) -> CollectionEntryDB:
    return CollectionEntryDB(
        card_id=card.id,
        name=card.name,
        set_name=card.set_name,
        rarity=card.rarity.value,
        element_type=card.element_type.value,
        price=card.price,
        image_url=card.image_url,
        quantity=quantity,
        condition=condition.value,
        date_added=date_added,
    )
