"""
Collection API endpoints.

Browse a user's collection with search, filters and sorting, and add,
edit or remove owned cards.
"""

import logging
from typing import Annotated, Any, Literal

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from dexkeep.api.schemas import EntryResponse, StatsResponse
from dexkeep.config import FILTER_ALL
from dexkeep.db import (
    add_collection_entry,
    collection_to_model,
    entry_to_model,
    get_collection,
    get_or_create_collection,
    remove_collection_entry,
    update_collection_entry,
)
from dexkeep.db.database import get_session
from dexkeep.models.collection import Collection, Condition
from dexkeep.services.catalog import get_catalog_card, get_sample_collection
from dexkeep.services.collection_query import (
    CollectionQueryParams,
    SortKey,
    query_collection,
    summarize_collection,
)

logger = logging.getLogger(__name__)

# Collection source type for demo/user distinction
CollectionSource = Literal["DEMO", "USER"]

router = APIRouter(prefix="/collection", tags=["collection"])


class CollectionQueryResponse(BaseModel):
    """Response model for a filtered collection view."""

    user_id: str
    entries: list[EntryResponse] = Field(default_factory=list)
    stats: StatsResponse
    visible_count: int = 0
    collection_source: CollectionSource = Field(
        default="USER",
        description="Source of collection data: DEMO (sample data) or USER (user-added)",
    )


class CollectionSummaryResponse(BaseModel):
    """Response model for collection statistics."""

    user_id: str
    stats: StatsResponse
    by_rarity: dict[str, int] = Field(default_factory=dict)
    by_type: dict[str, int] = Field(default_factory=dict)
    by_condition: dict[str, int] = Field(default_factory=dict)
    collection_source: CollectionSource = "USER"


class AddEntryRequest(BaseModel):
    """Request model for adding a card to a collection."""

    card_id: str = Field(..., min_length=1, examples=["swsh4-25"])
    quantity: int = Field(default=1, ge=1)
    condition: Condition = Condition.NEAR_MINT


class UpdateEntryRequest(BaseModel):
    """Request model for editing an owned card. A quantity of 0 removes it."""

    quantity: int | None = Field(default=None, ge=0)
    condition: Condition | None = None


class UpdateEntryResponse(BaseModel):
    """Response model for an entry edit."""

    user_id: str
    card_id: str
    removed: bool = False
    entry: EntryResponse | None = None


class DeleteResponse(BaseModel):
    """Response model for delete operations."""

    user_id: str
    card_id: str
    deleted: bool


async def _load_collection(
    session: AsyncSession, user_id: str
) -> tuple[Collection, CollectionSource]:
    """Load a stored collection, falling back to the sample collection."""
    db_collection = await get_collection(session, user_id)
    if db_collection is None:
        return get_sample_collection(), "DEMO"
    return collection_to_model(db_collection), "USER"


async def _claim_collection(session: AsyncSession, user_id: str) -> None:
    """Store the sample collection as the user's own before their first edit."""
    _, created = await get_or_create_collection(
        session, user_id, seed=get_sample_collection().entries
    )
    if created:
        logger.info("Copied sample collection to %s", user_id)


@router.get("/{user_id}", response_model=CollectionQueryResponse)
async def browse_collection(
    user_id: str,
    session: Annotated[AsyncSession, Depends(get_session)],
    search: Annotated[str, Query(max_length=200)] = "",
    element_type: Annotated[str, Query(alias="type")] = FILTER_ALL,
    rarity: str = FILTER_ALL,
    sort: str = SortKey.NONE.value,
) -> CollectionQueryResponse:
    """
    Get a user's collection, filtered and sorted.

    Stats always cover the whole collection, not just the visible entries.
    Users without a stored collection see the sample collection
    (collection_source = DEMO).
    """
    collection, source = await _load_collection(session, user_id)

    params = CollectionQueryParams(
        search_text=search,
        element_type=element_type,
        rarity=rarity,
        sort_key=SortKey.parse(sort),
    )
    result = query_collection(collection.entries, params)

    return CollectionQueryResponse(
        user_id=user_id,
        entries=[EntryResponse.from_model(e) for e in result.entries],
        stats=StatsResponse.from_model(result.stats),
        visible_count=len(result.entries),
        collection_source=source,
    )


@router.get("/{user_id}/summary", response_model=CollectionSummaryResponse)
async def get_collection_summary(
    user_id: str,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> CollectionSummaryResponse:
    """Get totals and breakdowns by rarity, type and condition."""
    collection, source = await _load_collection(session, user_id)
    summary: dict[str, Any] = summarize_collection(collection.entries)

    return CollectionSummaryResponse(
        user_id=user_id,
        stats=StatsResponse(
            total_value=summary["total_value"],
            total_cards=summary["total_cards"],
            unique_cards=summary["unique_cards"],
        ),
        by_rarity=summary["by_rarity"],
        by_type=summary["by_type"],
        by_condition=summary["by_condition"],
        collection_source=source,
    )


@router.post(
    "/{user_id}/entries",
    response_model=EntryResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_entry(
    user_id: str,
    request: AddEntryRequest,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> EntryResponse:
    """
    Add a catalog card to a user's collection.

    Adding a card that is already owned increases its quantity.
    Returns 404 if the card id is not in the catalog.

    Users still viewing the sample collection keep its cards: the first
    edit stores the sample as their own collection.
    """
    card = get_catalog_card(request.card_id)
    await _claim_collection(session, user_id)
    entry = await add_collection_entry(
        session,
        user_id,
        card,
        quantity=request.quantity,
        condition=request.condition,
    )
    logger.info("Added %dx %s to collection of %s", request.quantity, card.id, user_id)
    return EntryResponse.from_model(entry_to_model(entry))


@router.patch("/{user_id}/entries/{card_id}", response_model=UpdateEntryResponse)
async def update_entry(
    user_id: str,
    card_id: str,
    request: UpdateEntryRequest,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> UpdateEntryResponse:
    """
    Edit quantity and/or condition of an owned card.

    Setting quantity to 0 removes the card. Returns 404 if not owned.
    """
    await _claim_collection(session, user_id)
    entry = await update_collection_entry(
        session,
        user_id,
        card_id,
        quantity=request.quantity,
        condition=request.condition,
    )

    if entry is None:
        return UpdateEntryResponse(user_id=user_id, card_id=card_id, removed=True)

    return UpdateEntryResponse(
        user_id=user_id,
        card_id=card_id,
        entry=EntryResponse.from_model(entry_to_model(entry)),
    )


@router.delete("/{user_id}/entries/{card_id}", response_model=DeleteResponse)
async def delete_entry(
    user_id: str,
    card_id: str,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> DeleteResponse:
    """Remove an owned card. Returns 404 if not owned."""
    await _claim_collection(session, user_id)
    await remove_collection_entry(session, user_id, card_id)
    logger.info("Removed %s from collection of %s", card_id, user_id)
    return DeleteResponse(user_id=user_id, card_id=card_id, deleted=True)
