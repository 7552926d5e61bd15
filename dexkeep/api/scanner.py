"""
Scanner API endpoints.

Accepts a card photo and returns the identified card. The image is sent as
the raw request body with its MIME type in the Content-Type header.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from pydantic import BaseModel

from dexkeep.api.schemas import CardResponse
from dexkeep.services.catalog import get_identification_catalog
from dexkeep.services.identification import CardIdentifier, get_card_identifier
from dexkeep.services.in_flight import InFlightGuard, get_in_flight_guard

router = APIRouter(prefix="/scanner", tags=["scanner"])

IDENTIFY_OPERATION = "identification"


class IdentifyResponse(BaseModel):
    """Response model for an identified card."""

    card: CardResponse
    message: str


class CatalogResponse(BaseModel):
    """Response model for the identification catalog."""

    cards: list[CardResponse]
    count: int


def provide_card_identifier() -> CardIdentifier:
    """Dependency that provides the configured identifier."""
    return get_card_identifier()


@router.post("/identify", response_model=IdentifyResponse)
async def identify_card(
    request: Request,
    identifier: Annotated[CardIdentifier, Depends(provide_card_identifier)],
    guard: Annotated[InFlightGuard, Depends(get_in_flight_guard)],
    user_id: Annotated[str, Query(min_length=1, max_length=255)] = "anonymous",
) -> IdentifyResponse:
    """
    Identify the card in an uploaded image.

    Returns 415 if the body is not an image and 409 if this user already
    has an identification running. The result is not saved; add it to the
    collection with POST /collection/{user_id}/entries.
    """
    image = await request.body()
    content_type = request.headers.get("content-type")

    async with guard.hold(IDENTIFY_OPERATION, user_id):
        card = await identifier.identify(image, content_type)

    return IdentifyResponse(
        card=CardResponse.from_model(card),
        message=f"Found {card.name} from {card.set_name}",
    )


@router.get("/catalog", response_model=CatalogResponse)
async def get_catalog() -> CatalogResponse:
    """List the cards the scanner can recognize."""
    cards = [CardResponse.from_model(c) for c in get_identification_catalog()]
    return CatalogResponse(cards=cards, count=len(cards))
