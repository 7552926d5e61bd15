"""
Deck API endpoints.

Provides deck suggestions and the current metagame snapshot.
"""

from decimal import Decimal
from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from dexkeep.models.deck import MetaAnalysis, SuggestedDeck
from dexkeep.services.deck_suggestions import (
    get_meta_analysis,
    parse_format,
    parse_playstyle,
    suggest_decks,
)
from dexkeep.services.in_flight import InFlightGuard, get_in_flight_guard

router = APIRouter(prefix="/decks", tags=["decks"])

SUGGEST_OPERATION = "deck suggestion"


class SuggestionRequest(BaseModel):
    """Request model for deck suggestions."""

    format: str = Field(default="Standard", examples=["Standard", "Expanded", "Casual"])
    playstyle: str = Field(
        default="aggressive", examples=["aggressive", "control", "combo", "midrange"]
    )
    user_id: str = Field(default="anonymous", min_length=1, max_length=255)


class DeckSuggestionResponse(BaseModel):
    """Response model for a single suggested deck."""

    id: str
    name: str
    format: str
    archetype: str
    win_rate: int
    difficulty: str
    meta_tier: str
    key_cards: list[str] = Field(default_factory=list)
    description: str
    total_cost: Decimal
    cards_owned: int
    cards_needed: int
    completion_percentage: int

    @classmethod
    def from_model(cls, suggested: SuggestedDeck) -> "DeckSuggestionResponse":
        deck = suggested.deck
        return cls(
            id=deck.id,
            name=deck.name,
            format=deck.format.value,
            archetype=deck.archetype,
            win_rate=deck.win_rate,
            difficulty=deck.difficulty.value,
            meta_tier=deck.meta_tier.value,
            key_cards=list(deck.key_cards),
            description=deck.description,
            total_cost=deck.total_cost,
            cards_owned=deck.cards_owned,
            cards_needed=deck.cards_needed,
            completion_percentage=suggested.completion_percentage,
        )


class SuggestionListResponse(BaseModel):
    """Response model for a list of suggestions."""

    format: str
    playstyle: str
    suggestions: list[DeckSuggestionResponse]
    count: int
    message: str


class MetaShareResponse(BaseModel):
    element_type: str
    share_percentage: int


class TournamentResultResponse(BaseModel):
    deck_name: str
    placement: str


class MetaAnalysisResponse(BaseModel):
    """Response model for the metagame snapshot."""

    period_days: int
    shares: list[MetaShareResponse]
    top_results: list[TournamentResultResponse]

    @classmethod
    def from_model(cls, analysis: MetaAnalysis) -> "MetaAnalysisResponse":
        return cls(
            period_days=analysis.period_days,
            shares=[
                MetaShareResponse(
                    element_type=s.element_type.value,
                    share_percentage=s.share_percentage,
                )
                for s in analysis.shares
            ],
            top_results=[
                TournamentResultResponse(deck_name=r.deck_name, placement=r.placement)
                for r in analysis.top_results
            ],
        )


@router.post("/suggestions", response_model=SuggestionListResponse)
async def create_suggestions(
    request: SuggestionRequest,
    guard: Annotated[InFlightGuard, Depends(get_in_flight_guard)],
) -> SuggestionListResponse:
    """
    Generate deck suggestions for a format and playstyle.

    Returns 422 for an unknown format or playstyle and 409 if this user
    already has a suggestion request running.
    """
    deck_format = parse_format(request.format)
    playstyle = parse_playstyle(request.playstyle)

    async with guard.hold(SUGGEST_OPERATION, request.user_id):
        suggestions = await suggest_decks(deck_format, playstyle)

    return SuggestionListResponse(
        format=deck_format.value,
        playstyle=playstyle.value,
        suggestions=[DeckSuggestionResponse.from_model(s) for s in suggestions],
        count=len(suggestions),
        message=(
            f"Found {len(suggestions)} optimized decks for {deck_format.value} format"
        ),
    )


@router.get("/meta", response_model=MetaAnalysisResponse)
async def get_meta() -> MetaAnalysisResponse:
    """Get meta shares by type and recent top tournament finishes."""
    return MetaAnalysisResponse.from_model(get_meta_analysis())
