"""
Card identification.

Turns a photo of a card into a catalog record. Two implementations share the
``CardIdentifier`` interface:

- ``StubCardIdentifier`` waits a fixed time, then picks a catalog card at random.
  Used in demo mode and tests.
- ``RemoteCardIdentifier`` sends the image to a recognition service over HTTP.

Neither retries. A failed identification is raised to the caller, who may
try again with a new image.
"""

import asyncio
import logging
import random
from abc import ABC, abstractmethod
from collections.abc import Sequence
from decimal import Decimal, InvalidOperation
from typing import Any

import httpx

from dexkeep.config import IMAGE_CONTENT_TYPE_PREFIX, Settings, settings
from dexkeep.models.card import CardRecord, ElementType, Rarity
from dexkeep.models.failure import (
    CatalogEmptyError,
    EmptyImageError,
    IdentificationServiceError,
    InvalidInputError,
)
from dexkeep.services.catalog import get_identification_catalog

logger = logging.getLogger(__name__)


def validate_image(image: bytes, content_type: str | None) -> None:
    """
    Check that a payload looks like an image.

    Only the declared content type is checked; the bytes are not decoded.

    Raises:
        InvalidInputError: If the content type is not image/*
        EmptyImageError: If the payload is empty
    """
    if not content_type or not content_type.lower().startswith(IMAGE_CONTENT_TYPE_PREFIX):
        raise InvalidInputError(content_type)
    if not image:
        raise EmptyImageError(content_type)


class CardIdentifier(ABC):
    """Identifies the card shown in an image."""

    @abstractmethod
    async def identify(self, image: bytes, content_type: str | None) -> CardRecord:
        """
        Identify a card.

        Args:
            image: Raw image bytes
            content_type: MIME type declared by the uploader

        Returns:
            The identified catalog card.

        Raises:
            InvalidInputError: If the payload is not an image
        """


class StubCardIdentifier(CardIdentifier):
    """
    Simulated identification.

    Sleeps for ``latency_seconds`` then returns a catalog card chosen
    uniformly at random. Pass a seeded ``random.Random`` for repeatable picks.
    """

    def __init__(
        self,
        catalog: Sequence[CardRecord],
        latency_seconds: float = 0.0,
        rng: random.Random | None = None,
    ):
        self.catalog = tuple(catalog)
        self.latency_seconds = latency_seconds
        self._rng = rng or random.Random()

    async def identify(self, image: bytes, content_type: str | None) -> CardRecord:
        validate_image(image, content_type)

        if not self.catalog:
            logger.warning("Identification catalog is empty")
            raise CatalogEmptyError()

        if self.latency_seconds > 0:
            await asyncio.sleep(self.latency_seconds)

        card = self._rng.choice(self.catalog)
        logger.info("Identified %s (%s) from %d-byte image", card.name, card.id, len(image))
        return card


class RemoteCardIdentifier(CardIdentifier):
    """
    Identification through an external recognition service.

    POSTs the raw image to ``{base_url}/identify`` and expects a JSON card
    record in response.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client

    async def identify(self, image: bytes, content_type: str | None) -> CardRecord:
        validate_image(image, content_type)

        url = f"{self.base_url}/identify"
        headers = {"Content-Type": content_type or ""}

        try:
            if self._client is not None:
                response = await self._client.post(url, content=image, headers=headers)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(url, content=image, headers=headers)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            logger.exception("Recognition service returned %s", e.response.status_code)
            raise IdentificationServiceError(
                f"Recognition service returned HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            logger.exception("Recognition service request failed")
            raise IdentificationServiceError(f"Request failed: {type(e).__name__}") from e
        except ValueError as e:
            logger.exception("Recognition service returned invalid JSON")
            raise IdentificationServiceError("Response was not valid JSON") from e

        card = parse_card_payload(payload)
        logger.info("Recognition service identified %s (%s)", card.name, card.id)
        return card


def parse_card_payload(payload: Any) -> CardRecord:
    """
    Parse a recognition service response into a CardRecord.

    Expected shape:
        {"id": "swsh4-25", "name": "Pikachu V", "set": "Vivid Voltage",
         "rarity": "Ultra Rare", "type": "Electric", "price": 24.99,
         "imageUrl": "..."}

    Raises:
        IdentificationServiceError: If fields are missing or invalid
    """
    if not isinstance(payload, dict):
        raise IdentificationServiceError("Response body was not a JSON object")

    try:
        return CardRecord(
            id=str(payload["id"]),
            name=str(payload["name"]),
            set_name=str(payload.get("set_name") or payload["set"]),
            rarity=Rarity(payload["rarity"]),
            element_type=ElementType(payload.get("element_type") or payload["type"]),
            # str() keeps 24.99 from picking up float noise
            price=Decimal(str(payload["price"])),
            image_url=str(payload.get("image_url", payload.get("imageUrl", "/placeholder.svg"))),
        )
    except (KeyError, ValueError, InvalidOperation) as e:
        raise IdentificationServiceError(f"Malformed card record: {e}") from e


def get_card_identifier(config: Settings | None = None) -> CardIdentifier:
    """Build the identifier selected by configuration."""
    config = config or settings

    if config.identification_backend == "remote":
        return RemoteCardIdentifier(
            config.identification_service_url,
            timeout=config.identification_timeout_seconds,
        )

    return StubCardIdentifier(
        get_identification_catalog(),
        latency_seconds=config.identification_latency_seconds,
    )
