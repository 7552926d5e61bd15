"""Tests for card identification."""

import asyncio
import random
from decimal import Decimal

import httpx
import pytest
import respx

from dexkeep.config import Settings
from dexkeep.models.card import ElementType, Rarity
from dexkeep.models.failure import (
    CatalogEmptyError,
    EmptyImageError,
    FailureKind,
    IdentificationServiceError,
    InvalidInputError,
)
from dexkeep.services.catalog import IDENTIFICATION_CATALOG, get_identification_catalog
from dexkeep.services.identification import (
    RemoteCardIdentifier,
    StubCardIdentifier,
    get_card_identifier,
    parse_card_payload,
    validate_image,
)

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-image-data"

SERVICE_URL = "https://recognizer.test"


class TestValidateImage:
    def test_accepts_image_types(self) -> None:
        validate_image(PNG_BYTES, "image/png")
        validate_image(PNG_BYTES, "image/jpeg")
        validate_image(PNG_BYTES, "IMAGE/WEBP")

    def test_rejects_non_image(self) -> None:
        with pytest.raises(InvalidInputError) as exc_info:
            validate_image(b"%PDF-1.7", "application/pdf")

        assert exc_info.value.kind == FailureKind.INVALID_INPUT
        assert exc_info.value.status_code == 415

    def test_rejects_missing_content_type(self) -> None:
        with pytest.raises(InvalidInputError):
            validate_image(PNG_BYTES, None)

    def test_rejects_empty_payload(self) -> None:
        """An empty image is a bad request, not an unsupported type."""
        with pytest.raises(EmptyImageError) as exc_info:
            validate_image(b"", "image/png")

        assert isinstance(exc_info.value, InvalidInputError)
        assert exc_info.value.kind == FailureKind.INVALID_INPUT
        assert exc_info.value.status_code == 400
        assert "empty" in exc_info.value.message


class TestStubCardIdentifier:
    async def test_returns_catalog_member(self) -> None:
        """Every identification is a card from the catalog."""
        identifier = StubCardIdentifier(get_identification_catalog(), rng=random.Random(1))

        for _ in range(25):
            card = await identifier.identify(PNG_BYTES, "image/png")
            assert card in IDENTIFICATION_CATALOG

    async def test_picks_uniformly(self) -> None:
        """With enough draws every catalog card shows up."""
        identifier = StubCardIdentifier(get_identification_catalog(), rng=random.Random(42))

        seen = {(await identifier.identify(PNG_BYTES, "image/png")).id for _ in range(60)}

        assert seen == {card.id for card in IDENTIFICATION_CATALOG}

    async def test_single_card_catalog(self) -> None:
        catalog = get_identification_catalog()[:1]
        identifier = StubCardIdentifier(catalog)

        card = await identifier.identify(PNG_BYTES, "image/png")

        assert card == catalog[0]

    async def test_empty_catalog_fails(self) -> None:
        identifier = StubCardIdentifier([])

        with pytest.raises(CatalogEmptyError) as exc_info:
            await identifier.identify(PNG_BYTES, "image/png")

        assert exc_info.value.kind == FailureKind.EMPTY_CATALOG

    async def test_non_image_fails_before_catalog_check(self) -> None:
        identifier = StubCardIdentifier([])

        with pytest.raises(InvalidInputError):
            await identifier.identify(b"hello", "text/plain")

    async def test_waits_for_latency(self, monkeypatch: pytest.MonkeyPatch) -> None:
        delays: list[float] = []

        async def fake_sleep(seconds: float) -> None:
            delays.append(seconds)

        monkeypatch.setattr(asyncio, "sleep", fake_sleep)
        identifier = StubCardIdentifier(get_identification_catalog(), latency_seconds=2.0)

        await identifier.identify(PNG_BYTES, "image/png")

        assert delays == [2.0]

    async def test_cancellation_abandons_result(self) -> None:
        identifier = StubCardIdentifier(get_identification_catalog(), latency_seconds=10.0)

        task = asyncio.create_task(identifier.identify(PNG_BYTES, "image/png"))
        await asyncio.sleep(0)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task


class TestRemoteCardIdentifier:
    @respx.mock
    async def test_parses_service_response(self) -> None:
        route = respx.post(f"{SERVICE_URL}/identify").mock(
            return_value=httpx.Response(
                200,
                json={
                    "id": "swsh12-123",
                    "name": "Charizard VMAX",
                    "set": "Silver Tempest",
                    "rarity": "Secret Rare",
                    "type": "Fire",
                    "price": 89.99,
                    "imageUrl": "/charizard.png",
                },
            )
        )
        identifier = RemoteCardIdentifier(SERVICE_URL)

        card = await identifier.identify(PNG_BYTES, "image/png")

        assert route.called
        request = route.calls.last.request
        assert request.content == PNG_BYTES
        assert request.headers["content-type"] == "image/png"
        assert card.name == "Charizard VMAX"
        assert card.rarity == Rarity.SECRET_RARE
        assert card.element_type == ElementType.FIRE
        assert card.price == Decimal("89.99")
        assert card.image_url == "/charizard.png"

    @respx.mock
    async def test_uses_injected_client(self) -> None:
        respx.post(f"{SERVICE_URL}/identify").mock(
            return_value=httpx.Response(
                200,
                json={
                    "id": "swsh4-25",
                    "name": "Pikachu V",
                    "set_name": "Vivid Voltage",
                    "rarity": "Ultra Rare",
                    "element_type": "Electric",
                    "price": "24.99",
                },
            )
        )

        async with httpx.AsyncClient() as client:
            identifier = RemoteCardIdentifier(f"{SERVICE_URL}/", client=client)
            card = await identifier.identify(PNG_BYTES, "image/jpeg")

        assert card.id == "swsh4-25"
        assert card.price == Decimal("24.99")

    @respx.mock
    async def test_http_error_status(self) -> None:
        respx.post(f"{SERVICE_URL}/identify").mock(return_value=httpx.Response(500))
        identifier = RemoteCardIdentifier(SERVICE_URL)

        with pytest.raises(IdentificationServiceError) as exc_info:
            await identifier.identify(PNG_BYTES, "image/png")

        assert exc_info.value.status_code == 502
        assert "500" in (exc_info.value.detail or "")

    @respx.mock
    async def test_transport_error(self) -> None:
        respx.post(f"{SERVICE_URL}/identify").mock(side_effect=httpx.ConnectError("refused"))
        identifier = RemoteCardIdentifier(SERVICE_URL)

        with pytest.raises(IdentificationServiceError):
            await identifier.identify(PNG_BYTES, "image/png")

    @respx.mock
    async def test_invalid_json(self) -> None:
        respx.post(f"{SERVICE_URL}/identify").mock(
            return_value=httpx.Response(200, content=b"not json")
        )
        identifier = RemoteCardIdentifier(SERVICE_URL)

        with pytest.raises(IdentificationServiceError):
            await identifier.identify(PNG_BYTES, "image/png")

    @respx.mock
    async def test_non_image_never_calls_service(self) -> None:
        route = respx.post(f"{SERVICE_URL}/identify")
        identifier = RemoteCardIdentifier(SERVICE_URL)

        with pytest.raises(InvalidInputError):
            await identifier.identify(b"hello", "text/plain")

        assert not route.called


class TestParseCardPayload:
    def test_missing_field(self) -> None:
        with pytest.raises(IdentificationServiceError):
            parse_card_payload({"id": "x", "name": "No Set"})

    def test_unknown_rarity(self) -> None:
        with pytest.raises(IdentificationServiceError):
            parse_card_payload(
                {
                    "id": "x",
                    "name": "Card",
                    "set": "Set",
                    "rarity": "Mythic",
                    "type": "Fire",
                    "price": 1,
                }
            )

    def test_negative_price(self) -> None:
        with pytest.raises(IdentificationServiceError):
            parse_card_payload(
                {
                    "id": "x",
                    "name": "Card",
                    "set": "Set",
                    "rarity": "Rare",
                    "type": "Fire",
                    "price": -1,
                }
            )

    def test_not_an_object(self) -> None:
        with pytest.raises(IdentificationServiceError):
            parse_card_payload(["swsh4-25"])


class TestGetCardIdentifier:
    def test_stub_by_default(self) -> None:
        identifier = get_card_identifier(Settings(identification_latency_seconds=1.5))

        assert isinstance(identifier, StubCardIdentifier)
        assert identifier.latency_seconds == 1.5
        assert identifier.catalog == IDENTIFICATION_CATALOG

    def test_remote_backend(self) -> None:
        config = Settings(
            identification_backend="remote",
            identification_service_url=SERVICE_URL,
            identification_timeout_seconds=5.0,
        )

        identifier = get_card_identifier(config)

        assert isinstance(identifier, RemoteCardIdentifier)
        assert identifier.base_url == SERVICE_URL
        assert identifier.timeout == 5.0
