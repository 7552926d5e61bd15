"""Tests for scanner API endpoints."""

import asyncio

from httpx import ASGITransport, AsyncClient

from dexkeep.api.scanner import provide_card_identifier
from dexkeep.main import app
from dexkeep.models.card import CardRecord
from dexkeep.services.catalog import IDENTIFICATION_CATALOG
from dexkeep.services.identification import CardIdentifier, StubCardIdentifier

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-image-data"


class TestIdentify:
    async def test_identifies_catalog_card(self, client: AsyncClient) -> None:
        response = await client.post(
            "/scanner/identify",
            content=PNG_BYTES,
            headers={"Content-Type": "image/png"},
        )

        assert response.status_code == 200
        data = response.json()
        catalog_ids = {card.id for card in IDENTIFICATION_CATALOG}
        assert data["card"]["id"] in catalog_ids
        assert data["message"] == f"Found {data['card']['name']} from {data['card']['set_name']}"

    async def test_non_image_rejected(self, client: AsyncClient) -> None:
        response = await client.post(
            "/scanner/identify",
            content=b"just some text",
            headers={"Content-Type": "text/plain"},
        )

        assert response.status_code == 415
        data = response.json()
        assert data["outcome"] == "known_failure"
        assert data["failure"]["kind"] == "invalid_input"
        assert data["failure"]["message"] == "Invalid file type. Please select an image file."

    async def test_empty_body_rejected(self, client: AsyncClient) -> None:
        response = await client.post(
            "/scanner/identify", content=b"", headers={"Content-Type": "image/jpeg"}
        )

        assert response.status_code == 400
        data = response.json()
        assert data["failure"]["kind"] == "invalid_input"
        assert data["failure"]["message"] == (
            "The uploaded image is empty. Please take the photo again."
        )

    async def test_empty_catalog(self, client: AsyncClient) -> None:
        app.dependency_overrides[provide_card_identifier] = lambda: StubCardIdentifier([])

        response = await client.post(
            "/scanner/identify",
            content=PNG_BYTES,
            headers={"Content-Type": "image/png"},
        )

        assert response.status_code == 503
        assert response.json()["failure"]["kind"] == "empty_catalog"

    async def test_overlapping_request_rejected(self, client: AsyncClient) -> None:
        """A second identification for the same user is refused while one is pending."""
        release = asyncio.Event()
        entered = asyncio.Event()

        class BlockingIdentifier(CardIdentifier):
            async def identify(self, image: bytes, content_type: str | None) -> CardRecord:
                entered.set()
                await release.wait()
                return IDENTIFICATION_CATALOG[0]

        app.dependency_overrides[provide_card_identifier] = lambda: BlockingIdentifier()

        async def scan(user_id: str):
            return await client.post(
                "/scanner/identify",
                params={"user_id": user_id},
                content=PNG_BYTES,
                headers={"Content-Type": "image/png"},
            )

        first = asyncio.create_task(scan("ash"))
        await entered.wait()

        second = await scan("ash")
        assert second.status_code == 409
        assert second.json()["failure"]["kind"] == "request_in_progress"

        release.set()
        assert (await first).status_code == 200

        # Slot is free again once the first request finished
        third = await scan("ash")
        assert third.status_code == 200


class TestCatalog:
    async def test_lists_catalog(self, client: AsyncClient) -> None:
        response = await client.get("/scanner/catalog")

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 3
        assert [c["name"] for c in data["cards"]] == [
            "Pikachu V",
            "Charizard VMAX",
            "Gardevoir ex",
        ]


class TestUnexpectedErrors:
    async def test_unhandled_error_uses_unknown_failure_envelope(self) -> None:
        """Crashes are reported as unknown failures instead of a bare 500."""

        class BrokenIdentifier(CardIdentifier):
            async def identify(self, image: bytes, content_type: str | None) -> CardRecord:
                raise RuntimeError("model weights missing")

        app.dependency_overrides[provide_card_identifier] = lambda: BrokenIdentifier()
        transport = ASGITransport(app=app, raise_app_exceptions=False)
        try:
            async with AsyncClient(transport=transport, base_url="http://test") as client:
                response = await client.post(
                    "/scanner/identify",
                    content=PNG_BYTES,
                    headers={"Content-Type": "image/png"},
                )
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 500
        data = response.json()
        assert data["outcome"] == "unknown_failure"
        assert data["failure"]["kind"] == "unknown"
        assert data["failure"]["detail"] == "RuntimeError"
        assert "model weights" not in response.text
