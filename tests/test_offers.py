"""End-to-end tests for OfferEngine (cache -> match -> price -> offer)."""

import asyncio

import pytest

from offerapi.models import Listing
from offerapi.offers import OfferEngine, OfferUnavailableError, OfferValidationError
from offerapi.services import CatalogCache, UpstreamError

from conftest import FakeLoader


def make_engine(*results, ttl=300.0):
    loader = FakeLoader(*results)
    return OfferEngine(CatalogCache(loader, ttl=ttl)), loader


class TestValidation:
    @pytest.mark.parametrize(
        "model, condition",
        [(None, "good"), ("", "good"), ("perseus", None), ("perseus", "")],
    )
    def test_missing_fields(self, model, condition):
        engine, loader = make_engine([])
        with pytest.raises(OfferValidationError):
            asyncio.run(engine.compute_offer(model, condition))
        # No cache or network access before validation passes
        assert loader.calls == 0


class TestComputeOffer:
    def test_alias_match_offer(self):
        catalog = [Listing(name="Joola Perseus Pro IV", price_text="$199.99")]
        engine, _ = make_engine(catalog)

        result = asyncio.run(engine.compute_offer("perseus pro 4", "good"))

        assert result == {
            "ok": True,
            "found": True,
            "offer": 100.00,
            "referencePrice": "$199.99",
            "referenceMidpoint": 199.99,
            "policy": "Offer equals 50% of the current used-price midpoint.",
            "echo": {
                "model": "Joola Perseus Pro IV",
                "submittedModel": "perseus pro 4",
                "condition": "good",
                "notes": "",
            },
        }

    def test_range_price(self, paddle_catalog):
        engine, _ = make_engine(paddle_catalog)
        result = asyncio.run(engine.compute_offer("vanguard power air", "fair", "chipped edge"))
        assert result["offer"] == 67.50
        assert result["referenceMidpoint"] == 135.00
        assert result["referencePrice"] == "$120.00 – $150.00"
        assert result["echo"]["notes"] == "chipped edge"

    def test_no_match(self, paddle_catalog):
        engine, _ = make_engine(paddle_catalog)
        result = asyncio.run(engine.compute_offer("wilson tennis racket", "good", "n/a"))
        assert result == {
            "ok": True,
            "found": False,
            "offer": None,
            "message": "Model not currently available for offer calculation.",
            "echo": {"submittedModel": "wilson tennis racket", "condition": "good", "notes": "n/a"},
        }

    def test_unparsable_price(self, paddle_catalog):
        engine, _ = make_engine(paddle_catalog)
        result = asyncio.run(engine.compute_offer("onyx evoke premier", "good"))
        assert result["found"] is True
        assert result["offer"] is None
        assert result["message"] == "Price unavailable for matched model."
        assert "referencePrice" not in result

    def test_empty_catalog_is_no_match(self):
        engine, _ = make_engine([])
        result = asyncio.run(engine.compute_offer("anything", "good"))
        assert result["found"] is False
        assert result["offer"] is None

    def test_stale_catalog_used_when_refresh_fails(self):
        catalog = [Listing(name="Joola Perseus Pro IV", price_text="$199.99")]
        engine, loader = make_engine(catalog, UpstreamError("HTTP 503", status_code=503), ttl=0.0)

        async def scenario():
            await engine.compute_offer("perseus pro iv", "good")
            return await engine.compute_offer("perseus pro iv", "good")

        result = asyncio.run(scenario())
        assert loader.calls == 2
        assert result["found"] is True
        assert result["offer"] == 100.00

    def test_unavailable_without_any_catalog(self):
        engine, _ = make_engine(UpstreamError("down"))
        with pytest.raises(OfferUnavailableError):
            asyncio.run(engine.compute_offer("perseus", "good"))

    def test_custom_payout_ratio(self):
        catalog = [Listing(name="Selkirk Vanguard", price_text="$200.00")]
        engine = OfferEngine(CatalogCache(FakeLoader(catalog)), payout_ratio=0.4)
        result = asyncio.run(engine.compute_offer("selkirk vanguard", "good"))
        assert result["offer"] == 80.00
        assert result["policy"] == "Offer equals 40% of the current used-price midpoint."

    def test_response_never_mentions_source(self):
        catalog = [Listing(name="Joola Perseus Pro IV", price_text="$199.99")]
        engine, _ = make_engine(catalog)
        result = asyncio.run(engine.compute_offer("perseus pro iv", "good"))
        assert "pickleballwarehouse" not in repr(result).lower()
        assert "http" not in repr(result).lower()
