from typing import Any, Callable, Dict, Iterable, Optional

from .calculations import fixed_offer, policy_statement, reference_midpoint
from .log import get_logger
from .matching import best_match
from .models import Listing
from .services import CatalogCache
from .utils import parse_price

logger = get_logger(__name__)

NOT_FOUND_MESSAGE = "Model not currently available for offer calculation."
NO_PRICE_MESSAGE = "Price unavailable for matched model."


class OfferValidationError(Exception):
    """model or condition missing from the request."""


class OfferUnavailableError(Exception):
    """No catalog could be obtained (or something unexpected broke)."""


class OfferEngine:
    """
    Cache -> match -> parse price -> fixed-percentage offer.

    Responses never carry the source URL; only the matched listing's name and
    raw price text leave this class.
    """

    def __init__(
        self,
        cache: CatalogCache,
        payout_ratio: float = 0.5,
        matcher: Callable[[Optional[str], Iterable[Listing]], Optional[Listing]] = best_match,
    ):
        self.cache = cache
        self.payout_ratio = payout_ratio
        self._matcher = matcher

    async def compute_offer(
        self,
        model: Optional[str],
        condition: Optional[str],
        notes: Optional[str] = None,
    ) -> Dict[str, Any]:
        if not model or not condition:
            raise OfferValidationError("Missing required fields: model, condition")

        notes = notes or ""
        echo = {"submittedModel": model, "condition": condition, "notes": notes}

        try:
            catalog = await self.cache.get_or_refresh()
        except Exception as e:
            logger.exception("No catalog available for offer calculation")
            raise OfferUnavailableError("Offer calculation failed. Please try again shortly.") from e

        match = self._matcher(model, catalog)
        if match is None:
            return {
                "ok": True,
                "found": False,
                "offer": None,
                "message": NOT_FOUND_MESSAGE,
                "echo": echo,
            }

        parsed = parse_price(match.price_text)
        if parsed is None:
            return {
                "ok": True,
                "found": True,
                "offer": None,
                "message": NO_PRICE_MESSAGE,
                "echo": echo,
            }

        return {
            "ok": True,
            "found": True,
            "offer": fixed_offer(parsed.mid, self.payout_ratio),
            "referencePrice": match.price_text,
            "referenceMidpoint": reference_midpoint(parsed.mid),
            "policy": policy_statement(self.payout_ratio),
            "echo": {"model": match.name, **echo},
        }
