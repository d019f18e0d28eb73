"""offerapi: fixed buy-back offers for used paddles, priced off a live resale catalog.

Modules:
  offerapi.utils         text normalization, price parsing
  offerapi.matching      alias table + catalog matcher
  offerapi.extractors    markup -> listings
  offerapi.services      fetcher with retry, single-flight catalog cache
  offerapi.offers        OfferEngine
  offerapi.main          FastAPI app (POST /offer)
"""

from .matching import best_match
from .models import Listing, ParsedPrice
from .offers import OfferEngine
from .utils import normalize, parse_price

__all__ = [
    "Listing",
    "OfferEngine",
    "ParsedPrice",
    "best_match",
    "normalize",
    "parse_price",
]
