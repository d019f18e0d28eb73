from dataclasses import dataclass
from typing import NamedTuple, Optional, Sequence

from pydantic import BaseModel

# OfferReq
# Used by: POST /offer
# Fields are optional here so a missing model/condition reaches our own
# validation (400) instead of pydantic's 422.
class OfferReq(BaseModel):
    model: Optional[str] = None          # free text, e.g. "perseus pro 4"
    condition: Optional[str] = None      # e.g. "good", "like new"
    notes: Optional[str] = None          # echoed back unmodified

# Listing scraped from the source page
# price_text keeps the original formatting ("$120.00 – $150.00", "Was $99.99 Now $79.99")
@dataclass(frozen=True)
class Listing:
    name: str
    price_text: str

# Ordered, deduplicated listings from one scrape
Catalog = Sequence[Listing]

# Numbers pulled out of a listing's price text (per request, never cached)
class ParsedPrice(NamedTuple):
    lo: float
    hi: float
    mid: float

# One immutable cache snapshot, swapped wholesale on refresh
@dataclass(frozen=True)
class CacheEntry:
    catalog: Catalog          # tuple, never mutated in place
    fetched_at: float
    ttl: float

    def is_fresh(self, now: float) -> bool:
        return now - self.fetched_at < self.ttl
