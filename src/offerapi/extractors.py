"""
Listing extraction from the source page's markup.

Everything here is best-effort: the page is not ours and its structure
drifts. Callers only depend on ``ListingExtractor.extract(html) -> Catalog``,
so a different page layout is a new selector set or a new extractor class.
"""

from dataclasses import dataclass
from typing import Iterable, List, Protocol

from bs4 import BeautifulSoup

from .log import get_logger
from .models import Catalog, Listing
from .utils import collapse_whitespace, has_currency_digit, normalize

logger = get_logger(__name__)


class ListingExtractor(Protocol):
    def extract(self, html: str) -> Catalog:
        ...


# Catalog dedup
def dedupe_listings(items: Iterable[Listing]) -> Catalog:
    """
    Keep one listing per normalized name.

    The one with the longer price text wins (usually the "was/now" or range
    variant). Order follows the first time each name was seen.
    """
    by_name = {}
    for it in items:
        key = normalize(it.name)
        current = by_name.get(key)
        if current is None or len(it.price_text) > len(current.price_text):
            by_name[key] = it
    return list(by_name.values())


@dataclass(frozen=True)
class HeuristicExtractor:
    """
    CSS-selector heuristics for a product grid.

    - candidates: anything that looks like a product entry
    - name: title-like element, then a link's title attribute, then link text
    - price: first price-like element, whitespace collapsed
    A candidate is kept when it has a name and a "$<digit>" price.
    """

    candidate_selector: str = "[data-product-item], .product, .grid-item, li, .item"
    name_selector: str = ".product-title, .title, .name, a[title]"
    price_selector: str = ".price, .product-price, .sale-price, .amount, .pricing"
    parser: str = "html.parser"

    def _name_for(self, el) -> str:
        node = el.select_one(self.name_selector)
        if node is not None:
            text = node.get_text().strip()
            if text:
                return text

        link = el.find("a")
        if link is None:
            return ""

        title = (link.get("title") or "").strip()
        if title:
            return title
        return link.get_text().strip()

    def _price_for(self, el) -> str:
        node = el.select_one(self.price_selector)
        if node is None:
            return ""
        return collapse_whitespace(node.get_text())

    def raw_listings(self, html: str) -> List[Listing]:
        soup = BeautifulSoup(html or "", self.parser)
        items: List[Listing] = []
        for el in soup.select(self.candidate_selector):
            name = self._name_for(el)
            price_text = self._price_for(el)
            if name and has_currency_digit(price_text):
                items.append(Listing(name=name, price_text=price_text))
        return items

    def extract(self, html: str) -> Catalog:
        items = self.raw_listings(html)
        catalog = dedupe_listings(items)
        logger.debug("Extracted %d candidates, %d after dedup", len(items), len(catalog))
        return catalog
