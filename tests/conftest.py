"""Shared fixtures for the offerapi test suite."""

import sys
from pathlib import Path

import pytest

# Ensure src/ is on the path so "import offerapi" works from a plain checkout.
repo_root = Path(__file__).resolve().parents[1]
src_path = repo_root / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from offerapi.models import Listing  # noqa: E402


class FakeLoader:
    """Zero-arg async loader that replays queued catalogs / exceptions."""

    def __init__(self, *results):
        self.results = list(results)
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        result = self.results.pop(0) if len(self.results) > 1 else self.results[0]
        if isinstance(result, BaseException):
            raise result
        return result


@pytest.fixture
def paddle_catalog():
    return [
        Listing(name="Joola Perseus Pro IV 16mm", price_text="$199.99"),
        Listing(name="Selkirk Vanguard Power Air", price_text="$120.00 – $150.00"),
        Listing(name="Paddletek Bantam EX-L", price_text="$89.95"),
        Listing(name="Onyx Evoke Premier", price_text="Call for price $"),
    ]


@pytest.fixture
def listing_page_html():
    """A trimmed-down product grid in the shape of the used-paddle page."""
    return """
    <html><body>
      <ul class="products">
        <li class="item">
          <a href="/p/1" title="Joola Perseus Pro IV">
            <span class="product-title">Joola Perseus Pro IV</span>
          </a>
          <span class="price">$199.99</span>
        </li>
        <li class="item">
          <a href="/p/2" title="Selkirk Vanguard Power Air"><img src="/img/2.jpg"></a>
          <div class="pricing">
            Was $150.00
            Now   $120.00
          </div>
        </li>
        <li class="item">
          <a href="/p/3">Engage Pursuit MX</a>
          <span class="price">$110.50</span>
        </li>
        <li class="item">
          <span class="title">Gift Card</span>
          <span class="price">Choose amount</span>
        </li>
        <li><a href="/about">About us</a></li>
      </ul>
      <div class="grid-item">
        <span class="name">joola perseus pro iv</span>
        <span class="sale-price">$199.99</span>
      </div>
    </body></html>
    """
