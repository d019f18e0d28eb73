import re
from typing import Optional

from .models import ParsedPrice

# Regex Helpers

# Decimal price: digits, a point, exactly two digits ("199.99", "$1299.00")
PRICE_RE = re.compile(r"\d+\.\d{2}")

# A currency-marked digit, used to decide whether scraped text is a price at all
CURRENCY_DIGIT_RE = re.compile(r"\$\d")

WHITESPACE_RE = re.compile(r"\s+")

# Text Normalization
def normalize(s: Optional[str]) -> str:
    """
    Canonical form used for every text comparison:
      - Lowercase
      - Collapse runs of whitespace to one space
      - Trim
    """
    if not s:
        return ""
    return WHITESPACE_RE.sub(" ", s.lower()).strip()

def collapse_whitespace(s: Optional[str]) -> str:
    """Collapse internal whitespace without changing case."""
    if not s:
        return ""
    return WHITESPACE_RE.sub(" ", s).strip()

# Price Parsing
def parse_price(price_text: Optional[str]) -> Optional[ParsedPrice]:
    """
    Turn raw price text into (lo, hi, mid).

    Every "123.45"-style number in the text counts, so single prices,
    "was/now" pairs and ranges like "$120.00 – $150.00" are handled
    the same way. Returns None when no such number is present.
    """
    if not price_text:
        return None
    nums = [float(v) for v in PRICE_RE.findall(price_text)]
    if not nums:
        return None
    lo = min(nums)
    hi = max(nums)
    return ParsedPrice(lo=lo, hi=hi, mid=(lo + hi) / 2)

def has_currency_digit(text: Optional[str]) -> bool:
    return bool(text) and CURRENCY_DIGIT_RE.search(text) is not None
