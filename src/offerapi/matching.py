from typing import Iterable, List, NamedTuple, Optional, Tuple

from .models import Listing
from .utils import normalize

# Model aliases
# Informal / competitor phrasings -> the naming the source page uses.
# Scanned in order; the first key contained in the query wins, even if a
# later key would be a longer match.
ALIASES: Tuple[Tuple[str, str], ...] = (
    ("peresus pro 4", "peresus pro iv"),
    ("peresus pro iv", "peresus pro iv"),
    ("ben johns perseus", "peresus pro iv"),
    ("joola perseus", "peresus pro iv"),
    ("perseus pro", "peresus pro"),
    ("bantam exps", "bantam exps"),
    ("bantam xl", "bantam xl"),
    ("onyx pro", "onyx"),
)


class MatchResult(NamedTuple):
    listing: Listing
    score: int          # overlap length (substring phase) or token hits (fallback)


def resolve_alias(query: str, aliases: Iterable[Tuple[str, str]] = ALIASES) -> str:
    """Rewrite a normalized query to its canonical term if it contains an alias key."""
    for alias, target in aliases:
        if alias in query:
            return target
    return query


def _substring_match(query: str, catalog: Iterable[Listing]) -> Optional[MatchResult]:
    """
    Containment in either direction.

    Score is the overlap length (the shorter of the two strings), so the most
    specific containing entry wins regardless of scrape order. Ties keep the
    first entry seen.
    """
    best: Optional[MatchResult] = None
    for item in catalog:
        n = normalize(item.name)
        if not n:
            continue
        if n in query or query in n:
            overlap = min(len(n), len(query))
            if best is None or overlap > best.score:
                best = MatchResult(item, overlap)
    return best


def _token_match(query: str, catalog: Iterable[Listing]) -> Optional[MatchResult]:
    """
    Count query tokens appearing inside each name.

    Highest hit count wins; ties go to the longer original name.
    """
    tokens: List[str] = query.split()
    best: Optional[MatchResult] = None
    for item in catalog:
        n = normalize(item.name)
        hits = sum(1 for t in tokens if t in n)
        if hits == 0:
            continue
        if (
            best is None
            or hits > best.score
            or (hits == best.score and len(item.name) > len(best.listing.name))
        ):
            best = MatchResult(item, hits)
    return best


def best_match(
    model: Optional[str],
    catalog: Iterable[Listing],
    aliases: Iterable[Tuple[str, str]] = ALIASES,
) -> Optional[Listing]:
    """
    Resolve a user-typed model name against the scraped catalog.

    Flow:
    1. Normalize the query (empty -> no match)
    2. Alias rewrite
    3. Substring containment, best overlap
    4. Token-overlap fallback
    """
    q = normalize(model)
    if not q:
        return None

    q = resolve_alias(q, aliases)
    catalog = list(catalog)

    result = _substring_match(q, catalog) or _token_match(q, catalog)
    return result.listing if result else None
