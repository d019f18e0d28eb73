from typing import Optional

from fastapi import Body, Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Internal imports
from .config import Settings, load_settings
from .log import get_logger, setup_logging
from .models import OfferReq
from .offers import OfferEngine, OfferUnavailableError, OfferValidationError
from .services import CatalogCache, Fetcher, catalog_loader

# App + Environment Setup
settings = load_settings()
setup_logging(settings.log_level)
logger = get_logger(__name__)

app = FastAPI(title="Used Paddle Offers")
# Allow any frontend (trade-in widget, dashboard) to call us
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["*"],
)

FAILED_MESSAGE = "Offer calculation failed. Please try again shortly."


def build_engine(cfg: Settings) -> OfferEngine:
    """Wire fetcher -> extractor -> cache -> engine from settings."""
    fetcher = Fetcher(
        attempts=cfg.fetch_attempts,
        backoff=cfg.backoff_seconds,
        timeout=cfg.fetch_timeout,
    )
    cache = CatalogCache(catalog_loader(cfg.source_url, fetcher), ttl=cfg.cache_ttl)
    return OfferEngine(cache, payout_ratio=cfg.payout_ratio)


# One engine (and so one cache) per process
engine = build_engine(settings)


def get_engine() -> OfferEngine:
    return engine


# Offer calculation (public; never reveals the source)
@app.post("/offer")
async def create_offer(
    payload: Optional[OfferReq] = Body(None),
    offer_engine: OfferEngine = Depends(get_engine),
):
    """
    Quote a fixed buy-back offer for a used paddle.

    Input example:
    {
        "model": "perseus pro 4",
        "condition": "good",
        "notes": "light edge guard wear"
    }

    Outcomes:
    - 400 when model or condition is missing
    - 200 with found=false when nothing in the catalog matches
    - 200 with found=true, offer=null when the matched price can't be read
    - 200 with the offer, reference price and midpoint otherwise
    - 500 when no catalog could be loaded at all
    """
    payload = payload or OfferReq()

    try:
        return await offer_engine.compute_offer(
            payload.model, payload.condition, payload.notes
        )
    except OfferValidationError as e:
        return JSONResponse(status_code=400, content={"ok": False, "error": str(e)})
    except OfferUnavailableError:
        return JSONResponse(status_code=500, content={"ok": False, "error": FAILED_MESSAGE})
    except Exception:
        logger.exception("Server error while computing offer")
        return JSONResponse(status_code=500, content={"ok": False, "error": FAILED_MESSAGE})
