import uvicorn

from .log import get_logger
from .main import app, settings

logger = get_logger("offerapi")


def run() -> None:
    logger.info("Offer API is running on http://localhost:%d", settings.port)
    logger.info("Send POST requests to http://localhost:%d/offer", settings.port)
    uvicorn.run(app, host="0.0.0.0", port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
