"""API routers — /signals endpoint.

No analysis logic here. Delegates to the ``SignalEngine`` injected at
startup and maps market-data failures to JSON error responses.
"""

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from signaldesk.market.errors import MarketDataError

logger = logging.getLogger("signaldesk")
router = APIRouter()

_engine = None  # Set via configure_routers()


def configure_routers(engine=None) -> None:
    """Inject dependencies from the application startup.

    Args:
        engine: A ``SignalEngine`` instance (or duck-type for tests).
    """
    global _engine  # noqa: PLW0603
    _engine = engine


@router.get("/signals")
async def get_signals():
    """Latest multi-timeframe analysis as the dashboard JSON payload."""
    if _engine is None:
        return JSONResponse(
            status_code=503,
            content={"error": "Signal engine not configured"},
        )
    try:
        result = await _engine.analyze()
    except MarketDataError as exc:
        logger.error("Signal analysis failed: %s", exc)
        return JSONResponse(status_code=502, content={"error": str(exc)})
    return result.to_dict()
