"""SignalDesk — application entry point.

Boots the FastAPI server and provides the CLI entry point for serving the
API or printing a single analysis pass.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from signaldesk.api.routers import router

app = FastAPI(title="SignalDesk API", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "OPTIONS"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
)
app.include_router(router)

logger = logging.getLogger("signaldesk")


@app.get("/health")
async def health():
    """Liveness probe."""
    return {"status": "ok"}


# ── CLI ──────────────────────────────────────────────────────────────────


def run_cli() -> None:
    """Parse CLI arguments and either serve the API or run one pass."""
    import argparse
    import asyncio
    import json

    from signaldesk.api.routers import configure_routers
    from signaldesk.config import load_config
    from signaldesk.engine import SignalEngine
    from signaldesk.market.binance_client import BinanceClient

    parser = argparse.ArgumentParser(description="SignalDesk trading signals")
    parser.add_argument(
        "--once",
        action="store_true",
        help="Run one analysis pass, print the JSON payload and exit",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="HTTP port (default: HTTP_PORT from the environment)",
    )
    args = parser.parse_args()

    config = load_config()

    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    engine = SignalEngine(config=config, client=BinanceClient(config))

    if args.once:
        result = asyncio.run(engine.analyze())
        print(json.dumps(result.to_dict(), indent=2))
        return

    configure_routers(engine=engine)
    _serve(args.port or config.http_port)


def _serve(port: int) -> None:
    """Run the API server until interrupted."""
    import uvicorn

    logger.info("Starting SignalDesk API on port %d", port)
    uvicorn.run(app, host="0.0.0.0", port=port, log_level="info")


if __name__ == "__main__":
    run_cli()
