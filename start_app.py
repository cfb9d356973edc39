# start_app.py
"""Prepare the order ledger database and launch the API server."""

from __future__ import annotations

import argparse
import asyncio
import os
import sys

import uvicorn
from dotenv import load_dotenv
from sqlalchemy.exc import SQLAlchemyError

import config


async def init_ledger(dsn: str) -> None:
    """Create the ledger tables on ``dsn`` if they are missing."""

    from api.app.db import create_schema, get_engine

    engine = get_engine(dsn)
    try:
        await create_schema(engine)
    finally:
        await engine.dispose()


def main(argv: list[str] | None = None) -> None:
    """Load settings, create the ledger schema, then start the API."""

    parser = argparse.ArgumentParser()
    parser.add_argument(
        "--skip-ledger-init",
        action="store_true",
        help="Start without creating the ledger tables up front",
    )
    parser.add_argument("--host", default="0.0.0.0")  # nosec B104: bind for local development
    parser.add_argument("--port", type=int, default=int(os.getenv("PORT", "8000")))
    args = parser.parse_args(argv)

    load_dotenv()  # load environment variables from a .env file
    config.get_settings.cache_clear()
    settings = config.get_settings()

    env_flag = os.getenv("SKIP_LEDGER_INIT")
    skip = args.skip_ledger_init or (
        env_flag and env_flag.lower() not in {"0", "false"}
    )
    if not skip:
        try:
            asyncio.run(init_ledger(settings.ledger_database_url))
        except (SQLAlchemyError, OSError) as exc:
            print(f"ledger database initialisation failed: {exc}", file=sys.stderr)
            raise SystemExit(1)

    try:
        uvicorn.run(
            "api.app.main:app",
            host=args.host,
            port=args.port,
            log_level="info",
        )
    except ModuleNotFoundError as exc:
        print(
            f"cannot start API, {exc.name or exc} is not installed; run 'pip install -e .'",
            file=sys.stderr,
        )
        raise SystemExit(1)


if __name__ == "__main__":
    main()
