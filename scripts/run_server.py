#!/usr/bin/env python3
from __future__ import annotations

import argparse
import logging

import uvicorn

from catalog.config import CatalogSettings
from catalog.main import create_app


def main() -> int:
    settings = CatalogSettings.from_env()
    parser = argparse.ArgumentParser(description="Serve the ordered item catalog API.")
    parser.add_argument("--host", default=settings.host, help="Bind address.")
    parser.add_argument("--port", type=int, default=settings.port, help="Bind port.")
    parser.add_argument(
        "--log-level",
        default=settings.log_level,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help="Root log level (defaults to CATALOG_LOG_LEVEL).",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    app = create_app(settings=settings)
    logging.getLogger(__name__).info("catalog_server_start host=%s port=%s", args.host, args.port)
    uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level.lower())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
