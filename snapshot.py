"""
Static snapshot of the public site data.

Fetches wedding details, approved photos, schedule and playlist from the
API in parallel and writes them, with a build timestamp, to one JSON file
that the static build serves instead of the live API. Any failed fetch
aborts the build before anything is written.

Usage:
    python scripts/build_static.py [--output PATH] [--base-url URL]
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

import httpx

from config import get_config
from logging_config import configure_logging

logger = logging.getLogger(__name__)

SNAPSHOT_ENDPOINTS = {
    "weddingDetails": "/api/wedding-details",
    "photos": "/api/photos?approved=true",
    "schedule": "/api/schedule",
    "playlist": "/api/playlist",
}


async def fetch_snapshot(
    base_url: str,
    timeout: float = 30.0,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> dict[str, Any]:
    """Fetch every snapshot endpoint concurrently. Raises on the first failure."""
    async with httpx.AsyncClient(
        base_url=base_url, timeout=httpx.Timeout(timeout), transport=transport
    ) as client:

        async def _get(path: str) -> Any:
            response = await client.get(path)
            response.raise_for_status()
            return response.json()

        results = await asyncio.gather(
            *(_get(path) for path in SNAPSHOT_ENDPOINTS.values()), return_exceptions=True
        )

    for result in results:
        if isinstance(result, BaseException):
            raise result

    data = dict(zip(SNAPSHOT_ENDPOINTS, results))
    data["buildTime"] = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
    return data


def write_snapshot(data: dict[str, Any], output: Path) -> None:
    """Write the snapshot atomically, creating the parent directory if needed."""
    output.parent.mkdir(parents=True, exist_ok=True)
    tmp = output.with_suffix(output.suffix + ".tmp")
    tmp.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
    os.replace(tmp, output)


async def build_snapshot(
    base_url: str,
    output: Path,
    timeout: float = 30.0,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> dict[str, Any]:
    logger.info("Fetching data for static build from %s", base_url)
    data = await fetch_snapshot(base_url, timeout=timeout, transport=transport)
    write_snapshot(data, output)
    logger.info("Static data written to %s", output)
    return data


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    config = get_config()
    parser = argparse.ArgumentParser(description="Build the static site data snapshot.")
    parser.add_argument(
        "--output",
        type=Path,
        default=Path(config.STATIC_DATA_PATH),
        help=f"Snapshot file to write (default: {config.STATIC_DATA_PATH})",
    )
    parser.add_argument(
        "--base-url",
        default=config.API_BASE_URL,
        help=f"API base URL (default: {config.API_BASE_URL})",
    )
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> int:
    config = get_config()
    configure_logging(config.LOG_FORMAT, config.LOG_LEVEL)
    args = parse_args(argv)

    try:
        asyncio.run(build_snapshot(args.base_url, args.output, timeout=config.REQUEST_TIMEOUT))
    except (httpx.HTTPError, ValueError, OSError) as exc:
        logger.error("Failed to generate static data: %s", exc)
        sys.exit(1)
    return 0


if __name__ == "__main__":
    main()
