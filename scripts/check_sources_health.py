#!/usr/bin/env python3
"""
Async health check for configured book sources.

Runs one search per enabled source (and, when a result comes back, loads
its chapter list) and writes a JSON report.

Usage:
  python scripts/check_sources_health.py [settings.toml] [keyword]
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from pathlib import Path
from time import perf_counter
from typing import Any, TypedDict

from novelsource.infra.config import ConfigAdapter, load_config
from novelsource.plugins.client import BookSourceClient
from novelsource.schemas import BookSource

# =========================
#   Config
# =========================

DEFAULT_KEYWORD = "斗破苍穹"
DATA_DIR = Path(__file__).parent / "data"
REPORT_PATH = DATA_DIR / "source_health_report.json"

logger = logging.getLogger("source_health")
logging.basicConfig(level=logging.INFO)


# =========================
#   Result type
# =========================


class SourceResult(TypedDict):
    source_id: str
    source_name: str
    search_elapsed: float
    search_hits: int
    chapter_elapsed: float
    chapter_count: int
    ok: bool
    reason: str


# =========================
#   Worker: check one source
# =========================


async def check_source(
    client: BookSourceClient, source: BookSource, keyword: str
) -> SourceResult:
    pipeline = client.pipeline(source)
    result: SourceResult = {
        "source_id": source.id,
        "source_name": source.name,
        "search_elapsed": 0.0,
        "search_hits": 0,
        "chapter_elapsed": 0.0,
        "chapter_count": 0,
        "ok": False,
        "reason": "",
    }

    t0 = perf_counter()
    rows = [row async for row in pipeline.search(keyword)]
    result["search_elapsed"] = perf_counter() - t0
    result["search_hits"] = len(rows)
    if not rows:
        result["reason"] = "no search results"
        return result

    detail_url = rows[0]["detail_url"]
    if not detail_url:
        result["reason"] = "first result has no detail URL"
        return result

    t0 = perf_counter()
    chapters = [ch async for ch in pipeline.get_chapters(detail_url)]
    result["chapter_elapsed"] = perf_counter() - t0
    result["chapter_count"] = len(chapters)
    result["ok"] = bool(chapters)
    result["reason"] = "" if chapters else "empty chapter list"

    logger.info(
        "Source %s | hits=%d chapters=%d",
        source.name,
        result["search_hits"],
        result["chapter_count"],
    )
    return result


# =========================
#   Summary generator
# =========================


def summarize(results: list[SourceResult]) -> dict[str, Any]:
    healthy = [r for r in results if r["ok"]]
    elapsed = [r["search_elapsed"] for r in results]
    return {
        "total": len(results),
        "healthy": len(healthy),
        "avg_search_elapsed": sum(elapsed) / len(elapsed) if elapsed else 0.0,
        "failing": {r["source_name"]: r["reason"] for r in results if not r["ok"]},
    }


# =========================
#   Main
# =========================


async def main(config_path: str | None, keyword: str) -> None:
    adapter = ConfigAdapter(load_config(config_path))
    sources = [s for s in adapter.get_sources() if s.enabled]
    logger.info("Checking %d enabled sources with keyword %r", len(sources), keyword)

    client_cfg = adapter.get_client_config()
    client_cfg.cache_cfg.enabled = False

    async with BookSourceClient(sources, client_cfg) as client:
        results = await asyncio.gather(
            *(check_source(client, s, keyword) for s in sources)
        )

    DATA_DIR.mkdir(parents=True, exist_ok=True)
    report = {"results": list(results), "summary": summarize(list(results))}
    REPORT_PATH.write_text(json.dumps(report, ensure_ascii=False, indent=2))
    logger.info("Report saved to %s", REPORT_PATH)


if __name__ == "__main__":
    args = sys.argv[1:]
    asyncio.run(
        main(
            args[0] if args else None,
            args[1] if len(args) > 1 else DEFAULT_KEYWORD,
        )
    )
