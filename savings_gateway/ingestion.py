"""Batch ingestion - fetch and normalize every source into a rates snapshot.

Sources run concurrently (bounded) with an individual timeout each. A source
that fails for any reason contributes a bank with no tiers; it never stops
its siblings. The batch is degraded when fewer than half of the sources
produced tiers, and `main` then exits with status 1.
"""

import asyncio
import logging
import sys
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Sequence, Tuple

from savings_gateway.config import settings
from savings_gateway.domain.adapters.registry import build_adapter
from savings_gateway.domain.exceptions import SourceConfigError, SourceUnavailableError
from savings_gateway.domain.models import Bank, Tier
from savings_gateway.domain.registry import BankRegistry
from savings_gateway.infrastructure.clients.source import SourceClient
from savings_gateway.infrastructure.observability.logging import (
    log_batch_outcome,
    log_source_outcome,
    setup_logging,
)
from savings_gateway.infrastructure.observability.metrics import (
    ingestion_duration_histogram,
    record_source_outcome,
    source_fetch_failures_counter,
)
from savings_gateway.infrastructure.snapshot.store import save_snapshot
from savings_gateway.infrastructure.sources import SourceConfig, load_sources

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BatchResult:
    """Banks from one ingestion run plus the success ratio"""

    banks: Tuple[Bank, ...]
    succeeded: int
    total: int
    success_threshold: float = settings.ingestion_success_threshold

    @property
    def ratio(self) -> float:
        return self.succeeded / self.total if self.total else 0.0

    @property
    def degraded(self) -> bool:
        return self.succeeded < self.total * self.success_threshold

    @property
    def exit_code(self) -> int:
        return 1 if self.degraded else 0


def _bank_for(source: SourceConfig, tiers: Sequence[Tier]) -> Bank:
    return Bank(
        id=source.id,
        name=source.name,
        type=source.type,
        product_name=source.product_name,
        website=source.website or source.url,
        tiers=tuple(tiers),
    )


async def ingest_source(source: SourceConfig, client: SourceClient, timeout: float) -> Bank:
    """
    Fetch and normalize one source.

    Timeouts and fetch errors are logged and yield a bank with no tiers.
    """
    start_time = time.time()
    error = None
    tiers: List[Tier] = []

    try:
        raw = await asyncio.wait_for(
            client.fetch(
                source.fetch_url,
                method=source.request.method,
                body=source.request.body,
                content_type=source.request.content_type,
                expect_json=source.request.json_response,
            ),
            timeout=timeout,
        )
        tiers = build_adapter(source.adapter, source.id, source.options).normalize(raw)
    except asyncio.TimeoutError:
        source_fetch_failures_counter.inc()
        error = f"Timeout after {timeout}s"
    except SourceUnavailableError as e:
        source_fetch_failures_counter.inc()
        error = str(e)
    except KeyError as e:
        error = str(e)

    duration_ms = (time.time() - start_time) * 1000
    if tiers:
        logger.info(f"{source.name}: OK ({len(tiers)} tiers)")
    else:
        logger.warning(f"{source.name}: FAILED{f' ({error})' if error else ''}")
    log_source_outcome(source.id, len(tiers), duration_ms, error)
    record_source_outcome(bool(tiers))

    return _bank_for(source, tiers)


async def run_ingestion(
    sources: Sequence[SourceConfig],
    client: SourceClient | None = None,
    max_concurrency: int | None = None,
    timeout: float | None = None,
) -> BatchResult:
    """Ingest every source concurrently; result banks keep configuration order"""
    client = client or SourceClient()
    timeout = timeout or settings.http_timeout_seconds
    semaphore = asyncio.Semaphore(max_concurrency or settings.ingestion_max_concurrency)

    async def bounded(source: SourceConfig) -> Bank:
        async with semaphore:
            return await ingest_source(source, client, timeout)

    start_time = time.time()
    logger.info(f"Scraping {len(sources)} banks...")

    outcomes = await asyncio.gather(*(bounded(source) for source in sources), return_exceptions=True)

    banks: List[Bank] = []
    for source, outcome in zip(sources, outcomes):
        if isinstance(outcome, BaseException):
            # Unexpected failure inside one source: isolate it like any other failure
            logger.error(f"{source.name}: FAILED ({outcome!r})", extra={"source_id": source.id})
            record_source_outcome(False)
            banks.append(_bank_for(source, ()))
        else:
            banks.append(outcome)

    duration = time.time() - start_time
    ingestion_duration_histogram.observe(duration)

    result = BatchResult(
        banks=tuple(banks),
        succeeded=sum(1 for bank in banks if bank.usable),
        total=len(banks),
    )
    log_batch_outcome(result.succeeded, result.total, result.degraded, duration * 1000)
    return result


def main() -> int:
    """Run one ingestion cycle and write the snapshot; returns the exit status"""
    setup_logging(settings.log_level)

    try:
        sources_file = load_sources(settings.sources_path)
    except SourceConfigError as e:
        logger.error(str(e))
        return 1

    result = asyncio.run(run_ingestion(sources_file.enabled_sources))

    registry = BankRegistry(
        banks=result.banks,
        last_updated=datetime.now(timezone.utc),
        default_withholding_rate_percent=sources_file.default_withholding_rate_percent,
    )
    path = save_snapshot(registry, settings.snapshot_path)
    logger.info(f"Done! {result.succeeded}/{result.total} banks. Saved to {path}")

    return result.exit_code


if __name__ == "__main__":
    sys.exit(main())
