"""BulkStatus — Batch Update Pipeline.

Runs the per-identifier flow sequentially:
  fetch → already at target? (skip) → update → record outcome → pace

One request is in flight at a time; the random pause between identifiers
keeps the run under the remote API's rate limits.
"""

import asyncio
import random
import time
from typing import List, Optional, Sequence

import httpx

from bulkstatus.config import Settings, get_settings
from bulkstatus.connectors.resource.client import ResourceAPIError, ResourceClient
from bulkstatus.core.logging import get_logger
from bulkstatus.core.messages import t
from bulkstatus.models.run_models import RunSummary, UpdateOutcome
from bulkstatus.updater.executor import Sleep, UpdateExecutor
from bulkstatus.updater.fetcher import ResourceFetcher
from bulkstatus.updater.status_fields import already_target

logger = get_logger("updater.pipeline")


class BatchDriver:
    """Drives a list of identifiers to the target status, one at a time."""

    def __init__(
        self,
        fetcher: ResourceFetcher,
        executor: UpdateExecutor,
        settings: Settings,
        sleep: Sleep = asyncio.sleep,
        rng: Optional[random.Random] = None,
    ):
        self.fetcher = fetcher
        self.executor = executor
        self.settings = settings
        self.sleep = sleep
        self.rng = rng or random.Random()

    async def process(self, identifier: str) -> bool:
        """Fetch, check and update a single identifier. Never raises."""
        lang = self.settings.ui_language
        logger.info(
            f"{t('processing', lang)}: {identifier}", extra={"identifier": identifier}
        )
        try:
            return await self._process(identifier)
        except Exception as e:
            logger.exception(
                f"{t('processing', lang)} {identifier} {t('update_failed', lang)}: {e}",
                extra={"identifier": identifier},
            )
            return False

    async def _process(self, identifier: str) -> bool:
        lang = self.settings.ui_language
        try:
            record = await self.fetcher.fetch(identifier)
        except ResourceAPIError as e:
            logger.error(
                f"{t('fetch_failed', lang)}: {identifier}: {e}",
                extra={"identifier": identifier, "status_code": e.status_code},
            )
            return False
        if record is None:
            return False

        if already_target(
            record,
            self.settings.status_fields,
            self.settings.effective_target_status,
        ):
            logger.info(
                f"{t('already_has_status', lang)}: {identifier}",
                extra={"identifier": identifier, "resource_id": record["id"]},
            )
            return True

        return await self.executor.apply(record)

    def pacing_delay(self) -> float:
        """Random pause in seconds, uniform over [min_delay, max_delay] ms."""
        delay_ms = self.rng.uniform(self.settings.min_delay, self.settings.max_delay)
        return delay_ms / 1000

    async def run(self, identifiers: Sequence[str]) -> RunSummary:
        lang = self.settings.ui_language
        summary = RunSummary()
        logger.info(f"{t('processing', lang)} {len(identifiers)}")

        for index, identifier in enumerate(identifiers):
            started = time.monotonic()
            success = await self.process(identifier)
            summary.record(
                UpdateOutcome(
                    identifier=identifier,
                    success=success,
                    duration_ms=int((time.monotonic() - started) * 1000),
                )
            )

            if index < len(identifiers) - 1:
                delay = self.pacing_delay()
                logger.info(
                    f"{t('waiting', lang)} {delay:.3f}",
                    extra={"delay_ms": int(delay * 1000)},
                )
                await self.sleep(delay)

        logger.info(
            f"{t('completed', lang)}: {summary.succeeded}, "
            f"{t('failed', lang)}: {summary.failed}"
        )
        return summary


def log_banner(settings: Settings, identifiers: Sequence[str]) -> None:
    lang = settings.ui_language
    logger.info(f"========= {t('start_message', lang)} =========")
    logger.info(f"{t('status', lang)}: {settings.effective_target_status}")
    logger.info(f"{t('resources', lang)}: {', '.join(identifiers)}")
    logger.info("======================================")


async def run_batch(
    identifiers: Optional[List[str]] = None,
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    sleep: Sleep = asyncio.sleep,
) -> RunSummary:
    """Wire client, fetcher, executor and driver from settings and run once."""
    settings = settings or get_settings()
    if identifiers is None:
        identifiers = list(settings.resource_identifiers)

    log_banner(settings, identifiers)
    client = ResourceClient(settings, transport=transport)
    try:
        driver = BatchDriver(
            fetcher=ResourceFetcher(client, settings),
            executor=UpdateExecutor(client, settings, sleep=sleep),
            settings=settings,
            sleep=sleep,
        )
        return await driver.run(identifiers)
    finally:
        await client.close()
