"""BulkStatus — Update Executor.

Applies the target status to one record with bounded retry and linear
backoff: after failed attempt k the executor waits ``k * RETRY_BASE_DELAY``
seconds, for at most ``max_retries`` retries.
"""

import asyncio
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional

from bulkstatus.config import Settings
from bulkstatus.connectors.resource.client import ResourceAPIError, ResourceClient
from bulkstatus.core.logging import get_logger
from bulkstatus.core.messages import t
from bulkstatus.updater.status_fields import resolve_status_field

logger = get_logger("updater.executor")

RETRY_BASE_DELAY = 1.0  # seconds

Sleep = Callable[[float], Awaitable[Any]]


def build_update_payload(
    record: Mapping[str, Any],
    status_field: str,
    target: str,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Build a fresh update body. Fields other than id and metadata are dropped."""
    now = now or datetime.now(timezone.utc)
    return {
        "id": record["id"],
        status_field: target,
        "updatedAt": now.isoformat(),
        "metadata": record.get("metadata") or {},
    }


class UpdateExecutor:
    """Sends the status update for a record, retrying on failure."""

    def __init__(
        self,
        client: ResourceClient,
        settings: Settings,
        sleep: Sleep = asyncio.sleep,
    ):
        self.client = client
        self.settings = settings
        self.sleep = sleep

    async def apply(self, record: Mapping[str, Any]) -> bool:
        """Update ``record`` to the target status. Returns False once retries run out."""
        lang = self.settings.ui_language
        target = self.settings.effective_target_status
        status_field = resolve_status_field(record, self.settings.status_fields)
        resource_id = record["id"]
        max_attempts = self.settings.max_retries + 1

        for attempt in range(1, max_attempts + 1):
            payload = build_update_payload(record, status_field, target)
            try:
                await self.client.update(resource_id, payload)
            except ResourceAPIError as e:
                logger.error(
                    f"{t('update_failed', lang)} ({attempt}/{max_attempts}): {e}",
                    extra={
                        "resource_id": resource_id,
                        "attempt": attempt,
                        "max_attempts": max_attempts,
                        "status_code": e.status_code,
                    },
                )
                if attempt < max_attempts:
                    delay = RETRY_BASE_DELAY * attempt
                    logger.info(
                        f"{t('retrying', lang)} {delay:g}",
                        extra={
                            "resource_id": resource_id,
                            "attempt": attempt,
                            "delay_ms": int(delay * 1000),
                        },
                    )
                    await self.sleep(delay)
                continue

            logger.info(
                f"{t('update_success', lang)} {resource_id} "
                f"{t('status', lang)}: {target}",
                extra={"resource_id": resource_id, "status": target},
            )
            return True

        return False
