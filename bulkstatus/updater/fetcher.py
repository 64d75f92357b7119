"""BulkStatus — Resource Fetcher.

Resolves an identifier to a full resource record through the query endpoint.
"""

from typing import Any, Dict, Optional

from bulkstatus.config import Settings
from bulkstatus.connectors.resource.client import ResourceAPIError, ResourceClient
from bulkstatus.core.logging import get_logger
from bulkstatus.core.messages import t
from bulkstatus.updater.status_fields import get_status_value

logger = get_logger("updater.fetcher")

# Top-level keys that may hold the result list, in lookup order
RESULT_LIST_KEYS = ("items", "data", "resources", "results")

STATUS_PLACEHOLDER = "–"


def extract_items(body: Any) -> list:
    """Pull the result list out of a query response body."""
    if not isinstance(body, dict):
        raise ResourceAPIError(
            f"Unexpected query response type: {type(body).__name__}"
        )
    # First key that is present wins, even when its list is empty
    items = next(
        (body[key] for key in RESULT_LIST_KEYS if body.get(key) is not None), []
    )
    if not isinstance(items, list):
        raise ResourceAPIError(
            f"Unexpected result list type: {type(items).__name__}"
        )
    return items


def status_display(value: Any) -> str:
    if value is None or value == "":
        return STATUS_PLACEHOLDER
    return str(value)


class ResourceFetcher:
    """Looks up one resource record per identifier."""

    def __init__(self, client: ResourceClient, settings: Settings):
        self.client = client
        self.settings = settings

    async def fetch(self, identifier: str) -> Optional[Dict[str, Any]]:
        """Return the first matching record, or None when nothing matches.

        Raises:
            ResourceAPIError: on HTTP/transport failure or a malformed body.
        """
        lang = self.settings.ui_language
        items = extract_items(await self.client.query(identifier))
        if not items:
            logger.info(
                f"{t('not_found', lang)}: {identifier}",
                extra={"identifier": identifier},
            )
            return None

        record = items[0]
        if not isinstance(record, dict) or "id" not in record:
            raise ResourceAPIError(
                f"Query result for {identifier} is not a record with an id"
            )

        display = status_display(
            get_status_value(record, self.settings.status_fields)
        )
        logger.info(
            f"{t('found', lang)}: {record['id']}, {t('status', lang)}: {display}",
            extra={
                "identifier": identifier,
                "resource_id": record["id"],
                "status": display,
            },
        )
        return record
