"""BulkStatus — Batch Run Routes."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from bulkstatus.config import Settings, get_settings
from bulkstatus.core.logging import get_logger
from bulkstatus.models.run_models import RunRequest, RunSummary
from bulkstatus.updater.pipeline import run_batch

logger = get_logger("api.runs")

router = APIRouter(prefix="/runs", tags=["Runs"])


@router.post("", response_model=RunSummary)
async def create_run(
    request: Optional[RunRequest] = None,
    settings: Settings = Depends(get_settings),
):
    """Run one batch synchronously and return its summary.

    Identifiers in the body override the configured RESOURCE_IDENTIFIERS.
    The request stays open for the whole run, pacing delays included.
    """
    identifiers = (request.identifiers if request else None) or list(
        settings.resource_identifiers
    )
    if not identifiers:
        raise HTTPException(status_code=400, detail="No resource identifiers to process")

    logger.info(f"Starting run for {len(identifiers)} identifiers")
    return await run_batch(identifiers, settings)
