"""Queue sync endpoints for the operator."""

from fastapi import APIRouter, Depends

from possync.api.dependencies import get_manage_sync_use_case
from possync.application.dto.requests import ConnectivityRequest
from possync.application.dto.responses import (
    ConnectivityResponse,
    ErrorResponse,
    SyncReportResponse,
    SyncStatusResponse,
)
from possync.application.use_cases import ManageSyncUseCase

router = APIRouter(prefix="/api/sync", tags=["sync"])


@router.get("/status", response_model=SyncStatusResponse)
async def sync_status(
    use_case: ManageSyncUseCase = Depends(get_manage_sync_use_case),
) -> SyncStatusResponse:
    """Queue counts, ticket badges, storage alerts and sync availability."""
    return await use_case.status()


@router.post(
    "",
    response_model=SyncReportResponse,
    responses={409: {"model": ErrorResponse, "description": "Sync unavailable"}},
)
async def sync_now(
    use_case: ManageSyncUseCase = Depends(get_manage_sync_use_case),
) -> SyncReportResponse:
    """Drain pending tickets now."""
    return await use_case.sync_now()


@router.post(
    "/retry-failed",
    response_model=SyncReportResponse,
    responses={409: {"model": ErrorResponse}},
)
async def retry_failed(
    use_case: ManageSyncUseCase = Depends(get_manage_sync_use_case),
) -> SyncReportResponse:
    """Re-attempt every ticket in error state."""
    return await use_case.retry_failed()


@router.post(
    "/tickets/{ticket_id}/retry",
    response_model=SyncReportResponse,
    responses={
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def retry_ticket(
    ticket_id: str,
    use_case: ManageSyncUseCase = Depends(get_manage_sync_use_case),
) -> SyncReportResponse:
    """Re-attempt a single ticket."""
    return await use_case.retry_ticket(ticket_id)


@router.put(
    "/connectivity",
    response_model=ConnectivityResponse,
    responses={409: {"model": ErrorResponse, "description": "Connectivity is probed over HTTP"}},
)
async def set_connectivity(
    request: ConnectivityRequest,
    use_case: ManageSyncUseCase = Depends(get_manage_sync_use_case),
) -> ConnectivityResponse:
    """
    Push the register's network state.

    Going online starts an automatic sync pass in the background.
    """
    return use_case.set_connectivity(request.online)
