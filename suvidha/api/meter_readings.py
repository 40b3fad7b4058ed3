"""Citizen meter reading endpoints."""

import logging
import time

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from suvidha.api.errors import AppError, InternalError, success_response
from suvidha.api.schemas import MAX_ID, MeterReadingCreate, MeterReadingResponse
from suvidha.services import get_async_session
from suvidha.services.auth_service import Identity, get_current_identity
from suvidha.services.meter_reading_service import MeterReadingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/meter-readings", tags=["meter-readings"])


def _log_debug(endpoint: str, start_time: float, user_id: int, **kwargs) -> None:
    """Log a request with timing at DEBUG level."""
    duration_ms = int((time.time() - start_time) * 1000)
    extra = " ".join(f"{k}={v}" for k, v in kwargs.items())
    logger.debug(
        "meter_readings.%s: user_id=%s %sduration_ms=%d",
        endpoint,
        user_id,
        f"{extra} " if extra else "",
        duration_ms,
    )


@router.post("")
async def submit_meter_reading(
    body: MeterReadingCreate,
    identity: Identity = Depends(get_current_identity),  # noqa: B008
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
) -> dict:
    """
    Submit a meter reading for one of the caller's connections.

    Returns:
        Envelope with the created PENDING reading (with connection and user details)

    Raises:
        400: Missing connectionId/reading or non-numeric reading
        401: Missing or invalid token
        403: Connection belongs to another user
        404: Connection not found
        500: Server error
    """
    start_time = time.time()
    try:
        service = MeterReadingService(session)
        reading = await service.submit_reading(
            user_id=identity.user_id,
            connection_id=body.connection_id,
            reading=body.reading,
            photo_url=body.photo_url,
        )
        _log_debug("submit", start_time, identity.user_id, reading_id=reading.id)
        return success_response(data=MeterReadingResponse.model_validate(reading))

    except AppError:
        raise
    except Exception as e:
        logger.error(f"Error in POST /meter-readings: {e}", exc_info=True)
        raise InternalError() from e


@router.get("")
async def list_my_meter_readings(
    connection_id: int | None = Query(None, alias="connectionId", ge=1, le=MAX_ID),  # noqa: B008
    identity: Identity = Depends(get_current_identity),  # noqa: B008
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
) -> dict:
    """
    List the caller's own readings, newest first.

    Raises:
        401: Missing or invalid token
        403: Connection belongs to another user
        404: Connection not found
        500: Server error
    """
    start_time = time.time()
    try:
        service = MeterReadingService(session)
        readings = await service.list_user_readings(identity.user_id, connection_id)
        _log_debug("list", start_time, identity.user_id, count=len(readings))
        return success_response(
            data=[MeterReadingResponse.model_validate(r) for r in readings]
        )

    except AppError:
        raise
    except Exception as e:
        logger.error(f"Error in GET /meter-readings: {e}", exc_info=True)
        raise InternalError() from e


__all__ = ["router"]
