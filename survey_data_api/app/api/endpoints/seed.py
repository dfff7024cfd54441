"""
Manual reseed endpoint.

``POST /api/seed`` deletes every record and loads the default dataset
again, regardless of what the store held before.
"""

import logging
from typing import Union

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from survey_data_api.app.api.deps import get_record_service
from survey_data_api.app.core.errors import StoreFailure
from survey_data_api.app.schemas.record import ErrorResponse, SeedResponse
from survey_data_api.app.services.record_service import RecordService

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post(
    "",
    response_model=SeedResponse,
    responses={status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse}},
)
async def reseed(
    service: RecordService = Depends(get_record_service),
) -> Union[SeedResponse, JSONResponse]:
    """Clear the store and insert the default records."""
    try:
        await service.reseed()
    except StoreFailure:
        logger.error("Error in manual seeding")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorResponse(error="Error seeding database").model_dump(),
        )
    return SeedResponse(message="Database seeded successfully")
