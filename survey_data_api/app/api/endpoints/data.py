"""
Survey data endpoints.

``GET /api/data`` returns every record; ``POST /api/data`` accepts an
optional ``filters`` object with a list of accepted values per field.
Both respond with ``{success, count, data}``.  A store failure is
reported as HTTP 500 with ``{success: false, error}``.
"""

import logging
from typing import Optional, Union

from fastapi import APIRouter, Body, Depends, status
from fastapi.responses import JSONResponse

from survey_data_api.app.api.deps import get_record_service
from survey_data_api.app.core.errors import StoreFailure
from survey_data_api.app.schemas.record import DataQuery, DataResponse, ErrorResponse
from survey_data_api.app.services.record_service import RecordService

router = APIRouter()
logger = logging.getLogger(__name__)

INTERNAL_ERROR = "Internal server error"

_ERROR_RESPONSES = {status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse}}


def _store_error_response() -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(error=INTERNAL_ERROR).model_dump(),
    )


@router.get("", response_model=DataResponse, responses=_ERROR_RESPONSES)
async def list_data(
    service: RecordService = Depends(get_record_service),
) -> Union[DataResponse, JSONResponse]:
    """Return all survey records."""
    try:
        records = await service.list_all()
    except StoreFailure:
        logger.error("Error fetching data")
        return _store_error_response()
    return DataResponse(count=len(records), data=records)


@router.post("", response_model=DataResponse, responses=_ERROR_RESPONSES)
async def filter_data(
    query: Optional[DataQuery] = Body(None),
    service: RecordService = Depends(get_record_service),
) -> Union[DataResponse, JSONResponse]:
    """Return records matching the request's filters.

    - Fields are combined with AND, values within a field with OR.
    - A missing body, missing ``filters`` or all‑empty lists return everything.
    - Values are compared exactly, including case.
    """
    filters = query.filters if query is not None else None
    try:
        records = await service.list_filtered(filters)
    except StoreFailure:
        logger.error("Error fetching filtered data")
        return _store_error_response()
    return DataResponse(count=len(records), data=records)
