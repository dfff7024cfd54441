"""FastAPI dependencies shared by the endpoint modules."""

from fastapi import Request

from survey_data_api.app.services.record_service import RecordService


def get_record_service(request: Request) -> RecordService:
    """Build a gateway around the store handle attached to the app."""
    return RecordService(request.app.state.store)
