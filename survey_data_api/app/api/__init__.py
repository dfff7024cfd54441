"""
HTTP routes for the service.

``router`` aggregates the endpoint modules under ``/api``; ``deps``
provides the FastAPI dependency that resolves the record gateway
from the application's store handle.
"""
