"""
Endpoint modules.

Each module defines an ``APIRouter`` that is included by
``api/router.py``.
"""
