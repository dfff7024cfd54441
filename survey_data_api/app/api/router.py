"""
Top‑level API router.

Mounted by ``main.create_app`` under the ``/api`` prefix.
"""

from fastapi import APIRouter

from .endpoints import data, seed

router = APIRouter()

router.include_router(data.router, prefix="/data", tags=["data"])
router.include_router(seed.router, prefix="/seed", tags=["seed"])
