"""API router initialization.

api_router is mounted at /api in main.py, so the albums router serves
/api/albums and /api/albums/import. Health and page routers are mounted
separately (no /api prefix).
"""

from fastapi import APIRouter

from albumshelf.api.routers import albums, health, ui

api_router = APIRouter()
api_router.include_router(albums.router, prefix="/albums", tags=["Albums"])

__all__ = ["api_router", "health", "ui"]
