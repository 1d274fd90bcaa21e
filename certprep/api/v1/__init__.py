"""API v1 router."""
from fastapi import APIRouter

from certprep.api.v1 import categories, tests, progress

api_router = APIRouter()

api_router.include_router(categories.router, prefix="/categories", tags=["Categories"])
api_router.include_router(tests.router, prefix="/tests", tags=["Practice Tests"])
api_router.include_router(progress.router, prefix="/progress", tags=["Progress"])
