"""
Health check endpoint - no authentication required
"""

from fastapi import APIRouter

from ..schemas import OkResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=OkResponse)
def health():
    return OkResponse(ok=True)
