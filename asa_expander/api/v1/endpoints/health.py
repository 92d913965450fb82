"""
Health check endpoint for monitoring and diagnostics.
"""
import logging
from fastapi import APIRouter

from asa_expander import __version__
from asa_expander.core.config import settings

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health")
async def health_check():
    """
    Health check endpoint.

    Returns:
        {
            "ok": true,
            "environment": "...",
            "version": "..."
        }
    """
    return {
        "ok": True,
        "environment": settings.APP_ENV,
        "version": __version__,
    }
