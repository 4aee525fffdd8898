"""
Status and health check endpoints.

WHAT: Health monitoring for the price source and the bot
WHY: Quick diagnostics before planning offers
HOW: FastAPI endpoints calling provider ping
"""

from fastapi import APIRouter, Depends

from ..deps import get_vendor_session
from ....core.config import settings
from ....core.vendor_session import VendorSession
from ....utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.get("/prices/status")
async def prices_status(session: VendorSession = Depends(get_vendor_session)):
    """
    Check price provider status.
    
    Returns:
        JSON with provider availability, source and item count
    """
    status = await session.provider.ping()
    return {
        "available": status.available,
        "source": status.source,
        "items": status.items,
        "error": status.error
    }


@router.get("/health")
async def health_check(session: VendorSession = Depends(get_vendor_session)):
    """
    Overall application health check.
    
    Returns:
        JSON with overall health status
    """
    try:
        prices_available = (await session.provider.ping()).available
    except Exception as e:
        logger.error(f"Health check price provider failed: {e}")
        prices_available = False
    
    return {
        "status": "healthy" if prices_available else "degraded",
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "prices_available": prices_available,
        "bot_running": session.openkore.running
    }
