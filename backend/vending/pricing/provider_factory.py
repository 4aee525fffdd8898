"""
Item data provider factory.

WHAT: Build the configured price provider
WHY: Keep provider wiring in one place while callers pass the result explicitly
HOW: Price table provider, wrapped in a TTL cache when enabled
"""

from .provider import ItemDataProvider
from .price_table import PriceTableProvider
from .cache import CachedItemDataProvider
from ..core.config import Settings
from ..utils.logger import get_logger

logger = get_logger(__name__)


def build_provider(settings: Settings) -> ItemDataProvider:
    """
    Build the item data provider described by settings.
    
    Args:
        settings: Application settings
    
    Returns:
        ItemDataProvider instance
    """
    provider: ItemDataProvider = PriceTableProvider(settings.PRICE_TABLE_PATH)
    
    if settings.PRICE_CACHE_TTL_SECONDS > 0:
        provider = CachedItemDataProvider(provider, ttl_seconds=settings.PRICE_CACHE_TTL_SECONDS)
        logger.info(
            f"Price provider initialized: table={settings.PRICE_TABLE_PATH}, "
            f"cache_ttl={settings.PRICE_CACHE_TTL_SECONDS}s"
        )
    else:
        logger.info(f"Price provider initialized: table={settings.PRICE_TABLE_PATH}, no cache")
    
    return provider
