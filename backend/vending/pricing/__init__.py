"""Market price provider layer."""

from .types import PriceInfo, ProviderStatus, normalize_item_name
from .provider import ItemDataProvider
from .price_table import PriceTableProvider
from .cache import CachedItemDataProvider
from .provider_factory import build_provider

__all__ = [
    "PriceInfo",
    "ProviderStatus",
    "normalize_item_name",
    "ItemDataProvider",
    "PriceTableProvider",
    "CachedItemDataProvider",
    "build_provider",
]
