"""
Caching wrapper for item data providers.

WHAT: TTL cache in front of any ItemDataProvider
WHY: Repeated planning rounds ask for the same items; sources may be slow
HOW: Dict of normalized name -> (expiry, result), misses cached too
"""

import time
import threading
from typing import Callable

from .provider import ItemDataProvider
from .types import PriceInfo, ProviderStatus, normalize_item_name
from ..utils.logger import get_logger

logger = get_logger(__name__)


class CachedItemDataProvider:
    """Item data provider that remembers answers for `ttl_seconds`."""
    
    def __init__(
        self,
        inner: ItemDataProvider,
        ttl_seconds: float,
        clock: Callable[[], float] = time.monotonic
    ):
        self.inner = inner
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, tuple[float, PriceInfo | None]] = {}
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0
    
    async def lookup(self, item_name: str) -> PriceInfo | None:
        key = normalize_item_name(item_name)
        now = self._clock()
        
        with self._lock:
            cached = self._entries.get(key)
            if cached is not None and cached[0] > now:
                self.hits += 1
                return cached[1]
            self.misses += 1
        
        # Errors are not cached; the next planning round retries the source
        result = await self.inner.lookup(item_name)
        
        with self._lock:
            self._entries[key] = (now + self.ttl_seconds, result)
        return result
    
    async def ping(self) -> ProviderStatus:
        return await self.inner.ping()
    
    def clear(self) -> None:
        """Drop every cached answer."""
        with self._lock:
            self._entries.clear()
        logger.info("Price cache cleared")
