"""
Item data provider protocol definition.

WHAT: Abstract interface for market price sources
WHY: Decouple the planner from where prices come from
HOW: Protocol with async lookup and ping
"""

from typing import Protocol

from .types import PriceInfo, ProviderStatus


class ItemDataProvider(Protocol):
    """Protocol every price source implements."""
    
    async def lookup(self, item_name: str) -> PriceInfo | None:
        """Price information for an item, or None if the source does not know it."""
        ...
    
    async def ping(self) -> ProviderStatus:
        """Check provider health and availability."""
        ...
