"""
Offer planning from cart inventory.

WHAT: Convert a cart snapshot plus market prices into an Offer
WHY: Produce a complete priced listing the operator can edit and confirm
HOW: Concurrent lookups bounded by a semaphore, reassembled in cart order
"""

import asyncio
from dataclasses import dataclass, field
from typing import List, Literal

from ..models.cart import CartItem, CartSnapshot
from ..models.offer import Offer, ShopEntry
from ..pricing.provider import ItemDataProvider
from ..pricing.types import PriceInfo
from ..utils.exceptions import PriceSourceError
from ..utils.logger import get_logger
from .pricing_policy import PricingPolicy

logger = get_logger(__name__)


@dataclass(frozen=True)
class UnresolvedPriceItem:
    """Cart item left out of an offer because it has no price."""
    name: str
    count: int
    reason: Literal["no_price_data", "lookup_failed"]


@dataclass
class PlanningResult:
    """Result of planning an offer."""
    offer: Offer
    unresolved: List[UnresolvedPriceItem] = field(default_factory=list)


class OfferPlanner:
    """Plan offers from cart snapshots with a pricing policy."""
    
    def __init__(self, policy: PricingPolicy | None = None, max_concurrency: int = 4):
        self.policy = policy or PricingPolicy()
        self.max_concurrency = max(1, max_concurrency)
    
    async def _lookup(
        self,
        item: CartItem,
        provider: ItemDataProvider,
        semaphore: asyncio.Semaphore
    ) -> tuple[PriceInfo | None, str | None]:
        async with semaphore:
            try:
                return await provider.lookup(item.name), None
            except PriceSourceError as e:
                logger.warning(f"Price lookup failed for {item.name}: {e.message}")
                return None, "lookup_failed"
    
    async def plan_with_report(
        self,
        snapshot: CartSnapshot,
        provider: ItemDataProvider
    ) -> PlanningResult:
        """
        Plan an offer and report the items that could not be priced.
        
        Args:
            snapshot: Cart inventory to sell
            provider: Market price source
        
        Returns:
            PlanningResult with the new Offer and the skipped items
        """
        semaphore = asyncio.Semaphore(self.max_concurrency)
        # gather keeps results in argument order
        lookups = await asyncio.gather(
            *(self._lookup(item, provider, semaphore) for item in snapshot)
        )
        
        entries = []
        unresolved = []
        for item, (info, failure) in zip(snapshot, lookups):
            price = self.policy.price_for(item.count, info)
            if price is None:
                reason = failure or "no_price_data"
                unresolved.append(UnresolvedPriceItem(name=item.name, count=item.count, reason=reason))
                logger.info(f"Skipped {item.name} x{item.count}: {reason}")
                continue
            entries.append(ShopEntry(name=item.name, price=price, count=item.count))
        
        offer = Offer(entries=tuple(entries))
        logger.info(
            f"Planned offer {offer.id}: {len(entries)} entries, "
            f"{len(unresolved)} unresolved of {len(snapshot)} cart items"
        )
        return PlanningResult(offer=offer, unresolved=unresolved)
    
    async def plan(self, snapshot: CartSnapshot, provider: ItemDataProvider) -> Offer:
        """Plan an offer from a cart snapshot."""
        result = await self.plan_with_report(snapshot, provider)
        return result.offer
