"""
Sale price policy.

WHAT: Turn market price data and stock count into a shop price
WHY: Planned offers must be reproducible for the same cart and market data
HOW: Integer-only arithmetic on a reference price with markup and bulk discount
"""

from dataclasses import dataclass

from ..core.config import Settings
from ..pricing.types import PriceInfo


def _ceil_pct(value: int, pct: int) -> int:
    """ceil(value * pct / 100) without floats."""
    return -((-value * pct) // 100)


@dataclass(frozen=True)
class PricingPolicy:
    """
    Deterministic pricing rule.
    
    Reference price is the market average when known, else the market minimum.
    The markup is applied first, then the bulk discount for large stacks.
    Prices never drop below 1 zeny.
    """
    markup_pct: int = 0
    bulk_threshold: int = 0
    bulk_discount_pct: int = 0
    fallback_price: int | None = None
    
    @classmethod
    def from_settings(cls, settings: Settings) -> "PricingPolicy":
        return cls(
            markup_pct=settings.MARKUP_PCT,
            bulk_threshold=settings.BULK_THRESHOLD,
            bulk_discount_pct=settings.BULK_DISCOUNT_PCT,
            fallback_price=settings.FALLBACK_PRICE
        )
    
    def reference_price(self, info: PriceInfo) -> int | None:
        if info.average_price:
            return info.average_price
        if info.min_price > 0:
            return info.min_price
        return None
    
    def price_for(self, count: int, info: PriceInfo | None) -> int | None:
        """
        Sale price for `count` units, or None when the item should be skipped.
        
        Args:
            count: Units in the cart
            info: Market price data, None when the source has none
        """
        reference = self.reference_price(info) if info is not None else None
        if reference is None:
            if self.fallback_price is not None and self.fallback_price > 0:
                return self.fallback_price
            return None
        
        price = _ceil_pct(reference, 100 + self.markup_pct)
        if self.bulk_threshold > 0 and count >= self.bulk_threshold:
            price = _ceil_pct(price, 100 - self.bulk_discount_pct)
        return max(price, 1)
