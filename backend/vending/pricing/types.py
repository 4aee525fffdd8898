"""
Price data types.

WHAT: Market price information returned by item data providers
WHY: One contract for every price source the planner consumes
HOW: Dataclasses for price info and provider status
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class PriceInfo:
    """Market prices observed for one item, in zeny."""
    item_name: str
    min_price: int
    max_price: int
    average_price: int | None = None


@dataclass
class ProviderStatus:
    """Health status of a price provider."""
    available: bool
    source: str
    items: int | None = None
    error: str | None = None


def normalize_item_name(name: str) -> str:
    """Lookup key for an item: case-folded, single-spaced."""
    return " ".join(name.split()).casefold()
