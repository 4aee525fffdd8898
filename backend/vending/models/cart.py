"""
Cart inventory models.

WHAT: Items the vendor's cart holds, as reported by the bot console
WHY: Planner input that cannot be altered after parsing
HOW: Frozen dataclasses
"""

from dataclasses import dataclass
from typing import Iterator


@dataclass(frozen=True)
class CartItem:
    """One distinct item and the quantity available to sell."""
    name: str
    count: int


@dataclass(frozen=True)
class CartSnapshot:
    """Cart inventory at one point in time, in report order."""
    items: tuple[CartItem, ...] = ()
    
    def __iter__(self) -> Iterator[CartItem]:
        return iter(self.items)
    
    def __len__(self) -> int:
        return len(self.items)
    
    def __getitem__(self, index: int) -> CartItem:
        return self.items[index]
