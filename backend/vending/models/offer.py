"""
Offer value type.

WHAT: Immutable priced shop listing and its copy-with-change edits
WHY: Edits never disturb an offer someone else is inspecting; old offers stay
     available as history
HOW: Frozen dataclasses, edits build a new Offer with a fresh id
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from uuid import uuid4

from ..utils.exceptions import IndexOutOfRangeError, InvalidPriceError, InvalidCountError


def new_offer_id() -> str:
    """Generate an opaque unique offer id."""
    return uuid4().hex


def _is_int(value) -> bool:
    # bool is an int subclass but never a valid price or count
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class ShopEntry:
    """One line of the shop listing."""
    name: str
    price: int
    count: int
    
    @property
    def formatted_price(self) -> str:
        """Price as the bot expects it: plain digits, no grouping."""
        return str(self.price)


@dataclass(frozen=True)
class Offer:
    """
    A proposed or confirmed full listing.
    
    `parent_id` points at the offer this one was edited from, so a chain of
    edits can be walked back for undo.
    """
    entries: tuple[ShopEntry, ...] = ()
    id: str = field(default_factory=new_offer_id)
    parent_id: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    
    def __post_init__(self):
        # Accept any iterable of entries but always store a tuple
        if not isinstance(self.entries, tuple):
            object.__setattr__(self, "entries", tuple(self.entries))
    
    def _check_index(self, index: int) -> None:
        if not _is_int(index) or not 0 <= index < len(self.entries):
            raise IndexOutOfRangeError(index, len(self.entries))
    
    def _with_entry(self, index: int, entry: ShopEntry) -> "Offer":
        entries = self.entries[:index] + (entry,) + self.entries[index + 1:]
        return Offer(entries=entries, parent_id=self.id)
    
    def modify_price(self, index: int, new_price: int) -> "Offer":
        """
        Return a new Offer with entry `index` repriced.
        
        Raises:
            IndexOutOfRangeError: index is not a valid entry position
            InvalidPriceError: new_price is not a positive integer
        """
        self._check_index(index)
        if not _is_int(new_price) or new_price <= 0:
            raise InvalidPriceError(new_price)
        return self._with_entry(index, replace(self.entries[index], price=new_price))
    
    def modify_count(self, index: int, new_count: int) -> "Offer":
        """
        Return a new Offer with entry `index` restocked to `new_count`.
        
        The count is a manual override and is not checked against the cart.
        
        Raises:
            IndexOutOfRangeError: index is not a valid entry position
            InvalidCountError: new_count is negative
        """
        self._check_index(index)
        if not _is_int(new_count) or new_count < 0:
            raise InvalidCountError(new_count)
        return self._with_entry(index, replace(self.entries[index], count=new_count))


def modify_price(offer: Offer, index: int, new_price: int) -> Offer:
    """Function form of Offer.modify_price."""
    return offer.modify_price(index, new_price)


def modify_count(offer: Offer, index: int, new_count: int) -> Offer:
    """Function form of Offer.modify_count."""
    return offer.modify_count(index, new_count)
