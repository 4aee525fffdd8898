"""
Pydantic API schemas.

WHAT: Request and response models for the vendor endpoints
WHY: Type-safe validation and serialization of offers over HTTP
HOW: Pydantic v2 models built from the frozen domain dataclasses
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from .offer import Offer, ShopEntry


# ========== Offers ==========

class ShopEntryResponse(BaseModel):
    """One priced line of an offer."""
    name: str
    price: int
    count: int
    
    @classmethod
    def from_entry(cls, entry: ShopEntry) -> "ShopEntryResponse":
        return cls(name=entry.name, price=entry.price, count=entry.count)


class OfferResponse(BaseModel):
    """Offer as returned by the API."""
    offer_id: str
    parent_id: Optional[str] = None
    created_at: datetime
    entries: List[ShopEntryResponse]
    total_value: int = Field(..., description="Sum of price * count over all entries")
    
    @classmethod
    def from_offer(cls, offer: Offer) -> "OfferResponse":
        return cls(
            offer_id=offer.id,
            parent_id=offer.parent_id,
            created_at=offer.created_at,
            entries=[ShopEntryResponse.from_entry(e) for e in offer.entries],
            total_value=sum(e.price * e.count for e in offer.entries)
        )


class OfferListResponse(BaseModel):
    """All offers of the vendor, oldest first."""
    offers: List[OfferResponse]
    confirmed_offer_id: Optional[str] = None


class RefreshOfferResponse(BaseModel):
    """Result of planning from the console log; offer is null without a cart report."""
    offer: Optional[OfferResponse] = None


# ========== Edits ==========

class ModifyPriceRequest(BaseModel):
    """Reprice one entry."""
    index: int = Field(..., description="Entry position in the offer")
    price: int = Field(..., description="New price in zeny")


class ModifyCountRequest(BaseModel):
    """Change the count of one entry."""
    index: int = Field(..., description="Entry position in the offer")
    count: int = Field(..., description="New count")


class ConfirmOfferResponse(BaseModel):
    """Outcome of a confirm request."""
    offer_id: str
    confirmed: bool


# ========== Vendor ==========

class VendorInfoResponse(BaseModel):
    """Vendor session summary."""
    vendor_id: str
    shop_name: str
    offer_count: int
    confirmed_offer_id: Optional[str] = None
    bot_running: bool


class ShopConfigResponse(BaseModel):
    """Shop config file currently on disk."""
    path: str
    shop_name: str
    entries: List[ShopEntryResponse]
    raw: str
