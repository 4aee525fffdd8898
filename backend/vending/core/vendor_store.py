"""
Vendor offer store.

WHAT: Offers created for one vendor session, listener dispatch, confirmation
WHY: Keep every proposed listing available until the operator confirms one
HOW: Append-only dict keyed by offer id; confirm renders the offer to shop.txt
"""

import threading
from pathlib import Path
from typing import Dict, List, Optional, Protocol

from ..models.cart import CartSnapshot
from ..models.offer import Offer
from ..pricing.provider import ItemDataProvider
from ..services.offer_planner import OfferPlanner
from ..services.shop_config import write_shop_config, read_shop_config
from ..utils.exceptions import DuplicateOfferError, OfferNotFoundError
from ..utils.logger import get_logger

logger = get_logger(__name__)


class VendorListener(Protocol):
    """Receives every offer the store creates."""
    
    def offer_created(self, vendor_id: str, offer: Offer) -> None:
        ...


class LoggingVendorListener:
    """Listener that writes a summary line for each new offer."""
    
    def offer_created(self, vendor_id: str, offer: Offer) -> None:
        total = sum(entry.price * entry.count for entry in offer.entries)
        logger.info(
            f"[{vendor_id}] offer {offer.id} created "
            f"(parent={offer.parent_id}, entries={len(offer.entries)}, value={total}z)"
        )


class VendorStore:
    """
    Offers of one vendor, keyed by id.
    
    Offers are only ever added. Edits store a new offer and leave the edited
    one in place; confirmation writes the shop config and keeps the offer.
    """
    
    def __init__(self, vendor_id: str, shop_name: str, shop_config_path: str | Path):
        self.vendor_id = vendor_id
        self.shop_name = shop_name
        self.shop_config_path = Path(shop_config_path)
        self.confirmed_offer_id: Optional[str] = None
        self._offers: Dict[str, Offer] = {}
        self._listeners: List[VendorListener] = []
        self._lock = threading.Lock()
    
    def add_listener(self, listener: VendorListener) -> None:
        self._listeners.append(listener)
    
    def put_offer(self, offer: Offer) -> Offer:
        """
        Store an offer and notify listeners in registration order.
        
        Raises:
            DuplicateOfferError: an offer with the same id is already stored
        """
        with self._lock:
            if offer.id in self._offers:
                raise DuplicateOfferError(offer.id)
            self._offers[offer.id] = offer
        
        for listener in list(self._listeners):
            try:
                listener.offer_created(self.vendor_id, offer)
            except Exception as e:
                logger.error(f"Vendor listener {listener!r} failed for offer {offer.id}: {e}", exc_info=True)
        return offer
    
    async def create_offer(
        self,
        snapshot: CartSnapshot,
        planner: OfferPlanner,
        provider: ItemDataProvider
    ) -> Offer:
        """Plan an offer from a cart snapshot and store it."""
        offer = await planner.plan(snapshot, provider)
        return self.put_offer(offer)
    
    def _require(self, offer_id: str) -> Offer:
        offer = self.get_offer(offer_id)
        if offer is None:
            raise OfferNotFoundError(offer_id)
        return offer
    
    def modify_price(self, offer_id: str, index: int, price: int) -> Offer:
        """
        Store a copy of an offer with one entry repriced.
        
        Raises:
            OfferNotFoundError, IndexOutOfRangeError, InvalidPriceError
        """
        return self.put_offer(self._require(offer_id).modify_price(index, price))
    
    def modify_count(self, offer_id: str, index: int, count: int) -> Offer:
        """
        Store a copy of an offer with one entry's count replaced.
        
        Raises:
            OfferNotFoundError, IndexOutOfRangeError, InvalidCountError
        """
        return self.put_offer(self._require(offer_id).modify_count(index, count))
    
    def confirm_offer(self, offer_id: str) -> Optional[Offer]:
        """
        Write an offer to the shop config.
        
        Unknown ids are ignored (the offer may have been requested from a stale
        view). Returns the confirmed offer, or None when nothing was written.
        
        Raises:
            PersistenceError: the shop config could not be written
        """
        offer = self.get_offer(offer_id)
        if offer is None:
            logger.warning(f"Confirm ignored, unknown offer id: {offer_id}")
            return None
        
        write_shop_config(self.shop_config_path, self.shop_name, offer)
        self.confirmed_offer_id = offer.id
        logger.info(f"Offer {offer.id} confirmed for vendor {self.vendor_id}")
        return offer
    
    def get_offer(self, offer_id: str) -> Optional[Offer]:
        with self._lock:
            return self._offers.get(offer_id)
    
    def list_offers(self) -> List[Offer]:
        """All offers in creation order."""
        with self._lock:
            return list(self._offers.values())
    
    def get_shop_config(self) -> str:
        """
        Current shop config text on disk.
        
        Raises:
            ShopConfigNotFoundError: no offer has been confirmed yet
            PersistenceError: the file cannot be read
        """
        return read_shop_config(self.shop_config_path)
