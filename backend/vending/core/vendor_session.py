"""
Vendor session orchestration.

WHAT: One storefront session: bot handle, offer store, planner and prices
WHY: Tie cart acquisition, planning and confirmation together for the API
HOW: Collaborators passed in explicitly; blocking bot work runs in a thread
"""

import asyncio
from typing import Optional

from .config import Settings
from .openkore import OpenKore, acquire_cart_snapshot
from .vendor_store import VendorStore
from ..models.offer import Offer
from ..pricing.provider import ItemDataProvider
from ..services.cart_parser import read_cart_log
from ..services.offer_planner import OfferPlanner
from ..utils.logger import get_logger

logger = get_logger(__name__)


class VendorSession:
    """Storefront session for a single vendor."""
    
    def __init__(
        self,
        settings: Settings,
        provider: ItemDataProvider,
        planner: OfferPlanner,
        openkore: Optional[OpenKore] = None
    ):
        self.settings = settings
        self.provider = provider
        self.planner = planner
        self.openkore = openkore or OpenKore(
            home=settings.OPENKORE_HOME,
            command=settings.OPENKORE_COMMAND,
            console_log=settings.CONSOLE_LOG_PATH,
            shop_config=settings.SHOP_CONFIG_PATH
        )
        self.store = VendorStore(
            vendor_id=settings.VENDOR_ID,
            shop_name=settings.SHOP_NAME,
            shop_config_path=self.openkore.shop_config_path
        )
    
    @property
    def vendor_id(self) -> str:
        return self.store.vendor_id
    
    async def init(self, wait_seconds: Optional[float] = None) -> Optional[Offer]:
        """
        Run the bot, read its cart and create the first offer.
        
        Returns:
            The new offer, or None when the bot reported no cart in time
        """
        deadline = self.settings.CART_WAIT_SECONDS if wait_seconds is None else wait_seconds
        snapshot = await asyncio.to_thread(acquire_cart_snapshot, self.openkore, deadline)
        if snapshot is None:
            return None
        return await self.store.create_offer(snapshot, self.planner, self.provider)
    
    async def refresh_from_log(self) -> Optional[Offer]:
        """Create an offer from the console log as it is now, without running the bot."""
        snapshot = await asyncio.to_thread(read_cart_log, self.openkore.console_log_path)
        if snapshot is None:
            return None
        return await self.store.create_offer(snapshot, self.planner, self.provider)
    
    def start(self) -> None:
        """Launch the bot so it opens the shop from the confirmed config."""
        logger.info("start called")
        self.openkore.start()
    
    def close(self) -> None:
        self.openkore.close()
