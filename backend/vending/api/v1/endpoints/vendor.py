"""
Vendor offer endpoints.

WHAT: List, edit and confirm offers; plan from the console log
WHY: Operator loop around the offer store
HOW: FastAPI router over the VendorSession dependency; domain errors map via middleware
"""

from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool

from ..deps import get_vendor_session
from ....core.vendor_session import VendorSession
from ....models.api_schemas import (
    OfferResponse,
    OfferListResponse,
    RefreshOfferResponse,
    ModifyPriceRequest,
    ModifyCountRequest,
    ConfirmOfferResponse,
    VendorInfoResponse,
    ShopConfigResponse,
    ShopEntryResponse,
)
from ....services.shop_config import parse_shop_config
from ....utils.exceptions import OfferNotFoundError
from ....utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.get("/vendor", response_model=VendorInfoResponse)
async def get_vendor(session: VendorSession = Depends(get_vendor_session)):
    """Vendor session summary."""
    store = session.store
    return VendorInfoResponse(
        vendor_id=store.vendor_id,
        shop_name=store.shop_name,
        offer_count=len(store.list_offers()),
        confirmed_offer_id=store.confirmed_offer_id,
        bot_running=session.openkore.running
    )


@router.get("/vendor/offers", response_model=OfferListResponse)
async def list_offers(session: VendorSession = Depends(get_vendor_session)):
    """All offers, oldest first."""
    return OfferListResponse(
        offers=[OfferResponse.from_offer(o) for o in session.store.list_offers()],
        confirmed_offer_id=session.store.confirmed_offer_id
    )


@router.post("/vendor/offers/refresh", response_model=RefreshOfferResponse)
async def refresh_offer(session: VendorSession = Depends(get_vendor_session)):
    """
    Plan a new offer from the console log.
    
    WHAT: Parse the latest cart report and price it
    WHY: Operator asks for a fresh listing after restocking
    HOW: VendorSession.refresh_from_log; null offer when the log has no cart yet
    """
    offer = await session.refresh_from_log()
    if offer is None:
        logger.info("Refresh requested but no cart report is available")
        return RefreshOfferResponse(offer=None)
    return RefreshOfferResponse(offer=OfferResponse.from_offer(offer))


@router.get("/vendor/offers/{offer_id}", response_model=OfferResponse)
async def get_offer(offer_id: str, session: VendorSession = Depends(get_vendor_session)):
    """Get one offer by id."""
    offer = session.store.get_offer(offer_id)
    if offer is None:
        raise OfferNotFoundError(offer_id)
    return OfferResponse.from_offer(offer)


@router.post("/vendor/offers/{offer_id}/price", response_model=OfferResponse)
async def modify_price(
    offer_id: str,
    request: ModifyPriceRequest,
    session: VendorSession = Depends(get_vendor_session)
):
    """Reprice one entry; returns the new offer."""
    offer = session.store.modify_price(offer_id, request.index, request.price)
    return OfferResponse.from_offer(offer)


@router.post("/vendor/offers/{offer_id}/count", response_model=OfferResponse)
async def modify_count(
    offer_id: str,
    request: ModifyCountRequest,
    session: VendorSession = Depends(get_vendor_session)
):
    """Change one entry's count; returns the new offer."""
    offer = session.store.modify_count(offer_id, request.index, request.count)
    return OfferResponse.from_offer(offer)


@router.post("/vendor/offers/{offer_id}/confirm", response_model=ConfirmOfferResponse)
async def confirm_offer(offer_id: str, session: VendorSession = Depends(get_vendor_session)):
    """
    Confirm an offer and write it to the bot's shop config.
    
    Unknown ids are not an error: `confirmed` is false and nothing is written.
    """
    offer = await run_in_threadpool(session.store.confirm_offer, offer_id)
    return ConfirmOfferResponse(offer_id=offer_id, confirmed=offer is not None)


@router.get("/vendor/shop-config", response_model=ShopConfigResponse)
async def get_shop_config(session: VendorSession = Depends(get_vendor_session)):
    """Shop config currently on disk, raw and parsed."""
    raw = session.store.get_shop_config()
    shop_name, entries = parse_shop_config(raw)
    return ShopConfigResponse(
        path=str(session.store.shop_config_path),
        shop_name=shop_name,
        entries=[ShopEntryResponse.from_entry(e) for e in entries],
        raw=raw
    )


@router.post("/vendor/start", response_model=VendorInfoResponse)
async def start_vendor(session: VendorSession = Depends(get_vendor_session)):
    """
    Launch the bot so it opens the shop from the confirmed config.
    
    Raises:
        BotProcessError: the bot cannot be started (503)
    """
    await run_in_threadpool(session.start)
    return await get_vendor(session)
