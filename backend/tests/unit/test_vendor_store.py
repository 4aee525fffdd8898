"""
Unit tests for the vendor offer store.

WHAT: Test offer storage, listener dispatch, edits and confirmation
WHY: The store is append-only and confirmation must not lose offers
HOW: Store on tmp_path with recording listeners
"""

import pytest

from vending.core.vendor_store import VendorStore, LoggingVendorListener
from vending.models.offer import Offer, ShopEntry
from vending.services.offer_planner import OfferPlanner
from vending.utils.exceptions import (
    DuplicateOfferError,
    IndexOutOfRangeError,
    InvalidPriceError,
    OfferNotFoundError,
    PersistenceError,
)


class RecordingListener:
    def __init__(self, name, log):
        self.name = name
        self.log = log
    
    def offer_created(self, vendor_id, offer):
        self.log.append((self.name, vendor_id, offer.id))


class BrokenListener:
    def offer_created(self, vendor_id, offer):
        raise RuntimeError("listener crashed")


@pytest.fixture
def store(tmp_path):
    return VendorStore("vendor_1", "MyShop", tmp_path / "control" / "shop.txt")


@pytest.fixture
def offer():
    return Offer(entries=(
        ShopEntry(name="Potion", price=50, count=3),
        ShopEntry(name="Fly Wing", price=60, count=200),
    ))


@pytest.mark.unit
def test_put_offer_stores_and_notifies_in_order(store, offer):
    """Test listeners run in registration order with the vendor id."""
    log = []
    store.add_listener(RecordingListener("first", log))
    store.add_listener(RecordingListener("second", log))
    
    store.put_offer(offer)
    
    assert store.get_offer(offer.id) is offer
    assert log == [("first", "vendor_1", offer.id), ("second", "vendor_1", offer.id)]


@pytest.mark.unit
def test_put_offer_rejects_duplicate_id(store, offer):
    """Test offer ids are never reused."""
    store.put_offer(offer)
    with pytest.raises(DuplicateOfferError):
        store.put_offer(offer)
    assert len(store.list_offers()) == 1


@pytest.mark.unit
def test_failing_listener_does_not_block_others(store, offer):
    """Test a crashing listener neither rolls back nor stops later listeners."""
    log = []
    store.add_listener(BrokenListener())
    store.add_listener(RecordingListener("after", log))
    
    store.put_offer(offer)
    
    assert store.get_offer(offer.id) is offer
    assert log == [("after", "vendor_1", offer.id)]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_create_offer_plans_and_stores(store, sample_snapshot, mock_provider):
    """Test created offers are stored and announced."""
    log = []
    store.add_listener(RecordingListener("l", log))
    
    offer = await store.create_offer(sample_snapshot, OfferPlanner(), mock_provider)
    
    assert store.get_offer(offer.id) == offer
    assert log == [("l", "vendor_1", offer.id)]


@pytest.mark.unit
def test_modify_price_keeps_previous_offer(store, offer):
    """Test edits add a new offer and keep the old one."""
    store.put_offer(offer)
    
    edited = store.modify_price(offer.id, 0, 500)
    
    assert store.get_offer(offer.id) is offer
    assert store.get_offer(edited.id) is edited
    assert edited.entries[0].price == 500
    assert [o.id for o in store.list_offers()] == [offer.id, edited.id]


@pytest.mark.unit
def test_modify_count_notifies_listeners(store, offer):
    """Test edited offers fire listeners like new ones."""
    log = []
    store.put_offer(offer)
    store.add_listener(RecordingListener("l", log))
    
    edited = store.modify_count(offer.id, 1, 50)
    
    assert log == [("l", "vendor_1", edited.id)]


@pytest.mark.unit
def test_invalid_edit_leaves_store_unchanged(store, offer):
    """Test validation failures do not add offers."""
    store.put_offer(offer)
    
    with pytest.raises(IndexOutOfRangeError):
        store.modify_price(offer.id, 99, 10)
    with pytest.raises(InvalidPriceError):
        store.modify_price(offer.id, 0, 0)
    
    assert store.list_offers() == [offer]


@pytest.mark.unit
def test_modify_unknown_offer(store):
    """Test edits on unknown ids fail with OfferNotFoundError."""
    with pytest.raises(OfferNotFoundError):
        store.modify_price("missing", 0, 10)


@pytest.mark.unit
def test_confirm_writes_shop_config(store, offer):
    """Test confirmation persists the rendered offer."""
    store.put_offer(offer)
    
    confirmed = store.confirm_offer(offer.id)
    
    assert confirmed is offer
    assert store.confirmed_offer_id == offer.id
    assert store.get_shop_config() == "MyShop\n\nPotion\t50\t3\nFly Wing\t60\t200\n"
    assert store.get_offer(offer.id) is offer


@pytest.mark.unit
def test_confirm_unknown_offer_is_noop(store):
    """Test unknown ids are ignored without writing anything."""
    assert store.confirm_offer("missing") is None
    assert store.confirmed_offer_id is None
    assert not store.shop_config_path.exists()


@pytest.mark.unit
def test_confirm_persistence_failure_keeps_store(tmp_path, offer):
    """Test a write failure surfaces and leaves offers intact."""
    blocker = tmp_path / "blocker"
    blocker.write_text("x", encoding="utf-8")
    store = VendorStore("vendor_1", "MyShop", blocker / "shop.txt")
    store.put_offer(offer)
    
    with pytest.raises(PersistenceError):
        store.confirm_offer(offer.id)
    
    assert store.get_offer(offer.id) is offer
    assert store.confirmed_offer_id is None


@pytest.mark.unit
def test_confirm_later_offer_replaces_config(store, offer):
    """Test confirming an edit overwrites the previously confirmed listing."""
    store.put_offer(offer)
    store.confirm_offer(offer.id)
    edited = store.modify_count(offer.id, 0, 1)
    
    store.confirm_offer(edited.id)
    
    assert store.confirmed_offer_id == edited.id
    assert "Potion\t50\t1\n" in store.get_shop_config()


@pytest.mark.unit
def test_get_offer_unknown_is_none(store):
    assert store.get_offer("nope") is None


@pytest.mark.unit
def test_logging_listener_accepts_offers(store, offer):
    """Test the logging listener can be attached."""
    store.add_listener(LoggingVendorListener())
    store.put_offer(offer)
    assert store.get_offer(offer.id) is offer
