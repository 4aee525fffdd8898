"""
Unit tests for offer planning.

WHAT: Test turning cart snapshots into priced offers
WHY: Entry order, counts and skipped items must be predictable
HOW: Plan against a mock price provider
"""

import asyncio

import pytest

from vending.models.cart import CartItem, CartSnapshot
from vending.models.offer import ShopEntry
from vending.pricing.types import PriceInfo
from vending.services.offer_planner import OfferPlanner, UnresolvedPriceItem
from vending.services.pricing_policy import PricingPolicy
from tests.fixtures.mock_prices import MockItemDataProvider, sample_price_table


class SlowFirstProvider(MockItemDataProvider):
    """Answers the first item last to shake out ordering bugs."""
    
    async def lookup(self, item_name):
        if item_name == "Red Potion":
            await asyncio.sleep(0.05)
        return await super().lookup(item_name)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_plan_preserves_cart_order(sample_snapshot, mock_provider):
    """Test entries follow snapshot order."""
    offer = await OfferPlanner().plan(sample_snapshot, mock_provider)
    
    assert [e.name for e in offer.entries] == ["Red Potion", "Fly Wing", "Elunium"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_plan_copies_cart_counts(sample_snapshot, mock_provider):
    """Test each entry offers exactly the cart count."""
    offer = await OfferPlanner().plan(sample_snapshot, mock_provider)
    
    assert [e.count for e in offer.entries] == [item.count for item in sample_snapshot]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_plan_prices_from_policy(sample_snapshot, mock_provider):
    """Test prices come from the pricing policy."""
    offer = await OfferPlanner().plan(sample_snapshot, mock_provider)
    
    assert offer.entries == (
        ShopEntry(name="Red Potion", price=50, count=10),
        ShopEntry(name="Fly Wing", price=60, count=200),
        ShopEntry(name="Elunium", price=9000, count=3),
    )


@pytest.mark.unit
@pytest.mark.asyncio
async def test_plan_order_survives_concurrent_lookups(sample_snapshot):
    """Test slow lookups do not reorder entries."""
    provider = SlowFirstProvider(sample_price_table())
    
    offer = await OfferPlanner(max_concurrency=3).plan(sample_snapshot, provider)
    
    assert [e.name for e in offer.entries] == ["Red Potion", "Fly Wing", "Elunium"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_plan_skips_unpriced_items():
    """Test partial price coverage drops only the unknown item."""
    snapshot = CartSnapshot(items=(
        CartItem(name="Red Potion", count=10),
        CartItem(name="Mystery Box", count=1),
        CartItem(name="Fly Wing", count=200),
    ))
    
    result = await OfferPlanner().plan_with_report(snapshot, MockItemDataProvider(sample_price_table()))
    
    assert [e.name for e in result.offer.entries] == ["Red Potion", "Fly Wing"]
    assert result.unresolved == [UnresolvedPriceItem(name="Mystery Box", count=1, reason="no_price_data")]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_plan_treats_lookup_failure_as_unresolved(sample_snapshot):
    """Test a failing price source does not abort planning."""
    provider = MockItemDataProvider(sample_price_table(), failing=["Fly Wing"])
    
    result = await OfferPlanner().plan_with_report(sample_snapshot, provider)
    
    assert [e.name for e in result.offer.entries] == ["Red Potion", "Elunium"]
    assert result.unresolved[0].reason == "lookup_failed"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_plan_uses_fallback_price_for_unpriced_items():
    """Test fallback price keeps unknown items in the offer."""
    snapshot = CartSnapshot(items=(CartItem(name="Mystery Box", count=2),))
    planner = OfferPlanner(policy=PricingPolicy(fallback_price=1000))
    
    result = await planner.plan_with_report(snapshot, MockItemDataProvider())
    
    assert result.offer.entries == (ShopEntry(name="Mystery Box", price=1000, count=2),)
    assert result.unresolved == []


@pytest.mark.unit
@pytest.mark.asyncio
async def test_plan_empty_snapshot(mock_provider):
    """Test an empty cart gives an empty offer."""
    offer = await OfferPlanner().plan(CartSnapshot(), mock_provider)
    assert offer.entries == ()
    assert mock_provider.calls == []


@pytest.mark.unit
@pytest.mark.asyncio
async def test_plan_assigns_fresh_ids(sample_snapshot, mock_provider):
    """Test every plan creates a new offer id."""
    planner = OfferPlanner()
    first = await planner.plan(sample_snapshot, mock_provider)
    second = await planner.plan(sample_snapshot, mock_provider)
    
    assert first.id != second.id
    assert first.entries == second.entries
    assert first.parent_id is None


@pytest.mark.unit
@pytest.mark.asyncio
async def test_plan_looks_up_every_item(sample_snapshot, mock_provider):
    """Test one lookup per cart item."""
    await OfferPlanner(max_concurrency=1).plan(sample_snapshot, mock_provider)
    assert mock_provider.calls == ["Red Potion", "Fly Wing", "Elunium"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_plan_applies_bulk_discount_per_item():
    """Test pricing sees each item's own count."""
    table = {"Fly Wing": PriceInfo(item_name="Fly Wing", min_price=50, max_price=70, average_price=60)}
    snapshot = CartSnapshot(items=(CartItem(name="Fly Wing", count=200),))
    planner = OfferPlanner(policy=PricingPolicy(bulk_threshold=100, bulk_discount_pct=50))
    
    offer = await planner.plan(snapshot, MockItemDataProvider(table))
    
    assert offer.entries[0].price == 30
