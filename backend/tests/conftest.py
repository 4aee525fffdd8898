"""
Pytest configuration and shared fixtures.

WHAT: Markers, sample carts, price tables and vendor sessions
WHY: Keep test setup consistent across unit and integration tests
HOW: Register markers, build collaborators on tmp_path
"""

import json

import pytest

from vending.core.config import Settings
from vending.core.openkore import OpenKore
from vending.core.vendor_session import VendorSession
from vending.models.cart import CartItem, CartSnapshot
from vending.services.offer_planner import OfferPlanner
from tests.fixtures.mock_prices import MockItemDataProvider, sample_price_table


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests (isolated component tests)"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests (multiple components)"
    )
    config.addinivalue_line(
        "markers", "slow: Tests that take significant time to run"
    )


@pytest.fixture
def sample_snapshot():
    """Three-item cart in report order."""
    return CartSnapshot(items=(
        CartItem(name="Red Potion", count=10),
        CartItem(name="Fly Wing", count=200),
        CartItem(name="Elunium", count=3),
    ))


@pytest.fixture
def mock_provider():
    """Provider knowing Red Potion, Fly Wing and Elunium."""
    return MockItemDataProvider(sample_price_table())


@pytest.fixture
def price_table_file(tmp_path):
    """JSON price table on disk."""
    path = tmp_path / "prices.json"
    path.write_text(json.dumps({
        "Red Potion": {"min": 40, "max": 60, "average": 50},
        "Fly Wing": 60,
        "Elunium": {"min": 9000, "max": 12000},
    }), encoding="utf-8")
    return path


@pytest.fixture
def test_settings(tmp_path, price_table_file):
    """Settings pointing every path into tmp_path."""
    home = tmp_path / "openkore"
    (home / "logs").mkdir(parents=True)
    (home / "control").mkdir()
    return Settings(
        VENDOR_ID="vendor_test",
        SHOP_NAME="MyShop",
        OPENKORE_HOME=str(home),
        OPENKORE_COMMAND="openkore-not-installed",
        PRICE_TABLE_PATH=str(price_table_file),
        PRICE_CACHE_TTL_SECONDS=0,
        CART_WAIT_SECONDS=0.1,
        LOG_FILE=str(tmp_path / "logs" / "vending.log"),
    )


@pytest.fixture
def vendor_session(test_settings, mock_provider):
    """Vendor session with a mock price provider and tmp bot home."""
    openkore = OpenKore(
        home=test_settings.OPENKORE_HOME,
        command=test_settings.OPENKORE_COMMAND,
        console_log=test_settings.CONSOLE_LOG_PATH,
        shop_config=test_settings.SHOP_CONFIG_PATH
    )
    session = VendorSession(
        test_settings,
        provider=mock_provider,
        planner=OfferPlanner(),
        openkore=openkore
    )
    yield session
    session.close()
