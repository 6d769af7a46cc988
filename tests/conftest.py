"""Pytest configuration and fixtures"""
import os
from typing import Dict, List, Optional

import pytest

# Set test environment variables
os.environ.setdefault("UPSTASH_REDIS_REST_URL", "https://test.upstash.io")
os.environ.setdefault("UPSTASH_REDIS_REST_TOKEN", "test_token")
os.environ.setdefault("PSWEB_ID", "test_site")
os.environ.setdefault("PSWEB_KEY", "test_key")

from eshops.cart import Customer, LineItem  # noqa: E402


class FakeSessionStorage:
    """In-memory session storage recording every write."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})
        self.writes: List[str] = []

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value
        self.writes.append(key)


class FlakySessionStorage(FakeSessionStorage):
    """Storage whose writes can be switched to fail."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        super().__init__(initial)
        self.fail_writes = False
        self.fail_reads = False

    def get(self, key: str) -> Optional[str]:
        if self.fail_reads:
            raise ConnectionError("storage unavailable")
        return super().get(key)

    def set(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise ConnectionError("storage unavailable")
        super().set(key, value)


@pytest.fixture
def storage():
    """Empty in-memory session storage"""
    return FakeSessionStorage()


@pytest.fixture
def flaky_storage():
    """Session storage that can be told to fail"""
    return FlakySessionStorage()


@pytest.fixture
def widget():
    """Sample line item"""
    return LineItem(
        product_id=1,
        title="Widget",
        image_url="",
        unit_price=10.0,
        quantity=2,
    )


@pytest.fixture
def gadget():
    """Second sample line item"""
    return LineItem(
        product_id=2,
        title="Gadget",
        image_url="https://cdn.example.com/gadget.png",
        unit_price=7.5,
        quantity=1,
    )


@pytest.fixture
def complete_customer():
    """Customer with every required field filled"""
    return Customer(
        document_type=1,
        document_number="0801199012345",
        first_name="Ana",
        last_name="Martinez",
        email="ana@example.com",
        phone="+504 9999-0000",
        address_line1="Col. Palmira, Calle 2",
        city_id=10,
        municipality_id=20,
        region_id=8,
        country_id=1,
    )


@pytest.fixture
def make_storage():
    """Factory for in-memory storage pre-filled with snapshot data"""
    return FakeSessionStorage
