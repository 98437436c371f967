import pytest
from fastapi.testclient import TestClient

from receipt_api.config import Settings
from receipt_api.main import create_app
from receipt_api.ratelimit import limiter
from receipt_api.receipt.factory import get_receipt_extractor

SAMPLE_REPORT = {
    "receipt_info": {
        "merchant_name": "Pho 24",
        "address": "5 Nguyen Thiep, District 1, Ho Chi Minh City",
        "date": "2024-03-14",
        "time": "12:41",
        "server": "Lan",
        "guest_count": 2,
    },
    "items": [
        {"name": "Pho Bo", "quantity": 2, "unit_price": 65000, "total_price": 130000, "currency": "VND"},
        {"name": "Iced Tea", "quantity": 2, "unit_price": 10000, "total_price": 20000, "currency": "VND"},
    ],
    "totals": {
        "subtotal": 150000,
        "tax": 12000,
        "total": 162000,
        "payment_method": "Cash",
        "payment_amount": 200000,
        "change": 38000,
        "currency": "VND",
    },
    "expense_category": "Meals & Entertainment",
    "business_purpose": "Business meal",
}


class FakeExtractor:
    """Stands in for a provider; returns ``result`` or raises ``error``."""

    def __init__(self, result=None, error=None):
        self.result = SAMPLE_REPORT if result is None else result
        self.error = error
        self.calls = []

    async def extract(self, image_bytes: bytes, content_type: str) -> dict:
        self.calls.append((image_bytes, content_type))
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture(autouse=True)
def _no_rate_limit():
    limiter.reset()
    limiter.enabled = False
    yield
    limiter.enabled = True


@pytest.fixture
def make_client():
    def _make(extractor=None, **settings_kwargs):
        settings_kwargs.setdefault("google_api_key", "test-key")
        app = create_app(Settings(**settings_kwargs))
        if extractor is not None:
            app.dependency_overrides[get_receipt_extractor] = lambda: extractor
        return TestClient(app)

    return _make


@pytest.fixture
def receipt_file():
    return {"receipt": ("lunch.jpg", b"\xff\xd8\xff\xe0fake-jpeg-bytes", "image/jpeg")}
