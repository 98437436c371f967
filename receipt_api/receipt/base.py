from typing import Protocol

from pydantic import BaseModel, ConfigDict, Field

ALLOWED_CONTENT_TYPES = {"image/jpeg", "image/jpg", "image/png", "image/webp"}


class _Lenient(BaseModel):
    # The model decides which fields it fills in; keep whatever else it sends
    model_config = ConfigDict(extra="allow")


class ReceiptInfo(_Lenient):
    merchant_name: str | None = None
    address: str | None = None
    date: str | None = None  # YYYY-MM-DD
    time: str | None = None  # HH:MM
    server: str | None = None
    guest_count: int | None = None


class ExpenseItem(_Lenient):
    name: str | None = None
    quantity: float | None = None
    unit_price: float | None = None
    total_price: float | None = None
    currency: str | None = None  # ISO 4217


class Totals(_Lenient):
    subtotal: float | None = None
    tax: float | None = None
    total: float | None = None
    payment_method: str | None = None
    payment_amount: float | None = None
    change: float | None = None
    currency: str | None = None


class ExpenseReport(_Lenient):
    receipt_info: ReceiptInfo | None = None
    items: list[ExpenseItem] = Field(default_factory=list)
    totals: Totals | None = None
    expense_category: str | None = None
    business_purpose: str | None = None


class ReceiptExtractor(Protocol):
    async def extract(self, image_bytes: bytes, content_type: str) -> dict: ...
