from datetime import datetime
from typing import Optional

from .base import ApiModel


class PaymentRequestOut(ApiModel):
    money_fields = {"amount": "amount_fils"}

    id: str
    vendor_id: str
    amount: str
    status: str
    notes: Optional[str] = None
    processed_by: Optional[str] = None
    processed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class PayoutRejection(ApiModel):
    notes: Optional[str] = None


class PayoutResult(ApiModel):
    money_fields = {"amount": "amount_fils"}

    message: str
    amount: str
    requests_settled: int = 0
