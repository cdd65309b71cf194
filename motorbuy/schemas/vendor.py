from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from .base import ApiModel, reject_null
from .payout import PaymentRequestOut


class VendorCreate(ApiModel):
    store_name: str = Field(..., min_length=1, max_length=200)
    description: str
    logo_url: Optional[str] = None


class VendorUpdate(ApiModel):
    store_name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    logo_url: Optional[str] = None
    cover_image_url: Optional[str] = None
    bio: Optional[str] = None

    @field_validator("store_name", "description")
    @classmethod
    def _not_null(cls, value):
        return reject_null(value)


class VendorApproval(ApiModel):
    is_approved: bool


class CommissionUpdate(ApiModel):
    commission_type: str
    commission_value: str

    @field_validator("commission_value", mode="before")
    @classmethod
    def _number_as_text(cls, v):
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v


class VendorPublicOut(ApiModel):
    id: str
    store_name: str
    description: str
    logo_url: Optional[str] = None
    cover_image_url: Optional[str] = None
    bio: Optional[str] = None
    is_approved: bool = False
    created_at: Optional[datetime] = None


class VendorOut(VendorPublicOut):
    money_fields = {
        "gross_sales_kwd": "gross_sales_fils",
        "pending_payout_kwd": "pending_payout_fils",
        "lifetime_payouts_kwd": "lifetime_payouts_fils",
    }

    user_id: str
    commission_type: str = "percentage"
    commission_value: str = "5"
    gross_sales_kwd: str = "0.000"
    pending_payout_kwd: str = "0.000"
    lifetime_payouts_kwd: str = "0.000"


class VendorFinancialOut(VendorOut):
    money_fields = {
        **VendorOut.money_fields,
        "pending_request_amount": "pending_request_amount_fils",
    }

    has_pending_request: bool = False
    pending_request_amount: Optional[str] = None


class VendorWalletOut(ApiModel):
    money_fields = VendorOut.money_fields

    gross_sales_kwd: str
    pending_payout_kwd: str
    lifetime_payouts_kwd: str
    commission_type: str
    commission_value: str
    payment_requests: list[PaymentRequestOut] = []


class LedgerEntryOut(ApiModel):
    money_fields = {"gross": "gross_fils", "commission": "commission_fils", "net": "net_fils"}

    id: str
    kind: str
    order_id: Optional[str] = None
    payment_request_id: Optional[str] = None
    gross: str
    commission: str
    net: str
    created_at: Optional[datetime] = None
