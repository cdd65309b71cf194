"""
Vendor commission engine.

Given the gross amount a vendor sold in one order, works out the platform
commission and the net amount that accrues to the vendor's pending payout.
The balance increments themselves are applied by the ``place_order``
database function so that they are atomic with the order write.
"""

import logging
from dataclasses import asdict, dataclass
from decimal import Decimal, InvalidOperation

from ..errors import InvalidCommission, NotFound
from ..money import percentage_of, to_fils, to_kwd
from ..repositories import VendorRepository

logger = logging.getLogger(__name__)

COMMISSION_TYPES = ("percentage", "fixed")
DEFAULT_COMMISSION_TYPE = "percentage"
DEFAULT_COMMISSION_VALUE = "5"


@dataclass(frozen=True)
class CommissionPolicy:
    type: str
    value: Decimal

    @classmethod
    def from_vendor(cls, vendor: dict) -> "CommissionPolicy":
        return parse_policy(
            vendor.get("commission_type") or DEFAULT_COMMISSION_TYPE,
            vendor.get("commission_value") or DEFAULT_COMMISSION_VALUE,
        )

    def commission_on(self, gross_fils: int) -> int:
        if self.type == "percentage":
            return percentage_of(gross_fils, self.value)
        # A flat fee charged once per vendor per order
        return to_fils(self.value)

    @property
    def value_str(self) -> str:
        return format(self.value.normalize(), "f")


@dataclass(frozen=True)
class Accrual:
    vendor_id: str
    gross_fils: int
    commission_fils: int
    net_fils: int

    def as_row(self) -> dict:
        return asdict(self)


def parse_policy(commission_type, commission_value) -> CommissionPolicy:
    """Validates a commission type/value pair, raising InvalidCommission."""
    if commission_type not in COMMISSION_TYPES:
        raise InvalidCommission()
    try:
        value = Decimal(str(commission_value).strip())
    except (InvalidOperation, AttributeError) as exc:
        raise InvalidCommission() from exc
    if not value.is_finite() or value < 0:
        raise InvalidCommission()
    if commission_type == "percentage" and value > 100:
        raise InvalidCommission()
    return CommissionPolicy(commission_type, value)


def compute_commission(policy: CommissionPolicy, gross_fils: int) -> tuple[int, int]:
    """Returns ``(commission_fils, net_fils)``; net never goes below zero."""
    commission = policy.commission_on(gross_fils)
    return commission, max(gross_fils - commission, 0)


def gross_by_vendor(line_items: list[dict]) -> dict[str, int]:
    totals: dict[str, int] = {}
    for item in line_items:
        vendor_id = item["vendor_id"]
        totals[vendor_id] = totals.get(vendor_id, 0) + item["price_fils"] * item["quantity"]
    return totals


class CommissionService:
    def __init__(self, vendors: VendorRepository):
        self.vendors = vendors

    def accrue(self, vendor: dict, gross_fils: int) -> Accrual:
        commission, net = compute_commission(CommissionPolicy.from_vendor(vendor), gross_fils)
        return Accrual(vendor["id"], gross_fils, commission, net)

    def accruals_for(self, line_items: list[dict]) -> list[Accrual]:
        """
        One accrual per distinct vendor in an order. Lines whose vendor no
        longer exists are left out of the accruals.
        """
        totals = gross_by_vendor(line_items)
        vendors = {v["id"]: v for v in self.vendors.get_many(totals)}
        accruals = []
        for vendor_id, gross in totals.items():
            vendor = vendors.get(vendor_id)
            if vendor is None:
                logger.warning("Skipping accrual for missing vendor %s", vendor_id)
                continue
            accruals.append(self.accrue(vendor, gross))
        return accruals

    def set_policy(self, vendor_id: str, commission_type, commission_value) -> dict:
        policy = parse_policy(commission_type, commission_value)
        if self.vendors.get(vendor_id) is None:
            raise NotFound("Vendor not found")
        vendor = self.vendors.update(
            vendor_id,
            {"commission_type": policy.type, "commission_value": policy.value_str},
        )
        logger.info(
            "Commission for vendor %s set to %s %s", vendor_id, policy.type, policy.value_str
        )
        return vendor


def describe_accrual(accrual: Accrual) -> str:
    return (
        f"vendor={accrual.vendor_id} gross={to_kwd(accrual.gross_fils)} "
        f"commission={to_kwd(accrual.commission_fils)} net={to_kwd(accrual.net_fils)}"
    )
