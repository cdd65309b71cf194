from decimal import Decimal

import pytest

from motorbuy.errors import InvalidCommission, NotFound
from motorbuy.repositories import VendorRepository
from motorbuy.services import CommissionService
from motorbuy.services.commission import CommissionPolicy, compute_commission, parse_policy


def test_percentage_commission():
    policy = parse_policy("percentage", "5")
    assert compute_commission(policy, 45000) == (2250, 42750)


def test_fixed_commission_is_charged_once():
    policy = parse_policy("fixed", "2")
    assert compute_commission(policy, 315000) == (2000, 313000)


def test_net_never_goes_negative():
    policy = parse_policy("fixed", "10")
    assert compute_commission(policy, 4000) == (10000, 0)


@pytest.mark.parametrize(
    "commission_type, value",
    [("flat", "5"), ("percentage", "-1"), ("percentage", "100.5"), ("fixed", "abc"), ("fixed", None), ("percentage", "NaN")],
)
def test_invalid_policies(commission_type, value):
    with pytest.raises(InvalidCommission) as excinfo:
        parse_policy(commission_type, value)
    assert excinfo.value.message == "Invalid commission type/value"


def test_value_is_stored_normalized():
    assert parse_policy("percentage", "7.50").value_str == "7.5"
    assert parse_policy("fixed", 10).value_str == "10"
    assert parse_policy("percentage", "100").value == Decimal("100")


def test_missing_policy_falls_back_to_default():
    policy = CommissionPolicy.from_vendor({"id": "v1"})
    assert policy == CommissionPolicy("percentage", Decimal("5"))


def test_accruals_are_per_vendor(db, market):
    service = CommissionService(VendorRepository(db))
    lines = [
        {"vendor_id": market.tires["id"], "price_fils": 45000, "quantity": 1},
        {"vendor_id": market.parts["id"], "price_fils": 35000, "quantity": 1},
        {"vendor_id": market.parts["id"], "price_fils": 280000, "quantity": 1},
        {"vendor_id": "gone", "price_fils": 1000, "quantity": 1},
    ]
    accruals = {a.vendor_id: a for a in service.accruals_for(lines)}

    assert set(accruals) == {market.tires["id"], market.parts["id"]}
    assert accruals[market.tires["id"]].net_fils == 42750
    assert accruals[market.parts["id"]].commission_fils == 2000
    assert accruals[market.parts["id"]].net_fils == 313000


def test_set_policy_validates_before_writing(db, market):
    service = CommissionService(VendorRepository(db))

    with pytest.raises(InvalidCommission):
        service.set_policy(market.tires["id"], "percentage", "150")
    assert db.row("vendors", market.tires["id"])["commission_value"] == "5"

    with pytest.raises(NotFound):
        service.set_policy("missing", "fixed", "1")

    updated = service.set_policy(market.tires["id"], "fixed", "1.500")
    assert (updated["commission_type"], updated["commission_value"]) == ("fixed", "1.5")
