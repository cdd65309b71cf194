import logging

from postgrest.exceptions import APIError

from ..errors import DuplicateRequest, InvalidTransition, NoBalance, NotFound
from ..money import format_currency
from ..repositories import PaymentRequestRepository, VendorRepository

logger = logging.getLogger(__name__)

OPEN_STATUSES = ["pending", "approved"]
UNIQUE_VIOLATION = "23505"


class PayoutService:
    """
    Vendor payout requests and their settlement.

    Request lifecycle: pending -> approved -> paid, pending -> paid, and
    pending/approved -> rejected. Settlements move money from the vendor's
    pending balance into lifetime payouts inside a database function.
    """

    def __init__(self, vendors: VendorRepository, requests: PaymentRequestRepository):
        self.vendors = vendors
        self.requests = requests

    def _vendor(self, vendor_id: str) -> dict:
        vendor = self.vendors.get(vendor_id)
        if vendor is None:
            raise NotFound("Vendor not found")
        return vendor

    def _request(self, request_id: str) -> dict:
        request = self.requests.get(request_id)
        if request is None:
            raise NotFound("Payment request not found")
        return request

    def wallet(self, vendor: dict) -> dict:
        return {**vendor, "payment_requests": self.requests.list_for_vendor(vendor["id"])}

    def request_payout(self, vendor_id: str) -> dict:
        vendor = self._vendor(vendor_id)
        pending = vendor.get("pending_payout_fils") or 0
        if pending <= 0:
            raise NoBalance("No balance available for payout")
        if self.requests.find_pending(vendor_id):
            raise DuplicateRequest()

        try:
            request = self.requests.insert(
                {"vendor_id": vendor_id, "amount_fils": pending, "status": "pending"}
            )
        except APIError as exc:
            # A concurrent request got past find_pending first
            if exc.code == UNIQUE_VIOLATION:
                raise DuplicateRequest() from exc
            raise
        logger.info("Vendor %s requested payout of %s", vendor_id, format_currency(pending))
        return request

    def admin_process_payout(self, vendor_id: str, processed_by: str) -> dict:
        """
        Settles the vendor's entire current pending balance and marks all of
        its open requests paid, whatever amounts they were raised for.
        """
        vendor = self._vendor(vendor_id)
        if (vendor.get("pending_payout_fils") or 0) <= 0:
            raise NoBalance()

        result = self.vendors.settle_payout(vendor_id, processed_by)
        if not result.get("amount_fils"):
            # Balance drained between the read and the settlement
            raise NoBalance()
        logger.info(
            "Settled %s for vendor %s (%s requests) by %s",
            format_currency(result["amount_fils"]), vendor_id, result.get("requests_settled", 0), processed_by,
        )
        return result

    def approve_request(self, request_id: str, processed_by: str) -> dict:
        request = self._request(request_id)
        if request["status"] != "pending":
            raise InvalidTransition(f"Cannot approve a {request['status']} request")
        return self.requests.update(request_id, {"status": "approved", "processed_by": processed_by})

    def pay_request(self, request_id: str, processed_by: str) -> dict:
        """Settles one request for its requested amount, capped at the pending balance."""
        request = self._request(request_id)
        if request["status"] not in OPEN_STATUSES:
            raise InvalidTransition(f"Cannot pay a {request['status']} request")
        vendor = self._vendor(request["vendor_id"])
        if (vendor.get("pending_payout_fils") or 0) <= 0:
            raise NoBalance()

        result = self.requests.settle(request_id, processed_by)
        if not result.get("settled"):
            if result.get("reason") == "no_balance":
                raise NoBalance()
            raise InvalidTransition("Payment request is no longer open")
        logger.info(
            "Paid request %s for vendor %s: %s", request_id, request["vendor_id"], format_currency(result["amount_fils"])
        )
        return self.requests.get(request_id)

    def reject_request(self, request_id: str, processed_by: str, notes: str | None = None) -> dict:
        request = self._request(request_id)
        if request["status"] not in OPEN_STATUSES:
            raise InvalidTransition(f"Cannot reject a {request['status']} request")
        return self.requests.update(
            request_id, {"status": "rejected", "processed_by": processed_by, "notes": notes}
        )

    def open_requests(self) -> list[dict]:
        return self.requests.list_by_status(OPEN_STATUSES)

    def financials(self) -> list[dict]:
        """All vendors annotated with their open pending request, if any."""
        pending = {}
        for request in self.requests.list_by_status(["pending"]):
            pending.setdefault(request["vendor_id"], request)
        vendors = []
        for vendor in self.vendors.list_all():
            request = pending.get(vendor["id"])
            vendors.append(
                {
                    **vendor,
                    "has_pending_request": request is not None,
                    "pending_request_amount_fils": request["amount_fils"] if request else None,
                }
            )
        return vendors
