"""
Order ledger: turns a cart (or a guest's item list) into an immutable order.

Prices are copied from the catalog into the order items at purchase time so
later product edits never change historical orders. The order, its items,
the stock decrement, the vendor accruals and the cart clear are written by
one database function call.
"""

import logging

from ..errors import EmptyCart, InvalidQuantity, InvalidTransition, NotFound
from ..money import format_currency
from ..repositories import CartRepository, OrderRepository, ProductRepository
from .commission import CommissionService, describe_accrual

logger = logging.getLogger(__name__)

ORDER_STATUSES = ("pending", "paid", "shipped", "delivered", "cancelled")

# Forward path of an order; cancelled is reachable from any non-terminal state
ORDER_FLOW = {
    "pending": "paid",
    "paid": "shipped",
    "shipped": "delivered",
}
TERMINAL_STATUSES = ("delivered", "cancelled")
GUEST_PREFIX = "guest:"


def can_transition(current: str, target: str) -> bool:
    if target not in ORDER_STATUSES:
        return False
    if current == target:
        return True
    if current in TERMINAL_STATUSES:
        return False
    return target == "cancelled" or ORDER_FLOW.get(current) == target


def snapshot_line(product: dict, quantity: int) -> dict:
    return {
        "product_id": product["id"],
        "vendor_id": product["vendor_id"],
        "quantity": quantity,
        "price_fils": product["price_fils"],
    }


def order_total(lines: list[dict]) -> int:
    return sum(line["price_fils"] * line["quantity"] for line in lines)


class CheckoutService:
    def __init__(
        self,
        orders: OrderRepository,
        carts: CartRepository,
        products: ProductRepository,
        commission: CommissionService,
    ):
        self.orders = orders
        self.carts = carts
        self.products = products
        self.commission = commission

    def checkout(self, user_id: str) -> dict:
        cart = self.carts.list_for_user(user_id)
        if not cart:
            raise EmptyCart()

        products = {p["id"]: p for p in self.products.get_many(i["product_id"] for i in cart)}
        lines = []
        for item in cart:
            product = products.get(item["product_id"])
            if product is None:
                logger.info("Skipping unavailable product %s in cart of %s", item["product_id"], user_id)
                continue
            lines.append(snapshot_line(product, item["quantity"]))
        if not lines:
            raise EmptyCart()

        return self._place({"user_id": user_id}, lines, clear_cart_for=user_id)

    def checkout_guest(self, items: list[dict], email: str, name: str, phone: str) -> dict:
        """
        Guest checkout from an item list kept on the client. Prices are
        always read from the catalog.
        """
        if not items:
            raise EmptyCart()

        quantities: dict[str, int] = {}
        for item in items:
            quantity = item["quantity"]
            if quantity < 1:
                raise InvalidQuantity()
            quantities[item["product_id"]] = quantities.get(item["product_id"], 0) + quantity

        products = {p["id"]: p for p in self.products.get_many(quantities)}
        missing = [pid for pid in quantities if pid not in products]
        if missing:
            raise NotFound(f"Product not found: {missing[0]}")

        lines = [snapshot_line(products[pid], qty) for pid, qty in quantities.items()]
        order = {
            "user_id": f"{GUEST_PREFIX}{email}",
            "guest_email": email,
            "guest_name": name,
            "guest_phone": phone,
        }
        return self._place(order, lines)

    def _place(self, order: dict, lines: list[dict], clear_cart_for: str | None = None) -> dict:
        total = order_total(lines)
        accruals = self.commission.accruals_for(lines)
        placed = self.orders.place_order(
            {**order, "total_fils": total, "status": "paid"},
            lines,
            [a.as_row() for a in accruals],
            clear_cart_for=clear_cart_for,
        )
        logger.info(
            "Order %s placed by %s: %d lines, total %s",
            placed["id"], order["user_id"], len(lines), format_currency(total),
        )
        for accrual in accruals:
            logger.info("Accrued %s", describe_accrual(accrual))
        return placed

    def with_items(self, orders: list[dict]) -> list[dict]:
        items_by_order: dict[str, list[dict]] = {}
        for item in self.orders.items_for(o["id"] for o in orders):
            items_by_order.setdefault(item["order_id"], []).append(item)
        return [{**o, "items": items_by_order.get(o["id"], [])} for o in orders]

    def get_order(self, order_id: str) -> dict:
        order = self.orders.get(order_id)
        if order is None:
            raise NotFound("Order not found")
        return self.with_items([order])[0]

    def orders_for_vendor(self, vendor_id: str) -> list[dict]:
        """
        Orders containing the vendor's products, cut down to the vendor's own
        lines. The total is the vendor's subtotal and guest contact details
        are left out.
        """
        lines: dict[str, list[dict]] = {}
        for item in self.orders.items_for_vendor(vendor_id):
            lines.setdefault(item["order_id"], []).append(item)

        orders = []
        for order in self.orders.list_by_ids(lines):
            own = lines[order["id"]]
            guest = order["user_id"].startswith(GUEST_PREFIX)
            orders.append(
                {
                    **order,
                    "user_id": GUEST_PREFIX.rstrip(":") if guest else order["user_id"],
                    "guest_email": None,
                    "guest_phone": None,
                    "total_fils": order_total(own),
                    "items": own,
                }
            )
        return orders

    def set_status(self, order_id: str, status: str) -> dict:
        order = self.orders.get(order_id)
        if order is None:
            raise NotFound("Order not found")
        if not can_transition(order["status"], status):
            raise InvalidTransition(f"Cannot move order from {order['status']} to {status}")
        if order["status"] == status:
            return order
        return self.orders.update(order_id, {"status": status})

    def delete_order(self, order_id: str) -> None:
        if self.orders.get(order_id) is None:
            raise NotFound("Order not found")
        self.orders.delete(order_id)
