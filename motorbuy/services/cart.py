from ..errors import InvalidQuantity, NotFound
from ..repositories import CartRepository, ProductRepository


class CartService:
    """
    Server-side cart for signed-in customers.

    Stock is not checked here; it is advisory information shown by the
    client and checkout only decrements it.
    """

    def __init__(self, carts: CartRepository, products: ProductRepository):
        self.carts = carts
        self.products = products

    def get_cart(self, user_id: str) -> list[dict]:
        """
        Cart lines joined with their product. A line whose product has been
        deleted keeps ``product = None`` and is flagged unavailable.
        """
        items = self.carts.list_for_user(user_id)
        products = {p["id"]: p for p in self.products.get_many(i["product_id"] for i in items)}
        lines = []
        for item in items:
            product = products.get(item["product_id"])
            lines.append({**item, "product": product, "available": product is not None})
        return lines

    def add_item(self, user_id: str, product_id: str, quantity: int = 1) -> dict:
        _check_quantity(quantity)
        if self.products.get(product_id) is None:
            raise NotFound("Product not found")

        existing = self.carts.find(user_id, product_id)
        if existing:
            return self.carts.set_quantity(existing["id"], existing["quantity"] + quantity)
        return self.carts.insert({"user_id": user_id, "product_id": product_id, "quantity": quantity})

    def set_quantity(self, user_id: str, item_id: str, quantity: int) -> dict:
        _check_quantity(quantity)
        self._owned_item(user_id, item_id)
        return self.carts.set_quantity(item_id, quantity)

    def remove_item(self, user_id: str, item_id: str) -> None:
        self._owned_item(user_id, item_id)
        self.carts.delete(item_id)

    def clear(self, user_id: str) -> None:
        self.carts.clear(user_id)

    def _owned_item(self, user_id: str, item_id: str) -> dict:
        item = self.carts.get(item_id)
        if item is None or item["user_id"] != user_id:
            raise NotFound("Cart item not found")
        return item


def _check_quantity(quantity) -> None:
    if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity < 1:
        raise InvalidQuantity()
