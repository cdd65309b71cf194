"""
Business logic for the marketplace, one service per concern:

- CartService: server-side cart lines
- CheckoutService: order placement and the order status lifecycle
- CommissionService: platform commission and vendor accruals
- PayoutService: vendor payout requests and settlement
"""

from .cart import CartService
from .checkout import CheckoutService
from .commission import CommissionService
from .payouts import PayoutService

__all__ = [
    "CartService",
    "CheckoutService",
    "CommissionService",
    "PayoutService",
]
