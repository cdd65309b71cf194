class MarketplaceError(Exception):
    """
    Base class for errors that map onto a JSON ``{"message": ...}`` response.
    """

    status_code = 500
    default_message = "Internal Server Error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(MarketplaceError):
    status_code = 400
    default_message = "Validation failed"


class Unauthorized(MarketplaceError):
    status_code = 401
    default_message = "Unauthorized"


class Forbidden(MarketplaceError):
    status_code = 403
    default_message = "Forbidden"


class NotFound(MarketplaceError):
    status_code = 404
    default_message = "Not found"


# Business rule violations, all surfaced as 400


class EmptyCart(ValidationError):
    default_message = "Cart is empty"


class InvalidQuantity(ValidationError):
    default_message = "Quantity must be at least 1"


class InvalidCommission(ValidationError):
    default_message = "Invalid commission type/value"


class NoBalance(ValidationError):
    default_message = "No pending payout to process"


class DuplicateRequest(ValidationError):
    default_message = "A payout request is already pending"


class InvalidTransition(ValidationError):
    default_message = "Invalid status transition"
