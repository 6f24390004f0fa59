"""
Domain errors raised by the services.

Services raise these at the point of detection and never catch them; the
exception handlers in `main` are the only place they become HTTP responses.
"""


class MarketplaceError(Exception):
    """Base class for every expected domain failure."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class Unauthenticated(MarketplaceError):
    """Missing, malformed or expired identity token."""


class NotFound(MarketplaceError):
    pass


class PermissionDenied(MarketplaceError):
    """The acting user is not the owner of the resource."""


class InvalidInput(MarketplaceError):
    """Missing or malformed required fields."""


class InvalidItem(InvalidInput):
    """An order line references a product that cannot be ordered here."""

    def __init__(self, product_id: int):
        self.product_id = product_id
        super().__init__(f"Product {product_id} is not valid for this establishment")


class InvalidTransition(MarketplaceError):
    """The order is not in a state that allows the requested change."""

    def __init__(self, message: str, current_status: str | None = None):
        self.current_status = current_status
        super().__init__(message)
