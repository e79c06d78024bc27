"""Order domain exceptions."""

from ledger_server.modules.common.exceptions import AlreadyProcessedError, NotFoundError


class OrderNotFoundError(NotFoundError):
    """Raised when an order id does not resolve."""


class ProductNotFoundError(NotFoundError):
    """Raised when a product id does not resolve."""


class InvalidStatusTransitionError(AlreadyProcessedError):
    """Raised when the requested status is not reachable from the current one."""

    code = "invalid_transition"


class OutOfStockError(AlreadyProcessedError):
    """Raised when a product has no stock left."""

    code = "out_of_stock"
