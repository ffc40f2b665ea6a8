# services/errors.py
# Errors raised by the order store and the reporting engine.
# They subclass the builtin types so callers that already catch
# ValueError / LookupError keep working.


class OrderError(Exception):
    pass


class NotFoundError(OrderError, LookupError):
    # Raised when an order id does not resolve to a stored order.

    def __init__(self, order_id: str):
        super().__init__(f"Order not found: {order_id}")
        self.order_id = order_id


class InvalidInputError(OrderError, ValueError):
    pass
