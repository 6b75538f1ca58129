"""Errors the counter reports back to the operator.

They extend Protean's exception hierarchy so the FastAPI integration maps
them to HTTP responses without extra wiring: validation failures become 400s,
missing products 404s.
"""

from protean.exceptions import ObjectNotFoundError, ProteanException, ValidationError


class NoCustomerSelected(ValidationError):
    def __init__(self):
        super().__init__({"customer_id": ["Select a customer before adding products to the cart"]})


class StockLimitExceeded(ValidationError):
    def __init__(self, product_name, available):
        super().__init__({"quantity": [f"Cannot add more {product_name}. Stock limit reached ({available} in stock)."]})
        self.product_name = product_name
        self.available = available


class EmptyCartCheckout(ValidationError):
    def __init__(self):
        super().__init__({"cart": ["Cart is empty"]})


class ProductNotFound(ObjectNotFoundError):
    def __init__(self, lookup, by="barcode"):
        message = f"Product not found for barcode: {lookup}" if by == "barcode" else f"Product not found: {lookup}"
        super().__init__({"product": [message]})
        self.messages = {"product": [message]}
        self.lookup = lookup
        self.by = by


class SalePersistenceFailure(ProteanException):
    """A finalize or cancel run failed; none of its records were committed."""

    def __init__(self, operation, invoice_number=None):
        messages = {"sale": [f"Failed to {operation} sale. Please try again."]}
        super().__init__(messages)
        self.messages = messages
        self.operation = operation
        self.invoice_number = invoice_number
