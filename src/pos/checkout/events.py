"""Domain events for the CheckoutSession aggregate."""

from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String, Text

from pos.domain import pos


@pos.event(part_of="CheckoutSession")
class CheckoutOpened:
    __version__ = 1

    session_id = Identifier(required=True)
    terminal = String()
    opened_at = DateTime(required=True)


@pos.event(part_of="CheckoutSession")
class CheckoutCustomerChanged:
    """The counter switched customer; clearing the customer also clears the cart."""

    __version__ = 1

    session_id = Identifier(required=True)
    customer_id = Identifier()
    previous_customer_id = Identifier()
    cart_cleared = Boolean(default=False)


@pos.event(part_of="CheckoutSession")
class CartItemAdded:
    __version__ = 1

    session_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)  # Line quantity after the add


@pos.event(part_of="CheckoutSession")
class CartQuantityUpdated:
    __version__ = 1

    session_id = Identifier(required=True)
    product_id = Identifier(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)


@pos.event(part_of="CheckoutSession")
class CartItemRemoved:
    __version__ = 1

    session_id = Identifier(required=True)
    product_id = Identifier(required=True)


@pos.event(part_of="CheckoutSession")
class CartCleared:
    __version__ = 1

    session_id = Identifier(required=True)
    items_removed = Integer(required=True)


@pos.event(part_of="CheckoutSession")
class PaymentMethodSelected:
    __version__ = 1

    session_id = Identifier(required=True)
    payment_method = String(required=True)


@pos.event(part_of="CheckoutSession")
class CheckoutInvoiced:
    """Checkout was pressed: invoice generated and stock held for every line."""

    __version__ = 1

    session_id = Identifier(required=True)
    invoice_number = String(required=True)
    invoice_date = String(required=True)
    customer_id = Identifier()
    payment_method = String(required=True)
    items = Text(required=True)  # JSON: list of {product_id, quantity, price}
    subtotal = Float(required=True)
    tax = Float(required=True)
    total = Float(required=True)


@pos.event(part_of="CheckoutSession")
class SaleFinalized:
    __version__ = 1

    session_id = Identifier(required=True)
    invoice_number = String(required=True)
    customer_id = Identifier()
    sale_ids = Text(required=True)  # JSON: list of sale ids
    total = Float(required=True)
    finalized_at = DateTime(required=True)


@pos.event(part_of="CheckoutSession")
class SaleCancelled:
    __version__ = 1

    session_id = Identifier(required=True)
    invoice_number = String(required=True)
    customer_id = Identifier()
    items = Text(required=True)  # JSON: list of {product_id, quantity, price}
    total = Float(required=True)
    cancelled_at = DateTime(required=True)
