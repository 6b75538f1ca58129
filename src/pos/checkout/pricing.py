"""Pricing calculator: cart totals at the shop's flat sales-tax rate."""

from protean.fields import Float

from pos.domain import pos

TAX_RATE = 0.08


def round2(amount: float) -> float:
    return round(amount, 2)


def line_total(price: float, quantity: int) -> float:
    return (price or 0.0) * (quantity or 0)


def cart_subtotal(items) -> float:
    """Sum of price × quantity over anything exposing `price` and `quantity`."""
    return sum(line_total(item.price, item.quantity) for item in items)


@pos.value_object
class CartTotals:
    """Subtotal, tax and total, rounded to cents for display and invoicing."""

    subtotal = Float(default=0.0)
    tax = Float(default=0.0)
    total = Float(default=0.0)


def compute_totals(items, tax_rate: float = TAX_RATE) -> CartTotals:
    subtotal = round2(cart_subtotal(items))
    tax = round2(subtotal * tax_rate)
    return CartTotals(subtotal=subtotal, tax=tax, total=round2(subtotal + tax))
