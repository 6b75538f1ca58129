"""Domain events for the Product aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from pos.domain import pos


@pos.event(part_of="Product")
class ProductRegistered:
    """A new product was added to the shop catalogue."""

    __version__ = 1

    product_id = Identifier(required=True)
    name = String(required=True)
    barcode = String(required=True)
    price = Float(required=True)
    category = String(required=True)
    stock = Integer(required=True)
    registered_at = DateTime(required=True)


@pos.event(part_of="Product")
class StockHeld:
    """Stock was set aside for a checkout that has been invoiced."""

    __version__ = 1

    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    previous_stock = Integer(required=True)
    new_stock = Integer(required=True)
    reference = String()  # Invoice number
    held_at = DateTime(required=True)


@pos.event(part_of="Product")
class StockReleased:
    """Stock was returned to the shelf (cancelled checkout or refund)."""

    __version__ = 1

    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    previous_stock = Integer(required=True)
    new_stock = Integer(required=True)
    reason = String(required=True)
    reference = String()
    released_at = DateTime(required=True)


@pos.event(part_of="Product")
class StockLevelSet:
    """An operator overwrote the stock level after a count or correction."""

    __version__ = 1

    product_id = Identifier(required=True)
    previous_stock = Integer(required=True)
    new_stock = Integer(required=True)
    set_at = DateTime(required=True)
