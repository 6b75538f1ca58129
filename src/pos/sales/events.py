"""Domain events for the Sale aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from pos.domain import pos


@pos.event(part_of="Sale")
class SaleRecorded:
    __version__ = 1

    sale_id = Identifier(required=True)
    invoice_number = String(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    total_amount = Float(required=True)
    status = String(required=True)  # COMPLETED or CANCELLED
    recorded_at = DateTime(required=True)


@pos.event(part_of="Sale")
class SaleRefunded:
    __version__ = 1

    sale_id = Identifier(required=True)
    invoice_number = String(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    refund_amount = Float(required=True)
    refunded_at = DateTime(required=True)
