"""Sale aggregate (CQRS): one record per invoiced cart line.

Sale records are append-only from the counter's point of view: finalizing an
invoice writes COMPLETED records, cancelling one writes CANCELLED records.
A cancelled sale is never rewritten. The only later transition is a refund.

State Machine:
    COMPLETED → REFUNDED
    CANCELLED (terminal)
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Identifier, Integer, String

from pos.checkout.pricing import line_total, round2
from pos.domain import pos
from pos.sales.events import SaleRecorded, SaleRefunded


class SaleStatus(Enum):
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    REFUNDED = "REFUNDED"


_VALID_TRANSITIONS = {
    SaleStatus.COMPLETED: {SaleStatus.REFUNDED},
    SaleStatus.CANCELLED: set(),  # Terminal
    SaleStatus.REFUNDED: set(),  # Terminal
}


@pos.aggregate
class Sale:
    product_id = Identifier(required=True)
    product_name = String(max_length=255)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)
    total_amount = Float(required=True, min_value=0.0)
    customer_id = Identifier()
    payment_method = String(max_length=10)
    invoice_number = String(required=True, max_length=20)
    status = String(choices=SaleStatus, default=SaleStatus.COMPLETED.value)
    recorded_at = DateTime()
    refunded_at = DateTime()

    @classmethod
    def record(cls, item, invoice_number, status, customer_id=None, payment_method=None):
        """Build a sale from a cart line."""
        status = SaleStatus(status)
        if status == SaleStatus.REFUNDED:
            raise ValidationError({"status": ["A sale cannot be recorded as refunded"]})

        now = datetime.now(UTC)
        sale = cls(
            product_id=str(item.product_id),
            product_name=item.name,
            quantity=item.quantity,
            unit_price=item.price,
            total_amount=round2(line_total(item.price, item.quantity)),
            customer_id=str(customer_id) if customer_id else None,
            payment_method=payment_method,
            invoice_number=invoice_number,
            status=status.value,
            recorded_at=now,
        )
        sale.raise_(
            SaleRecorded(
                sale_id=str(sale.id),
                invoice_number=invoice_number,
                product_id=str(item.product_id),
                quantity=item.quantity,
                total_amount=sale.total_amount,
                status=status.value,
                recorded_at=now,
            )
        )
        return sale

    def refund(self):
        current = SaleStatus(self.status)
        if SaleStatus.REFUNDED not in _VALID_TRANSITIONS[current]:
            raise ValidationError({"status": [f"Cannot refund a {current.value} sale"]})

        now = datetime.now(UTC)
        self.status = SaleStatus.REFUNDED.value
        self.refunded_at = now
        self.raise_(
            SaleRefunded(
                sale_id=str(self.id),
                invoice_number=self.invoice_number,
                product_id=str(self.product_id),
                quantity=self.quantity,
                refund_amount=self.total_amount,
                refunded_at=now,
            )
        )
