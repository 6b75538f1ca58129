"""Invoice generator: the printable snapshot shown when checkout is pressed.

Nothing here touches stock or sale records. The invoice number comes from the
clock, so an invoice that is later cancelled never corresponds to a sale.
"""

from datetime import UTC, datetime

from protean.fields import String

from pos.checkout.pricing import compute_totals, line_total, round2
from pos.domain import pos

INVOICE_PREFIX = "INV-"
INVOICE_DIGITS = 8


@pos.value_object(part_of="CheckoutSession")
class InvoiceDetails:
    invoice_number = String(required=True, max_length=20)
    date = String(required=True, max_length=10)  # YYYY-MM-DD


def generate_invoice_number(now: datetime | None = None) -> str:
    """`INV-` followed by the last eight digits of the epoch milliseconds."""
    now = now or datetime.now(UTC)
    epoch_ms = str(int(now.timestamp() * 1000))
    return f"{INVOICE_PREFIX}{epoch_ms[-INVOICE_DIGITS:]}"


def generate_invoice(now: datetime | None = None) -> InvoiceDetails:
    now = now or datetime.now(UTC)
    return InvoiceDetails(
        invoice_number=generate_invoice_number(now),
        date=now.date().isoformat(),
    )


def _customer_summary(customer):
    if customer is None:
        return None
    return {
        "customer_id": str(customer.id),
        "name": customer.name,
        "email": customer.email or "",
    }


def _line_items(session):
    return [
        {
            "product_id": str(item.product_id),
            "name": item.name,
            "barcode": item.barcode,
            "quantity": item.quantity,
            "price": item.price,
            "total": round2(line_total(item.price, item.quantity)),
        }
        for item in session.line_items()
    ]


def build_invoice_snapshot(session, customer=None) -> dict:
    """Everything the receipt printer needs, detached from the aggregate."""
    totals = compute_totals(session.items)
    invoice = session.invoice
    return {
        "invoice_number": invoice.invoice_number if invoice else "",
        "date": invoice.date if invoice else datetime.now(UTC).date().isoformat(),
        "customer": _customer_summary(customer),
        "payment_method": session.payment_method,
        "items": _line_items(session),
        "subtotal": totals.subtotal,
        "tax": totals.tax,
        "total": totals.total,
    }


def build_cancellation_details(session, customer=None) -> dict:
    """Record of an invoice that was voided before the sale completed."""
    totals = compute_totals(session.items)
    invoice = session.invoice
    return {
        "invoice_number": invoice.invoice_number if invoice else "",
        "date": datetime.now(UTC).date().isoformat(),
        "items": _line_items(session),
        "total_amount": totals.total,
        "customer": _customer_summary(customer),
        "status": "CANCELLED",
    }
