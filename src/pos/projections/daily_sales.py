"""Daily sales projection: the end-of-day counter summary.

Keyed by date (YYYY-MM-DD). Counts invoices completed and cancelled at the
counter and sale lines refunded afterwards, with revenue and refund totals.
"""

from protean.core.projector import on
from protean.exceptions import ObjectNotFoundError
from protean.fields import Float, Integer, String
from protean.utils.globals import current_domain

from pos.checkout.events import SaleCancelled, SaleFinalized
from pos.checkout.session import CheckoutSession
from pos.domain import pos
from pos.sales.events import SaleRefunded
from pos.sales.sale import Sale


@pos.projection
class DailySales:
    date = String(identifier=True, required=True, max_length=10)  # YYYY-MM-DD
    invoices_completed = Integer(default=0)
    invoices_cancelled = Integer(default=0)
    sales_refunded = Integer(default=0)
    total_revenue = Float(default=0.0)
    total_refunds = Float(default=0.0)


def _get_or_create(date_key):
    repo = current_domain.repository_for(DailySales)
    try:
        return repo.get(date_key)
    except ObjectNotFoundError:
        return DailySales(
            date=date_key,
            invoices_completed=0,
            invoices_cancelled=0,
            sales_refunded=0,
            total_revenue=0.0,
            total_refunds=0.0,
        )


@pos.projector(projector_for=DailySales, aggregates=[CheckoutSession, Sale])
class DailySalesProjector:
    @on(SaleFinalized)
    def on_sale_finalized(self, event):
        record = _get_or_create(event.finalized_at.date().isoformat())
        record.invoices_completed = (record.invoices_completed or 0) + 1
        record.total_revenue = round((record.total_revenue or 0.0) + (event.total or 0.0), 2)
        current_domain.repository_for(DailySales).add(record)

    @on(SaleCancelled)
    def on_sale_cancelled(self, event):
        record = _get_or_create(event.cancelled_at.date().isoformat())
        record.invoices_cancelled = (record.invoices_cancelled or 0) + 1
        current_domain.repository_for(DailySales).add(record)

    @on(SaleRefunded)
    def on_sale_refunded(self, event):
        record = _get_or_create(event.refunded_at.date().isoformat())
        record.sales_refunded = (record.sales_refunded or 0) + 1
        record.total_refunds = round((record.total_refunds or 0.0) + (event.refund_amount or 0.0), 2)
        current_domain.repository_for(DailySales).add(record)
