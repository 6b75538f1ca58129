"""Checkout: turn the cart into an invoice and hold its stock.

Holding happens in the same unit of work as the invoice: if any line can no
longer be covered by shelf stock, the whole checkout is rolled back and the
cart stays editable.
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from pos.catalogue.product import Product
from pos.checkout.invoice import build_invoice_snapshot
from pos.checkout.session import CheckoutSession
from pos.customer.customer import Customer
from pos.domain import pos
from pos.shared.errors import ProductNotFound

logger = structlog.get_logger(__name__)


@pos.command(part_of="CheckoutSession")
class Checkout:
    session_id = Identifier(required=True)
    payment_method = String(max_length=10)


def lookup_customer(customer_id):
    """The customer on the receipt, or None when they are gone from the register."""
    if not customer_id:
        return None
    try:
        return current_domain.repository_for(Customer).get(customer_id)
    except ObjectNotFoundError:
        return None


def hold_stock_for(session, reference):
    product_repo = current_domain.repository_for(Product)
    for item in session.line_items():
        try:
            product = product_repo.get(item.product_id)
        except ObjectNotFoundError:
            raise ProductNotFound(item.product_id, by="id") from None
        product.hold_stock(item.quantity, reference=reference)
        product_repo.add(product)


@pos.command_handler(part_of=CheckoutSession)
class CheckoutHandler:
    @handle(Checkout)
    def checkout(self, command):
        repo = current_domain.repository_for(CheckoutSession)
        session = repo.get(command.session_id)

        invoice = session.checkout(payment_method=command.payment_method)
        hold_stock_for(session, reference=invoice.invoice_number)
        repo.add(session)

        snapshot = build_invoice_snapshot(session, customer=lookup_customer(session.customer_id))
        logger.info(
            "Checkout invoiced",
            session_id=str(session.id),
            invoice_number=invoice.invoice_number,
            total=snapshot["total"],
        )
        return snapshot
