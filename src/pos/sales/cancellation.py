"""Sale canceller: void an invoiced checkout.

Two passes over the cart, in cart order: first every line's held stock goes
back on the shelf (lines whose product has since left the catalogue are
skipped), then a CANCELLED sale is written per line. Both passes and the
session reset share one unit of work.
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ProteanException
from protean.fields import Identifier
from protean.utils.globals import current_domain

from pos.catalogue.product import Product
from pos.checkout.invoice import build_cancellation_details
from pos.checkout.invoicing import lookup_customer
from pos.checkout.session import CheckoutSession
from pos.domain import pos
from pos.sales.finalization import record_sales
from pos.sales.sale import SaleStatus
from pos.shared.errors import SalePersistenceFailure
from pos.utils.logging import bind_sale_context, clear_sale_context

logger = structlog.get_logger(__name__)

CANCELLATION_REASON = "sale_cancelled"


@pos.command(part_of="CheckoutSession")
class CancelSale:
    session_id = Identifier(required=True)


def restore_stock(session, reference):
    product_repo = current_domain.repository_for(Product)
    for item in session.line_items():
        try:
            product = product_repo.get(item.product_id)
        except ObjectNotFoundError:
            logger.warning("Product missing, stock not restored", product_id=str(item.product_id))
            continue
        product.release_stock(item.quantity, reason=CANCELLATION_REASON, reference=reference)
        product_repo.add(product)


@pos.command_handler(part_of=CheckoutSession)
class CancelSaleHandler:
    @handle(CancelSale)
    def cancel_sale(self, command):
        repo = current_domain.repository_for(CheckoutSession)
        session = repo.get(command.session_id)
        session.require_invoice()

        invoice_number = session.invoice.invoice_number
        details = build_cancellation_details(session, customer=lookup_customer(session.customer_id))

        bind_sale_context(session_id=str(session.id), invoice_number=invoice_number)
        try:
            restore_stock(session, reference=invoice_number)
            record_sales(session, SaleStatus.CANCELLED)
            session.cancel()
            repo.add(session)
        except ProteanException:
            raise
        except Exception as exc:
            logger.exception("Sale cancellation failed")
            raise SalePersistenceFailure("cancel", invoice_number=invoice_number) from exc
        finally:
            clear_sale_context()

        logger.info("Sale cancelled", invoice_number=invoice_number, total=details["total_amount"])
        return details
