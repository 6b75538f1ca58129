"""Sale finalizer: commit an invoiced checkout as COMPLETED sales.

Stock for every line was already held when the invoice was generated, so
finalizing only writes the sale records and resets the session. The handler
runs in a single unit of work: if any record fails to persist, nothing is
committed and the operator sees one `SalePersistenceFailure`.
"""

import structlog
from protean import handle
from protean.exceptions import ProteanException
from protean.fields import Identifier
from protean.utils.globals import current_domain

from pos.checkout.session import CheckoutSession
from pos.domain import pos
from pos.sales.sale import Sale, SaleStatus
from pos.shared.errors import SalePersistenceFailure
from pos.utils.logging import bind_sale_context, clear_sale_context

logger = structlog.get_logger(__name__)


@pos.command(part_of="CheckoutSession")
class CompleteSale:
    session_id = Identifier(required=True)


def record_sales(session, status):
    """Write one sale per cart line, in cart order. Returns the new sale ids."""
    sale_repo = current_domain.repository_for(Sale)
    sale_ids = []
    for item in session.line_items():
        sale = Sale.record(
            item,
            invoice_number=session.invoice.invoice_number,
            status=status,
            customer_id=session.customer_id,
            payment_method=session.payment_method,
        )
        sale_repo.add(sale)
        sale_ids.append(str(sale.id))
    return sale_ids


@pos.command_handler(part_of=CheckoutSession)
class FinalizeSaleHandler:
    @handle(CompleteSale)
    def complete_sale(self, command):
        repo = current_domain.repository_for(CheckoutSession)
        session = repo.get(command.session_id)
        session.require_invoice()

        invoice_number = session.invoice.invoice_number
        bind_sale_context(session_id=str(session.id), invoice_number=invoice_number)
        try:
            sale_ids = record_sales(session, SaleStatus.COMPLETED)
            session.finalize(sale_ids)
            repo.add(session)
        except ProteanException:
            raise
        except Exception as exc:
            logger.exception("Sale finalization failed")
            raise SalePersistenceFailure("complete", invoice_number=invoice_number) from exc
        finally:
            clear_sale_context()

        logger.info("Sale completed", invoice_number=invoice_number, sale_count=len(sale_ids))
        return sale_ids
