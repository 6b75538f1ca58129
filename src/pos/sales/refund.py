"""Refunds: return a completed sale's quantity to the shelf."""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier
from protean.utils.globals import current_domain

from pos.catalogue.product import Product
from pos.domain import pos
from pos.sales.sale import Sale

logger = structlog.get_logger(__name__)

REFUND_REASON = "sale_refunded"


@pos.command(part_of="Sale")
class RefundSale:
    sale_id = Identifier(required=True)


@pos.command_handler(part_of=Sale)
class RefundSaleHandler:
    @handle(RefundSale)
    def refund_sale(self, command):
        sale_repo = current_domain.repository_for(Sale)
        sale = sale_repo.get(command.sale_id)
        sale.refund()
        sale_repo.add(sale)

        product_repo = current_domain.repository_for(Product)
        try:
            product = product_repo.get(sale.product_id)
        except ObjectNotFoundError:
            logger.warning("Refunded product no longer in catalogue", sale_id=str(sale.id))
            return sale.status

        product.release_stock(sale.quantity, reason=REFUND_REASON, reference=sale.invoice_number)
        product_repo.add(product)
        return sale.status
