"""Cart line management: commands and handler.

Every stock check reads the product fresh from the catalogue; the stock
copied onto a cart line is informational only.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from pos.catalogue.catalog import ProductCatalog
from pos.checkout.session import CheckoutSession
from pos.domain import pos


@pos.command(part_of="CheckoutSession")
class AddToCart:
    session_id = Identifier(required=True)
    product_id = Identifier(required=True)


@pos.command(part_of="CheckoutSession")
class AddToCartByBarcode:
    """Scanner input: look the product up by barcode and add one unit."""

    session_id = Identifier(required=True)
    barcode = String(required=True, max_length=50)


@pos.command(part_of="CheckoutSession")
class UpdateCartQuantity:
    session_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)  # Values below 1 are raised to 1


@pos.command(part_of="CheckoutSession")
class RemoveFromCart:
    session_id = Identifier(required=True)
    product_id = Identifier(required=True)


@pos.command(part_of="CheckoutSession")
class ClearCart:
    session_id = Identifier(required=True)


def _add_product(session_id, product):
    repo = current_domain.repository_for(CheckoutSession)
    session = repo.get(session_id)
    session.add_item(product)
    repo.add(session)


@pos.command_handler(part_of=CheckoutSession)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        product = ProductCatalog().get(command.product_id)
        _add_product(command.session_id, product)

    @handle(AddToCartByBarcode)
    def add_to_cart_by_barcode(self, command):
        product = ProductCatalog().find_by_barcode(command.barcode)
        _add_product(command.session_id, product)
        return str(product.id)

    @handle(UpdateCartQuantity)
    def update_cart_quantity(self, command):
        try:
            available = ProductCatalog().get(command.product_id).stock or 0
        except ObjectNotFoundError:
            available = None

        repo = current_domain.repository_for(CheckoutSession)
        session = repo.get(command.session_id)
        session.update_quantity(command.product_id, command.quantity, available_stock=available)
        repo.add(session)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        repo = current_domain.repository_for(CheckoutSession)
        session = repo.get(command.session_id)
        session.remove_item(command.product_id)
        repo.add(session)

    @handle(ClearCart)
    def clear_cart(self, command):
        repo = current_domain.repository_for(CheckoutSession)
        session = repo.get(command.session_id)
        session.clear()
        repo.add(session)
