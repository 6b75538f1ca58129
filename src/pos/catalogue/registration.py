"""Product registration and stock correction: commands and handler."""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Float, Identifier, Integer, String
from protean.utils.globals import current_domain

from pos.catalogue.barcode import random_ean13
from pos.catalogue.product import Product
from pos.domain import pos

logger = structlog.get_logger(__name__)

MAX_BARCODE_ATTEMPTS = 10


@pos.command(part_of="Product")
class RegisterProduct:
    """Add a product to the catalogue; a barcode is generated when none is given."""

    name = String(required=True, max_length=255)
    price = Float(required=True, min_value=0.0)
    category = String(max_length=100)
    stock = Integer(default=0, min_value=0)
    barcode = String(max_length=50)
    image_url = String(max_length=1024)


@pos.command(part_of="Product")
class UpdateProductStock:
    """Overwrite a product's stock level."""

    product_id = Identifier(required=True)
    stock_quantity = Integer(required=True)


def _barcode_taken(barcode):
    repo = current_domain.repository_for(Product)
    return bool(repo._dao.query.filter(barcode=barcode).all().items)


def _unique_barcode():
    for _ in range(MAX_BARCODE_ATTEMPTS):
        candidate = random_ean13()
        if not _barcode_taken(candidate):
            return candidate
    raise ValidationError({"barcode": ["Could not generate a unique barcode"]})


@pos.command_handler(part_of=Product)
class CatalogueHandler:
    @handle(RegisterProduct)
    def register_product(self, command):
        barcode = command.barcode or _unique_barcode()
        if command.barcode and _barcode_taken(barcode):
            raise ValidationError({"barcode": [f"Barcode {barcode} is already assigned"]})

        product = Product.register(
            name=command.name,
            barcode=barcode,
            price=command.price,
            category=command.category,
            stock=command.stock or 0,
            image_url=command.image_url,
        )
        current_domain.repository_for(Product).add(product)
        logger.info("Product registered", product_id=str(product.id), barcode=barcode)
        return str(product.id)

    @handle(UpdateProductStock)
    def update_product_stock(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.set_stock(command.stock_quantity)
        repo.add(product)
