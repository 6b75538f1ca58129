"""Product aggregate (CQRS): the shop's catalogue entry and its shelf stock.

Stock is the only shared mutable resource touched by checkout. All stock
arithmetic happens here, on the freshly loaded aggregate, instead of on a
snapshot held by the cart:

    hold_stock:    conditional decrement, refused when stock < quantity
    release_stock: increment (cancelled checkout, refund)
    set_stock:     operator overwrite after a physical count
"""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Integer, String

from pos.catalogue.events import ProductRegistered, StockHeld, StockLevelSet, StockReleased
from pos.domain import pos
from pos.shared.errors import StockLimitExceeded

UNCATEGORIZED = "uncategorized"


@pos.aggregate
class Product:
    name = String(required=True, max_length=255)
    barcode = String(required=True, max_length=50, unique=True)
    price = Float(required=True, min_value=0.0)
    category = String(max_length=100, default=UNCATEGORIZED)
    stock = Integer(default=0, min_value=0)
    image_url = String(max_length=1024)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def register(cls, name, barcode, price, category=None, stock=0, image_url=None):
        now = datetime.now(UTC)
        product = cls(
            name=name,
            barcode=barcode,
            price=price,
            category=category or UNCATEGORIZED,
            stock=stock,
            image_url=image_url,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductRegistered(
                product_id=str(product.id),
                name=name,
                barcode=barcode,
                price=price,
                category=product.category,
                stock=stock,
                registered_at=now,
            )
        )
        return product

    def hold_stock(self, quantity, reference=None):
        """Set stock aside for an invoiced checkout."""
        if quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be positive"]})

        previous = self.stock or 0
        if previous < quantity:
            raise StockLimitExceeded(self.name, previous)

        now = datetime.now(UTC)
        self.stock = previous - quantity
        self.updated_at = now

        self.raise_(
            StockHeld(
                product_id=str(self.id),
                quantity=quantity,
                previous_stock=previous,
                new_stock=self.stock,
                reference=reference,
                held_at=now,
            )
        )

    def release_stock(self, quantity, reason, reference=None):
        """Put stock back on the shelf."""
        if quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be positive"]})

        previous = self.stock or 0
        now = datetime.now(UTC)
        self.stock = previous + quantity
        self.updated_at = now

        self.raise_(
            StockReleased(
                product_id=str(self.id),
                quantity=quantity,
                previous_stock=previous,
                new_stock=self.stock,
                reason=reason,
                reference=reference,
                released_at=now,
            )
        )

    def set_stock(self, quantity):
        if quantity is None or quantity < 0:
            raise ValidationError({"stock_quantity": ["Stock quantity cannot be negative"]})

        previous = self.stock or 0
        now = datetime.now(UTC)
        self.stock = quantity
        self.updated_at = now

        self.raise_(
            StockLevelSet(
                product_id=str(self.id),
                previous_stock=previous,
                new_stock=quantity,
                set_at=now,
            )
        )

