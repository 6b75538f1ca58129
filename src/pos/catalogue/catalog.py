"""Read-only catalogue access for the counter: search, category filter, sort, barcode lookup."""

from enum import Enum

from protean.utils.globals import current_domain

from pos.catalogue.product import UNCATEGORIZED, Product
from pos.shared.errors import ProductNotFound

ALL_CATEGORIES = "all"


class SortOption(Enum):
    NAME_ASC = "name-asc"
    NAME_DESC = "name-desc"
    PRICE_ASC = "price-asc"
    PRICE_DESC = "price-desc"
    STOCK_ASC = "stock-asc"
    STOCK_DESC = "stock-desc"


_SORT_KEYS = {
    SortOption.NAME_ASC: (lambda p: (p.name or "").lower(), False),
    SortOption.NAME_DESC: (lambda p: (p.name or "").lower(), True),
    SortOption.PRICE_ASC: (lambda p: p.price or 0.0, False),
    SortOption.PRICE_DESC: (lambda p: p.price or 0.0, True),
    SortOption.STOCK_ASC: (lambda p: p.stock or 0, False),
    SortOption.STOCK_DESC: (lambda p: p.stock or 0, True),
}


class ProductCatalog:
    """Availability data for the cart, read straight from the Product repository."""

    def __init__(self, repository=None):
        self._repository = repository

    @property
    def repository(self):
        return self._repository or current_domain.repository_for(Product)

    def get(self, product_id) -> Product:
        return self.repository.get(product_id)

    def find_by_barcode(self, barcode: str) -> Product:
        barcode = (barcode or "").strip()
        if not barcode:
            raise ProductNotFound(barcode)

        matches = self.repository._dao.query.filter(barcode=barcode).all().items
        if not matches:
            raise ProductNotFound(barcode)
        return matches[0]

    def list_products(self, search=None, category=ALL_CATEGORIES, sort=SortOption.NAME_ASC):
        """Products whose name (case-insensitive) or barcode contains `search`."""
        products = self.repository._dao.query.all().items

        term = (search or "").strip().lower()
        if term:
            products = [p for p in products if term in (p.name or "").lower() or term in (p.barcode or "")]

        if category and category != ALL_CATEGORIES:
            products = [p for p in products if (p.category or UNCATEGORIZED) == category]

        key, reverse = _SORT_KEYS[SortOption(sort)]
        return sorted(products, key=key, reverse=reverse)

    def categories(self):
        seen = {p.category or UNCATEGORIZED for p in self.repository._dao.query.all().items}
        return [ALL_CATEGORIES, *sorted(seen)]
