"""CheckoutSession aggregate (CQRS): the cart owned by one POS counter session.

A session is long-lived: every sale rung up at the counter passes through it
and it returns to EMPTY after each one.

State Machine:
    EMPTY → BUILDING (first item added)
    BUILDING → EMPTY (last item removed / cart cleared) | INVOICED (checkout)
    INVOICED → FINALIZED (complete sale) | CANCELLED (cancel sale)
    FINALIZED → EMPTY, CANCELLED → EMPTY (reset)

There is no way back from INVOICED to BUILDING: the cart is frozen while
stock is held for its invoice.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, ValueObject

from pos.checkout.events import (
    CartCleared,
    CartItemAdded,
    CartItemRemoved,
    CartQuantityUpdated,
    CheckoutCustomerChanged,
    CheckoutInvoiced,
    CheckoutOpened,
    PaymentMethodSelected,
    SaleCancelled,
    SaleFinalized,
)
from pos.checkout.invoice import InvoiceDetails, generate_invoice
from pos.checkout.pricing import compute_totals
from pos.domain import pos
from pos.shared.errors import EmptyCartCheckout, NoCustomerSelected, StockLimitExceeded


class SessionStatus(Enum):
    EMPTY = "Empty"
    BUILDING = "Building"
    INVOICED = "Invoiced"
    FINALIZED = "Finalized"
    CANCELLED = "Cancelled"


class PaymentMethod(Enum):
    CASH = "cash"
    UPI = "UPI"
    CARD = "card"


_VALID_TRANSITIONS = {
    SessionStatus.EMPTY: {SessionStatus.EMPTY, SessionStatus.BUILDING},
    SessionStatus.BUILDING: {SessionStatus.EMPTY, SessionStatus.BUILDING, SessionStatus.INVOICED},
    SessionStatus.INVOICED: {SessionStatus.FINALIZED, SessionStatus.CANCELLED},
    SessionStatus.FINALIZED: {SessionStatus.EMPTY},
    SessionStatus.CANCELLED: {SessionStatus.EMPTY},
}

_EDITABLE = {SessionStatus.EMPTY, SessionStatus.BUILDING}


def _payment_method_value(value):
    try:
        return PaymentMethod(value).value
    except ValueError:
        choices = ", ".join(m.value for m in PaymentMethod)
        message = f"Unknown payment method {value!r}; expected one of {choices}"
        raise ValidationError({"payment_method": [message]}) from None


@pos.entity(part_of="CheckoutSession")
class CartItem:
    """A product snapshot plus the quantity being sold.

    `stock` is the last stock level seen when the line was added or updated.
    """

    product_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    barcode = String(max_length=50)
    price = Float(required=True, min_value=0.0)
    category = String(max_length=100)
    stock = Integer(default=0)
    image_url = String(max_length=1024)
    quantity = Integer(required=True, min_value=1)
    position = Integer(default=0)


@pos.aggregate
class CheckoutSession:
    terminal = String(max_length=50)
    customer_id = Identifier()
    payment_method = String(choices=PaymentMethod, default=PaymentMethod.CASH.value)
    items = HasMany(CartItem)
    invoice = ValueObject(InvoiceDetails)
    status = String(choices=SessionStatus, default=SessionStatus.EMPTY.value)
    opened_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def one_line_per_product(self):
        product_ids = [str(item.product_id) for item in self.items]
        if len(product_ids) != len(set(product_ids)):
            raise ValidationError({"items": ["A product can appear only once in the cart"]})

    @invariant.post
    def invoiced_session_has_invoice_and_items(self):
        if self.status == SessionStatus.INVOICED.value and (self.invoice is None or not self.items):
            raise ValidationError({"invoice": ["An invoiced checkout needs an invoice and at least one item"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def open(cls, terminal=None):
        now = datetime.now(UTC)
        session = cls(
            terminal=terminal,
            status=SessionStatus.EMPTY.value,
            payment_method=PaymentMethod.CASH.value,
            opened_at=now,
            updated_at=now,
        )
        session.raise_(CheckoutOpened(session_id=str(session.id), terminal=terminal, opened_at=now))
        return session

    # -------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------
    def _transition_to(self, target: SessionStatus) -> None:
        current = SessionStatus(self.status)
        if target not in _VALID_TRANSITIONS[current]:
            raise ValidationError({"status": [f"Cannot move checkout from {current.value} to {target.value}"]})
        self.status = target.value

    def _assert_editable(self) -> None:
        if SessionStatus(self.status) not in _EDITABLE:
            raise ValidationError(
                {"status": ["The cart is locked while an invoice is open. Complete or cancel the sale first."]}
            )

    def require_invoice(self) -> None:
        if SessionStatus(self.status) != SessionStatus.INVOICED:
            raise ValidationError({"status": ["No invoiced sale to complete or cancel"]})

    def _touch(self):
        self.updated_at = datetime.now(UTC)

    def _settle_building_status(self):
        self._transition_to(SessionStatus.BUILDING if self.items else SessionStatus.EMPTY)

    def _find(self, product_id):
        return next((i for i in self.items if str(i.product_id) == str(product_id)), None)

    def _items_payload(self):
        return json.dumps(
            [
                {
                    "product_id": str(item.product_id),
                    "quantity": item.quantity,
                    "price": item.price,
                }
                for item in self.line_items()
            ]
        )

    def line_items(self):
        """Cart lines in the order they were first added."""
        return sorted(self.items, key=lambda item: item.position or 0)

    def totals(self):
        return compute_totals(self.items)

    @property
    def is_invoiced(self):
        return SessionStatus(self.status) == SessionStatus.INVOICED

    # -------------------------------------------------------------------
    # Customer & payment
    # -------------------------------------------------------------------
    def select_customer(self, customer_id):
        """Change the customer being served. Clearing the customer empties the cart."""
        if self.is_invoiced:
            raise ValidationError({"customer_id": ["Cannot change customer while an invoice is open"]})

        customer_id = customer_id or None
        previous = self.customer_id
        cleared = False
        if customer_id is None and self.items:
            self._remove_all_items()
            cleared = True

        self.customer_id = customer_id
        self._settle_building_status()
        self._touch()

        self.raise_(
            CheckoutCustomerChanged(
                session_id=str(self.id),
                customer_id=str(customer_id) if customer_id else None,
                previous_customer_id=str(previous) if previous else None,
                cart_cleared=cleared,
            )
        )

    def set_payment_method(self, payment_method):
        self._assert_editable()
        self.payment_method = _payment_method_value(payment_method)
        self._touch()
        self.raise_(PaymentMethodSelected(session_id=str(self.id), payment_method=self.payment_method))

    # -------------------------------------------------------------------
    # Cart lines
    # -------------------------------------------------------------------
    def add_item(self, product):
        """Add one unit of `product`, merging into its existing line."""
        self._assert_editable()
        if not self.customer_id:
            raise NoCustomerSelected()

        available = product.stock or 0
        existing = self._find(product.id)

        if existing:
            if existing.quantity + 1 > available:
                raise StockLimitExceeded(product.name, available)
            existing.quantity += 1
            existing.stock = available
            quantity = existing.quantity
        else:
            if available < 1:
                raise StockLimitExceeded(product.name, available)
            next_position = max((i.position or 0 for i in self.items), default=0) + 1
            self.add_items(
                CartItem(
                    product_id=str(product.id),
                    name=product.name,
                    barcode=product.barcode,
                    price=product.price,
                    category=product.category,
                    stock=available,
                    image_url=product.image_url,
                    quantity=1,
                    position=next_position,
                )
            )
            quantity = 1

        self._settle_building_status()
        self._touch()
        self.raise_(CartItemAdded(session_id=str(self.id), product_id=str(product.id), quantity=quantity))

    def update_quantity(self, product_id, quantity, available_stock=None):
        """Set a line's quantity, clamped to at least 1 and bounded by stock.

        `available_stock` is the product's current stock; when it is unknown
        (product no longer in the catalogue) no stock check is made.
        """
        self._assert_editable()

        item = self._find(product_id)
        if item is None:
            return

        new_quantity = max(1, quantity)
        if available_stock is not None and new_quantity > available_stock:
            raise StockLimitExceeded(item.name, available_stock)

        previous = item.quantity
        item.quantity = new_quantity
        if available_stock is not None:
            item.stock = available_stock
        self._touch()

        self.raise_(
            CartQuantityUpdated(
                session_id=str(self.id),
                product_id=str(product_id),
                previous_quantity=previous,
                new_quantity=item.quantity,
            )
        )

    def remove_item(self, product_id):
        """Drop a line; removing a product that isn't in the cart is a no-op."""
        self._assert_editable()

        item = self._find(product_id)
        if item is None:
            return

        self.remove_items(item)
        self._settle_building_status()
        self._touch()
        self.raise_(CartItemRemoved(session_id=str(self.id), product_id=str(product_id)))

    def clear(self):
        self._assert_editable()

        removed = self._remove_all_items()
        self._settle_building_status()
        self._touch()
        self.raise_(CartCleared(session_id=str(self.id), items_removed=removed))

    def _remove_all_items(self):
        items = list(self.items)
        for item in items:
            self.remove_items(item)
        return len(items)

    # -------------------------------------------------------------------
    # Checkout lifecycle
    # -------------------------------------------------------------------
    def checkout(self, payment_method=None, now=None):
        """Generate the invoice and freeze the cart. Stock holds are placed by the caller."""
        self._assert_editable()
        if not self.items:
            raise EmptyCartCheckout()

        if payment_method:
            self.payment_method = _payment_method_value(payment_method)

        self.invoice = generate_invoice(now)
        self._transition_to(SessionStatus.INVOICED)
        self._touch()

        totals = self.totals()
        self.raise_(
            CheckoutInvoiced(
                session_id=str(self.id),
                invoice_number=self.invoice.invoice_number,
                invoice_date=self.invoice.date,
                customer_id=str(self.customer_id) if self.customer_id else None,
                payment_method=self.payment_method,
                items=self._items_payload(),
                subtotal=totals.subtotal,
                tax=totals.tax,
                total=totals.total,
            )
        )
        return self.invoice

    def finalize(self, sale_ids):
        """Record that the invoiced sale was committed and reset for the next customer."""
        self.require_invoice()
        now = datetime.now(UTC)

        self.raise_(
            SaleFinalized(
                session_id=str(self.id),
                invoice_number=self.invoice.invoice_number,
                customer_id=str(self.customer_id) if self.customer_id else None,
                sale_ids=json.dumps([str(sale_id) for sale_id in sale_ids]),
                total=self.totals().total,
                finalized_at=now,
            )
        )
        self._transition_to(SessionStatus.FINALIZED)
        self._reset()

    def cancel(self):
        """Void the open invoice and reset. Stock restoration is done by the caller."""
        self.require_invoice()
        now = datetime.now(UTC)

        self.raise_(
            SaleCancelled(
                session_id=str(self.id),
                invoice_number=self.invoice.invoice_number,
                customer_id=str(self.customer_id) if self.customer_id else None,
                items=self._items_payload(),
                total=self.totals().total,
                cancelled_at=now,
            )
        )
        self._transition_to(SessionStatus.CANCELLED)
        self._reset()

    def _reset(self):
        self._remove_all_items()
        self.invoice = None
        self.customer_id = None
        self.payment_method = PaymentMethod.CASH.value
        self._transition_to(SessionStatus.EMPTY)
        self._touch()
