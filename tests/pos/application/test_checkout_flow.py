"""Application tests for checkout, sale completion and sale cancellation."""

import re
from datetime import UTC, datetime

import pytest
from pos.catalogue.product import Product
from pos.catalogue.registration import UpdateProductStock
from pos.checkout.invoicing import Checkout
from pos.checkout.items import AddToCart, ClearCart
from pos.checkout.management import SelectCustomer
from pos.checkout.session import CheckoutSession, SessionStatus
from pos.sales.cancellation import CancelSale
from pos.sales.finalization import CompleteSale
from pos.sales.sale import Sale, SaleStatus
from pos.shared.errors import EmptyCartCheckout, SalePersistenceFailure, StockLimitExceeded
from protean import current_domain
from protean.exceptions import ValidationError


def _stock(product_id):
    return current_domain.repository_for(Product).get(product_id).stock


def _session(session_id):
    return current_domain.repository_for(CheckoutSession).get(session_id)


def _sales(status=None):
    sales = current_domain.repository_for(Sale)._dao.query.all().items
    return [s for s in sales if status is None or s.status == status.value]


def _checkout(session_id, payment_method=None):
    return current_domain.process(Checkout(session_id=session_id, payment_method=payment_method), asynchronous=False)


class TestCheckout:
    def test_returns_invoice_snapshot(self, reference_cart):
        snapshot = _checkout(reference_cart)

        assert re.fullmatch(r"INV-\d{8}", snapshot["invoice_number"])
        assert snapshot["date"] == datetime.now(UTC).date().isoformat()
        assert (snapshot["subtotal"], snapshot["tax"], snapshot["total"]) == (250.0, 20.0, 270.0)
        assert snapshot["customer"]["name"] == "Asha Rao"

    def test_holds_stock(self, reference_cart, frame_id, cloth_id):
        _checkout(reference_cart)
        assert _stock(frame_id) == 3
        assert _stock(cloth_id) == 2

    def test_session_is_invoiced(self, reference_cart):
        _checkout(reference_cart, payment_method="UPI")
        session = _session(reference_cart)
        assert session.status == SessionStatus.INVOICED.value
        assert session.payment_method == "UPI"
        assert session.invoice is not None

    def test_empty_cart(self, session_id):
        with pytest.raises(EmptyCartCheckout):
            _checkout(session_id)

    def test_stock_sold_elsewhere_rolls_back_everything(self, reference_cart, frame_id, cloth_id):
        current_domain.process(UpdateProductStock(product_id=cloth_id, stock_quantity=0), asynchronous=False)

        with pytest.raises(StockLimitExceeded):
            _checkout(reference_cart)

        assert _stock(frame_id) == 5
        session = _session(reference_cart)
        assert session.status == SessionStatus.BUILDING.value
        assert session.invoice is None

    def test_cart_frozen_while_invoiced(self, reference_cart, frame_id):
        _checkout(reference_cart)
        with pytest.raises(ValidationError):
            current_domain.process(AddToCart(session_id=reference_cart, product_id=frame_id), asynchronous=False)
        with pytest.raises(ValidationError):
            current_domain.process(ClearCart(session_id=reference_cart), asynchronous=False)


class TestCompleteSale:
    def test_reference_sale(self, reference_cart, frame_id, cloth_id, customer_id):
        invoice_number = _checkout(reference_cart)["invoice_number"]
        sale_ids = current_domain.process(CompleteSale(session_id=reference_cart), asynchronous=False)

        assert len(sale_ids) == 2
        repo = current_domain.repository_for(Sale)
        sales = [repo.get(sale_id) for sale_id in sale_ids]
        assert [s.total_amount for s in sales] == [200.0, 50.0]
        assert [s.product_id for s in sales] == [frame_id, cloth_id]
        assert all(s.status == SaleStatus.COMPLETED.value for s in sales)
        assert all(s.invoice_number == invoice_number for s in sales)
        assert all(s.customer_id == customer_id for s in sales)

        assert _stock(frame_id) == 3
        assert _stock(cloth_id) == 2

        session = _session(reference_cart)
        assert len(session.items) == 0
        assert session.customer_id is None
        assert session.invoice is None
        assert session.status == SessionStatus.EMPTY.value

    def test_requires_invoice(self, reference_cart):
        with pytest.raises(ValidationError):
            current_domain.process(CompleteSale(session_id=reference_cart), asynchronous=False)
        assert _sales() == []

    def test_failure_commits_nothing(self, reference_cart, frame_id, monkeypatch):
        _checkout(reference_cart)
        original = Sale.record
        calls = []

        def flaky_record(item, **kwargs):
            calls.append(item.product_id)
            if len(calls) == 2:
                raise RuntimeError("disk full")
            return original(item, **kwargs)

        monkeypatch.setattr(Sale, "record", flaky_record)

        with pytest.raises(SalePersistenceFailure) as exc:
            current_domain.process(CompleteSale(session_id=reference_cart), asynchronous=False)

        assert exc.value.messages == {"sale": ["Failed to complete sale. Please try again."]}
        assert _sales() == []
        session = _session(reference_cart)
        assert session.status == SessionStatus.INVOICED.value
        assert len(session.items) == 2
        assert _stock(frame_id) == 3


class TestCancelSale:
    def test_restores_stock_and_records_cancellation(self, reference_cart, frame_id, cloth_id):
        invoice_number = _checkout(reference_cart)["invoice_number"]
        assert (_stock(frame_id), _stock(cloth_id)) == (3, 2)

        details = current_domain.process(CancelSale(session_id=reference_cart), asynchronous=False)

        assert details["status"] == "CANCELLED"
        assert details["invoice_number"] == invoice_number
        assert details["total_amount"] == 270.0
        assert details["customer"]["name"] == "Asha Rao"

        assert _stock(frame_id) == 5
        assert _stock(cloth_id) == 3

        cancelled = _sales(SaleStatus.CANCELLED)
        assert sorted(s.total_amount for s in cancelled) == [50.0, 200.0]
        assert _sales(SaleStatus.COMPLETED) == []

        session = _session(reference_cart)
        assert len(session.items) == 0
        assert session.customer_id is None
        assert session.status == SessionStatus.EMPTY.value

    def test_missing_product_is_skipped(self, reference_cart, frame_id, cloth_id):
        _checkout(reference_cart)
        product_repo = current_domain.repository_for(Product)
        product_repo._dao.delete(product_repo.get(cloth_id))

        current_domain.process(CancelSale(session_id=reference_cart), asynchronous=False)

        assert _stock(frame_id) == 5
        assert len(_sales(SaleStatus.CANCELLED)) == 2

    def test_requires_invoice(self, reference_cart):
        with pytest.raises(ValidationError):
            current_domain.process(CancelSale(session_id=reference_cart), asynchronous=False)

    def test_failure_commits_nothing(self, reference_cart, frame_id, cloth_id, monkeypatch):
        _checkout(reference_cart)

        def broken_record(item, **kwargs):
            raise RuntimeError("connection lost")

        monkeypatch.setattr(Sale, "record", broken_record)

        with pytest.raises(SalePersistenceFailure):
            current_domain.process(CancelSale(session_id=reference_cart), asynchronous=False)

        assert (_stock(frame_id), _stock(cloth_id)) == (3, 2)
        assert _sales() == []
        assert _session(reference_cart).status == SessionStatus.INVOICED.value

    def test_session_reusable_after_cancel(self, reference_cart, frame_id, customer_id):
        _checkout(reference_cart)
        current_domain.process(CancelSale(session_id=reference_cart), asynchronous=False)

        current_domain.process(SelectCustomer(session_id=reference_cart, customer_id=customer_id), asynchronous=False)
        current_domain.process(AddToCart(session_id=reference_cart, product_id=frame_id), asynchronous=False)
        assert len(_session(reference_cart).items) == 1
