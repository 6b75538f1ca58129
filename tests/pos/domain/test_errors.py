"""Tests for the operator-facing error messages."""

from pos.shared.errors import ProductNotFound, SalePersistenceFailure


class TestProductNotFound:
    def test_barcode_message(self):
        exc = ProductNotFound("4006381333931")
        assert exc.messages == {"product": ["Product not found for barcode: 4006381333931"]}

    def test_id_message(self):
        exc = ProductNotFound("prod-001", by="id")
        assert exc.messages == {"product": ["Product not found: prod-001"]}


class TestSalePersistenceFailure:
    def test_complete_message(self):
        exc = SalePersistenceFailure("complete", invoice_number="INV-12345678")
        assert exc.messages == {"sale": ["Failed to complete sale. Please try again."]}
        assert exc.invoice_number == "INV-12345678"

    def test_cancel_message(self):
        exc = SalePersistenceFailure("cancel")
        assert exc.messages == {"sale": ["Failed to cancel sale. Please try again."]}
