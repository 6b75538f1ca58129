"""Shared helpers for POS application tests."""

import pytest
from pos.catalogue.registration import RegisterProduct
from pos.checkout.items import AddToCart
from pos.checkout.management import OpenCheckoutSession, SelectCustomer
from pos.customer.registration import RegisterCustomer
from protean import current_domain


@pytest.fixture()
def customer_id():
    return current_domain.process(
        RegisterCustomer(name="Asha Rao", email="asha@example.com"),
        asynchronous=False,
    )


@pytest.fixture()
def frame_id():
    return current_domain.process(
        RegisterProduct(name="Aviator Frame", price=100.0, category="frames", stock=5, barcode="1111111111116"),
        asynchronous=False,
    )


@pytest.fixture()
def cloth_id():
    return current_domain.process(
        RegisterProduct(name="Lens Cloth", price=50.0, category="accessories", stock=3, barcode="3333333333338"),
        asynchronous=False,
    )


@pytest.fixture()
def session_id(customer_id):
    sid = current_domain.process(OpenCheckoutSession(terminal="counter-1"), asynchronous=False)
    current_domain.process(SelectCustomer(session_id=sid, customer_id=customer_id), asynchronous=False)
    return sid


@pytest.fixture()
def reference_cart(session_id, frame_id, cloth_id):
    """Two frames and one lens cloth: 250.00 + 20.00 tax = 270.00."""
    for product_id in (frame_id, frame_id, cloth_id):
        current_domain.process(AddToCart(session_id=session_id, product_id=product_id), asynchronous=False)
    return session_id
