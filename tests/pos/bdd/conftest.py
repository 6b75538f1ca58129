"""Shared BDD fixtures and step definitions for the counter."""

import pytest
from pos.checkout.events import (
    CartCleared,
    CartItemAdded,
    CartItemRemoved,
    CartQuantityUpdated,
    CheckoutCustomerChanged,
    CheckoutInvoiced,
)
from pos.checkout.session import CheckoutSession
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then

_CART_EVENT_CLASSES = {
    "CartItemAdded": CartItemAdded,
    "CartQuantityUpdated": CartQuantityUpdated,
    "CartItemRemoved": CartItemRemoved,
    "CartCleared": CartCleared,
    "CheckoutCustomerChanged": CheckoutCustomerChanged,
    "CheckoutInvoiced": CheckoutInvoiced,
}


@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("a checkout session", target_fixture="session")
def checkout_session():
    session = CheckoutSession.open(terminal="counter-1")
    session._events.clear()
    return session


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then("the cart action fails with a validation error")
def cart_action_fails(error):
    assert error["exc"] is not None, "Expected a validation error but none was raised"
    assert isinstance(error["exc"], ValidationError)


@then(parsers.cfparse("a {event_type} cart event is raised"))
def cart_event_raised(session, event_type):
    event_cls = _CART_EVENT_CLASSES[event_type]
    assert any(
        isinstance(e, event_cls) for e in session._events
    ), f"No {event_type} event found. Events: {[type(e).__name__ for e in session._events]}"


@then(parsers.cfparse('the session status is "{status}"'))
def session_status_is(session, status):
    assert session.status == status
