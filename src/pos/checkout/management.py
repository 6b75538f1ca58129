"""Counter session management: commands and handler.

Opens a session for a counter, switches the customer being served and picks
the payment method.
"""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from pos.checkout.session import CheckoutSession
from pos.customer.customer import Customer
from pos.domain import pos


@pos.command(part_of="CheckoutSession")
class OpenCheckoutSession:
    terminal = String(max_length=50)


@pos.command(part_of="CheckoutSession")
class SelectCustomer:
    """Serve a customer; an empty `customer_id` deselects and clears the cart."""

    session_id = Identifier(required=True)
    customer_id = Identifier()


@pos.command(part_of="CheckoutSession")
class SetPaymentMethod:
    session_id = Identifier(required=True)
    payment_method = String(required=True, max_length=10)


@pos.command_handler(part_of=CheckoutSession)
class ManageCheckoutHandler:
    @handle(OpenCheckoutSession)
    def open_session(self, command):
        session = CheckoutSession.open(terminal=command.terminal)
        current_domain.repository_for(CheckoutSession).add(session)
        return str(session.id)

    @handle(SelectCustomer)
    def select_customer(self, command):
        if command.customer_id:
            # Raises ObjectNotFoundError for unknown customers
            current_domain.repository_for(Customer).get(command.customer_id)

        repo = current_domain.repository_for(CheckoutSession)
        session = repo.get(command.session_id)
        session.select_customer(command.customer_id)
        repo.add(session)

    @handle(SetPaymentMethod)
    def set_payment_method(self, command):
        repo = current_domain.repository_for(CheckoutSession)
        session = repo.get(command.session_id)
        session.set_payment_method(command.payment_method)
        repo.add(session)
