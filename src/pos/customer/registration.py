"""Customer registration and prescriptions: commands and handler."""

import json

from protean import handle
from protean.fields import Date, Identifier, String, Text
from protean.utils.globals import current_domain

from pos.customer.customer import Customer
from pos.domain import pos


@pos.command(part_of="Customer")
class RegisterCustomer:
    name = String(required=True, max_length=255)
    email = String(max_length=254)
    phone = String(max_length=30)


@pos.command(part_of="Customer")
class RecordPrescription:
    customer_id = Identifier(required=True)
    right_eye = Text(required=True)  # JSON: {sphere, cylinder, axis, add, pd}
    left_eye = Text(required=True)
    prescribed_on = Date()
    expires_on = Date()
    doctor = String(max_length=255)
    notes = Text()


def _load_eye(value):
    return json.loads(value) if isinstance(value, str) else value


@pos.command_handler(part_of=Customer)
class CustomerHandler:
    @handle(RegisterCustomer)
    def register_customer(self, command):
        customer = Customer.register(
            name=command.name,
            email=command.email,
            phone=command.phone,
        )
        current_domain.repository_for(Customer).add(customer)
        return str(customer.id)

    @handle(RecordPrescription)
    def record_prescription(self, command):
        repo = current_domain.repository_for(Customer)
        customer = repo.get(command.customer_id)
        prescription = customer.record_prescription(
            right_eye=_load_eye(command.right_eye),
            left_eye=_load_eye(command.left_eye),
            prescribed_on=command.prescribed_on,
            expires_on=command.expires_on,
            doctor=command.doctor,
            notes=command.notes,
        )
        repo.add(customer)
        return str(prescription.id)
