"""Domain events for the Customer aggregate."""

from protean.fields import Date, DateTime, Identifier, String

from pos.domain import pos


@pos.event(part_of="Customer")
class CustomerRegistered:
    __version__ = 1

    customer_id = Identifier(required=True)
    name = String(required=True)
    email = String()
    phone = String()
    registered_at = DateTime(required=True)


@pos.event(part_of="Customer")
class PrescriptionRecorded:
    __version__ = 1

    customer_id = Identifier(required=True)
    prescription_id = Identifier(required=True)
    prescribed_on = Date(required=True)
