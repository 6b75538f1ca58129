"""Customer aggregate with Prescription entities and EyePrescription value objects.

Customers are looked up by the counter; the cart only references them by id.
Prescriptions are shown once a customer is selected at checkout.
"""

from datetime import date, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Date, DateTime, Float, HasMany, Integer, String, Text, ValueObject

from pos.customer.events import CustomerRegistered, PrescriptionRecorded
from pos.domain import pos


@pos.value_object(part_of="Customer")
class EyePrescription:
    """Refraction values for one eye."""

    sphere: Float(required=True, min_value=-30.0, max_value=30.0)
    cylinder: Float(min_value=-10.0, max_value=10.0)
    axis: Integer(min_value=0, max_value=180)
    add: Float(min_value=0.0, max_value=4.0)
    pd: Float(min_value=20.0, max_value=45.0)  # Monocular pupillary distance, mm

    @invariant.post
    def axis_required_with_cylinder(self):
        if self.cylinder and self.axis is None:
            raise ValidationError({"axis": ["Axis is required when cylinder is given"]})


@pos.entity(part_of="Customer")
class Prescription:
    right_eye: ValueObject(EyePrescription, required=True)
    left_eye: ValueObject(EyePrescription, required=True)
    prescribed_on: Date(required=True)
    expires_on: Date()
    doctor: String(max_length=255)
    notes: Text()

    @invariant.post
    def expiry_after_prescription_date(self):
        if self.expires_on and self.prescribed_on and self.expires_on < self.prescribed_on:
            raise ValidationError({"expires_on": ["Expiry date must be after the prescription date"]})


@pos.aggregate
class Customer:
    name: String(required=True, max_length=255)
    email: String(max_length=254)
    phone: String(max_length=30)
    prescriptions: HasMany(Prescription)
    registered_at: DateTime(default=datetime.now)

    @classmethod
    def register(cls, name, email=None, phone=None):
        customer = cls(name=name, email=email, phone=phone)
        customer.raise_(
            CustomerRegistered(
                customer_id=str(customer.id),
                name=name,
                email=email,
                phone=phone,
                registered_at=customer.registered_at,
            )
        )
        return customer

    def record_prescription(self, right_eye, left_eye, prescribed_on=None, expires_on=None, doctor=None, notes=None):
        prescription = Prescription(
            right_eye=EyePrescription(**right_eye),
            left_eye=EyePrescription(**left_eye),
            prescribed_on=prescribed_on or date.today(),
            expires_on=expires_on,
            doctor=doctor,
            notes=notes,
        )
        self.add_prescriptions(prescription)

        self.raise_(
            PrescriptionRecorded(
                customer_id=str(self.id),
                prescription_id=str(prescription.id),
                prescribed_on=prescription.prescribed_on,
            )
        )
        return prescription

    def latest_prescription(self):
        if not self.prescriptions:
            return None
        return max(self.prescriptions, key=lambda p: p.prescribed_on)
