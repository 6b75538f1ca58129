"""Application tests for customer registration and prescriptions."""

import json

import pytest
from pos.customer.customer import Customer
from pos.customer.registration import RecordPrescription, RegisterCustomer
from protean import current_domain
from protean.exceptions import ObjectNotFoundError


class TestRegisterCustomer:
    def test_persists(self):
        customer_id = current_domain.process(
            RegisterCustomer(name="Asha Rao", phone="555-0101"),
            asynchronous=False,
        )
        customer = current_domain.repository_for(Customer).get(customer_id)
        assert customer.name == "Asha Rao"
        assert customer.phone == "555-0101"


class TestRecordPrescription:
    def test_persists(self, customer_id):
        current_domain.process(
            RecordPrescription(
                customer_id=customer_id,
                right_eye=json.dumps({"sphere": -2.0, "cylinder": -0.5, "axis": 180}),
                left_eye=json.dumps({"sphere": -1.75}),
                prescribed_on="2024-03-01",
                doctor="Dr. Iyer",
            ),
            asynchronous=False,
        )
        customer = current_domain.repository_for(Customer).get(customer_id)
        assert len(customer.prescriptions) == 1
        assert customer.prescriptions[0].right_eye.axis == 180
        assert customer.prescriptions[0].doctor == "Dr. Iyer"

    def test_unknown_customer(self):
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(
                RecordPrescription(
                    customer_id="nobody",
                    right_eye=json.dumps({"sphere": -1.0}),
                    left_eye=json.dumps({"sphere": -1.0}),
                ),
                asynchronous=False,
            )
