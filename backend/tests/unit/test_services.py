"""
Unit tests for the OrderService query pass-throughs.

Covers: lookups by id / uuid / order number, patient order listings by status,
drug orders, order history by concept, and the patient-required guard.
"""
import pytest
from datetime import timedelta
from decimal import Decimal

from orderentry.exceptions import InvalidArgumentError
from orderentry.models import Order
from orderentry.types import OrderStatus
from tests.conftest import ConceptFactory, OrderFactory


@pytest.mark.django_db
class TestOrderLookups:

    def test_get_order(self, service):
        order = OrderFactory()

        assert service.get_order(order.pk) == order
        assert service.get_order(order.pk + 1000) is None

    def test_get_by_uuid_and_number(self, service):
        order = OrderFactory()

        assert service.get_order_by_uuid(order.uuid) == order
        assert service.get_order_by_order_number(order.order_number) == order
        assert service.get_order_by_order_number('NOPE-1') is None


@pytest.mark.django_db
class TestPatientOrders:

    def test_patient_required(self, service):
        for call in (
            service.get_orders_by_patient,
            service.get_active_orders_by_patient,
            service.get_drug_orders_by_patient,
        ):
            with pytest.raises(InvalidArgumentError):
                call(None)

    def test_orders_by_patient_hides_voided(self, service, patient):
        kept = OrderFactory(patient=patient)
        service.void_order(OrderFactory(patient=patient), 'dup entry')
        OrderFactory()

        assert service.get_orders_by_patient(patient) == [kept]

    def test_active_orders(self, service, patient, reason, clock):
        earlier = clock - timedelta(hours=1)
        active = service.sign_and_activate_order(OrderFactory(patient=patient), when=earlier)
        stopped = service.sign_and_activate_order(OrderFactory(patient=patient), when=earlier)
        service.discontinue_order(stopped, reason)
        voided = service.sign_and_activate_order(OrderFactory(patient=patient), when=earlier)
        service.void_order(voided, 'wrong patient')
        OrderFactory(patient=patient)  # draft, never activated

        result = service.get_active_orders_by_patient(patient)

        # the DISCONTINUE companion is activated too, but is not itself an active order
        assert result == [active]

    def test_active_as_of_before_discontinuation(self, service, patient, reason, clock):
        order = service.sign_and_activate_order(
            OrderFactory(patient=patient), when=clock - timedelta(days=2),
        )
        service.discontinue_order(order, reason, clock - timedelta(days=1))

        assert service.get_active_orders_by_patient(patient, clock - timedelta(hours=36)) == [order]
        assert service.get_active_orders_by_patient(patient, clock) == []

    def test_complete_status(self, service, patient, reason, clock):
        order = service.sign_and_activate_order(
            OrderFactory(patient=patient), when=clock - timedelta(hours=2),
        )
        service.discontinue_order(order, reason, clock - timedelta(hours=1))

        assert service.get_patient_orders(patient, OrderStatus.COMPLETE) == [order]

    def test_drug_orders(self, service, patient):
        drug = OrderFactory(
            patient=patient, kind=Order.Kind.DRUG, dose=Decimal('40'), dose_units='mg',
        )
        OrderFactory(patient=patient)

        assert service.get_drug_orders_by_patient(patient) == [drug]
        assert service.get_drug_orders_by_patient(patient, 'any') == [drug]

    def test_history_by_concept(self, service, patient):
        humira = ConceptFactory(name='Humira')
        first = OrderFactory(patient=patient, concept=humira)
        second = OrderFactory(patient=patient, concept=humira)
        OrderFactory(patient=patient)

        assert set(service.get_order_history_by_concept(patient, humira)) == {first, second}
