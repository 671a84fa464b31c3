"""
Shared fixtures for all tests.

factory-boy factories live here so both unit/ and integration/ can import them.
"""
import pytest
from datetime import date, timedelta
from django.contrib.auth import get_user_model
from django.utils import timezone
from rest_framework.test import APIClient

import factory
from orderentry.configuration import StaticConfiguration
from orderentry.identity import StaticIdentityProvider
from orderentry.models import Concept, Order, OrderGroup, OrderType, Patient
from orderentry.services import OrderService
from orderentry.store.django_store import DjangoOrderStore


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------

class UserFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = get_user_model()

    username = factory.Sequence(lambda n: f'clinician{n}')


class PatientFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Patient

    mrn = factory.Sequence(lambda n: f'{100000 + n}')
    first_name = 'John'
    last_name = 'Doe'
    dob = date(1990, 1, 15)


class ConceptFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Concept

    name = factory.Sequence(lambda n: f'Concept {n}')
    concept_class = 'Drug'


class OrderTypeFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = OrderType

    name = factory.Sequence(lambda n: f'Order type {n}')


class OrderFactory(factory.django.DjangoModelFactory):
    """A persisted draft order: not signed, not activated."""

    class Meta:
        model = Order

    order_number = factory.Sequence(lambda n: f'TEST-{n}')
    patient = factory.SubFactory(PatientFactory)
    concept = factory.SubFactory(ConceptFactory)


class OrderGroupFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = OrderGroup

    patient = factory.SubFactory(PatientFactory)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def clock():
    """Frozen "now" handed to the identity provider."""
    return timezone.now().replace(microsecond=0)


@pytest.fixture
def clinician(db):
    return UserFactory(username='dr_house')


@pytest.fixture
def service(clinician, clock):
    """OrderService over the Django store, acting as ``clinician`` at ``clock``."""
    return OrderService(
        store=DjangoOrderStore(),
        identity=StaticIdentityProvider(clinician, clock),
        configuration=StaticConfiguration(prefix='ORDER-'),
    )


@pytest.fixture
def patient(db):
    return PatientFactory()


@pytest.fixture
def draft_order(patient):
    """Unsaved order with no order number yet."""
    return Order(patient=patient, concept=ConceptFactory())


@pytest.fixture
def active_order(service, clock):
    order = OrderFactory()
    return service.sign_and_activate_order(order, when=clock - timedelta(hours=1))


@pytest.fixture
def reason(db):
    return ConceptFactory(name='Adverse reaction', concept_class='Reason')


@pytest.fixture
def api_client(clinician):
    """DRF test client authenticated as ``clinician``."""
    client = APIClient()
    client.force_authenticate(user=clinician)
    return client
