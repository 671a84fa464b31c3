"""
OrderService — single entry point wiring the lifecycle components to their collaborators.

Views, jobs and shells build one with get_order_service(); tests construct
OrderService directly with whatever store / identity / configuration they need.
"""

from .configuration import SettingsConfiguration
from .exceptions import InvalidArgumentError
from .groups import OrderGroupLifecycle
from .identity import StaticIdentityProvider
from .lifecycle import OrderLifecycle
from .models import Order
from .numbering import OrderNumberGenerator
from .order_types import OrderTypeAdmin
from .store import get_order_store
from .types import OrderStatus


def _require_patient(patient):
    if patient is None:
        raise InvalidArgumentError(message="patient is required", code='PATIENT_REQUIRED')


class OrderService:

    def __init__(self, store, identity, configuration):
        self.store = store
        self.identity = identity
        self.numbers = OrderNumberGenerator(store, configuration)
        self.orders = OrderLifecycle(store, identity, self.numbers)
        self.groups = OrderGroupLifecycle(store, identity, self.orders)
        self.order_types = OrderTypeAdmin(store)

    # --- order transitions ---

    def save_order(self, order):
        return self.orders.save(order)

    def purge_order(self, order, cascade=False):
        self.orders.purge(order, cascade)

    def sign_order(self, order, signer=None, when=None):
        return self.orders.sign(order, signer, when)

    def activate_order(self, order, activator=None, when=None):
        return self.orders.activate(order, activator, when)

    def sign_and_activate_order(self, order, actor=None, when=None):
        return self.orders.sign_and_activate(order, actor, when)

    def discontinue_order(self, order, reason, when=None):
        return self.orders.discontinue(order, reason, when)

    def undiscontinue_order(self, order):
        return self.orders.undiscontinue(order)

    def fill_order(self, order, filler, when=None):
        return self.orders.fill(order, filler, when)

    def void_order(self, order, reason):
        return self.orders.void(order, reason)

    def unvoid_order(self, order):
        return self.orders.unvoid(order)

    def get_new_order_number(self):
        with self.store.order_number_lock():
            return self.numbers.generate()

    # --- order groups ---

    def sign_and_activate_order_group(self, group, actor=None, when=None):
        return self.groups.sign_and_activate(group, actor, when)

    def save_order_group(self, group):
        return self.groups.save(group)

    def void_order_group(self, group, reason):
        return self.groups.void(group, reason)

    def unvoid_order_group(self, group):
        return self.groups.unvoid(group)

    def get_order_group(self, group_id):
        return self.groups.get(group_id)

    def get_order_group_by_uuid(self, uuid):
        return self.groups.get_by_uuid(uuid)

    def get_order_groups_by_patient(self, patient):
        return self.groups.get_by_patient(patient)

    # --- lookups ---

    def get_order(self, order_id):
        return self.store.get_order(order_id)

    def get_order_by_uuid(self, uuid):
        return self.store.get_order_by_uuid(uuid)

    def get_order_by_order_number(self, order_number):
        return self.store.get_order_by_order_number(order_number)

    def get_patient_orders(self, patient, status=OrderStatus.NOTVOIDED, as_of=None):
        _require_patient(patient)
        status = OrderStatus(status)
        if status == OrderStatus.ACTIVE and as_of is None:
            as_of = self.identity.now()
        return self.store.get_orders(patients=[patient], status=status, as_of=as_of)

    def get_orders_by_patient(self, patient):
        return self.get_patient_orders(patient, OrderStatus.NOTVOIDED)

    def get_active_orders_by_patient(self, patient, as_of=None):
        return self.get_patient_orders(patient, OrderStatus.ACTIVE, as_of)

    def get_drug_orders_by_patient(self, patient, status=OrderStatus.NOTVOIDED):
        _require_patient(patient)
        return self.store.get_orders(
            patients=[patient], status=OrderStatus(status), kind=Order.Kind.DRUG,
        )

    def get_order_history_by_concept(self, patient, concept):
        _require_patient(patient)
        return self.store.get_orders(
            patients=[patient], concepts=[concept], status=OrderStatus.NOTVOIDED,
        )


def get_order_service(identity=None, configuration=None):
    """
    Default wiring: store from settings.ORDER_STORE, numbering from settings,
    and a StaticIdentityProvider with no actor unless one is given.
    """
    return OrderService(
        store=get_order_store(),
        identity=identity or StaticIdentityProvider(),
        configuration=configuration or SettingsConfiguration(),
    )
