"""
Django ORM implementation of BaseOrderStore.

Every database failure surfaces as StorageError with the original exception chained.
"""

import logging
import threading
from contextlib import contextmanager
from functools import wraps

from django.db import DatabaseError, transaction
from django.db.models import Max, Q
from django.utils import timezone

from ..exceptions import StorageError
from ..models import Order, OrderGroup, OrderNumberCounter, OrderType
from ..types import OrderStatus
from .base import BaseOrderStore

logger = logging.getLogger(__name__)

# select_for_update is a no-op on SQLite, so same-process callers also share a lock
_NUMBERING_LOCK = threading.RLock()


def _storage_errors(func):
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except DatabaseError as exc:
            logger.error("[store] %s failed: %s", func.__name__, exc)
            raise StorageError(
                message=f"Storage failure in {func.__name__}: {exc}",
                detail={'operation': func.__name__},
            ) from exc
    return wrapper


def _first_or_none(queryset):
    return queryset.first()


class DjangoOrderStore(BaseOrderStore):

    @contextmanager
    def atomic(self):
        try:
            with transaction.atomic():
                yield
        except DatabaseError as exc:
            raise StorageError(message=f"Transaction failed: {exc}") from exc

    @contextmanager
    def order_number_lock(self):
        with _NUMBERING_LOCK, self.atomic():
            OrderNumberCounter.objects.get_or_create(pk=1)
            OrderNumberCounter.objects.select_for_update().get(pk=1)
            yield

    # --- orders ---

    @_storage_errors
    def save_order(self, order, update_fields=None):
        if update_fields is not None and order.pk is not None:
            order.save(update_fields=[*update_fields, 'updated_at'])
        else:
            order.save()
        return order

    @_storage_errors
    def delete_order(self, order):
        order.delete()

    @_storage_errors
    def is_activated_in_database(self, order):
        if order.pk is None:
            return False
        return Order.objects.filter(pk=order.pk, date_activated__isnull=False).exists()

    @_storage_errors
    def get_maximum_order_id(self):
        max_id = Order.objects.aggregate(max_id=Max('id'))['max_id'] or 0
        counter = OrderNumberCounter.objects.filter(pk=1).first()
        issued = counter.last_issued_id if counter else 0
        return max(max_id, issued)

    @_storage_errors
    def record_issued_order_id(self, order_id):
        OrderNumberCounter.objects.update_or_create(pk=1, defaults={'last_issued_id': order_id})

    @_storage_errors
    def get_order(self, order_id):
        return _first_or_none(Order.objects.filter(pk=order_id))

    @_storage_errors
    def get_order_by_uuid(self, uuid):
        return _first_or_none(Order.objects.filter(uuid=uuid))

    @_storage_errors
    def get_order_by_order_number(self, order_number):
        return _first_or_none(Order.objects.filter(order_number=order_number))

    @_storage_errors
    def get_orders(self, patients=(), concepts=(), status=OrderStatus.ACTIVE,
                   order_types=(), kind=None, as_of=None):
        qs = Order.objects.all()
        patients, concepts, order_types = list(patients), list(concepts), list(order_types)
        if patients:
            qs = qs.filter(patient__in=patients)
        if concepts:
            qs = qs.filter(concept__in=concepts)
        if order_types:
            qs = qs.filter(order_type__in=order_types)
        if kind is not None:
            qs = qs.filter(kind=kind)

        if status == OrderStatus.ACTIVE:
            if as_of is None:
                as_of = timezone.now()
            qs = qs.filter(
                voided=False,
                order_action=Order.Action.NEW,
                date_activated__isnull=False,
                date_activated__lte=as_of,
            ).exclude(
                Q(discontinued=True) & Q(discontinued_date__lte=as_of)
            )
        elif status == OrderStatus.NOTVOIDED:
            qs = qs.filter(voided=False)
        elif status == OrderStatus.COMPLETE:
            qs = qs.filter(voided=False, discontinued=True, discontinued_date__lte=timezone.now())

        return list(qs.order_by('date_activated', 'id'))

    # --- order types ---

    @_storage_errors
    def save_order_type(self, order_type):
        order_type.save()
        return order_type

    @_storage_errors
    def delete_order_type(self, order_type):
        order_type.delete()

    @_storage_errors
    def get_order_type(self, order_type_id):
        return _first_or_none(OrderType.objects.filter(pk=order_type_id))

    @_storage_errors
    def get_order_type_by_uuid(self, uuid):
        return _first_or_none(OrderType.objects.filter(uuid=uuid))

    @_storage_errors
    def get_all_order_types(self, include_retired=True):
        qs = OrderType.objects.all()
        if not include_retired:
            qs = qs.filter(retired=False)
        return list(qs.order_by('name'))

    # --- order groups ---

    @_storage_errors
    def save_order_group(self, group):
        with transaction.atomic():
            group.save()
            pending = group.pending_members
            start = group.orders.count()
            for position, order in enumerate(pending, start=start):
                # membership is bookkeeping: it must not go through the activated-order guard
                Order.objects.filter(pk=order.pk).update(order_group=group, group_position=position)
                order.order_group = group
                order.group_position = position
            pending.clear()
        return group

    @_storage_errors
    def get_order_group(self, group_id):
        return _first_or_none(OrderGroup.objects.filter(pk=group_id))

    @_storage_errors
    def get_order_group_by_uuid(self, uuid):
        return _first_or_none(OrderGroup.objects.filter(uuid=uuid))

    @_storage_errors
    def get_order_groups_by_patient(self, patient):
        return list(OrderGroup.objects.filter(patient=patient).order_by('created_at', 'id'))
