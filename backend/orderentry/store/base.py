"""
BaseOrderStore — abstract persistence collaborator for the lifecycle core.

The lifecycle never talks to the ORM directly. Each store implementation:
1. subclasses BaseOrderStore
2. implements every abstract method
3. registers itself in factory.py's registry

Any method may raise StorageError; the core propagates it unchanged.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from datetime import datetime
from typing import Any, Iterable

from ..types import OrderStatus


class BaseOrderStore(ABC):

    # --- transactions ---

    @abstractmethod
    def atomic(self) -> AbstractContextManager:
        """Context manager making every write inside it commit or roll back together."""

    @abstractmethod
    def order_number_lock(self) -> AbstractContextManager:
        """
        Serialise order number assignment.

        Held from reading the maximum id until the order carrying the new number
        is written, so two concurrent saves can never compute the same number.
        """

    # --- orders ---

    @abstractmethod
    def save_order(self, order, update_fields=None):
        """
        Persist the order and return it.

        With ``update_fields`` only those columns (and the modification time)
        are written for an already persisted order; other in-memory edits stay unsaved.
        """

    @abstractmethod
    def delete_order(self, order) -> None:
        """Hard delete."""

    @abstractmethod
    def is_activated_in_database(self, order) -> bool:
        """True if the persisted copy of ``order`` is already activated."""

    @abstractmethod
    def get_maximum_order_id(self) -> int:
        """Highest order id in use or ever issued in an order number, 0 when none."""

    @abstractmethod
    def record_issued_order_id(self, order_id: int) -> None:
        """Remember ``order_id`` as issued. Must be called under order_number_lock()."""

    @abstractmethod
    def get_order(self, order_id: int):
        """Return the order or None."""

    @abstractmethod
    def get_order_by_uuid(self, uuid: str):
        """Return the order or None."""

    @abstractmethod
    def get_order_by_order_number(self, order_number: str):
        """Return the order or None."""

    @abstractmethod
    def get_orders(
        self,
        patients: Iterable[Any] = (),
        concepts: Iterable[Any] = (),
        status: OrderStatus = OrderStatus.ACTIVE,
        order_types: Iterable[Any] = (),
        kind: str | None = None,
        as_of: datetime | None = None,
    ) -> list:
        """
        Filtered order listing. Empty filter collections mean "no restriction".
        ``as_of`` only matters for OrderStatus.ACTIVE and defaults to now.
        """

    # --- order types ---

    @abstractmethod
    def save_order_type(self, order_type):
        """Persist and return the order type."""

    @abstractmethod
    def delete_order_type(self, order_type) -> None:
        """Hard delete."""

    @abstractmethod
    def get_order_type(self, order_type_id: int):
        """Return the order type or None."""

    @abstractmethod
    def get_order_type_by_uuid(self, uuid: str):
        """Return the order type or None."""

    @abstractmethod
    def get_all_order_types(self, include_retired: bool = True) -> list:
        """All order types, optionally without retired ones."""

    # --- order groups ---

    @abstractmethod
    def save_order_group(self, group):
        """Persist the group, attach its pending members, return it."""

    @abstractmethod
    def get_order_group(self, group_id: int):
        """Return the group or None."""

    @abstractmethod
    def get_order_group_by_uuid(self, uuid: str):
        """Return the group or None."""

    @abstractmethod
    def get_order_groups_by_patient(self, patient) -> list:
        """All groups for the patient."""
