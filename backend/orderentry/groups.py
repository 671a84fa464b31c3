"""
OrderGroupLifecycle — orders signed and activated together as one clinical decision.

sign_and_activate runs every member inside a single store transaction: if
any member fails, every database write for the group is rolled back, the
group is not saved, and each member's in-memory id, order number, signing
and activation fields are put back to what they were before the call.
"""

import logging
from contextlib import ExitStack

from .exceptions import InvalidArgumentError, InvalidStateError
from .lifecycle import ACTIVATE_FIELDS, SIGN_FIELDS, VOID_FIELDS, restore_on_error

logger = logging.getLogger(__name__)

# everything a rolled-back member must give back, store-assigned identity included
MEMBER_FIELDS = ('id', 'order_number') + SIGN_FIELDS + ACTIVATE_FIELDS


class OrderGroupLifecycle:

    def __init__(self, store, identity, order_lifecycle):
        self.store = store
        self.identity = identity
        self.order_lifecycle = order_lifecycle

    def sign_and_activate(self, group, actor=None, when=None):
        if group.pk is not None:
            raise InvalidStateError(
                message="sign_and_activate cannot be called for an existing order group. Use a new group.",
                code='ORDER_GROUP_EXISTS',
                detail={'order_group_id': group.pk},
            )
        members = group.members
        if not members:
            raise InvalidStateError(
                message="sign_and_activate cannot be called for an order group with no orders.",
                code='ORDER_GROUP_EMPTY',
            )

        with ExitStack() as stack:
            for order in members:
                stack.enter_context(restore_on_error(order, MEMBER_FIELDS))
            stack.enter_context(self.store.atomic())
            for order in members:
                self.order_lifecycle.sign_and_activate(order, actor, when)
            group = self.store.save_order_group(group)

        logger.info(
            "[groups] order group %s signed and activated (%d orders)", group.pk, len(members),
        )
        return group

    def save(self, group):
        unsaved = [order for order in group.pending_members if order.pk is None]
        if unsaved:
            raise InvalidStateError(
                message="Every member order must be saved before its group.",
                code='ORDER_GROUP_MEMBER_UNSAVED',
                detail={'unsaved_members': len(unsaved)},
            )
        return self.store.save_order_group(group)

    def void(self, group, reason):
        if group.voided:
            return group
        if not reason:
            raise InvalidArgumentError(
                message="voidReason cannot be empty or null.",
                code='VOID_REASON_REQUIRED',
                detail={'order_group_id': group.pk},
            )

        with restore_on_error(group, VOID_FIELDS):
            group.voided = True
            group.void_reason = reason
            group.voided_by = self.identity.current_actor()
            if group.date_voided is None:
                group.date_voided = self.identity.now()
            group = self.store.save_order_group(group)

        logger.info("[groups] order group %s voided: %s", group.pk, reason)
        return group

    def unvoid(self, group):
        group.voided = False
        group.voided_by = None
        group.void_reason = None
        group.date_voided = None
        return self.store.save_order_group(group)

    def get(self, group_id):
        return self.store.get_order_group(group_id)

    def get_by_uuid(self, uuid):
        return self.store.get_order_group_by_uuid(uuid)

    def get_by_patient(self, patient):
        if patient is None:
            raise InvalidArgumentError(message="patient is required", code='PATIENT_REQUIRED')
        return self.store.get_order_groups_by_patient(patient)
