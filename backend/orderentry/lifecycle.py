"""
OrderLifecycle — every state transition of a single order.

    Drafted → Signed → Activated → Filled
    Discontinued and Voided are independent flags on top of that axis.

Preconditions raise InvalidStateError / InvalidArgumentError before anything
is mutated. If persistence fails after mutation, the transition's fields are
restored on the in-memory order before the error propagates.

sign / activate go through save(), which refuses to touch an order already
activated in the database. Discontinuation, fill and void/unvoid are
bookkeeping on (usually activated) orders: they write through the store
directly and only their own columns, so other in-memory edits are never persisted.
Naive datetimes are taken to be in the current time zone.
"""

import logging
from contextlib import contextmanager

from django.core.exceptions import ValidationError as DjangoValidationError
from django.utils import timezone

from .exceptions import (
    InvalidArgumentError,
    InvalidStateError,
    UnimplementedError,
    ValidationError,
)
from .models import Order

logger = logging.getLogger(__name__)

SIGN_FIELDS = ('signed_by_id', 'date_signed')
ACTIVATE_FIELDS = ('activated_by_id', 'date_activated')
FILL_FIELDS = ('date_filled', 'filler')
DISCONTINUE_FIELDS = ('discontinued', 'discontinued_date', 'discontinued_reason_id', 'discontinued_by_id')
VOID_FIELDS = ('voided', 'void_reason', 'voided_by_id', 'date_voided')


@contextmanager
def restore_on_error(instance, fields):
    """Put ``fields`` back to their current values if the block raises."""
    snapshot = {name: getattr(instance, name) for name in fields}
    try:
        yield
    except Exception:
        for name, value in snapshot.items():
            setattr(instance, name, value)
        raise


def _order_ref(order):
    return {'order_id': order.pk, 'order_number': order.order_number or None}


class OrderLifecycle:

    def __init__(self, store, identity, number_generator):
        self.store = store
        self.identity = identity
        self.number_generator = number_generator

    # --- helpers ---

    def _resolve_actor(self, actor, role):
        if actor is None:
            actor = self.identity.current_actor()
        if actor is None:
            raise InvalidArgumentError(
                message=f"No {role} given and no authenticated user to default to.",
                code='ACTOR_REQUIRED',
                detail={'role': role},
            )
        return actor

    def _moment(self, when):
        """``when`` as an aware datetime in the current time zone, now when omitted."""
        if when is None:
            return self.identity.now()
        if timezone.is_naive(when):
            return timezone.make_aware(when)
        return when

    def _ensure_not_voided(self, order, action):
        if order.voided:
            raise InvalidStateError(
                message=f"Cannot {action} a voided order.",
                code='ORDER_VOIDED',
                detail=_order_ref(order),
            )

    @staticmethod
    def _validate(order):
        try:
            order.full_clean()
        except DjangoValidationError as exc:
            raise ValidationError(
                message="Order failed validation.",
                detail={'errors': exc.message_dict},
            ) from exc

    @staticmethod
    def _filler_label(filler):
        if filler is None:
            raise InvalidArgumentError(message="A filler is required.", code='FILLER_REQUIRED')
        if isinstance(filler, str):
            if not filler.strip():
                raise InvalidArgumentError(message="A filler is required.", code='FILLER_REQUIRED')
            return filler
        # a user: actor id + system id
        return f"{filler.pk}{filler.get_username()}"

    # --- persistence ---

    def save(self, order):
        """
        Validate and persist a not-yet-activated order.

        The order number is assigned here, exactly once, under the store's
        numbering lock.
        """
        if self.store.is_activated_in_database(order):
            raise InvalidStateError(
                message="Cannot modify an activated order.",
                code='ORDER_IMMUTABLE',
                detail=_order_ref(order),
            )

        with self.store.order_number_lock():
            with restore_on_error(order, ('order_number',)):
                if not order.order_number:
                    order.order_number = self.number_generator.generate()
                self._validate(order)
                return self.store.save_order(order)

    def purge(self, order, cascade=False):
        if cascade:
            raise UnimplementedError(
                message="Cascade purging of orders is not supported.",
                code='CASCADE_PURGE_UNSUPPORTED',
                detail=_order_ref(order),
            )
        logger.info("[lifecycle] purging order %s", order.order_number)
        self.store.delete_order(order)

    # --- forward transitions ---

    def sign(self, order, signer=None, when=None):
        if order.is_signed:
            raise InvalidStateError(
                message="Order is already signed.",
                code='ORDER_ALREADY_SIGNED',
                detail=_order_ref(order),
            )
        self._ensure_not_voided(order, 'sign')
        signer = self._resolve_actor(signer, 'signer')
        when = self._moment(when)

        with restore_on_error(order, SIGN_FIELDS):
            order.signed_by = signer
            order.date_signed = when
            order = self.save(order)

        logger.info("[lifecycle] order %s signed by %s", order.order_number, signer)
        return order

    def activate(self, order, activator=None, when=None):
        self._ensure_not_voided(order, 'activate')
        if not order.is_signed:
            raise InvalidStateError(
                message="Cannot activate an order which has not been signed.",
                code='ORDER_NOT_SIGNED',
                detail=_order_ref(order),
            )
        if order.is_activated:
            raise InvalidStateError(
                message="Order is already activated.",
                code='ORDER_ALREADY_ACTIVATED',
                detail=_order_ref(order),
            )
        activator = self._resolve_actor(activator, 'activator')
        when = self._moment(when)

        with restore_on_error(order, ACTIVATE_FIELDS):
            order.activated_by = activator
            order.date_activated = when
            order = self.save(order)

        logger.info("[lifecycle] order %s activated by %s", order.order_number, activator)
        return order

    def sign_and_activate(self, order, actor=None, when=None):
        actor = self._resolve_actor(actor, 'actor')
        when = self._moment(when)
        order = self.sign(order, actor, when)
        return self.activate(order, actor, when)

    def fill(self, order, filler, when=None):
        self._ensure_not_voided(order, 'fill')
        if not order.is_signed:
            raise InvalidStateError(
                message="Can not fill an order which has not been signed.",
                code='ORDER_NOT_SIGNED',
                detail=_order_ref(order),
            )
        if not order.is_activated:
            raise InvalidStateError(
                message="Can not fill an order which has not been activated.",
                code='ORDER_NOT_ACTIVATED',
                detail=_order_ref(order),
            )
        if order.is_filled:
            raise InvalidStateError(
                message="Order is already filled.",
                code='ORDER_ALREADY_FILLED',
                detail=_order_ref(order),
            )

        now = self.identity.now()
        when = self._moment(when)
        if when > now:
            raise InvalidArgumentError(
                message="Cannot fill an order in the future.",
                code='FILL_DATE_IN_FUTURE',
                detail={'date_filled': when.isoformat(), 'now': now.isoformat()},
            )
        label = self._filler_label(filler)

        with restore_on_error(order, FILL_FIELDS):
            order.date_filled = when
            order.filler = label
            order = self.store.save_order(order, update_fields=FILL_FIELDS)

        logger.info("[lifecycle] order %s filled by %s", order.order_number, label)
        return order

    # --- discontinuation ---

    def discontinue(self, order, reason, when=None):
        """
        Stop ``order`` as of ``when`` (default now).

        A DISCONTINUE companion order for the same concept is signed and
        activated by the current user at ``when``; it points back at the
        original through previous_order. The original order is returned.
        """
        if reason is None:
            raise InvalidArgumentError(
                message="A discontinue reason is required.",
                code='DISCONTINUE_REASON_REQUIRED',
                detail=_order_ref(order),
            )
        when = self._moment(when)
        self._ensure_not_voided(order, 'discontinue')
        if order.is_discontinued(when):
            raise InvalidStateError(
                message="Order is already discontinued.",
                code='ORDER_ALREADY_DISCONTINUED',
                detail=_order_ref(order),
            )
        if order.pk is None:
            raise InvalidStateError(
                message="Cannot discontinue an order that has never been saved.",
                code='ORDER_NOT_SAVED',
            )
        actor = self._resolve_actor(None, 'discontinuer')

        with self.store.atomic(), restore_on_error(order, DISCONTINUE_FIELDS):
            companion = Order(
                patient=order.patient,
                concept=order.concept,
                order_type=order.order_type,
                order_action=Order.Action.DISCONTINUE,
                previous_order=order,
            )
            self.sign_and_activate(companion, actor, when)

            order.discontinued = True
            order.discontinued_date = when
            order.discontinued_reason = reason
            order.discontinued_by = actor
            order = self.store.save_order(order, update_fields=DISCONTINUE_FIELDS)

        logger.info(
            "[lifecycle] order %s discontinued by %s (discontinue order %s)",
            order.order_number, actor, companion.order_number,
        )
        return order

    def undiscontinue(self, order):
        raise UnimplementedError(
            message="Undiscontinuing an order is not supported: its discontinue order would also need voiding.",
            code='UNDISCONTINUE_UNSUPPORTED',
            detail=_order_ref(order),
        )

    # --- voiding ---

    def void(self, order, reason):
        if order.voided:
            return order
        if not reason:
            raise InvalidArgumentError(
                message="voidReason cannot be empty or null.",
                code='VOID_REASON_REQUIRED',
                detail=_order_ref(order),
            )

        with restore_on_error(order, VOID_FIELDS):
            order.voided = True
            order.void_reason = reason
            order.voided_by = self.identity.current_actor()
            if order.date_voided is None:
                order.date_voided = self.identity.now()
            order = self.store.save_order(order, update_fields=VOID_FIELDS)

        logger.info("[lifecycle] order %s voided: %s", order.order_number, reason)
        return order

    def unvoid(self, order):
        order.voided = False
        order.voided_by = None
        order.void_reason = None
        order.date_voided = None
        order = self.store.save_order(order, update_fields=VOID_FIELDS)

        logger.info("[lifecycle] order %s unvoided", order.order_number)
        return order
