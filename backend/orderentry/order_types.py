import logging

from .exceptions import InvalidArgumentError

logger = logging.getLogger(__name__)


class OrderTypeAdmin:
    """Administrative lifecycle of order types: create, retire, unretire, purge."""

    def __init__(self, store):
        self.store = store

    def save(self, order_type):
        return self.store.save_order_type(order_type)

    def retire(self, order_type, reason):
        if not reason:
            raise InvalidArgumentError(
                message="A retire reason is required.",
                code='RETIRE_REASON_REQUIRED',
                detail={'order_type_id': order_type.pk},
            )
        order_type.retired = True
        order_type.retire_reason = reason
        logger.info("[order_types] retiring %s: %s", order_type.name, reason)
        return self.save(order_type)

    def unretire(self, order_type):
        order_type.retired = False
        order_type.retire_reason = None
        return self.save(order_type)

    def purge(self, order_type):
        logger.info("[order_types] purging %s", order_type.name)
        self.store.delete_order_type(order_type)

    def get(self, order_type_id):
        return self.store.get_order_type(order_type_id)

    def get_by_uuid(self, uuid):
        return self.store.get_order_type_by_uuid(uuid)

    def get_all(self, include_retired=True):
        return self.store.get_all_order_types(include_retired)
