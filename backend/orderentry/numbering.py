import logging

logger = logging.getLogger(__name__)


class OrderNumberGenerator:
    """
    Builds order numbers: ``[label-]prefix<max_id + 1>``.

    The numeric part comes from the store's highest order id, so generate()
    must run under ``store.order_number_lock()`` together with the save of
    the order that receives the number.
    """

    def __init__(self, store, configuration):
        self.store = store
        self.configuration = configuration

    def generate(self) -> str:
        next_id = self.store.get_maximum_order_id() + 1
        order_number = f"{self.configuration.order_number_prefix()}{next_id}"

        label = self.configuration.deployment_label()
        if label:
            order_number = f"{label}-{order_number}"

        self.store.record_issued_order_id(next_id)
        logger.debug("[numbering] issued %s", order_number)
        return order_number
