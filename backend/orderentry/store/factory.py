"""
Factory: return the OrderStore selected by settings.ORDER_STORE.

Adding a store backend:
  1. subclass BaseOrderStore
  2. add one line to the registry below
  No lifecycle code changes.
"""

from django.conf import settings

from .base import BaseOrderStore


def _build_registry() -> dict[str, type[BaseOrderStore]]:
    # deferred import so the ORM models load only once apps are ready
    from .django_store import DjangoOrderStore

    return {
        "django": DjangoOrderStore,
    }


def get_order_store() -> BaseOrderStore:
    """
    Read settings.ORDER_STORE (env ORDER_STORE, default "django") and return an instance.

    Raises:
        ValueError: unknown ORDER_STORE
    """
    backend = getattr(settings, "ORDER_STORE", "django")
    registry = _build_registry()
    store_cls = registry.get(backend)

    if store_cls is None:
        raise ValueError(
            f"Unknown ORDER_STORE: {backend!r}. "
            f"Known stores: {list(registry.keys())}"
        )

    return store_cls()
