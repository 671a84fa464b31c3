"""
Configuration collaborator: order numbering settings.
"""

from abc import ABC, abstractmethod

from django.conf import settings

DEFAULT_ORDER_NUMBER_PREFIX = "ORDER-"


class BaseConfiguration(ABC):

    @abstractmethod
    def order_number_prefix(self) -> str:
        """Prefix placed before the numeric part of every order number."""

    @abstractmethod
    def deployment_label(self) -> str | None:
        """Deployment identity prepended as ``label-``; None or empty to skip."""


class SettingsConfiguration(BaseConfiguration):
    """Reads ORDER_NUMBER_PREFIX and IMPLEMENTATION_ID from Django settings."""

    def order_number_prefix(self) -> str:
        prefix = getattr(settings, "ORDER_NUMBER_PREFIX", None)
        if prefix is None:
            return DEFAULT_ORDER_NUMBER_PREFIX
        return prefix

    def deployment_label(self) -> str | None:
        return getattr(settings, "IMPLEMENTATION_ID", None) or None


class StaticConfiguration(BaseConfiguration):
    """Explicit values, independent of settings."""

    def __init__(self, prefix: str | None = None, label: str | None = None):
        self._prefix = prefix
        self._label = label

    def order_number_prefix(self) -> str:
        if self._prefix is None:
            return DEFAULT_ORDER_NUMBER_PREFIX
        return self._prefix

    def deployment_label(self) -> str | None:
        return self._label or None
