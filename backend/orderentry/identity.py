"""
Identity providers: who is acting, and what time it is.

The lifecycle asks its IdentityProvider whenever an actor or timestamp is
not passed explicitly. No global "current user" lookup happens anywhere else.
"""

from abc import ABC, abstractmethod
from datetime import datetime

from django.utils import timezone


class BaseIdentityProvider(ABC):

    @abstractmethod
    def current_actor(self):
        """The acting user, or None when nobody is authenticated."""

    def now(self) -> datetime:
        return timezone.now()


class StaticIdentityProvider(BaseIdentityProvider):
    """Fixed actor, and optionally a frozen clock. Used by jobs, shells and tests."""

    def __init__(self, actor=None, clock: datetime | None = None):
        self._actor = actor
        self._clock = clock

    def current_actor(self):
        return self._actor

    def now(self) -> datetime:
        if self._clock is not None:
            return self._clock
        return super().now()


class RequestIdentityProvider(BaseIdentityProvider):
    """The authenticated user of an HTTP request."""

    def __init__(self, request):
        self._request = request

    def current_actor(self):
        user = getattr(self._request, 'user', None)
        if user is None or not user.is_authenticated:
            return None
        return user
