"""EventBus and event types for share state notifications."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable

    from ocshare.sharing.entities import Share
    from ocshare.sharing.exceptions import ShareError

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Outcomes reported by share operations."""

    SHARE_CREATED = "share_created"
    LINK_SHARE_CREATED = "link_share_created"
    LINK_SHARE_REQUIRES_PASSWORD = "link_share_requires_password"
    SHARES_FETCHED = "shares_fetched"
    PERMISSIONS_SET = "permissions_set"
    PASSWORD_SET = "password_set"
    PASSWORD_SET_ERROR = "password_set_error"
    NAME_SET = "name_set"
    EXPIRE_DATE_SET = "expire_date_set"
    SHARE_DELETED = "share_deleted"
    SERVER_ERROR = "server_error"


@dataclass(frozen=True, slots=True)
class ShareEvent:
    """Immutable record of a completed share operation.

    Attributes:
        event_type: The kind of outcome.
        path: Remote path the operation targeted.
        share: The created or updated share, when there is one.
        shares: Fetched shares in server order (``SHARES_FETCHED`` only).
        status_code: Server status code (error events only).
        message: Server message (error and password-required events).
        error: The exception behind an error or password-required event.
    """

    event_type: EventType
    path: str
    share: Share | None = None
    shares: tuple[Share, ...] = field(default_factory=tuple)
    status_code: int | None = None
    message: str | None = None
    error: ShareError | None = None

    @property
    def is_error(self) -> bool:
        return self.event_type in (EventType.SERVER_ERROR, EventType.PASSWORD_SET_ERROR)


class EventBus:
    """Delivers share events to subscribers.

    Subscribers registered for one event type run first, then those
    registered for every type, each group in registration order.  A
    subscriber that raises is logged and skipped; the operation that
    emitted the event still completes.
    """

    def __init__(self) -> None:
        self._by_type: dict[EventType, list[Callable[..., Any]]] = {}
        self._catch_all: list[Callable[..., Any]] = []

    def register(self, event_type: EventType, handler: Callable[..., Any]) -> None:
        """Subscribe *handler* to *event_type*."""
        self._by_type.setdefault(event_type, []).append(handler)

    def register_all(self, handler: Callable[..., Any]) -> None:
        """Subscribe *handler* to every event type."""
        self._catch_all.append(handler)

    def unregister(self, event_type: EventType, handler: Callable[..., Any]) -> bool:
        """Drop one *event_type* subscription of *handler*. Return True if found."""
        subscribers = self._by_type.get(event_type, [])
        if handler not in subscribers:
            return False
        subscribers.remove(handler)
        return True

    def unregister_all(self, handler: Callable[..., Any]) -> int:
        """Drop every subscription of *handler*. Returns how many were removed."""
        removed = 0
        for subscribers in [*self._by_type.values(), self._catch_all]:
            while handler in subscribers:
                subscribers.remove(handler)
                removed += 1
        return removed

    def handlers_for(self, event_type: EventType) -> list[Callable[..., Any]]:
        """Subscribers that an event of *event_type* reaches, in call order."""
        return [*self._by_type.get(event_type, []), *self._catch_all]

    async def emit(self, event: ShareEvent) -> int:
        """Deliver *event*. Returns the number of subscribers that failed."""
        failed = 0
        for handler in self.handlers_for(event.event_type):
            try:
                await handler(event)
            except Exception:
                failed += 1
                logger.warning(
                    "Subscriber %r failed on %s for %s (share %s)",
                    handler,
                    event.event_type.value,
                    event.path,
                    event.share.id if event.share is not None else "-",
                    exc_info=True,
                )
        return failed

    @property
    def handler_count(self) -> int:
        """Number of subscriptions, catch-all ones counted once."""
        return len(self._catch_all) + sum(len(h) for h in self._by_type.values())

    def clear(self) -> None:
        """Drop all subscriptions."""
        self._by_type.clear()
        self._catch_all.clear()
