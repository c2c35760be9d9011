# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Publish/subscribe channel that replays its last value.

A StateStream holds one value at a time. Publishing replaces the value
and notifies every subscriber synchronously, in subscription order. A
new subscriber immediately receives the current value.

Example:
    >>> stream = StateStream([])
    >>> seen = []
    >>> stream.subscribe('log', seen.append)
    >>> stream.publish([1])
    >>> seen
    [[], [1]]
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Any, Callable, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar('T')

SubscriberCallback = Callable[[Any], None]


class StateStream(Generic[T]):
    """Last-value-cached event channel."""

    __slots__ = ('_value', '_subscribers', '_pending', '_delivering')

    def __init__(self, initial: T) -> None:
        self._value = initial
        self._subscribers: dict[str, SubscriberCallback] = {}
        self._pending: deque[T] = deque()
        self._delivering = False

    def __repr__(self) -> str:
        return f"StateStream(subscribers={list(self._subscribers)})"

    def __len__(self) -> int:
        """Return the number of subscribers."""
        return len(self._subscribers)

    @property
    def value(self) -> T:
        """The last published value."""
        return self._value

    def publish(self, value: T) -> None:
        """Store value and deliver it to all subscribers.

        Publishing from inside a subscriber does not deliver right away:
        the value is queued and delivered, in publish order, once the
        current value has reached every subscriber.

        Exceptions raised by a subscriber propagate to the outermost
        publisher; subscribers after the failing one are not called and
        queued values are dropped.
        """
        self._value = value
        self._pending.append(value)
        if self._delivering:
            logger.debug("Queued state published during delivery")
            return
        self._delivering = True
        try:
            while self._pending:
                current = self._pending.popleft()
                # Copy: a callback may subscribe or unsubscribe while we iterate.
                for subscriber_id, callback in list(self._subscribers.items()):
                    logger.debug("Delivering state to subscriber %r", subscriber_id)
                    callback(current)
        finally:
            self._delivering = False
            self._pending.clear()

    def subscribe(self, subscriber_id: str, callback: SubscriberCallback) -> None:
        """Register callback under subscriber_id and replay the current value.

        Args:
            subscriber_id: Name of the subscription. Subscribing again with
                the same name replaces the previous callback.
            callback: Called with each published value.
        """
        self._subscribers[subscriber_id] = callback
        callback(self._value)

    def unsubscribe(self, subscriber_id: str) -> None:
        """Remove a subscription. Unknown ids are ignored."""
        self._subscribers.pop(subscriber_id, None)

    def is_subscribed(self, subscriber_id: str) -> bool:
        """True if subscriber_id is registered."""
        return subscriber_id in self._subscribers
