"""Change notification for entry store subscribers."""

import inspect
from collections.abc import Awaitable, Callable
from typing import Optional, Union

from spark.logging import get_logger
from spark.models import ChangeKind, EntryChangeEvent

logger = get_logger('services.events')

Subscriber = Callable[[EntryChangeEvent], Union[None, Awaitable[None]]]


class ChangeNotifier:
    """Callback registry. Subscribers may be plain functions or coroutines."""

    def __init__(self):
        self._subscribers: list[Subscriber] = []

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Register a callback for every published event.

        :param callback: Called with each EntryChangeEvent
        :type callback: Subscriber
        :return: Function that removes the subscription
        :rtype: Callable[[], None]
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    async def publish(self, kind: ChangeKind, entry_ids: Optional[list[str]] = None, detail: Optional[str] = None) -> EntryChangeEvent:
        event = EntryChangeEvent(kind=kind, entry_ids=entry_ids or [], detail=detail)
        for callback in list(self._subscribers):
            try:
                result = callback(event)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception("Change subscriber failed for %s event", kind.value)
        return event
