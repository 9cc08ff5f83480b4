# Area: Registry
"""
cognumbers._registry.events — Contract event subscription
=========================================================

Subscribers register interest in named contract events and are
notified asynchronously when matching logs appear. A polling loop
fetches logs since the last block it saw and dispatches them in block
order. Nothing here knows about rendering; the client wires events to
a registry refresh.

Usage:
    subscriber = EventSubscriber(contract, poll_interval=5)
    subscriber.subscribe("GameCreated", on_game_created)
    await subscriber.run()
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

logger = logging.getLogger("cognumbers.events")

EventCallback = Callable[[Dict[str, Any]], Union[None, Awaitable[None]]]


class EventSubscriber:
    """
    Polls one contract for events and fans them out to callbacks.

    Attributes:
        contract: Adapter exposing ``block_number`` and ``get_events``
        poll_interval: Seconds between polls in ``run()``
        last_block: Highest block already dispatched, None before the first poll
    """

    def __init__(self, contract: Any, poll_interval: float = 5.0,
                 start_block: Optional[int] = None,
                 sleep: Optional[Callable[[float], Awaitable[Any]]] = None):
        self.contract = contract
        self.poll_interval = poll_interval
        self.last_block = start_block - 1 if start_block is not None else None
        self._subscribers: Dict[str, List[EventCallback]] = {}
        self._sleep = sleep or asyncio.sleep
        self._running = False

    @property
    def topics(self) -> List[str]:
        return [t for t, callbacks in self._subscribers.items() if callbacks]

    def subscribe(self, topic: str, callback: EventCallback) -> None:
        """Register ``callback`` for events named ``topic``."""
        self._subscribers.setdefault(topic, []).append(callback)
        logger.debug("Subscribed to %s", topic)

    def unsubscribe(self, topic: str, callback: EventCallback) -> None:
        """Remove ``callback`` from ``topic``. No-op if not registered."""
        callbacks = self._subscribers.get(topic, [])
        if callback in callbacks:
            callbacks.remove(callback)

    async def dispatch(self, event: Dict[str, Any]) -> int:
        """
        Deliver one decoded event to every callback for its topic.

        Returns:
            Number of callbacks that ran without raising
        """
        topic = event.get("event", "")
        delivered = 0
        for callback in list(self._subscribers.get(topic, [])):
            try:
                result = callback(event)
                if inspect.isawaitable(result):
                    await result
                delivered += 1
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error("Subscriber for %s failed: %s", topic, e, exc_info=True)
        return delivered

    async def poll_once(self) -> int:
        """
        Fetch and dispatch events since the last poll.

        The first poll without a start block only records the current
        head, so subscribers see events from that point on.

        Returns:
            Number of events dispatched
        """
        head = await self.contract.block_number()
        if self.last_block is None:
            self.last_block = head
            logger.info("Watching events from block %d", head + 1)
            return 0
        if head <= self.last_block:
            return 0

        from_block = self.last_block + 1
        events: List[Dict[str, Any]] = []
        for topic in self.topics:
            events.extend(await self.contract.get_events(topic, from_block, head))
        events.sort(key=lambda e: (e.get("block_number", 0), e.get("log_index", 0)))

        for event in events:
            await self.dispatch(event)
        self.last_block = head
        if events:
            logger.info("Dispatched %d events from blocks %d-%d", len(events), from_block, head)
        return len(events)

    async def run(self) -> None:
        """Poll until ``stop()`` is called or the task is cancelled."""
        self._running = True
        logger.info("Event subscriber started for %s", ", ".join(self.topics) or "no topics")
        while self._running:
            try:
                await self.poll_once()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error("Event poll error: %s", e, exc_info=True)
            if self._running:
                await self._sleep(self.poll_interval)
        logger.info("Event subscriber stopped.")

    def stop(self) -> None:
        self._running = False
