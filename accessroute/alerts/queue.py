"""Priority queue that serializes obstacle announcements to one voice.

Observations pass through relevance and duplicate checks, then wait in a
heap ordered by (priority, distance, arrival). A single asyncio task speaks
them one at a time. A critical item interrupts a non-urgent utterance in
progress; anything else waits for the current utterance to finish.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from accessroute.alerts.announcements import announcement_priority, announcement_text
from accessroute.alerts.memory import AnnouncementMemory
from accessroute.alerts.models import QueueItem
from accessroute.config import Settings, get_settings
from accessroute.exceptions import SpeechError
from accessroute.obstacles.relevance import is_relevant

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Iterable

    from accessroute.alerts.models import ProximityAlert
    from accessroute.geometry.models import Location
    from accessroute.obstacles.models import Obstacle
    from accessroute.profiles.models import MobilityProfile
    from accessroute.types import SpeechChannel

logger = logging.getLogger(__name__)

# Heap entries are [priority, distance, sequence, push id, item]; a superseded entry has item None.
_ITEM_SLOT = -1


@dataclass
class _ActiveUtterance:
    item: QueueItem
    stop: asyncio.Event


class ProximityAlertQueue:
    """Announcement queue for one active trip."""

    def __init__(
        self,
        speech: SpeechChannel,
        profile: MobilityProfile,
        *,
        settings: Settings | None = None,
        memory: AnnouncementMemory | None = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        safety_first: bool | None = None,
    ) -> None:
        """Initialize the queue.

        Args:
            speech: Output channel utterances are sent to.
            profile: Traveler's mobility profile.
            settings: Tunables; loaded from the environment if not provided.
            memory: Announcement memory; a fresh one is created if not provided.
            clock: Monotonic clock in seconds.
            sleep: Coroutine used for pauses between announcements.
            safety_first: Announce every obstacle type; defaults to the configured flag.
        """
        settings = settings or get_settings()
        self._speech = speech
        self._profile = profile
        self._memory = memory or AnnouncementMemory(settings)
        self._clock = clock
        self._sleep = sleep
        self._safety_first = settings.safety_first_alerts if safety_first is None else safety_first
        self._tolerance = settings.alert_distance_tolerance_meters
        self._stale_after = settings.alert_stale_seconds
        self._pause = settings.alert_pause_seconds
        self._interrupt_pause = settings.alert_interrupt_pause_seconds

        self._heap: list[list[Any]] = []
        self._entries: dict[str, list[Any]] = {}
        self._sequence = itertools.count()
        self._push_ids = itertools.count()
        self._current: _ActiveUtterance | None = None
        self._task: asyncio.Task[None] | None = None

    @property
    def memory(self) -> AnnouncementMemory:
        return self._memory

    @property
    def is_speaking(self) -> bool:
        return self._current is not None

    @property
    def pending(self) -> int:
        """Number of obstacles waiting to be announced."""
        return len(self._entries)

    def pending_items(self) -> list[QueueItem]:
        """Waiting items in the order they would be spoken."""
        return [entry[_ITEM_SLOT] for entry in sorted(self._entries.values())]

    def enqueue(self, obstacle: Obstacle, distance: float) -> bool:
        """Observe ``obstacle`` at ``distance`` meters.

        Returns:
            True if the queue changed: a new item was added or a queued one
            was superseded by a more urgent or closer observation.
        """
        if not is_relevant(obstacle, self._profile, safety_first=self._safety_first):
            logger.debug("Dropping %s: not relevant for %s", obstacle.id, self._profile.device.value)
            return False

        now = self._clock()
        self._memory.expire(now)
        if self._memory.is_duplicate(obstacle.id, distance, now):
            logger.debug("Dropping %s at %.0fm: announced recently", obstacle.id, distance)
            return False

        priority = announcement_priority(distance, obstacle.severity)
        if self._repeats_current(obstacle.id, priority, distance):
            logger.debug("Dropping %s at %.0fm: being announced", obstacle.id, distance)
            return False

        existing = self._entries.get(obstacle.id)
        if existing is not None:
            queued: QueueItem = existing[_ITEM_SLOT]
            if priority >= queued.priority and distance >= queued.distance:
                return False
            self._push(queued.model_copy(update={"priority": priority, "distance": distance, "queued_at": now}))
            logger.debug("Superseded %s: priority %d at %.0fm", obstacle.id, priority, distance)
        else:
            self._push(
                QueueItem(
                    obstacle=obstacle,
                    distance=distance,
                    profile=self._profile,
                    priority=priority,
                    queued_at=now,
                    sequence=next(self._sequence),
                )
            )
            logger.debug("Queued %s at %.0fm with priority %d", obstacle.id, distance, priority)

        self._interrupt_if_critical()
        self._ensure_processing()
        return True

    def observe_alerts(self, alerts: Iterable[ProximityAlert]) -> int:
        """Enqueue detector alerts.

        Returns:
            Number of alerts that changed the queue.
        """
        return sum(1 for alert in alerts if self.enqueue(alert.obstacle, alert.distance))

    def update_user_location(self, location: Location) -> int:
        """Forget announcements for obstacles the traveler has left behind."""
        return self._memory.on_user_moved(location)

    def stop(self) -> None:
        """Stop the utterance in progress and release the channel."""
        if self._current is not None:
            self._current.stop.set()
            self._current = None
        self._speech.stop()

    def clear(self) -> None:
        """Drop every waiting item and forget past announcements."""
        self._heap.clear()
        self._entries.clear()
        self._memory.clear()

    async def wait_idle(self) -> None:
        """Wait until the processor has nothing left to say."""
        while self._task is not None and not self._task.done():
            await self._task

    async def close(self) -> None:
        """Clear the queue, silence the channel and stop the processor."""
        self.clear()
        self.stop()
        if self._task is not None and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                logger.debug("Alert processor cancelled")
        self._task = None

    async def process(self) -> None:
        """Speak queued items until the queue is empty."""
        while (item := self._pop()) is not None:
            age = self._clock() - item.queued_at
            if age > self._stale_after:
                logger.info("Skipping stale announcement for %s (%.1fs old)", item.obstacle.id, age)
                continue

            interrupted = await self._announce(item)
            if self._peek() is not None:
                await self._sleep(self._interrupt_pause if interrupted else self._pause)

    async def _announce(self, item: QueueItem) -> bool:
        """Speak one item; returns True if it was interrupted."""
        text = announcement_text(item.obstacle, item.distance)
        stop = asyncio.Event()
        self._current = _ActiveUtterance(item=item, stop=stop)
        try:
            await self._speech.speak(text, stop)
        except Exception as exc:
            error = SpeechError(
                "Announcement could not be spoken",
                context={"obstacle_id": item.obstacle.id, "error": str(exc)},
            )
            logger.warning("Speech failed for %s", item.obstacle.id, extra={"error": error.to_log_dict()})
            return False
        finally:
            if self._current is not None and self._current.stop is stop:
                self._current = None

        if stop.is_set():
            logger.info("Announcement for %s interrupted", item.obstacle.id)
            return True

        self._memory.record(item.obstacle, item.distance, self._clock())
        logger.info("Announced %s", text, extra={"obstacle_id": item.obstacle.id, "priority": item.priority})
        return False

    def _repeats_current(self, obstacle_id: str, priority: int, distance: float) -> bool:
        """Whether the observation adds nothing to the utterance in progress."""
        if self._current is None or self._current.item.obstacle.id != obstacle_id:
            return False
        current = self._current.item
        return priority >= current.priority and current.distance - distance <= self._tolerance

    def _interrupt_if_critical(self) -> None:
        if self._current is None or self._current.item.is_urgent:
            return
        head = self._peek()
        if head is not None and head.is_urgent:
            logger.info(
                "Interrupting announcement for %s: %s is %.0fm away",
                self._current.item.obstacle.id,
                head.obstacle.id,
                head.distance,
            )
            self._current.stop.set()
            self._speech.stop()

    def _ensure_processing(self) -> None:
        if self._task is not None and not self._task.done():
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop; %d items wait for process()", self.pending)
            return
        self._task = loop.create_task(self.process())

    def _push(self, item: QueueItem) -> None:
        previous = self._entries.get(item.obstacle.id)
        if previous is not None:
            previous[_ITEM_SLOT] = None
        entry = [item.priority, item.distance, item.sequence, next(self._push_ids), item]
        self._entries[item.obstacle.id] = entry
        heapq.heappush(self._heap, entry)

    def _pop(self) -> QueueItem | None:
        while self._heap:
            item = heapq.heappop(self._heap)[_ITEM_SLOT]
            if item is not None:
                del self._entries[item.obstacle.id]
                return item
        return None

    def _peek(self) -> QueueItem | None:
        while self._heap and self._heap[0][_ITEM_SLOT] is None:
            heapq.heappop(self._heap)
        return self._heap[0][_ITEM_SLOT] if self._heap else None
