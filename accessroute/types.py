"""Protocols for the external collaborators the core consumes.

The core never talks to a real routing service, obstacle database or speech
engine; callers pass objects satisfying these protocols.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    import asyncio
    from collections.abc import Sequence

    from accessroute.geometry.models import Location
    from accessroute.obstacles.models import Obstacle
    from accessroute.routing.models import CandidateRoute


@runtime_checkable
class RoutingProvider(Protocol):
    """Walking directions source."""

    async def get_routes(
        self,
        origin: Location,
        destination: Location,
        *,
        alternatives: bool,
    ) -> Sequence[CandidateRoute]:
        """Return candidate walking routes, raising on transport failure."""
        ...


@runtime_checkable
class ObstacleDatastore(Protocol):
    """Community obstacle report store."""

    async def get_obstacles_in_area(
        self,
        center: Location,
        radius_km: float,
    ) -> Sequence[Obstacle]:
        """Return obstacles within ``radius_km`` of ``center``."""
        ...


@runtime_checkable
class SpeechChannel(Protocol):
    """Text-to-speech output.

    ``speak`` completes when the utterance finishes or when ``stop`` is set.
    """

    async def speak(self, text: str, stop: asyncio.Event) -> None:
        """Speak ``text``; return early once ``stop`` is set."""
        ...

    def stop(self) -> None:
        """Stop whatever is currently being spoken."""
        ...
