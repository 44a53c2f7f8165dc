"""Accessible routing exception hierarchy.

Architecture:
    AccessRouteError (base)
    ├── InputError
    │   ├── ValidationError
    │   └── ProfileError
    └── ServiceError
        ├── ExternalServiceError   (recoverable)
        ├── NoRouteAvailableError
        ├── ScoringError           (recoverable)
        └── SpeechError            (recoverable)

Usage:
    from accessroute.exceptions import NoRouteAvailableError

    def pick(routes: list[CandidateRoute]) -> CandidateRoute:
        if not routes:
            raise NoRouteAvailableError(
                "No route between origin and destination",
                context={"candidates": 0},
            )
        return routes[0]
"""

from accessroute.exceptions.base import AccessRouteError
from accessroute.exceptions.input_errors import (
    InputError,
    ProfileError,
    ValidationError,
)
from accessroute.exceptions.service_errors import (
    ExternalServiceError,
    NoRouteAvailableError,
    ScoringError,
    ServiceError,
    SpeechError,
)

__all__ = [
    "AccessRouteError",
    "ExternalServiceError",
    "InputError",
    "NoRouteAvailableError",
    "ProfileError",
    "ScoringError",
    "ServiceError",
    "SpeechError",
    "ValidationError",
]
