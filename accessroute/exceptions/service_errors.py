"""Errors raised while computing routes, scores and announcements."""

from typing import Any, ClassVar

from accessroute.exceptions.base import AccessRouteError


class ServiceError(AccessRouteError):
    """Base class for all processing-side errors."""

    error_code: ClassVar[str] = "SERVICE_ERROR"


class ExternalServiceError(ServiceError):
    """A collaborator (routing provider, obstacle datastore) call failed."""

    error_code: ClassVar[str] = "EXTERNAL_SERVICE_ERROR"
    recoverable: ClassVar[bool] = True

    def __init__(
        self,
        message: str,
        *,
        service_name: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize external service error.

        Args:
            message: Description of the failure.
            service_name: Name of the collaborator that failed.
            context: Additional context information.
        """
        context_dict = context or {}
        if service_name is not None:
            context_dict["service_name"] = service_name
        super().__init__(message, context=context_dict)


class NoRouteAvailableError(ServiceError):
    """No usable route exists after every fallback was exhausted."""

    error_code: ClassVar[str] = "NO_ROUTE_AVAILABLE"


class ScoringError(ServiceError):
    """The multi-criteria accessibility computation failed.

    Never escapes the scoring engine; it is replaced by the heuristic score.
    """

    error_code: ClassVar[str] = "SCORING_ERROR"
    recoverable: ClassVar[bool] = True


class SpeechError(ServiceError):
    """An utterance could not be spoken."""

    error_code: ClassVar[str] = "SPEECH_ERROR"
    recoverable: ClassVar[bool] = True

