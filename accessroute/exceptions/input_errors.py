"""Errors caused by caller-supplied input."""

from typing import Any, ClassVar

from accessroute.exceptions.base import AccessRouteError


class InputError(AccessRouteError):
    """Base class for all errors caused by invalid caller input."""

    error_code: ClassVar[str] = "INPUT_ERROR"


class ValidationError(InputError):
    """Input validation failed.

    Raise when geometry, polylines or other raw input fail validation rules.
    """

    error_code: ClassVar[str] = "VALIDATION_ERROR"

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        value: Any = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize validation error with optional field info.

        Args:
            message: Description of the validation failure.
            field: Name of the field that failed validation.
            value: The invalid value.
            context: Additional context information.
        """
        context_dict = context or {}
        if field is not None:
            context_dict["field"] = field
        if value is not None:
            context_dict["value"] = value
        super().__init__(message, context=context_dict)


class ProfileError(InputError):
    """A mobility profile is incomplete or inconsistent."""

    error_code: ClassVar[str] = "PROFILE_ERROR"

    def __init__(
        self,
        message: str,
        *,
        device: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize profile error with the offending device type.

        Args:
            message: Description of the profile problem.
            device: Mobility device type of the profile.
            context: Additional context information.
        """
        context_dict = context or {}
        if device is not None:
            context_dict["device"] = device
        super().__init__(message, context=context_dict)
