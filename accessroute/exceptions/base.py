"""Root of the accessible routing error hierarchy.

Every error carries a machine-readable ``error_code`` and a ``recoverable``
flag. Recoverable errors are caught inside the core (scoring falls back to
the heuristic, route acquisition falls back to a straight line, the alert
queue moves on to the next item) and only reach callers as log records.
"""

from typing import Any, ClassVar


class AccessRouteError(Exception):
    """Base exception for all accessible routing errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code, unique per class.
        recoverable: Whether the core recovers from this error on its own.
        context: Route, obstacle or collaborator details for the log record.
    """

    error_code: ClassVar[str] = "INTERNAL_ERROR"
    recoverable: ClassVar[bool] = False

    _registry: ClassVar[dict[str, type["AccessRouteError"]]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        # Only classes declaring their own code are addressable by it.
        if "error_code" in cls.__dict__:
            cls._registry[cls.error_code] = cls

    def __init__(
        self,
        message: str,
        *,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def to_dict(self) -> dict[str, Any]:
        """Payload handed back to callers of the core."""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "context": self.context,
        }

    def to_log_dict(self) -> dict[str, Any]:
        """Payload attached to log records under the ``error`` key.

        Includes the wrapped exception when the error was raised ``from``
        a collaborator failure.
        """
        payload = {
            "error_code": self.error_code,
            "recoverable": self.recoverable,
            "message": self.message,
            "context": self.context,
            "exception_type": type(self).__name__,
        }
        if self.__cause__ is not None:
            payload["cause"] = f"{type(self.__cause__).__name__}: {self.__cause__}"
        return payload

    @classmethod
    def get_by_error_code(cls, error_code: str) -> type["AccessRouteError"] | None:
        """Look up the error class registered for ``error_code``."""
        return cls._registry.get(error_code)

    def __str__(self) -> str:
        if not self.context:
            return self.message
        details = ", ".join(f"{key}={value}" for key, value in self.context.items())
        return f"{self.message} ({details})"

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, error_code={self.error_code!r}, context={self.context!r})"
