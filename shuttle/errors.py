"""Structured error hierarchy."""

from __future__ import annotations


class ShuttleError(Exception):
    def __init__(self, code: str, message: str, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.cause = cause

    @classmethod
    def wrap(cls, err: Exception) -> ShuttleError:
        if isinstance(err, ShuttleError):
            return err
        return ShuttleError("UNKNOWN", str(err), err)


class ValidationError(ShuttleError):
    def __init__(self, message: str, code: str = "VALIDATION_ERROR") -> None:
        super().__init__(code, message)


class StepValidationError(ValidationError):
    def __init__(self, step_name: str) -> None:
        super().__init__(f"Validation failed for step '{step_name}'", "STEP_VALIDATION_FAILED")
        self.step_name = step_name


class NotFoundError(ShuttleError, LookupError):
    """Lookup miss. Also catchable as the builtin ``LookupError``."""


class ToolNotFoundError(NotFoundError):
    def __init__(self, tool_name: str) -> None:
        super().__init__("TOOL_NOT_FOUND", f"Tool not found: {tool_name}")
        self.tool_name = tool_name


class RouteNotFoundError(NotFoundError):
    def __init__(self, route: str) -> None:
        super().__init__(
            "ROUTE_NOT_FOUND", f"No route matches '{route}' and no default handler is set"
        )
        self.route = route


class DuplicateNameError(ShuttleError):
    def __init__(self, kind: str, name: str) -> None:
        super().__init__("DUPLICATE_NAME", f"{kind} '{name}' is already registered")
        self.name = name


class ConfigurationError(ShuttleError):
    def __init__(self, message: str) -> None:
        super().__init__("CONFIG_ERROR", message)


class ProviderError(ShuttleError):
    def __init__(
        self,
        code: str,
        provider: str,
        message: str,
        status_code: int | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(code, message, cause)
        self.provider = provider
        self.status_code = status_code

    @classmethod
    def from_exception(cls, provider: str, err: Exception) -> ProviderError:
        if isinstance(err, ProviderError):
            return err
        status = getattr(err, "status_code", None)
        message = str(err) or type(err).__name__
        return cls("PROVIDER_ERROR", provider, message, status, err)


class StreamInterruptedError(ProviderError):
    def __init__(
        self, provider: str, partial_content: str = "", cause: Exception | None = None
    ) -> None:
        super().__init__(
            "STREAM_INTERRUPTED", provider, f"Stream interrupted from {provider}", cause=cause
        )
        self.partial_content = partial_content
