"""
Error types raised by the ECS Fargate Platform constructs
"""
from contextlib import contextmanager

from jsii.errors import JSIIError


class PlatformError(Exception):
    """Base class for all platform errors"""


class MissingFieldError(PlatformError, ValueError):
    """A required configuration value was absent or empty"""

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"missing {field}")


class InvalidFormatError(PlatformError, ValueError):
    """A configuration value is present but malformed"""

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        super().__init__(f"{field} is invalid: {message}")


class CoercionError(PlatformError, TypeError):
    """A value does not have the shape the caller expected"""

    def __init__(self, what: str, value) -> None:
        self.what = what
        self.value = value
        super().__init__(f"failed to coerce {what}: {value!r}")


class UpstreamError(PlatformError):
    """The CDK runtime rejected a resource declaration"""

    def __init__(self, operation: str, cause: Exception) -> None:
        self.operation = operation
        self.cause = cause
        super().__init__(f"{operation} failed: {cause}")


def prefixed(error: MissingFieldError, prefix: str) -> MissingFieldError:
    """Re-scope a missing field error under a parent field name"""
    return MissingFieldError(f"{prefix}.{error.field}")


@contextmanager
def declaring(operation: str):
    """
    Convert errors raised by the CDK runtime while declaring resources
    into UpstreamError, naming the operation that failed
    """
    try:
        yield
    except PlatformError:
        raise
    except (JSIIError, RuntimeError) as e:
        raise UpstreamError(operation, e) from e
