"""Exception hierarchy for batch-encoder.

Fatal errors (ConfigError, ValidationError) abort a batch before any plan is
produced. ProbeFailure is recovered per file by substituting a default
descriptor. PlanConsistencyError indicates a programming error in the
compiler and is never expected in normal operation.
"""


class BatchEncoderError(Exception):
    """Base exception for all batch-encoder errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ConfigError(BatchEncoderError):
    """Raised when configuration or profile definitions are invalid."""

    pass


class UnknownProfileError(ConfigError):
    """Raised when a requested profile key is not in the profile table."""

    def __init__(self, kind: str, key: str) -> None:
        """Initialize unknown profile error.

        Args:
            kind: Profile family ("video" or "audio").
            key: The profile key that could not be resolved.
        """
        self.kind = kind
        self.key = key
        super().__init__(f"Unknown {kind.capitalize()} Profile '{key}'")


class ValidationError(BatchEncoderError):
    """Raised when a user-supplied modifier or argument is malformed."""

    def __init__(self, message: str, field: str | None = None, value=None) -> None:
        """Initialize validation error.

        Args:
            message: Human-readable error description.
            field: Name of the offending request field.
            value: The rejected value.
        """
        self.field = field
        self.value = value
        super().__init__(message)


class ProbeFailure(BatchEncoderError):
    """Raised when probe output for a file cannot be parsed."""

    def __init__(self, message: str, path: str | None = None) -> None:
        self.path = path
        super().__init__(message)


class PlanConsistencyError(BatchEncoderError):
    """Raised when a compiled plan violates an internal invariant."""

    pass


class TargetError(BatchEncoderError):
    """Raised when the target path is missing or holds no media files."""

    def __init__(self, message: str, path: str | None = None) -> None:
        self.path = path
        super().__init__(message)


class NoFilesFoundError(TargetError):
    """Raised when a target directory holds no supported media files."""

    pass
