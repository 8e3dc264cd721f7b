"""Error types and result records for the Job Ready application wizard.

Field-level validation failures are plain records (FieldError) that the wizard
collects for inline feedback. Submission outcomes travel as SubmissionResult
values so the wizard never has to catch transport exceptions. Failures on the
mail side are raised as MailDispatchError subclasses and turned into an error
response by the submission endpoint.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from jobready.types import FieldErrorCode, SubmissionStatus


@dataclass(frozen=True)
class FieldError:
    """Per-field validation error details.

    Attributes:
        path: Wire name of the field (e.g., "email", "otherCountry")
        code: Specific validation error code
        message: Human-readable error description
        expected: Optional - what was expected (pattern, enum values, etc.)
        received: Optional - what was actually received

    Examples:
        >>> err = FieldError(
        ...     path="postcode",
        ...     code=FieldErrorCode.INVALID_FORMAT,
        ...     message="Please enter a valid 4-digit postcode",
        ...     received="200",
        ... )
        >>> err.path
        'postcode'
    """
    path: str
    code: FieldErrorCode
    message: str
    expected: Optional[Any] = None
    received: Optional[Any] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        result: Dict[str, Any] = {
            "path": self.path,
            "code": self.code.value if isinstance(self.code, FieldErrorCode) else self.code,
            "message": self.message,
        }
        if self.expected is not None:
            result["expected"] = self.expected
        if self.received is not None:
            result["received"] = self.received
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FieldError":
        """Create FieldError from dict."""
        code = data["code"]
        if isinstance(code, str):
            code = FieldErrorCode(code)
        return cls(
            path=data["path"],
            code=code,
            message=data["message"],
            expected=data.get("expected"),
            received=data.get("received"),
        )


@dataclass(frozen=True)
class SubmissionResult:
    """Outcome of one submission attempt.

    Attributes:
        ok: Whether the backend accepted the application
        error: User-facing error message when ok is False
        status_code: HTTP status of the response, None when no response arrived
    """
    ok: bool
    error: Optional[str] = None
    status_code: Optional[int] = None

    @classmethod
    def success(cls, status_code: Optional[int] = None) -> "SubmissionResult":
        return cls(ok=True, status_code=status_code)

    @classmethod
    def failure(cls, error: str, status_code: Optional[int] = None) -> "SubmissionResult":
        return cls(ok=False, error=error, status_code=status_code)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the endpoint's response body shape."""
        if self.ok:
            return {"success": True}
        return {"error": self.error}


class JobReadyError(Exception):
    """Base class for all errors raised by this package."""


class UnknownFieldError(JobReadyError, KeyError):
    """Raised when a field name is not part of the application draft."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown application field: '{name}'")

    def __str__(self) -> str:
        return self.args[0]


class InvalidStateTransitionError(JobReadyError):
    """Raised when attempting an invalid status transition.

    Attributes:
        current_state: The status before the attempted transition
        target_state: The status that was attempted
    """

    def __init__(self, current_state: SubmissionStatus, target_state: SubmissionStatus, message: str):
        self.current_state = current_state
        self.target_state = target_state
        super().__init__(message)


class MailDispatchError(JobReadyError):
    """Base class for failures while sending notification emails."""

    #: Message safe to return to the browser.
    public_message = "Failed to submit application"


class MailConfigurationError(MailDispatchError):
    """Raised when required SMTP settings are missing."""

    public_message = "Missing required email configuration"

    def __init__(self, missing):
        self.missing = list(missing)
        super().__init__(
            f"Missing required email configuration: {', '.join(self.missing)}"
        )


class MailConnectionError(MailDispatchError):
    """Raised when the SMTP server cannot be reached or rejects the handshake."""

    public_message = "Failed to connect to email server"


class MailDeliveryError(MailDispatchError):
    """Raised when a message is rejected after the connection was verified."""

    public_message = "Failed to send notification email"

    def __init__(self, recipient: str, message: str):
        self.recipient = recipient
        super().__init__(message)


__all__ = [
    "FieldError",
    "SubmissionResult",
    "JobReadyError",
    "UnknownFieldError",
    "InvalidStateTransitionError",
    "MailDispatchError",
    "MailConfigurationError",
    "MailConnectionError",
    "MailDeliveryError",
]
