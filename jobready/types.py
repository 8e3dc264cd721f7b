"""Core type definitions for the Job Ready application wizard.

This module defines the fundamental types used throughout the wizard:
- WizardStep: The five ordered steps of the application form
- SubmissionStatus: Lifecycle of a single wizard session
- EventType: Audit event types emitted by the wizard
- FieldErrorCode: Validation error codes for individual fields
"""

from enum import Enum
from typing import List


class WizardStep(int, Enum):
    """Ordered steps of the application form.

    Each member is a distinct step kind; its integer value is the position in
    the wizard. Navigation goes through ``next_step``/``previous_step`` rather
    than raw index arithmetic.
    """
    PERSONAL = 0
    EDUCATION = 1
    EXPERIENCE = 2
    COURSE = 3
    TERMS = 4

    @property
    def title(self) -> str:
        return STEP_TITLES[self]

    @property
    def is_first(self) -> bool:
        return self is WizardStep.PERSONAL

    @property
    def is_last(self) -> bool:
        return self is WizardStep.TERMS

    def next_step(self) -> "WizardStep":
        if self.is_last:
            return self
        return WizardStep(self.value + 1)

    def previous_step(self) -> "WizardStep":
        if self.is_first:
            return self
        return WizardStep(self.value - 1)

    @classmethod
    def ordered(cls) -> List["WizardStep"]:
        return sorted(cls, key=lambda s: s.value)


STEP_TITLES = {
    WizardStep.PERSONAL: "Personal Information",
    WizardStep.EDUCATION: "Education",
    WizardStep.EXPERIENCE: "Work Experience",
    WizardStep.COURSE: "Course Selection",
    WizardStep.TERMS: "Terms and Conditions",
}


class SubmissionStatus(str, Enum):
    """Submission status of a wizard session.

    Terminal status: submitted.
    """
    IDLE = "idle"
    SUBMITTING = "submitting"
    SUBMITTED = "submitted"


class EventType(str, Enum):
    """Audit event types emitted by the wizard."""
    FIELD_UPDATED = "field.updated"
    FIELD_INVALID = "field.invalid"
    INTAKE_CLEARED = "intake.cleared"
    STEP_ADVANCED = "step.advanced"
    STEP_RETREATED = "step.retreated"
    SUBMISSION_STARTED = "submission.started"
    SUBMISSION_SUCCEEDED = "submission.succeeded"
    SUBMISSION_FAILED = "submission.failed"


class FieldErrorCode(str, Enum):
    """Validation error codes for individual field failures."""
    REQUIRED = "required"
    INVALID_TYPE = "invalid_type"
    INVALID_FORMAT = "invalid_format"
    INVALID_VALUE = "invalid_value"
    TOO_LONG = "too_long"
    CUSTOM = "custom"


__all__ = [
    "WizardStep",
    "STEP_TITLES",
    "SubmissionStatus",
    "EventType",
    "FieldErrorCode",
]
