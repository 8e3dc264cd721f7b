"""Application wizard state machine.

The wizard owns the current step, the accumulated draft, the inline field
errors and the submission status. It gates progression on the step
validators and hands the finished application to a submitter callable,
normally :meth:`jobready.client.SubmissionClient.submit_application`.

Status transitions are table-driven::

    idle --> submitting --> submitted (terminal)
                 |
                 +--> idle (submission failed, retry from the last step)

Usage:
    >>> wizard = ApplicationWizard(submitter=lambda payload: SubmissionResult.success())
    >>> wizard.step
    <WizardStep.PERSONAL: 0>
    >>> wizard.advance()
    False
"""

import logging
import uuid
from datetime import date, datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Set

from jobready.draft import WIRE_NAMES, ApplicationDraft, attribute_name
from jobready.errors import InvalidStateTransitionError, SubmissionResult
from jobready.events import EventEmitter, WizardEvent
from jobready.intake import intake_options, matches_cadence
from jobready.options import OTHER_COUNTRY
from jobready.types import EventType, SubmissionStatus, WizardStep
from jobready.validation import ValidationResult, field_error_message, is_step_valid, validate_step

logger = logging.getLogger(__name__)

SUCCESS_PAGE = "/success.html"

Submitter = Callable[[Dict[str, Any]], SubmissionResult]

VALID_TRANSITIONS: Dict[SubmissionStatus, Set[SubmissionStatus]] = {
    SubmissionStatus.IDLE: {SubmissionStatus.SUBMITTING},
    SubmissionStatus.SUBMITTING: {SubmissionStatus.IDLE, SubmissionStatus.SUBMITTED},
    # Terminal
    SubmissionStatus.SUBMITTED: set(),
}

# Fields shown on each step regardless of other answers.
STEP_FIELDS: Dict[WizardStep, List[str]] = {
    WizardStep.PERSONAL: ["name", "email", "phone", "streetAddress", "city", "state", "postcode"],
    WizardStep.EDUCATION: ["education", "fieldOfStudy", "institution", "country"],
    WizardStep.EXPERIENCE: ["hasITExperience"],
    WizardStep.COURSE: ["selectedCourse", "referrer"],
    WizardStep.TERMS: ["acceptFalseInfo", "acceptTerms"],
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ApplicationWizard:
    """Five-step application form with validation gating.

    Attributes:
        step: Current wizard step
        status: Submission status
        draft: Accumulated application data
        errors: Inline field errors, keyed by wire field name
        last_error: Message of the last failed submission, if any
        submitted_draft: The stamped copy sent by the last submission attempt
        redirect_url: Confirmation page to navigate to once submitted

    Examples:
        >>> wizard = ApplicationWizard(submitter=lambda payload: SubmissionResult.success())
        >>> wizard.set_field("email", "not-an-email")
        True
        >>> wizard.errors
        {'email': 'Please enter a valid email address'}
    """

    def __init__(
        self,
        submitter: Submitter,
        emitter: Optional[EventEmitter] = None,
        clock: Callable[[], datetime] = _utcnow,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._submitter = submitter
        self.emitter = emitter or EventEmitter()
        self._clock = clock
        self._today = today

        self.step = WizardStep.PERSONAL
        self.status = SubmissionStatus.IDLE
        self.draft = ApplicationDraft()
        self.errors: Dict[str, str] = {}
        self.last_error: Optional[str] = None
        self.submitted_draft: Optional[ApplicationDraft] = None
        self.redirect_url: Optional[str] = None
        self._events: List[WizardEvent] = []

    # -- status ---------------------------------------------------------

    def can_transition_to(self, target: SubmissionStatus) -> bool:
        return target in VALID_TRANSITIONS.get(self.status, set())

    def transition_to(self, target: SubmissionStatus) -> None:
        """Move to a new submission status.

        Raises:
            InvalidStateTransitionError: If the transition is not allowed
        """
        if not self.can_transition_to(target):
            allowed = VALID_TRANSITIONS[self.status]
            raise InvalidStateTransitionError(
                current_state=self.status,
                target_state=target,
                message=(
                    f"Invalid status transition: cannot move from '{self.status.value}' "
                    f"to '{target.value}'. Allowed: {', '.join(sorted(s.value for s in allowed))}"
                    if allowed
                    else f"Invalid status transition: '{self.status.value}' is terminal."
                ),
            )
        self.status = target

    def is_terminal(self) -> bool:
        return not VALID_TRANSITIONS[self.status]

    # -- queries --------------------------------------------------------

    def is_current_step_valid(self) -> bool:
        return is_step_valid(self.step, self.draft)

    def validate_current_step(self) -> ValidationResult:
        return validate_step(self.step, self.draft)

    def can_advance(self) -> bool:
        """Whether the Next/Submit control is enabled."""
        return self.status == SubmissionStatus.IDLE and self.is_current_step_valid()

    def can_retreat(self) -> bool:
        """Whether the Previous control is enabled."""
        return self.status == SubmissionStatus.IDLE and not self.step.is_first

    def visible_fields(self, step: Optional[WizardStep] = None) -> List[str]:
        """Fields to render for ``step`` (default: the current step).

        Conditional fields only appear once their trigger value is selected.
        """
        step = self.step if step is None else step
        visible = list(STEP_FIELDS[step])
        if step == WizardStep.EDUCATION and self.draft.country == OTHER_COUNTRY:
            visible.append("otherCountry")
        elif step == WizardStep.EXPERIENCE and self.draft.has_it_experience == "yes":
            visible.extend(["yearsOfExperience", "currentJob"])
        elif step == WizardStep.COURSE and self.draft.selected_course:
            visible.insert(1, "intake")
        return visible

    def intake_options(self) -> List[str]:
        """Selectable intake dates for the currently selected course."""
        if not self.draft.selected_course:
            return []
        return intake_options(self.draft.selected_course, self._today())

    def progress(self) -> Dict[str, Any]:
        total = len(WizardStep)
        return {
            "step": self.step.value + 1,
            "total": total,
            "title": self.step.title,
            "label": f"Step {self.step.value + 1} of {total}: {self.step.title}",
        }

    def get_events(self) -> List[WizardEvent]:
        return list(self._events)

    # -- commands -------------------------------------------------------

    def set_field(self, name: str, value: Any) -> bool:
        """Merge one value into the draft and refresh its inline error.

        Returns False without changing anything once the application has been
        submitted.

        Raises:
            UnknownFieldError: If ``name`` is not a draft field
        """
        wire = WIRE_NAMES[attribute_name(name)]
        if self.status == SubmissionStatus.SUBMITTED:
            return False

        previous_course = self.draft.selected_course
        self.draft = self.draft.with_field(wire, value)
        self.errors.pop(wire, None)
        self._emit(EventType.FIELD_UPDATED, {"field": wire})

        message = field_error_message(wire, value)
        if message:
            self.errors[wire] = message
            self._emit(EventType.FIELD_INVALID, {"field": wire, "message": message})

        if wire == "selectedCourse" and value != previous_course:
            self._clear_stale_intake()
        return True

    def _clear_stale_intake(self) -> None:
        intake = self.draft.intake
        if intake and not matches_cadence(self.draft.selected_course, intake):
            self.draft = self.draft.with_field("intake", None)
            self._emit(EventType.INTAKE_CLEARED, {"intake": intake})

    def advance(self) -> bool:
        """Move to the next step, or submit when on the last one.

        Returns:
            True if the wizard moved forward (or the submission succeeded)
        """
        if not self.can_advance():
            return False
        if self.step.is_last:
            return self.submit().ok
        previous = self.step
        self.step = self.step.next_step()
        self._emit(EventType.STEP_ADVANCED, {"from": previous.value, "to": self.step.value})
        return True

    def retreat(self) -> bool:
        """Go back one step. Earlier steps are not re-validated."""
        if not self.can_retreat():
            return False
        previous = self.step
        self.step = self.step.previous_step()
        self._emit(EventType.STEP_RETREATED, {"from": previous.value, "to": self.step.value})
        return True

    def submit(self) -> SubmissionResult:
        """Send the application.

        Only fires on the last step, with a valid step and an idle status;
        otherwise a failed result is returned and nothing changes.
        """
        if not (self.step.is_last and self.can_advance()):
            return SubmissionResult.failure("Application is not ready to submit")

        self.transition_to(SubmissionStatus.SUBMITTING)
        self.submitted_draft = self.draft.stamp(self._clock())
        self._emit(EventType.SUBMISSION_STARTED, {"submittedAt": self.submitted_draft.submitted_at})

        try:
            result = self._submitter(self.submitted_draft.to_dict())
        except Exception as e:
            logger.exception("Submitter raised instead of returning a result")
            result = SubmissionResult.failure(str(e) or "Unknown error occurred")

        if result.ok:
            self.transition_to(SubmissionStatus.SUBMITTED)
            self.last_error = None
            self.redirect_url = SUCCESS_PAGE
            self._emit(EventType.SUBMISSION_SUCCEEDED, {"redirect": SUCCESS_PAGE})
        else:
            self.transition_to(SubmissionStatus.IDLE)
            self.last_error = result.error or "Unknown error occurred"
            logger.warning(f"Submission failed: {self.last_error}")
            self._emit(EventType.SUBMISSION_FAILED, {"error": self.last_error})
        return result

    def _emit(self, event_type: EventType, payload: Optional[Dict[str, Any]] = None) -> None:
        event = WizardEvent(
            event_id=f"evt_{uuid.uuid4().hex[:16]}",
            type=event_type,
            ts=self._clock(),
            step=self.step,
            status=self.status,
            payload=payload,
        )
        self._events.append(event)
        self.emitter.emit(event)


__all__ = [
    "ApplicationWizard",
    "Submitter",
    "VALID_TRANSITIONS",
    "STEP_FIELDS",
    "SUCCESS_PAGE",
]
