"""Step and field validation for the application wizard.

Each wizard step has a JSON Schema describing what the draft must contain
before the applicant may move past it. Conditional requirements (the free-text
country, the experience details) are expressed with ``if``/``then`` so the
dependent fields are ignored unless their trigger value is selected.

Field-level validators for email, phone and postcode run on every keystroke
and only feed inline error messages; they never block typing.
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import jsonschema
from jsonschema import Draft7Validator

from jobready.draft import ApplicationDraft
from jobready.errors import FieldError
from jobready.options import EXPERIENCE_CHOICES, OTHER_COUNTRY
from jobready.types import FieldErrorCode, WizardStep

EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+\Z"
PHONE_PATTERN = r"^[0-9]{9,10}\Z"
POSTCODE_PATTERN = r"^[0-9]{4}\Z"

_EMAIL_RE = re.compile(EMAIL_PATTERN)
_PHONE_RE = re.compile(PHONE_PATTERN)
_POSTCODE_RE = re.compile(POSTCODE_PATTERN)

NON_BLANK: Dict[str, Any] = {"type": "string", "pattern": r"\S"}

FIELD_LABELS: Dict[str, str] = {
    "name": "Full Name",
    "email": "Email Address",
    "phone": "Mobile Number",
    "streetAddress": "Street Address",
    "city": "City/Suburb",
    "state": "State",
    "postcode": "Postcode",
    "education": "Highest Level of Education",
    "fieldOfStudy": "Course Name",
    "institution": "Institution",
    "country": "Country",
    "otherCountry": "Country name",
    "hasITExperience": "IT experience",
    "yearsOfExperience": "Years of Work Experience",
    "currentJob": "Current/Most Recent Job Title",
    "selectedCourse": "Course",
    "intake": "Intake",
    "referrer": "Referrer",
    "acceptFalseInfo": "False information declaration",
    "acceptTerms": "Terms and conditions",
}

FIELD_MESSAGES: Dict[str, str] = {
    "email": "Please enter a valid email address",
    "phone": "Please enter a valid mobile number",
    "postcode": "Please enter a valid 4-digit postcode",
}

STEP_SCHEMAS: Dict[WizardStep, Dict[str, Any]] = {
    WizardStep.PERSONAL: {
        "type": "object",
        "properties": {
            "name": NON_BLANK,
            "email": {"type": "string", "pattern": EMAIL_PATTERN},
            "phone": {"type": "string", "pattern": PHONE_PATTERN},
            "streetAddress": NON_BLANK,
            "city": NON_BLANK,
            "state": NON_BLANK,
            "postcode": {"type": "string", "pattern": POSTCODE_PATTERN},
        },
        "required": ["name", "email", "phone", "streetAddress", "city", "state", "postcode"],
    },
    WizardStep.EDUCATION: {
        "type": "object",
        "properties": {
            "education": NON_BLANK,
            "fieldOfStudy": NON_BLANK,
            "institution": NON_BLANK,
            "country": NON_BLANK,
        },
        "required": ["education", "fieldOfStudy", "institution", "country"],
        "if": {
            "properties": {"country": {"const": OTHER_COUNTRY}},
            "required": ["country"],
        },
        "then": {
            "properties": {"otherCountry": NON_BLANK},
            "required": ["otherCountry"],
        },
    },
    WizardStep.EXPERIENCE: {
        "type": "object",
        "properties": {
            "hasITExperience": {"type": "string", "enum": list(EXPERIENCE_CHOICES)},
        },
        "required": ["hasITExperience"],
        "if": {
            "properties": {"hasITExperience": {"const": "yes"}},
            "required": ["hasITExperience"],
        },
        "then": {
            "properties": {
                "yearsOfExperience": NON_BLANK,
                "currentJob": NON_BLANK,
            },
            "required": ["yearsOfExperience", "currentJob"],
        },
    },
    WizardStep.COURSE: {
        "type": "object",
        "properties": {
            "selectedCourse": NON_BLANK,
            "intake": NON_BLANK,
        },
        "required": ["selectedCourse", "intake"],
    },
    WizardStep.TERMS: {
        "type": "object",
        "properties": {
            "acceptFalseInfo": {"type": "boolean", "const": True},
            "acceptTerms": {"type": "boolean", "const": True},
        },
        "required": ["acceptFalseInfo", "acceptTerms"],
    },
}


def validate_email(value: Optional[str]) -> bool:
    """Check a standard ``local@domain.tld`` shape.

    Examples:
        >>> validate_email("a@b.co")
        True
        >>> validate_email("a@b")
        False
    """
    return isinstance(value, str) and _EMAIL_RE.fullmatch(value) is not None


def validate_phone(value: Optional[str]) -> bool:
    """Mobile numbers are 9 or 10 digits with no separators."""
    return isinstance(value, str) and _PHONE_RE.fullmatch(value) is not None


def validate_postcode(value: Optional[str]) -> bool:
    """Australian postcodes are exactly 4 digits."""
    return isinstance(value, str) and _POSTCODE_RE.fullmatch(value) is not None


FIELD_VALIDATORS = {
    "email": validate_email,
    "phone": validate_phone,
    "postcode": validate_postcode,
}


def field_error_message(name: str, value: Any) -> Optional[str]:
    """Inline error for a field that has a field-level validator.

    Blank values and fields without a validator produce no message; the step
    validator is responsible for required-ness.
    """
    check = FIELD_VALIDATORS.get(name)
    if check is None or not isinstance(value, str) or not value.strip():
        return None
    if check(value):
        return None
    return FIELD_MESSAGES[name]


@dataclass(frozen=True)
class ValidationResult:
    """Result of validating a draft against one step.

    Attributes:
        is_valid: Whether the step's data passed all checks
        errors: Field-level validation errors (empty if valid)
        missing_fields: Wire names of required fields that are absent or blank
        invalid_fields: Wire names of fields present but malformed
    """
    is_valid: bool
    errors: List[FieldError]
    missing_fields: Optional[List[str]] = None
    invalid_fields: Optional[List[str]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        result: Dict[str, Any] = {
            "isValid": self.is_valid,
            "errors": [e.to_dict() for e in self.errors],
        }
        if self.missing_fields is not None:
            result["missingFields"] = self.missing_fields
        if self.invalid_fields is not None:
            result["invalidFields"] = self.invalid_fields
        return result


class StepValidator:
    """JSON Schema validator for a single wizard step.

    Wraps jsonschema and translates its errors into FieldError records keyed
    by the draft's wire field names.

    Examples:
        >>> validator = StepValidator(WizardStep.COURSE)
        >>> validator.validate(ApplicationDraft(selected_course="helpdesk-l1")).missing_fields
        ['intake']
    """

    def __init__(self, step: WizardStep, schema: Optional[Dict[str, Any]] = None) -> None:
        """Initialize the validator.

        Raises:
            jsonschema.SchemaError: If the schema itself is invalid
        """
        self.step = step
        self.schema = schema if schema is not None else STEP_SCHEMAS[step]
        Draft7Validator.check_schema(self.schema)
        self.validator = Draft7Validator(self.schema)

    def validate(self, draft: ApplicationDraft) -> ValidationResult:
        errors = sorted(
            self.validator.iter_errors(draft.to_dict()),
            key=lambda e: list(e.path),
        )
        if not errors:
            return ValidationResult(is_valid=True, errors=[], missing_fields=[], invalid_fields=[])

        field_errors: List[FieldError] = []
        missing_fields: List[str] = []
        invalid_fields: List[str] = []
        for error in errors:
            field_error = self._translate_error(error)
            field_errors.append(field_error)
            if field_error.code == FieldErrorCode.REQUIRED:
                missing_fields.append(field_error.path)
            else:
                invalid_fields.append(field_error.path)

        return ValidationResult(
            is_valid=False,
            errors=field_errors,
            missing_fields=missing_fields,
            invalid_fields=invalid_fields,
        )

    def is_valid(self, draft: ApplicationDraft) -> bool:
        return self.validator.is_valid(draft.to_dict())

    def _translate_error(self, error: jsonschema.ValidationError) -> FieldError:
        """Map a jsonschema error onto a FieldError.

        Error mapping:
            - 'required' errors, and blank strings -> REQUIRED
            - 'type' errors -> INVALID_TYPE
            - 'pattern' errors -> INVALID_FORMAT
            - 'enum' or 'const' errors -> INVALID_VALUE
            - anything else -> CUSTOM
        """
        path = ".".join(str(p) for p in error.path)

        if error.validator == "required":
            missing = error.message.split("'")[1] if "'" in error.message else "field"
            full_path = f"{path}.{missing}" if path else missing
            return FieldError(
                path=full_path,
                code=FieldErrorCode.REQUIRED,
                message=f"{_label(full_path)} is required",
                expected="required field",
            )

        if error.validator == "pattern" and isinstance(error.instance, str) and not error.instance.strip():
            return FieldError(
                path=path,
                code=FieldErrorCode.REQUIRED,
                message=f"{_label(path)} is required",
                expected="required field",
                received=error.instance,
            )

        if error.validator == "type":
            return FieldError(
                path=path,
                code=FieldErrorCode.INVALID_TYPE,
                message=f"{_label(path)} has invalid type. Expected {error.validator_value}, "
                f"got {type(error.instance).__name__}",
                expected=error.validator_value,
                received=type(error.instance).__name__,
            )

        if error.validator == "pattern":
            return FieldError(
                path=path,
                code=FieldErrorCode.INVALID_FORMAT,
                message=FIELD_MESSAGES.get(path, f"{_label(path)} has an invalid format"),
                expected=f"pattern: {error.validator_value}",
                received=error.instance,
            )

        if error.validator in ("enum", "const"):
            expected = error.validator_value
            return FieldError(
                path=path,
                code=FieldErrorCode.INVALID_VALUE,
                message=f"{_label(path)} has invalid value. Must be one of: {expected}"
                if error.validator == "enum"
                else f"{_label(path)} must be accepted",
                expected=expected,
                received=error.instance,
            )

        return FieldError(
            path=path,
            code=FieldErrorCode.CUSTOM,
            message=f"{_label(path)} validation failed: {error.message}",
            expected=error.validator_value,
            received=error.instance,
        )


def _label(path: str) -> str:
    return FIELD_LABELS.get(path, path or "Field")


STEP_VALIDATORS: Dict[WizardStep, StepValidator] = {
    step: StepValidator(step) for step in WizardStep
}


def is_step_valid(step: WizardStep, draft: ApplicationDraft) -> bool:
    """Whether ``draft`` holds everything ``step`` requires."""
    return STEP_VALIDATORS[step].is_valid(draft)


def validate_step(step: WizardStep, draft: ApplicationDraft) -> ValidationResult:
    return STEP_VALIDATORS[step].validate(draft)


def validate_application(draft: ApplicationDraft) -> ValidationResult:
    """Validate every step at once, e.g. before dispatching notifications."""
    errors: List[FieldError] = []
    missing: List[str] = []
    invalid: List[str] = []
    for step in WizardStep.ordered():
        result = validate_step(step, draft)
        errors.extend(result.errors)
        missing.extend(result.missing_fields or [])
        invalid.extend(result.invalid_fields or [])
    return ValidationResult(
        is_valid=not errors,
        errors=errors,
        missing_fields=missing,
        invalid_fields=invalid,
    )


__all__ = [
    "EMAIL_PATTERN",
    "PHONE_PATTERN",
    "POSTCODE_PATTERN",
    "FIELD_LABELS",
    "FIELD_MESSAGES",
    "STEP_SCHEMAS",
    "validate_email",
    "validate_phone",
    "validate_postcode",
    "field_error_message",
    "ValidationResult",
    "StepValidator",
    "STEP_VALIDATORS",
    "is_step_valid",
    "validate_step",
    "validate_application",
]
