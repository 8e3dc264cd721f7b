"""Application draft record and its wire payload.

The draft is built field by field while the applicant moves through the
wizard. It is immutable: every edit produces a new draft, and the copy sent to
the backend is the only one that ever carries ``submitted_at``.

Attribute names are snake_case; the JSON payload uses the camelCase names the
submission endpoint expects.
"""

import dataclasses
from dataclasses import dataclass, fields
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from jobready.errors import UnknownFieldError


@dataclass(frozen=True)
class ApplicationDraft:
    """In-progress application, one attribute per form field.

    Unset fields are ``None``. ``submitted_at`` stays ``None`` until
    :meth:`stamp` is called at submission time.

    Examples:
        >>> draft = ApplicationDraft().with_field("name", "Jane Citizen")
        >>> draft.to_dict()
        {'name': 'Jane Citizen'}
    """
    # Personal
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    street_address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postcode: Optional[str] = None
    # Education
    education: Optional[str] = None
    field_of_study: Optional[str] = None
    institution: Optional[str] = None
    country: Optional[str] = None
    other_country: Optional[str] = None
    # Experience
    has_it_experience: Optional[str] = None
    years_of_experience: Optional[str] = None
    current_job: Optional[str] = None
    # Course
    selected_course: Optional[str] = None
    intake: Optional[str] = None
    referrer: Optional[str] = None
    # Terms
    accept_false_info: Optional[bool] = None
    accept_terms: Optional[bool] = None

    submitted_at: Optional[str] = None

    def with_field(self, name: str, value: Any) -> "ApplicationDraft":
        """Return a copy with one field replaced.

        Args:
            name: Wire (camelCase) or attribute name of the field

        Raises:
            UnknownFieldError: If the name is not a draft field, or is
                ``submittedAt``, which only :meth:`stamp` may set
        """
        attr = attribute_name(name)
        if attr == "submitted_at":
            raise UnknownFieldError(name)
        return dataclasses.replace(self, **{attr: value})

    def get(self, name: str) -> Any:
        """Read a field by wire or attribute name."""
        return getattr(self, attribute_name(name))

    def stamp(self, now: Optional[datetime] = None) -> "ApplicationDraft":
        """Return the frozen copy sent to the backend, with submitted_at set.

        The timestamp is UTC ISO-8601 with millisecond precision and a ``Z``
        suffix.
        """
        now = now or datetime.now(timezone.utc)
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        ts = now.astimezone(timezone.utc).isoformat(timespec="milliseconds")
        return dataclasses.replace(self, submitted_at=ts.replace("+00:00", "Z"))

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the camelCase payload, omitting unset fields."""
        result: Dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is not None:
                result[WIRE_NAMES[f.name]] = value
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ApplicationDraft":
        """Create a draft from a camelCase payload. Unknown keys are ignored."""
        kwargs = {
            FIELD_NAMES[key]: value
            for key, value in data.items()
            if key in FIELD_NAMES
        }
        return cls(**kwargs)


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


# attribute name -> wire name
WIRE_NAMES: Dict[str, str] = {f.name: _camel(f.name) for f in fields(ApplicationDraft)}
WIRE_NAMES["has_it_experience"] = "hasITExperience"

# wire name -> attribute name
FIELD_NAMES: Dict[str, str] = {wire: attr for attr, wire in WIRE_NAMES.items()}


def attribute_name(name: str) -> str:
    """Resolve a wire or attribute name to the dataclass attribute."""
    if name in FIELD_NAMES:
        return FIELD_NAMES[name]
    if name in WIRE_NAMES:
        return name
    raise UnknownFieldError(name)


__all__ = [
    "ApplicationDraft",
    "FIELD_NAMES",
    "WIRE_NAMES",
    "attribute_name",
]
