"""Option tables shared by the wizard and the mail dispatcher.

Codes are what the form stores in the draft; labels are what people read.
Lookups used while formatting notifications never raise: an unknown code is
shown as-is.
"""

from typing import Any, Dict, List, Optional, Tuple

OTHER_COUNTRY = "other"

STATES: Dict[str, str] = {
    "nsw": "New South Wales",
    "vic": "Victoria",
    "qld": "Queensland",
    "wa": "Western Australia",
    "sa": "South Australia",
    "tas": "Tasmania",
    "act": "Australian Capital Territory",
    "nt": "Northern Territory",
}

COUNTRIES: Dict[str, str] = {
    "au": "Australia",
    "np": "Nepal",
    "in": "India",
    "us": "United States",
    "uk": "United Kingdom",
    "ca": "Canada",
}

EDUCATION_LEVELS: Dict[str, str] = {
    "high-school": "High School",
    "associate": "Associate Degree (Diploma)",
    "bachelor": "Bachelor Degree",
    "master": "Master Degree",
}

COURSES: Dict[str, str] = {
    "helpdesk-l1": "IT Helpdesk Support (L1) - 6 weeks",
    "support-l2": "IT Support and Networking (L2) - 10 weeks",
    "cyber-security": "Cyber Security - 10 weeks",
}

EXPERIENCE_CHOICES: Tuple[str, str] = ("yes", "no")


def label_for(table: Dict[str, str], value: Optional[Any]) -> str:
    """Return the display label for ``value``, or the raw value if unknown.

    Matching is case-insensitive. ``None`` renders as an empty string.

    Examples:
        >>> label_for(STATES, "NSW")
        'New South Wales'
        >>> label_for(STATES, "zz")
        'zz'
    """
    if value is None:
        return ""
    raw = str(value)
    return table.get(raw.strip().lower(), raw)


def country_choices() -> List[Tuple[str, str]]:
    """Country select options, with the free-text "Other" entry last."""
    return list(COUNTRIES.items()) + [(OTHER_COUNTRY, "Other")]


def country_label(country: Optional[str], other_country: Optional[str] = None) -> str:
    """Display name for a country code, using the free-text value for "other"."""
    if country and country.strip().lower() == OTHER_COUNTRY and other_country:
        return other_country
    return label_for(COUNTRIES, country)


__all__ = [
    "OTHER_COUNTRY",
    "STATES",
    "COUNTRIES",
    "EDUCATION_LEVELS",
    "COURSES",
    "EXPERIENCE_CHOICES",
    "label_for",
    "country_choices",
    "country_label",
]
