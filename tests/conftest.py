"""Shared fixtures for the Job Ready tests."""

from datetime import date, datetime, timezone

import pytest

from jobready.config import REQUIRED_SETTINGS, MailSettings
from jobready.draft import ApplicationDraft
from jobready.errors import SubmissionResult
from jobready.state_machine import ApplicationWizard
from jobready.types import WizardStep

TODAY = date(2026, 10, 19)  # a Monday
NOW = datetime(2026, 10, 19, 8, 30, 15, 250000, tzinfo=timezone.utc)

VALID_FIELDS = {
    WizardStep.PERSONAL: {
        "name": "Jane Citizen",
        "email": "jane@example.com",
        "phone": "0412345678",
        "streetAddress": "1 George St",
        "city": "Sydney",
        "state": "nsw",
        "postcode": "2000",
    },
    WizardStep.EDUCATION: {
        "education": "bachelor",
        "fieldOfStudy": "Computer Science",
        "institution": "UNSW",
        "country": "au",
    },
    WizardStep.EXPERIENCE: {
        "hasITExperience": "no",
    },
    WizardStep.COURSE: {
        "selectedCourse": "helpdesk-l1",
        "intake": "2026-10-25",
        "referrer": "A friend",
    },
    WizardStep.TERMS: {
        "acceptFalseInfo": True,
        "acceptTerms": True,
    },
}


def all_valid_fields():
    fields = {}
    for step in WizardStep.ordered():
        fields.update(VALID_FIELDS[step])
    return fields


def valid_draft(**overrides) -> ApplicationDraft:
    data = all_valid_fields()
    data.update(overrides)
    return ApplicationDraft.from_dict(data)


def fill_until(wizard: ApplicationWizard, target: WizardStep) -> None:
    """Fill and advance through every step before ``target``."""
    for step in WizardStep.ordered():
        if step == target:
            return
        for name, value in VALID_FIELDS[step].items():
            wizard.set_field(name, value)
        assert wizard.advance(), f"could not advance past {step.name}"


def fill_step(wizard: ApplicationWizard, step: WizardStep) -> None:
    for name, value in VALID_FIELDS[step].items():
        wizard.set_field(name, value)


class RecordingSubmitter:
    """Submitter double that records payloads and replays canned results."""

    def __init__(self, *results: SubmissionResult):
        self.results = list(results) or [SubmissionResult.success(200)]
        self.payloads = []

    def __call__(self, payload):
        self.payloads.append(payload)
        if len(self.results) > 1:
            return self.results.pop(0)
        return self.results[0]


class FakeTransport:
    """Stands in for SMTPTransport; records every message it is asked to send."""

    def __init__(self, settings, fail_on_enter=None, fail_on_send=None):
        self.settings = settings
        self.sent = []
        self.opened = False
        self.closed = False
        self._fail_on_enter = fail_on_enter
        self._fail_on_send = fail_on_send

    def __enter__(self):
        if self._fail_on_enter is not None:
            raise self._fail_on_enter
        self.opened = True
        return self

    def send(self, message):
        if self._fail_on_send is not None:
            raise self._fail_on_send
        self.sent.append(message)

    def __exit__(self, *exc_info):
        self.closed = True


@pytest.fixture(autouse=True)
def clean_mail_env(monkeypatch):
    """Keep SMTP settings from the developer's environment out of the tests."""
    for name in REQUIRED_SETTINGS + ("smtp_port", "smtp_secure"):
        monkeypatch.delenv(name.upper(), raising=False)


@pytest.fixture
def mail_settings():
    return MailSettings(
        _env_file=None,
        smtp_host="smtp.example.com",
        smtp_port=587,
        smtp_secure=False,
        smtp_user="mailer",
        smtp_pass="secret",
        smtp_from="Heubert <noreply@heubert.com>",
        admin_email="admissions@heubert.com",
    )


@pytest.fixture
def empty_settings():
    return MailSettings(_env_file=None)


@pytest.fixture
def transports():
    """Factory for FakeTransport plus the list of transports it created."""
    created = []

    def factory(settings):
        transport = FakeTransport(settings)
        created.append(transport)
        return transport

    factory.created = created
    return factory


@pytest.fixture
def submitter():
    return RecordingSubmitter()


@pytest.fixture
def wizard(submitter):
    return ApplicationWizard(submitter=submitter, clock=lambda: NOW, today=lambda: TODAY)
