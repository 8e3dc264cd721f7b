"""Job Ready Program application wizard.

Job Ready collects a five-step course application from a prospective student:
- Application wizard state machine with per-step validation gating
- Conditional fields that are only required when their trigger is selected
- Weekly intake dates per course
- A single-attempt submission client
- A submission endpoint that emails the applicant and the admin via SMTP

Basic usage:
    >>> from jobready import ApplicationWizard, SubmissionClient
    >>> with SubmissionClient("http://localhost:8000/api/submit-application") as client:
    ...     wizard = ApplicationWizard(submitter=client)
    ...     label = wizard.progress()["label"]
    >>> label
    'Step 1 of 5: Personal Information'
"""

__version__ = "0.1.0"
__author__ = "Heubert Team"

VERSION = (0, 1, 0)

from jobready.client import SubmissionClient
from jobready.draft import ApplicationDraft
from jobready.state_machine import ApplicationWizard

__all__ = [
    "__version__",
    "VERSION",
    "ApplicationDraft",
    "ApplicationWizard",
    "SubmissionClient",
]
