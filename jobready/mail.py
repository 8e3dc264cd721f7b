"""Notification emails for submitted applications.

Every accepted application produces two messages: a confirmation to the
applicant and a full summary to the admin address. Both are built before the
SMTP connection is opened, so a configuration or template problem never
results in only one of them going out.
"""

import logging
import smtplib
import ssl
from email.message import EmailMessage
from html import escape
from typing import Callable, List, Optional, Sequence, Tuple

from dateutil import parser as date_parser

from jobready.config import MailSettings
from jobready.draft import ApplicationDraft
from jobready.errors import MailConfigurationError, MailConnectionError, MailDeliveryError
from jobready.intake import format_intake
from jobready.options import COURSES, EDUCATION_LEVELS, STATES, country_label, label_for

logger = logging.getLogger(__name__)

PROGRAM_NAME = "Heubert's Job Ready Program"
APPLICANT_SUBJECT = f"Application Received - {PROGRAM_NAME}"
ADMIN_SUBJECT_PREFIX = "New Course Application Received - "
CONTACT_EMAIL = "info@heubert.com"
CONTACT_PHONE = "02 8315 7777"

ROW_STYLE = "padding: 8px; border: 1px solid #ddd;"
TABLE_STYLE = "border-collapse: collapse; width: 100%; max-width: 600px;"
STRIPE_STYLE = ' style="background-color: #f8f9fa;"'


def _single_line(value: Optional[str]) -> str:
    return " ".join((value or "").split())


def _yes_no(value) -> str:
    return "Yes" if value is True or value == "yes" else "No"


def format_submitted_at(value: Optional[str]) -> str:
    """Render the submission timestamp, or return it unchanged if unparsable."""
    if not value:
        return ""
    try:
        parsed = date_parser.isoparse(value)
    except (ValueError, OverflowError):
        return value
    return parsed.strftime("%d %B %Y, %H:%M %Z").strip().rstrip(",")


def course_label(application: ApplicationDraft) -> str:
    return label_for(COURSES, application.selected_course)


def summary_sections(application: ApplicationDraft) -> List[Tuple[str, List[Tuple[str, str]]]]:
    """Admin summary as (heading, [(label, value), ...]) sections, unescaped."""
    experience = [
        ("Education Level", label_for(EDUCATION_LEVELS, application.education)),
        ("Field of Study", application.field_of_study or ""),
        ("Institution", application.institution or ""),
        ("IT Experience", _yes_no(application.has_it_experience)),
    ]
    if application.has_it_experience == "yes":
        experience.extend([
            ("Years of Experience", str(application.years_of_experience or "")),
            ("Current Job", application.current_job or ""),
        ])
    return [
        ("Personal Details", [
            ("Name", application.name or ""),
            ("Email", application.email or ""),
            ("Phone", application.phone or ""),
        ]),
        ("Address", [
            ("Street Address", application.street_address or ""),
            ("City", application.city or ""),
            ("State", label_for(STATES, application.state)),
            ("Postcode", application.postcode or ""),
            ("Country", country_label(application.country, application.other_country)),
        ]),
        ("Education & Experience", experience),
        ("Course Details", [
            ("Selected Course", course_label(application)),
            ("Intake Date", format_intake(application.intake)),
            ("Referrer", application.referrer or ""),
            ("Application Date", format_submitted_at(application.submitted_at)),
        ]),
        ("Agreements", [
            ("Accepted False Info Terms", _yes_no(application.accept_false_info)),
            ("Accepted T&Cs", _yes_no(application.accept_terms)),
        ]),
    ]


def _html_table(rows: Sequence[Tuple[str, str]]) -> str:
    lines = [f'<table style="{TABLE_STYLE}">']
    for i, (label, value) in enumerate(rows):
        stripe = STRIPE_STYLE if i % 2 == 0 else ""
        lines.append(
            f'  <tr{stripe}>'
            f'<td style="{ROW_STYLE}"><strong>{escape(label)}:</strong></td>'
            f'<td style="{ROW_STYLE}">{escape(value)}</td></tr>'
        )
    lines.append("</table>")
    return "\n".join(lines)


def render_applicant_html(application: ApplicationDraft) -> str:
    safe_name = escape(application.name or "")
    safe_course = escape(course_label(application))
    return f"""
    <h1>Thank you for your application!</h1>
    <p>Dear {safe_name},</p>
    <p>We have received your application for the {safe_course} course.</p>
    <p>Our team will review your application and contact you shortly.</p>
    <p>If you require any assistance in the meantime, please contact us at {CONTACT_EMAIL} or call us on {CONTACT_PHONE}.</p>
    <br/>
    <p>Best regards,</p>
    <p>Heubert Team</p>
    """


def render_applicant_text(application: ApplicationDraft) -> str:
    return (
        f"Dear {application.name or ''},\n\n"
        f"We have received your application for the {course_label(application)} course.\n"
        "Our team will review your application and contact you shortly.\n\n"
        f"If you require any assistance in the meantime, please contact us at "
        f"{CONTACT_EMAIL} or call us on {CONTACT_PHONE}.\n\n"
        "Best regards,\nHeubert Team\n"
    )


def render_admin_html(application: ApplicationDraft) -> str:
    parts = ["<h1>New Application Received</h1>"]
    for heading, rows in summary_sections(application):
        parts.append(f"<h2>{escape(heading)}</h2>")
        parts.append(_html_table(rows))
    return "\n".join(parts)


def render_admin_text(application: ApplicationDraft) -> str:
    lines = ["New Application Received", ""]
    for heading, rows in summary_sections(application):
        lines.append(heading)
        lines.extend(f"  {label}: {value}" for label, value in rows)
        lines.append("")
    return "\n".join(lines)


def _message(sender: str, recipient: str, subject: str, text: str, html: str) -> EmailMessage:
    message = EmailMessage()
    message["From"] = sender
    message["To"] = recipient
    message["Subject"] = subject
    message.set_content(text)
    message.add_alternative(html, subtype="html")
    return message


def build_applicant_message(application: ApplicationDraft, settings: MailSettings) -> EmailMessage:
    return _message(
        sender=settings.smtp_from,
        recipient=_single_line(application.email),
        subject=APPLICANT_SUBJECT,
        text=render_applicant_text(application),
        html=render_applicant_html(application),
    )


def build_admin_message(application: ApplicationDraft, settings: MailSettings) -> EmailMessage:
    return _message(
        sender=settings.smtp_from,
        recipient=settings.admin_email,
        subject=ADMIN_SUBJECT_PREFIX + _single_line(application.name),
        text=render_admin_text(application),
        html=render_admin_html(application),
    )


class SMTPTransport:
    """Context-managed SMTP session.

    Connecting performs the handshake and login, so a bad host or bad
    credentials fail before anything is sent.
    """

    def __init__(self, settings: MailSettings) -> None:
        self.settings = settings
        self._smtp: Optional[smtplib.SMTP] = None

    def __enter__(self) -> "SMTPTransport":
        s = self.settings
        context = ssl.create_default_context()
        try:
            if s.smtp_secure:
                smtp = smtplib.SMTP_SSL(s.smtp_host, s.smtp_port, timeout=s.smtp_timeout, context=context)
            else:
                smtp = smtplib.SMTP(s.smtp_host, s.smtp_port, timeout=s.smtp_timeout)
                smtp.ehlo()
                if smtp.has_extn("starttls"):
                    smtp.starttls(context=context)
                    smtp.ehlo()
            smtp.login(s.smtp_user, s.smtp_pass)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"SMTP verification failed for {s.smtp_host}:{s.smtp_port}: {e!r}")
            raise MailConnectionError(f"Failed to connect to email server: {e}") from e
        logger.info("SMTP connection verified successfully")
        self._smtp = smtp
        return self

    def send(self, message: EmailMessage) -> None:
        recipient = message["To"]
        try:
            self._smtp.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            raise MailDeliveryError(recipient, f"Failed to send email to {recipient}: {e}") from e

    def __exit__(self, *exc_info) -> None:
        if self._smtp is None:
            return
        try:
            self._smtp.quit()
        except (smtplib.SMTPException, OSError) as e:
            logger.warning(f"SMTP quit failed: {e!r}")
        finally:
            self._smtp = None


TransportFactory = Callable[[MailSettings], SMTPTransport]


class MailDispatcher:
    """Builds and sends the two notification emails for an application.

    Examples:
        >>> dispatcher = MailDispatcher(MailSettings(_env_file=None))
        >>> dispatcher.settings.is_complete
        False
    """

    def __init__(self, settings: MailSettings, transport_factory: TransportFactory = SMTPTransport) -> None:
        self.settings = settings
        self._transport_factory = transport_factory

    def build_messages(self, application: ApplicationDraft) -> List[EmailMessage]:
        return [
            build_applicant_message(application, self.settings),
            build_admin_message(application, self.settings),
        ]

    def dispatch(self, application: ApplicationDraft) -> None:
        """Send both notifications.

        Raises:
            MailConfigurationError: Required SMTP settings are missing
            MailConnectionError: The SMTP handshake or login failed
            MailDeliveryError: The server rejected a message
        """
        missing = self.settings.missing_settings()
        if missing:
            raise MailConfigurationError(missing)

        messages = self.build_messages(application)
        with self._transport_factory(self.settings) as transport:
            for message in messages:
                transport.send(message)
                logger.info(f"Sent '{message['Subject']}' to {message['To']}")
        logger.info("Emails sent successfully")


__all__ = [
    "APPLICANT_SUBJECT",
    "ADMIN_SUBJECT_PREFIX",
    "summary_sections",
    "render_applicant_html",
    "render_admin_html",
    "build_applicant_message",
    "build_admin_message",
    "SMTPTransport",
    "MailDispatcher",
]
