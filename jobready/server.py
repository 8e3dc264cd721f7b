"""Submission endpoint.

Endpoints:
- POST /api/submit-application - Accept a finished application and send the
  notification emails
- GET /success.html - Static confirmation page the wizard redirects to
- GET /health - Liveness plus whether mail settings are complete

Run with ``uvicorn jobready.server:app``.
"""

import logging
from typing import Optional

from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from jobready.client import DEFAULT_ENDPOINT
from jobready.config import MailSettings, get_settings
from jobready.draft import ApplicationDraft
from jobready.errors import MailDispatchError, SubmissionResult
from jobready.mail import MailDispatcher
from jobready.state_machine import SUCCESS_PAGE

logger = logging.getLogger(__name__)

SUCCESS_HTML = """<!DOCTYPE html>
<html>
<head><title>Application Received</title></head>
<body>
  <h1>Thank you!</h1>
  <p>Your application has been submitted. A confirmation email is on its way.</p>
</body>
</html>
"""


class ApplicationSubmission(BaseModel):
    """Request body of the submission endpoint (camelCase wire names)."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", coerce_numbers_to_str=True)

    name: str = Field(min_length=1)
    email: str = Field(min_length=3)
    phone: Optional[str] = None
    street_address: Optional[str] = Field(default=None, alias="streetAddress")
    city: Optional[str] = None
    state: Optional[str] = None
    postcode: Optional[str] = None
    education: Optional[str] = None
    field_of_study: Optional[str] = Field(default=None, alias="fieldOfStudy")
    institution: Optional[str] = None
    country: Optional[str] = None
    other_country: Optional[str] = Field(default=None, alias="otherCountry")
    has_it_experience: Optional[str] = Field(default=None, alias="hasITExperience")
    years_of_experience: Optional[str] = Field(default=None, alias="yearsOfExperience")
    current_job: Optional[str] = Field(default=None, alias="currentJob")
    selected_course: Optional[str] = Field(default=None, alias="selectedCourse")
    intake: Optional[str] = None
    referrer: Optional[str] = None
    accept_false_info: Optional[bool] = Field(default=None, alias="acceptFalseInfo")
    accept_terms: Optional[bool] = Field(default=None, alias="acceptTerms")
    submitted_at: Optional[str] = Field(default=None, alias="submittedAt")

    def to_draft(self) -> ApplicationDraft:
        return ApplicationDraft.from_dict(self.model_dump(by_alias=True, exclude_none=True))


def get_dispatcher(request: Request) -> MailDispatcher:
    return request.app.state.dispatcher


def create_app(
    settings: Optional[MailSettings] = None,
    dispatcher: Optional[MailDispatcher] = None,
) -> FastAPI:
    """Build the submission service.

    Mail settings are loaded and checked once here. Missing settings do not
    stop the service; each submission then fails with a configuration error.
    """
    if settings is None:
        settings = dispatcher.settings if dispatcher is not None else get_settings()
    settings.log_summary()

    app = FastAPI(title="Job Ready Program Applications")
    app.state.settings = settings
    app.state.dispatcher = dispatcher or MailDispatcher(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["POST"],
        allow_headers=["Content-Type"],
    )

    @app.exception_handler(RequestValidationError)
    async def invalid_body(_request: Request, exc: RequestValidationError) -> JSONResponse:
        fields = sorted({".".join(str(p) for p in err["loc"][1:]) for err in exc.errors()} - {""})
        logger.warning(f"Rejected malformed application body: {fields}")
        return JSONResponse(
            status_code=422,
            content={"error": f"Invalid application data: {', '.join(fields) or 'body'}"},
        )

    @app.post(DEFAULT_ENDPOINT)
    def submit_application(
        submission: ApplicationSubmission,
        mailer: MailDispatcher = Depends(get_dispatcher),
    ) -> JSONResponse:
        application = submission.to_draft()
        logger.info(f"Received application for course '{application.selected_course}'")
        try:
            mailer.dispatch(application)
        except MailDispatchError as e:
            logger.error(f"Submission error: {e}")
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content=SubmissionResult.failure(e.public_message).to_dict(),
            )
        except Exception:
            logger.exception("Unexpected error while sending application emails")
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content=SubmissionResult.failure("An unknown error occurred").to_dict(),
            )
        return JSONResponse(content=SubmissionResult.success().to_dict())

    @app.get(SUCCESS_PAGE, response_class=HTMLResponse)
    def success_page() -> str:
        return SUCCESS_HTML

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok", "mailConfigured": app.state.settings.is_complete}

    return app


def __getattr__(name: str):
    # Built on first access; importing this module does not read the environment.
    if name == "app":
        return create_app()
    raise AttributeError(name)


__all__ = [
    "ApplicationSubmission",
    "create_app",
]
