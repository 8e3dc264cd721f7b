"""HTTP client for the application submission endpoint.

One POST per user-initiated submit. Nothing here retries: a failure is
returned to the wizard as a SubmissionResult so the applicant can read the
message and click submit again.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from jobready.errors import SubmissionResult

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "/api/submit-application"
DEFAULT_TIMEOUT = 30.0


class SubmissionClient:
    """Posts finished applications to the backend.

    Attributes:
        endpoint: URL of the submission endpoint (relative to ``base_url``
            when one is given)

    Examples:
        >>> def handler(request):
        ...     return httpx.Response(200, json={"success": True})
        >>> client = SubmissionClient(
        ...     "http://testserver/api/submit-application",
        ...     http_client=httpx.Client(transport=httpx.MockTransport(handler)),
        ... )
        >>> client.submit_application({"name": "Jane"}).ok
        True
    """

    def __init__(
        self,
        endpoint: str = DEFAULT_ENDPOINT,
        base_url: str = "",
        http_client: Optional[httpx.Client] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.endpoint = endpoint
        self._client = http_client or httpx.Client(base_url=base_url, timeout=timeout)
        self._owns_client = http_client is None

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "SubmissionClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def __call__(self, payload: Dict[str, Any]) -> SubmissionResult:
        return self.submit_application(payload)

    def submit_application(self, payload: Dict[str, Any]) -> SubmissionResult:
        """Send one application payload.

        Returns:
            A successful result for any 2xx response. Otherwise a failed
            result whose error is the server's ``error`` message, or
            "Server returned <status>" when the body carries none.
        """
        logger.info(f"Submitting application to {self.endpoint}")
        try:
            response = self._client.post(self.endpoint, json=payload)
        except httpx.HTTPError as e:
            logger.error(f"Submission request failed: {e!r}")
            return SubmissionResult.failure(_transport_message(e))

        body = _json_body(response)
        if response.is_success:
            if isinstance(body, dict) and body.get("success") is False:
                logger.warning("Server acknowledged with success=false")
            logger.info(f"Application accepted with status {response.status_code}")
            return SubmissionResult.success(status_code=response.status_code)

        message = None
        if isinstance(body, dict) and isinstance(body.get("error"), str) and body["error"]:
            message = body["error"]
        message = message or f"Server returned {response.status_code}"
        logger.error(f"Application rejected with status {response.status_code}: {message}")
        return SubmissionResult.failure(message, status_code=response.status_code)


def _json_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        logger.debug(f"Could not parse response as JSON (status {response.status_code})")
        return None


def _transport_message(error: httpx.HTTPError) -> str:
    if isinstance(error, httpx.TimeoutException):
        return "The server took too long to respond. Please try again."
    if isinstance(error, httpx.ConnectError):
        return "Could not reach the server. Please check your connection and try again."
    return f"Network error: {error}" if str(error) else "Network error occurred"


__all__ = [
    "SubmissionClient",
    "DEFAULT_ENDPOINT",
]
