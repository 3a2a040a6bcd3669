"""Analyze-documents job submission.

Processing flow:
    1. Serialize the `JobRequest`.
    2. POST it once to `{endpoint}/language/analyze-documents/jobs`.
    3. Capture the `operation-location` header as the operation handle, or
       surface a synchronous terminal payload as a `JobResult`.

Retry behavior:
    None. Each submission is attempted exactly once.

Failure handling:
    - Connection/transport errors -> `SubmissionFault` with the cause attached.
    - Non-2xx without a parseable JSON body -> `SubmissionFault`.
    - Accepted response without an operation handle -> `SubmissionFault`.
    - Cancellation observed before sending -> `Cancelled`.
"""

import logging
from dataclasses import dataclass

import requests

from language_tools.documents.cancellation import CancellationSignal
from language_tools.documents.errors import SubmissionFault
from language_tools.documents.models import JobRequest, JobResult, JobState
from language_tools.transport import json_body

logger = logging.getLogger(__name__)

JOBS_PATH = "/language/analyze-documents/jobs"
OPERATION_LOCATION_HEADER = "operation-location"

SYNCHRONOUS_TERMINAL_STATES = (JobState.SUCCEEDED, JobState.FAILED, JobState.CANCELLED)


@dataclass(frozen=True)
class Submission:
    """Result of one submission: exactly one of `handle` or `result` is set."""

    handle: str | None = None
    result: JobResult | None = None

    @property
    def needs_polling(self) -> bool:
        return self.handle is not None


class JobSubmitter:
    """Sends a `JobRequest` and extracts the operation handle."""

    def __init__(
        self,
        session: requests.Session,
        endpoint: str,
        api_version: str,
        headers: dict,
        request_timeout: float = 120.0,
    ):
        self._session = session
        self._url = endpoint.rstrip("/") + JOBS_PATH
        self._api_version = api_version
        self._headers = dict(headers)
        self._request_timeout = request_timeout

    def submit(self, job_request: JobRequest, cancellation: CancellationSignal | None = None) -> Submission:
        cancellation = cancellation or CancellationSignal.none()
        cancellation.raise_if_cancelled("Document analysis was cancelled before submission.")

        try:
            response = self._session.post(
                self._url,
                params={"api-version": self._api_version},
                headers=self._headers,
                json=job_request.to_dict(),
                timeout=self._request_timeout,
            )
        except requests.exceptions.RequestException as err:
            raise SubmissionFault(f"Job submission failed: {err}", cause=err) from err

        handle = response.headers.get(OPERATION_LOCATION_HEADER)
        if response.ok and handle:
            logger.info("Submitted document analysis job; polling %s", handle)
            return Submission(handle=handle)

        body = json_body(response)

        if not response.ok:
            if isinstance(body, dict):
                # The service explained the failure; let reconciliation render it.
                logger.warning("Job submission rejected with HTTP %s", response.status_code)
                return Submission(result=JobResult.from_dict(body))
            raise SubmissionFault(
                f"Job submission failed with status {response.status_code}: {response.reason or 'no response body'}",
                status_code=response.status_code,
            )

        status = body.get("status") if isinstance(body, dict) else None
        if JobState.from_status(status) in SYNCHRONOUS_TERMINAL_STATES:
            logger.info("Service answered job submission synchronously")
            return Submission(result=JobResult.from_dict(body))

        raise SubmissionFault(
            "Job submission response did not include an operation-location header.",
            status_code=response.status_code,
        )
