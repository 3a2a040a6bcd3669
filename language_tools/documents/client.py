"""Document-analysis client: submit, poll, parse, reconcile.

Model call flow:
    `analyze_documents(job_request)` -> `JobSubmitter.submit` ->
    `OperationPoller.wait` (skipped when the service answered synchronously)
    -> `JobResult.from_dict` -> `reconcile`.

Concurrency:
    One call drives one strictly sequential submit/poll sequence. The client
    holds no per-call state; handles, deadlines and results live on the stack
    of each call, so one client may serve concurrent callers.
"""

import logging
import time

import requests

from language_tools.documents.cancellation import CancellationSignal
from language_tools.documents.errors import JobFailure, MalformedResponse
from language_tools.documents.models import JobRequest, JobResult, JobState
from language_tools.documents.poller import OperationPoller
from language_tools.documents.reconciler import DocumentResults, Outcome, reconcile
from language_tools.documents.submitter import JobSubmitter
from language_tools.transport import json_body, subscription_headers

logger = logging.getLogger(__name__)

DEFAULT_API_VERSION = "2024-11-15-preview"
DEFAULT_JOB_TIMEOUT_MINUTES = 300


def parse_job_result(response: requests.Response) -> JobResult:
    """Parse a terminal job response body into a `JobResult`."""
    body = json_body(response)
    if not isinstance(body, dict):
        raise MalformedResponse("Job response body is not a JSON object.")
    return JobResult.from_dict(body)


class DocumentAnalysisClient:
    """Long-running analyze-documents orchestration against one endpoint."""

    def __init__(
        self,
        endpoint: str,
        api_key: str | None,
        api_version: str = DEFAULT_API_VERSION,
        job_timeout_minutes: float = DEFAULT_JOB_TIMEOUT_MINUTES,
        poll_interval_seconds: float = 2.0,
        max_poll_transport_retries: int = 2,
        request_timeout_seconds: float = 120.0,
        session: requests.Session | None = None,
        sleep=time.sleep,
        clock=time.monotonic,
    ):
        if not job_timeout_minutes or job_timeout_minutes <= 0:
            job_timeout_minutes = DEFAULT_JOB_TIMEOUT_MINUTES

        self.session = session or requests.Session()
        headers = subscription_headers(api_key)

        self.submitter = JobSubmitter(
            self.session,
            endpoint,
            api_version,
            headers,
            request_timeout=request_timeout_seconds,
        )
        self.poller = OperationPoller(
            self.session,
            headers={k: v for k, v in headers.items() if k != "Content-Type"},
            interval=poll_interval_seconds,
            timeout=job_timeout_minutes * 60,
            max_transport_retries=max_poll_transport_retries,
            request_timeout=request_timeout_seconds,
            sleep=sleep,
            clock=clock,
        )

    @classmethod
    def from_settings(cls, settings, session: requests.Session | None = None) -> "DocumentAnalysisClient":
        return cls(
            endpoint=settings.endpoint,
            api_key=settings.api_key,
            api_version=settings.api_version,
            job_timeout_minutes=settings.job_timeout_minutes,
            poll_interval_seconds=settings.poll_interval_seconds,
            max_poll_transport_retries=settings.max_poll_transport_retries,
            request_timeout_seconds=settings.request_timeout_seconds,
            session=session,
        )

    def run_job(self, job_request: JobRequest, cancellation: CancellationSignal | None = None) -> JobResult:
        """Submit `job_request` and return its terminal `JobResult`."""
        cancellation = cancellation or CancellationSignal.none()

        submission = self.submitter.submit(job_request, cancellation)
        if not submission.needs_polling:
            return submission.result

        response = self.poller.wait(submission.handle, cancellation)
        return parse_job_result(response)

    def analyze_documents(
        self,
        job_request: JobRequest,
        cancellation: CancellationSignal | None = None,
    ) -> Outcome:
        """Run a job to completion and reconcile it into one `Outcome`.

        Raises:
            JobFailure: The job failed or was canceled without reporting any
                error detail to reconcile.
            Any fault raised by submission or polling.
        """
        job_result = self.run_job(job_request, cancellation)
        outcome = reconcile(job_result)

        if (
            isinstance(outcome, DocumentResults)
            and job_result.status in (JobState.FAILED, JobState.CANCELLED, JobState.UNKNOWN)
        ):
            raise JobFailure(
                f"Document analysis job ended with status '{job_result.status.value}' without error details."
            )

        logger.info(
            "Document analysis job %s finished: %d %s",
            job_result.job_id or "<sync>",
            len(outcome.items),
            "errors" if outcome.is_error else "documents",
        )
        return outcome
