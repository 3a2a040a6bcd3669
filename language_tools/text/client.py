"""Analyze-text transport client.

Model invocation flow:
    Synchronous kinds:
        tool -> `TextAnalysisClient.analyze(kind, text, ...)` ->
        `POST {endpoint}/language/:analyze-text` -> parsed JSON result.
    Long-running kinds (summarization, healthcare):
        tool -> `TextAnalysisClient.run_job(kind, text, ...)` ->
        `POST {endpoint}/language/analyze-text/jobs` -> `operation-location`
        -> `OperationPoller.wait` -> parsed terminal job payload.

Retry behavior:
    None for the POST. Job polling tolerates the same bounded transport
    failures as document-analysis jobs.

Failure handling model:
    - Transport errors on the POST propagate as `requests` exceptions.
    - Non-2xx responses raise `ServiceError` with the service's message.
    - A 2xx body that is not a JSON object raises `MalformedResponse`.
    All are converted into error envelopes at the tool boundary.
"""

import logging
import time

import requests

from language_tools.documents.cancellation import CancellationSignal
from language_tools.documents.errors import InvalidArgument, MalformedResponse, SubmissionFault
from language_tools.documents.poller import OperationPoller
from language_tools.documents.submitter import OPERATION_LOCATION_HEADER
from language_tools.transport import json_body, service_error, subscription_headers

logger = logging.getLogger(__name__)

ANALYZE_TEXT_PATH = "/language/:analyze-text"
ANALYZE_TEXT_JOBS_PATH = "/language/analyze-text/jobs"

PII_ENTITY_RECOGNITION = "PiiEntityRecognition"
ENTITY_RECOGNITION = "EntityRecognition"
SENTIMENT_ANALYSIS = "SentimentAnalysis"
KEY_PHRASE_EXTRACTION = "KeyPhraseExtraction"
LANGUAGE_DETECTION = "LanguageDetection"

ABSTRACTIVE_SUMMARIZATION = "AbstractiveSummarization"
EXTRACTIVE_SUMMARIZATION = "ExtractiveSummarization"
HEALTHCARE = "Healthcare"

SUPPORTED_KINDS = (
    PII_ENTITY_RECOGNITION,
    ENTITY_RECOGNITION,
    SENTIMENT_ANALYSIS,
    KEY_PHRASE_EXTRACTION,
    LANGUAGE_DETECTION,
)

SUPPORTED_JOB_KINDS = (
    ABSTRACTIVE_SUMMARIZATION,
    EXTRACTIVE_SUMMARIZATION,
    HEALTHCARE,
)

# Single-text calls use a fixed document id.
DEFAULT_DOCUMENT_ID = "1"


def _require_text(text) -> None:
    if not text or not str(text).strip():
        raise InvalidArgument("Text to analyze must not be empty.")


def build_analyze_text_payload(kind: str, text: str, language: str | None = None, parameters: dict | None = None) -> dict:
    """Build the analyze-text request body for one text.

    Language detection takes an optional `countryHint` instead of `language`.
    """
    if kind not in SUPPORTED_KINDS:
        raise InvalidArgument(f"Unsupported analysis kind {kind!r}.")
    _require_text(text)

    document = {"id": DEFAULT_DOCUMENT_ID, "text": text}
    if kind == LANGUAGE_DETECTION:
        if language:
            document["countryHint"] = language
    elif language:
        document["language"] = language

    return {
        "kind": kind,
        "analysisInput": {"documents": [document]},
        "parameters": dict(parameters or {}),
    }


def build_text_job_payload(kind: str, text: str, language: str | None = None, parameters: dict | None = None) -> dict:
    """Build the body of a one-task, one-document analyze-text job."""
    if kind not in SUPPORTED_JOB_KINDS:
        raise InvalidArgument(f"Unsupported analysis job kind {kind!r}.")
    _require_text(text)

    document = {"id": DEFAULT_DOCUMENT_ID, "text": text}
    if language:
        document["language"] = language

    return {
        "analysisInput": {"documents": [document]},
        "tasks": [{"kind": kind, "parameters": dict(parameters or {})}],
    }


def select_results(result: dict):
    """Return `(is_error, items)` from an analyze-text result.

    Per-document errors take precedence over documents.
    """
    results = result.get("results") if isinstance(result, dict) else None
    if not isinstance(results, dict):
        return False, []

    errors = results.get("errors") or []
    if errors:
        return True, errors
    return False, results.get("documents") or []


def first_task(job: dict) -> dict | None:
    """First entry of `tasks.items` in a job payload, if it is an object."""
    tasks = job.get("tasks") if isinstance(job, dict) else None
    items = tasks.get("items") if isinstance(tasks, dict) else None
    if isinstance(items, list) and items and isinstance(items[0], dict):
        return items[0]
    return None


class TextAnalysisClient:
    def __init__(
        self,
        endpoint: str,
        api_key: str | None,
        api_version: str = "2024-11-15-preview",
        request_timeout_seconds: float = 120.0,
        session: requests.Session | None = None,
        job_timeout_minutes: float = 300,
        poll_interval_seconds: float = 2.0,
        max_poll_transport_retries: int = 2,
        sleep=time.sleep,
        clock=time.monotonic,
    ):
        base = endpoint.rstrip("/")
        self._url = base + ANALYZE_TEXT_PATH
        self._jobs_url = base + ANALYZE_TEXT_JOBS_PATH
        self._api_version = api_version
        self._headers = subscription_headers(api_key)
        self._timeout = request_timeout_seconds
        self.session = session or requests.Session()

        if not job_timeout_minutes or job_timeout_minutes <= 0:
            job_timeout_minutes = 300
        self.poller = OperationPoller(
            self.session,
            headers={k: v for k, v in self._headers.items() if k != "Content-Type"},
            interval=poll_interval_seconds,
            timeout=job_timeout_minutes * 60,
            max_transport_retries=max_poll_transport_retries,
            request_timeout=request_timeout_seconds,
            sleep=sleep,
            clock=clock,
        )

    @classmethod
    def from_settings(cls, settings, session: requests.Session | None = None) -> "TextAnalysisClient":
        return cls(
            endpoint=settings.endpoint,
            api_key=settings.api_key,
            api_version=settings.api_version,
            request_timeout_seconds=settings.request_timeout_seconds,
            session=session,
            job_timeout_minutes=settings.job_timeout_minutes,
            poll_interval_seconds=settings.poll_interval_seconds,
            max_poll_transport_retries=settings.max_poll_transport_retries,
        )

    def analyze(self, kind: str, text: str, language: str | None = None, parameters: dict | None = None) -> dict:
        """Run one synchronous analysis and return the decoded result."""
        payload = build_analyze_text_payload(kind, text, language, parameters)

        response = self.session.post(
            self._url,
            params={"api-version": self._api_version},
            headers=self._headers,
            json=payload,
            timeout=self._timeout,
        )
        if not response.ok:
            raise service_error("language", response)

        body = json_body(response)
        if not isinstance(body, dict):
            raise MalformedResponse("Analyze-text response body is not a JSON object.")

        logger.debug("%s analysis completed", kind)
        return body

    def run_job(
        self,
        kind: str,
        text: str,
        language: str | None = None,
        parameters: dict | None = None,
        cancellation: CancellationSignal | None = None,
    ) -> dict:
        """Submit a long-running analysis job and return its terminal payload.

        Raises:
            ServiceError: The submission was rejected.
            SubmissionFault: The accepted submission carried no operation handle.
            Any fault raised by `OperationPoller.wait`.
        """
        payload = build_text_job_payload(kind, text, language, parameters)
        cancellation = cancellation or CancellationSignal.none()
        cancellation.raise_if_cancelled("Text analysis was cancelled before submission.")

        response = self.session.post(
            self._jobs_url,
            params={"api-version": self._api_version},
            headers=self._headers,
            json=payload,
            timeout=self._timeout,
        )
        if not response.ok:
            raise service_error("language", response)

        handle = response.headers.get(OPERATION_LOCATION_HEADER)
        if not handle:
            raise SubmissionFault(
                "Job submission response did not include an operation-location header.",
                status_code=response.status_code,
            )
        logger.info("Submitted %s job; polling %s", kind, handle)

        body = json_body(self.poller.wait(handle, cancellation))
        if not isinstance(body, dict):
            raise MalformedResponse("Analyze-text job response body is not a JSON object.")
        return body
