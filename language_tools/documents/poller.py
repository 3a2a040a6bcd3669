"""Operation polling for submitted document-analysis jobs.

Processing flow:
    1. GET the operation handle.
    2. Classify the response into a `PollOutcome` (`classify_poll_response`).
    3. Return the raw response on a terminal job payload; otherwise wait the
       fixed interval and poll again.

Classification rules (checked in order):
    - HTTP 202 -> running, keep polling.
    - HTTP 200-204 with a body -> read the JSON `status` string:
        missing/non-string -> terminal, "Invalid response format."
        failed/canceled    -> terminal failure, reason = status
        succeeded          -> terminal success
        anything else      -> keep polling
    - Anything else (or an empty 2xx body) -> terminal failure, reason = HTTP
      reason phrase.

Timing:
    Fixed interval (default 2s), no backoff. One deadline covers the whole
    session; each poll's HTTP timeout is clamped to the time left so an
    in-flight request cannot outlive it.

Cancellation and timeout:
    Both are checked before every poll and before every delay. Cancellation
    raises `Cancelled`, an elapsed deadline raises `Timeout`. No partial
    result is returned.

Transport failures:
    A failed GET is retried on the same cadence, inside the same deadline, up
    to `max_transport_retries` consecutive times; the next failure raises
    `PollFault`.
"""

import logging
import time
from dataclasses import dataclass

import requests

from language_tools.documents.cancellation import CancellationSignal
from language_tools.documents.errors import (
    Cancelled,
    JobFailure,
    MalformedResponse,
    PollFault,
    SubmissionFault,
    Timeout,
)
from language_tools.documents.models import JobState
from language_tools.transport import json_body

logger = logging.getLogger(__name__)

INVALID_RESPONSE_FORMAT = "Invalid response format."

FAILURE_STATES = ("failed", "canceled", "cancelled")
SUCCESS_STATES = ("succeeded",)

DEFAULT_POLL_INTERVAL_SECONDS = 2.0
DEFAULT_JOB_TIMEOUT_SECONDS = 300 * 60


@dataclass(frozen=True)
class PollOutcome:
    """Classification of a single poll response."""

    state: JobState
    terminal: bool
    failure_reason: str = ""

    @property
    def succeeded(self) -> bool:
        return self.terminal and not self.failure_reason


def classify_poll_response(response: requests.Response) -> PollOutcome:
    """Classify one poll response; see the module docstring for the rules."""
    status_code = response.status_code

    if status_code == 202:
        return PollOutcome(JobState.RUNNING, terminal=False)

    if 200 <= status_code <= 204 and response.content:
        body = json_body(response)
        status = body.get("status") if isinstance(body, dict) else None

        if not isinstance(status, str):
            return PollOutcome(JobState.UNKNOWN, terminal=True, failure_reason=INVALID_RESPONSE_FORMAT)

        state = status.lower()
        if state in FAILURE_STATES:
            return PollOutcome(JobState.FAILED, terminal=True, failure_reason=state)
        if state in SUCCESS_STATES:
            return PollOutcome(JobState.SUCCEEDED, terminal=True)

        known = JobState.from_status(status)
        return PollOutcome(known if not known.is_terminal else JobState.RUNNING, terminal=False)

    reason = response.reason or f"HTTP {status_code}"
    return PollOutcome(JobState.FAILED, terminal=True, failure_reason=reason)


class OperationPoller:
    """Drives one polling session per `wait` call.

    Args:
        session: HTTP session used for the GET requests.
        headers: Auth headers sent with every poll.
        interval: Seconds between polls.
        timeout: Deadline for the whole session, in seconds.
        max_transport_retries: Consecutive transport errors tolerated.
        request_timeout: Upper bound for a single GET.
        sleep: Delay function, injectable for tests.
        clock: Monotonic clock, injectable for tests.
    """

    def __init__(
        self,
        session: requests.Session,
        headers: dict | None = None,
        interval: float = DEFAULT_POLL_INTERVAL_SECONDS,
        timeout: float = DEFAULT_JOB_TIMEOUT_SECONDS,
        max_transport_retries: int = 2,
        request_timeout: float = 120.0,
        sleep=time.sleep,
        clock=time.monotonic,
    ):
        self._session = session
        self._headers = dict(headers or {})
        self.interval = interval
        self.timeout = timeout
        self.max_transport_retries = max(0, max_transport_retries)
        self.request_timeout = request_timeout
        self._sleep = sleep
        self._clock = clock

    def wait(self, handle: str, cancellation: CancellationSignal | None = None) -> requests.Response:
        """Poll `handle` until a terminal job payload arrives.

        Returns:
            The terminal `requests.Response` carrying the job payload
            (succeeded, failed or canceled).

        Raises:
            SubmissionFault: `handle` is empty.
            MalformedResponse: A 2xx body without a string `status`.
            JobFailure: Terminal non-2xx or empty-body response.
            PollFault: Transport errors exceeded the retry allowance.
            Timeout: The deadline elapsed.
            Cancelled: The cancellation signal fired.
        """
        if not handle:
            raise SubmissionFault("Operation location is null or empty.")

        cancellation = cancellation or CancellationSignal.none()
        deadline = self._clock() + self.timeout
        transport_failures = 0
        polls = 0

        while True:
            self._check(cancellation, deadline)

            try:
                response = self._session.get(
                    handle,
                    headers=self._headers,
                    timeout=self._request_timeout_for(deadline),
                )
            except requests.exceptions.RequestException as err:
                polls += 1
                transport_failures += 1
                if transport_failures > self.max_transport_retries:
                    raise PollFault(
                        f"Polling the document analysis job failed after {transport_failures} attempts: {err}",
                        cause=err,
                    ) from err
                logger.warning(
                    "Poll %d of %s failed (%s); retrying in %.1fs",
                    polls, handle, err, self.interval,
                )
            else:
                polls += 1
                transport_failures = 0
                outcome = classify_poll_response(response)
                logger.debug("Poll %d of %s -> %s", polls, handle, outcome.state.value)

                if outcome.terminal:
                    return self._finish(response, outcome)

            self._check(cancellation, deadline)
            self._sleep(min(self.interval, max(0.0, deadline - self._clock())))

    def _finish(self, response: requests.Response, outcome: PollOutcome) -> requests.Response:
        if outcome.succeeded:
            return response
        if outcome.failure_reason == INVALID_RESPONSE_FORMAT:
            raise MalformedResponse(INVALID_RESPONSE_FORMAT)
        if outcome.failure_reason in FAILURE_STATES:
            logger.warning("Document analysis job ended with status '%s'", outcome.failure_reason)
            return response
        raise JobFailure(f"Document analysis job failed: {outcome.failure_reason}")

    def _request_timeout_for(self, deadline: float) -> float:
        remaining = deadline - self._clock()
        return max(0.001, min(self.request_timeout, remaining))

    def _check(self, cancellation: CancellationSignal, deadline: float) -> None:
        if cancellation.is_cancelled:
            raise Cancelled("Document analysis polling was cancelled.")
        if self._clock() >= deadline:
            raise Timeout(
                f"Document analysis job did not complete within {self.timeout / 60:g} minutes."
            )
