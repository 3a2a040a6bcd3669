"""Fault taxonomy for the document-analysis pipeline.

Every fault raised between request construction and reconciliation derives
from `LanguageToolError`. Tool entry points catch them (together with any
unexpected exception) and render them into the response envelope; nothing in
this package retries on a fault except the bounded poll-transport retry in
`poller`.
"""


class LanguageToolError(Exception):
    """Base class for all pipeline faults."""


class InvalidArgument(LanguageToolError, ValueError):
    """Malformed request shape detected before any network call."""


class SubmissionFault(LanguageToolError):
    """Transport or protocol failure while submitting a job.

    Attributes:
        cause: Underlying transport exception, when there is one.
        status_code: HTTP status of the submission response, when received.
    """

    def __init__(self, message, cause=None, status_code=None):
        super().__init__(message)
        self.cause = cause
        self.status_code = status_code


class PollFault(LanguageToolError):
    """Transport failure during polling that outlasted the retry allowance."""

    def __init__(self, message, cause=None):
        super().__init__(message)
        self.cause = cause


class MalformedResponse(LanguageToolError):
    """A 2xx poll or submission response without a usable JSON body."""


class JobFailure(LanguageToolError):
    """The job reached a terminal failure that carries no job payload."""


class Timeout(LanguageToolError):
    """The polling deadline elapsed before the job reached a terminal state."""


class Cancelled(LanguageToolError):
    """The caller's cancellation signal was observed."""
