"""Question answering over a deployed knowledge-base project.

Call shape:
    POST {endpoint}/language/:query-knowledgebases
        ?projectName=...&deploymentName=...&api-version=2021-10-01
    body: {"question", "top", "confidenceScoreThreshold", "rankerType"}

Failure handling:
    - A missing project or deployment name raises `InvalidArgument` on the
      first query, so the tool can be registered before it is configured.
    - Non-2xx responses raise `ServiceError`; a 2xx body without an
      `answers` array raises `MalformedResponse`.
"""

import logging

import requests

from language_tools.documents.errors import InvalidArgument, MalformedResponse
from language_tools.transport import json_body, service_error, subscription_headers

logger = logging.getLogger(__name__)

QUERY_KNOWLEDGEBASES_PATH = "/language/:query-knowledgebases"
QUESTION_ANSWERING_API_VERSION = "2021-10-01"

DEFAULT_TOP = 5
DEFAULT_CONFIDENCE_THRESHOLD = 0.6


class QuestionAnsweringClient:
    def __init__(
        self,
        endpoint: str,
        api_key: str | None,
        project_name: str = "",
        deployment_name: str = "",
        api_version: str = QUESTION_ANSWERING_API_VERSION,
        request_timeout_seconds: float = 120.0,
        session: requests.Session | None = None,
    ):
        self._url = endpoint.rstrip("/") + QUERY_KNOWLEDGEBASES_PATH
        self.project_name = project_name
        self.deployment_name = deployment_name
        self._api_version = api_version
        self._headers = subscription_headers(api_key)
        self._timeout = request_timeout_seconds
        self.session = session or requests.Session()

    @classmethod
    def from_settings(cls, settings, session: requests.Session | None = None) -> "QuestionAnsweringClient":
        return cls(
            endpoint=settings.endpoint,
            api_key=settings.api_key,
            project_name=settings.question_answering_project_name,
            deployment_name=settings.question_answering_deployment_name,
            request_timeout_seconds=settings.request_timeout_seconds,
            session=session,
        )

    def query(
        self,
        question: str,
        top: int = DEFAULT_TOP,
        confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD,
        question_only: bool = False,
    ) -> list:
        """Ask the knowledge base and return its `answers` array.

        Args:
            question: Natural-language question.
            top: Maximum number of answers.
            confidence_threshold: Minimum answer score, between 0 and 1.
            question_only: Rank answers on the question alone instead of the
                question and answer text.
        """
        if not self.project_name or not self.deployment_name:
            raise InvalidArgument(
                "Question answering requires QUESTION_ANSWERING_PROJECT_NAME and "
                "QUESTION_ANSWERING_DEPLOYMENT_NAME to be configured."
            )
        if not question or not str(question).strip():
            raise InvalidArgument("Question must not be empty.")
        if int(top) < 1:
            raise InvalidArgument("top must be at least 1.")
        if not 0 <= float(confidence_threshold) <= 1:
            raise InvalidArgument("confidence_threshold must be between 0 and 1.")

        response = self.session.post(
            self._url,
            params={
                "projectName": self.project_name,
                "deploymentName": self.deployment_name,
                "api-version": self._api_version,
            },
            headers=self._headers,
            json={
                "question": question,
                "top": int(top),
                "confidenceScoreThreshold": float(confidence_threshold),
                "rankerType": "QuestionOnly" if question_only else "Default",
            },
            timeout=self._timeout,
        )
        if not response.ok:
            raise service_error("question answering", response)

        body = json_body(response)
        answers = body.get("answers") if isinstance(body, dict) else None
        if not isinstance(answers, list):
            raise MalformedResponse("Question answering response has no answers array.")

        logger.debug("Knowledge base returned %d answers", len(answers))
        return answers
