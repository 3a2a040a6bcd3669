"""Conversational language understanding (intent and entity detection).

Call shape:
    POST {endpoint}/language/:analyze-conversations?api-version=2023-04-01
    body: one `Conversation` task over a single conversation item, routed to
    the configured project and deployment.

Failure handling:
    Mirrors `language_tools.question_answering.client`: missing project
    settings raise `InvalidArgument` on first use; non-2xx responses raise
    `ServiceError`; a 2xx body without a `result` object raises
    `MalformedResponse`.
"""

import requests

from language_tools.documents.errors import InvalidArgument, MalformedResponse
from language_tools.transport import json_body, service_error, subscription_headers

ANALYZE_CONVERSATIONS_PATH = "/language/:analyze-conversations"
CONVERSATIONS_API_VERSION = "2023-04-01"

CONVERSATION_ITEM_ID = "1"
PARTICIPANT_ID = "participant1"
# Offsets are reported in code points, the unit Python strings index by.
STRING_INDEX_TYPE = "UnicodeCodePoint"


def build_conversation_payload(text: str, project_name: str, deployment_name: str) -> dict:
    return {
        "kind": "Conversation",
        "analysisInput": {
            "conversationItem": {
                "id": CONVERSATION_ITEM_ID,
                "participantId": PARTICIPANT_ID,
                "text": text,
            },
        },
        "parameters": {
            "projectName": project_name,
            "deploymentName": deployment_name,
            "stringIndexType": STRING_INDEX_TYPE,
        },
    }


class ConversationAnalysisClient:
    def __init__(
        self,
        endpoint: str,
        api_key: str | None,
        project_name: str = "",
        deployment_name: str = "",
        api_version: str = CONVERSATIONS_API_VERSION,
        request_timeout_seconds: float = 120.0,
        session: requests.Session | None = None,
    ):
        self._url = endpoint.rstrip("/") + ANALYZE_CONVERSATIONS_PATH
        self.project_name = project_name
        self.deployment_name = deployment_name
        self._api_version = api_version
        self._headers = subscription_headers(api_key)
        self._timeout = request_timeout_seconds
        self.session = session or requests.Session()

    @classmethod
    def from_settings(cls, settings, session: requests.Session | None = None) -> "ConversationAnalysisClient":
        return cls(
            endpoint=settings.endpoint,
            api_key=settings.api_key,
            project_name=settings.clu_project_name,
            deployment_name=settings.clu_deployment_name,
            request_timeout_seconds=settings.request_timeout_seconds,
            session=session,
        )

    def analyze_conversation(self, text: str) -> dict:
        """Return the `result` object: the query plus its intent/entity prediction."""
        if not self.project_name or not self.deployment_name:
            raise InvalidArgument(
                "Conversational understanding requires CLU_PROJECT_NAME and "
                "CLU_DEPLOYMENT_NAME to be configured."
            )
        if not text or not str(text).strip():
            raise InvalidArgument("Text to analyze must not be empty.")

        response = self.session.post(
            self._url,
            params={"api-version": self._api_version},
            headers=self._headers,
            json=build_conversation_payload(text, self.project_name, self.deployment_name),
            timeout=self._timeout,
        )
        if not response.ok:
            raise service_error("conversations", response)

        body = json_body(response)
        result = body.get("result") if isinstance(body, dict) else None
        if not isinstance(result, dict):
            raise MalformedResponse("Conversation analysis response has no result object.")
        return result
