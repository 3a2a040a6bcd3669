"""PII detection and redaction tools for text and stored documents.

Request lifecycle (document redaction):
    1. Parse category/policy strings into typed options.
    2. Build a one-document `JobRequest`.
    3. Submit, poll and reconcile via `DocumentAnalysisClient`.
    4. Wrap the outcome (or any fault) into the response envelope.

Text redaction uses one synchronous analyze-text call instead.
"""

from language_tools.api.envelope import error_response, run_tool
from language_tools.documents.options import parse_pii_categories, parse_redaction_policy
from language_tools.documents.request_builder import build_job_request, pii_task, single_document
from language_tools.text.client import PII_ENTITY_RECOGNITION, select_results

TEXT_PII_DESCRIPTION = (
    "Detects PII in the text input, redacts it and returns the redacted text. "
    "Optional parameters select entity categories to redact or exclude and the "
    "redaction policy. Results are returned as a JSON array of documents."
)

DOCUMENT_PII_DESCRIPTION = (
    "Detects and redacts PII in Word and PDF documents stored in blob storage. "
    "Requires the source document URL and the target container URL. Results are "
    "returned as a JSON array of documents with the redacted document locations."
)


class PiiRedactionTool:
    """Text and document PII redaction.

    Args:
        text_client: `TextAnalysisClient` for synchronous text redaction.
        document_client: `DocumentAnalysisClient` for document jobs.
    """

    name = "PiiRedactionTool"
    descriptions = {
        "redact_pii_from_text": TEXT_PII_DESCRIPTION,
        "redact_pii_from_document": DOCUMENT_PII_DESCRIPTION,
    }

    def __init__(self, text_client, document_client):
        if text_client is None or document_client is None:
            raise ValueError("PiiRedactionTool requires a text client and a document client.")
        self.text_client = text_client
        self.document_client = document_client

    def operations(self) -> dict:
        return {
            "redact_pii_from_text": self.redact_pii_from_text,
            "redact_pii_from_document": self.redact_pii_from_document,
        }

    def redact_pii_from_text(
        self,
        message: str,
        pii_categories=None,
        exclude_pii_categories=None,
        redaction_policy: str | None = None,
        redaction_character: str = "*",
        language: str = "en",
        model_version: str = "latest",
    ):
        def _run():
            parameters = pii_task(
                parse_redaction_policy(redaction_policy, redaction_character),
                parse_pii_categories(pii_categories),
                parse_pii_categories(exclude_pii_categories),
                model_version,
            ).parameters.to_dict()

            result = self.text_client.analyze(PII_ENTITY_RECOGNITION, message, language, parameters)
            is_error, items = select_results(result)
            return error_response(items) if is_error else items

        return run_tool("redact_pii_from_text", _run)

    def redact_pii_from_document(
        self,
        source_document: str,
        target_document: str,
        pii_categories=None,
        exclude_pii_categories=None,
        redaction_policy: str | None = "CharacterMask",
        redaction_character: str = "*",
        language: str = "en",
        model_version: str = "latest",
        cancellation=None,
    ):
        def _run():
            task = pii_task(
                parse_redaction_policy(redaction_policy, redaction_character),
                parse_pii_categories(pii_categories),
                parse_pii_categories(exclude_pii_categories),
                model_version,
            )
            job_request = build_job_request(
                [single_document(source_document, target_document, language)],
                task,
            )
            return self.document_client.analyze_documents(job_request, cancellation)

        return run_tool("redact_pii_from_document", _run)
