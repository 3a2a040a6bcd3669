"""Text analysis tools.

Each tool wraps one analyze-text kind. Per-document service errors produce an
error envelope; otherwise the tool returns the JSON array of analyzed
documents. Summarization and healthcare run as long-running jobs; a job that
did not succeed is returned whole inside an error envelope.
"""

from language_tools.api.envelope import error_response, run_tool
from language_tools.documents.errors import InvalidArgument
from language_tools.text.client import (
    ABSTRACTIVE_SUMMARIZATION,
    ENTITY_RECOGNITION,
    EXTRACTIVE_SUMMARIZATION,
    HEALTHCARE,
    KEY_PHRASE_EXTRACTION,
    LANGUAGE_DETECTION,
    SENTIMENT_ANALYSIS,
    first_task,
    select_results,
)
from language_tools.text.options import (
    SummarizationType,
    parse_entity_categories,
    parse_healthcare_document_type,
    parse_overlap_policy,
    parse_summarization_type,
    parse_summary_length,
)

DEFAULT_FHIR_VERSION = "4.0.1"


def _documents(result):
    is_error, items = select_results(result)
    return error_response(items) if is_error else items


def _job_documents(job: dict):
    task = first_task(job)
    if job.get("status") != "succeeded" or task is None:
        return error_response(job)
    return _documents(task)


def _analyze(client, operation_name, kind, message, language, parameters):
    return run_tool(operation_name, lambda: _documents(client.analyze(kind, message, language, parameters)))


class _TextTool:
    name = ""
    descriptions = {}

    def __init__(self, text_client):
        if text_client is None:
            raise ValueError(f"{self.name} requires a text client.")
        self.text_client = text_client


class ExtractEntitiesTool(_TextTool):
    name = "ExtractEntitiesTool"
    descriptions = {
        "extract_entities": (
            "Extracts named entities (people, places, organizations, quantities, ...) "
            "from the text input. Optional inclusion/exclusion lists of entity types "
            "filter the result; overlap_policy is MatchLongest (default) or AllowOverlap. "
            "Results are returned as a JSON array of documents."
        ),
    }

    def operations(self) -> dict:
        return {"extract_entities": self.extract_entities}

    def extract_entities(
        self,
        message: str,
        inclusion_list=None,
        exclusion_list=None,
        overlap_policy: str | None = None,
        language: str = "en",
        model_version: str = "latest",
    ):
        def _run():
            parameters = {"modelVersion": model_version}
            included = parse_entity_categories(inclusion_list)
            excluded = parse_entity_categories(exclusion_list)
            if included:
                parameters["inclusionList"] = [c.value for c in included]
            if excluded:
                parameters["exclusionList"] = [c.value for c in excluded]
            parameters["overlapPolicy"] = parse_overlap_policy(overlap_policy).to_dict()

            return _documents(self.text_client.analyze(ENTITY_RECOGNITION, message, language, parameters))

        return run_tool("extract_entities", _run)


class SentimentAnalysisTool(_TextTool):
    name = "SentimentAnalysisTool"
    descriptions = {
        "analyze_sentiment": (
            "Scores the sentiment of the text input per document and per sentence, "
            "optionally mining opinions about specific aspects."
        ),
    }

    def operations(self) -> dict:
        return {"analyze_sentiment": self.analyze_sentiment}

    def analyze_sentiment(
        self,
        message: str,
        language: str = "en",
        opinion_mining: bool = False,
        model_version: str = "latest",
    ):
        return _analyze(
            self.text_client, "analyze_sentiment", SENTIMENT_ANALYSIS,
            message, language, {"modelVersion": model_version, "opinionMining": bool(opinion_mining)},
        )


class ExtractKeyPhraseTool(_TextTool):
    name = "ExtractKeyPhraseTool"
    descriptions = {
        "extract_key_phrases": "Extracts the main talking points of the text input.",
    }

    def operations(self) -> dict:
        return {"extract_key_phrases": self.extract_key_phrases}

    def extract_key_phrases(self, message: str, language: str = "en", model_version: str = "latest"):
        return _analyze(
            self.text_client, "extract_key_phrases", KEY_PHRASE_EXTRACTION,
            message, language, {"modelVersion": model_version},
        )


class LanguageDetectionTool(_TextTool):
    name = "LanguageDetectionTool"
    descriptions = {
        "detect_language": (
            "Detects the language of the text input. An optional two-letter "
            "country hint disambiguates short texts."
        ),
    }

    def operations(self) -> dict:
        return {"detect_language": self.detect_language}

    def detect_language(self, message: str, country_hint: str | None = None, model_version: str = "latest"):
        return _analyze(
            self.text_client, "detect_language", LANGUAGE_DETECTION,
            message, country_hint, {"modelVersion": model_version},
        )


class SummarizationTool(_TextTool):
    name = "SummarizationTool"
    descriptions = {
        "summarize_text": (
            "Generates a summary of the text input. summarization_type is abstractive "
            "(default) or extractive; abstractive summaries take a length bucket "
            "(short, medium, long), extractive summaries an optional sentence count. "
            "Results are returned as a JSON array of documents containing the summary."
        ),
    }

    def operations(self) -> dict:
        return {"summarize_text": self.summarize_text}

    def summarize_text(
        self,
        message: str,
        language: str = "en",
        summarization_type: str = "abstractive",
        summary_length: str = "medium",
        sentence_count: int | None = None,
        model_version: str = "latest",
    ):
        def _run():
            parameters = {"modelVersion": model_version}
            if parse_summarization_type(summarization_type) is SummarizationType.EXTRACTIVE:
                kind = EXTRACTIVE_SUMMARIZATION
                if sentence_count is not None:
                    if int(sentence_count) < 1:
                        raise InvalidArgument("sentence_count must be at least 1.")
                    parameters["sentenceCount"] = int(sentence_count)
            else:
                kind = ABSTRACTIVE_SUMMARIZATION
                parameters["summaryLength"] = parse_summary_length(summary_length).value

            return _job_documents(self.text_client.run_job(kind, message, language, parameters))

        return run_tool("summarize_text", _run)


class ExtractHealthcareEntitiesTool(_TextTool):
    name = "ExtractHealthcareEntitiesTool"
    descriptions = {
        "extract_healthcare_entities": (
            "Extracts medical entities (conditions, medications, dosages, ...) and the "
            "relations between them from clinical text, with a FHIR bundle per document. "
            "document_type tunes the FHIR output (e.g. DischargeSummary, ProgressNote)."
        ),
    }

    def operations(self) -> dict:
        return {"extract_healthcare_entities": self.extract_healthcare_entities}

    def extract_healthcare_entities(
        self,
        message: str,
        document_type: str | None = None,
        language: str = "en",
        fhir_version: str = DEFAULT_FHIR_VERSION,
        model_version: str = "latest",
    ):
        def _run():
            parameters = {
                "modelVersion": model_version,
                "fhirVersion": fhir_version or DEFAULT_FHIR_VERSION,
                "documentType": parse_healthcare_document_type(document_type).value,
            }
            return _job_documents(self.text_client.run_job(HEALTHCARE, message, language, parameters))

        return run_tool("extract_healthcare_entities", _run)
