import json

import pytest
import requests

from language_tools.conversations.client import ConversationAnalysisClient
from language_tools.documents.errors import Timeout
from language_tools.documents.reconciler import DocumentResults, Errors
from language_tools.documents.models import AnalysisError, DocumentResult
from language_tools.question_answering.client import QuestionAnsweringClient
from language_tools.text.client import TextAnalysisClient
from language_tools.tools.pii_redaction import PiiRedactionTool
from language_tools.tools.projects import ConversationalUnderstandingTool, QuestionAnsweringTool
from language_tools.tools.text_analysis import (
    ExtractEntitiesTool,
    ExtractHealthcareEntitiesTool,
    ExtractKeyPhraseTool,
    LanguageDetectionTool,
    SentimentAnalysisTool,
    SummarizationTool,
)
from language_tools.tools.translator import TranslatorTool
from language_tools.translator.client import TranslatorClient

from conftest import ENDPOINT, OPERATION_URL, SOURCE, TARGET, FakeClock, StubSession, make_response


class RecordingDocumentClient:
    def __init__(self, outcome):
        self.outcome = outcome
        self.requests = []

    def analyze_documents(self, job_request, cancellation=None):
        self.requests.append(job_request)
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return self.outcome


def text_client(*responses):
    session = StubSession(post=list(responses))
    return TextAnalysisClient(ENDPOINT, "secret", session=session), session


def analyze_text_result(documents=(), errors=()):
    return make_response(200, {"results": {"documents": list(documents), "errors": list(errors)}})


def job_client(*polls):
    """Text client whose job submission is accepted and then polled through `polls`."""
    clock = FakeClock()
    session = StubSession(
        post=[make_response(202, headers={"operation-location": OPERATION_URL})],
        get=list(polls),
    )
    client = TextAnalysisClient(ENDPOINT, "secret", session=session, sleep=clock.sleep, clock=clock)
    return client, session


def text_job(status="succeeded", documents=(), errors=()):
    return {
        "status": status,
        "tasks": {"items": [{"status": status, "results": {"documents": list(documents), "errors": list(errors)}}]},
    }


# ============================================================
# PII redaction
# ============================================================

def test_document_redaction_builds_single_document_job():
    documents = RecordingDocumentClient(DocumentResults(items=(DocumentResult(id="1"),)))
    tool = PiiRedactionTool(text_client()[0], documents)

    response = tool.redact_pii_from_document(
        SOURCE, TARGET,
        pii_categories=["person", "Email"],
        redaction_policy="EntityMask",
        language="fr",
    )

    assert not response.is_error
    assert json.loads(response.text) == [{"id": "1"}]

    sent = documents.requests[0].to_dict()
    assert sent["analysisInput"]["documents"][0]["id"] == "1"
    assert sent["analysisInput"]["documents"][0]["language"] == "fr"
    assert sent["tasks"][0]["parameters"]["piiCategories"] == ["Person", "Email"]
    assert sent["tasks"][0]["parameters"]["redactionPolicy"] == {"policyKind": "entityMask"}


def test_document_redaction_defaults_to_star_mask():
    documents = RecordingDocumentClient(DocumentResults())
    tool = PiiRedactionTool(text_client()[0], documents)

    tool.redact_pii_from_document(SOURCE, TARGET)

    policy = documents.requests[0].to_dict()["tasks"][0]["parameters"]["redactionPolicy"]
    assert policy == {"policyKind": "characterMask", "redactionCharacter": "*"}


def test_document_redaction_renders_errors():
    outcome = Errors(items=(AnalysisError(code="Unauthorized", message="Access denied"),), single=True)
    tool = PiiRedactionTool(text_client()[0], RecordingDocumentClient(outcome))

    response = tool.redact_pii_from_document(SOURCE, TARGET)

    assert response.is_error
    assert json.loads(response.text)["message"] == "Access denied"


def test_document_redaction_renders_faults():
    tool = PiiRedactionTool(text_client()[0], RecordingDocumentClient(Timeout("took too long")))

    response = tool.redact_pii_from_document(SOURCE, TARGET)

    assert response.is_error
    assert response.text == "took too long"


def test_invalid_category_is_reported_without_a_job():
    documents = RecordingDocumentClient(DocumentResults())
    tool = PiiRedactionTool(text_client()[0], documents)

    response = tool.redact_pii_from_document(SOURCE, TARGET, pii_categories=["Nickname"])

    assert response.is_error
    assert response.text.startswith("Invalid value 'Nickname'.")
    assert documents.requests == []


def test_relative_source_is_reported_without_a_job():
    documents = RecordingDocumentClient(DocumentResults())
    tool = PiiRedactionTool(text_client()[0], documents)

    response = tool.redact_pii_from_document("report.docx", TARGET)

    assert response.is_error
    assert documents.requests == []


def test_text_redaction_returns_documents():
    redacted = {"id": "1", "redactedText": "Call ******** now", "entities": []}
    client, session = text_client(analyze_text_result([redacted]))
    tool = PiiRedactionTool(client, RecordingDocumentClient(DocumentResults()))

    response = tool.redact_pii_from_text("Call John Doe now", pii_categories=["Person"])

    assert not response.is_error
    assert json.loads(response.text) == [redacted]
    payload = session.calls[0][2]["json"]
    assert payload["kind"] == "PiiEntityRecognition"
    assert payload["parameters"]["piiCategories"] == ["Person"]
    assert payload["parameters"]["redactionPolicy"]["redactionCharacter"] == "*"


def test_text_redaction_returns_document_errors():
    error = {"id": "1", "error": {"code": "InvalidArgument", "message": "Document text is empty."}}
    client, _ = text_client(analyze_text_result(errors=[error]))
    tool = PiiRedactionTool(client, RecordingDocumentClient(DocumentResults()))

    response = tool.redact_pii_from_text("x")

    assert response.is_error
    assert json.loads(response.text) == [error]


def test_text_redaction_reports_transport_errors():
    client, _ = text_client(requests.exceptions.ConnectionError("no route"))
    tool = PiiRedactionTool(client, RecordingDocumentClient(DocumentResults()))

    response = tool.redact_pii_from_text("Call John")

    assert response.is_error
    assert "no route" in response.text


def test_pii_tool_requires_clients():
    with pytest.raises(ValueError):
        PiiRedactionTool(None, RecordingDocumentClient(DocumentResults()))


# ============================================================
# Text analysis
# ============================================================

@pytest.mark.parametrize("tool_cls,operation,kind", [
    (ExtractEntitiesTool, "extract_entities", "EntityRecognition"),
    (SentimentAnalysisTool, "analyze_sentiment", "SentimentAnalysis"),
    (ExtractKeyPhraseTool, "extract_key_phrases", "KeyPhraseExtraction"),
    (LanguageDetectionTool, "detect_language", "LanguageDetection"),
])
def test_text_tools_send_their_kind(tool_cls, operation, kind):
    document = {"id": "1", "warnings": []}
    client, session = text_client(analyze_text_result([document]))
    tool = tool_cls(client)

    response = tool.operations()[operation]("Seattle is lovely in spring.")

    assert not response.is_error
    assert json.loads(response.text) == [document]
    assert session.calls[0][2]["json"]["kind"] == kind


def test_sentiment_opinion_mining_flag():
    client, session = text_client(analyze_text_result())

    SentimentAnalysisTool(client).analyze_sentiment("Great food", opinion_mining=True)

    assert session.calls[0][2]["json"]["parameters"]["opinionMining"] is True


def test_language_detection_country_hint():
    client, session = text_client(analyze_text_result())

    LanguageDetectionTool(client).detect_language("Hola", country_hint="es")

    document = session.calls[0][2]["json"]["analysisInput"]["documents"][0]
    assert document["countryHint"] == "es"
    assert "language" not in document


def test_text_tool_reports_service_error():
    body = {"error": {"code": "InvalidRequest", "message": "Invalid Language Code."}}
    client, _ = text_client(make_response(400, body))

    response = ExtractKeyPhraseTool(client).extract_key_phrases("hello", language="zz")

    assert response.is_error
    assert response.text == "LANGUAGE HTTP ERROR (400): Invalid Language Code."


def test_entity_filters_are_sent_as_typed_lists():
    client, session = text_client(analyze_text_result())

    response = ExtractEntitiesTool(client).extract_entities(
        "Bill lives in Seattle",
        inclusion_list=["Person"],
        exclusion_list="location, phone_number",
        overlap_policy="AllowOverlap",
    )

    assert not response.is_error
    parameters = session.calls[0][2]["json"]["parameters"]
    assert parameters["inclusionList"] == ["Person"]
    assert parameters["exclusionList"] == ["Location", "PhoneNumber"]
    assert parameters["overlapPolicy"] == {"policyKind": "allowOverlap"}


def test_entity_overlap_policy_defaults_to_match_longest():
    client, session = text_client(analyze_text_result())

    ExtractEntitiesTool(client).extract_entities("Bill lives in Seattle")

    parameters = session.calls[0][2]["json"]["parameters"]
    assert parameters == {"modelVersion": "latest", "overlapPolicy": {"policyKind": "matchLongest"}}


@pytest.mark.parametrize("arguments", [
    {"inclusion_list": ["Planet"]},
    {"exclusion_list": ["Person", "Spaceship"]},
    {"overlap_policy": "MatchShortest"},
])
def test_invalid_entity_options_are_reported_without_a_request(arguments):
    client, session = text_client(analyze_text_result())

    response = ExtractEntitiesTool(client).extract_entities("Bill lives in Seattle", **arguments)

    assert response.is_error
    assert "Allowed values are" in response.text
    assert session.calls == []


# ============================================================
# Translation
# ============================================================

def test_translate_returns_translations_per_text():
    body = [{"translations": [{"text": "Hallo", "to": "de"}, {"text": "Bonjour", "to": "fr"}]}]
    session = StubSession(post=[make_response(200, body)])
    tool = TranslatorTool(TranslatorClient("https://translator.example.com", "key", session=session))

    response = tool.translate("Hello", "de,fr")

    assert not response.is_error
    assert json.loads(response.text) == [body[0]["translations"]]
    assert session.calls[0][2]["params"]["to"] == ["de", "fr"]


def test_translate_requires_target_language():
    tool = TranslatorTool(TranslatorClient("https://translator.example.com", "key", session=StubSession()))

    response = tool.translate("Hello", [])

    assert response.is_error
    assert "target language" in response.text


# ============================================================
# Summarization and healthcare jobs
# ============================================================

def test_abstractive_summary_is_the_default():
    summary = {"id": "1", "summaries": [{"text": "Seattle is rainy."}], "warnings": []}
    client, session = job_client(make_response(200, {"status": "running"}), make_response(200, text_job(documents=[summary])))

    response = SummarizationTool(client).summarize_text("A long text about Seattle weather.")

    assert not response.is_error
    assert json.loads(response.text) == [summary]
    method, url, kwargs = session.calls[0]
    assert (method, url) == ("POST", ENDPOINT + "/language/analyze-text/jobs")
    assert kwargs["json"]["tasks"] == [{
        "kind": "AbstractiveSummarization",
        "parameters": {"modelVersion": "latest", "summaryLength": "medium"},
    }]
    assert session.get_count == 2


def test_extractive_summary_sends_sentence_count():
    client, session = job_client(make_response(200, text_job()))

    SummarizationTool(client).summarize_text("A long text.", summarization_type="Extractive", sentence_count=3)

    task = session.calls[0][2]["json"]["tasks"][0]
    assert task == {"kind": "ExtractiveSummarization", "parameters": {"modelVersion": "latest", "sentenceCount": 3}}


def test_summary_length_bucket_is_validated_before_submission():
    client, session = job_client(make_response(200, text_job()))

    response = SummarizationTool(client).summarize_text("A long text.", summary_length="tiny")

    assert response.is_error
    assert "short, medium, long" in response.text
    assert session.calls == []


def test_failed_summary_job_is_returned_as_error():
    failed = {"status": "failed", "errors": [{"code": "InternalServerError", "message": "boom"}]}
    client, _ = job_client(make_response(200, failed))

    response = SummarizationTool(client).summarize_text("A long text.")

    assert response.is_error
    assert json.loads(response.text) == failed


def test_summary_document_errors_win():
    error = {"id": "1", "error": {"code": "InvalidDocument", "message": "Document text is empty."}}
    client, _ = job_client(make_response(200, text_job(errors=[error])))

    response = SummarizationTool(client).summarize_text("x")

    assert response.is_error
    assert json.loads(response.text) == [error]


def test_healthcare_job_parameters():
    entity = {"id": "1", "entities": [{"text": "ibuprofen", "category": "MedicationName"}], "relations": []}
    client, session = job_client(make_response(200, text_job(documents=[entity])))

    response = ExtractHealthcareEntitiesTool(client).extract_healthcare_entities(
        "Took 100mg ibuprofen", document_type="discharge_summary",
    )

    assert not response.is_error
    assert json.loads(response.text) == [entity]
    assert session.calls[0][2]["json"]["tasks"] == [{
        "kind": "Healthcare",
        "parameters": {"modelVersion": "latest", "fhirVersion": "4.0.1", "documentType": "DischargeSummary"},
    }]


def test_healthcare_document_type_defaults_to_none():
    client, session = job_client(make_response(200, text_job()))

    ExtractHealthcareEntitiesTool(client).extract_healthcare_entities("Took 100mg ibuprofen")

    assert session.calls[0][2]["json"]["tasks"][0]["parameters"]["documentType"] == "None"


def test_healthcare_job_timeout_is_reported():
    clock = FakeClock()
    session = StubSession(
        post=[make_response(202, headers={"operation-location": OPERATION_URL})],
        get=[make_response(200, {"status": "running"})],
    )
    client = TextAnalysisClient(
        ENDPOINT, "secret", session=session, job_timeout_minutes=1, sleep=clock.sleep, clock=clock,
    )

    response = ExtractHealthcareEntitiesTool(client).extract_healthcare_entities("Took 100mg ibuprofen")

    assert response.is_error
    assert "did not complete within 1 minutes" in response.text


# ============================================================
# Question answering and conversational understanding
# ============================================================

def answers_tool(*responses, project_name="faq", deployment_name="production"):
    session = StubSession(post=list(responses))
    client = QuestionAnsweringClient(
        ENDPOINT, "secret", project_name=project_name, deployment_name=deployment_name, session=session,
    )
    return QuestionAnsweringTool(client), session


def test_get_answers_returns_answer_array():
    answers = [{"answer": "Open 9 to 5.", "confidenceScore": 0.92, "questions": ["When are you open?"]}]
    tool, session = answers_tool(make_response(200, {"answers": answers}))

    response = tool.get_answers("When do you open?")

    assert not response.is_error
    assert json.loads(response.text) == answers
    _, url, kwargs = session.calls[0]
    assert url == ENDPOINT + "/language/:query-knowledgebases"
    assert kwargs["params"] == {"projectName": "faq", "deploymentName": "production", "api-version": "2021-10-01"}
    assert kwargs["json"] == {
        "question": "When do you open?",
        "top": 5,
        "confidenceScoreThreshold": 0.6,
        "rankerType": "Default",
    }


def test_get_answers_options():
    tool, session = answers_tool(make_response(200, {"answers": []}))

    tool.get_answers("When do you open?", top=2, confidence_threshold=0.8, question_only=True)

    body = session.calls[0][2]["json"]
    assert (body["top"], body["confidenceScoreThreshold"], body["rankerType"]) == (2, 0.8, "QuestionOnly")


@pytest.mark.parametrize("arguments", [{"top": 0}, {"confidence_threshold": 1.5}])
def test_get_answers_rejects_out_of_range_options(arguments):
    tool, session = answers_tool(make_response(200, {"answers": []}))

    response = tool.get_answers("When do you open?", **arguments)

    assert response.is_error
    assert session.calls == []


def test_get_answers_requires_configured_project():
    tool, session = answers_tool(make_response(200, {"answers": []}), project_name="")

    response = tool.get_answers("When do you open?")

    assert response.is_error
    assert "QUESTION_ANSWERING_PROJECT_NAME" in response.text
    assert session.calls == []


def test_detect_intent_returns_prediction():
    result = {
        "query": "Book a flight to Paris",
        "prediction": {"topIntent": "BookFlight", "projectKind": "Conversation", "intents": [], "entities": []},
    }
    session = StubSession(post=[make_response(200, {"kind": "ConversationResult", "result": result})])
    client = ConversationAnalysisClient(
        ENDPOINT, "secret", project_name="travel", deployment_name="production", session=session,
    )

    response = ConversationalUnderstandingTool(client).detect_intent("Book a flight to Paris")

    assert not response.is_error
    assert json.loads(response.text) == result
    _, url, kwargs = session.calls[0]
    assert url == ENDPOINT + "/language/:analyze-conversations"
    assert kwargs["json"]["kind"] == "Conversation"
    assert kwargs["json"]["analysisInput"]["conversationItem"] == {
        "id": "1", "participantId": "participant1", "text": "Book a flight to Paris",
    }
    assert kwargs["json"]["parameters"]["projectName"] == "travel"


def test_detect_intent_reports_service_error():
    body = {"error": {"code": "NotFound", "message": "Deployment not found."}}
    session = StubSession(post=[make_response(404, body)])
    client = ConversationAnalysisClient(ENDPOINT, "secret", project_name="travel", deployment_name="gone", session=session)

    response = ConversationalUnderstandingTool(client).detect_intent("Hi")

    assert response.is_error
    assert response.text == "CONVERSATIONS HTTP ERROR (404): Deployment not found."
