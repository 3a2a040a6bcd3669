"""Static tool registry.

Every tool is enumerated here with the constructor that builds it from a
`ToolClients` bundle. Requested tool names are validated against this table;
an unknown name raises `InvalidArgument` before anything is constructed.
"""

import logging
from dataclasses import dataclass
from typing import Any

import requests

from language_tools.conversations.client import ConversationAnalysisClient
from language_tools.documents.client import DocumentAnalysisClient
from language_tools.documents.errors import InvalidArgument
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

logger = logging.getLogger(__name__)

ALL_TOOLS = "All"


@dataclass(frozen=True)
class ToolClients:
    """Service clients shared by the tools of one process."""

    text: Any = None
    documents: Any = None
    translator: Any = None
    question_answering: Any = None
    conversations: Any = None

    @classmethod
    def from_settings(cls, settings, session: requests.Session | None = None) -> "ToolClients":
        session = session or requests.Session()
        return cls(
            text=TextAnalysisClient.from_settings(settings, session=session),
            documents=DocumentAnalysisClient.from_settings(settings, session=session),
            translator=TranslatorClient.from_settings(settings, session=session),
            question_answering=QuestionAnsweringClient.from_settings(settings, session=session),
            conversations=ConversationAnalysisClient.from_settings(settings, session=session),
        )


TOOL_REGISTRY = {
    PiiRedactionTool.name: lambda clients: PiiRedactionTool(clients.text, clients.documents),
    ExtractEntitiesTool.name: lambda clients: ExtractEntitiesTool(clients.text),
    SentimentAnalysisTool.name: lambda clients: SentimentAnalysisTool(clients.text),
    ExtractKeyPhraseTool.name: lambda clients: ExtractKeyPhraseTool(clients.text),
    LanguageDetectionTool.name: lambda clients: LanguageDetectionTool(clients.text),
    SummarizationTool.name: lambda clients: SummarizationTool(clients.text),
    ExtractHealthcareEntitiesTool.name: lambda clients: ExtractHealthcareEntitiesTool(clients.text),
    QuestionAnsweringTool.name: lambda clients: QuestionAnsweringTool(clients.question_answering),
    ConversationalUnderstandingTool.name: lambda clients: ConversationalUnderstandingTool(clients.conversations),
    TranslatorTool.name: lambda clients: TranslatorTool(clients.translator),
}


def parse_requested_tools(value) -> list[str]:
    """Resolve a tool selection into registered tool names.

    Args:
        value: `None`/empty/"All" for every tool, a comma-separated string, or
            a list of names.

    Raises:
        InvalidArgument: A requested name is not registered.
    """
    if value is None:
        return list(TOOL_REGISTRY)

    if isinstance(value, str):
        if not value.strip() or value.strip().lower() == ALL_TOOLS.lower():
            return list(TOOL_REGISTRY)
        names = value.split(",")
    else:
        names = list(value)

    requested = []
    for raw in names:
        name = str(raw).strip()
        if not name:
            continue
        if name not in TOOL_REGISTRY:
            supported = ", ".join(TOOL_REGISTRY)
            raise InvalidArgument(f"Tool '{name}' is not supported. Supported tools are: {supported}")
        if name not in requested:
            requested.append(name)

    if not requested:
        raise InvalidArgument("No tools specified. Please provide a comma-separated list of tools to enable.")
    return requested


def build_tools(names, clients: ToolClients) -> dict:
    """Construct the requested tools, keyed by tool name."""
    tools = {name: TOOL_REGISTRY[name](clients) for name in parse_requested_tools(names)}
    logger.info("Enabled tools: %s", ", ".join(tools))
    return tools
