"""Tools backed by a deployed language project.

Question answering queries a knowledge-base project; conversational
understanding predicts the intent and entities of one utterance with a CLU
project. Both return the service payload as-is.
"""

from language_tools.api.envelope import run_tool
from language_tools.question_answering.client import DEFAULT_CONFIDENCE_THRESHOLD, DEFAULT_TOP

QUESTION_ANSWERING_DESCRIPTION = (
    "Answers a question from the configured knowledge base. Optionally takes the "
    "maximum number of answers (top, default 5), the minimum confidence score "
    "(default 0.6) and question_only to rank on the question text alone. "
    "Returns the JSON array of answers."
)

CONVERSATIONAL_UNDERSTANDING_DESCRIPTION = (
    "Detects the intent and entities of a message with the configured "
    "conversational language understanding project. Returns the prediction as "
    "JSON, including the top intent."
)


class QuestionAnsweringTool:
    name = "QuestionAnsweringTool"
    descriptions = {"get_answers": QUESTION_ANSWERING_DESCRIPTION}

    def __init__(self, question_answering_client):
        if question_answering_client is None:
            raise ValueError("QuestionAnsweringTool requires a question answering client.")
        self.question_answering_client = question_answering_client

    def operations(self) -> dict:
        return {"get_answers": self.get_answers}

    def get_answers(
        self,
        message: str,
        top: int = DEFAULT_TOP,
        confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD,
        question_only: bool = False,
    ):
        return run_tool(
            "get_answers",
            self.question_answering_client.query,
            message, top, confidence_threshold, bool(question_only),
        )


class ConversationalUnderstandingTool:
    name = "ConversationalUnderstandingTool"
    descriptions = {"detect_intent": CONVERSATIONAL_UNDERSTANDING_DESCRIPTION}

    def __init__(self, conversation_client):
        if conversation_client is None:
            raise ValueError("ConversationalUnderstandingTool requires a conversation client.")
        self.conversation_client = conversation_client

    def operations(self) -> dict:
        return {"detect_intent": self.detect_intent}

    def detect_intent(self, message: str):
        return run_tool("detect_intent", self.conversation_client.analyze_conversation, message)
