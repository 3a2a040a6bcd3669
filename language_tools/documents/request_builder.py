"""Document batch -> `JobRequest` construction.

Pure functions only: no I/O, no configuration lookups. Validation is limited
to request shape; language codes are forwarded as given.

Failure scenarios:
    - Empty document batch -> `InvalidArgument`.
    - Source/target not an absolute http(s) URI -> `InvalidArgument`.
    - Missing language or duplicate document ids -> `InvalidArgument`.
"""

from urllib.parse import urlparse

from language_tools.documents.errors import InvalidArgument
from language_tools.documents.models import (
    AnalysisTask,
    AnalysisTaskKind,
    DocumentTask,
    JobRequest,
    PiiTaskParameters,
)
from language_tools.documents.options import CharacterMask

# Id given to the only document of a single-document call.
DEFAULT_DOCUMENT_ID = "1"


def _check_location(value, field_name: str) -> str:
    text = str(value) if value is not None else ""
    parsed = urlparse(text)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise InvalidArgument(f"{field_name} must be an absolute URI, got {text!r}.")
    return text


def single_document(source, target, language: str = "en") -> DocumentTask:
    """Build the one-document batch used by single-document tool calls."""
    return DocumentTask(
        id=DEFAULT_DOCUMENT_ID,
        source_location=str(source),
        target_location=str(target),
        language=language,
    )


def pii_task(
    redaction_policy=None,
    pii_categories=(),
    exclude_pii_categories=(),
    model_version: str = "latest",
) -> AnalysisTask:
    """Build a PII entity recognition task from already-parsed options."""
    return AnalysisTask(
        kind=AnalysisTaskKind.PII_ENTITY_RECOGNITION,
        parameters=PiiTaskParameters(
            redaction_policy=redaction_policy or CharacterMask(),
            pii_categories=tuple(pii_categories or ()),
            exclude_pii_categories=tuple(exclude_pii_categories or ()),
            model_version=model_version or "latest",
        ),
    )


def build_job_request(documents, tasks) -> JobRequest:
    """Validate a document batch and pair it with analysis tasks.

    Args:
        documents: Sequence of `DocumentTask`; order is preserved.
        tasks: Sequence of `AnalysisTask` (or a single task).

    Returns:
        Immutable `JobRequest`.

    Raises:
        InvalidArgument: On any shape violation listed in the module docstring.
    """
    documents = tuple(documents or ())
    if not documents:
        raise InvalidArgument("At least one document is required.")

    if isinstance(tasks, AnalysisTask):
        tasks = (tasks,)
    tasks = tuple(tasks or ())
    if not tasks:
        raise InvalidArgument("At least one analysis task is required.")

    seen_ids = set()
    for document in documents:
        if not document.id:
            raise InvalidArgument("Document id must not be empty.")
        if document.id in seen_ids:
            raise InvalidArgument(f"Duplicate document id {document.id!r}.")
        seen_ids.add(document.id)

        _check_location(document.source_location, "Source location")
        _check_location(document.target_location, "Target location")

        if not document.language:
            raise InvalidArgument(f"Language is required for document {document.id!r}.")

    return JobRequest(documents=documents, tasks=tasks)
