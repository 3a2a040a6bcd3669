"""Data contracts for document-analysis jobs.

Architectural role:
    Defines the request shape produced by `request_builder`, the job states
    recognized by `poller`, and the terminal job payload consumed by
    `reconciler`.

Wire mapping:
    Field names are snake_case in Python and camelCase on the wire. `to_dict`
    drops `None` values and empty lists so serialized output only carries what
    the service or the caller actually set. `from_dict` accepts partial
    payloads; missing collections become empty tuples and list entries that
    are not JSON objects are skipped.

Immutability:
    All contracts are frozen dataclasses holding tuples, so a `JobResult` can
    be reconciled any number of times with identical outcomes.
"""

from dataclasses import dataclass, field
from enum import Enum

from language_tools.documents.options import PiiCategory, RedactionPolicy


def _compact(data: dict) -> dict:
    return {key: value for key, value in data.items() if value is not None and value != []}


def _objects(values) -> list:
    """JSON objects of a wire list; `null` and non-object entries are dropped."""
    if not isinstance(values, list):
        return []
    return [value for value in values if isinstance(value, dict)]


# ============================================================
# Request side
# ============================================================

@dataclass(frozen=True)
class DocumentLocation:
    """Location of a stored document (source blob or target container)."""

    location: str
    kind: str = "AzureBlob"

    def to_dict(self) -> dict:
        return {"location": self.location, "kind": self.kind}

    @classmethod
    def from_dict(cls, data) -> "DocumentLocation | None":
        if not isinstance(data, dict):
            return None
        return cls(location=data.get("location", ""), kind=data.get("kind") or "AzureBlob")


@dataclass(frozen=True)
class DocumentTask:
    """One input document; `id` correlates results back to this input."""

    id: str
    source_location: str
    target_location: str
    language: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "source": DocumentLocation(self.source_location).to_dict(),
            "target": DocumentLocation(self.target_location).to_dict(),
            "language": self.language,
        }


class AnalysisTaskKind(str, Enum):
    PII_ENTITY_RECOGNITION = "PiiEntityRecognition"


@dataclass(frozen=True)
class PiiTaskParameters:
    """Parameters of a PII entity recognition task."""

    redaction_policy: RedactionPolicy
    pii_categories: tuple[PiiCategory, ...] = ()
    exclude_pii_categories: tuple[PiiCategory, ...] = ()
    model_version: str = "latest"

    def to_dict(self) -> dict:
        return _compact({
            "modelVersion": self.model_version,
            "piiCategories": [c.value for c in self.pii_categories],
            "excludePiiCategories": [c.value for c in self.exclude_pii_categories],
            "redactionPolicy": self.redaction_policy.to_dict(),
        })


@dataclass(frozen=True)
class AnalysisTask:
    kind: AnalysisTaskKind
    parameters: PiiTaskParameters

    def to_dict(self) -> dict:
        return {"kind": self.kind.value, "parameters": self.parameters.to_dict()}


@dataclass(frozen=True)
class JobRequest:
    """Batch of documents plus the tasks to run over each of them."""

    documents: tuple[DocumentTask, ...]
    tasks: tuple[AnalysisTask, ...]

    def to_dict(self) -> dict:
        return {
            "analysisInput": {"documents": [d.to_dict() for d in self.documents]},
            "tasks": [t.to_dict() for t in self.tasks],
        }


# ============================================================
# Job state
# ============================================================

class JobState(str, Enum):
    """Lifecycle states of a remote job.

    `Unknown` is terminal-by-policy: it stands for a status the client could
    not read and is handled as a failure.
    """

    UNKNOWN = "unknown"
    NOT_STARTED = "notStarted"
    RUNNING = "running"
    CANCELLING = "cancelling"
    CANCELLED = "cancelled"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

    @classmethod
    def from_status(cls, status) -> "JobState":
        if not isinstance(status, str):
            return cls.UNKNOWN
        return _STATUS_LOOKUP.get(status.strip().lower(), cls.UNKNOWN)

    @property
    def is_terminal(self) -> bool:
        return self not in (JobState.NOT_STARTED, JobState.RUNNING, JobState.CANCELLING)


_STATUS_LOOKUP = {
    "notstarted": JobState.NOT_STARTED,
    "running": JobState.RUNNING,
    "cancelling": JobState.CANCELLING,
    "canceling": JobState.CANCELLING,
    "cancelled": JobState.CANCELLED,
    "canceled": JobState.CANCELLED,
    "succeeded": JobState.SUCCEEDED,
    "failed": JobState.FAILED,
}


# ============================================================
# Result side
# ============================================================

@dataclass(frozen=True)
class InnerError:
    code: str | None = None
    message: str | None = None

    def to_dict(self) -> dict:
        return _compact({"code": self.code, "message": self.message})

    @classmethod
    def from_dict(cls, data) -> "InnerError | None":
        if not isinstance(data, dict):
            return None
        return cls(code=data.get("code"), message=data.get("message"))


@dataclass(frozen=True)
class AnalysisError:
    """Service error object: job-level fault or the body of a task error."""

    code: str | None = None
    message: str | None = None
    inner_error: InnerError | None = None

    def to_dict(self) -> dict:
        return _compact({
            "code": self.code,
            "message": self.message,
            "innerError": self.inner_error.to_dict() if self.inner_error else None,
        })

    @classmethod
    def from_dict(cls, data) -> "AnalysisError | None":
        if not isinstance(data, dict):
            return None
        return cls(
            code=data.get("code"),
            message=data.get("message"),
            inner_error=InnerError.from_dict(data.get("innerError") or data.get("innererror")),
        )


@dataclass(frozen=True)
class TaskError:
    """Per-document failure inside one task."""

    id: str | None
    error: AnalysisError | None

    def to_dict(self) -> dict:
        return _compact({"id": self.id, "error": self.error.to_dict() if self.error else None})

    @classmethod
    def from_dict(cls, data: dict) -> "TaskError":
        return cls(id=data.get("id"), error=AnalysisError.from_dict(data.get("error")))


@dataclass(frozen=True)
class DocumentWarning:
    code: str | None = None
    message: str | None = None
    target_ref: str | None = None

    def to_dict(self) -> dict:
        return _compact({"code": self.code, "message": self.message, "targetRef": self.target_ref})

    @classmethod
    def from_dict(cls, data: dict) -> "DocumentWarning":
        return cls(
            code=data.get("code"),
            message=data.get("message"),
            target_ref=data.get("targetRef") or data.get("ref"),
        )


@dataclass(frozen=True)
class DocumentResult:
    """Per-document success: where the source was read and outputs written."""

    id: str | None
    source: DocumentLocation | None = None
    targets: tuple[DocumentLocation, ...] = ()
    warnings: tuple[DocumentWarning, ...] = ()

    def to_dict(self) -> dict:
        return _compact({
            "id": self.id,
            "source": self.source.to_dict() if self.source else None,
            "targets": [t.to_dict() for t in self.targets],
            "warnings": [w.to_dict() for w in self.warnings],
        })

    @classmethod
    def from_dict(cls, data: dict) -> "DocumentResult":
        return cls(
            id=data.get("id"),
            source=DocumentLocation.from_dict(data.get("source")),
            targets=tuple(
                loc for loc in (DocumentLocation.from_dict(t) for t in data.get("targets") or [])
                if loc is not None
            ),
            warnings=tuple(DocumentWarning.from_dict(w) for w in _objects(data.get("warnings"))),
        )


@dataclass(frozen=True)
class TaskResults:
    errors: tuple[TaskError, ...] = ()
    documents: tuple[DocumentResult, ...] = ()
    model_version: str | None = None

    @classmethod
    def from_dict(cls, data) -> "TaskResults":
        if not isinstance(data, dict):
            return cls()
        return cls(
            errors=tuple(TaskError.from_dict(e) for e in _objects(data.get("errors"))),
            documents=tuple(DocumentResult.from_dict(d) for d in _objects(data.get("documents"))),
            model_version=data.get("modelVersion"),
        )


@dataclass(frozen=True)
class TaskResult:
    kind: str | None
    status: JobState
    results: TaskResults = field(default_factory=TaskResults)
    task_name: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "TaskResult":
        return cls(
            kind=data.get("kind"),
            status=JobState.from_status(data.get("status")),
            results=TaskResults.from_dict(data.get("results")),
            task_name=data.get("taskName"),
        )


@dataclass(frozen=True)
class JobResult:
    """Terminal job payload as returned by the final poll (or submission).

    `error` aborts the whole job; `errors` are job-level faults not tied to a
    single task; `tasks` carry per-task documents and per-document errors.
    """

    status: JobState = JobState.UNKNOWN
    error: AnalysisError | None = None
    errors: tuple[AnalysisError, ...] = ()
    tasks: tuple[TaskResult, ...] = ()
    job_id: str | None = None
    display_name: str | None = None
    created_date_time: str | None = None
    last_updated_date_time: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "JobResult":
        """Parse a job payload.

        The service nests task results under `tasks.items`; a bare list under
        `tasks` is accepted too.
        """
        tasks = data.get("tasks") or []
        if isinstance(tasks, dict):
            tasks = tasks.get("items") or []

        return cls(
            status=JobState.from_status(data.get("status")),
            error=AnalysisError.from_dict(data.get("error")),
            errors=tuple(
                err for err in (AnalysisError.from_dict(e) for e in data.get("errors") or [])
                if err is not None
            ),
            tasks=tuple(TaskResult.from_dict(t) for t in _objects(tasks)),
            job_id=data.get("jobId"),
            display_name=data.get("displayName"),
            created_date_time=data.get("createdDateTime"),
            last_updated_date_time=data.get("lastUpdatedDateTime"),
        )
