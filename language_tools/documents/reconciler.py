"""Collapse a terminal `JobResult` into one normalized outcome.

Priority order (first match wins, most global failure first):
    1. job-level `error`            -> `Errors` holding that single error
    2. job-level `errors`           -> `Errors` holding that list
    3. any task with result errors  -> `Errors`, task order then error order
    4. otherwise                    -> `DocumentResults`, task order then
                                       document order (possibly empty)

`reconcile` is a pure function over immutable inputs; reconciling the same
`JobResult` twice yields equal outcomes.
"""

import json
from dataclasses import dataclass
from typing import Union

from language_tools.documents.models import AnalysisError, DocumentResult, JobResult, TaskError


@dataclass(frozen=True)
class DocumentResults:
    items: tuple[DocumentResult, ...] = ()

    is_error = False

    def to_json(self) -> str:
        return json.dumps([item.to_dict() for item in self.items])


@dataclass(frozen=True)
class Errors:
    """Failure outcome.

    `single` marks a job-level `error`, which renders as one JSON object
    rather than an array.
    """

    items: tuple[Union[AnalysisError, TaskError], ...]
    single: bool = False

    is_error = True

    def to_json(self) -> str:
        if self.single:
            return json.dumps(self.items[0].to_dict())
        return json.dumps([item.to_dict() for item in self.items])


Outcome = Union[DocumentResults, Errors]


def reconcile(job_result: JobResult) -> Outcome:
    if job_result.error is not None:
        return Errors(items=(job_result.error,), single=True)

    if job_result.errors:
        return Errors(items=tuple(job_result.errors))

    task_errors = tuple(
        error
        for task in job_result.tasks
        for error in task.results.errors
    )
    if task_errors:
        return Errors(items=task_errors)

    return DocumentResults(items=tuple(
        document
        for task in job_result.tasks
        for document in task.results.documents
    ))
