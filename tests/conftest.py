import json
import logging
from http import HTTPStatus

import pytest
import requests

ENDPOINT = "https://language.example.com"
OPERATION_URL = "https://language.example.com/language/analyze-documents/jobs/job-1?api-version=2024-11-15-preview"
SOURCE = "https://acct.blob.core.windows.net/input/report.docx"
TARGET = "https://acct.blob.core.windows.net/output/"


def make_response(status_code=200, body=None, headers=None, reason=None, content=None, url=OPERATION_URL):
    """Build a real `requests.Response` without touching the network."""
    response = requests.Response()
    response.status_code = status_code
    if reason is None:
        try:
            reason = HTTPStatus(status_code).phrase
        except ValueError:
            reason = ""
    response.reason = reason
    if content is None:
        content = json.dumps(body).encode("utf-8") if body is not None else b""
    response._content = content
    response.headers.update(headers or {})
    response.encoding = "utf-8"
    response.url = url
    return response


class StubSession:
    """Stands in for `requests.Session`.

    Each queue entry is a response, an exception to raise, or a callable
    producing either. The last entry repeats once the queue is exhausted.
    """

    def __init__(self, post=None, get=None):
        self.post_queue = list(post or [])
        self.get_queue = list(get or [])
        self.calls = []

    def post(self, url, **kwargs):
        self.calls.append(("POST", url, kwargs))
        return self._next(self.post_queue)

    def get(self, url, **kwargs):
        self.calls.append(("GET", url, kwargs))
        return self._next(self.get_queue)

    @property
    def get_count(self):
        return sum(1 for method, _, _ in self.calls if method == "GET")

    @staticmethod
    def _next(queue):
        if not queue:
            raise AssertionError("unexpected request")
        item = queue.pop(0) if len(queue) > 1 else queue[0]
        if callable(item) and not isinstance(item, requests.Response):
            item = item()
        if isinstance(item, BaseException):
            raise item
        return item


class FakeClock:
    """Monotonic clock advanced only by `sleep`."""

    def __init__(self):
        self.now = 0.0
        self.sleeps = []

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


def succeeded_job(documents=None, task_errors=None, **extra):
    body = {
        "jobId": "job-1",
        "status": "succeeded",
        "tasks": {
            "items": [
                {
                    "kind": "PiiEntityRecognitionLROResults",
                    "status": "succeeded",
                    "results": {
                        "documents": documents or [],
                        "errors": task_errors or [],
                        "modelVersion": "2024-04-15",
                    },
                }
            ]
        },
    }
    body.update(extra)
    return body


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def restore_root_logging():
    """Undo handler and level changes made by `configure_logging`."""
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    yield root
    for handler in list(root.handlers):
        if handler not in saved_handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in saved_handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(saved_level)
