"""Service/runtime configuration for the language tools.

Architectural role:
    Centralizes endpoint selection, credential lookup and job-orchestration
    limits for `language_tools.documents`, `language_tools.text`,
    `language_tools.translator`, `language_tools.question_answering` and
    `language_tools.conversations`.

Resolution:
    Values are read from the process environment (optionally seeded from a
    `.env` file) at import time. `load_settings()` snapshots them into an
    immutable `Settings` value so each client is constructed from one
    consistent view.

Failure behavior:
    - Missing key material is represented as `None` in `load_key`.
    - A malformed endpoint raises `InvalidArgument` when settings are loaded.
"""

import os
from dataclasses import dataclass
from urllib.parse import urlparse

from dotenv import load_dotenv

from language_tools.documents.errors import InvalidArgument

load_dotenv()

# Remote analysis service.
LANGUAGE_ENDPOINT = os.getenv("LANGUAGE_ENDPOINT", "")
LANGUAGE_KEY_FILE = os.getenv("LANGUAGE_KEY_FILE", "config/language.key")
LANGUAGE_API_VERSION = os.getenv("LANGUAGE_API_VERSION", "2024-11-15-preview")

# Document-analysis job limits.
JOB_TIMEOUT_MINUTES = int(os.getenv("JOB_TIMEOUT_MINUTES", "300"))
POLL_INTERVAL_SECONDS = float(os.getenv("POLL_INTERVAL_SECONDS", "2"))
MAX_POLL_TRANSPORT_RETRIES = int(os.getenv("MAX_POLL_TRANSPORT_RETRIES", "2"))
REQUEST_TIMEOUT_SECONDS = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "120"))

# Translator service.
TRANSLATOR_ENDPOINT = os.getenv(
    "TRANSLATOR_ENDPOINT", "https://api.cognitive.microsofttranslator.com"
)
TRANSLATOR_KEY_FILE = os.getenv("TRANSLATOR_KEY_FILE", "config/translator.key")
TRANSLATOR_REGION = os.getenv("TRANSLATOR_REGION", "")

# Project-backed language features: knowledge-base question answering and
# conversational language understanding.
QUESTION_ANSWERING_PROJECT_NAME = os.getenv("QUESTION_ANSWERING_PROJECT_NAME", "")
QUESTION_ANSWERING_DEPLOYMENT_NAME = os.getenv("QUESTION_ANSWERING_DEPLOYMENT_NAME", "")
CLU_PROJECT_NAME = os.getenv("CLU_PROJECT_NAME", "")
CLU_DEPLOYMENT_NAME = os.getenv("CLU_DEPLOYMENT_NAME", "")

# Comma-separated tool names, or "All".
ENABLED_TOOLS = os.getenv("ENABLED_TOOLS", "All")


def load_key(path):
    """Load an API key from environment override or key file.

    Resolution order:
        1. Environment variable inferred from file stem (for example
           `config/language.key` -> `LANGUAGE_API_KEY`).
        2. Raw file contents at `path`.

    Args:
        path: Configured key file path or `None`.

    Returns:
        Key string or `None` when not available.
    """
    if not path:
        return None
    key_name = os.path.splitext(os.path.basename(path))[0].upper() + "_API_KEY"
    env_value = os.getenv(key_name)
    if env_value:
        return env_value
    if not os.path.exists(path):
        return None
    with open(path, "r") as f:
        return f.read().strip()


def _require_endpoint(name: str, value: str) -> str:
    parsed = urlparse(value or "")
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise InvalidArgument(
            f"Invalid endpoint for {name}: {value!r}. Please update the environment configuration."
        )
    return value.rstrip("/")


@dataclass(frozen=True)
class Settings:
    """Immutable configuration snapshot consumed by client factories.

    Attributes:
        endpoint: Language service base URL.
        api_key: Language service subscription key.
        api_version: Fixed API version for analyze-documents/analyze-text.
        job_timeout_minutes: Deadline for one polling session.
        poll_interval_seconds: Fixed delay between polls.
        max_poll_transport_retries: Consecutive poll transport failures tolerated.
        request_timeout_seconds: Per-request HTTP timeout.
        translator_endpoint: Translator service base URL.
        translator_api_key: Translator subscription key.
        translator_region: Translator resource region.
        question_answering_project_name: Knowledge-base project name.
        question_answering_deployment_name: Knowledge-base deployment name.
        clu_project_name: Conversational understanding project name.
        clu_deployment_name: Conversational understanding deployment name.
    """

    endpoint: str
    api_key: str | None
    api_version: str = "2024-11-15-preview"
    job_timeout_minutes: int = 300
    poll_interval_seconds: float = 2.0
    max_poll_transport_retries: int = 2
    request_timeout_seconds: float = 120.0
    translator_endpoint: str = "https://api.cognitive.microsofttranslator.com"
    translator_api_key: str | None = None
    translator_region: str = ""
    question_answering_project_name: str = ""
    question_answering_deployment_name: str = ""
    clu_project_name: str = ""
    clu_deployment_name: str = ""


def load_settings() -> Settings:
    """Snapshot the module-level configuration into a `Settings` value.

    Raises:
        InvalidArgument: When the language endpoint is missing or malformed.
    """
    timeout_minutes = JOB_TIMEOUT_MINUTES if JOB_TIMEOUT_MINUTES > 0 else 300

    return Settings(
        endpoint=_require_endpoint("LANGUAGE_ENDPOINT", LANGUAGE_ENDPOINT),
        api_key=load_key(LANGUAGE_KEY_FILE),
        api_version=LANGUAGE_API_VERSION,
        job_timeout_minutes=timeout_minutes,
        poll_interval_seconds=POLL_INTERVAL_SECONDS,
        max_poll_transport_retries=MAX_POLL_TRANSPORT_RETRIES,
        request_timeout_seconds=REQUEST_TIMEOUT_SECONDS,
        translator_endpoint=TRANSLATOR_ENDPOINT.rstrip("/"),
        translator_api_key=load_key(TRANSLATOR_KEY_FILE),
        translator_region=TRANSLATOR_REGION,
        question_answering_project_name=QUESTION_ANSWERING_PROJECT_NAME,
        question_answering_deployment_name=QUESTION_ANSWERING_DEPLOYMENT_NAME,
        clu_project_name=CLU_PROJECT_NAME,
        clu_deployment_name=CLU_DEPLOYMENT_NAME,
    )
