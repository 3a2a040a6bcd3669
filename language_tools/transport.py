"""Shared HTTP helpers for the remote-service clients.

Error handling strategy:
    Non-2xx responses are turned into `ServiceError` carrying the status code
    and the service's own error message when the body has one. Raw response
    bodies are never copied into exception text.
"""

import requests

from language_tools.documents.errors import LanguageToolError

JSON_HEADERS = {
    "Accept": "application/json",
    "Content-Type": "application/json",
}


class ServiceError(LanguageToolError):
    """A synchronous service call returned a non-success status."""

    def __init__(self, message, status_code=None, code=None):
        super().__init__(message)
        self.status_code = status_code
        self.code = code


def subscription_headers(api_key: str | None, region: str | None = None) -> dict:
    """Build JSON headers plus subscription-key (and optional region) auth."""
    headers = dict(JSON_HEADERS)
    if api_key:
        headers["Ocp-Apim-Subscription-Key"] = api_key
    if region:
        headers["Ocp-Apim-Subscription-Region"] = region
    return headers


def json_body(response: requests.Response):
    """Return the decoded JSON body, or `None` when empty or not JSON."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return None


def service_error(service_name: str, response: requests.Response) -> ServiceError:
    """Build a `ServiceError` from a failed response.

    The message prefers `error.message` from the body (the shape used by both
    the language and translator services) and falls back to the HTTP reason.
    """
    body = json_body(response)
    code = None
    detail = None
    if isinstance(body, dict) and isinstance(body.get("error"), dict):
        code = body["error"].get("code")
        detail = body["error"].get("message")

    label = str(service_name or "service").upper()
    reason = detail or response.reason or "request failed"
    return ServiceError(
        f"{label} HTTP ERROR ({response.status_code}): {reason}",
        status_code=response.status_code,
        code=code,
    )
