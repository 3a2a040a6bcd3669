"""Translator service transport client.

Call shape:
    POST {endpoint}/translate?api-version=3.0&to=de&to=fr[&from=en]
    body: [{"Text": "..."}]

Failure handling:
    Non-2xx responses raise `ServiceError`; a 2xx body that is not a JSON
    array raises `MalformedResponse`; transport errors propagate.
"""

import requests

from language_tools.documents.errors import InvalidArgument, MalformedResponse
from language_tools.transport import json_body, service_error, subscription_headers

TRANSLATOR_API_VERSION = "3.0"


class TranslatorClient:
    def __init__(
        self,
        endpoint: str,
        api_key: str | None,
        region: str | None = None,
        request_timeout_seconds: float = 120.0,
        session: requests.Session | None = None,
    ):
        self._url = endpoint.rstrip("/") + "/translate"
        self._headers = subscription_headers(api_key, region)
        self._timeout = request_timeout_seconds
        self.session = session or requests.Session()

    @classmethod
    def from_settings(cls, settings, session: requests.Session | None = None) -> "TranslatorClient":
        return cls(
            endpoint=settings.translator_endpoint,
            api_key=settings.translator_api_key,
            region=settings.translator_region,
            request_timeout_seconds=settings.request_timeout_seconds,
            session=session,
        )

    def translate(self, texts, to_languages, from_language: str | None = None) -> list:
        """Translate `texts` into every language in `to_languages`.

        Returns:
            One item per input text, each with a `translations` list.
        """
        texts = [str(t) for t in (texts or [])]
        to_languages = [lang.strip() for lang in (to_languages or []) if lang and lang.strip()]
        if not texts:
            raise InvalidArgument("At least one text to translate is required.")
        if not to_languages:
            raise InvalidArgument("At least one target language is required.")

        params = {"api-version": TRANSLATOR_API_VERSION, "to": to_languages}
        if from_language:
            params["from"] = from_language

        response = self.session.post(
            self._url,
            params=params,
            headers=self._headers,
            json=[{"Text": text} for text in texts],
            timeout=self._timeout,
        )
        if not response.ok:
            raise service_error("translator", response)

        body = json_body(response)
        if not isinstance(body, list):
            raise MalformedResponse("Translator response body is not a JSON array.")
        return body
