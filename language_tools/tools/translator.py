"""Text translation tool."""

from language_tools.api.envelope import run_tool

TRANSLATOR_DESCRIPTION = (
    "Translates text into one or more languages. Requires the text and the list "
    "of two-letter target language codes; the source language is detected "
    "automatically unless given. Returns a JSON array of translations."
)


class TranslatorTool:
    name = "TranslatorTool"
    descriptions = {"translate": TRANSLATOR_DESCRIPTION}

    def __init__(self, translator_client):
        if translator_client is None:
            raise ValueError("TranslatorTool requires a translator client.")
        self.translator_client = translator_client

    def operations(self) -> dict:
        return {"translate": self.translate}

    def translate(self, message: str, target_languages, source_language: str | None = None):
        def _run():
            if isinstance(target_languages, str):
                languages = target_languages.split(",")
            else:
                languages = list(target_languages or [])

            items = self.translator_client.translate([message], languages, from_language=source_language)
            return [item.get("translations", []) for item in items if isinstance(item, dict)]

        return run_tool("translate", _run)
