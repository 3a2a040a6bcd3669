"""Uniform `{isError, content}` tool response envelope.

Response formatting:
    {"isError": false, "content": {"type": "text", "text": "<payload>"}}

Rendering rules:
    - `DocumentResults` -> isError=false, text = JSON array of documents.
    - `Errors`          -> isError=true,  text = JSON of the errors.
    - exception         -> isError=true,  text = exception message.
    - `ToolResponse`    -> returned unchanged.
    - str               -> isError=false, text unchanged.
    - anything else     -> isError=false, text = JSON encoding.

`run_tool` is the single tool boundary: it catches every exception raised by
a tool operation, logs it, and returns an envelope. Neither `wrap` nor
`run_tool` raises.
"""

import json
import logging
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from language_tools.documents.reconciler import DocumentResults, Errors

logger = logging.getLogger(__name__)

RENDER_FAILURE_TEXT = "Failed to render tool response."


class TextContent(BaseModel):
    type: Literal["text"] = "text"
    text: str


class ToolResponse(BaseModel):
    """Envelope returned by every tool operation."""

    model_config = ConfigDict(populate_by_name=True)

    is_error: bool = Field(default=False, alias="isError")
    content: TextContent

    @property
    def text(self) -> str:
        return self.content.text

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


def _error_text(err: BaseException) -> str:
    return str(err) or err.__class__.__name__


def wrap(value) -> ToolResponse:
    """Wrap an outcome, payload or exception into a `ToolResponse`."""
    try:
        if isinstance(value, ToolResponse):
            return value
        if isinstance(value, BaseException):
            return ToolResponse(is_error=True, content=TextContent(text=_error_text(value)))
        if isinstance(value, (DocumentResults, Errors)):
            return ToolResponse(is_error=value.is_error, content=TextContent(text=value.to_json()))
        if isinstance(value, str):
            return ToolResponse(content=TextContent(text=value))
        return ToolResponse(content=TextContent(text=json.dumps(value, default=str)))
    except Exception:
        logger.exception("Failed to render tool response")
        return ToolResponse(is_error=True, content=TextContent(text=RENDER_FAILURE_TEXT))


def error_response(payload) -> ToolResponse:
    """Build an isError envelope from a message or a JSON-serializable payload."""
    text = payload if isinstance(payload, str) else json.dumps(payload, default=str)
    return ToolResponse(is_error=True, content=TextContent(text=text))


def run_tool(operation_name: str, operation, *args, **kwargs) -> ToolResponse:
    """Invoke one tool operation and wrap whatever it returns or raises."""
    try:
        result = operation(*args, **kwargs)
    except Exception as err:
        logger.exception("Error in %s: %s", operation_name, err)
        return wrap(err)
    return wrap(result)
