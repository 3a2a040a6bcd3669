"""
HTTP API adapter for the language tools.

Architectural role:
- Expose every enabled tool operation over HTTP.
- Validate the tool/operation selection and the argument object.
- Delegate work to the tool operation and return its envelope unchanged.

Endpoint responsibilities:
- `GET /v1/tools`: list enabled tools, their operations and descriptions.
- `POST /v1/tools/{tool}/{operation}`: invoke one operation with a JSON
  object of keyword arguments.

Input validation behavior:
- Unknown tool or operation -> HTTP 404.
- Body that is not a JSON object -> HTTP 400.
- Arguments the operation does not accept -> error envelope (HTTP 200).

Error handling strategy:
- Tool operations never raise; failures arrive as `isError` envelopes.
- Operations block (document jobs poll for minutes), so they run in the
  thread pool rather than on the event loop.

Side effects:
- The default app builds its tools lazily from environment settings on the
  first request.
"""

import logging
from functools import lru_cache

from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from language_tools.api.envelope import wrap
from language_tools.documents.errors import InvalidArgument

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def _default_tools() -> dict:
    from language_tools.config.settings import ENABLED_TOOLS, load_settings
    from language_tools.tools.registry import ToolClients, build_tools

    settings = load_settings()
    return build_tools(ENABLED_TOOLS, ToolClients.from_settings(settings))


def create_app(tools: dict | None = None) -> FastAPI:
    """Build the FastAPI app.

    Args:
        tools: Mapping of tool name -> tool instance. When omitted, tools are
            built from environment settings on first use.
    """
    app = FastAPI(title="Language Tools")

    def get_tools() -> dict:
        return tools if tools is not None else _default_tools()

    # ============================================================
    # Tool Listing
    # ============================================================

    @app.get("/v1/tools")
    def list_tools():
        return {
            "object": "list",
            "data": [
                {
                    "id": name,
                    "operations": [
                        {"name": op, "description": tool.descriptions.get(op, "")}
                        for op in tool.operations()
                    ],
                }
                for name, tool in get_tools().items()
            ],
        }

    # ============================================================
    # Tool Invocation
    # ============================================================

    @app.post("/v1/tools/{tool_name}/{operation_name}")
    async def invoke_tool(tool_name: str, operation_name: str, request: Request):
        tool = get_tools().get(tool_name)
        if tool is None:
            return JSONResponse(status_code=404, content={"error": f"Unknown tool '{tool_name}'"})

        operation = tool.operations().get(operation_name)
        if operation is None:
            return JSONResponse(
                status_code=404,
                content={"error": f"Unknown operation '{operation_name}' for tool '{tool_name}'"},
            )

        try:
            arguments = await request.json() if await request.body() else {}
        except ValueError:
            return JSONResponse(status_code=400, content={"error": "Request body must be JSON"})

        if not isinstance(arguments, dict):
            return JSONResponse(status_code=400, content={"error": "Arguments must be a JSON object"})

        try:
            response = await run_in_threadpool(operation, **arguments)
        except TypeError as err:
            logger.warning("Bad arguments for %s.%s: %s", tool_name, operation_name, err)
            response = wrap(InvalidArgument(f"Invalid arguments for {operation_name}: {err}"))

        return response.to_dict()

    return app


app = create_app()
