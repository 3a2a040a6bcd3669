"""
Operator CLI for the language tools.

Interface responsibilities:
- List enabled tools and operations (`--list`).
- Invoke one tool operation with JSON keyword arguments and print the
  response envelope as JSON.

Input validation behavior:
- Unknown tools or operations exit with status 2.
- `--args` must decode to a JSON object.

Exit status:
- 0 when the envelope is not an error, 1 when it is, 2 on usage errors.

Examples:
    python -m language_tools.api.cli PiiRedactionTool redact_pii_from_document \
        --args '{"source_document": "https://acct.blob.core.windows.net/in/a.docx",
                 "target_document": "https://acct.blob.core.windows.net/out/"}'
"""

import argparse
import json
import sys

from language_tools.api.envelope import wrap
from language_tools.config.logging_setup import configure_logging
from language_tools.documents.errors import InvalidArgument


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Invoke language analysis tools")
    parser.add_argument("tool", nargs="?", help="Tool name, e.g. PiiRedactionTool")
    parser.add_argument("operation", nargs="?", help="Operation name, e.g. redact_pii_from_text")
    parser.add_argument("--args", default="{}", help="JSON object of keyword arguments")
    parser.add_argument("--tools", default=None, help="Comma-separated tools to enable, or All")
    parser.add_argument("--list", action="store_true", help="List enabled tools and exit")
    parser.add_argument("--log-level", default=None, help="Log level (default: LOG_LEVEL env)")
    return parser


def load_tools(selection):
    """Build tools from environment settings."""
    from language_tools.config.settings import ENABLED_TOOLS, load_settings
    from language_tools.tools.registry import ToolClients, build_tools

    settings = load_settings()
    return build_tools(selection or ENABLED_TOOLS, ToolClients.from_settings(settings))


def main(argv=None, tools=None) -> int:
    parser = build_parser()
    options = parser.parse_args(argv)

    configure_logging(options.log_level)

    try:
        if tools is None:
            tools = load_tools(options.tools)
    except InvalidArgument as err:
        print(f"error: {err}", file=sys.stderr)
        return 2

    if options.list:
        for name, tool in tools.items():
            print(name)
            for operation in tool.operations():
                print(f"  {operation}")
        return 0

    if not options.tool or not options.operation:
        parser.print_usage(sys.stderr)
        return 2

    tool = tools.get(options.tool)
    if tool is None:
        print(f"error: unknown tool '{options.tool}'", file=sys.stderr)
        return 2

    operation = tool.operations().get(options.operation)
    if operation is None:
        print(f"error: unknown operation '{options.operation}' for {options.tool}", file=sys.stderr)
        return 2

    try:
        arguments = json.loads(options.args)
    except ValueError as err:
        print(f"error: --args is not valid JSON: {err}", file=sys.stderr)
        return 2
    if not isinstance(arguments, dict):
        print("error: --args must be a JSON object", file=sys.stderr)
        return 2

    try:
        response = operation(**arguments)
    except TypeError as err:
        response = wrap(InvalidArgument(f"Invalid arguments for {options.operation}: {err}"))

    print(response.to_json())
    return 1 if response.is_error else 0


if __name__ == "__main__":
    sys.exit(main())
