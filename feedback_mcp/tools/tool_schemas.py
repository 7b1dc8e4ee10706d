"""Generate MCP tool descriptors from tool handler signatures.

Introspects each registered tool handler: the first docstring line becomes the
description, the ``Args:`` section supplies property descriptions, and
parameters without a default are required.
"""

from __future__ import annotations

import functools
import inspect
import logging
from typing import Any, get_args, get_origin

from feedback_mcp.tools.dispatcher import TOOL_HANDLERS
from feedback_mcp.tools.types import ToolDescriptor

logger = logging.getLogger(__name__)

# Python type → JSON Schema type
_TYPE_MAP: dict[type, str] = {
    str: "string",
    int: "integer",
    float: "number",
    bool: "boolean",
    list: "array",
    dict: "object",
}

# Some MCP clients reject tools whose schema has no properties, so argument-less
# tools advertise an unused required placeholder.
PLACEHOLDER_PARAM = "random_string"
PLACEHOLDER_SCHEMA: dict[str, Any] = {
    "type": "string",
    "description": "Dummy parameter for no-parameter tools",
}


def _python_type_to_json_schema(annotation: Any) -> dict[str, Any]:
    """Convert a Python type annotation to a JSON Schema fragment."""
    if annotation is inspect.Parameter.empty or annotation is Any:
        return {"type": "string"}

    origin = get_origin(annotation)

    if origin is list:
        args = get_args(annotation)
        items = _python_type_to_json_schema(args[0]) if args else {"type": "string"}
        return {"type": "array", "items": items}

    if origin is dict:
        return {"type": "object"}

    # Optional[X] / X | None
    args = get_args(annotation)
    if args:
        non_none = [a for a in args if a is not type(None)]
        if len(non_none) == 1:
            return _python_type_to_json_schema(non_none[0])
        return {"type": "string"}

    if annotation in _TYPE_MAP:
        return {"type": _TYPE_MAP[annotation]}

    return {"type": "string"}


def _extract_param_descriptions(docstring: str | None) -> dict[str, str]:
    """Extract parameter descriptions from the ``Args:`` section of a Google-style docstring."""
    if not docstring:
        return {}

    descriptions: dict[str, str] = {}
    in_params = False

    for line in docstring.split("\n"):
        stripped = line.strip()
        if stripped.lower() in ("args:", "parameters:", "params:"):
            in_params = True
            continue
        if in_params:
            if not stripped:
                continue
            if not line.startswith((" ", "\t")) and stripped.endswith(":"):
                in_params = False
                continue
            if ":" in stripped:
                name, desc = stripped.split(":", 1)
                name = name.split("(")[0].strip()
                if name and desc.strip():
                    descriptions[name] = desc.strip()

    return descriptions


def generate_tool_descriptor(tool_name: str) -> ToolDescriptor | None:
    """Generate the descriptor for a single registered tool."""
    handler = TOOL_HANDLERS.get(tool_name)
    if handler is None:
        return None

    # Resolve postponed annotations to real types.
    sig = inspect.signature(handler, eval_str=True)
    docstring = inspect.getdoc(handler) or f"Execute the {tool_name} tool."
    param_docs = _extract_param_descriptions(docstring)

    description = docstring.split("\n")[0].strip() or f"Execute the {tool_name} tool."

    properties: dict[str, Any] = {}
    required: list[str] = []

    for param_name, param in sig.parameters.items():
        # Injected by the dispatcher
        if param_name == "session":
            continue

        schema = _python_type_to_json_schema(param.annotation)
        if param_name in param_docs:
            schema["description"] = param_docs[param_name]

        if param.default is not inspect.Parameter.empty:
            if param.default is not None:
                schema["default"] = param.default
        else:
            required.append(param_name)

        properties[param_name] = schema

    if not properties:
        properties[PLACEHOLDER_PARAM] = dict(PLACEHOLDER_SCHEMA)
        required.append(PLACEHOLDER_PARAM)

    return ToolDescriptor(
        name=tool_name,
        description=description,
        input_schema={
            "type": "object",
            "properties": properties,
            "required": required,
        },
    )


@functools.lru_cache(maxsize=1)
def list_tools() -> tuple[ToolDescriptor, ...]:
    """All tool descriptors in catalog order. Computed once per process."""
    descriptors = []
    for tool_name in TOOL_HANDLERS:
        descriptor = generate_tool_descriptor(tool_name)
        if descriptor:
            descriptors.append(descriptor)
    logger.debug("Registered %d tools", len(descriptors))
    return tuple(descriptors)
