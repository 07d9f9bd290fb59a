"""JSON with comments — parsing and pretty-printing for manifests.

``package.json``-style files in the wild carry ``//`` and ``/* */``
comments and trailing commas. Parsing goes through json5, which accepts
both; output is plain JSON.
"""

from __future__ import annotations

import json
from typing import Any

import json5


class JsoncParseError(ValueError):
    """Raised when text is not valid JSON-with-comments."""


def parse_json(text: str) -> Any:
    """Parse JSON or JSONC *text*.

    Comments and trailing commas are allowed; empty content is not.

    Raises:
        JsoncParseError: With the underlying parser's description.
    """
    if not text.strip():
        msg = "JSON parse error: empty content"
        raise JsoncParseError(msg)
    try:
        return json5.loads(text)
    except ValueError as exc:
        msg = f"JSON parse error: {exc}"
        raise JsoncParseError(msg) from exc


def stringify_json(
    value: Any,
    *,
    spaces: int = 2,
    insert_final_newline: bool = True,
) -> str:
    """Serialize *value* as indented JSON."""
    rendered = json.dumps(value, indent=spaces, ensure_ascii=False)
    if insert_final_newline and not rendered.endswith("\n"):
        rendered += "\n"
    return rendered
