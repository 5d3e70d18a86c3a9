"""Token tree serialization for debugging and inspection.

Converts a token tree to JSON-compatible dicts. Output is deterministic
(sorted keys, fields left at their defaults omitted) so dumps can be
diffed and used as test fixtures.

``super_class`` is written as the referenced token's index; ``parent`` is
implied by nesting.

Example:
    from treelex import tokenize
    from treelex.serialization import to_json

    root = tokenize("class Foo {}")
    print(to_json(root, indent=2))

Thread Safety:
    All functions are pure. Safe to call from any thread.

"""

import json
from typing import Any

from treelex.tokens import Token

_SEMANTIC_FIELDS = (
    "name",
    "operator",
    "format",
    "value",
    "class_name",
    "super_class_name",
    "provider",
)


def to_dict(token: Token) -> dict[str, Any]:
    """Convert a token (and its children) to a JSON-compatible dict."""
    result: dict[str, Any] = {
        "type": token.token_name,
        "index": token.index,
        "raw": token.raw,
        "start": token.start.to_dict(),
        "end": token.end.to_dict() if token.end is not None else None,
    }
    for name in _SEMANTIC_FIELDS:
        value = getattr(token, name)
        if value is not None:
            result[name] = value
    if token.is_big:
        result["is_big"] = True
    if token.super_class is not None:
        result["super_class"] = token.super_class.index
    if token.children is not None:
        result["children"] = [to_dict(child) for child in token.children]
    return result


def to_json(token: Token, *, indent: int | None = None) -> str:
    """Serialize a token tree to a JSON string."""
    return json.dumps(to_dict(token), indent=indent, sort_keys=True, ensure_ascii=False)
