"""
Delta conversion for Slabby MCP Server.

Slab stores post content as a Quill-style delta: a list of operations such as
{"insert": "text", "attributes": {...}} or {"insert": {"image": ...}}. Callers
only ever see plain text, so reads flatten the delta and writes replace the
whole document with a single insert.
"""

from collections.abc import Mapping, Sequence
from typing import Any

TRAILING_NEWLINES = "\n\n"


def _operations(delta: Any) -> list | None:
    """Return the operation list of a delta, or None if it is not one."""
    if isinstance(delta, Mapping):
        delta = delta.get("ops")
    if isinstance(delta, Sequence) and not isinstance(delta, (str, bytes)):
        return list(delta)
    return None


def _utf16_length(text: str) -> int:
    # Editor positions count UTF-16 code units, so astral characters take two
    # and a lone surrogate takes one
    return len(text.encode("utf-16-le", "surrogatepass")) // 2


def flatten(delta: Any) -> str:
    """Convert a delta to plain text.

    Text inserts are concatenated in order. Embeds, deletions and formatting
    attributes contribute nothing. Anything that is not an operation sequence
    yields an empty string.
    """
    ops = _operations(delta)
    if ops is None:
        return ""

    parts = []
    for op in ops:
        if isinstance(op, Mapping) and isinstance(op.get("insert"), str):
            parts.append(op["insert"])
    return "".join(parts)


def delta_length(delta: Any) -> int:
    """Length of a document delta in editor units.

    A text insert counts its length, any other insert (an embed) counts 1.
    """
    ops = _operations(delta)
    if ops is None:
        return 0

    length = 0
    for op in ops:
        if not isinstance(op, Mapping) or "insert" not in op:
            continue
        insert = op["insert"]
        length += _utf16_length(insert) if isinstance(insert, str) else 1
    return length


def normalize_content(text: str) -> str:
    """Make text end with exactly one blank line."""
    return text.rstrip("\n") + TRAILING_NEWLINES


def build_replacement(current_delta: Any, new_text: str) -> dict[str, list[dict[str, Any]]]:
    """Build an edit delta that replaces the whole document with new_text.

    Args:
        current_delta: The post's current content delta
        new_text: Plain text replacing the current content

    Returns:
        {"ops": [{"delete": n}, {"insert": text}]}, without the delete when the
        current document is empty
    """
    ops: list[dict[str, Any]] = []
    length = delta_length(current_delta)
    if length > 0:
        ops.append({"delete": length})
    ops.append({"insert": normalize_content(new_text)})
    return {"ops": ops}
