"""Helpers for locating JSON embedded in LLM responses."""

from __future__ import annotations


def find_object_end(text: str) -> int:
    """Return the index just past the leading JSON object in ``text``.

    ``text`` must start with ``{``. Depth is tracked by counting braces only,
    so a brace inside a string literal shifts the boundary. Returns -1 when
    the braces never balance.
    """
    depth = 0
    for i, c in enumerate(text):
        if c == "{":
            depth += 1
        elif c == "}":
            depth -= 1
        if depth == 0:
            return i + 1
    return -1
