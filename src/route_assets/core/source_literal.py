"""
Render plain data as a JavaScript object-literal expression.

The layout matches the ``tosource`` package so radar-rules.js stays
loadable by consumers that ``eval`` it: JSON-quoted strings, bare keys when
they are legal identifiers, ``key:value`` pairs joined by a comma, a newline
and the next indentation level.
"""

import json
import math
import re
from typing import Any

_IDENTIFIER = re.compile(r"[a-z_$][0-9a-z_$]*|[0-9]+", re.IGNORECASE)

RESERVED_WORDS = frozenset(
    """
    abstract boolean break byte case catch char class const continue debugger
    default delete do double else enum export extends false final finally float
    for function goto if implements import in instanceof int interface long
    native new null package private protected public return short static super
    switch synchronized this throw transient true typeof undefined var void
    volatile while with
    """.split()
)


def legal_key(key: str) -> bool:
    """Whether ``key`` can be written unquoted in an object literal."""
    return bool(_IDENTIFIER.fullmatch(key)) and key not in RESERVED_WORDS


def _scalar(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        return json.dumps(value)
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    raise TypeError(f"Cannot render {type(value).__name__} as a literal")


def _walk(value: Any, indent: str, current: str) -> str:
    if isinstance(value, (list, tuple)):
        nested = current + indent
        return "[" + _join([_walk(item, indent, nested) for item in value], indent, nested) + "]"

    if isinstance(value, dict):
        if not value:
            return "{}"
        nested = current + indent
        elements = []
        for key, item in value.items():
            key = str(key)
            rendered_key = key if legal_key(key) else json.dumps(key, ensure_ascii=False)
            elements.append(f"{rendered_key}:{_walk(item, indent, nested)}")
        return "{" + _join(elements, indent, nested) + "}"

    return _scalar(value)


def _join(elements: list[str], indent: str, nested: str) -> str:
    separator = ",\n" + nested if indent else ","
    return indent[1:] + separator.join(elements) + (" " if indent else "")


def to_source(value: Any, indent: str = "  ") -> str:
    """
    Render ``value`` as an object-literal expression.

    Args:
        value: dicts, lists, strings, numbers, booleans and None
        indent: Indentation unit; an empty string gives a single line

    Returns:
        The literal text, without surrounding parentheses

    Raises:
        TypeError: If ``value`` contains an unsupported type
    """
    return _walk(value, indent, "")


def to_module_source(value: Any) -> str:
    """Parenthesized literal, ready for dynamic evaluation."""
    return f"({to_source(value)})"
