"""Structural equality used as the basis of every comparison assertion."""

from __future__ import annotations

import ast
import datetime
import inspect
import linecache
import re
import textwrap
from collections.abc import Mapping
from typing import Any


def type_of(value: Any) -> str:
    """Return a refined type tag for *value*.

    Distinguishes null, boolean, number, string, array, object (mappings),
    function, regexp and date; any other value is tagged with its lowercased
    class name.
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, Mapping):
        return "object"
    if isinstance(value, re.Pattern):
        return "regexp"
    if isinstance(value, (datetime.date, datetime.datetime)):
        return "date"
    if inspect.isroutine(value):
        return "function"
    return type(value).__name__.lower()


def _lambda_source(fn: Any) -> str | None:
    """Source segment of a lambda, picked among the lambdas starting on its line."""
    code = fn.__code__
    source = "".join(linecache.getlines(code.co_filename))
    if not source:
        return None
    try:
        tree = ast.parse(source)
    except SyntaxError:
        return None
    candidates = [
        node
        for node in ast.walk(tree)
        if isinstance(node, ast.Lambda) and node.lineno == code.co_firstlineno
    ]
    if not candidates:
        return None
    positions = [
        (line, col)
        for line, _, col, _ in code.co_positions()
        if line is not None and col is not None
    ]

    def rank(node: ast.Lambda) -> tuple[int, int, int]:
        start = (node.lineno, node.col_offset)
        end = (node.end_lineno, node.end_col_offset)
        inside = sum(1 for pos in positions if start <= pos < end)
        # innermost wins on ties
        return inside, node.lineno - node.end_lineno, node.col_offset - node.end_col_offset

    return ast.get_source_segment(source, max(candidates, key=rank))


def _source_text(fn: Any) -> str:
    if getattr(fn, "__name__", None) == "<lambda>":
        segment = _lambda_source(fn)
        if segment is not None:
            return segment
    try:
        return textwrap.dedent(inspect.getsource(fn)).strip()
    except (OSError, TypeError):
        return repr(fn)


def _keys(value: Mapping | list | tuple) -> list:
    if isinstance(value, Mapping):
        return list(value.keys())
    return list(range(len(value)))


def _has_key(value: Mapping | list | tuple, key: Any) -> bool:
    if isinstance(value, Mapping):
        return key in value
    return 0 <= key < len(value)


def equals(a: Any, b: Any) -> bool:
    """Deep structural equality.

    Functions compare by source text, mappings and arrays compare key by key,
    everything else with ``==``. There is no cycle detection: comparing
    self-referential structures recurses until ``RecursionError``.
    """
    tag = type_of(a)
    if tag != type_of(b):
        return False
    if tag == "function":
        return _source_text(a) == _source_text(b)
    if tag in ("object", "array"):
        keys = _keys(a)
        if len(keys) != len(_keys(b)):
            return False
        for key in keys:
            if not _has_key(b, key) or not equals(a[key], b[key]):
                return False
        return True
    return a == b
