# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""JSON conversion and text dumps.

JSON shape of a node:

- no children and no FORCE_* flag: the node's value;
- FORCE_ARRAY, or all-numeric child keys without FORCE_MAP: an array of
  the children in ``child_keys`` order;
- otherwise an object with keys in ``child_keys`` order.

Text dumps come in two forms::

    {main={1=one,2=two}}     # short
    main.1=one               # long, one line per leaf
    main.2=two
"""

from __future__ import annotations

import io
import json
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Any, TextIO

from .exceptions import ParseError
from .values import to_string

if TYPE_CHECKING:
    from .node import Node


def to_python(node: Node) -> Any:
    """Convert a node into plain lists, dicts and values."""
    from .node import NodeFlag

    force_array = bool(node.flags & NodeFlag.FORCE_ARRAY)
    force_map = bool(node.flags & NodeFlag.FORCE_MAP)
    if not node.children and not force_array and not force_map:
        return node.value

    children = [node.children[key] for key in node.child_keys]
    if force_array or (not force_map and node.has_only_numeric_keys()):
        return [to_python(child) for child in children]
    return {child.key: to_python(child) for child in children}


def _json_default(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, timedelta):
        return value.total_seconds()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def to_json(node: Node | None) -> str:
    """Return the compact JSON representation of ``node``."""
    if node is None:
        return ''
    return json.dumps(to_python(node), separators=(',', ':'), default=_json_default)


def merge_json(node: Node, text: str | bytes) -> Node:
    """Set the contents of a JSON object under ``node``.

    Objects become children; arrays become children keyed ``1..n``.

    Raises:
        ParseError: If the document is not valid JSON or not an object.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ParseError(f"invalid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ParseError(f"expected a JSON object, got {type(data).__name__}")

    def _set(keys: list[str], value: Any) -> None:
        if isinstance(value, dict):
            for key, item in value.items():
                _set(keys + [key], item)
        elif isinstance(value, list):
            for index, item in enumerate(value, 1):
                _set(keys + [str(index)], item)
        else:
            node.set(keys, value)

    _set([], data)
    return node


def dump(node: Node | None, stream: TextIO, short: bool = False) -> None:
    """Write a text dump of ``node`` and its descendants to ``stream``."""
    if node is None:
        return

    def _write(current: Node, depth: int) -> None:
        if short and depth > 0:
            stream.write(f"{current.key}=")
            if current.value is not None:
                stream.write(to_string(current.value))
        if current.child_keys:
            if short and depth > 0:
                stream.write('{')
            for index, key in enumerate(current.child_keys):
                if short and index > 0:
                    stream.write(',')
                _write(current.children[key], depth + 1)
            if short and depth > 0:
                stream.write('}')
        elif not short:
            path = '.'.join(current.path())
            stream.write(f"{path}={to_string(current.value)}\n")

    if short:
        stream.write('{')
    _write(node, 0)
    if short:
        stream.write('}')


def dumps(node: Node | None, short: bool = False) -> str:
    """Return the text dump of ``node`` as a string."""
    buffer = io.StringIO()
    dump(node, buffer, short)
    return buffer.getvalue()
