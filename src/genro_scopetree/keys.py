# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Key spec parsing and escaped splitting.

A key spec is any sequence of keys; each item is converted to a string
and split on dots, so these are all equivalent::

    parse_keys(['main.string.one'])
    parse_keys(['main', 'string', 'one'])
    parse_keys(['main.string', 'one'])

Non-string items are stringified, which allows ``node.get('item', 3)``.
"""

from __future__ import annotations

from typing import Any, Iterable

WILDCARD = '*'
SEPARATOR = '.'
ESCAPE = '\\'


def key_to_string(key: Any) -> str:
    """Convert a single key item to its string form."""
    if isinstance(key, str):
        return key
    if isinstance(key, bool):
        return 'true' if key else 'false'
    return str(key)


def parse_keys(keys: Iterable[Any]) -> list[str]:
    """Flatten a heterogeneous key list into string segments.

    Args:
        keys: Items of any type; strings may contain dot-separated segments.

    Returns:
        Ordered list of segments.

    Example:
        >>> parse_keys(['a', 1, True, 3.5])
        ['a', '1', 'true', '3', '5']
    """
    spec: list[str] = []
    for key in keys:
        spec.extend(key_to_string(key).split(SEPARATOR))
    return spec


def join_keys(keys: Iterable[Any]) -> str:
    """Join a key spec back into its dotted form."""
    return SEPARATOR.join(parse_keys(keys))


def index_esc(s: str, sep: str, escape: str = ESCAPE) -> int:
    """Return the index of the first ``sep`` in ``s`` not preceded by ``escape``.

    Returns -1 when there is no such occurrence.
    """
    offset = 0
    while True:
        index = s.find(sep, offset)
        if index == -1:
            return -1
        if not escape or index < len(escape) or s[index - len(escape):index] != escape:
            return index
        offset = index + len(sep)


def split_n_esc(s: str, sep: str, escape: str = ESCAPE, n: int = -1) -> list[str]:
    """Split ``s`` on unescaped ``sep`` into at most ``n`` parts.

    Escaped separators are unescaped in the resulting parts. ``n=-1``
    means no limit, ``n=0`` returns an empty list.

    Example:
        >>> split_n_esc('max:0,comment:1\\\\,2', ',')
        ['max:0', 'comment:1,2']
    """
    if n == 0:
        return []

    escaped_sep = escape + sep
    parts: list[str] = []
    while (n == -1 or n > 1) and s:
        index = index_esc(s, sep, escape)
        if index < 0:
            break
        parts.append(s[:index].replace(escaped_sep, sep))
        s = s[index + len(sep):]
        if n > 0:
            n -= 1
    parts.append(s.replace(escaped_sep, sep))
    return parts


def split_esc(s: str, sep: str, escape: str = ESCAPE) -> list[str]:
    """Split ``s`` on every unescaped ``sep``."""
    return split_n_esc(s, sep, escape, -1)
