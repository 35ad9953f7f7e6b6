# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Loader for the line-oriented configuration format.

Format rules:

- blank lines and lines starting with ``#`` are ignored;
- ``include <filename>`` loads another file, relative to the current one.
  Each file is loaded at most once, so include cycles are harmless;
- ``key=value`` sets a string value; keys and values are trimmed;
- ``key:type=value`` converts the value, where type is one of
  ``string int float bool duration date time``, optionally prefixed with
  ``[]`` for a comma-separated list (commas escaped as ``\\,``);
- anything else is a syntax error.

Example::

    # defaults
    server.host=localhost
    server.port:int=8080
    server.timeout:duration=1m30s
    server.aliases:[]string=www,api
    include local.conf

Loading is not atomic: when an error is raised, entries read before the
failing line have already been set.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import TYPE_CHECKING, Any, Iterable

from .exceptions import ConversionError, ParseError, ScopeTreeError
from .keys import ESCAPE, split_esc
from .values import CONVERTERS

if TYPE_CHECKING:
    from .node import Node

logger = logging.getLogger(__name__)

IGNORE_RE = re.compile(r'^\s*(#.*)?$')
INCLUDE_RE = re.compile(r'^\s*include (\S+)\s*$')
ENTRY_RE = re.compile(
    r'^\s*([^=\s][^=]*?)'
    r'(?::((?:\[\])?(?:string|int|float|bool|duration|date|time)))?'
    r'\s*=\s*(.*?)\s*$'
)
LIST_PREFIX = '[]'


def parse_value_type(value_type: str, value: str) -> Any:
    """Convert the raw text of an entry according to its declared type.

    Args:
        value_type: Type name, e.g. ``'int'`` or ``'[]duration'``;
            empty means string.
        value: Raw value text.

    Raises:
        ParseError: If the type is unknown or the value does not convert.
    """
    is_list = value_type.startswith(LIST_PREFIX)
    base_type = value_type[len(LIST_PREFIX):] if is_list else value_type
    conv = CONVERTERS.get(base_type or 'string')
    if conv is None:
        raise ParseError(f'bad type: "{value_type}"')

    try:
        if is_list:
            return [conv(item) for item in split_esc(value, ',', ESCAPE)]
        return conv(value)
    except ConversionError as exc:
        raise ParseError(str(exc)) from exc


def _parse_entry(node: Node, line: str) -> bool:
    """Set the entry on ``line``; return False if it is not an entry."""
    match = ENTRY_RE.match(line)
    if match is None:
        return False
    key, value_type, value = match.groups()
    node.set_key(key, parse_value_type(value_type or '', value))
    return True


def merge_reader(node: Node, lines: Iterable[str] | str, stop_on_errors: bool = True) -> None:
    """Parse entries from ``lines`` and set them under ``node``.

    ``include`` directives are not supported here; use ``merge_file``.

    Args:
        node: Target node.
        lines: A string, an open text file or any iterable of lines.
        stop_on_errors: If True, a line that is neither blank, a comment
            nor an entry raises ParseError; otherwise it is skipped.

    Raises:
        ParseError: On a bad line (when stopping on errors) or a bad value.
    """
    if isinstance(lines, str):
        lines = lines.splitlines()

    for number, line in enumerate(lines, 1):
        line = line.rstrip('\r\n')
        if IGNORE_RE.match(line):
            continue
        try:
            parsed = _parse_entry(node, line)
        except ParseError as exc:
            raise ParseError(f'line {number}: {exc}') from exc
        if parsed:
            continue
        if stop_on_errors:
            raise ParseError(f'line {number}: bad format: "{line}"')
        logger.debug("Skipping bad line %d: %r", number, line)


def merge_file(node: Node, filename: str | Path) -> None:
    """Load ``filename`` and its includes under ``node``.

    Raises:
        OSError: If ``filename`` itself cannot be opened.
        ParseError: On a syntax error, a bad value or a failed include,
            prefixed with ``<file>:<line>:``.
    """
    seen: set[Path] = set()

    def _load(path: Path) -> None:
        full_path = path.resolve()
        if full_path in seen:
            return
        seen.add(full_path)

        logger.debug("Loading configuration from %s", path)
        with open(path, encoding='utf-8') as stream:
            for number, line in enumerate(stream, 1):
                line = line.rstrip('\r\n')
                if IGNORE_RE.match(line):
                    continue

                include = INCLUDE_RE.match(line)
                if include is not None:
                    include_path = path.parent / include.group(1)
                    try:
                        _load(include_path)
                    except (OSError, ParseError) as exc:
                        raise ParseError(
                            f'{path}:{number}: including "{include_path}": {exc}'
                        ) from exc
                    continue

                try:
                    parsed = _parse_entry(node, line)
                except ParseError as exc:
                    raise ParseError(f'{path}:{number}: {exc}') from exc
                if not parsed:
                    raise ParseError(f'{path}:{number}: bad format: "{line}"')

    _load(Path(filename))


def load(filename: str | Path) -> Node:
    """Return a new root loaded from ``filename``.

    Raises:
        ScopeTreeError: If the file cannot be read or parsed.
    """
    from .node import Node

    root = Node.new_root()
    try:
        merge_file(root, filename)
    except (OSError, ParseError) as exc:
        raise ScopeTreeError(f"Could not load configuration from {filename}: {exc}") from exc
    return root
