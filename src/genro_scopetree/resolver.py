# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Path resolution across stacked scopes.

``resolve`` matches a parsed key spec against a tree:

- ``*`` expands to every child, in ``child_keys`` order.
- A literal key matches the child with that key and, in addition, a
  child literally keyed ``*`` (a catch-all). Both branches are explored,
  exact match first, so one literal segment can yield two matches.
- ``limit`` stops the search once that many nodes were found (0 = all).

When a scope is exhausted without reaching the limit, the search
continues in the scope the tree inherits from. A query that started on
an interior node is re-anchored there using the node's absolute path.

Results from the nearest scope always come before results from
ancestor scopes; they are not merged or re-sorted.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .keys import WILDCARD

if TYPE_CHECKING:
    from .node import Node


def resolve(node: Node | None, keys: list[str], limit: int = 0) -> list[Node]:
    """Return the nodes matching parsed ``keys``, searching ancestor scopes.

    Args:
        node: Starting node. None yields an empty result.
        keys: Parsed key segments (see ``parse_keys``). An empty spec
            matches the starting node itself.
        limit: Maximum number of results; 0 means unbounded.

    Returns:
        Matching nodes, nearest scope first.

    Example:
        >>> _ = root.set_key('main.string.one', 1)
        >>> _ = root.set_key('main.bool.one', True)
        >>> [n.value for n in resolve(root, ['main', '*', 'one'])]
        [1, True]
    """
    if node is None:
        return []
    if not keys:
        return [node]

    result: list[Node] = []

    def is_full() -> bool:
        return limit > 0 and len(result) >= limit

    def visit(child: Node, index: int) -> None:
        if index + 1 == len(keys):
            result.append(child)
        else:
            read_nodes(child, index + 1)

    def read_nodes(current: Node, index: int) -> None:
        key = keys[index]
        if key == WILDCARD:
            for child_key in list(current.child_keys):
                if is_full():
                    return
                visit(current.children[child_key], index)
            return

        for candidate in (key, WILDCARD):
            if is_full():
                return
            child = current.children.get(candidate)
            if child is not None:
                visit(child, index)

    while True:
        read_nodes(node, 0)
        if is_full():
            break

        parent_scope = node.get_root().scope_parent
        if parent_scope is None:
            break

        if not node.is_root:
            # re-anchor at the parent scope's root
            keys = node.path() + keys
        node = parent_scope

    return result


def find_first(node: Node | None, keys: list[str]) -> Node | None:
    """Return the first node matching parsed ``keys``, or None."""
    found = resolve(node, keys, limit=1)
    return found[0] if found else None
