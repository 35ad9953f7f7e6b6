# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""NodeList - the list type returned by multi-node lookups."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable

if TYPE_CHECKING:
    from .node import Node


class NodeList(list):
    """A list of nodes with bulk conversion and filtering helpers.

    Example:
        >>> _ = root.get_nodes('item.*.price').values_to_int()
        >>> root.get_nodes('item.*').for_each(lambda n: n.get('name'))
        ['Socks', 'Cool shirt']
    """

    def convert_values(self, conv: Callable[[Node], Any], *keys: str) -> NodeList:
        """Replace each node's value with ``conv(node)``.

        Only nodes whose key is in ``keys`` are converted; all of them
        when no key is given.
        """
        for node in self:
            if not keys or node.key in keys:
                node.value = conv(node)
        return self

    def values_to_string(self, *keys: str) -> NodeList:
        return self.convert_values(lambda node: node.get_string(), *keys)

    def values_to_int(self, *keys: str) -> NodeList:
        return self.convert_values(lambda node: node.get_int(), *keys)

    def values_to_float(self, *keys: str) -> NodeList:
        return self.convert_values(lambda node: node.get_float(), *keys)

    def values_to_bool(self, *keys: str) -> NodeList:
        return self.convert_values(lambda node: node.get_bool(), *keys)

    def values_to_duration(self, *keys: str) -> NodeList:
        return self.convert_values(lambda node: node.get_duration(), *keys)

    def for_each(self, callback: Callable[[Node], Any]) -> list[Any]:
        """Return ``[callback(node) for node in self]``."""
        return [callback(node) for node in self]

    def filter(self, callback: Callable[[Node], bool]) -> NodeList:
        """Return the nodes for which ``callback`` is true."""
        return NodeList(node for node in self if callback(node))

    def filter_by_value(self, value: Any) -> NodeList:
        """Return the nodes whose value equals ``value``."""
        return self.filter(lambda node: node.value == value)

    def first(self) -> Node | None:
        """Return the first node, or None if the list is empty."""
        return self[0] if self else None
