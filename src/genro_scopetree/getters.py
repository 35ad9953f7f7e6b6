# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Accessors for Node.

Every accessor takes a key spec (``*keys``, see ``parse_keys``) and
looks it up with the resolver, so wildcards and inherited scopes work
everywhere. With no keys, the node itself is used.

There are three families per value type:

- ``get_<type>(*keys, default=...)``: returns ``default`` if no node
  matches or the value cannot be converted.
- ``try_get_<type>(*keys)``: raises NodeNotFoundError or ConversionError.
- ``must_get_<type>(*keys)``: raises RequiredKeyError; meant for
  start-up code where a missing key is fatal.

Supported types are string, int, float, bool, duration (timedelta)
and time (aware UTC datetime).
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Any, Callable

from .exceptions import ConversionError, NodeNotFoundError, RequiredKeyError
from .keys import WILDCARD, join_keys, parse_keys
from .nodelist import NodeList
from .reply import Reply
from .resolver import find_first, resolve
from .settings import get_settings
from .values import to_bool, to_duration, to_float, to_int, to_string, to_time

if TYPE_CHECKING:
    from .node import Node


class GettersMixin:
    """Lookup and typed value accessors, mixed into Node."""

    __slots__ = ()

    # ==================== Nodes ====================

    def get_nodes(self, *keys: Any) -> NodeList:
        """Return every node matching ``keys``, nearest scope first."""
        return NodeList(resolve(self, parse_keys(keys)))

    def try_get_node(self, *keys: Any) -> Node:
        """Return the first node matching ``keys``.

        Raises:
            NodeNotFoundError: If nothing matches.
        """
        node = find_first(self, parse_keys(keys))
        if node is None:
            raise NodeNotFoundError(f"node not found: {join_keys(keys)}")
        return node

    def get_node(self, *keys: Any, default: Node | None = None) -> Node | None:
        """Return the first node matching ``keys``, or ``default``."""
        node = find_first(self, parse_keys(keys))
        return default if node is None else node

    def must_get_node(self, *keys: Any) -> Node:
        return self._must(lambda node: node, keys)

    # ==================== Raw values ====================

    def try_get(self, *keys: Any) -> Any:
        """Return the value of the first node matching ``keys``.

        Raises:
            NodeNotFoundError: If nothing matches.
        """
        return self.try_get_node(*keys).value

    def get(self, *keys: Any, default: Any = None) -> Any:
        """Return the value of the first node matching ``keys``, or ``default``."""
        node = find_first(self, parse_keys(keys))
        return default if node is None else node.value

    def must_get(self, *keys: Any) -> Any:
        return self._must(lambda node: node.value, keys)

    # ==================== Typed values ====================

    def _convert(self, conv: Callable[[Any], Any], keys: tuple, default: Any) -> Any:
        try:
            return conv(self.try_get(*keys))
        except (NodeNotFoundError, ConversionError):
            return default

    def _must(self, conv: Callable[[Any], Any], keys: tuple) -> Any:
        try:
            node = self.try_get_node(*keys)
            return conv(node)
        except (NodeNotFoundError, ConversionError) as exc:
            raise RequiredKeyError(f"Required conf key {join_keys(keys)}: {exc}") from exc

    def try_get_string(self, *keys: Any) -> str:
        return to_string(self.try_get(*keys))

    def get_string(self, *keys: Any, default: str = '') -> str:
        return self._convert(to_string, keys, default)

    def must_get_string(self, *keys: Any) -> str:
        return self._must(lambda node: to_string(node.value), keys)

    def try_get_int(self, *keys: Any) -> int:
        return to_int(self.try_get(*keys))

    def get_int(self, *keys: Any, default: int = 0) -> int:
        return self._convert(to_int, keys, default)

    def must_get_int(self, *keys: Any) -> int:
        return self._must(lambda node: to_int(node.value), keys)

    def try_get_float(self, *keys: Any) -> float:
        return to_float(self.try_get(*keys))

    def get_float(self, *keys: Any, default: float = 0.0) -> float:
        return self._convert(to_float, keys, default)

    def must_get_float(self, *keys: Any) -> float:
        return self._must(lambda node: to_float(node.value), keys)

    def try_get_bool(self, *keys: Any) -> bool:
        return to_bool(self.try_get(*keys))

    def get_bool(self, *keys: Any, default: bool = False) -> bool:
        return self._convert(to_bool, keys, default)

    def must_get_bool(self, *keys: Any) -> bool:
        return self._must(lambda node: to_bool(node.value), keys)

    def try_get_duration(self, *keys: Any) -> timedelta:
        return to_duration(self.try_get(*keys))

    def get_duration(self, *keys: Any, default: timedelta = timedelta(0)) -> timedelta:
        return self._convert(to_duration, keys, default)

    def must_get_duration(self, *keys: Any) -> timedelta:
        return self._must(lambda node: to_duration(node.value), keys)

    def try_get_time(self, *keys: Any) -> datetime:
        return to_time(self.try_get(*keys))

    def get_time(self, *keys: Any, default: datetime | None = None) -> datetime | None:
        return self._convert(to_time, keys, default)

    def must_get_time(self, *keys: Any) -> datetime:
        return self._must(lambda node: to_time(node.value), keys)

    # ==================== Collections ====================

    def get_values(self, *keys: Any) -> list[Any]:
        """Return the values of every matching leaf node."""
        return [node.value for node in self.get_nodes(*keys) if node.is_leaf]

    def get_string_values(self, *keys: Any) -> list[str]:
        """Return the string values of every matching node."""
        return [to_string(node.value) for node in self.get_nodes(*keys)]

    def get_map(self, *keys: Any) -> dict[str, Any]:
        """Return a ``{key: value}`` dict for a spec like ``'region.*.name'``.

        The dict keys are the keys of the nodes matched at the position of
        the last ``*``; the values come from the rest of the key spec below
        them. When several scopes provide the same key, the nearest wins.

        Example:
            >>> root.get_map('region.*.name')
            {'eu': 'Europe', 'us': 'United States'}
        """
        spec = parse_keys(keys) if keys else [WILDCARD]
        last_star = 0
        for index, key in enumerate(spec):
            if key == WILDCARD:
                last_star = index
        until_star, after_star = spec[:last_star + 1], spec[last_star + 1:]

        result: dict[str, Any] = {}
        for node in resolve(self, until_star):
            if node.key in result:
                continue
            target = find_first(node, after_star)
            if target is not None:
                result[node.key] = target.value
        return result

    def get_string_map(self, *keys: Any) -> dict[str, str]:
        """Like ``get_map``, with values converted to strings."""
        return {key: to_string(value) for key, value in self.get_map(*keys).items()}

    def get_settings(self, *keys: Any) -> Reply:
        """Evaluate the settings group(s) at ``keys``; see ``settings``."""
        return get_settings(self, keys)

    def template_funcs(self) -> dict[str, Callable[..., Any]]:
        """Return lookup functions bound to this node, for template globals.

        Example:
            >>> env = jinja2.Environment()
            >>> env.globals.update(root.template_funcs())
            >>> env.from_string("{{ get('server.port') }}").render()
            '8080'
        """
        return {
            'get': self.get,
            'getnodes': self.get_nodes,
            'getvalues': self.get_values,
            'getmap': self.get_map,
            'getsettings': self.get_settings,
        }
