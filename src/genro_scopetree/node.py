# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Node - the vertex of a stackable configuration tree.

A Node has a key, an opaque value and ordered, named children. Trees can
be stacked: a scope root created with ``new_scope()`` inherits every key
it does not define from the tree it was created from.

Parent links:
    A node is linked upwards in one of two ways, never both:

    - ``StructuralParent``: the node is a child of ``parent`` in the same tree.
    - ``ScopeParent``: the node is a scope root and ``root`` is the root of
      the tree this scope inherits from.

    ``Node.parent`` only ever returns a structural parent and
    ``Node.scope_parent`` only ever returns a scope parent, so code that
    walks a tree cannot climb into another scope by accident.

Example:
    >>> defaults = Node.new_root()
    >>> _ = defaults.set_key('server.timeout', '10s')
    >>> request = defaults.new_scope({'server.port': 8080})
    >>> request.get('server.timeout')
    '10s'
    >>> request.get('server.port')
    8080
"""

from __future__ import annotations

import enum
import logging
import re
from typing import Any, Iterable, Iterator, Mapping, NamedTuple, TextIO

from .getters import GettersMixin
from .keys import parse_keys

logger = logging.getLogger(__name__)

_NUMERIC_KEY_RE = re.compile(r'^[+-]?[0-9]+$')


class NodeFlag(enum.IntFlag):
    """Flags associated with a node."""

    NO_FLAGS = 0
    # serialise children as a JSON object even if all keys are numeric
    FORCE_MAP = 1
    # serialise children as a JSON array even if some keys are not numeric
    FORCE_ARRAY = 2
    # the node is the top of a scope
    IS_ROOT = 4


class StructuralParent(NamedTuple):
    """Link from a node to its parent in the same tree."""

    node: Node


class ScopeParent(NamedTuple):
    """Link from a scope root to the root of the scope it inherits from."""

    root: Node


def is_numeric_key(key: str) -> bool:
    """True if the key is an integer literal (``'1'``, ``'-3'``, ``'001'``)."""
    return bool(_NUMERIC_KEY_RE.match(key))


class Node(GettersMixin):
    """A node in a stackable tree.

    Each node has:
    - key: The node's name under its parent (empty for roots)
    - value: An opaque payload
    - children: Mapping from child key to child Node
    - child_keys: Child keys in iteration order
    - flags: NodeFlag bits

    Example:
        >>> root = Node.new_root()
        >>> _ = root.set_key('main.1', 'one')
        >>> _ = root.set_key('main.2', 'two')
        >>> str(root)
        '{main={1=one,2=two}}'
    """

    __slots__ = ('key', 'value', 'children', 'child_keys', 'flags', '_link')

    def __init__(self, key: str = '', value: Any = None) -> None:
        """Initialize a detached Node.

        Args:
            key: The node's key under its future parent.
            value: Optional initial value.
        """
        self.key = key
        self.value = value
        self.children: dict[str, Node] = {}
        self.child_keys: list[str] = []
        self.flags = NodeFlag.NO_FLAGS
        self._link: StructuralParent | ScopeParent | None = None

    @classmethod
    def new_root(cls) -> Node:
        """Return a new, empty scope root."""
        root = cls('')
        root.flags = NodeFlag.IS_ROOT
        return root

    @classmethod
    def from_args(cls, args: Mapping[str, Any]) -> Node:
        """Return a new root populated from a ``{dotted_key: value}`` mapping."""
        return cls.new_root().merge_args(args)

    # ==================== Special Methods ====================

    def __repr__(self) -> str:
        return f"Node({self.key!r}, value={self.value!r}, children={self.child_keys!r})"

    def __str__(self) -> str:
        from .serialise import dumps
        return dumps(self, short=True)

    def __len__(self) -> int:
        """Return the number of direct children."""
        return len(self.child_keys)

    def __iter__(self) -> Iterator[Node]:
        """Iterate over direct children in order."""
        return (self.children[key] for key in list(self.child_keys))

    def __contains__(self, key: str) -> bool:
        """True if ``key`` is a direct child."""
        return key in self.children

    def __bool__(self) -> bool:
        return True

    # ==================== Links ====================

    @property
    def parent(self) -> Node | None:
        """The structural parent, or None for roots and detached nodes."""
        if isinstance(self._link, StructuralParent):
            return self._link.node
        return None

    @property
    def scope_parent(self) -> Node | None:
        """The root of the inherited scope, or None."""
        if isinstance(self._link, ScopeParent):
            return self._link.root
        return None

    @property
    def is_root(self) -> bool:
        return bool(self.flags & NodeFlag.IS_ROOT)

    @property
    def is_leaf(self) -> bool:
        """True if the node has no children."""
        return not self.child_keys

    def get_root(self) -> Node:
        """Return the top of this node's tree, without leaving its scope."""
        node = self
        while node.parent is not None:
            node = node.parent
        return node

    def depth(self) -> int:
        """Return the number of structural parents; a root has depth 0."""
        depth = 0
        node = self.parent
        while node is not None:
            depth += 1
            node = node.parent
        return depth

    def path(self) -> list[str]:
        """Return the keys from the root down to (and including) this node.

        The root's own key and empty keys are omitted.
        """
        keys: list[str] = []
        node = self
        while node.parent is not None:
            if node.key:
                keys.append(node.key)
            node = node.parent
        keys.reverse()
        return keys

    # ==================== Structure ====================

    def adopt(self, child: Node) -> Node:
        """Make ``child`` a child of this node, under ``child.key``.

        The child is first detached from its previous parent; any existing
        child with the same key is unset and discarded.

        Returns:
            The adopted child.

        Raises:
            ValueError: If ``child`` is this node or one of its ancestors.
        """
        ancestor: Node | None = self
        while ancestor is not None:
            if ancestor is child:
                raise ValueError(f"Cannot adopt {child.key!r} under its own subtree")
            ancestor = ancestor.parent

        old_parent = child.parent
        if old_parent is not None:
            old_parent.unset(child.key)
        child.flags &= ~NodeFlag.IS_ROOT

        if child.key in self.children:
            self.unset(child.key)

        self.children[child.key] = child
        self.child_keys.append(child.key)
        child._link = StructuralParent(self)
        return child

    def unset(self, *keys: Any) -> Node | None:
        """Detach and return the child at ``keys``, or None if not found.

        The detached subtree is left intact so it can be adopted elsewhere.
        """
        return self._unset(parse_keys(keys))

    def _unset(self, keys: list[str]) -> Node | None:
        node = self
        for key in keys[:-1]:
            node = node.children.get(key)
            if node is None:
                return None
        if not keys or keys[-1] not in node.children:
            return None

        key = keys[-1]
        child = node.children.pop(key)
        node.child_keys.remove(key)
        child._link = None
        return child

    def rename(self, new_key: str) -> Node:
        """Change the node's key, keeping it under the same parent.

        The node moves to the end of its parent's order. Renaming a node
        without a structural parent is a no-op.
        """
        parent = self.parent
        if parent is not None:
            parent.unset(self.key)
            self.key = new_key
            parent.adopt(self)
        return self

    def merge(self, original: Node | None) -> Node | None:
        """Merge a copy of ``original`` under this node.

        The node at ``original.key`` is created if missing (and this node's
        children re-sorted), its value is overwritten with
        ``original.value``, and every child of ``original`` is merged into
        it recursively. Existing children not present in ``original`` are
        kept.

        Returns:
            The created or updated node, or None if ``original`` is None.
        """
        if original is None:
            return None

        target = self.children.get(original.key)
        if target is None:
            target = self.adopt(Node(original.key))
            self.sort()

        target.value = original.value
        for key in original.child_keys:
            target.merge(original.children[key])
        return target

    def has_only_numeric_keys(self) -> bool:
        """True if every child key is an integer literal."""
        return all(is_numeric_key(key) for key in self.child_keys)

    def sort(self) -> None:
        """Sort children by key.

        Numeric when every key is an integer literal (ties broken by the
        key string), lexicographic otherwise.
        """
        if self.has_only_numeric_keys():
            self.child_keys.sort(key=lambda k: (int(k), k))
        else:
            self.child_keys.sort()

    def sort_recursively(self) -> None:
        """Sort this node and every descendant, each level independently."""
        self.sort()
        for child in self.children.values():
            if child.children:
                child.sort_recursively()

    # ==================== Setters ====================

    def set(self, keys: Iterable[Any], value: Any = None) -> Node | None:
        """Create or update the node at ``keys``.

        Intermediate nodes are created as needed. A None value leaves an
        existing value untouched.

        Returns:
            The node at ``keys``, or None for an empty spec.
        """
        return set_path(self, parse_keys(keys), value)

    def set_key(self, key: Any, value: Any = None) -> Node | None:
        """Create or update the node at a single (dotted) key."""
        return set_path(self, parse_keys([key]), value)

    def add_node(self, *keys: Any) -> Node | None:
        """Create (or return) the node at ``keys`` without touching its value."""
        return self.set(keys, None)

    def merge_args(self, args: Mapping[str, Any]) -> Node:
        """Set every ``{dotted_key: value}`` item under this node."""
        for key, value in args.items():
            self.set_key(key, value)
        return self

    def push(self) -> Node:
        """Add a child keyed by the next unused integer and return it."""
        index = len(self.child_keys)
        while True:
            index += 1
            key = str(index)
            if key not in self.children:
                return self.adopt(Node(key))

    def push_values(self, *values: Any) -> Node:
        """Push one child per value; return this node."""
        for value in values:
            self.push().value = value
        return self

    def fill_key(self, key: Any, value: Any) -> Node:
        """Set a value, turning the node into a numbered list on repeat calls.

        The first call sets the node's value. Further calls move the
        existing value to child ``1`` and push the new one.

        Example:
            >>> _ = root.fill_key('a', 10)
            >>> _ = root.fill_key('a', 20)
            >>> str(root)
            '{a={1=10,2=20}}'
        """
        target = set_path(self, parse_keys([key]), None)
        if not target.child_keys:
            if target.value is None:
                target.value = value
                return target
            target.push().value = target.value
            target.value = None
        new_node = target.push()
        new_node.value = value
        return new_node

    # ==================== Scopes ====================

    def new_scope(self, *args: Mapping[str, Any], **values: Any) -> Node:
        """Return a new scope root that inherits everything from this tree.

        Values are set in the new scope at this node's position, so calling
        this on an interior node keeps relative keys meaningful.

        Example:
            >>> scope = root.get_node('settings').new_scope(category=1001)
            >>> scope.get('settings.category')
            1001
        """
        root = self.get_root()
        scope = Node.new_root()
        scope._link = ScopeParent(root)

        target = scope
        if root is not self:
            target = set_path(scope, self.path(), None) or scope

        for arg in args:
            target.merge_args(arg)
        target.merge_args(values)
        logger.debug("Created scope at %r with %d values", '.'.join(self.path()), len(target))
        return scope

    # ==================== Serialisation ====================

    def to_json(self) -> str:
        """Return the JSON representation of this node and its descendants."""
        from .serialise import to_json
        return to_json(self)

    def merge_json(self, text: str | bytes) -> Node:
        """Parse a JSON object and set its contents under this node."""
        from .serialise import merge_json
        return merge_json(self, text)

    def dump(self, stream: TextIO, short: bool = False) -> None:
        """Write a text dump of this node to ``stream``."""
        from .serialise import dump
        dump(self, stream, short)

    def merge_file(self, filename: str) -> None:
        """Load a configuration file (following includes) under this node."""
        from .loader import merge_file
        merge_file(self, filename)

    def merge_reader(self, lines: Iterable[str], stop_on_errors: bool = True) -> None:
        """Parse ``key[:type]=value`` lines under this node."""
        from .loader import merge_reader
        merge_reader(self, lines, stop_on_errors)


def set_path(node: Node, keys: list[str], value: Any) -> Node | None:
    """Create-or-update the node at parsed ``keys`` below ``node``.

    Walks direct children only (no wildcards, no scopes), adopting new
    nodes where segments are missing.
    """
    if not keys:
        return None

    target = node
    for key in keys:
        child = target.children.get(key)
        if child is None:
            child = target.adopt(Node(key))
        target = child

    if value is not None:
        target.value = value
    return target
