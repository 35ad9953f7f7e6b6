# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Settings evaluation.

A settings group is a node whose children are *cases*, evaluated in
order like the branches of a switch statement. Say a "Zip code" label
should get a suffix depending on the category and type of an ad::

    settings.1.default=label:Zip code
    settings.1.continue=1
    settings.2.keys.1=category
    settings.2.keys.2=type
    settings.2.1001.sale.value=suffix:(of house)
    settings.2.1002.rent.value=suffix:(of apartment)
    settings.3.keys.1=?pickup_location
    settings.3.true.value=suffix:(of pick-up location)

A case matches when:

- it has a ``default`` child: its value is used unconditionally;
- or it has a ``keys`` list: the current value of each listed key is
  looked up in the evaluation context (``?key`` tests presence instead,
  giving ``true``/``false``), those values form a path below the case,
  and ``<path>.value`` exists.

The first matching case stops the evaluation, unless it has a truthy
``continue`` child. A payload is a comma-separated list of
``subkey:subvalue`` items; items without a colon use the sub-key
``value``. Commas and colons can be escaped with a backslash.

The evaluation context is the tree of the node ``get_settings`` is
called on, usually a temporary scope holding the request's keys::

    reply = config.new_scope(category=1001, type='sale').get_settings('settings')
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterable

from .keys import ESCAPE, WILDCARD, parse_keys, split_esc, split_n_esc
from .reply import Reply
from .resolver import find_first, resolve
from .values import to_string

if TYPE_CHECKING:
    from .node import Node

DEFAULT_SUBKEY = 'value'
PRESENCE_PREFIX = '?'


def get_settings(node: Node | None, keys: Iterable[Any]) -> Reply:
    """Evaluate every settings group matching ``keys`` against ``node``.

    When the last segment of ``keys`` is ``*``, each sub-key is prefixed
    with the key of the group that produced it (``<group>_<subkey>``, or
    just ``<group>`` for the default sub-key).

    Args:
        node: The evaluation context; also the starting point for ``keys``.
        keys: Key spec of the settings group(s).

    Returns:
        A Reply, empty when ``node`` is None or ``keys`` is empty.
    """
    reply = Reply()
    spec = parse_keys(keys)
    if node is None or not spec:
        return reply

    use_prefix = spec[-1] == WILDCARD
    for group in resolve(node, spec):
        prefix = group.key if use_prefix else None
        for case in resolve(group, [WILDCARD]):
            payload = _match_case(node, case)
            if payload is None:
                continue
            _add_payload(reply, payload, prefix)
            if not case.get_bool('continue'):
                break
    return reply


def _match_case(context: Node, case: Node) -> str | None:
    """Return the payload of a matching case, or None if it does not match."""
    default = find_first(case, ['default'])
    if default is not None:
        return to_string(default.value)

    keys_node = find_first(case, ['keys'])
    if keys_node is None:
        return None

    value_spec: list[str] = []
    for wanted in keys_node.get_string_values(WILDCARD):
        if wanted.startswith(PRESENCE_PREFIX):
            present = find_first(context, parse_keys([wanted[1:]])) is not None
            value_spec.append('true' if present else 'false')
        else:
            value_spec.append(to_string(context.get(wanted)))
    value_spec.append(DEFAULT_SUBKEY)

    value_node = find_first(case, parse_keys(value_spec))
    if value_node is None:
        return None
    return to_string(value_node.value)


def _add_payload(reply: Reply, payload: str, prefix: str | None) -> None:
    for item in split_esc(payload, ',', ESCAPE):
        parts = split_n_esc(item, ':', ESCAPE, 2)
        if len(parts) == 2:
            sub_key, sub_value = parts
        else:
            sub_key, sub_value = DEFAULT_SUBKEY, parts[0]

        if prefix is not None:
            sub_key = prefix if sub_key == DEFAULT_SUBKEY else f'{prefix}_{sub_key}'
        reply.add(sub_key, sub_value)
