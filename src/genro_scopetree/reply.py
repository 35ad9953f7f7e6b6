# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Reply - a mapping with multiple string values per key."""

from __future__ import annotations

from .exceptions import ConversionError
from .values import to_bool, to_int


class Reply(dict[str, list[str]]):
    """A dict of ``key -> [values]`` produced by settings evaluation.

    Example:
        >>> reply = Reply()
        >>> reply.add('max', '12')
        >>> reply.add('max', '8')
        >>> reply
        {'max': ['12', '8']}
        >>> reply.first('max')
        '12'
    """

    def set(self, key: str, *values: str) -> None:
        """Replace the values for ``key``."""
        self[key] = list(values)

    def add(self, key: str, *values: str) -> None:
        """Append values to ``key``."""
        self.setdefault(key, []).extend(values)

    def first(self, key: str) -> str:
        """Return the first value for ``key``, or '' if there is none."""
        values = self.get(key)
        return values[0] if values else ''

    def get_int(self, key: str) -> int:
        """Return the first value for ``key`` as an int, or 0."""
        try:
            return to_int(self.first(key))
        except ConversionError:
            return 0

    def get_bool(self, key: str) -> bool:
        """Return the first value for ``key`` as a bool; False unless truthy."""
        try:
            return to_bool(self.first(key))
        except ConversionError:
            return False
