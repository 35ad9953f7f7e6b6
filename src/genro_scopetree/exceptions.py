# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""ScopeTree exceptions."""

from __future__ import annotations


class ScopeTreeError(Exception):
    """Base exception for ScopeTree errors."""

    pass


class NodeNotFoundError(ScopeTreeError, KeyError):
    """Raised when no node matches a key spec."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else 'node not found'


class ConversionError(ScopeTreeError, ValueError):
    """Raised when a value cannot be coerced to the requested type."""

    pass


class ParseError(ScopeTreeError, ValueError):
    """Raised when a configuration source has a bad line or value."""

    pass


class RequiredKeyError(ScopeTreeError):
    """Raised by the must_* accessors when a required key is missing or bad."""

    pass
