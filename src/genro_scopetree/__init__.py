# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Genro-ScopeTree - Stackable configuration trees.

A lightweight, zero-dependency library providing ordered trees addressed
by dotted key specs with ``*`` wildcards, stackable scopes that inherit
unset keys, and a small rule engine for settings.
"""

__version__ = "0.1.0"

from .exceptions import (
    ConversionError,
    NodeNotFoundError,
    ParseError,
    RequiredKeyError,
    ScopeTreeError,
)
from .keys import WILDCARD, parse_keys
from .loader import load
from .node import Node, NodeFlag, ScopeParent, StructuralParent
from .nodelist import NodeList
from .reply import Reply
from .resolver import find_first, resolve

__all__ = [
    # Core classes
    "Node",
    "NodeFlag",
    "NodeList",
    "Reply",
    "ScopeParent",
    "StructuralParent",
    # Functions
    "find_first",
    "load",
    "parse_keys",
    "resolve",
    "WILDCARD",
    # Exceptions
    "ScopeTreeError",
    "NodeNotFoundError",
    "ConversionError",
    "ParseError",
    "RequiredKeyError",
]
