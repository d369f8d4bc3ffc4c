# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Genro-TreeSelect - Hierarchical multi-select state engine.

A lightweight, zero-dependency library that keeps checkbox selection and
expansion state consistent across a forest of labeled records, for the
Genro ecosystem (Genro Kyō).
"""

__version__ = "0.1.0"

from .config import TreeSelectConfig
from .engine import TreeSelect
from .exceptions import (
    ForeignNodeError,
    NodeNotFoundError,
    SameKeyWarning,
    TreeSelectError,
)
from .forest import Forest
from .node import TreeSelectNode

__all__ = [
    # Core classes
    "TreeSelect",
    "TreeSelectConfig",
    # Tree model
    "Forest",
    "TreeSelectNode",
    # Exceptions
    "TreeSelectError",
    "NodeNotFoundError",
    "ForeignNodeError",
    "SameKeyWarning",
]
