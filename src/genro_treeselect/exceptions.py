# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""TreeSelect exceptions and warnings."""

from __future__ import annotations


class TreeSelectError(Exception):
    """Base exception for TreeSelect errors."""

    pass


class NodeNotFoundError(TreeSelectError, KeyError):
    """Raised when a path or node id does not resolve to a node."""

    pass


class ForeignNodeError(TreeSelectError, ValueError):
    """Raised when a node does not belong to the engine's current forest."""

    pass


class SameKeyWarning(UserWarning):
    """Emitted when the title and children fields share the same name."""

    pass
