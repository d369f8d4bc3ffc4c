# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""TreeSelect node class."""

from __future__ import annotations

from typing import Any, Mapping


class TreeSelectNode:
    """A node in a TreeSelect forest.

    Each node has:
    - record: The caller's mapping (a private deep copy of it)
    - node_id: Pre-order position in the forest, stable for its lifetime
    - title: The label read through the configured accessor, or None
    - children: Ordered list of child nodes
    - selected / expanded: The two engine-managed flags

    The parent is not stored on the node: the forest keeps a separate
    parent index (see Forest.parent_of).

    Example:
        >>> node = TreeSelectNode({'title': 'Apple'}, 0, title='Apple')
        >>> node.title
        'Apple'
        >>> node.is_leaf
        True
    """

    __slots__ = ('record', 'node_id', 'title', 'children', 'selected', 'expanded')

    def __init__(
        self,
        record: Mapping[str, Any],
        node_id: int,
        title: str | None = None,
        selected: bool = False,
        expanded: bool = False,
    ) -> None:
        self.record = record
        self.node_id = node_id
        self.title = title
        self.children: list[TreeSelectNode] = []
        self.selected = selected
        self.expanded = expanded

    def __repr__(self) -> str:
        flags = ''.join((
            'S' if self.selected else '-',
            'E' if self.expanded else '-',
        ))
        return (
            f"TreeSelectNode({self.title!r}, id={self.node_id}, "
            f"children={len(self.children)}, {flags})"
        )

    def __getitem__(self, key: str) -> Any:
        """Read a raw field of the record."""
        return self.record[key]

    def get(self, key: str, default: Any = None) -> Any:
        """Read a raw field of the record, with default."""
        return self.record.get(key, default)

    @property
    def is_branch(self) -> bool:
        """True if this node has at least one child."""
        return bool(self.children)

    @property
    def is_leaf(self) -> bool:
        """True if this node has no children."""
        return not self.children

    @property
    def has_title(self) -> bool:
        """True if the record carries a renderable (string) label."""
        return self.title is not None
