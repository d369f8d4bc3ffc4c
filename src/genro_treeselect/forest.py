# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Forest - the tree model behind a TreeSelect.

A Forest owns an ordered list of root nodes, each owning its children.
Parents are kept apart, in a non-owning index from node id to parent id,
built eagerly by a full pre-order pass when the data is loaded. Upward
propagation can therefore start from any node, including nodes inside
branches that were never expanded.

Path Syntax:
    - Titles: 'Fruits.Apple' (first child with that title at each level)
    - Positional: '#0' (first root), '#0.#-1' (last child of first root)
    - Combined: 'Fruits.#1'

Example:
    >>> forest = Forest([{'title': 'Fruits', 'data': [{'title': 'Apple'}]}])
    >>> apple = forest.get_node('Fruits.Apple')
    >>> forest.parent_of(apple).title
    'Fruits'
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping, Sequence
from typing import Any, Callable, Iterator

from .config import TreeSelectConfig
from .exceptions import ForeignNodeError, NodeNotFoundError
from .node import TreeSelectNode

logger = logging.getLogger(__name__)


class Forest:
    """An ordered forest of TreeSelectNode with an eager parent index.

    Forest provides:
    - attach_parent(child, parent): first-parent-wins backlink recording
    - parent_of(node) / ancestors(node) / depth(node): upward navigation
    - children_of(node): downward navigation
    - walk() / iter_visible() / descendants(node): pre-order traversals
    - get_node(path) / node_by_id(node_id): lookup
    - as_list(): export back to plain records with current flags

    The source is deep-copied, so later changes to the caller's data do
    not leak into the forest and vice versa. A mapping reachable more than
    once in the source (deepcopy preserves such aliasing) becomes a single
    node whose parent is the first one met in pre-order.
    """

    __slots__ = ('_config', '_roots', '_nodes', '_parents')

    def __init__(
        self,
        source: Sequence[Mapping[str, Any]] | None = None,
        config: TreeSelectConfig | None = None,
    ) -> None:
        """Initialize a Forest.

        Args:
            source: Sequence of root records, or None for an empty forest.
            config: Field accessors and flag names; defaults apply if None.

        Raises:
            TypeError: If source is not a sequence (strings and mappings
                are rejected).
        """
        self._config = config or TreeSelectConfig()
        self._roots: list[TreeSelectNode] = []
        self._nodes: dict[int, TreeSelectNode] = {}
        self._parents: dict[int, int] = {}

        if source is not None:
            self._load_source(source)

    def _load_source(self, source: Sequence[Mapping[str, Any]]) -> None:
        """Deep-copy source and build every node, pre-order."""
        if isinstance(source, (str, bytes, Mapping)) or not isinstance(source, Sequence):
            raise TypeError(
                f"source must be a sequence of mappings, not {type(source).__name__}"
            )

        data = copy.deepcopy(list(source))
        built: dict[int, TreeSelectNode] = {}
        for record in data:
            if not isinstance(record, Mapping):
                logger.debug("Skipping non-mapping root entry: %r", record)
                continue
            root = self._build(record, None, built)
            if all(root is not other for other in self._roots):
                self._roots.append(root)

        logger.debug(
            "Loaded forest: %d roots, %d nodes", len(self._roots), len(self._nodes)
        )

    def _build(
        self,
        record: Mapping[str, Any],
        parent: TreeSelectNode | None,
        built: dict[int, TreeSelectNode],
    ) -> TreeSelectNode:
        """Create the node for record (once) and its subtree.

        Args:
            record: The copied record.
            parent: Node whose children sequence holds record, None for roots.
            built: Nodes created so far, keyed by id() of their record.
        """
        node = built.get(id(record))
        if node is not None:
            if parent is not None:
                self.attach_parent(node, parent)
            return node

        config = self._config
        node = TreeSelectNode(
            record,
            len(self._nodes),
            title=config.title_of(record),
            selected=bool(record.get(config.selected_key, False)),
            expanded=bool(record.get(config.expanded_key, False)),
        )
        built[id(record)] = node
        self._nodes[node.node_id] = node
        if parent is not None:
            self.attach_parent(node, parent)

        for child_record in config.children_of(record):
            if not isinstance(child_record, Mapping):
                logger.debug("Skipping non-mapping child entry: %r", child_record)
                continue
            node.children.append(self._build(child_record, node, built))
        return node

    # ==================== Special Methods ====================

    def __repr__(self) -> str:
        """Return string representation showing root titles."""
        return f"Forest({[root.title for root in self._roots]})"

    def __len__(self) -> int:
        """Return the number of root nodes."""
        return len(self._roots)

    def __iter__(self) -> Iterator[TreeSelectNode]:
        """Iterate over root nodes in order."""
        return iter(self._roots)

    def __contains__(self, node: object) -> bool:
        """True if node is one of this forest's nodes (by identity)."""
        if not isinstance(node, TreeSelectNode):
            return False
        return self._nodes.get(node.node_id) is node

    @property
    def config(self) -> TreeSelectConfig:
        """The configuration the forest was read with."""
        return self._config

    @property
    def roots(self) -> list[TreeSelectNode]:
        """Return a copy of the root list."""
        return list(self._roots)

    @property
    def size(self) -> int:
        """Total number of distinct nodes."""
        return len(self._nodes)

    def check_node(self, node: TreeSelectNode) -> None:
        """Raise ForeignNodeError unless node belongs to this forest."""
        if node not in self:
            raise ForeignNodeError(f"{node!r} does not belong to this forest")

    # ==================== Parent Index ====================

    def attach_parent(self, child: TreeSelectNode, parent: TreeSelectNode) -> None:
        """Record parent as child's parent unless one is already recorded.

        Idempotent. A link that would close a cycle (parent being child
        itself or one of its descendants) is ignored, which keeps every
        upward walk finite.
        """
        if child.node_id in self._parents:
            return
        current: TreeSelectNode | None = parent
        while current is not None:
            if current is child:
                logger.debug("Ignoring cyclic parent link %r -> %r", child, parent)
                return
            current = self.parent_of(current)
        self._parents[child.node_id] = parent.node_id

    def parent_of(self, node: TreeSelectNode) -> TreeSelectNode | None:
        """Return node's parent, or None for a root."""
        parent_id = self._parents.get(node.node_id)
        if parent_id is None:
            return None
        return self._nodes[parent_id]

    def children_of(self, node: TreeSelectNode) -> list[TreeSelectNode]:
        """Return a copy of node's children, in order."""
        return list(node.children)

    def ancestors(self, node: TreeSelectNode) -> list[TreeSelectNode]:
        """Return node's ancestors, nearest first."""
        result = []
        parent = self.parent_of(node)
        while parent is not None:
            result.append(parent)
            parent = self.parent_of(parent)
        return result

    def depth(self, node: TreeSelectNode) -> int:
        """Return node's depth (roots=0)."""
        return len(self.ancestors(node))

    # ==================== Traversal ====================

    def walk(
        self,
        callback: Callable[[TreeSelectNode], Any] | None = None,
    ) -> Iterator[tuple[str, TreeSelectNode]] | None:
        """Walk every node in pre-order, regardless of expansion.

        Each node is visited once, even if it is reachable from more than
        one parent. Paths are positional ('#0.#2') and accepted by
        get_node().

        Args:
            callback: Optional function to call on each node.
                      If provided, walk returns None.

        Yields:
            Tuples of (path, node) if no callback provided.

        Example:
            >>> for path, node in forest.walk():
            ...     print(path, node.title)
        """
        if callback is not None:
            for _, node in self._walk_gen():
                callback(node)
            return None
        return self._walk_gen()

    def _walk_gen(self) -> Iterator[tuple[str, TreeSelectNode]]:
        seen: set[int] = set()

        def _walk(nodes: list[TreeSelectNode], prefix: str) -> Iterator[tuple[str, TreeSelectNode]]:
            for index, node in enumerate(nodes):
                if node.node_id in seen:
                    continue
                seen.add(node.node_id)
                path = f"{prefix}.#{index}" if prefix else f"#{index}"
                yield path, node
                yield from _walk(node.children, path)

        return _walk(self._roots, '')

    def descendants(self, node: TreeSelectNode) -> Iterator[TreeSelectNode]:
        """Yield node's descendants in pre-order, each once."""
        seen = {node.node_id}

        def _descend(current: TreeSelectNode) -> Iterator[TreeSelectNode]:
            for child in current.children:
                if child.node_id in seen:
                    continue
                seen.add(child.node_id)
                yield child
                yield from _descend(child)

        return _descend(node)

    def iter_visible(self) -> Iterator[tuple[int, TreeSelectNode]]:
        """Yield (depth, node) for the rows a view would display.

        Roots are always visible; children only below expanded nodes.
        """
        seen: set[int] = set()

        def _visible(nodes: list[TreeSelectNode], depth: int) -> Iterator[tuple[int, TreeSelectNode]]:
            for node in nodes:
                if node.node_id in seen:
                    continue
                seen.add(node.node_id)
                yield depth, node
                if node.expanded:
                    yield from _visible(node.children, depth + 1)

        return _visible(self._roots, 0)

    # ==================== Lookup ====================

    def node_by_id(self, node_id: int) -> TreeSelectNode:
        """Return the node with the given id.

        Raises:
            NodeNotFoundError: If no node has that id.
        """
        try:
            return self._nodes[node_id]
        except KeyError:
            raise NodeNotFoundError(f"No node with id {node_id}") from None

    def get_node(self, path: str) -> TreeSelectNode:
        """Get node at the given path.

        Args:
            path: Dotted path of titles and/or #N positional segments.

        Returns:
            TreeSelectNode at the path.

        Raises:
            NodeNotFoundError: If path not found.
        """
        if not path:
            raise NodeNotFoundError("Empty path")

        nodes = self._roots
        node: TreeSelectNode | None = None
        for segment in path.split('.'):
            node = self._find_in(nodes, segment)
            nodes = node.children
        return node

    @staticmethod
    def _find_in(nodes: list[TreeSelectNode], segment: str) -> TreeSelectNode:
        """Resolve one path segment against a list of siblings."""
        if segment.startswith('#'):
            rest = segment[1:]
            if rest.removeprefix('-').isdigit():
                index = int(rest)
                if -len(nodes) <= index < len(nodes):
                    return nodes[index]
                raise NodeNotFoundError(
                    f"Position #{index} out of range (0-{len(nodes) - 1})"
                )
        for node in nodes:
            if node.title == segment:
                return node
        raise NodeNotFoundError(f"Path segment '{segment}' not found")

    # ==================== Conversion ====================

    def as_list(self) -> list[dict[str, Any]]:
        """Convert back to plain records in the caller's schema.

        Each record is a fresh dict carrying the current selected and
        expanded flags under the configured field names. Children of a
        branch node are always written under child_key, so callers reading
        children through get_children should set child_key to the field
        the exported children belong in.

        Returns:
            List of root records.
        """
        config = self._config

        def _export(node: TreeSelectNode, stack: set[int]) -> dict[str, Any]:
            record = dict(node.record)
            record[config.selected_key] = node.selected
            record[config.expanded_key] = node.expanded
            if node.children or isinstance(record.get(config.child_key), (list, tuple)):
                stack = stack | {node.node_id}
                record[config.child_key] = [
                    _export(child, stack)
                    for child in node.children
                    if child.node_id not in stack
                ]
            return record

        return [_export(root, set()) for root in self._roots]
