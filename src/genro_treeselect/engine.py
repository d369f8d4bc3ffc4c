# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""TreeSelect - hierarchical multi-select state engine.

TreeSelect keeps two flags per node, ``selected`` and ``expanded``, and
keeps selection consistent between ancestors and descendants as a view
reports checkbox and expander presses.

Key Features:
    - **Downward cascade**: selecting a node selects its whole subtree
    - **Upward re-derivation**: a parent is selected iff all its
      immediate children are (no partial state)
    - **Snapshot**: pre-order tuple of the selected nodes, rebuilt in full
      after every mutation
    - **Generation counter**: increases on every mutation; views compare
      it to decide when to redraw, since nodes are mutated in place
    - **Subscriptions**: change notifications keyed by subscriber id

Example:
    >>> picked = []
    >>> tree = TreeSelect(
    ...     [{'title': 'A', 'data': [{'title': 'A1'}, {'title': 'A2'}]}],
    ...     on_check_box_press=picked.append,
    ... )
    >>> tree.press_checkbox(tree.get_node('A.A1'))
    1
    >>> [n.title for n in picked[-1]]
    ['A1']
    >>> tree.press_checkbox(tree.get_node('A.A2'))
    2
    >>> [n.title for n in tree.selection]
    ['A', 'A1', 'A2']
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Any, Callable, Mapping, Sequence

from .config import TreeSelectConfig
from .forest import Forest
from .node import TreeSelectNode

logger = logging.getLogger(__name__)

SubscriberCallback = Callable[[str, TreeSelectNode | None, int], Any]
NodeCallback = Callable[[TreeSelectNode], Any]
SelectionCallback = Callable[[list[TreeSelectNode]], Any]


def _noop(*args: Any) -> None:
    pass


class TreeSelect:
    """Selection engine, expansion controller and reconciliation loop.

    TreeSelect provides:
    - press_checkbox(node): toggle selection as a checkbox press would
    - apply_selection(node, value): set a value and propagate it
    - show_children(node): toggle expansion as an expander press would
    - press_child(node): forward a leaf row press to on_child_press
    - reconcile(): rebuild the selection snapshot and bump the generation
    - subscribe(id, callback) / unsubscribe(id): change notifications

    Every mutating operation returns the new generation.

    Attributes:
        forest: The Forest holding the current nodes.
        selection: Tuple of selected nodes in pre-order.
        generation: Counter increased by every reconciliation.
    """

    __slots__ = (
        '_config', '_forest', '_selection', '_generation', '_subscribers',
        '_on_parent_press', '_on_child_press', '_on_check_box_press',
    )

    def __init__(
        self,
        data: Sequence[Mapping[str, Any]] | None = None,
        config: TreeSelectConfig | None = None,
        *,
        on_parent_press: NodeCallback | None = None,
        on_child_press: NodeCallback | None = None,
        on_check_box_press: SelectionCallback | None = None,
        **options: Any,
    ) -> None:
        """Initialize a TreeSelect.

        Args:
            data: Sequence of root records; deep-copied. None for empty.
            config: Base configuration; defaults apply if None.
            on_parent_press: Called with the node after each show_children.
            on_child_press: Called with the node by press_child.
            on_check_box_press: Called with the full selection list after
                each press_checkbox.
            **options: TreeSelectConfig fields overriding config, e.g.
                auto_select_children=False or title_key='name'.

        Raises:
            TypeError: If an option is not a TreeSelectConfig field, or
                data is not a sequence.

        Example:
            >>> TreeSelect(data, auto_expandable=True)
            >>> TreeSelect(data, TreeSelectConfig(child_key='items'))
        """
        config = config or TreeSelectConfig()
        if options:
            config = dataclasses.replace(config, **options)
        config.check()

        self._config = config
        self._on_parent_press = on_parent_press or _noop
        self._on_child_press = on_child_press or _noop
        self._on_check_box_press = on_check_box_press or _noop
        self._subscribers: dict[str, SubscriberCallback] = {}
        self._generation = 0
        self._forest = Forest(data, config)
        self._selection = self._collect()

    def __repr__(self) -> str:
        return (
            f"TreeSelect(nodes={self._forest.size}, "
            f"selected={len(self._selection)}, generation={self._generation})"
        )

    # ==================== State ====================

    @property
    def config(self) -> TreeSelectConfig:
        """The active configuration."""
        return self._config

    @property
    def forest(self) -> Forest:
        """The Forest holding the current nodes."""
        return self._forest

    @property
    def roots(self) -> list[TreeSelectNode]:
        """Root nodes in order."""
        return self._forest.roots

    @property
    def selection(self) -> tuple[TreeSelectNode, ...]:
        """Selected nodes in pre-order, as of the last reconciliation."""
        return self._selection

    @property
    def generation(self) -> int:
        """Counter increased by every reconciliation."""
        return self._generation

    def get_node(self, path: str) -> TreeSelectNode:
        """Shortcut for forest.get_node(path)."""
        return self._forest.get_node(path)

    def set_data(self, data: Sequence[Mapping[str, Any]] | None) -> int:
        """Replace the whole forest with a fresh copy of data.

        Nodes of the previous forest are discarded; passing one of them
        to an operation afterwards raises ForeignNodeError.
        """
        self._forest = Forest(data, self._config)
        return self.reconcile(_event='reload')

    # ==================== Selection ====================

    def press_checkbox(self, node: TreeSelectNode) -> int:
        """Toggle node's selection and report the new snapshot.

        With auto_expandable, a node being selected is also expanded.
        on_check_box_press receives the rebuilt selection as a list.

        Args:
            node: Any node of the current forest.

        Returns:
            The new generation.
        """
        self._forest.check_node(node)
        value = not node.selected
        if self._config.auto_expandable and not node.selected:
            node.expanded = not node.selected
        generation = self.apply_selection(node, value)
        self._on_check_box_press(list(self._selection))
        return generation

    def apply_selection(self, node: TreeSelectNode, value: bool) -> int:
        """Set node.selected to value and propagate it.

        The node's subtree is updated first (auto_select_children), then
        every ancestor is re-derived from its immediate children
        (auto_select_parents), so ancestors see final descendant values.

        Returns:
            The new generation.
        """
        forest = self._forest
        forest.check_node(node)
        value = bool(value)
        node.selected = value

        if self._config.auto_select_children:
            for descendant in forest.descendants(node):
                descendant.selected = value

        if self._config.auto_select_parents:
            self._derive_ancestors(node)

        logger.debug("Applied selected=%s to %r", value, node)
        return self.reconcile(_event='select', _node=node)

    def propagate_up(self, node: TreeSelectNode) -> int:
        """Re-derive node's ancestors without changing node itself.

        Runs regardless of auto_select_parents. Idempotent: a second call
        leaves every flag as it was.

        Returns:
            The new generation.
        """
        self._forest.check_node(node)
        self._derive_ancestors(node)
        return self.reconcile(_event='select', _node=node)

    def _derive_ancestors(self, node: TreeSelectNode) -> None:
        """Set each ancestor, nearest first, to the AND of its children."""
        for ancestor in self._forest.ancestors(node):
            ancestor.selected = all(child.selected for child in ancestor.children)

    # ==================== Expansion ====================

    def show_children(self, node: TreeSelectNode) -> int:
        """Toggle node's expansion and notify on_parent_press.

        Selection is left untouched; the generation still changes so the
        view redraws the expander icon.

        Returns:
            The new generation.
        """
        self._forest.check_node(node)
        node.expanded = not node.expanded
        self._on_parent_press(node)
        return self.reconcile(_event='expand', _node=node)

    def press_child(self, node: TreeSelectNode) -> int:
        """Forward a leaf row press to on_child_press. No state change."""
        self._forest.check_node(node)
        self._on_child_press(node)
        return self._generation

    def expand_all(self) -> int:
        """Expand every node that has children."""
        return self._set_expanded(True)

    def collapse_all(self) -> int:
        """Collapse every node that has children."""
        return self._set_expanded(False)

    def _set_expanded(self, value: bool) -> int:
        for _, node in self._forest.walk():
            if node.is_branch:
                node.expanded = value
        return self.reconcile(_event='expand')

    # ==================== Reconciliation ====================

    def _collect(self) -> tuple[TreeSelectNode, ...]:
        """Return every selected node, pre-order, each once."""
        return tuple(node for _, node in self._forest.walk() if node.selected)

    def reconcile(
        self,
        _event: str = 'reconcile',
        _node: TreeSelectNode | None = None,
    ) -> int:
        """Rebuild the selection snapshot and bump the generation.

        Traverses the whole forest, collapsed branches included. The new
        snapshot replaces the old one in a single assignment.

        Args:
            _event: Internal use, event name passed to subscribers.
            _node: Internal use, node passed to subscribers.

        Returns:
            The new generation.
        """
        self._selection = self._collect()
        self._generation += 1
        logger.debug(
            "Reconciled generation %d: %d selected", self._generation, len(self._selection)
        )
        self._notify(_event, _node)
        return self._generation

    # ==================== Subscriptions ====================

    def subscribe(self, subscriber_id: str, callback: SubscriberCallback) -> None:
        """Register callback(event, node, generation) under subscriber_id.

        Events are 'select', 'expand', 'reload' and 'reconcile'; node is
        None for events not tied to a single node. Subscribing an existing
        id replaces its callback.
        """
        self._subscribers[subscriber_id] = callback

    def unsubscribe(self, subscriber_id: str) -> None:
        """Remove a subscriber. Unknown ids are ignored."""
        self._subscribers.pop(subscriber_id, None)

    def _notify(self, event: str, node: TreeSelectNode | None) -> None:
        for subscriber_id, callback in list(self._subscribers.items()):
            try:
                callback(event, node, self._generation)
            except Exception:
                logger.warning(
                    "Subscriber %r failed on %r event", subscriber_id, event, exc_info=True
                )
