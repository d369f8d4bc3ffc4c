# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""TreeSelectConfig - behavior flags and field accessors.

The configuration tells the engine how selection propagates and how to
read a caller's records without transforming them first. Records are read
through two accessors, ``title_of`` and ``children_of``. By default they
look up ``title_key`` and ``child_key``; callers with a different schema
can pass ``get_title`` / ``get_children`` callables instead.

Example:
    >>> config = TreeSelectConfig(title_key='name', child_key='items')
    >>> config.title_of({'name': 'Fruits', 'items': []})
    'Fruits'
    >>> config.children_of({'name': 'Apple'})
    []
"""

from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass
from typing import Any, Callable, Mapping

from .exceptions import SameKeyWarning

logger = logging.getLogger(__name__)

TitleAccessor = Callable[[Mapping[str, Any]], Any]
ChildrenAccessor = Callable[[Mapping[str, Any]], Any]


@dataclass(frozen=True)
class TreeSelectConfig:
    """Immutable configuration shared by the forest and the engine.

    Attributes:
        auto_select_parents: Re-derive every ancestor as the AND of its
            immediate children after a selection change.
        auto_select_children: Cascade a selection change to all descendants.
        auto_expandable: Expand a node when its checkbox selects it.
        title_key: Record field holding the label.
        child_key: Record field holding the children sequence.
        selected_key: Record field seeding (and exporting) the selected flag.
        expanded_key: Record field seeding (and exporting) the expanded flag.
        get_title: Optional callable replacing the ``title_key`` lookup.
        get_children: Optional callable replacing the ``child_key`` lookup.
    """

    auto_select_parents: bool = True
    auto_select_children: bool = True
    auto_expandable: bool = False
    title_key: str = 'title'
    child_key: str = 'data'
    selected_key: str = 'isSelected'
    expanded_key: str = 'isExpanded'
    get_title: TitleAccessor | None = None
    get_children: ChildrenAccessor | None = None

    @property
    def has_same_keys(self) -> bool:
        """True if label and children would be read from the same field."""
        if self.get_title is not None and self.get_children is not None:
            return False
        return self.title_key == self.child_key

    def check(self) -> None:
        """Warn about a self-contradictory configuration.

        Never raises: the engine keeps working, only the labels a view
        reads become meaningless.
        """
        if self.has_same_keys:
            message = (
                f"title_key and child_key are both {self.title_key!r}: "
                "labels and children are read from the same field"
            )
            logger.warning(message)
            warnings.warn(message, SameKeyWarning, stacklevel=3)

    def title_of(self, record: Mapping[str, Any]) -> str | None:
        """Return the record's label, or None if missing or not a string."""
        if self.get_title is not None:
            title = self.get_title(record)
        else:
            title = record.get(self.title_key)
        return title if isinstance(title, str) else None

    def children_of(self, record: Mapping[str, Any]) -> list[Any]:
        """Return the record's raw children as a list.

        Absent, None, or non-sequence values (strings and mappings
        included) all mean no children.
        """
        if self.get_children is not None:
            children = self.get_children(record)
        else:
            children = record.get(self.child_key)
        if isinstance(children, (list, tuple)):
            return list(children)
        return []
