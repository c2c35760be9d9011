# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Checklist node classes.

Two shapes of the same item:

- ChecklistNode: the nested form, owned by its parent's ``children`` list
  (or by the store's root list).
- FlatNode: the flattened form produced by TreeView, annotated with
  ``level`` and ``expandable``.
"""

from __future__ import annotations

import time
from typing import Literal

NodeKind = Literal['folder', 'file', 'unset']

FOLDER = 'folder'
FILE = 'file'
UNSET = 'unset'

KINDS = frozenset((FOLDER, FILE, UNSET))


class MonotonicIdFactory:
    """Generate node ids from the wall clock, in milliseconds.

    Two calls within the same millisecond would collide, so the
    counter is bumped to stay strictly increasing.

    Example:
        >>> ids = MonotonicIdFactory()
        >>> a, b = ids(), ids()
        >>> b > a
        True
    """

    __slots__ = ('_last',)

    def __init__(self) -> None:
        self._last = 0

    def __call__(self) -> int:
        candidate = time.time_ns() // 1_000_000
        if candidate <= self._last:
            candidate = self._last + 1
        self._last = candidate
        return candidate


class ChecklistNode:
    """A folder or file in the nested checklist tree.

    Each node has:
    - id: Integer identity, unique among live nodes of a store
    - label: Display text (empty while a new item awaits its name)
    - kind: 'folder', 'file' or 'unset'
    - children: Ordered list of child nodes, or None when the node
      cannot hold children at all

    Example:
        >>> node = ChecklistNode(1, 'docs', FOLDER, [])
        >>> node.is_folder
        True
        >>> node.has_children
        False
    """

    __slots__ = ('id', 'label', 'kind', 'children')

    def __init__(
        self,
        id: int,
        label: str = '',
        kind: NodeKind = UNSET,
        children: list[ChecklistNode] | None = None,
    ) -> None:
        if kind not in KINDS:
            raise ValueError(f"Unknown node kind: {kind!r}")
        self.id = id
        self.label = label
        self.kind = kind
        self.children = children

    def __repr__(self) -> str:
        count = 'None' if self.children is None else len(self.children)
        return (
            f"ChecklistNode(id={self.id}, label={self.label!r}, "
            f"kind={self.kind!r}, children={count})"
        )

    @property
    def is_folder(self) -> bool:
        """True if this node is a folder."""
        return self.kind == FOLDER

    @property
    def can_hold_children(self) -> bool:
        """True if children may be appended to this node."""
        return self.kind == FOLDER and self.children is not None

    @property
    def has_children(self) -> bool:
        """True if the children list is defined and non-empty."""
        return bool(self.children)


class FlatNode:
    """Flattened checklist node with level and expandable information.

    Instances compare and hash by identity: TreeView hands out the same
    instance for as long as the source node keeps its label, so hosts can
    key per-row state (expansion, focus) on it.
    """

    __slots__ = ('label', 'id', 'kind', 'level', 'expandable')

    def __init__(
        self,
        label: str = '',
        id: int = 0,
        kind: NodeKind = UNSET,
        level: int = 0,
        expandable: bool = False,
    ) -> None:
        self.label = label
        self.id = id
        self.kind = kind
        self.level = level
        self.expandable = expandable

    def __repr__(self) -> str:
        return (
            f"FlatNode(id={self.id}, label={self.label!r}, kind={self.kind!r}, "
            f"level={self.level}, expandable={self.expandable})"
        )
