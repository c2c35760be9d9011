# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Expand/collapse state for the rows of a TreeView."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

from .node import FlatNode

if TYPE_CHECKING:
    from .view import TreeView


class TreeControl:
    """Expansion state keyed by FlatNode identity.

    A FlatNode that TreeView reuses keeps its state; a node that was
    re-created (after a rename) starts collapsed. State for nodes that
    left the flat list is pruned each time the view republishes.

    A control built without a view tracks no rows until a TreeView
    attaches it (``TreeView(store, control=control)``).

    Example:
        >>> control = view.control
        >>> control.expand(view.data[0])
        >>> [f.label for f in control.visible_nodes()]
        ['A', 'readme.txt']
    """

    __slots__ = ('_view', '_expanded')

    def __init__(self, view: TreeView | None = None) -> None:
        self._view = view
        self._expanded: set[FlatNode] = set()

    def __repr__(self) -> str:
        return f"TreeControl(expanded={len(self._expanded)})"

    @property
    def view(self) -> TreeView | None:
        """The view whose rows this control tracks, if attached."""
        return self._view

    def attach(self, view: TreeView) -> None:
        """Track view's rows instead, forgetting all expansion state."""
        self._view = view
        self._expanded.clear()

    def _rows(self) -> list[FlatNode]:
        return self._view.data if self._view is not None else []

    def prune(self, nodes: Iterable[FlatNode]) -> None:
        """Forget state of nodes not in nodes."""
        self._expanded.intersection_update(nodes)

    def is_expanded(self, flat: FlatNode) -> bool:
        return flat in self._expanded

    def expand(self, flat: FlatNode) -> None:
        self._expanded.add(flat)

    def collapse(self, flat: FlatNode) -> None:
        self._expanded.discard(flat)

    def toggle(self, flat: FlatNode) -> bool:
        """Flip flat's state and return True if it is now expanded."""
        if flat in self._expanded:
            self._expanded.discard(flat)
            return False
        self._expanded.add(flat)
        return True

    def expand_all(self) -> None:
        self._expanded.update(self._rows())

    def collapse_all(self) -> None:
        self._expanded.clear()

    def get_descendants(self, flat: FlatNode) -> list[FlatNode]:
        """Return the contiguous run of deeper nodes that follows flat."""
        nodes = self._rows()
        start = self._view.index_of(flat, nodes) if nodes else -1
        if start < 0:
            return []
        descendants = []
        for candidate in nodes[start + 1:]:
            if candidate.level <= flat.level:
                break
            descendants.append(candidate)
        return descendants

    def expand_descendants(self, flat: FlatNode) -> None:
        self.expand(flat)
        self._expanded.update(self.get_descendants(flat))

    def collapse_descendants(self, flat: FlatNode) -> None:
        self.collapse(flat)
        self._expanded.difference_update(self.get_descendants(flat))

    def visible_nodes(self) -> list[FlatNode]:
        """Return the rows to display: nodes whose ancestors are all expanded."""
        visible = []
        hidden_below: int | None = None
        for flat in self._rows():
            if hidden_below is not None:
                if flat.level > hidden_below:
                    continue
                hidden_below = None
            visible.append(flat)
            if not self.is_expanded(flat):
                hidden_below = flat.level
        return visible
