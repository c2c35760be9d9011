# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""TreeView - flattened, level-annotated projection of a ChecklistStore.

TreeView subscribes to a store and, on every published root list,
re-flattens the whole tree in pre-order and republishes the flat list.
The flat list is disposable: the nested tree stays the source of truth
and every edit made through TreeView goes back through the store.

Identity preservation:
    A FlatNode instance is reused across passes as long as its source
    node keeps the same label, so per-row state held by hosts (for
    example the expansion state of the attached TreeControl) survives
    edits elsewhere in the tree. A renamed node gets a fresh FlatNode.

Example:
    >>> store = ChecklistStore()
    >>> view = TreeView(store)
    >>> root = store.insert_root()
    >>> store.rename(root, 'A')
    >>> store.insert_child(root, 'readme.txt')
    >>> [(f.label, f.level, f.expandable) for f in view.data]
    [('A', 0, True), ('readme.txt', 1, False)]
    >>> view.get_parent(view.data[1]).label
    'A'
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .control import TreeControl
from .exceptions import NodeNotFoundError
from .node import FOLDER, ChecklistNode, FlatNode
from .store.subscription import StateStream, SubscriberCallback

if TYPE_CHECKING:
    from .store import ChecklistStore

logger = logging.getLogger(__name__)


class TreeView:
    """Flat view over a ChecklistStore with parent lookup and edit actions.

    Attributes:
        control: The TreeControl holding expansion state for this view.
        subscriber_id: Name under which the view is subscribed to the store.
    """

    __slots__ = (
        '_store', '_stream', '_flat_to_nested', '_nested_to_flat',
        'control', 'subscriber_id',
    )

    def __init__(
        self,
        store: ChecklistStore,
        control: TreeControl | None = None,
        subscriber_id: str = 'tree_view',
    ) -> None:
        """Attach a view to store and flatten its current roots.

        Args:
            store: The store to follow.
            control: Expansion state to drive from this view. It is attached
                to the view, dropping any state it held for another view.
                A new TreeControl is created when omitted.
            subscriber_id: Subscription name on the store. Use distinct names
                to attach several views to one store.
        """
        self._store = store
        self._stream: StateStream[list[FlatNode]] = StateStream([])
        self._flat_to_nested: dict[int, ChecklistNode] = {}
        self._nested_to_flat: dict[int, FlatNode] = {}
        if control is None:
            control = TreeControl(self)
        else:
            control.attach(self)
        self.control = control
        self.subscriber_id = subscriber_id
        store.subscribe(subscriber_id, self._on_roots)

    def __repr__(self) -> str:
        return f"TreeView({len(self.data)} nodes)"

    def __len__(self) -> int:
        return len(self.data)

    @property
    def store(self) -> ChecklistStore:
        """The store this view follows."""
        return self._store

    @property
    def data(self) -> list[FlatNode]:
        """The current flat list, in pre-order."""
        return self._stream.value

    def subscribe(self, subscriber_id: str, callback: SubscriberCallback) -> None:
        """Subscribe to flat-list changes; callback gets the current list now."""
        self._stream.subscribe(subscriber_id, callback)

    def unsubscribe(self, subscriber_id: str) -> None:
        """Remove a subscription. Unknown ids are ignored."""
        self._stream.unsubscribe(subscriber_id)

    def dispose(self) -> None:
        """Stop following the store."""
        self._store.unsubscribe(self.subscriber_id)

    # ==================== Flattening ====================

    def _on_roots(self, roots: list[ChecklistNode]) -> None:
        flat_nodes = self.flatten(roots)
        # The control may have been attached to another view since.
        if self.control.view is self:
            self.control.prune(flat_nodes)
        self._stream.publish(flat_nodes)

    def flatten(self, roots: list[ChecklistNode]) -> list[FlatNode]:
        """Flatten roots in pre-order, rebuilding both identity maps.

        Entries of nodes that are no longer in the tree are dropped.
        """
        flat_nodes: list[FlatNode] = []
        flat_to_nested: dict[int, ChecklistNode] = {}
        nested_to_flat: dict[int, FlatNode] = {}

        def _visit(nodes: list[ChecklistNode], level: int) -> None:
            for node in nodes:
                flat = self._transform(node, level)
                flat_to_nested[flat.id] = node
                nested_to_flat[node.id] = flat
                flat_nodes.append(flat)
                if node.children:
                    _visit(node.children, level + 1)

        _visit(roots, 0)
        self._flat_to_nested = flat_to_nested
        self._nested_to_flat = nested_to_flat
        logger.debug("Flattened %d node(s)", len(flat_nodes))
        return flat_nodes

    def _transform(self, node: ChecklistNode, level: int) -> FlatNode:
        existing = self._nested_to_flat.get(node.id)
        if existing is not None and existing.label == node.label:
            flat = existing
        else:
            flat = FlatNode()
            flat.label = node.label
        flat.id = node.id
        flat.kind = node.kind
        flat.level = level
        flat.expandable = node.has_children
        return flat

    # ==================== Lookup ====================

    def nested_node(self, flat: FlatNode) -> ChecklistNode | None:
        """Return the nested node behind flat, or None if it is gone."""
        return self._flat_to_nested.get(flat.id)

    def flat_node(self, node: ChecklistNode) -> FlatNode | None:
        """Return the current FlatNode for node, or None if it is gone."""
        return self._nested_to_flat.get(node.id)

    def index_of(self, flat: FlatNode, nodes: list[FlatNode] | None = None) -> int:
        """Position of flat (by identity) in nodes, or -1."""
        if nodes is None:
            nodes = self.data
        for index, candidate in enumerate(nodes):
            if candidate is flat:
                return index
        return -1

    # ==================== Queries ====================

    def get_level(self, flat: FlatNode) -> int:
        return flat.level

    def is_expandable(self, flat: FlatNode) -> bool:
        return flat.expandable

    def get_children(self, node: ChecklistNode) -> list[ChecklistNode]:
        return node.children or []

    def has_child(self, flat: FlatNode) -> bool:
        """True if flat is a folder (and so may show an add-child action)."""
        return flat.kind == FOLDER

    def has_visible_content(self, flat: FlatNode) -> bool:
        """True if flat has a non-empty label."""
        return flat.label != ''

    def has_no_content(self, flat: FlatNode) -> bool:
        """True if flat is still waiting for a name."""
        return flat.label == ''

    def get_parent(
        self, flat: FlatNode, nodes: list[FlatNode] | None = None
    ) -> FlatNode | None:
        """Return the nearest preceding node with a smaller level.

        The lookup runs on the flat sequence, scanning backward from
        flat's position, because that is the order hosts display.

        Args:
            flat: The node whose parent is wanted.
            nodes: Flat sequence to search; defaults to the current one.

        Returns:
            The parent FlatNode, or None for level-0 nodes and nodes not
            found in the sequence.
        """
        if nodes is None:
            nodes = self.data
        level = flat.level
        if level < 1:
            return None
        for index in range(self.index_of(flat, nodes) - 1, -1, -1):
            candidate = nodes[index]
            if candidate.level < level:
                return candidate
        return None

    # ==================== Edit actions ====================

    def _missing(self, node_id: int) -> None:
        if self._store.raise_on_error:
            raise NodeNotFoundError(f"No node with id {node_id}")
        logger.debug("Ignored action on missing node %d", node_id)
        return None

    def _resolve(self, flat: FlatNode) -> ChecklistNode | None:
        node = self.nested_node(flat)
        if node is None:
            return self._missing(flat.id)
        return node

    def _expand(self, node: ChecklistNode) -> None:
        flat = self.flat_node(node)
        if flat is not None:
            self.control.expand(flat)

    def add_new_item(self, flat: FlatNode) -> ChecklistNode | None:
        """Insert an unnamed file under flat and expand it."""
        parent = self._resolve(flat)
        if parent is None:
            return None
        node = self._store.insert_child(parent, '')
        if node is not None:
            self._expand(parent)
        return node

    def add_new_folder(self, flat: FlatNode) -> ChecklistNode | None:
        """Insert an unnamed folder under flat and expand it."""
        parent = self._resolve(flat)
        if parent is None:
            return None
        node = self._store.insert_folder_child(parent, '')
        if node is not None:
            self._expand(parent)
        return node

    def add_root_item(self) -> ChecklistNode:
        """Insert an unnamed root folder."""
        return self._store.insert_root()

    def save_node(self, flat: FlatNode, label: str) -> ChecklistNode | None:
        """Rename the node behind flat."""
        node = self._resolve(flat)
        if node is None:
            return None
        return self._store.rename(node, label)

    def delete_node(self, flat: FlatNode) -> ChecklistNode | None:
        """Delete the node behind flat, with its subtree.

        Roots are removed by id; other nodes by their exact position in
        their real parent's children.
        """
        node = self._resolve(flat)
        if node is None:
            return None
        parent_flat = self.get_parent(self.flat_node(node))
        if parent_flat is None:
            return self._store.delete_root(node)
        parent = self.nested_node(parent_flat)
        siblings = parent.children if parent is not None else None
        index = next(
            (i for i, child in enumerate(siblings or []) if child is node), None
        )
        if index is None:
            # Maps no longer match the tree (the view stopped following it).
            return self._missing(node.id)
        return self._store.delete_child(parent, index)
