# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""ChecklistStore - the canonical nested checklist tree.

ChecklistStore is the only component allowed to change the nested tree.
Every successful mutation is followed by a synchronous publish of the
root list on the store's StateStream, so views derived from the tree
(see TreeView) are up to date when the mutating call returns.

Key Features:
    - **Folder/file nodes**: Only folders hold children
    - **In-place edits**: Parents are mutated, never copied, so node
      identity survives every edit
    - **Replay-last-value stream**: New subscribers receive the current
      roots immediately
    - **Silent or strict errors**: Invalid requests are no-ops by default,
      or raise with ``raise_on_error=True``

Example:
    Basic usage::

        store = ChecklistStore()
        root = store.insert_root()
        store.rename(root, 'Groceries')
        store.insert_child(root, 'milk')

        store.subscribe('printer', lambda roots: print(len(roots)))

    Seeding from a dict::

        store = ChecklistStore({'Groceries': {'dairy': {'milk': None}}})
        store.as_dict()  # {'Groceries': {'dairy': {'milk': None}}}
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterator

from ..exceptions import (
    ChecklistError,
    InvalidParentError,
    NodeIndexError,
    NodeNotFoundError,
)
from ..node import FILE, FOLDER, ChecklistNode, MonotonicIdFactory, NodeKind
from .loading import build_file_tree, node_to_dict
from .subscription import StateStream, SubscriberCallback

logger = logging.getLogger(__name__)


class ChecklistStore:
    """Owner of the nested checklist tree and all its mutations.

    Mutations return the node they affected, or None when the request
    was rejected (nothing changed and nothing was published).

    Attributes:
        raise_on_error: If True, rejected requests raise a ChecklistError
            subclass instead of returning None.
    """

    __slots__ = ('_stream', '_id_factory', '_raise_on_error')

    def __init__(
        self,
        source: dict[str, Any] | None = None,
        raise_on_error: bool = False,
        id_factory: Callable[[], int] | None = None,
    ) -> None:
        """Initialize a ChecklistStore.

        Args:
            source: Optional nested mapping used to seed the roots
                (see ``build_file_tree`` for the rules).
            raise_on_error: If True, invalid parents, out-of-range indices
                and unknown root ids raise instead of being ignored.
            id_factory: Zero-argument callable returning fresh node ids.
                Defaults to a millisecond clock that never repeats.

        Example:
            >>> ChecklistStore()
            >>> ChecklistStore({'Home': {'clean': None}})
            >>> ChecklistStore(raise_on_error=True)  # strict mode
        """
        self._id_factory = id_factory or MonotonicIdFactory()
        self._raise_on_error = raise_on_error
        self._stream: StateStream[list[ChecklistNode]] = StateStream([])
        if source is not None:
            self.load(source)

    # ==================== Special Methods ====================

    def __repr__(self) -> str:
        return f"ChecklistStore({[node.label for node in self.data]})"

    def __len__(self) -> int:
        """Return the number of root nodes."""
        return len(self.data)

    def __iter__(self) -> Iterator[ChecklistNode]:
        """Iterate over root nodes in order."""
        return iter(self.data)

    # ==================== State ====================

    @property
    def data(self) -> list[ChecklistNode]:
        """The current root list (the last published value)."""
        return self._stream.value

    roots = data

    @property
    def raise_on_error(self) -> bool:
        """True if rejected requests raise instead of returning None."""
        return self._raise_on_error

    def _publish(self) -> None:
        logger.debug("Publishing %d root node(s)", len(self.data))
        self._stream.publish(self.data)

    def _reject(self, error: ChecklistError) -> None:
        if self._raise_on_error:
            raise error
        logger.debug("Ignored checklist request: %s", error)
        return None

    def _new_node(self, label: str, kind: NodeKind) -> ChecklistNode:
        return ChecklistNode(self._id_factory(), label, kind, [])

    # ==================== Subscriptions ====================

    def subscribe(self, subscriber_id: str, callback: SubscriberCallback) -> None:
        """Subscribe to root-list changes; callback gets the current roots now."""
        self._stream.subscribe(subscriber_id, callback)

    def unsubscribe(self, subscriber_id: str) -> None:
        """Remove a subscription. Unknown ids are ignored."""
        self._stream.unsubscribe(subscriber_id)

    # ==================== Loading ====================

    def initialize(self) -> None:
        """Reset the roots to an empty list and publish it."""
        logger.debug("Initializing empty checklist")
        self._stream.publish([])

    def load(self, source: dict[str, Any]) -> list[ChecklistNode]:
        """Replace the roots with nodes built from a nested mapping.

        Returns:
            The new root list.

        Raises:
            TypeError: If source is not a mapping, list or tuple.
        """
        roots = build_file_tree(source, 0, self._id_factory)
        logger.debug("Loaded %d root node(s)", len(roots))
        self._stream.publish(roots)
        return roots

    def as_dict(self) -> dict[str, Any]:
        """Export the tree as a nested dict keyed by label."""
        return node_to_dict(self.data)

    # ==================== Insertion ====================

    def insert_child(
        self,
        parent: ChecklistNode,
        label: str,
        kind: NodeKind = FILE,
    ) -> ChecklistNode | None:
        """Append a new node to parent's children.

        Args:
            parent: A folder node with a children list.
            label: Label of the new node (may be empty).
            kind: Kind of the new node, 'file' by default.

        Returns:
            The new node, or None if parent cannot hold children.

        Raises:
            InvalidParentError: In strict mode, if parent cannot hold children.
        """
        if not parent.can_hold_children:
            return self._reject(InvalidParentError(
                f"Node {parent.id} ({parent.kind}) cannot hold children"
            ))
        node = self._new_node(label, kind)
        parent.children.append(node)
        logger.debug("Inserted %s %d under %d", kind, node.id, parent.id)
        self._publish()
        return node

    def insert_folder_child(
        self, parent: ChecklistNode, label: str
    ) -> ChecklistNode | None:
        """Append a new folder to parent's children.

        Same contract as insert_child with kind 'folder'.
        """
        return self.insert_child(parent, label, FOLDER)

    def insert_root(self) -> ChecklistNode:
        """Append a new empty-label folder to the roots."""
        node = self._new_node('', FOLDER)
        self.data.append(node)
        logger.debug("Inserted root folder %d", node.id)
        self._publish()
        return node

    # ==================== Update ====================

    def rename(self, node: ChecklistNode, new_label: str) -> ChecklistNode:
        """Set node's label and publish.

        No validation is done: an empty label is the normal state of a
        freshly inserted item awaiting its name.
        """
        node.label = new_label
        logger.debug("Renamed node %d to %r", node.id, new_label)
        self._publish()
        return node

    # ==================== Deletion ====================

    def delete_child(
        self, parent: ChecklistNode, index: int
    ) -> ChecklistNode | None:
        """Remove the child at index (with its subtree) from parent.

        Negative indices are treated as out of range.

        Returns:
            The removed node, or None if nothing was removed.

        Raises:
            InvalidParentError: In strict mode, if parent has no children list.
            NodeIndexError: In strict mode, if index is out of range.
        """
        children = parent.children
        if children is None:
            return self._reject(InvalidParentError(
                f"Node {parent.id} has no children"
            ))
        if index < 0 or index >= len(children):
            return self._reject(NodeIndexError(
                f"Child index {index} out of range (0-{len(children) - 1})"
            ))
        node = children.pop(index)
        logger.debug("Deleted node %d from %d", node.id, parent.id)
        self._publish()
        return node

    def delete_root(self, node: ChecklistNode) -> ChecklistNode | None:
        """Remove the root whose id equals node.id.

        Matching is by id, so a logically equal copy of the root works.

        Returns:
            The removed root, or None if no root has that id.

        Raises:
            NodeNotFoundError: In strict mode, if no root has that id.
        """
        for index, root in enumerate(self.data):
            if root.id == node.id:
                del self.data[index]
                logger.debug("Deleted root %d", root.id)
                self._publish()
                return root
        return self._reject(NodeNotFoundError(f"No root with id {node.id}"))

    # ==================== Navigation ====================

    def walk(self) -> Iterator[tuple[int, ChecklistNode]]:
        """Yield (depth, node) pairs in pre-order, roots at depth 0.

        Example:
            >>> for depth, node in store.walk():
            ...     print('  ' * depth + node.label)
        """
        def _walk(nodes: list[ChecklistNode], depth: int) -> Iterator[tuple[int, ChecklistNode]]:
            for node in nodes:
                yield depth, node
                if node.children:
                    yield from _walk(node.children, depth + 1)

        return _walk(self.data, 0)

    def get_node(self, node_id: int, default: Any = None) -> ChecklistNode | None:
        """Find a live node by id, returning default if absent."""
        for _, node in self.walk():
            if node.id == node_id:
                return node
        return default

    def parent_of(self, node: ChecklistNode) -> ChecklistNode | None:
        """Return the folder holding node, or None for roots and unknown nodes."""
        for _, candidate in self.walk():
            if candidate.children and any(
                child.id == node.id for child in candidate.children
            ):
                return candidate
        return None
