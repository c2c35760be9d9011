# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Build checklist nodes from plain Python data, and back.

Seeding rules for ``build_file_tree``:
    - every key becomes a node
    - a mapping value is recursed into at level + 1 and the node
      becomes a folder holding the result
    - a list or tuple value is recursed into like a mapping keyed by
      position ('0', '1', ...)
    - a scalar value replaces the key as the node's label and the
      node becomes a file
    - None keeps the key as label; the node stays 'unset' with no
      children list

Example:
    >>> ids = iter(range(1, 100))
    >>> roots = build_file_tree(
    ...     {'Groceries': {'milk': None, 'x': 'eggs'}}, id_factory=lambda: next(ids)
    ... )
    >>> [child.label for child in roots[0].children]
    ['milk', 'eggs']
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Callable, Iterable

from ..node import FILE, FOLDER, UNSET, ChecklistNode, MonotonicIdFactory


def _items(source: Any) -> Iterable[tuple[str, Any]]:
    if isinstance(source, Mapping):
        return ((str(key), value) for key, value in source.items())
    if isinstance(source, (list, tuple)):
        return ((str(index), value) for index, value in enumerate(source))
    raise TypeError(
        f"source must be a mapping, list or tuple, not {type(source).__name__}"
    )


def build_file_tree(
    source: Mapping[str, Any] | list | tuple,
    level: int = 0,
    id_factory: Callable[[], int] | None = None,
) -> list[ChecklistNode]:
    """Build a list of nodes from a nested key/value structure.

    Args:
        source: Mapping (or list/tuple) describing one level of the tree.
        level: Depth of ``source`` in the tree being built.
        id_factory: Zero-argument callable returning fresh node ids.

    Returns:
        Nodes for this level, in source order.

    Raises:
        TypeError: If source is not a mapping, list or tuple.
    """
    if id_factory is None:
        id_factory = MonotonicIdFactory()

    nodes: list[ChecklistNode] = []
    for key, value in _items(source):
        node = ChecklistNode(id_factory(), key)
        if isinstance(value, (Mapping, list, tuple)):
            node.kind = FOLDER
            node.children = build_file_tree(value, level + 1, id_factory)
        elif value is not None:
            node.label = str(value)
            node.kind = FILE
            node.children = []
        else:
            node.kind = UNSET
        nodes.append(node)
    return nodes


def node_to_dict(nodes: Iterable[ChecklistNode]) -> dict[str, Any]:
    """Convert nodes to a nested dict keyed by label.

    Folders become dicts of their children; every other node maps to
    None. Sibling labels that repeat collapse into a single key, the
    last one winning.
    """
    result: dict[str, Any] = {}
    for node in nodes:
        if node.is_folder:
            result[node.label] = node_to_dict(node.children or [])
        else:
            result[node.label] = None
    return result
