# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Genro-Checklist - Folder/file checklist tree with a synchronized flat view.

A lightweight, zero-dependency library keeping a nested checklist tree
and its flattened, level-annotated projection in sync (Genro Kyō).
"""

__version__ = "0.1.0"

from .control import TreeControl
from .exceptions import (
    ChecklistError,
    InvalidParentError,
    NodeIndexError,
    NodeNotFoundError,
)
from .node import (
    FILE,
    FOLDER,
    UNSET,
    ChecklistNode,
    FlatNode,
    MonotonicIdFactory,
    NodeKind,
)
from .store import ChecklistStore, StateStream, build_file_tree, node_to_dict
from .view import TreeView

__all__ = [
    # Core classes
    "ChecklistStore",
    "TreeView",
    "TreeControl",
    "StateStream",
    # Nodes
    "ChecklistNode",
    "FlatNode",
    "NodeKind",
    "MonotonicIdFactory",
    "FOLDER",
    "FILE",
    "UNSET",
    # Loading
    "build_file_tree",
    "node_to_dict",
    # Exceptions
    "ChecklistError",
    "InvalidParentError",
    "NodeIndexError",
    "NodeNotFoundError",
]
