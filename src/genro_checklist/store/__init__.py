# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Store package - the nested checklist tree.

The package is organized into:
- core: ChecklistStore with insert, rename and delete operations
- loading: Functions building nodes from nested dicts and exporting them back
- subscription: StateStream, the replay-last-value publish/subscribe channel

Example:
    >>> from genro_checklist import ChecklistStore
    >>> store = ChecklistStore()
    >>> root = store.insert_root()
    >>> store.insert_folder_child(root, 'docs').kind
    'folder'
"""

from .core import ChecklistStore
from .loading import build_file_tree, node_to_dict
from .subscription import StateStream

__all__ = ["ChecklistStore", "StateStream", "build_file_tree", "node_to_dict"]
