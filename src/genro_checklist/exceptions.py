# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Checklist exceptions."""

from __future__ import annotations


class ChecklistError(Exception):
    """Base exception for checklist errors."""

    pass


class InvalidParentError(ChecklistError):
    """Raised when a child is added to a node that cannot hold children."""

    pass


class NodeIndexError(ChecklistError, IndexError):
    """Raised when a child index is out of range."""

    pass


class NodeNotFoundError(ChecklistError, KeyError):
    """Raised when no root node matches the requested id."""

    pass
