# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Tests for TreeView flattening, identity maps, queries and edit actions."""

import itertools

import pytest

from genro_checklist import (
    FILE,
    FOLDER,
    ChecklistStore,
    FlatNode,
    NodeNotFoundError,
    TreeControl,
    TreeView,
)


def make_view(source=None, **kwargs):
    store = ChecklistStore(
        source, id_factory=itertools.count(1).__next__, **kwargs
    )
    return store, TreeView(store)


def make_root(store, label):
    root = store.insert_root()
    store.rename(root, label)
    return root


def summary(view):
    return [(f.label, f.level, f.expandable) for f in view.data]


class TestFlatten:
    """Tests for flattening the nested tree."""

    def test_empty_store(self):
        """Test an empty store gives an empty flat list."""
        _, view = make_view()
        assert view.data == []
        assert len(view) == 0

    def test_view_flattens_seeded_store(self):
        """Test attaching to a seeded store flattens immediately."""
        _, view = make_view({'A': {'b': None, 'c': {'d': None}}})
        assert summary(view) == [
            ('A', 0, True), ('b', 1, False), ('c', 1, True), ('d', 2, False),
        ]

    def test_readme_scenario(self):
        """Test one root folder with one file child."""
        store, view = make_view()
        root = make_root(store, 'A')
        assert root.id == 1
        store.insert_child(root, 'readme.txt', FILE)
        assert summary(view) == [('A', 0, True), ('readme.txt', 1, False)]
        readme = view.data[1]
        assert view.get_parent(readme) is view.data[0]

    def test_fields_mirror_nested_node(self):
        """Test id, kind and label are mirrored."""
        store, view = make_view()
        root = make_root(store, 'A')
        docs = store.insert_folder_child(root, 'docs')
        flat = view.flat_node(docs)
        assert (flat.id, flat.kind, flat.label) == (docs.id, FOLDER, 'docs')

    def test_insert_then_find(self):
        """Test a folder insert yields exactly one new flat node one level down."""
        store, view = make_view()
        root = make_root(store, 'root')
        before = list(view.data)
        store.insert_folder_child(root, 'docs')
        added = [f for f in view.data if f not in before]
        assert len(added) == 1
        (docs,) = added
        assert docs.level == view.flat_node(root).level + 1
        assert docs.kind == FOLDER
        assert docs.label == 'docs'

    def test_delete_then_absence(self):
        """Test deleting the only child removes it and the parent stops expanding."""
        store, view = make_view()
        root = make_root(store, 'A')
        child = store.insert_child(root, 'x')
        assert view.flat_node(root).expandable is True
        store.delete_child(root, 0)
        assert child.id not in [f.id for f in view.data]
        assert view.flat_node(child) is None
        assert view.flat_node(root).expandable is False

    def test_level_invariant(self):
        """Test every level equals the number of ancestors."""
        store, view = make_view(
            {'a': {'b': {'c': {'d': None}}, 'e': None}, 'f': {}}
        )
        for depth, node in store.walk():
            assert view.flat_node(node).level == depth

    def test_expandable_invariant(self):
        """Test expandable matches a non-empty children list."""
        store, view = make_view({'a': {'b': None}, 'e': {}, 'f': 'file'})
        for _, node in store.walk():
            assert view.flat_node(node).expandable == bool(node.children)

    def test_view_republishes(self):
        """Test the flat list is republished on each store change."""
        store, view = make_view()
        seen = []
        view.subscribe('rows', lambda rows: seen.append(len(rows)))
        root = store.insert_root()
        store.insert_child(root, 'x')
        assert seen == [0, 1, 2]
        view.unsubscribe('rows')
        store.insert_root()
        assert seen == [0, 1, 2]

    def test_dispose_stops_following(self):
        """Test a disposed view no longer updates."""
        store, view = make_view()
        view.dispose()
        store.insert_root()
        assert view.data == []

    def test_two_views_on_one_store(self):
        """Test distinct subscriber ids keep both views in sync."""
        store = ChecklistStore()
        first = TreeView(store, subscriber_id='left')
        second = TreeView(store, subscriber_id='right')
        store.insert_root()
        assert len(first.data) == len(second.data) == 1
        assert first.data[0] is not second.data[0]

    def test_subscriber_edit_during_delivery_keeps_order(self):
        """Test an edit made by one subscriber reaches later subscribers last."""
        store, view = make_view()

        def namer(rows):
            if rows and rows[0].label == '':
                store.rename(store.data[0], 'named')

        seen = []
        view.subscribe('namer', namer)
        view.subscribe('recorder', lambda rows: seen.append([f.label for f in rows]))
        store.insert_root()
        assert seen == [[], [''], ['named']]
        assert seen[-1] == [f.label for f in view.data]
        assert store.data[0].label == 'named'


class TestControlAttachment:
    """Tests for the control argument of TreeView."""

    def test_default_control(self):
        """Test a view builds its own control when none is given."""
        store = ChecklistStore({'A': {'b': None}})
        view = TreeView(store, control=None)
        assert isinstance(view.control, TreeControl)
        assert view.control.view is view

    def test_supplied_control_is_attached(self):
        """Test a supplied control tracks the view's rows."""
        store = ChecklistStore({'A': {'b': None}})
        control = TreeControl()
        assert control.visible_nodes() == []
        view = TreeView(store, control=control, subscriber_id='main')
        assert view.control is control
        assert control.view is view
        control.expand(view.data[0])
        assert [f.label for f in control.visible_nodes()] == ['A', 'b']

    def test_reattaching_control_drops_old_state(self):
        """Test moving a control to another view forgets its expansions."""
        store = ChecklistStore({'A': {'b': None}})
        first = TreeView(store, subscriber_id='first')
        control = first.control
        control.expand(first.data[0])
        second = TreeView(store, control=control, subscriber_id='second')
        assert control.view is second
        assert control.is_expanded(first.data[0]) is False
        assert control.is_expanded(second.data[0]) is False
        control.expand(second.data[0])
        store.insert_root()
        assert control.is_expanded(second.data[0]) is True

    def test_insert_expands_supplied_control(self):
        """Test edit actions expand the target in the supplied control."""
        store = ChecklistStore()
        control = TreeControl()
        view = TreeView(store, control=control)
        root = view.add_root_item()
        view.add_new_item(view.flat_node(root))
        assert control.is_expanded(view.flat_node(root)) is True


class TestIdentity:
    """Tests for FlatNode identity preservation."""

    def test_unchanged_label_reuses_flat_node(self):
        """Test a node keeps its FlatNode across unrelated edits."""
        store, view = make_view()
        root = make_root(store, 'A')
        flat_root = view.flat_node(root)
        store.insert_child(root, 'x')
        store.insert_root()
        assert view.flat_node(root) is flat_root
        assert flat_root.expandable is True

    def test_renamed_node_gets_new_flat_node(self):
        """Test a label change produces a fresh FlatNode."""
        store, view = make_view()
        root = make_root(store, 'A')
        old = view.flat_node(root)
        store.rename(root, 'B')
        new = view.flat_node(root)
        assert new is not old
        assert new.label == 'B'
        assert old.label == 'A'

    def test_reused_node_refreshes_level(self):
        """Test level is refreshed on a reused FlatNode."""
        store, view = make_view()
        root = make_root(store, 'A')
        child = store.insert_folder_child(root, 'sub')
        flat = view.flat_node(child)
        assert flat.level == 1
        # Re-parent by hand and republish through a rename elsewhere.
        root.children.remove(child)
        store.data.append(child)
        store.rename(root, 'A2')
        assert view.flat_node(child) is flat
        assert flat.level == 0

    def test_maps_are_bijective(self):
        """Test nested and flat lookups point at each other."""
        store, view = make_view({'a': {'b': None, 'c': None}})
        for flat in view.data:
            node = view.nested_node(flat)
            assert view.flat_node(node) is flat

    def test_deleted_nodes_are_pruned_from_maps(self):
        """Test lookups for deleted nodes return None."""
        store, view = make_view()
        root = make_root(store, 'A')
        flat = view.flat_node(root)
        store.delete_root(root)
        assert view.nested_node(flat) is None
        assert view.flat_node(root) is None


class TestQueries:
    """Tests for level, parent and content queries."""

    def test_round_trip_parent_edges(self):
        """Test get_parent reproduces every nested parent/child edge."""
        store, view = make_view({
            'A': {'a1': None, 'a2': {'x': None, 'y': {'z': None}}, 'a3': 'f'},
            'B': {'b1': None},
            'C': None,
        })
        for flat in view.data:
            node = view.nested_node(flat)
            parent_flat = view.get_parent(flat)
            expected = store.parent_of(node)
            if expected is None:
                assert parent_flat is None
            else:
                assert view.nested_node(parent_flat) is expected

    def test_root_has_no_parent(self):
        """Test level 0 nodes have no parent."""
        _, view = make_view({'A': {'b': None}})
        assert view.get_parent(view.data[0]) is None

    def test_unknown_flat_has_no_parent(self):
        """Test a node missing from the sequence has no parent."""
        _, view = make_view({'A': {'b': None}})
        assert view.get_parent(FlatNode('ghost', 404, FILE, 1)) is None

    def test_get_parent_on_explicit_sequence(self):
        """Test get_parent scans the given sequence."""
        _, view = make_view()
        a = FlatNode('a', 1, FOLDER, 0, True)
        b = FlatNode('b', 2, FOLDER, 1, True)
        c = FlatNode('c', 3, FILE, 2)
        d = FlatNode('d', 4, FILE, 1)
        nodes = [a, b, c, d]
        assert view.get_parent(c, nodes) is b
        assert view.get_parent(d, nodes) is a
        assert view.get_parent(b, nodes) is a

    def test_content_predicates(self):
        """Test has_visible_content and has_no_content."""
        store, view = make_view()
        store.insert_root()
        flat = view.data[0]
        assert view.has_visible_content(flat) is False
        assert view.has_no_content(flat) is True
        store.rename(store.data[0], 'named')
        flat = view.data[0]
        assert view.has_visible_content(flat) is True
        assert view.has_no_content(flat) is False

    def test_level_expandable_and_has_child(self):
        """Test the simple accessors."""
        store, view = make_view()
        root = make_root(store, 'A')
        store.insert_child(root, 'f')
        folder, file = view.data
        assert view.get_level(file) == 1
        assert view.is_expandable(folder) is True
        assert view.has_child(folder) is True
        assert view.has_child(file) is False

    def test_get_children(self):
        """Test get_children returns an empty list for undefined children."""
        store, view = make_view({'a': None, 'b': {'c': None}})
        a, b = store.data
        assert view.get_children(a) == []
        assert view.get_children(b) == b.children


class TestEditActions:
    """Tests for the host-level edit actions."""

    def test_add_root_item(self):
        """Test add_root_item inserts an unnamed folder."""
        store, view = make_view()
        node = view.add_root_item()
        assert store.data == [node]
        assert view.has_no_content(view.data[0])

    def test_add_new_item_expands_parent(self):
        """Test add_new_item inserts an unnamed file and expands the parent."""
        store, view = make_view()
        root = make_root(store, 'A')
        node = view.add_new_item(view.flat_node(root))
        assert node.kind == FILE
        assert node.label == ''
        assert view.control.is_expanded(view.flat_node(root))

    def test_add_new_folder(self):
        """Test add_new_folder inserts an unnamed folder."""
        store, view = make_view()
        root = make_root(store, 'A')
        node = view.add_new_folder(view.flat_node(root))
        assert node.kind == FOLDER
        assert root.children == [node]

    def test_add_under_file_is_noop(self):
        """Test adding under a file does not expand anything."""
        store, view = make_view()
        root = make_root(store, 'A')
        leaf = store.insert_child(root, 'leaf')
        flat_leaf = view.flat_node(leaf)
        assert view.add_new_item(flat_leaf) is None
        assert view.control.is_expanded(flat_leaf) is False

    def test_save_node(self):
        """Test save_node renames the nested node."""
        store, view = make_view()
        view.add_root_item()
        view.save_node(view.data[0], 'Groceries')
        assert store.data[0].label == 'Groceries'
        assert view.data[0].label == 'Groceries'

    def test_delete_root_node(self):
        """Test delete_node on a root removes it."""
        store, view = make_view({'A': {}, 'B': {}})
        removed = view.delete_node(view.data[0])
        assert removed.label == 'A'
        assert [n.label for n in store.data] == ['B']

    def test_delete_nested_node_exactly(self):
        """Test delete_node removes only the targeted child."""
        store, view = make_view({'A': {'x': None, 'y': None, 'z': None}})
        y = view.data[2]
        view.delete_node(y)
        assert [f.label for f in view.data] == ['A', 'x', 'z']

    def test_delete_node_with_duplicate_labels(self):
        """Test deletion targets the node, not the first matching label."""
        store, view = make_view()
        left = make_root(store, 'L')
        right = make_root(store, 'R')
        store.insert_child(left, 'same')
        target = store.insert_child(right, 'same')
        view.delete_node(view.flat_node(target))
        assert len(left.children) == 1
        assert right.children == []

    def test_delete_deep_node(self):
        """Test deleting inside a nested folder."""
        store, view = make_view({'A': {'b': {'c': None, 'd': None}}})
        c = view.data[2]
        view.delete_node(c)
        assert store.as_dict() == {'A': {'b': {'d': None}}}

    def test_action_on_stale_flat_node(self):
        """Test actions on deleted nodes are ignored."""
        store, view = make_view({'A': {}})
        flat = view.data[0]
        view.delete_node(flat)
        assert view.delete_node(flat) is None
        assert view.save_node(flat, 'x') is None
        assert view.add_new_item(flat) is None

    def test_strict_action_on_stale_flat_node(self):
        """Test strict stores raise for missing nodes."""
        store, view = make_view({'A': {}}, raise_on_error=True)
        flat = view.data[0]
        view.delete_node(flat)
        with pytest.raises(NodeNotFoundError):
            view.save_node(flat, 'x')

    def test_delete_after_dispose_is_ignored(self):
        """Test deleting through a view that stopped following the store is a no-op."""
        store, view = make_view({'A': {'x': None}})
        flat_x = view.data[1]
        view.dispose()
        store.delete_child(store.data[0], 0)
        assert view.delete_node(flat_x) is None
        assert store.as_dict() == {'A': {}}

    def test_strict_delete_after_dispose_raises(self):
        """Test strict stores raise NodeNotFoundError for out-of-date views."""
        store, view = make_view({'A': {'x': None}}, raise_on_error=True)
        flat_x = view.data[1]
        view.dispose()
        store.delete_child(store.data[0], 0)
        with pytest.raises(NodeNotFoundError):
            view.delete_node(flat_x)
