from __future__ import annotations

import unittest

from sourcetree.errors import NodeNotFoundError, SceneStoreError
from sourcetree.nodes import SceneFolder, SceneItem, Source
from sourcetree.reorder import PlaceType
from sourcetree.scene_store import SceneStore

from scene_fixtures import basic_scene, nested_scene


def order(store):
    return [n.id for n in store.get_nodes()]


class LoadTests(unittest.TestCase):
    def test_duplicate_ids_rejected(self) -> None:
        with self.assertRaises(SceneStoreError):
            SceneStore("s", [SceneItem("X", "sx"), SceneItem("X", "sy")])

    def test_unknown_parent_rejected(self) -> None:
        with self.assertRaises(SceneStoreError):
            SceneStore("s", [SceneItem("X", "sx", parent_id="nope")])

    def test_item_parent_rejected(self) -> None:
        with self.assertRaises(SceneStoreError):
            SceneStore("s", [SceneItem("X", "sx"), SceneItem("Y", "sy", parent_id="X")])

    def test_parent_cycle_rejected(self) -> None:
        with self.assertRaises(SceneStoreError):
            SceneStore("s", [SceneFolder("F", "F", parent_id="G"), SceneFolder("G", "G", parent_id="F")])

    def test_children_listed_first_are_moved_under_their_folder(self) -> None:
        store = SceneStore(
            "s",
            [SceneItem("X", "sx", parent_id="F"), SceneItem("Z", "sz"), SceneFolder("F", "F")],
        )
        self.assertEqual(order(store), ["Z", "F", "X"])

    def test_dict_round_trip_keeps_order_and_flags(self) -> None:
        store = SceneStore.from_dict(basic_scene())
        again = SceneStore.from_dict(store.to_dict())
        self.assertEqual(order(again), ["A", "X", "Y", "Z"])
        self.assertFalse(again.get_node("Y").visible)
        self.assertFalse(again.get_node("Z").video)
        self.assertEqual(again.get_source("sx").name, "Camera")


class ReadTests(unittest.TestCase):
    def setUp(self) -> None:
        self.store = SceneStore.from_dict(nested_scene())

    def test_get_node_tolerates_none_and_unknown(self) -> None:
        self.assertIsNone(self.store.get_node(None))
        self.assertIsNone(self.store.get_node("nope"))

    def test_path_of(self) -> None:
        self.assertEqual(self.store.path_of("Y"), ["A", "B", "Y"])
        with self.assertRaises(NodeNotFoundError):
            self.store.path_of("nope")

    def test_subtree_ids(self) -> None:
        self.assertEqual(self.store.subtree_ids("B"), ["B", "Y", "C"])
        self.assertEqual(self.store.subtree_ids("Z"), ["Z"])

    def test_children_of(self) -> None:
        self.assertEqual([n.id for n in self.store.children_of("A")], ["X", "B"])
        self.assertEqual([n.id for n in self.store.children_of(None)], ["A", "Z"])

    def test_add_source(self) -> None:
        self.store.add_source(Source("new", "New", "color_source"))
        self.assertEqual(self.store.get_source("new").type, "color_source")


class MutationTests(unittest.TestCase):
    def setUp(self) -> None:
        self.store = SceneStore.from_dict(basic_scene())
        self.notified = 0

        def on_change():
            self.notified += 1

        self.store.subscribe(on_change)

    def test_set_item_fields(self) -> None:
        self.store.set_item_fields(["X", "Y"], locked=True)
        self.assertTrue(self.store.get_node("Y").locked)
        self.assertEqual(self.notified, 1)

    def test_set_item_fields_rejects_unknown_fields_and_folders(self) -> None:
        with self.assertRaises(SceneStoreError):
            self.store.set_item_fields(["X"], name="renamed")
        with self.assertRaises(SceneStoreError):
            self.store.set_item_fields(["A"], locked=True)
        with self.assertRaises(NodeNotFoundError):
            self.store.set_item_fields(["nope"], locked=True)

    def test_set_item_fields_is_all_or_nothing(self) -> None:
        with self.assertRaises(NodeNotFoundError):
            self.store.set_item_fields(["Y", "nope"], locked=True)
        with self.assertRaises(SceneStoreError):
            self.store.set_item_fields(["Y", "A"], locked=True)
        self.assertFalse(self.store.get_node("Y").locked)
        self.assertEqual(self.notified, 0)

    def test_reorder_before(self) -> None:
        self.store.reorder(["Z"], "X", PlaceType.BEFORE)
        self.assertEqual(order(self.store), ["A", "Z", "X", "Y"])
        self.assertEqual(self.store.get_node("Z").parent_id, "A")
        self.assertEqual(self.notified, 1)

    def test_reorder_after_folder_skips_its_subtree(self) -> None:
        self.store.reorder(["X"], "A", PlaceType.AFTER)
        self.assertEqual(order(self.store), ["A", "Y", "X", "Z"])
        self.assertIsNone(self.store.get_node("X").parent_id)

    def test_reorder_inside_becomes_first_child(self) -> None:
        self.store.reorder(["Z"], "A", PlaceType.INSIDE)
        self.assertEqual(order(self.store), ["A", "Z", "X", "Y"])
        self.assertEqual(self.store.get_node("Z").parent_id, "A")

    def test_folder_moves_with_its_subtree(self) -> None:
        self.store.reorder(["A"], "Z", PlaceType.AFTER)
        self.assertEqual(order(self.store), ["Z", "A", "X", "Y"])
        self.assertEqual(self.store.get_node("X").parent_id, "A")

    def test_reorder_rejects_invalid_destinations(self) -> None:
        with self.assertRaises(SceneStoreError):
            self.store.reorder(["A"], "X", PlaceType.BEFORE)
        with self.assertRaises(SceneStoreError):
            self.store.reorder(["Y"], "Z", PlaceType.INSIDE)
        with self.assertRaises(NodeNotFoundError):
            self.store.reorder(["Y"], "nope", PlaceType.BEFORE)

    def test_remove_folder_removes_subtree(self) -> None:
        self.store.remove(["A", "nope"])
        self.assertEqual(order(self.store), ["Z"])
        self.assertIsNone(self.store.get_node("X"))

    def test_create_folder_groups_items_in_place(self) -> None:
        folder = self.store.create_folder("Group", ["Y", "X"], "A")
        self.assertEqual(order(self.store), ["A", folder.id, "X", "Y", "Z"])
        self.assertEqual(folder.parent_id, "A")
        self.assertEqual(self.store.get_node("X").parent_id, folder.id)
        self.assertEqual(self.store.get_node("Y").parent_id, folder.id)

    def test_create_empty_folder_at_root(self) -> None:
        folder = self.store.create_folder("Empty", [], "")
        self.assertIsNone(folder.parent_id)
        self.assertEqual(order(self.store)[0], folder.id)
        self.assertEqual(self.notified, 1)

    def test_create_folder_inside_item_rejected(self) -> None:
        with self.assertRaises(SceneStoreError):
            self.store.create_folder("Bad", [], "X")


if __name__ == "__main__":
    unittest.main()
