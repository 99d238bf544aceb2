from __future__ import annotations

import unittest

from sourcetree import contracts
from sourcetree.reorder import DropInfo, PlaceType, nodes_to_move, resolve_placement, resolve_reorder
from sourcetree.scene_store import SceneStore
from sourcetree.selection import Modifiers

from scene_fixtures import Harness, basic_scene, nested_scene


def drop(drag, target, *, leaf=True, pos="0", position=0, gap=True) -> DropInfo:
    return DropInfo(
        drag_node_id=drag,
        target_node_id=target,
        target_is_leaf=leaf,
        target_pos=pos,
        drop_position=position,
        drop_to_gap=gap,
    )


class PlacementTests(unittest.TestCase):
    def test_drop_on_folder_body_goes_inside(self) -> None:
        self.assertIs(resolve_placement(drop("Z", "A", leaf=False, gap=False)), PlaceType.INSIDE)

    def test_gap_below_target_is_after(self) -> None:
        self.assertIs(resolve_placement(drop("Z", "X", pos="0-0", position=1)), PlaceType.AFTER)

    def test_gap_above_target_is_before(self) -> None:
        self.assertIs(resolve_placement(drop("Z", "Y", pos="0-1", position=0)), PlaceType.BEFORE)

    def test_zero_delta_is_before(self) -> None:
        self.assertIs(resolve_placement(drop("Z", "Y", pos="0-1", position=1)), PlaceType.BEFORE)

    def test_gap_next_to_folder_is_not_inside(self) -> None:
        self.assertIs(resolve_placement(drop("Z", "A", leaf=False, pos="0", position=1)), PlaceType.AFTER)

    def test_leaf_body_drop_uses_delta(self) -> None:
        self.assertIs(resolve_placement(drop("A", "Z", pos="1", position=1, gap=False)), PlaceType.BEFORE)


class ResolveReorderTests(unittest.TestCase):
    def setUp(self) -> None:
        self.store = SceneStore.from_dict(basic_scene())

    def test_unselected_drag_moves_only_itself(self) -> None:
        request = resolve_reorder(self.store, ["X"], drop("Z", "A", leaf=False, gap=False))
        self.assertEqual(request.node_ids, ["Z"])
        self.assertEqual(request.destination_id, "A")
        self.assertIs(request.placement, PlaceType.INSIDE)

    def test_selected_drag_moves_selection_in_store_order(self) -> None:
        self.assertEqual(nodes_to_move(self.store, ["Z", "X"], "X"), ["X", "Z"])

    def test_unselected_folder_drag_carries_reported_subtree(self) -> None:
        info = DropInfo(
            drag_node_id="A",
            target_node_id="Z",
            target_is_leaf=True,
            target_pos="1",
            drop_position=2,
            drop_to_gap=True,
            drag_node_ids=("A", "X", "Y"),
        )
        request = resolve_reorder(self.store, ["Z"], info)
        self.assertEqual(request.node_ids, ["A", "X", "Y"])
        self.assertIs(request.placement, PlaceType.AFTER)

    def test_selection_wins_over_reported_drag_nodes(self) -> None:
        self.assertEqual(nodes_to_move(self.store, ["X", "Z"], "Z", ("Z",)), ["X", "Z"])
        self.assertEqual(nodes_to_move(self.store, [], "Z", ()), ["Z"])

    def test_missing_destination(self) -> None:
        self.assertIsNone(resolve_reorder(self.store, [], drop("Z", "gone")))

    def test_missing_dragged_node(self) -> None:
        self.assertIsNone(resolve_reorder(self.store, [], drop("gone", "Z")))

    def test_missing_selected_node(self) -> None:
        self.assertIsNone(resolve_reorder(self.store, ["X", "gone"], drop("X", "Z")))

    def test_drop_into_own_subtree(self) -> None:
        store = SceneStore.from_dict(nested_scene())
        self.assertIsNone(resolve_reorder(store, [], drop("A", "C", leaf=False, gap=False)))
        self.assertIsNone(resolve_reorder(store, [], drop("A", "A", leaf=False, gap=False)))


class HandleSortTests(unittest.TestCase):
    def test_selection_moves_together_after_target(self) -> None:
        h = Harness()
        h.controller.make_active("X")
        h.controller.make_active("Y", Modifiers(ctrl=True))
        h.controller.handle_sort(drop("Y", "Z", pos="1", position=2))

        self.assertEqual(
            h.bus.last(contracts.REORDER_NODES),
            (contracts.REORDER_NODES, (["X", "Y"], "Z", PlaceType.AFTER)),
        )
        self.assertEqual([n.id for n in h.store.get_nodes()], ["A", "Z", "X", "Y"])
        self.assertIsNone(h.item("X").parent_id)
        self.assertIsNone(h.item("Y").parent_id)

    def test_leaf_dropped_onto_folder_is_nested(self) -> None:
        h = Harness()
        h.controller.handle_sort(drop("Z", "A", leaf=False, pos="0", position=0, gap=False))
        self.assertEqual(h.item("Z").parent_id, "A")
        self.assertEqual([n.id for n in h.store.get_nodes()], ["A", "Z", "X", "Y"])

    def test_folder_drag_with_subtree_ids_moves_as_one_block(self) -> None:
        h = Harness()
        info = DropInfo(
            drag_node_id="A",
            target_node_id="Z",
            target_is_leaf=True,
            target_pos="1",
            drop_position=2,
            drop_to_gap=True,
            drag_node_ids=("A", "X", "Y"),
        )
        h.controller.handle_sort(info)
        self.assertEqual([n.id for n in h.store.get_nodes()], ["Z", "A", "X", "Y"])
        self.assertEqual(h.item("X").parent_id, "A")

    def test_unresolvable_drop_submits_nothing(self) -> None:
        h = Harness()
        h.controller.handle_sort(drop("Z", "gone"))
        self.assertEqual(h.bus.history, [])


if __name__ == "__main__":
    unittest.main()
