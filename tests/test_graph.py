"""Tests for the commit graph lane layout."""

from entire_graph.core import CommitRecord
from entire_graph.graph import PALETTE, LaneArena, assign_lanes, build_edges, lane_count


def commit(commit_hash, *parents):
    return CommitRecord(hash=commit_hash, abbreviated_hash=commit_hash[:7], parents=list(parents))


class TestAssignLanes:
    """Tests for assign_lanes."""

    def test_straight_line_stays_in_lane_zero(self):
        commits = [commit("c3", "c2"), commit("c2", "c1"), commit("c1")]
        lanes = assign_lanes(commits)

        assert [lanes[h].lane for h in ("c3", "c2", "c1")] == [0, 0, 0]
        assert {lanes[h].color for h in ("c3", "c2", "c1")} == {PALETTE[0]}

    def test_merge_second_parent_gets_other_lane(self):
        commits = [
            commit("c3", "c2"),
            commit("c2", "c1", "c4"),
            commit("c4"),
            commit("c1"),
        ]
        lanes = assign_lanes(commits)

        assert lanes["c3"].lane == lanes["c2"].lane == lanes["c1"].lane == 0
        assert lanes["c4"].lane != 0
        assert lanes["c4"].color != lanes["c2"].color
        assert lanes["c1"].color == lanes["c2"].color

    def test_octopus_merge_parents_get_distinct_lanes_and_colors(self):
        commits = [
            commit("m", "p1", "p2", "p3"),
            commit("p1"),
            commit("p2"),
            commit("p3"),
        ]
        lanes = assign_lanes(commits)

        assert lanes["p1"].lane == lanes["m"].lane
        others = [lanes["p2"].lane, lanes["p3"].lane]
        assert lanes["m"].lane not in others
        assert len(set(others)) == 2
        assert len({lanes["m"].color, lanes["p2"].color, lanes["p3"].color}) == 3

    def test_placeholder_lane_is_honored_when_visited(self):
        # b is pre-assigned lane 1 by the merge before it is visited itself
        commits = [
            commit("m", "a", "b"),
            commit("b", "base"),
            commit("a", "base"),
            commit("base"),
        ]
        lanes = assign_lanes(commits)

        assert lanes["b"].lane == 1
        assert lanes["b"].color == PALETTE[1]
        assert lanes["a"].lane == 0
        # no third lane was opened for b
        assert lane_count(lanes) == 2

    def test_root_frees_lane_for_later_branch_head(self):
        commits = [
            commit("x2", "x1"),
            commit("x1"),
            commit("y1"),
        ]
        lanes = assign_lanes(commits)

        assert lanes["x1"].lane == 0
        assert lanes["y1"].lane == 0
        assert lanes["y1"].color == PALETTE[1]

    def test_parallel_heads_use_separate_lanes(self):
        commits = [
            commit("a2", "a1"),
            commit("b2", "b1"),
            commit("a1", "base"),
            commit("b1", "base"),
            commit("base"),
        ]
        lanes = assign_lanes(commits)

        assert lanes["a2"].lane == lanes["a1"].lane == 0
        assert lanes["b2"].lane == lanes["b1"].lane == 1
        # base was reserved by a1 first, so it stays in lane 0
        assert lanes["base"].lane == 0

    def test_parents_outside_window_are_ignored(self):
        commits = [commit("c2", "c1"), commit("c1", "outside")]
        lanes = assign_lanes(commits)

        assert "outside" not in lanes
        assert lanes["c1"].lane == 0

    def test_already_assigned_merge_parent_keeps_its_lane(self):
        commits = [
            commit("t", "base"),
            commit("m", "side", "base"),
            commit("side", "base"),
            commit("base"),
        ]
        lanes = assign_lanes(commits)

        assert lanes["base"].lane == 0
        assert lanes["m"].lane == 1
        assert lanes["side"].lane == 1

    def test_colors_cycle_through_palette(self):
        commits = [commit(f"r{i}") for i in range(len(PALETTE) + 2)]
        lanes = assign_lanes(commits)

        colors = [lanes[c.hash].color for c in commits]
        assert colors[: len(PALETTE)] == list(PALETTE)
        assert colors[len(PALETTE):] == [PALETTE[0], PALETTE[1]]

    def test_deterministic_across_runs(self):
        commits = [
            commit("m", "a", "b"),
            commit("a", "r"),
            commit("b", "r"),
            commit("r"),
            commit("z"),
        ]
        assert assign_lanes(commits) == assign_lanes(commits)

    def test_all_lanes_non_negative(self):
        commits = [
            commit("h", "g", "f"),
            commit("g", "e"),
            commit("f", "e", "d"),
            commit("e", "c"),
            commit("d", "c"),
            commit("c"),
        ]
        lanes = assign_lanes(commits)
        assert set(lanes) == {"c", "d", "e", "f", "g", "h"}
        assert all(info.lane >= 0 for info in lanes.values())

    def test_empty_input(self):
        assert assign_lanes([]) == {}
        assert lane_count({}) == 0


class TestBuildEdges:
    """Tests for build_edges."""

    def test_edges_follow_child_color_and_rows(self):
        commits = [
            commit("c3", "c2"),
            commit("c2", "c1", "c4"),
            commit("c4"),
            commit("c1", "outside"),
        ]
        lanes = assign_lanes(commits)
        edges = build_edges(commits, lanes)

        assert [(e.child, e.parent) for e in edges] == [("c3", "c2"), ("c2", "c1"), ("c2", "c4")]
        straight, down, merge = edges
        assert straight.is_straight
        assert (straight.from_row, straight.to_row) == (0, 1)
        assert down.is_straight
        assert not merge.is_straight
        assert merge.color == lanes["c2"].color
        assert (merge.from_lane, merge.to_lane) == (0, lanes["c4"].lane)


def test_lane_arena_reuses_first_free_slot():
    arena = LaneArena()
    assert arena.claim_free() == 0
    arena.reserve(0, "a")
    assert arena.claim_free() == 1
    arena.reserve(1, "b")
    arena.release(0)
    assert arena.claim_free() == 0
    assert arena.find("b") == 1
    assert arena.find("missing") is None
    assert len(arena) == 2
