"""Lane and colour layout for drawing the commit DAG.

A single pass over the commits in display order (newest first). Each lane
slot is either free or reserved by the hash of the commit expected next in
that lane, i.e. the parent that continues the line downwards.

Per commit:

- a lane reserved for this hash is reused and the colour recorded when the
  child reserved it is inherited;
- otherwise the commit is a new branch head: it takes the first free slot
  (or a new one) and the next palette colour;
- the first in-window parent continues in the same lane;
- every further parent of a merge gets its own lane and a fresh colour;
- a commit with no in-window parents frees its lane for later heads.

Colours come from one counter shared by every allocation, so identical input
always produces identical output.
"""

from .core import CommitRecord, Edge, LaneInfo

PALETTE = (
    "#2196f3",  # blue
    "#4caf50",  # green
    "#f44336",  # red
    "#ff9800",  # yellow
    "#9c27b0",  # purple
    "#ff5722",  # orange
)


class LaneArena:
    """Growable list of lane slots indexed by lane number."""

    def __init__(self):
        self.slots: list[str | None] = []

    def find(self, commit_hash: str) -> int | None:
        """Return the lowest lane reserved for a hash."""
        for lane, reserved in enumerate(self.slots):
            if reserved == commit_hash:
                return lane
        return None

    def claim_free(self) -> int:
        """Return the first free lane, growing the arena if all are taken."""
        for lane, reserved in enumerate(self.slots):
            if reserved is None:
                return lane
        self.slots.append(None)
        return len(self.slots) - 1

    def reserve(self, lane: int, commit_hash: str) -> None:
        self.slots[lane] = commit_hash

    def release(self, lane: int) -> None:
        self.slots[lane] = None

    def __len__(self) -> int:
        return len(self.slots)


class ColorCycle:
    """Round-robin palette allocator."""

    def __init__(self, palette: tuple[str, ...] = PALETTE):
        self.palette = palette
        self.counter = 0

    def next(self) -> str:
        color = self.palette[self.counter % len(self.palette)]
        self.counter += 1
        return color


def assign_lanes(
    commits: list[CommitRecord],
    palette: tuple[str, ...] = PALETTE,
) -> dict[str, LaneInfo]:
    """Assign a lane and colour to every commit, keyed by hash."""
    known = {c.hash for c in commits}
    result: dict[str, LaneInfo] = {}
    arena = LaneArena()
    colors = ColorCycle(palette)

    for commit in commits:
        lane = arena.find(commit.hash)
        color = None
        if lane is not None:
            existing = result.get(commit.hash)
            if existing is not None:
                color = existing.color
        else:
            lane = arena.claim_free()
            color = colors.next()

        if color is None:
            color = colors.next()

        result[commit.hash] = LaneInfo(lane, color)

        parents = [p for p in commit.parents if p in known]
        if not parents:
            arena.release(lane)
            continue

        first = parents[0]
        arena.reserve(lane, first)
        if first not in result:
            result[first] = LaneInfo(lane, color)

        for parent in parents[1:]:
            if parent in result:
                continue
            parent_lane = arena.find(parent)
            if parent_lane is None:
                parent_lane = arena.claim_free()
                arena.reserve(parent_lane, parent)
            result[parent] = LaneInfo(parent_lane, colors.next())

    return result


def build_edges(commits: list[CommitRecord], lanes: dict[str, LaneInfo]) -> list[Edge]:
    """Return one edge per commit/parent pair where both are laid out."""
    rows = {c.hash: i for i, c in enumerate(commits)}
    edges = []
    for row, commit in enumerate(commits):
        info = lanes.get(commit.hash)
        if info is None:
            continue
        for parent in commit.parents:
            parent_row = rows.get(parent)
            parent_info = lanes.get(parent)
            if parent_row is None or parent_info is None:
                continue
            edges.append(Edge(
                child=commit.hash,
                parent=parent,
                from_lane=info.lane,
                to_lane=parent_info.lane,
                from_row=row,
                to_row=parent_row,
                color=info.color,
            ))
    return edges


def lane_count(lanes: dict[str, LaneInfo]) -> int:
    """Return the number of lane columns needed to draw the layout."""
    if not lanes:
        return 0
    return max(info.lane for info in lanes.values()) + 1
