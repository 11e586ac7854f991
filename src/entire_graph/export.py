"""Convert graph and checkpoint objects into JSON-serializable dicts."""

import json
from datetime import datetime

from .core import Checkpoint, CommitDetail, CommitRecord, Edge, LaneInfo, SessionGroup


def commit_to_dict(commit: CommitRecord, lane: LaneInfo | None = None) -> dict:
    data = {
        "hash": commit.hash,
        "abbreviated_hash": commit.abbreviated_hash,
        "parents": commit.parents,
        "author": commit.author,
        "author_email": commit.author_email,
        "date": commit.date,
        "subject": commit.subject,
        "refs": commit.refs,
        "checkpoint_id": commit.checkpoint_id,
        "attribution": commit.attribution,
        "session_id": commit.session_id,
        "agent": commit.agent,
    }
    if lane is not None:
        data["lane"] = lane.lane
        data["color"] = lane.color
    return data


def edge_to_dict(edge: Edge) -> dict:
    return {
        "child": edge.child,
        "parent": edge.parent,
        "from_lane": edge.from_lane,
        "to_lane": edge.to_lane,
        "from_row": edge.from_row,
        "to_row": edge.to_row,
        "color": edge.color,
        "shape": "line" if edge.is_straight else "curve",
    }


def checkpoint_to_dict(checkpoint: Checkpoint) -> dict:
    return {
        "checkpoint_id": checkpoint.checkpoint_id,
        "strategy": checkpoint.strategy,
        "branch": checkpoint.branch,
        "sessions": [s.model_dump(mode="json") for s in checkpoint.sessions],
        "tasks": [t.model_dump(mode="json") for t in checkpoint.tasks],
        "skipped": [
            {"kind": s.kind, "path": s.path, "reason": s.reason}
            for s in checkpoint.skipped
        ],
    }


def session_group_to_dict(group: SessionGroup) -> dict:
    return {
        "session_id": group.session_id,
        "agent": group.agent,
        "started_at": _iso(group.started_at),
        "last_activity_at": _iso(group.last_activity_at),
        "checkpoints": [commit_to_dict(c) for c in group.checkpoints],
    }


def detail_to_dict(detail: CommitDetail) -> dict:
    return {
        "commit": commit_to_dict(detail.commit),
        "checkpoint": checkpoint_to_dict(detail.checkpoint) if detail.checkpoint else None,
        "error": detail.error,
    }


def to_json(data) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False)


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None
