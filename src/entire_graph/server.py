"""FastAPI web server for entire-graph."""

import logging

from fastapi import Depends, FastAPI, HTTPException, Query

from .config import get_repo_path
from .errors import CheckpointNotFound, CommitNotFound, StoreUnavailable
from .export import (
    checkpoint_to_dict,
    commit_to_dict,
    detail_to_dict,
    edge_to_dict,
    session_group_to_dict,
)
from .graph import lane_count
from .service import GraphView

logger = logging.getLogger(__name__)

app = FastAPI(title="entire-graph", version="0.1.0")


def get_view() -> GraphView:
    """Build a fresh view over the configured repository for each request."""
    return GraphView(get_repo_path())


# ── Routes ───────────────────────────────────────────────────────


@app.get("/api/status")
async def get_status(view: GraphView = Depends(get_view)):
    """Return whether the repo has entire enabled and checkpoints recorded."""
    info = view.repo_info()
    return {
        "status": view.status().value,
        "checkpoint_head": view.checkpoint_head(),
        "strategy": info.strategy if info else None,
        "cli_version": info.cli_version if info else None,
    }


@app.get("/api/commits")
async def get_commits(
    limit: int | None = Query(None, ge=1, le=5000),
    view: GraphView = Depends(get_view),
):
    """Return recent commits with their graph lanes and edges."""
    try:
        layout = view.layout(limit)
    except StoreUnavailable as e:
        logger.error("Failed to read history: %s", e)
        raise HTTPException(status_code=503, detail=str(e))

    return {
        "lane_count": lane_count(layout.lanes),
        "commits": [commit_to_dict(c, layout.lanes.get(c.hash)) for c in layout.commits],
        "edges": [edge_to_dict(e) for e in layout.edges],
    }


@app.get("/api/sessions")
async def get_sessions(
    limit: int | None = Query(None, ge=1, le=5000),
    view: GraphView = Depends(get_view),
):
    """Return checkpoint commits grouped by agent session."""
    try:
        groups = view.sessions(limit)
    except StoreUnavailable as e:
        logger.error("Failed to read history: %s", e)
        raise HTTPException(status_code=503, detail=str(e))
    return {"sessions": [session_group_to_dict(g) for g in groups]}


@app.get("/api/commit/{commit_hash}")
async def get_commit(commit_hash: str, view: GraphView = Depends(get_view)):
    """Return one commit with its resolved checkpoint."""
    try:
        detail = view.commit_detail(commit_hash)
    except CommitNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except StoreUnavailable as e:
        raise HTTPException(status_code=503, detail=str(e))
    return detail_to_dict(detail)


@app.get("/api/checkpoint/{checkpoint_id}")
async def get_checkpoint(checkpoint_id: str, view: GraphView = Depends(get_view)):
    """Return checkpoint metadata with every readable session and task."""
    if len(checkpoint_id) < 3:
        raise HTTPException(status_code=400, detail="Checkpoint id must be at least 3 characters")
    try:
        checkpoint = view.checkpoint(checkpoint_id)
    except CheckpointNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except StoreUnavailable as e:
        raise HTTPException(status_code=503, detail=str(e))
    return checkpoint_to_dict(checkpoint)


@app.get("/api/active-sessions")
async def get_active_sessions(view: GraphView = Depends(get_view)):
    """Return sessions the entire CLI is currently recording."""
    return [s.model_dump(mode="json") for s in view.active_sessions()]
