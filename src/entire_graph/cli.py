"""CLI entry point for entire-graph."""

import logging
import os
from pathlib import Path

import click
import uvicorn

from .config import get_repo_path
from .errors import CheckpointNotFound, StoreUnavailable
from .export import checkpoint_to_dict, session_group_to_dict, to_json
from .graph import lane_count
from .service import GraphView


@click.group()
@click.option(
    "--repo",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Repository to read (defaults to $ENTIRE_GRAPH_REPO or the current directory).",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, repo: Path | None, verbose: bool):
    """Browse commit history annotated with entire agent checkpoints."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = repo or get_repo_path()


@main.command()
@click.option("--port", default=8080, help="Port to serve on.")
@click.option("--host", default="127.0.0.1", help="Host to bind to.")
@click.pass_obj
def serve(repo: Path, port: int, host: str):
    """Start the JSON API."""
    os.environ["ENTIRE_GRAPH_REPO"] = str(repo)
    click.echo(f"Starting entire-graph for {repo} on http://{host}:{port}")
    uvicorn.run("entire_graph.server:app", host=host, port=port, reload=False)


@main.command()
@click.option("-n", "--max-count", type=int, default=None, help="Number of commits to show.")
@click.pass_obj
def log(repo: Path, max_count: int | None):
    """Print history as a lane graph, marking checkpoint commits."""
    view = GraphView(repo)
    try:
        layout = view.layout(max_count)
    except StoreUnavailable as e:
        raise click.ClickException(str(e))

    width = lane_count(layout.lanes)
    for commit in layout.commits:
        lane = layout.lanes[commit.hash].lane
        marker = "◆" if commit.has_checkpoint else "●"
        columns = [" "] * width
        columns[lane] = marker
        line = f"{' '.join(columns)}  {commit.abbreviated_hash} {commit.subject}"
        if commit.checkpoint_id:
            line += f"  [{commit.checkpoint_id}]"
        click.echo(line)


@main.command()
@click.option("-n", "--max-count", type=int, default=None, help="Number of commits to scan.")
@click.option("--json", "as_json", is_flag=True, help="Emit JSON.")
@click.pass_obj
def sessions(repo: Path, max_count: int | None, as_json: bool):
    """List agent sessions, most recently active first."""
    view = GraphView(repo)
    try:
        groups = view.sessions(max_count)
    except StoreUnavailable as e:
        raise click.ClickException(str(e))

    if as_json:
        click.echo(to_json([session_group_to_dict(g) for g in groups]))
        return

    for group in groups:
        last = group.last_activity_at.strftime("%Y-%m-%d %H:%M") if group.last_activity_at else "?"
        click.echo(f"{last}  {group.agent:<12} {group.session_id}  ({len(group.checkpoints)} checkpoints)")


@main.command()
@click.argument("checkpoint_id")
@click.option("--json", "as_json", is_flag=True, help="Emit JSON.")
@click.pass_obj
def show(repo: Path, checkpoint_id: str, as_json: bool):
    """Show metadata for one checkpoint."""
    view = GraphView(repo)
    try:
        checkpoint = view.checkpoint(checkpoint_id)
    except (CheckpointNotFound, StoreUnavailable) as e:
        raise click.ClickException(str(e))

    if as_json:
        click.echo(to_json(checkpoint_to_dict(checkpoint)))
        return

    click.echo(f"Checkpoint {checkpoint.checkpoint_id}")
    click.echo(f"  branch:   {checkpoint.branch}")
    click.echo(f"  strategy: {checkpoint.strategy}")
    for session in checkpoint.sessions:
        click.echo(f"  session {session.session_id} ({session.agent}, {session.created_at})")
        if session.summary and session.summary.intent:
            click.echo(f"    intent: {session.summary.intent}")
    for task in checkpoint.tasks:
        click.echo(f"  task {task.tool_use_id} -> agent {task.agent_id}")
    for skipped in checkpoint.skipped:
        click.echo(f"  skipped {skipped.kind} {skipped.path}: {skipped.reason}", err=True)


@main.command()
@click.pass_obj
def active(repo: Path):
    """List sessions the entire CLI is currently recording."""
    for session in GraphView(repo).active_sessions():
        prompt = session.first_prompt[:60]
        click.echo(f"{session.started_at}  {session.agent_type:<12} {session.phase:<8} {session.session_id}  {prompt}")
