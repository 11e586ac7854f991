"""Shared test fixtures for entire-graph."""

import json
import os
import shutil
import subprocess

import pytest

from entire_graph.errors import MetadataUnreadable
from entire_graph.store import CheckpointStore

CHECKPOINT_ID = "3a96b1501cdd"
SHARD = "3a/96b1501cdd"


class FakeStore(CheckpointStore):
    """In-memory store: a dict of blob paths on the checkpoints ref."""

    name = "fake"

    def __init__(self, files=None, log_text="", available=True):
        self.files = dict(files or {})
        self.log_text = log_text
        self.available = available
        self.reads = []

    def is_available(self):
        return self.available

    def read_text(self, path):
        self.reads.append(path)
        if not self.available or path not in self.files:
            raise MetadataUnreadable(path, "not found")
        return self.files[path]

    def list_dir(self, path):
        prefix = path.rstrip("/") + "/"
        entries = []
        for file_path in self.files:
            if file_path.startswith(prefix):
                entry = prefix + file_path[len(prefix):].split("/")[0]
                if entry not in entries:
                    entries.append(entry)
        return entries

    def log(self, max_count):
        return self.log_text

    def head(self):
        return "c0ffee" if self.available else None


def format_record(
    commit_hash,
    parents=(),
    date="2026-01-13T10:00:00+00:00",
    subject="Commit",
    refs="",
    checkpoint="",
    attribution="",
    session="",
    agent="",
):
    """Build one log record the way LOG_FORMAT makes git print it."""
    fields = [
        commit_hash,
        commit_hash[:7],
        " ".join(parents),
        "Test User",
        "test@example.com",
        date,
        subject,
        refs,
        checkpoint,
        attribution,
        session,
        agent,
    ]
    return "\x00".join(fields) + "\x1f\n"


def session_json(session_id="s1", agent="claude", **extra):
    data = {
        "cli_version": "0.4.2",
        "checkpoint_id": CHECKPOINT_ID,
        "session_id": session_id,
        "strategy": "manual-commit",
        "created_at": "2026-01-13T10:00:00.123456789Z",
        "branch": "main",
        "checkpoints_count": 3,
        "files_touched": ["src/app.py"],
        "agent": agent,
        "is_task": False,
        "token_usage": {"input_tokens": 1200, "output_tokens": 340},
        "initial_attribution": {
            "agent_percentage": 82.5,
            "human_percentage": 17.5,
            "agent_lines": 33,
            "total_lines": 40,
        },
        "summary": {"intent": "Fix login redirect", "outcome": "Redirect fixed"},
    }
    data.update(extra)
    return json.dumps(data)


def root_json(session_paths, checkpoint_id=CHECKPOINT_ID):
    return json.dumps({
        "cli_version": "0.4.2",
        "checkpoint_id": checkpoint_id,
        "strategy": "manual-commit",
        "branch": "main",
        "checkpoints_count": 3,
        "files_touched": None,
        "sessions": [
            {
                "metadata": path,
                "transcript": path.replace("metadata.json", "full.jsonl"),
                "context": path.replace("metadata.json", "context.md"),
                "content_hash": "sha256:abc123",
                "prompt": "Fix the login redirect",
            }
            for path in session_paths
        ],
    })


def task_json(tool_use_id, session_id="s1"):
    return json.dumps({
        "session_id": session_id,
        "tool_use_id": tool_use_id,
        "checkpoint_uuid": "6f1c1a52-8a57-4c1e-9a4e-0d7d2f3b9e10",
        "agent_id": f"agent-{tool_use_id}",
    })


@pytest.fixture
def checkpoint_files():
    """A checkpoint with two sessions and two sub-agent tasks."""
    return {
        f"{SHARD}/metadata.json": root_json([
            f"/{SHARD}/0/metadata.json",
            f"/{SHARD}/1/metadata.json",
        ]),
        f"{SHARD}/0/metadata.json": session_json("s1", "claude"),
        f"{SHARD}/1/metadata.json": session_json("s2", "gemini"),
        f"{SHARD}/tasks/toolu_01/checkpoint.json": task_json("toolu_01"),
        f"{SHARD}/tasks/toolu_02/checkpoint.json": task_json("toolu_02", "s2"),
    }


@pytest.fixture
def make_store():
    """Factory for in-memory stores."""
    return FakeStore


# ── Real git repository ──────────────────────────────────────────


def _git(repo, *args, input=None, env=None):
    result = subprocess.run(
        ["git", "-c", "commit.gpgsign=false", *args],
        cwd=repo,
        input=input,
        capture_output=True,
        text=True,
        env=env,
        check=True,
    )
    return result.stdout.strip()


@pytest.fixture
def git_repo(tmp_path, checkpoint_files):
    """A repository with two commits and a populated checkpoints ref.

    The second commit carries an Entire-Checkpoint trailer pointing at the
    checkpoint in `checkpoint_files`.
    """
    if shutil.which("git") is None:
        pytest.skip("git is not installed")

    home = tmp_path / "home"
    home.mkdir()
    env = {
        **os.environ,
        "HOME": str(home),
        "GIT_CONFIG_NOSYSTEM": "1",
        "GIT_AUTHOR_NAME": "Test User",
        "GIT_AUTHOR_EMAIL": "test@example.com",
        "GIT_COMMITTER_NAME": "Test User",
        "GIT_COMMITTER_EMAIL": "test@example.com",
    }
    repo = tmp_path / "repo"
    repo.mkdir()

    _git(repo, "init", "-q", env=env)
    _git(repo, "symbolic-ref", "HEAD", "refs/heads/main", env=env)

    (repo / "README.md").write_text("# demo\n", encoding="utf-8")
    _git(repo, "add", "README.md", env=env)
    _git(repo, "commit", "-q", "-m", "Initial commit", env=env)

    (repo / "app.py").write_text("print('hi')\n", encoding="utf-8")
    _git(repo, "add", "app.py", env=env)
    _git(repo, "commit", "-q", "-m", "Add app", "-m", f"Entire-Checkpoint: {CHECKPOINT_ID}", env=env)

    # Build the orphan checkpoints ref with plumbing so the working tree is untouched
    index_env = {**env, "GIT_INDEX_FILE": str(tmp_path / "checkpoints.index")}
    for path, content in checkpoint_files.items():
        blob = _git(repo, "hash-object", "-w", "--stdin", input=content, env=index_env)
        _git(repo, "update-index", "--add", "--cacheinfo", f"100644,{blob},{path}", env=index_env)
    tree = _git(repo, "write-tree", env=index_env)
    commit = _git(repo, "commit-tree", tree, "-m", "Checkpoint metadata", env=env)
    _git(repo, "update-ref", "refs/heads/entire/checkpoints/v1", commit, env=env)

    return repo
