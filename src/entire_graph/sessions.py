"""Group checkpoint commits into agent session timelines.

Code commits written by the entire CLI carry an Entire-Checkpoint trailer
but usually no Entire-Session trailer; the session id lives in the
checkpoint metadata on the orphan ref. Those commits are backfilled from
the first session the checkpoint's root metadata lists.

Only the first listed session is consulted, so a checkpoint shared by
several sessions files all of its commits under the first one.
"""

import logging
from datetime import datetime, timezone

from .core import CommitRecord, SessionGroup
from .errors import EntireGraphError
from .resolver import MetadataResolver

logger = logging.getLogger(__name__)

DEFAULT_AGENT = "AI"
UNKNOWN_SESSION_PREFIX = "unknown-"

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def backfill_session(commit: CommitRecord, resolver: MetadataResolver) -> bool:
    """Fill in session_id (and agent, if absent) from checkpoint metadata.

    Returns True if the commit now has a session id from metadata.
    Resolution failures are logged and leave the commit untouched.
    """
    if commit.session_id or not commit.checkpoint_id:
        return False
    try:
        session = resolver.first_session(commit.checkpoint_id)
    except EntireGraphError as e:
        logger.debug("No session metadata for %s (%s): %s", commit.abbreviated_hash, commit.checkpoint_id, e)
        return False
    if session is None:
        return False

    commit.session_id = session.session_id
    commit.agent = commit.agent or session.agent
    return True


def group_sessions(
    commits: list[CommitRecord],
    resolver: MetadataResolver | None = None,
) -> list[SessionGroup]:
    """Group checkpoint commits by session, most recently active first.

    Commits without a checkpoint trailer are ignored. Commits whose session
    cannot be determined get a singleton group keyed `unknown-<hash>`.
    """
    checkpoint_commits = [c for c in commits if c.has_checkpoint]

    if resolver is not None:
        for commit in checkpoint_commits:
            backfill_session(commit, resolver)

    # dicts keep insertion order, which the stable sort below relies on
    buckets: dict[str, list[CommitRecord]] = {}
    for commit in checkpoint_commits:
        key = commit.session_id or f"{UNKNOWN_SESSION_PREFIX}{commit.hash}"
        buckets.setdefault(key, []).append(commit)

    groups = [_build_group(session_id, members) for session_id, members in buckets.items()]
    groups.sort(key=lambda g: g.last_activity_at or _EPOCH, reverse=True)
    return groups


def _build_group(session_id: str, members: list[CommitRecord]) -> SessionGroup:
    agent = next((c.agent for c in members if c.agent), DEFAULT_AGENT)
    timestamps = [ts for ts in (c.timestamp for c in members) if ts is not None]

    return SessionGroup(
        session_id=session_id,
        agent=agent,
        checkpoints=members,
        started_at=min(timestamps) if timestamps else None,
        last_activity_at=max(timestamps) if timestamps else None,
    )
