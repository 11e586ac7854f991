"""Pydantic schemas for the JSON objects stored on the checkpoints ref.

Layout of the orphan branch (one directory per checkpoint id, sharded on
the first two characters)::

    3a/96b1501cdd/metadata.json               RootCheckpointMetadata
    3a/96b1501cdd/0/metadata.json             SessionMetadata (path listed in root)
    3a/96b1501cdd/tasks/<tool_use_id>/checkpoint.json   TaskCheckpoint

Defaults for optional counters and lists are applied here so callers never
have to coalesce missing values themselves. Unknown keys are ignored.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator


class _Schema(BaseModel):
    model_config = ConfigDict(extra="ignore")


class SessionRef(_Schema):
    """Pointer from root metadata to one session's files."""

    metadata: str
    transcript: str = ""
    context: str = ""
    content_hash: str = ""
    prompt: str = ""


class RootCheckpointMetadata(_Schema):
    checkpoint_id: str
    branch: str
    strategy: str
    checkpoints_count: int = 0
    files_touched: list[str] = []
    cli_version: str = ""
    sessions: list[SessionRef]

    @field_validator("files_touched", mode="before")
    @classmethod
    def files_or_empty(cls, value):
        return [] if value is None else value


class TokenUsage(_Schema):
    input_tokens: int = 0
    output_tokens: int = 0


class Attribution(_Schema):
    agent_percentage: float = 0.0
    human_percentage: float = 0.0
    agent_lines: int = 0
    total_lines: int = 0


class SessionSummary(_Schema):
    intent: str = ""
    outcome: str = ""


class SessionMetadata(_Schema):
    """Metadata for one agent session inside a checkpoint."""

    session_id: str
    created_at: str  # kept verbatim; the capture tool writes nanosecond precision
    branch: str
    strategy: str
    agent: str
    checkpoints_count: int = 0
    files_touched: list[str] = []
    is_task: bool = False
    cli_version: str = ""
    checkpoint_id: str = ""
    tool_use_id: Optional[str] = None
    token_usage: Optional[TokenUsage] = None
    initial_attribution: Optional[Attribution] = None
    summary: Optional[SessionSummary] = None

    @field_validator("files_touched", mode="before")
    @classmethod
    def files_or_empty(cls, value):
        return [] if value is None else value


class TaskCheckpoint(_Schema):
    """A sub-agent invocation recorded under a checkpoint's tasks/ directory."""

    session_id: str
    tool_use_id: str
    checkpoint_uuid: str
    agent_id: str


class ActiveSession(_Schema):
    """An in-flight session file from .git/entire-sessions/."""

    session_id: str
    agent_type: str
    started_at: str
    phase: str
    first_prompt: str = ""
    transcript_path: str = ""
    ended_at: Optional[str] = None
    checkpoint_count: int = 0

    @field_validator("first_prompt", "transcript_path", mode="before")
    @classmethod
    def text_or_empty(cls, value):
        return value or ""
