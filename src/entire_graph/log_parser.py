"""Parse delimited git log output into CommitRecord objects.

The log is produced with LOG_FORMAT: fields are separated by NUL and every
record is terminated by the ASCII unit separator. Parsing is purely
structural; a short or malformed record still yields a commit with the
missing fields left empty.
"""

from .core import CommitRecord

FIELD_SEP = "\x00"
RECORD_SEP = "\x1f"

TRAILER_KEYS = (
    "Entire-Checkpoint",
    "Entire-Attribution",
    "Entire-Session",
    "Entire-Agent",
)

_FIELDS = [
    "%H",   # full hash
    "%h",   # abbreviated hash
    "%P",   # parent hashes, space separated
    "%an",  # author name
    "%ae",  # author email
    "%aI",  # author date, strict ISO 8601
    "%s",   # subject
    "%D",   # ref names, comma separated
] + [f"%(trailers:key={key},valueonly,separator=%x20)" for key in TRAILER_KEYS]

LOG_FORMAT = "%x00".join(_FIELDS) + "%x1f"


def parse_log(raw: str) -> list[CommitRecord]:
    """Parse raw log text into commits, preserving input order."""
    commits = []
    for record in raw.split(RECORD_SEP):
        record = record.strip()
        if not record:
            continue
        commits.append(_parse_record(record))
    return commits


def _parse_record(record: str) -> CommitRecord:
    fields = record.split(FIELD_SEP)
    # Pad so fixed positions always exist
    fields += [""] * (12 - len(fields))

    (
        commit_hash,
        abbreviated_hash,
        parent_str,
        author,
        author_email,
        date,
        subject,
        ref_str,
        checkpoint,
        attribution,
        session,
        agent,
    ) = fields[:12]

    parents = [p for p in parent_str.split(" ") if p]
    refs = [r.strip() for r in ref_str.split(",") if r.strip()]

    return CommitRecord(
        hash=commit_hash,
        abbreviated_hash=abbreviated_hash,
        parents=parents,
        author=author,
        author_email=author_email,
        date=date,
        subject=subject,
        refs=refs,
        checkpoint_id=_trailer(checkpoint),
        attribution=_trailer(attribution),
        session_id=_trailer(session),
        agent=_trailer(agent),
    )


def _trailer(value: str) -> str | None:
    value = value.strip()
    return value or None
