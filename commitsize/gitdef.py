"""Git commit information structures."""

from dataclasses import dataclass, field

from commitsize.numutil import format_size


# Maps the new path of each renamed file to its old path
RenameMap = dict[str, str]

# Number of hash characters shown to users
SHORT_HASH_LEN = 8


@dataclass
class CommitInfo:
    """Basic information about a git commit as listed by git log."""

    commit_hash: str = ''
    date: str = ''      # author date as YYYY-MM-DD
    subject: str = ''


@dataclass
class ChangeStat:
    """Counts from a condensed git change summary line."""

    files_changed: int = 0
    insertions: int = 0


@dataclass
class CommitRecord:
    """Size estimate for a single commit."""

    commit_hash: str
    subject: str
    date: str
    is_initial: bool
    file_count: int
    size_bytes: int
    method: str = ''    # ESTIMATE_ACCURATE or ESTIMATE_FAST
    notes: list[str] = field(default_factory=list)

    @property
    def short_hash(self) -> str:
        return self.commit_hash[:SHORT_HASH_LEN]

    @property
    def formatted_size(self) -> str:
        return format_size(self.size_bytes)
