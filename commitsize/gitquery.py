"""Read-only queries against a git repository.

Every query runs git once. A failed query (git missing, non-zero exit) is logged and returns
empty output so callers can fall back to a default instead of aborting.
"""

import logging
import re
import subprocess
from typing import Optional

from commitsize.gitdef import ChangeStat, CommitInfo, RenameMap
from commitsize.numutil import parse_count


# Separates the fields of each git log line
LOG_FIELD_SEP = '\x1f'

# One commit per line: hash, author date, subject
LOG_FORMAT = '%H%x1f%ad%x1f%s'

# Options that keep git diff output independent of the user's git configuration
DIFF_OPTIONS = ('--no-color', '--no-ext-diff', '-M')

# Parts of a change summary line, e.g. " 3 files changed, 150 insertions(+), 20 deletions(-)"
FILES_CHANGED_RE = re.compile(r'(\d+) files? changed')
INSERTIONS_RE = re.compile(r'(\d+) insertions?\(\+\)')


def parse_log(output: str) -> list[CommitInfo]:
    """Parse git log output in LOG_FORMAT."""
    commits = []
    for line in output.splitlines():
        parts = line.split(LOG_FIELD_SEP, 2)
        if not parts[0]:
            continue
        parts += [''] * (3 - len(parts))
        commits.append(CommitInfo(commit_hash=parts[0], date=parts[1], subject=parts[2]))
    return commits


def parse_stat_summary(output: str) -> ChangeStat:
    """Parse the last change summary line in git --stat or --shortstat output.

    Missing or unrecognizable summaries give zero counts.
    """
    for line in reversed(output.splitlines()):
        if m := FILES_CHANGED_RE.search(line):
            insertions = INSERTIONS_RE.search(line)
            return ChangeStat(files_changed=parse_count(m.group(1)),
                              insertions=parse_count(insertions.group(1) if insertions else 0))
    return ChangeStat()


def parse_renames(output: str) -> RenameMap:
    """Parse git diff --name-status -z output into a map of new path to old path.

    Only renames are kept; entries of other status are skipped.
    """
    renames = {}
    parts = output.split('\0')
    i = 0
    while i < len(parts):
        status = parts[i]
        if not status:
            i += 1
            continue
        if status[0] in 'RC':
            # Renames and copies are followed by two paths
            if i + 2 >= len(parts):
                logging.debug('Truncated rename entry in git output')
                break
            old_path, new_path = parts[i + 1], parts[i + 2]
            if status[0] == 'R' and old_path and new_path:
                renames[new_path] = old_path
            i += 3
        else:
            i += 2
    return renames


def parse_ls_tree_entry(entry: str) -> Optional[tuple[str, int]]:
    """Parse one git ls-tree --long entry: "<mode> <type> <object> <size>\\t<path>".

    The size of entries without one (like submodules, shown as "-") is zero.
    """
    meta, tab, path = entry.partition('\t')
    if not tab or not path:
        return None
    parts = meta.split()
    if len(parts) < 4:
        return None
    return path, parse_count(parts[3])


def split_diff(diff: bytes) -> tuple[list[bytes], list[bytes]]:
    """Split the diff of a single file into header lines and body lines.

    The body starts at the first hunk header; hunk headers themselves are left out.
    """
    header = []
    body = []
    in_body = False
    for line in diff.splitlines(keepends=True):
        if line.startswith(b'@@'):
            in_body = True
        elif in_body:
            body.append(line)
        else:
            header.append(line)
    return header, body


def is_binary_diff(diff: bytes) -> bool:
    """Return True if git reported the file as binary instead of showing its changes."""
    header, _ = split_diff(diff)
    return any(line.startswith(b'Binary files ') for line in header)


def diff_content_bytes(diff: bytes) -> int:
    """Return the number of bytes in the content lines of a diff, without the metadata lines."""
    _, body = split_diff(diff)
    return sum(len(line) for line in body)


def top_pathspec(path: str) -> str:
    """Return a pathspec matching exactly this path relative to the top of the repository."""
    return f':(top,literal){path}'


class GitRepo:
    """Runs read-only git queries in a working directory."""

    def __init__(self, path: str = '.', program: str = 'git', encoding: str = 'UTF-8'):
        self.path = path
        self.program = program
        self.encoding = encoding

    def execute(self, *args: str) -> Optional[subprocess.CompletedProcess]:
        "Run git with the given arguments, returning None on failure"
        commands = [self.program, *args]
        logging.debug('Running: %s', ' '.join(commands))
        try:
            proc = subprocess.run(commands, cwd=self.path, stdin=subprocess.DEVNULL,
                                  stdout=subprocess.PIPE, stderr=subprocess.PIPE, check=False)
        except OSError:
            logging.exception('Could not run %s', self.program)
            return None
        if proc.returncode != 0:
            logging.debug('git %s failed with status %d: %s', args[0] if args else '',
                          proc.returncode, proc.stderr.decode(self.encoding, errors='replace').strip())
            return None
        return proc

    def query_bytes(self, *args: str) -> bytes:
        "Return the raw output of a git command, or empty on failure"
        proc = self.execute(*args)
        return proc.stdout if proc else b''

    def query(self, *args: str, errors: str = 'replace') -> str:
        "Return the decoded output of a git command, or empty on failure"
        return self.query_bytes(*args).decode(self.encoding, errors=errors)

    def query_paths(self, *args: str) -> str:
        "Return git output holding paths that may be passed back to git"
        return self.query(*args, errors='surrogateescape')

    def is_repo(self) -> bool:
        return self.execute('rev-parse', '--git-dir') is not None

    def recent_commits(self, count: int) -> list[CommitInfo]:
        "Return up to count commits, most recent first"
        return parse_log(self.query('log', '-n', str(count), '--date=short',
                                    f'--format={LOG_FORMAT}'))

    def parent(self, commit: str) -> str:
        "Return the hash of the first parent of the commit, or empty if it has none"
        return self.query('rev-parse', '--verify', '--quiet', f'{commit}^').strip()

    def changed_paths(self, parent: str, commit: str) -> list[str]:
        "Return the paths changed between two commits; renamed files appear under their new name"
        output = self.query_paths('diff', *DIFF_OPTIONS, '--name-only', '-z', parent, commit)
        return [p for p in output.split('\0') if p]

    def renames(self, parent: str, commit: str) -> RenameMap:
        output = self.query_paths('diff', *DIFF_OPTIONS, '--name-status', '--diff-filter=R', '-z',
                                  parent, commit)
        return parse_renames(output)

    def shortstat(self, parent: str, commit: str) -> ChangeStat:
        "Return the change summary between two commits"
        return parse_stat_summary(self.query('diff', *DIFF_OPTIONS, '--shortstat', parent, commit))

    def commit_stat(self, commit: str) -> ChangeStat:
        "Return the change summary git shows for the commit itself"
        return parse_stat_summary(self.query('show', '--no-color', '--stat', '--format=', commit))

    def path_diff(self, parent: str, commit: str, path: str) -> bytes:
        "Return the diff of one added, copied, modified or type-changed path"
        return self.query_bytes('diff', *DIFF_OPTIONS, '--diff-filter=ACMT', parent, commit,
                                '--', top_pathspec(path))

    def blob_size(self, commit: str, path: str) -> int:
        "Return the size of a file in a commit, or 0 if it doesn't exist there"
        return parse_count(self.query('cat-file', '-s', f'{commit}:{path}'))

    def tree_sizes(self, commit: str) -> dict[str, int]:
        "Return the size of every file tracked in the commit"
        sizes = {}
        output = self.query_paths('ls-tree', '--full-tree', '-r', '-l', '-z', commit)
        for entry in output.split('\0'):
            if parsed := parse_ls_tree_entry(entry):
                path, size = parsed
                sizes[path] = size
        return sizes

    def tree_paths(self, commit: str) -> list[str]:
        "Return the paths of every file tracked in the commit"
        output = self.query_paths('ls-tree', '--full-tree', '-r', '--name-only', '-z', commit)
        return [p for p in output.split('\0') if p]
