"""Estimate the storage volume introduced by a commit.

Two estimators are available. The accurate one looks at the diff of every changed file, so its
cost grows with the number of files in the commit. The fast one only reads the commit's change
summary and applies fixed per-file and per-line sizes. Which one is used depends only on the
number of changed files.
"""

import logging
from dataclasses import dataclass, field

from commitsize import config
from commitsize.gitdef import CommitInfo, CommitRecord
from commitsize.gitquery import GitRepo, diff_content_bytes, is_binary_diff
from commitsize.numutil import parse_count, safe_add


ESTIMATE_ACCURATE = 'accurate'
ESTIMATE_FAST = 'fast'


@dataclass
class SizeConstants:
    """Sizes assumed by the estimators."""

    accurate_max_files: int = 50
    bytes_per_line: int = 100
    bytes_per_file: int = 5120
    initial_commit_default_bytes: int = 10240
    metadata_change_bytes: int = 100
    rename_assumed_bytes: int = 50000

    @classmethod
    def from_config(cls) -> 'SizeConstants':
        return cls(**{name: parse_count(config.get(name), default)
                      for name, default in cls().__dict__.items()})


@dataclass
class Estimate:
    """Estimated size of a commit and notes on how it was obtained."""

    size_bytes: int = 0
    notes: list[str] = field(default_factory=list)


def select_method(file_count: int, threshold: int = 50) -> str:
    """Choose the estimator for a commit changing file_count files."""
    return ESTIMATE_ACCURATE if file_count <= threshold else ESTIMATE_FAST


def rename_cost(old_path: str, new_path: str, metadata_bytes: int = 100) -> int:
    """Cost of renaming a file without changing its contents.

    Only the path length difference and the metadata change are charged, never the content.
    """
    return abs(len(new_path) - len(old_path)) + metadata_bytes


class SizeEstimator:
    """Estimates commit sizes using queries on a git repository."""

    def __init__(self, repo: GitRepo, constants: SizeConstants):
        self.repo = repo
        self.sizes = constants

    def parent_of(self, commit: str) -> str:
        """Return the commit's parent hash, or empty if this is the initial commit.

        A missing parent is the normal state of an initial commit, not an error.
        """
        return self.repo.parent(commit)

    def count_files(self, commit: str, parent: str) -> int:
        """Count the files changed by a commit.

        Renamed files don't count. For an initial commit, every tracked file counts.
        """
        if parent:
            changed = len(self.repo.changed_paths(parent, commit))
            renamed = len(self.repo.renames(parent, commit))
            return max(changed - renamed, 0)

        files = self.repo.commit_stat(commit).files_changed
        if files > 0:
            return files
        return len(self.repo.tree_paths(commit))

    def estimate(self, info: CommitInfo, parent: str) -> CommitRecord:
        """Estimate the size of one commit, choosing the estimator by its file count."""
        is_initial = not parent
        file_count = self.count_files(info.commit_hash, parent)
        method = select_method(file_count, self.sizes.accurate_max_files)
        logging.debug('Commit %s: %d files, %s estimate', info.commit_hash, file_count, method)

        notes = []
        if method == ESTIMATE_ACCURATE:
            if is_initial:
                result = self.accurate_initial(info.commit_hash)
            else:
                result = self.accurate_incremental(parent, info.commit_hash)
        else:
            notes.append(f'Many changed files ({file_count}), using the fast estimate')
            if is_initial:
                result = self.fast_initial(info.commit_hash)
            else:
                result = self.fast_incremental(parent, info.commit_hash)

        return CommitRecord(
            commit_hash=info.commit_hash,
            subject=info.subject,
            date=info.date,
            is_initial=is_initial,
            file_count=file_count,
            size_bytes=parse_count(result.size_bytes),
            method=method,
            notes=notes + result.notes)

    def changed_path_size(self, parent: str, commit: str, path: str) -> int:
        """Size of the changes made to one non-renamed path."""
        diff = self.repo.path_diff(parent, commit, path)
        if not diff:
            # Deletions and mode changes have no content diff
            return self.sizes.metadata_change_bytes
        if is_binary_diff(diff):
            delta = abs(self.repo.blob_size(commit, path) - self.repo.blob_size(parent, path))
            return max(delta, self.sizes.metadata_change_bytes)
        return diff_content_bytes(diff)

    def accurate_incremental(self, parent: str, commit: str) -> Estimate:
        renames = self.repo.renames(parent, commit)
        changed = self.repo.changed_paths(parent, commit)

        size = 0
        for path in changed:
            if (old_path := renames.get(path)) is not None:
                cost = rename_cost(old_path, path, self.sizes.metadata_change_bytes)
                logging.debug('Renamed %s -> %s costs %d bytes', old_path, path, cost)
            else:
                cost = self.changed_path_size(parent, commit, path)
            size = safe_add(size, cost)

        if size == 0 and changed:
            size = len(changed) * self.sizes.metadata_change_bytes
        return Estimate(size)

    def initial_fallback(self, commit: str) -> Estimate:
        """Estimate an initial commit from its change summary."""
        stat = self.repo.commit_stat(commit)
        if stat.insertions > 0:
            size = stat.insertions * self.sizes.bytes_per_line
            return Estimate(size, [f'Estimated from inserted lines: {stat.insertions} lines * '
                                   f'{self.sizes.bytes_per_line} bytes/line = {size} bytes'])
        if stat.files_changed > 0:
            size = stat.files_changed * self.sizes.bytes_per_file
            return Estimate(size, [f'Estimated from file count: {stat.files_changed} files * '
                                   f'{self.sizes.bytes_per_file} bytes/file = {size} bytes'])
        size = self.sizes.initial_commit_default_bytes
        return Estimate(size, [f'Using the default estimate: {size} bytes'])

    def accurate_initial(self, commit: str) -> Estimate:
        size = safe_add(*self.repo.tree_sizes(commit).values())
        if size > 0:
            return Estimate(size)
        return self.initial_fallback(commit)

    def fast_incremental(self, parent: str, commit: str) -> Estimate:
        stat = self.repo.shortstat(parent, commit)
        size = 0
        if stat.files_changed > 0:
            size = (stat.files_changed * self.sizes.bytes_per_file
                    + stat.insertions * self.sizes.bytes_per_line)

        notes = []
        if renamed := len(self.repo.renames(parent, commit)):
            # The summary is assumed to have counted each renamed file at full size
            adjustment = renamed * (self.sizes.rename_assumed_bytes
                                    - self.sizes.metadata_change_bytes)
            size = max(size - adjustment, 0)
            notes.append(f'Found {renamed} renamed files in the fast estimate, adjusted the estimate')
        return Estimate(size, notes)

    def fast_initial(self, commit: str) -> Estimate:
        stat = self.repo.commit_stat(commit)
        notes = ['Initial commit, estimating from its change summary']
        if stat.files_changed > 0:
            size = (stat.files_changed * self.sizes.bytes_per_file
                    + stat.insertions * self.sizes.bytes_per_line)
        else:
            size = self.sizes.initial_commit_default_bytes
        return Estimate(size, notes)
