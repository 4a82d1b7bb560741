"""Utility functions used in multiple tests."""

import io
from typing import Optional
from unittest import mock
from unittest.mock import patch

from rich.console import Console

from commitsize import config
from commitsize.gitdef import ChangeStat, CommitInfo, RenameMap
from commitsize.report import Reporter, ReportOptions


def patch_config_get(key: str, value):
    """Mock config.get() to return a specific value for a given key.

    All other keys return the originally-configured value.
    """
    def side_effect(k: str):
        return value if k == key else orig_get(k)

    # Use the original (or the previously-patched) get() for unmatched keys
    orig_get = config.get
    return patch('commitsize.config.get', side_effect=side_effect)


def text_console() -> Console:
    """Return a console writing uncolored text into a buffer."""
    return Console(file=io.StringIO(), color_system=None, highlight=False, soft_wrap=True,
                   emoji=False, width=200)


def make_reporter(options: Optional[ReportOptions] = None) -> Reporter:
    """Return a reporter writing into buffers, with a mock key press wait."""
    return Reporter(options or ReportOptions(color='never'),
                    console=text_console(), err_console=text_console(), wait=mock.Mock())


def output_of(console: Console) -> str:
    return console.file.getvalue()


class FakeRepo:
    """Stands in for GitRepo, answering queries from canned data.

    Anything not given is answered the way a failed git query is: with empty output.
    """

    def __init__(self,
                 commits: Optional[list[CommitInfo]] = None,
                 parents: Optional[dict[str, str]] = None,
                 changed: Optional[dict[tuple[str, str], list[str]]] = None,
                 renames: Optional[dict[tuple[str, str], RenameMap]] = None,
                 shortstats: Optional[dict[tuple[str, str], ChangeStat]] = None,
                 commit_stats: Optional[dict[str, ChangeStat]] = None,
                 diffs: Optional[dict[str, bytes]] = None,
                 blob_sizes: Optional[dict[tuple[str, str], int]] = None,
                 trees: Optional[dict[str, dict[str, int]]] = None,
                 repo: bool = True):
        self.commits = commits or []
        self.parents = parents or {}
        self.changed = changed or {}
        self.renamed = renames or {}
        self.shortstats = shortstats or {}
        self.commit_stats = commit_stats or {}
        self.diffs = diffs or {}
        self.blob_sizes = blob_sizes or {}
        self.trees = trees or {}
        self.repo = repo

    def is_repo(self) -> bool:
        return self.repo

    def recent_commits(self, count: int) -> list[CommitInfo]:
        return self.commits[:count]

    def parent(self, commit: str) -> str:
        return self.parents.get(commit, '')

    def changed_paths(self, parent: str, commit: str) -> list[str]:
        return self.changed.get((parent, commit), [])

    def renames(self, parent: str, commit: str) -> RenameMap:
        return self.renamed.get((parent, commit), {})

    def shortstat(self, parent: str, commit: str) -> ChangeStat:
        return self.shortstats.get((parent, commit), ChangeStat())

    def commit_stat(self, commit: str) -> ChangeStat:
        return self.commit_stats.get(commit, ChangeStat())

    def path_diff(self, parent: str, commit: str, path: str) -> bytes:
        return self.diffs.get(path, b'')

    def blob_size(self, commit: str, path: str) -> int:
        return self.blob_sizes.get((commit, path), 0)

    def tree_sizes(self, commit: str) -> dict[str, int]:
        return self.trees.get(commit, {})

    def tree_paths(self, commit: str) -> list[str]:
        return list(self.trees.get(commit, {}))
