"""Aggregate commit size estimates and show them on the console."""

import os
import sys
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from rich.console import Console
from rich.markup import escape

from commitsize.gitdef import CommitInfo, CommitRecord, SHORT_HASH_LEN
from commitsize.numutil import format_size, safe_add


COLOR_MODES = ('auto', 'always', 'never')

# Marks the initial commit wherever a hash is shown
INITIAL_MARKER = '*'

# Width of the hash column, enough for a short hash, its marker and some space
HASH_COLUMN_WIDTH = SHORT_HASH_LEN + 4

RULE = '-' * 80
DOUBLE_RULE = '=' * 80


@dataclass
class ReportOptions:
    """How the report is shown."""

    color: str = 'auto'     # one of COLOR_MODES
    pause: bool = False     # wait for a key press before exiting
    subject_width: int = 8  # longer subjects are truncated in the table


@dataclass
class SizeSummary:
    """Aggregate statistics over all examined commits."""

    count: int
    total_bytes: int
    total_files: int
    average_bytes: int
    average_file_bytes: Optional[int]   # None when no files were changed at all
    largest_index: int
    smallest_index: int


def summarize(records: Sequence[CommitRecord]) -> SizeSummary:
    """Calculate aggregate statistics.

    The first of several equally large (or small) commits is reported as largest (or smallest).
    """
    if not records:
        raise ValueError('No commits to summarize')
    total_bytes = safe_add(*(r.size_bytes for r in records))
    total_files = safe_add(*(r.file_count for r in records))
    sizes = [r.size_bytes for r in records]
    return SizeSummary(
        count=len(records),
        total_bytes=total_bytes,
        total_files=total_files,
        average_bytes=total_bytes // len(records),
        average_file_bytes=total_bytes // total_files if total_files else None,
        largest_index=max(range(len(sizes)), key=sizes.__getitem__),
        smallest_index=min(range(len(sizes)), key=sizes.__getitem__))


def truncate_subject(subject: str, width: int = 8) -> str:
    if len(subject) > width:
        return subject[:width] + '...'
    return subject


def make_console(color: str, stderr: bool = False) -> Console:
    """Create a console using the given color mode."""
    if color == 'never':
        return Console(color_system=None, highlight=False, soft_wrap=True, emoji=False,
                       stderr=stderr)
    if color == 'always':
        return Console(force_terminal=True, highlight=False, soft_wrap=True, emoji=False,
                       stderr=stderr)
    return Console(highlight=False, soft_wrap=True, emoji=False, stderr=stderr)


def wait_for_key():
    """Wait for a single key press on the terminal.

    Nothing is waited for if stdin isn't a terminal.
    """
    if not sys.stdin.isatty():
        return
    if os.name == 'nt':
        import msvcrt
        msvcrt.getwch()
        return

    import termios
    import tty
    fd = sys.stdin.fileno()
    saved = termios.tcgetattr(fd)
    try:
        tty.setcbreak(fd)
        sys.stdin.read(1)
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, saved)


class Reporter:
    """Shows analysis progress, the summary table and statistics."""

    def __init__(self, options: ReportOptions,
                 console: Optional[Console] = None,
                 err_console: Optional[Console] = None,
                 wait: Callable[[], None] = wait_for_key):
        self.options = options
        self.console = console or make_console(options.color)
        self.err_console = err_console or make_console(options.color, stderr=True)
        self.wait = wait

    def hash_markup(self, short_hash: str, is_initial: bool) -> str:
        markup = f'[magenta]{short_hash}[/magenta]'
        if is_initial:
            markup += f'[dark_orange]{INITIAL_MARKER}[/dark_orange]'
        return markup

    def error(self, message: str):
        self.err_console.print(f'[red]Error: {escape(message)}[/red]')

    def pause(self):
        if self.options.pause:
            self.console.print()
            self.console.print('[yellow]Press any key to exit...[/yellow]')
            self.wait()

    def start(self, count: int):
        self.console.print(f'[cyan]Checking the size of the last[/cyan] {count} '
                           '[cyan]commits...[/cyan]')
        self.console.print()
        self.console.print('[cyan]Commit analysis:[/cyan]')
        self.console.print(RULE)

    def commit_started(self, index: int, total: int, info: CommitInfo, is_initial: bool):
        """Show which commit is being analyzed; index starts at 0."""
        short_hash = info.commit_hash[:SHORT_HASH_LEN]
        self.console.print(f'Analyzing commit [yellow]{index + 1}[/yellow]/{total}: '
                           f'{self.hash_markup(short_hash, is_initial)} - {escape(info.subject)}')
        if is_initial:
            self.console.print(f'  [dark_orange]{INITIAL_MARKER}This is the initial commit'
                               '[/dark_orange]')

    def commit_finished(self, record: CommitRecord):
        for note in record.notes:
            self.console.print(f'  [blue]{escape(note)}[/blue]')
        self.console.print(f'  [cyan]Files changed:[/cyan] {record.file_count}[cyan], size: '
                           f'[green]{record.formatted_size}[/green][/cyan] '
                           f'({record.size_bytes} bytes)')
        self.console.print()

    def analysis_finished(self):
        self.console.print(RULE)
        self.console.print()

    def table(self, records: Sequence[CommitRecord]):
        """Show a fixed-width table with one row per commit."""
        self.console.print('[cyan]Commit size summary:[/cyan]')
        self.console.print(DOUBLE_RULE)
        self.console.print(f'[cyan]{"#":<4} {"Date":<12} {"Commit":<{HASH_COLUMN_WIDTH}} '
                           f'{"Files":<7} {"Size":<16} Subject[/cyan]')
        self.console.print(RULE)
        for i, record in enumerate(records):
            # Pad outside the markup so the marker doesn't disturb alignment
            marker = INITIAL_MARKER if record.is_initial else ''
            padding = ' ' * (HASH_COLUMN_WIDTH - len(record.short_hash) - len(marker))
            subject = truncate_subject(record.subject, self.options.subject_width)
            self.console.print(
                f'[yellow]{i + 1:<4}[/yellow] [cyan]{record.date:<12}[/cyan] '
                f'{self.hash_markup(record.short_hash, record.is_initial)}{padding} '
                f'{record.file_count:<7} [green]{record.formatted_size:<16}[/green] '
                f'{escape(subject)}')
        self.console.print(RULE)

    def commit_details(self, title: str, index: int, record: CommitRecord):
        self.console.print(f'[cyan]{title}:[/cyan] [yellow]{index + 1}[/yellow]. '
                           f'{self.hash_markup(record.short_hash, record.is_initial)} '
                           f'[cyan]({record.date})[/cyan]')
        self.console.print(f'[cyan]Files changed:[/cyan] {record.file_count}[cyan], size: '
                           f'[green]{record.formatted_size}[/green][/cyan]')
        self.console.print(f'[cyan]Subject:[/cyan] {escape(record.subject)}')

    def summary(self, records: Sequence[CommitRecord], stats: SizeSummary):
        self.console.print()
        self.console.print(f'[cyan]Total size of the last[/cyan] {stats.count} [cyan]commits: '
                           f'[green]{format_size(stats.total_bytes)}[/green][/cyan] '
                           f'({stats.total_bytes} bytes)')
        self.console.print(f'[cyan]Average size per commit: '
                           f'[green]{format_size(stats.average_bytes)}[/green][/cyan]')
        if stats.average_file_bytes is not None:
            self.console.print(f'[cyan]Average size per changed file: '
                               f'[green]{format_size(stats.average_file_bytes)}[/green][/cyan]')
            self.console.print()

        self.commit_details('Largest commit', stats.largest_index,
                            records[stats.largest_index])
        self.console.print()

        # With only one commit it is both the largest and smallest, so it's only shown once
        if stats.count > 1:
            smallest = records[stats.smallest_index]
            self.commit_details('Smallest commit', stats.smallest_index, smallest)
            if smallest.is_initial:
                self.console.print('[cyan]Note:[/cyan] [green]this is the initial commit[/green]')
        self.console.print()
