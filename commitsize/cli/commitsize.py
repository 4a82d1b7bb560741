"""Show the approximate size of the changes made in the most recent git commits."""

import argparse
import logging
import sys
import textwrap

from commitsize import argparsing
from commitsize import config
from commitsize import log
from commitsize.estimate import SizeConstants, SizeEstimator
from commitsize.gitdef import CommitRecord
from commitsize.gitquery import GitRepo
from commitsize.report import COLOR_MODES, Reporter, ReportOptions, summarize


EXAMPLES = textwrap.dedent('''\
    examples:
      %(prog)s          check the last 5 commits
      %(prog)s 10       check the last 10 commits
      %(prog)s 1        check only the last commit
      %(prog)s -h       show this help
    ''')


def parse_args(args=None) -> argparse.Namespace:
    parser = argparsing.UsageErrorParser(
        description='Show the approximate size of the changes made in recent git commits',
        epilog=EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter)
    argparsing.arguments_logging(parser)
    argparsing.arguments_config(parser)
    parser.add_argument(
        '--pause',
        action=argparse.BooleanOptionalAction,
        default=None,
        help='Wait for a key press before exiting')
    parser.add_argument(
        '--color',
        choices=COLOR_MODES,
        default=None,
        help='When to color the output')
    parser.add_argument(
        'count',
        nargs='?',
        type=argparsing.PositiveInt(),
        default=None,
        help=f'Number of recent commits to check (default: {config.get("default_commits")})')
    return parser.parse_args(args=args)


def report_options(args: argparse.Namespace) -> ReportOptions:
    """Combine command-line options with configuration values."""
    return ReportOptions(
        color=args.color if args.color else config.get('color'),
        pause=args.pause if args.pause is not None else bool(config.get('pause_after_complete')),
        subject_width=int(config.get('subject_width')))


def report_sizes(count: int, repo: GitRepo, estimator: SizeEstimator, reporter: Reporter) -> int:
    """Estimate and report the sizes of the last count commits.

    Returns the program exit code.
    """
    if not repo.is_repo():
        reporter.error('The current directory is not in a git repository')
        reporter.pause()
        return 1

    commits = repo.recent_commits(count)[:count]
    if not commits:
        reporter.error('No commits found')
        reporter.pause()
        return 1
    logging.info('Checking %d commits', len(commits))

    reporter.start(len(commits))
    records: list[CommitRecord] = []
    for i, info in enumerate(commits):
        parent = estimator.parent_of(info.commit_hash)
        reporter.commit_started(i, len(commits), info, not parent)
        record = estimator.estimate(info, parent)
        reporter.commit_finished(record)
        records.append(record)
    reporter.analysis_finished()

    reporter.table(records)
    reporter.summary(records, summarize(records))
    reporter.pause()
    return 0


def main():
    args = parse_args()
    log.setup(args)

    count = args.count if args.count else int(config.get('default_commits'))
    repo = GitRepo(program=config.get('git_program'),
                   encoding=config.get('git_comment_encoding'))
    estimator = SizeEstimator(repo, SizeConstants.from_config())
    reporter = Reporter(report_options(args))
    sys.exit(report_sizes(count, repo, estimator, reporter))


if __name__ == '__main__':
    main()
