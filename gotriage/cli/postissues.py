"""File issues for failed tests found in go test -json output.

The output can come from either 'go test -json' or './pkg.test -test.v | go tool test2json -t'.
If there are no failed tests but the package failed anyway, it's assumed that there was a build
error and an issue is filed holding the entire package output.
"""

import argparse
import contextlib
import logging
import sys
from typing import Optional

from gotriage import argparsing
from gotriage import config
from gotriage import emit
from gotriage import eventparse
from gotriage import githubapi
from gotriage import log
from gotriage import slowtests
from gotriage import triage
from gotriage.author import GitAuthorLookup
from gotriage.correlate import InconsistentStreamError
from gotriage.eventfile import open_event_file


def parse_args(args=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description='File GitHub issues for tests that failed in go test -json output')
    argparsing.arguments_logging(parser)
    argparsing.arguments_config(parser)
    argparsing.arguments_events(parser)
    parser.add_argument(
        '--repo',
        help='GitHub repository in which to file issues, as owner/repo (default: github_repo '
             'config variable)')
    parser.add_argument(
        '--authfile',
        type=argparsing.readable_file,
        help='File holding the GitHub authentication token')
    parser.add_argument(
        '--report-path',
        help='Path to which to write the slow tests report (default: slow_tests_report_path '
             'config variable)')
    parser.add_argument(
        '--no-authors',
        action='store_true',
        help="Don't look up test authors with git")
    args = parser.parse_args(args=args)
    # Resolved after parsing, once any --set overrides are in place
    if not args.repo:
        args.repo = config.expand('github_repo')
    if not args.report_path:
        args.report_path = config.expand('slow_tests_report_path')
    return args


def get_package_name(args: argparse.Namespace) -> Optional[str]:
    """Returns the package name from the command-line or environment."""
    return args.package or config.lookup(config.get('package_env'))


def make_poster(args: argparse.Namespace) -> Optional[emit.Poster]:
    """Returns the function that files issues, or None on error."""
    if args.dry_run:
        return githubapi.LogPoster()
    try:
        owner, repo = args.repo.split('/')
    except ValueError:
        logging.error('Invalid GitHub repository %r; must be owner/repo', args.repo)
        return None
    api = githubapi.GithubApi(owner, repo, githubapi.read_token(args.authfile))
    return githubapi.GithubIssuePoster(api, config.get('github_labels'))


def post_issues(args: argparse.Namespace) -> int:
    package_name = get_package_name(args)
    if not package_name:
        logging.error('Package name environment variable %s is not set',
                      config.get('package_env'))
        return 1

    poster = make_poster(args)
    if not poster:
        return 1

    if args.no_authors:
        author_lookup = emit.no_author
    else:
        author_lookup = GitAuthorLookup(config.expand('source_dir'),
                                        config.expand('module_path'),
                                        config.get('git_encoding'))

    try:
        with open_event_file(args.file) if args.file else contextlib.nullcontext(sys.stdin) as f:
            result = triage.triage(
                eventparse.parse_events(f), package_name,
                author_lookup=author_lookup,
                slow_threshold_secs=config.get('slow_test_threshold_secs'),
                max_slow=config.get('slow_test_report_max'),
                package_prefix=config.expand('package_prefix'),
                qualifier=config.expand('title_qualifier'),
                timeout_author=config.expand('timeout_author'))
    except (eventparse.DecodeError, InconsistentStreamError) as e:
        logging.error('%s', e)
        return 1
    except OSError as e:
        logging.error('Failed to read test events: %s', e)
        return 1

    try:
        slowtests.write_slow_tests_report(result.slow_report, args.report_path)
    except OSError as e:
        logging.error('Failed to create slow tests report: %s', e)

    try:
        emit.post_reports(result.reports, poster)
    except emit.PostError as e:
        logging.error('%s', e)
        return 1
    return 0


def main():
    args = parse_args()
    log.setup(args)
    sys.exit(post_issues(args))


if __name__ == '__main__':
    main()
