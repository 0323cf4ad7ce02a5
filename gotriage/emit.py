"""Turn a correlated test run into failure reports and post them."""

import logging
from typing import Callable, Iterable

from gotriage.author import AuthorLookupError
from gotriage.consolidate import consolidate_failures
from gotriage.culprit import find_timeout_culprit
from gotriage.eventdef import TestEvent
from gotriage.reportdef import FailureReport, UNKNOWN_TEST
from gotriage.runstate import RunState


AuthorLookup = Callable[[str, str], str]
Poster = Callable[[FailureReport], object]


class PostError(RuntimeError):
    """A report could not be posted."""


def no_author(package_name: str, test_name: str) -> str:
    """Author lookup for when attribution isn't wanted."""
    return ''


def _author_hint(author_lookup: AuthorLookup, package_name: str, test_name: str) -> str:
    try:
        return author_lookup(package_name, test_name)
    except AuthorLookupError as e:
        logging.warning('Unable to determine test author email: %s', e)
        return ''


def build_reports(state: RunState,
                  package_name: str,
                  slow_failing: list[TestEvent],
                  slow_passing: list[TestEvent],
                  slow_report: str,
                  author_lookup: AuthorLookup = no_author,
                  package_prefix: str = '',
                  qualifier: str = 'under stress',
                  timeout_author: str = '') -> list[FailureReport]:
    """Returns the reports to be filed for a test run, in the order to file them.

    Args:
        state: state of a completely correlated stream
        package_name: name of the package under test
        slow_failing: failed tests as sorted by slowtests.rank_slow_tests()
        slow_passing: passed tests as sorted by slowtests.rank_slow_tests()
        slow_report: text of the slow tests report
        author_lookup: function returning the author of a test in a package
        package_prefix: removed from the package name in titles
        qualifier: describes the kind of run in titles
        timeout_author: author hint for a timeout that can't be blamed on a single test
    """
    short_name = package_name
    if package_prefix and short_name.startswith(package_prefix):
        short_name = short_name[len(package_prefix):]
    suffix = f' {qualifier}' if qualifier else ''
    reports = []

    if state.package_failed() and not state.failures and not state.timed_out:
        # A failed package without failed tests most likely didn't build
        reports.append(FailureReport(
            title=f'{short_name}: package failed{suffix}',
            package_name=package_name,
            test_name=UNKNOWN_TEST,
            message=''.join(state.package_output),
            author_hint=''))
    else:
        failures = consolidate_failures(state.failures)
        # Sorted for a deterministic order
        for test in sorted(failures):
            reports.append(FailureReport(
                title=f'{short_name}: {test} failed{suffix}',
                package_name=package_name,
                test_name=test,
                message=''.join(te.output for te in failures[test]),
                author_hint=_author_hint(author_lookup, package_name, test)))

    if state.timed_out:
        timed_out_test = state.timed_out_test_name
        if find_timeout_culprit(timed_out_test, slow_failing, slow_passing):
            reports.append(FailureReport(
                title=f'{short_name}: {timed_out_test} timed out{suffix}',
                package_name=package_name,
                test_name=timed_out_test,
                message=slow_report,
                author_hint=_author_hint(author_lookup, package_name, timed_out_test)))
        else:
            reports.append(FailureReport(
                title=f'{short_name}: package timed out{suffix}',
                package_name=package_name,
                test_name=UNKNOWN_TEST,
                message=slow_report,
                author_hint=timeout_author))

    return reports


def post_reports(reports: Iterable[FailureReport], poster: Poster):
    """Post each report in turn.

    Posting stops at the first failure, so any later reports are never posted.

    Raises:
        PostError if a report couldn't be posted
    """
    reports = list(reports)
    for i, report in enumerate(reports):
        logging.info('Filing issue with title: %s', report.title)
        try:
            poster(report)
        except Exception as e:
            unposted = len(reports) - i - 1
            if unposted:
                logging.error('%d more reports will not be posted', unposted)
            raise PostError(f'Failed to post issue "{report.title}": {e}') from e
