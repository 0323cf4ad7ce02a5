"""Run all the analysis passes over a test event stream."""

import logging
from dataclasses import dataclass
from typing import Iterable

from gotriage import correlate
from gotriage import emit
from gotriage import slowtests
from gotriage.eventdef import TestEvent, TestVerdict
from gotriage.reportdef import FailureReport
from gotriage.runstate import SHORT_TEST_FILTER_SECS


@dataclass
class TriageResult:
    """Everything learned from a single test event stream."""

    verdicts: list[TestVerdict]     # in the order the tests finished
    slow_failing: list[TestEvent]   # slowest first
    slow_passing: list[TestEvent]   # slowest first
    slow_report: str
    reports: list[FailureReport]    # in the order to file them


def triage(events: Iterable[TestEvent],
           package_name: str,
           author_lookup: emit.AuthorLookup = emit.no_author,
           slow_threshold_secs: float = SHORT_TEST_FILTER_SECS,
           max_slow: int = slowtests.MAX_REPORTED,
           package_prefix: str = '',
           qualifier: str = 'under stress',
           timeout_author: str = '') -> TriageResult:
    """Correlate the events and produce verdicts, the slow tests report and failure reports.

    No partial results are returned if the stream is bad.

    Raises:
        DecodeError if the stream couldn't be decoded
        InconsistentStreamError if the stream contradicts itself
    """
    state = correlate.correlate(events, slow_threshold_secs)
    slow_failing = slowtests.rank_slow_tests(state.slow_failing)
    slow_passing = slowtests.rank_slow_tests(state.slow_passing)
    slow_report = slowtests.gen_slow_tests_report(slow_passing, slow_failing, max_slow)
    reports = emit.build_reports(
        state, package_name, slow_failing, slow_passing, slow_report,
        author_lookup=author_lookup, package_prefix=package_prefix, qualifier=qualifier,
        timeout_author=timeout_author)
    logging.info('%d tests, %d reports to file', len(state.verdicts), len(reports))
    return TriageResult(
        verdicts=list(state.verdicts.values()),
        slow_failing=slow_failing,
        slow_passing=slow_passing,
        slow_report=slow_report,
        reports=reports)
