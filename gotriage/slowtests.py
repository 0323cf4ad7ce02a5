"""Report on the slowest tests of a run."""

import io
import logging
import os

from gotriage.eventdef import TestEvent


# Maximum number of tests to show in each section of the report
MAX_REPORTED = 20


def rank_slow_tests(events: list[TestEvent]) -> list[TestEvent]:
    """Sort tests by decreasing duration.

    Tests of equal duration are kept in the order they finished.
    """
    return sorted(events, key=lambda te: te.elapsed, reverse=True)


def _write_section(f: io.StringIO, heading: str, events: list[TestEvent], max_entries: int):
    print(heading, file=f)
    for te in events[:max_entries]:
        print(f'{te.test} - {te.elapsed:.2f}s', file=f)
    if not events:
        print('<none>', file=f)


def gen_slow_tests_report(slow_passing: list[TestEvent], slow_failing: list[TestEvent],
                          max_entries: int = MAX_REPORTED) -> str:
    """Returns the slow tests report as text.

    The lists must already be sorted with rank_slow_tests().
    """
    f = io.StringIO()
    _write_section(f, 'Slow failing tests:', slow_failing, max_entries)
    print(file=f)
    _write_section(f, 'Slow passing tests:', slow_passing, max_entries)
    return f.getvalue()


def write_slow_tests_report(report: str, path: str):
    """Writes the slow tests report to a file, creating its directory if needed.

    Raises:
        OSError if the file couldn't be written
    """
    if dirname := os.path.dirname(path):
        os.makedirs(dirname, exist_ok=True)
    with open(path, 'w') as f:
        f.write(report)
    logging.info('Wrote slow tests report to %s', path)
