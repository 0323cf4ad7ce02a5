"""Decide whether a single test is to blame for a timed out run.

The timed out test is blamed only when no other test ran longer than it did.
"""

import logging

from gotriage.eventdef import TestEvent


def find_timeout_culprit(timed_out_test: str, slow_failing: list[TestEvent],
                         slow_passing: list[TestEvent]) -> bool:
    """Returns True if the timed out test is the one to blame for the timeout.

    The lists must already be sorted with slowtests.rank_slow_tests(). slow_failing includes the
    timed out test.
    """
    if not slow_failing:
        logging.warning('Timed out test %s is missing from slow tests', timed_out_test)
        return False
    slowest = slow_failing[0]
    if slow_passing and slow_passing[0].elapsed > slowest.elapsed:
        slowest = slow_passing[0]
    if slowest.test == timed_out_test:
        logging.info('Timeout culprit found: %s', timed_out_test)
        return True
    logging.info('Timeout culprit not found; slowest test was %s', slowest.test)
    return False
