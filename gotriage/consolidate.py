"""Fold failed subtests into their parent tests.

This way, only one issue is filed per top-level test no matter how many of its subtests failed.
"""

import logging

from gotriage.eventdef import TestEvent, is_subtest, parent_test


def consolidate_failures(failures: dict[str, list[TestEvent]]) -> dict[str, list[TestEvent]]:
    """Returns a new failure mapping holding only top-level tests.

    A parent test's own output comes first, followed by that of each of its failed subtests in
    the order they failed. The given mapping is not modified.
    """
    consolidated: dict[str, list[TestEvent]] = {}
    for test, events in failures.items():
        if not is_subtest(test):
            logging.debug('Failed parent test %r', test)
            consolidated[test] = list(events)

    for test, events in failures.items():
        if is_subtest(test):
            parent = parent_test(test)
            logging.debug('Consolidating failed subtest %r into parent test %r', test, parent)
            consolidated.setdefault(parent, []).extend(events)

    return consolidated
