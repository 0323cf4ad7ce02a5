"""Work out how long a timed out test was running.

The Elapsed field of the fail event of a timed out test is unreliable (see
https://github.com/golang/go/issues/27568) and under stress the fail event is missing entirely,
so the duration is derived from time stamps or from the timeout message instead.
"""

import datetime
import logging
import re
from typing import Optional


TIMEOUT_MARKER = 'panic: test timed out after'
TIMEOUT_RE = re.compile(re.escape(TIMEOUT_MARKER) + r' (\d*(?:\.\d*)?)(.)')

# Seconds per time unit found in a timeout message
UNIT_SECS = {
    's': 1,
    'm': 60,
}

# Elapsed time when it can't be determined
UNKNOWN_ELAPSED = -1.0


def parse_timeout_secs(output: str) -> Optional[float]:
    """Returns the test binary timeout in seconds found in the output.

    Returns None if it can't be parsed.
    """
    r = TIMEOUT_RE.search(output)
    if not r:
        return None
    try:
        dur = float(r.group(1))
    except ValueError:
        return None
    unit = UNIT_SECS.get(r.group(2))
    if unit is None:
        logging.warning('Unexpected time unit in: %s', output.rstrip())
        return None
    return dur * unit


def reconcile_timeout_elapsed(output: str,
                              trust_timestamps: bool,
                              cur_test_start: Optional[datetime.datetime],
                              event_time: Optional[datetime.datetime],
                              elapsed_total_sec: float) -> float:
    """Returns the number of seconds that a timed out test ran.

    Args:
        output: the output line holding the timeout message
        trust_timestamps: True if the event time stamps are meaningful
        cur_test_start: time of the timed out test's run event
        event_time: time of the timeout output event
        elapsed_total_sec: sum of the durations of all top-level tests so far

    Returns:
        number of seconds, or UNKNOWN_ELAPSED if it can't be determined
    """
    if trust_timestamps:
        if cur_test_start is None or event_time is None:
            logging.warning('Missing time stamps on timed out test; duration unknown')
            return UNKNOWN_ELAPSED
        return (event_time - cur_test_start).total_seconds()

    # Untrusted time stamps: the binary timeout minus the time used by the tests seen so far.
    # Sibling subtests and tests rounded down to 0s are unaccounted for, so this is approximate.
    timeout = parse_timeout_secs(output)
    if timeout is None:
        logging.warning('Failed to parse timeout message: %s', output.rstrip())
        return UNKNOWN_ELAPSED
    return timeout - elapsed_total_sec
