"""Utility functions used in multiple tests."""

import datetime
import os
from typing import Optional, TextIO

from gotriage.eventdef import Action, TestEvent


# Directory holding test data files
DATADIR = 'data'

# Time of the start of synthetic test runs
START_TIME = datetime.datetime(2018, 9, 7, 14, 0, 0, tzinfo=datetime.timezone.utc)


def data_file(fn: str) -> str:
    """Return the path to a given test data file."""
    return os.path.join(os.path.dirname(__file__), DATADIR, fn)


def open_data(fn: str) -> TextIO:
    """Return an open file object for the given test data file."""
    return open(data_file(fn))


def ev(action: Action, test: str = '', output: str = '', elapsed: float = 0.0,
       secs: Optional[float] = None) -> TestEvent:
    """Return a test event, optionally at secs seconds after START_TIME."""
    time = START_TIME + datetime.timedelta(seconds=secs) if secs is not None else None
    return TestEvent(action=action, test=test, output=output, time=time, elapsed=elapsed)

