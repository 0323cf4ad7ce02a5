"""Type definitions of test events and verdicts.

The event fields are described in the test2json documentation:
https://pkg.go.dev/cmd/test2json
"""

import datetime
import enum
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional


# Separates a parent test name from its subtest name
SUBTEST_SEP = '/'


class Action(str, enum.Enum):
    """All event actions that test2json can emit."""

    RUN = 'run'                    # test has started running
    PAUSE = 'pause'                # test has been paused
    CONT = 'cont'                  # test has continued running
    PASS = 'pass'                  # test passed
    BENCH = 'bench'                # benchmark printed log output but did not fail
    FAIL = 'fail'                  # test or benchmark failed
    OUTPUT = 'output'              # test printed output
    SKIP = 'skip'                  # test was skipped or the package contained no tests
    START = 'start'                # test binary is about to be executed
    BUILD_OUTPUT = 'build-output'  # toolchain printed output
    BUILD_FAIL = 'build-fail'      # build failed


@dataclass(frozen=True)
class TestEvent:
    """A single event in a test2json stream."""
    __test__ = False

    action: Action
    test: str = ''                             # empty for package-level events
    output: str = ''                           # only meaningful for Action.OUTPUT
    time: Optional[datetime.datetime] = None   # None if not in the input
    elapsed: float = 0.0                       # seconds; only set on terminal events
    package: str = ''


# These are ordered roughly by increasing severity
class TestResult(IntEnum):
    """Enumeration of all possible verdicts of a test."""
    __test__ = False

    UNKNOWN = 0     # no terminal event was seen for the test
    PASS = 1        # test succeeded
    FAIL = 2        # test failed
    SKIP = 3        # test was skipped
    TIMEOUT = 4     # test was running when the test binary timed out
    LAST = TIMEOUT


@dataclass
class TestVerdict:
    """Final verdict on a single test."""
    __test__ = False

    name: str           # test name
    result: TestResult  # test result
    elapsed: float      # test duration in seconds


def is_subtest(name: str) -> bool:
    return SUBTEST_SEP in name


def parent_test(name: str) -> str:
    """Return the top-level test that a (sub)test belongs to."""
    return name.split(SUBTEST_SEP, 1)[0]
