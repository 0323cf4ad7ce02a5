"""State accumulated while correlating a single test event stream."""

import datetime
from dataclasses import dataclass, field
from typing import Optional

from gotriage.eventdef import Action, TestEvent, TestVerdict


# Passing tests faster than this are left out of the slow tests report
SHORT_TEST_FILTER_SECS = 0.5


@dataclass
class RunState:
    """Everything that must persist between events of one stream.

    A new one is needed for every stream; it is only ever modified by the correlate module.
    """

    # Output of tests between their run event and their pass/fail/skip event. Sibling and
    # ancestor tests of a test that panics or times out never get a final event and stay here.
    outstanding_output: dict[str, list[TestEvent]] = field(default_factory=dict)
    # output of each failed test, by test name
    failures: dict[str, list[TestEvent]] = field(default_factory=dict)
    # output not belonging to any test; mostly the preamble and epilogue of the run
    package_output: list[str] = field(default_factory=list)
    verdicts: dict[str, TestVerdict] = field(default_factory=dict)
    slow_passing: list[TestEvent] = field(default_factory=list)
    slow_failing: list[TestEvent] = field(default_factory=list)
    slow_threshold_secs: float = SHORT_TEST_FILTER_SECS

    # True for the preamble of the input before the first test event
    init: bool = True
    # Cleared if the preamble shows a stress run, whose output is written all at once
    trust_timestamps: bool = True
    # Time spent in all top-level tests, passing or failing, up until a timeout
    elapsed_total_sec: float = 0.0
    # Set if a test timed out
    timed_out_test_name: str = ''
    timed_out_event: Optional[TestEvent] = None

    cur_test_start: Optional[datetime.datetime] = None
    last_test_name: str = ''
    last_event: Optional[TestEvent] = None

    @property
    def timed_out(self) -> bool:
        return bool(self.timed_out_test_name)

    def package_failed(self) -> bool:
        """Returns True if the stream ended with a package-level failure."""
        return (self.last_event is not None and self.last_event.action == Action.FAIL
                and not self.last_event.test)
