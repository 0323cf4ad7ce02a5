"""Correlate a stream of test events into per-test outcomes.

Every event is handled in order by process_event(), which updates the RunState. Once the stream
is exhausted, finish_stream() deals with tests whose final event never arrived.
"""

import dataclasses
import logging
from typing import Iterable

from gotriage import duration
from gotriage.eventdef import Action, TestEvent, TestResult, TestVerdict, is_subtest
from gotriage.runstate import RunState, SHORT_TEST_FILTER_SECS


# Shown in the preamble of a test binary being run by stress
STRESS_MARKER = "-exec 'stress '"


class InconsistentStreamError(RuntimeError):
    """The event stream contradicts itself, so the test run can't be trusted."""


def _set_verdict(state: RunState, event: TestEvent, result: TestResult):
    state.verdicts[event.test] = TestVerdict(event.test, result, event.elapsed)


def _handle_run(state: RunState, event: TestEvent):
    state.outstanding_output.setdefault(event.test, [])
    state.last_test_name = event.test
    if state.trust_timestamps:
        state.cur_test_start = event.time


def _handle_output(state: RunState, event: TestEvent):
    state.outstanding_output.setdefault(event.test, []).append(event)
    if duration.TIMEOUT_MARKER not in event.output:
        return
    if state.timed_out:
        # First timeout wins
        logging.warning('Ignoring timeout message for %s after %s already timed out',
                        event.test, state.timed_out_test_name)
        return

    state.timed_out_test_name = event.test
    elapsed = duration.reconcile_timeout_elapsed(
        event.output, state.trust_timestamps, state.cur_test_start, event.time,
        state.elapsed_total_sec)
    logging.info('Test %s timed out after %.2fs', event.test, elapsed)
    state.timed_out_event = dataclasses.replace(event, elapsed=elapsed)


def _handle_pass(state: RunState, event: TestEvent):
    if state.timed_out:
        raise InconsistentStreamError(
            f'Detected test timeout but test seems to have passed ({event})')
    state.outstanding_output.pop(event.test, None)
    _set_verdict(state, event, TestResult.PASS if event.action == Action.PASS else TestResult.SKIP)
    # Subtests are counted as part of their parent
    if event.elapsed > state.slow_threshold_secs and not is_subtest(event.test):
        state.slow_passing.append(event)


def _handle_fail(state: RunState, event: TestEvent):
    timed_out = event.test == state.timed_out_test_name
    # Subtests are counted as part of their parent, except a timed out subtest since its parent
    # never gets a final event
    if not is_subtest(event.test) or timed_out:
        state.slow_failing.append(event)
    # Timed out tests get reported separately
    if timed_out:
        _set_verdict(state, event, TestResult.TIMEOUT)
    else:
        state.failures[event.test] = state.outstanding_output.get(event.test, [])
        _set_verdict(state, event, TestResult.FAIL)
    state.outstanding_output.pop(event.test, None)


HANDLERS = {
    Action.RUN: _handle_run,
    Action.OUTPUT: _handle_output,
    Action.PASS: _handle_pass,
    Action.SKIP: _handle_pass,
    Action.FAIL: _handle_fail,
}


def process_event(state: RunState, event: TestEvent):
    """Update the state with a single event.

    Raises:
        InconsistentStreamError if a test passes after a timeout
    """
    state.last_event = event

    if event.test:
        state.init = False
    if state.init and STRESS_MARKER in event.output:
        logging.info('Input comes from stress; not trusting time stamps')
        state.trust_timestamps = False

    if not event.test:
        # Package preamble, epilogue or output of the test binary's main function
        if event.action == Action.OUTPUT:
            state.package_output.append(event.output)
        return

    if not state.timed_out and event.elapsed > 0 and not is_subtest(event.test):
        # Subtest time is already included in the parent's
        state.elapsed_total_sec += event.elapsed

    if state.timed_out_event and event.test == state.timed_out_test_name and event.elapsed != 0:
        event = dataclasses.replace(event, elapsed=state.timed_out_event.elapsed)

    handler = HANDLERS.get(event.action)
    if handler:
        handler(state, event)


def finish_stream(state: RunState):
    """Deal with tests that never finished once all events have been seen."""
    if state.timed_out_event:
        # There is no fail event for the timed out test under stress, but it still has to be
        # ranked with the slow failing tests to find the timeout culprit
        if state.outstanding_output.pop(state.timed_out_test_name, None) is not None:
            state.slow_failing.append(state.timed_out_event)
            state.verdicts[state.timed_out_test_name] = TestVerdict(
                state.timed_out_test_name, TestResult.TIMEOUT, state.timed_out_event.elapsed)

    elif (state.last_test_name in state.outstanding_output
          and not (state.last_event and state.last_event.action == Action.FAIL
                   and state.last_event.test)):
        # The last test never finished, most likely due to a panic or log.Fatal. Other tests
        # can be left outstanding too (https://github.com/golang/go/issues/27582) but only the
        # last one is blamed.
        logging.info('Found outstanding output. Considering last test failed: %s',
                     state.last_test_name)
        state.failures[state.last_test_name] = state.outstanding_output.pop(state.last_test_name)
        state.verdicts[state.last_test_name] = TestVerdict(
            state.last_test_name, TestResult.FAIL, 0.0)

    for name in state.outstanding_output:
        if name not in state.verdicts:
            logging.debug('No final event for test %s', name)
            state.verdicts[name] = TestVerdict(name, TestResult.UNKNOWN, 0.0)


def correlate(events: Iterable[TestEvent],
              slow_threshold_secs: float = SHORT_TEST_FILTER_SECS) -> RunState:
    """Consume a whole event stream and return the resulting state.

    Raises:
        DecodeError if the stream couldn't be decoded
        InconsistentStreamError if the stream contradicts itself
    """
    state = RunState(slow_threshold_secs=slow_threshold_secs)
    for event in events:
        process_event(state, event)
    finish_stream(state)
    logging.debug('Correlated %d tests with %d failures', len(state.verdicts), len(state.failures))
    return state
