"""Decode test2json event streams.

This is the output of 'go test -json' or './pkg.test -test.v | go tool test2json -t'.
Each line holds a single JSON object, like:

  {"Time":"2018-09-07T14:34:51.123456789-04:00","Action":"run","Test":"TestFoo"}
"""

import datetime
import json
import logging
import re
import sys
from typing import Iterator, Optional

from gotriage.eventdef import Action, TestEvent
from gotriage.filedef import TextIOReadline


# Matches the parts of an RFC 3339 time stamp that datetime doesn't handle directly:
# fractional seconds with more than 6 digits and a Z time zone
TIME_RE = re.compile(r'^(?P<base>[^.]{19})(?:\.(?P<frac>\d+))?(?P<zone>Z|z|[-+]\d\d:\d\d)$')


class DecodeError(ValueError):
    """The event stream is not valid test2json output."""


def convert_time(timestamp: str) -> datetime.datetime:
    """Converts a test2json time into a time zone aware datetime object.

    Go writes these with up to nanosecond resolution, like:
        2018-09-07T14:34:51.123456789-04:00
        2018-09-07T18:34:51Z
    Sub-microsecond digits are truncated.
    """
    r = TIME_RE.search(timestamp)
    if not r:
        raise ValueError(f'Unrecognized time stamp {timestamp!r}')
    frac = r.group('frac')
    zone = r.group('zone')
    if zone in ('Z', 'z'):
        zone = '+00:00'
    text = r.group('base')
    if frac:
        text += '.' + frac[:6].ljust(6, '0')
    return datetime.datetime.fromisoformat(text + zone)


def _string_field(j: dict, name: str) -> str:
    value = j.get(name) or ''
    if not isinstance(value, str):
        raise ValueError(f'{name} is not a string: {value!r}')
    return value


def decode_event(line: str) -> TestEvent:
    """Convert a single line of JSON into an event.

    Raises:
        ValueError if the line isn't a valid event
    """
    j = json.loads(line)
    if not isinstance(j, dict):
        raise ValueError(f'Expected a JSON object, not {type(j).__name__}')
    time: Optional[datetime.datetime] = None
    if j.get('Time'):
        if not isinstance(j['Time'], str):
            raise ValueError(f'Time is not a string: {j["Time"]!r}')
        time = convert_time(j['Time'])
    elapsed = j.get('Elapsed') or 0
    # bool is an int but never a duration
    if not isinstance(elapsed, (int, float)) or isinstance(elapsed, bool):
        raise ValueError(f'Elapsed is not a number: {elapsed!r}')
    return TestEvent(
        action=Action(j.get('Action', '')),
        test=_string_field(j, 'Test'),
        output=_string_field(j, 'Output'),
        time=time,
        elapsed=float(elapsed),
        package=_string_field(j, 'Package'))


def _readline(f: TextIOReadline, lineno: int) -> str:
    try:
        return f.readline()
    except UnicodeDecodeError as e:
        raise DecodeError(f'Invalid text on line {lineno}: {e}') from e


def parse_events(f: TextIOReadline) -> Iterator[TestEvent]:
    """Returns a generator that decodes events from the file, one per line.

    Blank lines are ignored.

    Raises:
        DecodeError if any line can't be decoded; events before that point will already have
        been returned
    """
    lineno = 0
    while l := _readline(f, lineno + 1):
        lineno += 1
        if not l.strip():
            continue
        try:
            yield decode_event(l)
        except ValueError as e:
            # JSONDecodeError is a ValueError, as is an unknown Action
            raise DecodeError(f'Invalid test event on line {lineno}: {e}') from e
    logging.debug('Decoded %d lines of events', lineno)


# Debug interface
def main():
    logging.basicConfig(level=logging.DEBUG, format='%(levelno)s %(filename)s: %(message)s',)
    for event in parse_events(sys.stdin):
        print(event)


if __name__ == '__main__':
    main()
