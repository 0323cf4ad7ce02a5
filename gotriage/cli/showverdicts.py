"""Show the verdicts found in go test -json output

This is a debugging aid showing what postissues would do with the same input.
"""

import argparse
import contextlib
import logging
import sys

from gotriage import argparsing
from gotriage import config
from gotriage import eventparse
from gotriage import log
from gotriage import summarize
from gotriage import triage
from gotriage.correlate import InconsistentStreamError
from gotriage.eventfile import open_event_file
from gotriage.reportdef import UNKNOWN_TEST


def parse_args(args=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description='Show the test verdicts and issues found in go test -json output')
    argparsing.arguments_logging(parser)
    argparsing.arguments_config(parser)
    argparsing.arguments_events(parser)
    parser.add_argument(
        '--messages',
        action='store_true',
        help='Show the message of each issue')
    return parser.parse_args(args=args)


def show_verdicts(args: argparse.Namespace) -> int:
    package_name = args.package or config.lookup(config.get('package_env'), UNKNOWN_TEST)
    try:
        with open_event_file(args.file) if args.file else contextlib.nullcontext(sys.stdin) as f:
            result = triage.triage(
                eventparse.parse_events(f), package_name,
                slow_threshold_secs=config.get('slow_test_threshold_secs'),
                max_slow=config.get('slow_test_report_max'),
                package_prefix=config.expand('package_prefix'),
                qualifier=config.expand('title_qualifier'),
                timeout_author=config.expand('timeout_author'))
    except (eventparse.DecodeError, InconsistentStreamError) as e:
        logging.error('%s', e)
        return 1
    except OSError as e:
        logging.error('Failed to read test events: %s', e)
        return 1

    summarize.show_totals(result.verdicts, details=True)
    print()
    print(result.slow_report)
    print(f'Issues to file: {len(result.reports)}')
    for report in result.reports:
        print(f'  {report.title}')
        if args.messages:
            print(report.message)
    return 0


def main():
    args = parse_args()
    log.setup(args)
    sys.exit(show_verdicts(args))


if __name__ == '__main__':
    main()
