"""Summarize the verdicts of a test run"""

import io

from gotriage.eventdef import TestResult, TestVerdict


def show_totals(verdicts: list[TestVerdict], details: bool = False):
    print(''.join(summarize_totals(verdicts, details)), end='')


def summarize_totals(verdicts: list[TestVerdict], details: bool = False) -> list[str]:
    f = io.StringIO()
    print("OK:", len([1 for x in verdicts if x.result == TestResult.PASS]), file=f)
    print("FAILED:", len([1 for x in verdicts if x.result == TestResult.FAIL]), file=f)
    print("SKIPPED:", len([1 for x in verdicts if x.result == TestResult.SKIP]), file=f)
    if match := [1 for x in verdicts if x.result == TestResult.TIMEOUT]:
        print("TIMEDOUT:", len(match), file=f)
    if match := [1 for x in verdicts if x.result == TestResult.UNKNOWN]:
        print("UNFINISHED:", len(match), file=f)
    print("TOTAL:", len(verdicts), file=f)
    if details:
        # Display interesting test results
        for verdict in verdicts:
            if verdict.result not in frozenset((TestResult.PASS, TestResult.SKIP)):
                print(f'{verdict.result.name} {verdict.name} ({verdict.elapsed:.2f}s)', file=f)
    f.seek(0)
    return f.readlines()
