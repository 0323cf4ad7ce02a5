"""Reports to be filed as issues."""

from dataclasses import dataclass


# Test name used when a report is not about any specific test
UNKNOWN_TEST = '(unknown)'


@dataclass(frozen=True)
class FailureReport:
    """An issue to be filed about a failure."""

    title: str         # issue title
    package_name: str  # full name of the Go package
    test_name: str     # top-level test name, or UNKNOWN_TEST
    message: str       # test output or slow test report
    author_hint: str   # who probably wrote the test (e.g. an e-mail address); may be empty
