"""Test triage."""

import io
import unittest

from .context import gotriage  # noqa: F401
from .util import open_data

from gotriage import eventparse  # noqa: I100
from gotriage import triage
from gotriage.eventdef import TestResult, TestVerdict
from gotriage.reportdef import FailureReport

PKG = 'github.com/example/project/pkg/foo'


class TestTriage(unittest.TestCase):
    """Test triage.triage on test2json output."""

    def setUp(self):
        super().setUp()
        self.maxDiff = 4000

    def triage_file(self, fn: str, **kwargs) -> triage.TriageResult:
        with open_data(fn) as f:
            return triage.triage(eventparse.parse_events(f), PKG,
                                 package_prefix='github.com/example/project/', **kwargs)

    def test_empty(self):
        result = triage.triage([], PKG)
        self.assertEqual([], result.reports)
        self.assertEqual([], result.verdicts)
        self.assertEqual(
            'Slow failing tests:\n<none>\n\nSlow passing tests:\n<none>\n', result.slow_report)

    def test_pass(self):
        result = self.triage_file('pass.json')
        self.assertEqual([], result.reports)
        self.assertEqual(
            'Slow failing tests:\n'
            '<none>\n'
            '\n'
            'Slow passing tests:\n'
            'TestLong - 1.29s\n', result.slow_report)

    def test_fail_subtests(self):
        result = self.triage_file('fail_subtests.json')
        self.assertEqual([
            FailureReport(
                'pkg/foo: TestOther failed under stress', PKG, 'TestOther',
                '=== RUN   TestOther\n'
                '    foo_test.go:30: other broke\n'
                '--- FAIL: TestOther (0.01s)\n', ''),
            FailureReport(
                'pkg/foo: TestParent failed under stress', PKG, 'TestParent',
                '=== RUN   TestParent\n'
                '--- FAIL: TestParent (0.90s)\n'
                '=== RUN   TestParent/sub1\n'
                '    foo_test.go:12: sub1 broke\n'
                '    --- FAIL: TestParent/sub1 (0.20s)\n', ''),
        ], result.reports)
        self.assertEqual(
            'Slow failing tests:\n'
            'TestParent - 0.90s\n'
            'TestOther - 0.01s\n'
            '\n'
            'Slow passing tests:\n'
            '<none>\n', result.slow_report)
        self.assertEqual([
            TestVerdict('TestParent/sub1', TestResult.FAIL, 0.2),
            TestVerdict('TestParent/sub2', TestResult.PASS, 0.66),
            TestVerdict('TestParent', TestResult.FAIL, 0.9),
            TestVerdict('TestOther', TestResult.FAIL, 0.01),
        ], result.verdicts)

    def test_panic(self):
        result = self.triage_file('panic.json', qualifier='')
        self.assertEqual([
            FailureReport(
                'pkg/foo: TestPanic failed', PKG, 'TestPanic',
                '=== RUN   TestPanic\npanic: boom\ngoroutine 7 [running]:\n', ''),
        ], result.reports)

    def test_timeout(self):
        result = self.triage_file('timeout.json', author_lookup=lambda pkg, test: 'a@example.com')
        report = ('Slow failing tests:\n'
                  'TestSlow - 30.40s\n'
                  '\n'
                  'Slow passing tests:\n'
                  '<none>\n')
        self.assertEqual(report, result.slow_report)
        self.assertEqual([
            FailureReport('pkg/foo: TestSlow timed out under stress', PKG, 'TestSlow', report,
                          'a@example.com'),
        ], result.reports)
        self.assertEqual([
            TestVerdict('TestFast', TestResult.PASS, 0.1),
            TestVerdict('TestSlow', TestResult.TIMEOUT, 30.4),
        ], result.verdicts)

    def test_stress_timeout(self):
        result = self.triage_file('stress_timeout.json')
        report = ('Slow failing tests:\n'
                  'TestStuck - 75.00s\n'
                  '\n'
                  'Slow passing tests:\n'
                  'TestA - 40.00s\n'
                  'TestC - 5.00s\n')
        self.assertEqual(report, result.slow_report)
        self.assertEqual([
            FailureReport('pkg/foo: TestStuck timed out under stress', PKG, 'TestStuck', report,
                          ''),
        ], result.reports)

    def test_stress_timeout_truncated(self):
        result = self.triage_file('stress_timeout.json', max_slow=1,
                                  timeout_author='oncall@example.com')
        self.assertEqual('Slow failing tests:\n'
                         'TestStuck - 75.00s\n'
                         '\n'
                         'Slow passing tests:\n'
                         'TestA - 40.00s\n', result.slow_report)
        self.assertEqual(1, len(result.reports))

    def test_build_fail(self):
        result = self.triage_file('build_fail.json')
        self.assertEqual([
            FailureReport(
                'pkg/foo: package failed under stress', PKG, '(unknown)',
                '# github.com/example/project/pkg/foo\n'
                'pkg/foo/foo.go:3:2: undefined: bar\n'
                'FAIL\tgithub.com/example/project/pkg/foo [build failed]\n', ''),
        ], result.reports)

    def test_bad_test_name(self):
        infile = io.StringIO('{"Action":"run","Test":"TestA"}\n{"Action":"run","Test":5}\n')
        with self.assertRaisesRegex(eventparse.DecodeError, 'line 2.*Test is not a string'):
            triage.triage(eventparse.parse_events(infile), PKG)
