"""Test log and config."""

import argparse
import logging
import os
import unittest

from .context import gotriage  # noqa: F401

from gotriage import argparsing  # noqa: I100
from gotriage import config
from gotriage import log


class TestLog(unittest.TestCase):
    """Test log."""

    def test_logging_level_to_syslog(self):
        self.assertEqual(7, log.logging_level_to_syslog(logging.DEBUG))
        self.assertEqual(6, log.logging_level_to_syslog(logging.INFO))
        self.assertEqual(4, log.logging_level_to_syslog(logging.WARNING))
        self.assertEqual(3, log.logging_level_to_syslog(logging.ERROR))
        self.assertEqual(2, log.logging_level_to_syslog(logging.CRITICAL))
        self.assertEqual(1, log.logging_level_to_syslog(logging.CRITICAL + 10))

    def test_syslog_formatter(self):
        formatter = log.SyslogFormatter('%(message)s')
        record = logging.LogRecord('test', logging.ERROR, 'x.py', 1, 'oops %d', (3,), None)
        self.assertEqual('<3>oops 3', formatter.format(record))


class TestConfig(unittest.TestCase):
    """Test config overrides."""

    def setUp(self):
        super().setUp()
        self.addCleanup(config.get.cache_clear)
        self.addCleanup(config.expand.cache_clear)
        self.addCleanup(config.overrides.pop, 'title_qualifier', None)
        self.addCleanup(config.overrides.pop, 'slow_test_report_max', None)

    def test_override(self):
        parser = argparse.ArgumentParser()
        argparsing.arguments_config(parser)
        parser.parse_args(['--set', 'title_qualifier="in CI"', '--set', 'slow_test_report_max=5'])
        self.assertEqual('in CI', config.expand('title_qualifier'))
        self.assertEqual(5, config.get('slow_test_report_max'))

    def test_expand(self):
        config.add_override('title_qualifier', 'under {package_env}')
        self.assertEqual('under PKG', config.expand('title_qualifier'))
        self.assertIsNone(config.lookup('NO_SUCH_VARIABLE_HERE'))


class TestArguments(unittest.TestCase):
    """Test argparsing."""

    def setUp(self):
        super().setUp()
        self.addCleanup(config.get.cache_clear)
        self.addCleanup(config.expand.cache_clear)
        self.addCleanup(config.overrides.pop, 'github_repo', None)

    def test_readable_file(self):
        self.assertIsNone(argparsing.readable_file('-'))
        self.assertEqual(__file__, argparsing.readable_file(__file__))
        with self.assertRaises(argparse.ArgumentTypeError):
            argparsing.readable_file(os.path.dirname(__file__))
        with self.assertRaises(argparse.ArgumentTypeError):
            argparsing.readable_file(__file__ + '.nonexistent')

    def test_set_plain_string(self):
        parser = argparse.ArgumentParser()
        argparsing.arguments_config(parser)
        args = parser.parse_args(['--set', 'github_repo=example/project'])
        self.assertEqual({'github_repo': 'example/project'}, args.set)
        self.assertEqual('example/project', config.get('github_repo'))
