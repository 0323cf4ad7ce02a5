"""Test author."""

import os
import subprocess
import tempfile
import unittest
from unittest import mock

from .context import gotriage  # noqa: F401

from gotriage import author  # noqa: I100


GREP_OUT = 'pkg/foo/foo_test.go:31:func TestExport(t *testing.T) {\n'
BLAME_OUT = '''\
eb1397238f07f07d572dbb8f95de195ddf77dc2c 31 31 1
author Author
author-mail <author@example.com>
author-time 1690873322
\tfunc TestExport(t *testing.T) {
'''


def completed(stdout: str) -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess([], 0, stdout=stdout, stderr='')


class TestGitAuthorLookup(unittest.TestCase):
    """Test author.GitAuthorLookup."""

    def setUp(self):
        super().setUp()
        tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(tmpdir.cleanup)
        self.top = tmpdir.name
        os.makedirs(os.path.join(self.top, 'pkg', 'foo'))
        for fn in ('foo_test.go', 'bar_test.go', 'foo.go'):
            with open(os.path.join(self.top, 'pkg', 'foo', fn), 'w'):
                pass
        self.lookup = author.GitAuthorLookup(self.top, 'github.com/example/project')

    def test_package_dir(self):
        self.assertEqual('pkg/foo', self.lookup.package_dir('github.com/example/project/pkg/foo'))
        self.assertEqual('other/pkg', self.lookup.package_dir('other/pkg'))

    @mock.patch('subprocess.run')
    def test_author(self, run_mock):
        run_mock.side_effect = [completed(GREP_OUT), completed(BLAME_OUT)]
        self.assertEqual('author@example.com',
                         self.lookup('github.com/example/project/pkg/foo', 'TestExport/sub'))
        grep_args = run_mock.call_args_list[0].args[0]
        self.assertEqual(['git', 'grep', '-n', '-F', '-e', 'func TestExport(', '--',
                          'pkg/foo/bar_test.go', 'pkg/foo/foo_test.go'], grep_args)
        blame_args = run_mock.call_args_list[1].args[0]
        self.assertEqual(['git', 'blame', '--porcelain', '-L31,+1', '--', 'pkg/foo/foo_test.go'],
                         blame_args)
        self.assertEqual(self.top, run_mock.call_args_list[1].kwargs['cwd'])

    @mock.patch('subprocess.run')
    def test_not_found(self, run_mock):
        run_mock.side_effect = subprocess.CalledProcessError(1, ['git', 'grep'], '', '')
        with self.assertRaisesRegex(author.AuthorLookupError, 'git grep failed'):
            self.lookup('github.com/example/project/pkg/foo', 'TestMissing')

    @mock.patch('subprocess.run')
    def test_no_author_mail(self, run_mock):
        run_mock.side_effect = [completed(GREP_OUT), completed('nothing useful\n')]
        with self.assertRaisesRegex(author.AuthorLookupError, 'author e-mail'):
            self.lookup('github.com/example/project/pkg/foo', 'TestExport')

    @mock.patch('subprocess.run')
    def test_no_git(self, run_mock):
        run_mock.side_effect = FileNotFoundError('git')
        with self.assertRaisesRegex(author.AuthorLookupError, 'Could not run git'):
            self.lookup('github.com/example/project/pkg/foo', 'TestExport')

    @mock.patch('subprocess.run')
    def test_git_not_runnable(self, run_mock):
        run_mock.side_effect = PermissionError(13, 'Permission denied', 'git')
        with self.assertRaisesRegex(author.AuthorLookupError, 'Could not run git'):
            self.lookup('github.com/example/project/pkg/foo', 'TestExport')

    @mock.patch('subprocess.run')
    def test_bad_encoding(self, run_mock):
        run_mock.side_effect = [
            completed(GREP_OUT),
            UnicodeDecodeError('utf-8', b'\xff', 0, 1, 'invalid start byte')]
        with self.assertRaisesRegex(author.AuthorLookupError, 'git blame'):
            self.lookup('github.com/example/project/pkg/foo', 'TestExport')

    def test_no_test_files(self):
        with self.assertRaisesRegex(author.AuthorLookupError, 'No test files'):
            self.lookup('github.com/example/project/pkg/bar', 'TestExport')

    @mock.patch('subprocess.run')
    def test_toplevel(self, run_mock):
        run_mock.return_value = completed(self.top + '\n')
        lookup = author.GitAuthorLookup()
        self.assertEqual(self.top, lookup.toplevel())
        self.assertEqual(['git', 'rev-parse', '--show-toplevel'], run_mock.call_args.args[0])
