"""Find out who wrote a test, using git

The source code is searched for the definition of the test function, and the author of the last
commit touching that line according to git blame is returned.
"""

import glob
import logging
import os
import re
import subprocess

from gotriage.eventdef import parent_test


# Output of git grep -n looks like:
#   pkg/ccl/storageccl/export_test.go:31:func TestExportCmd(t *testing.T) {
GREP_RE = re.compile(r'^(?P<file>.*?):(?P<line>\d+):')

# Output of git blame --porcelain includes the line:
#   author-mail <jordan@example.com>
AUTHOR_MAIL_RE = re.compile(r'^author-mail <(.*)>$', re.MULTILINE)


class AuthorLookupError(RuntimeError):
    """The author of a test couldn't be determined."""


class GitAuthorLookup:
    """Callable that returns the e-mail address of the author of a test.

    Args:
        source_dir: top of the git checkout holding the package source; the current checkout
            is used if empty
        module_path: Go module path to strip from package names to get the source directory
        encoding: character map of git's output
    """

    def __init__(self, source_dir: str = '', module_path: str = '', encoding: str = 'UTF-8'):
        self.source_dir = source_dir
        self.module_path = module_path
        self.encoding = encoding

    def _git(self, args: list[str], cwd: str) -> str:
        commands = ['git', *args]
        logging.debug('Running: %s', ' '.join(commands))
        try:
            p = subprocess.run(commands, cwd=cwd, capture_output=True, text=True,
                               encoding=self.encoding, check=True)
        except subprocess.CalledProcessError as e:
            raise AuthorLookupError(
                f'git {args[0]} failed: {e.returncode} {e.stderr.strip()}') from e
        except OSError as e:
            raise AuthorLookupError(f'Could not run git: {e}') from e
        except UnicodeDecodeError as e:
            raise AuthorLookupError(f'Bad {self.encoding} output from git {args[0]}: {e}') from e
        return p.stdout

    def toplevel(self) -> str:
        """Returns the top directory of the source checkout."""
        if self.source_dir:
            return self.source_dir
        return self._git(['rev-parse', '--show-toplevel'], os.curdir).strip()

    def package_dir(self, package_name: str) -> str:
        """Returns the source directory of a package relative to the top of the checkout."""
        if self.module_path and package_name.startswith(self.module_path):
            package_name = package_name[len(self.module_path):]
        return package_name.lstrip('/')

    def __call__(self, package_name: str, test_name: str) -> str:
        """Returns the e-mail address of the author of the test.

        Raises:
            AuthorLookupError if it can't be found
        """
        test_name = parent_test(test_name)
        top = self.toplevel()
        pkgdir = self.package_dir(package_name)
        files = sorted(glob.glob(os.path.join(top, pkgdir, '*_test.go')))
        if not files:
            raise AuthorLookupError(f'No test files found for {package_name} in {top}')
        files = [os.path.relpath(fn, top) for fn in files]

        out = self._git(['grep', '-n', '-F', '-e', f'func {test_name}(', '--', *files], top)
        if not (r := GREP_RE.search(out)):
            raise AuthorLookupError(
                f"Couldn't find filename/line number for test {test_name} in {package_name}: "
                f'{out}')
        filename, linenum = r.group('file'), r.group('line')

        out = self._git(['blame', '--porcelain', f'-L{linenum},+1', '--', filename], top)
        if not (r := AUTHOR_MAIL_RE.search(out)):
            raise AuthorLookupError(
                f"Couldn't find author e-mail of test {test_name} in {package_name}")
        logging.debug('Author of %s is %s', test_name, r.group(1))
        return r.group(1)
