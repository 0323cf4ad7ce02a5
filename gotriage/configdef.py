"""gotriage default configuration file

Every configuration element ever used in the program must exist here.
These defaults may be overridden in the user's config file.

The variables guaranteed to be available are set in config.environ()
"""


# Name of the environment variable holding the full name of the package under test
package_env = 'PKG'

# Removed from the start of package names when making issue titles
package_prefix = ''

# Go module path; removed from the start of package names to find their source directory
module_path = ''

# Top of the source checkout used to find test authors; the current git checkout if empty
source_dir = ''

# Character map used in git output
git_encoding = 'UTF-8'

# Tests that took fewer seconds than this are not considered for slow test reporting
slow_test_threshold_secs = 0.5

# Maximum number of tests to show in each section of the slow tests report
slow_test_report_max = 20

# Path to the slow tests report
slow_tests_report_path = 'artifacts/slow-tests-report.txt'

# Describes the kind of test run in issue titles, e.g. "pkg: TestFoo failed under stress"
title_qualifier = 'under stress'

# Author hint for package timeouts that can't be blamed on a single test
timeout_author = ''

# GitHub repository in which to file issues, as owner/repo
github_repo = ''

# Labels to add to newly-filed issues
github_labels = ['C-test-failure', 'O-robot']
