"""File failure reports as GitHub issues

The token must be created from the GitHub personal settings "Developer Settings" menu as a
fine-grained personal access token with "Issues" repository permissions (write).
"""

import json
import logging
from typing import Any, Optional

from gotriage import netreq
from gotriage.reportdef import FailureReport, UNKNOWN_TEST


HTTPError = netreq.HTTPError

# See https://docs.github.com/en/rest?apiVersion=2022-11-28
API_URL = "https://api.github.com"
ISSUES_URL = API_URL + "/repos/{owner}/{repo}/issues"
COMMENTS_URL = ISSUES_URL + "/{issue_number}/comments"
SEARCH_ISSUES_URL = API_URL + "/search/issues"
API_VERSION = "2022-11-28"
DATA_TYPE = "application/vnd.github+json"

# GitHub refuses issue bodies longer than this many characters
MAX_BODY_LEN = 65536
# Kept from the end of a message that is too long, since that's where failures usually show up
TRUNCATED_MARKER = '[...truncated...]\n'

BODY_TEMPLATE = """\
The following test appears to have failed:

Package: `{package}`
Test: `{test}`
{author}
```
{message}
```
"""


def read_token(authfile: Optional[str]) -> Optional[str]:
    """Read the GitHub token from the first line of the file."""
    if not authfile:
        return None
    with open(authfile) as f:
        return f.readline().strip()


class GithubApi:
    def __init__(self, owner: str, repo: str, token: Optional[str]):
        self.owner = owner
        self.repo = repo
        self.token = token

        # Oddly, GitHub uses 403 and not 429 for Client Error: rate limit exceeded
        self.http = netreq.retrying_session(retries=5, backoff_factor=30,
                                           retry_statuses=[403, 429, 500, 502, 503, 504])

    def _standard_headers(self) -> dict[str, str]:
        headers = {"Accept": DATA_TYPE,
                   "X-GitHub-Api-Version": API_VERSION,
                   "User-Agent": netreq.USER_AGENT
                   }
        if self.token:
            headers['Authorization'] = 'Bearer ' + self.token
        else:
            logging.warning('No GitHub token available; requests will probably fail')
        return headers

    def search_issues(self, title: str) -> list[dict[str, Any]]:
        """Returns open issues in the repository with exactly the given title"""
        query = f'repo:{self.owner}/{self.repo} is:issue is:open in:title "{title}"'
        resp = self.http.get(SEARCH_ISSUES_URL, headers=self._standard_headers(),
                             params={'q': query})
        netreq.check_response(resp)
        j = json.loads(resp.text)
        # The search is fuzzy, so check the title for an exact match
        return [issue for issue in j.get('items', []) if issue.get('title') == title]

    def create_issue(self, title: str, body: str, labels: list[str]) -> dict[str, Any]:
        """Creates a GitHub issue"""
        url = ISSUES_URL.format(owner=self.owner, repo=self.repo)
        data = {'title': title, 'body': body, 'labels': labels}
        resp = self.http.post(url, headers=self._standard_headers(), data=json.dumps(data))
        netreq.check_response(resp)
        return json.loads(resp.text)

    def create_comment(self, issue_id: int, comment: str) -> dict[str, Any]:
        """Creates a comment on a GitHub issue"""
        url = COMMENTS_URL.format(owner=self.owner, repo=self.repo, issue_number=issue_id)
        data = {'body': comment}
        resp = self.http.post(url, headers=self._standard_headers(), data=json.dumps(data))
        netreq.check_response(resp)
        return json.loads(resp.text)


def format_body(report: FailureReport) -> str:
    """Returns the Markdown text of an issue for the report."""
    author = f'Test author: {report.author_hint}\n' if report.author_hint else ''
    message = report.message.rstrip('\n')
    test = report.test_name if report.test_name != UNKNOWN_TEST else 'unknown'
    body = BODY_TEMPLATE.format(package=report.package_name, test=test, author=author,
                                message=message)
    if len(body) > MAX_BODY_LEN:
        excess = len(body) - MAX_BODY_LEN + len(TRUNCATED_MARKER)
        body = BODY_TEMPLATE.format(package=report.package_name, test=test, author=author,
                                    message=TRUNCATED_MARKER + message[excess:])
    return body


class GithubIssuePoster:
    """Callable that files a report as a new issue, or as a comment on an existing one."""

    def __init__(self, api: GithubApi, labels: list[str]):
        self.api = api
        self.labels = labels

    def __call__(self, report: FailureReport):
        body = format_body(report)
        if existing := self.api.search_issues(report.title):
            number = existing[0]['number']
            logging.info('Adding comment to existing issue #%d', number)
            self.api.create_comment(number, body)
        else:
            issue = self.api.create_issue(report.title, body, self.labels)
            logging.info('Created issue #%s', issue.get('number'))


class LogPoster:
    """Poster that only logs reports, for dry runs."""

    def __call__(self, report: FailureReport):
        logging.warning('Not filing issue %r in dry-run mode (test %s, author %r, %d bytes)',
                        report.title, report.test_name, report.author_hint, len(report.message))
