"""HTTP session handling
"""

from typing import Optional

from requests import adapters
import requests

import gotriage


HTTPError = requests.exceptions.HTTPError

# The User-Agent: header to use
USER_AGENT = f'gotriage/{gotriage.__version__}'

# Only idempotent methods are retried so that an issue is never filed twice
RETRY_METHODS = ['HEAD', 'GET', 'OPTIONS']


def retrying_session(retries: int = 4, backoff_factor: int = 10,
                     retry_statuses: Optional[list[int]] = None) -> requests.Session:
    """Returns a requests session that retries failed idempotent requests.

    With the defaults, this delays a total of 10+20+40+80 seconds before giving up.
    """
    retry_strategy = adapters.Retry(
        total=retries, backoff_factor=backoff_factor,
        status_forcelist=retry_statuses or [429, 500, 502, 503, 504],
        allowed_methods=RETRY_METHODS)
    adapter = adapters.HTTPAdapter(max_retries=retry_strategy)
    session = requests.Session()
    session.mount('https://', adapter)
    session.mount('http://', adapter)
    session.headers['User-Agent'] = USER_AGENT
    return session


def check_response(resp: requests.Response):
    """Raises HTTPError for an error response, including the body the server sent back."""
    try:
        resp.raise_for_status()
    except HTTPError as e:
        raise HTTPError(f'{e}: {resp.text}', response=resp) from e
