import requests

from smalls import config
from smalls.errors import FetchError


def fetch(url, timeout=None, session=None):
    """
    Download url and return the raw response body.
    Raises FetchError on transport failures and non-2xx responses; no retries.
    """
    getter = session or requests
    try:
        r = getter.get(url, headers=config.REQUEST_HEADERS, timeout=timeout or config.REQUEST_TIMEOUT)
        r.raise_for_status()
    except requests.exceptions.RequestException as e:
        raise FetchError(url, f"{type(e).__name__}: {e}") from e
    return r.content
