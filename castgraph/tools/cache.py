import os

import requests

from .string_utils import sha256_hex

USER_AGENT = "castgraph/0.1"


def prepare_url(url, params=None):
    """Returns the URL with its query string as it would be sent."""
    return requests.Request("GET", url, params=params).prepare().url


def _download(url, timeout):
    try:
        response = requests.get(url, headers={"User-Agent": USER_AGENT}, timeout=timeout)
        response.raise_for_status()
    except requests.exceptions.RequestException as e:
        raise RuntimeError(f"Request failed: {e}") from e
    return response.content


def fetch_cache(url, params=None, use_cache=False, cache_dir="cache", timeout=30):
    """
    Fetch a URL, optionally memoized on disk.

    Parameters:
    - url: The URL to fetch.
    - params: Optional query parameters merged into the URL.
    - use_cache: When True, responses are read from and written to cache_dir.
    - cache_dir: Directory holding one file per request, named by the SHA-256
      of the full request URL.
    - timeout: Request timeout in seconds.

    Returns:
    - The response body as bytes.
    """
    full_url = prepare_url(url, params)

    if not use_cache:
        return _download(full_url, timeout)

    cache_path = os.path.join(cache_dir, sha256_hex(full_url))
    if os.path.exists(cache_path):
        with open(cache_path, 'rb') as f:
            return f.read()

    body = _download(full_url, timeout)
    os.makedirs(cache_dir, exist_ok=True)
    # Concurrent workers may fetch the same URL, so write then swap in place
    tmp_path = f"{cache_path}.{os.getpid()}.{id(body)}.tmp"
    try:
        with open(tmp_path, 'wb') as f:
            f.write(body)
        os.replace(tmp_path, cache_path)
    except OSError:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise
    return body
