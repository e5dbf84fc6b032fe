import os
from urllib.parse import urljoin

from ..tools.cache import fetch_cache
from ..tools.json_utils import parse_json_bytes
from .graph_builder import Entry


def entries_from_list(items):
    """Map raw list items from the catalog API to Entry records."""
    entries = []
    for item in items:
        titles = item.get('titles') or {}
        url = (item.get('url') or {}).get('web')
        entries.append(Entry(
            id=item['id'],
            name=titles.get('en') or item['id'],
            url=url,
        ))
    return entries


class ListFetcher:
    """Fetches every page of a curated list from the catalog API."""
    def __init__(self, use_cache=False, verbose=True):
        self.verbose = verbose
        self.use_cache = use_cache
        self.API_BASE = os.getenv("CASTGRAPH_API_BASE", "https://api.viki.io/v4/")
        self.APP_ID = os.getenv("CASTGRAPH_APP_ID", "100000a")
        self.PER_PAGE = int(os.getenv("CASTGRAPH_PER_PAGE", "50"))
        self.CACHE_DIR = os.getenv("CASTGRAPH_CACHE_DIR", "cache")
        self.TIMEOUT = int(os.getenv("CASTGRAPH_TIMEOUT", "30"))

        if not self.API_BASE.endswith('/'):
            self.API_BASE += '/'

    def get_page(self, list_id, page):
        url = urljoin(self.API_BASE, f"lists/{list_id}.json")
        params = {
            'app': self.APP_ID,
            'per_page': self.PER_PAGE,
            'page': page,
        }
        body = fetch_cache(url, params, use_cache=self.use_cache, cache_dir=self.CACHE_DIR, timeout=self.TIMEOUT)
        return parse_json_bytes(body)

    def get_list(self, list_id):
        """Returns the concatenated 'response' arrays of every page of the list."""
        data = []
        page = 1
        while True:
            d = self.get_page(list_id, page)
            data.extend(d.get('response') or [])
            if self.verbose:
                print(f"Fetched list page {page}: {len(data)} items so far")
            if not d.get('more'):
                break
            page += 1
        return data

    def run(self, list_id):
        return entries_from_list(self.get_list(list_id))
