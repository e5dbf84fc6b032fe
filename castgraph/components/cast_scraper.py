import json
import os

from bs4 import BeautifulSoup

from ..tools.cache import fetch_cache
from .graph_builder import Participant


def extract_next_data(html):
    """Returns the parsed JSON payload of the page's __NEXT_DATA__ script."""
    soup = BeautifulSoup(html, 'html.parser')
    script = soup.find('script', id='__NEXT_DATA__')
    if script is None:
        raise ValueError("Page has no __NEXT_DATA__ script")
    try:
        return json.loads(script.string or '')
    except json.JSONDecodeError as e:
        raise ValueError(f"Malformed __NEXT_DATA__ payload: {e}") from e


def parse_cast(html):
    """
    Extract the cast of a title page.

    Parameters:
    - html: The page source, as str or bytes.

    Returns:
    - A list of Participant in page order.
    """
    data = extract_next_data(html)
    try:
        casts = data['props']['pageProps']['castsJson']
    except (KeyError, TypeError) as e:
        raise ValueError(f"Page data has no castsJson: {e!r}") from e

    cast = []
    for v in casts or []:
        try:
            person = v['person']
            poster = ((person.get('images') or {}).get('poster') or {})
            cast.append(Participant(
                id=person['id'],
                name=person['name'],
                image_url=poster.get('url'),
            ))
        except (KeyError, TypeError, AttributeError) as e:
            raise ValueError(f"Malformed cast record {v!r}: {e!r}") from e
    return cast


class CastScraper:
    """Scrapes participant rosters from catalog title pages."""
    def __init__(self, use_cache=False):
        self.use_cache = use_cache
        self.CACHE_DIR = os.getenv("CASTGRAPH_CACHE_DIR", "cache")
        self.TIMEOUT = int(os.getenv("CASTGRAPH_TIMEOUT", "30"))

    def get_cast(self, url):
        body = fetch_cache(url, use_cache=self.use_cache, cache_dir=self.CACHE_DIR, timeout=self.TIMEOUT)
        return parse_cast(body)
