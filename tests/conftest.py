"""
Shared pytest fixtures for castgraph tests.

Provides:
- clean_env: strips CASTGRAPH_* variables so defaults apply, before and after each test (autouse)
- fake_http: replaces requests.get with an in-memory catalog
- make_title_page / make_person: builders for scraped title pages
"""

import json
from urllib.parse import parse_qs, urlparse

import pytest
import requests

from castgraph.components.graph_builder import Entry, Participant


class FakeResponse:
    def __init__(self, body, status_code=200, url=""):
        if isinstance(body, str):
            body = body.encode("utf-8")
        self.content = body
        self.status_code = status_code
        self.url = url

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Error for url: {self.url}", response=self)


class FakeCatalog:
    """
    In-memory stand-in for the catalog API and its title pages.

    - lists: list id -> list of pages, each page a list of raw items
    - pages: page URL -> HTML body
    """

    def __init__(self):
        self.lists = {}
        self.pages = {}
        self.failures = set()
        self.requested = []

    def get(self, url, headers=None, timeout=None):
        self.requested.append(url)
        parsed = urlparse(url)
        base = f"{parsed.scheme}://{parsed.netloc}{parsed.path}"

        if base in self.failures:
            return FakeResponse("boom", status_code=500, url=url)

        if parsed.path.startswith("/v4/lists/") and parsed.path.endswith(".json"):
            list_id = parsed.path[len("/v4/lists/"):-len(".json")]
            pages = self.lists.get(list_id)
            if pages is None:
                return FakeResponse("not found", status_code=404, url=url)
            page = int(parse_qs(parsed.query).get("page", ["1"])[0])
            body = {
                "response": pages[page - 1] if page <= len(pages) else [],
                "more": page < len(pages),
            }
            return FakeResponse(json.dumps(body), url=url)

        if base in self.pages:
            return FakeResponse(self.pages[base], url=url)
        return FakeResponse("not found", status_code=404, url=url)


def make_person(person_id, name=None, poster=True):
    person = {"id": person_id, "name": name or person_id.upper()}
    if poster:
        person["images"] = {"poster": {"url": f"https://img.example/{person_id}.jpg"}}
    return {"person": person, "role": "main"}


def make_title_page(casts):
    payload = {"props": {"pageProps": {"castsJson": casts}}, "page": "/tv/[id]"}
    return (
        "<!DOCTYPE html><html><head><title>Show</title></head><body>"
        "<div id=\"__next\"></div>"
        f"<script id=\"__NEXT_DATA__\" type=\"application/json\">{json.dumps(payload)}</script>"
        "</body></html>"
    )


def make_list_item(item_id, title, url=None):
    return {
        "id": item_id,
        "titles": {"en": title},
        "url": {"web": url or f"https://www.viki.com/tv/{item_id}"},
    }


def participant(pid, name=None):
    return Participant(id=pid, name=name or pid, image_url=f"https://img.example/{pid}.jpg")


def entry(eid, name=None):
    return Entry(id=eid, name=name or eid)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in (
        "CASTGRAPH_API_BASE",
        "CASTGRAPH_APP_ID",
        "CASTGRAPH_PER_PAGE",
        "CASTGRAPH_CACHE_DIR",
        "CASTGRAPH_TIMEOUT",
        "CASTGRAPH_NUM_WORKERS",
    ):
        # setenv first so teardown also removes values loaded from .env files
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)


@pytest.fixture
def fake_http(monkeypatch):
    catalog = FakeCatalog()
    monkeypatch.setattr("castgraph.tools.cache.requests.get", catalog.get)
    return catalog


@pytest.fixture
def small_catalog(fake_http):
    """
    A two-page list of four shows.

    - s1 "Show1": a, b, y     (y only here)
    - s2 "Show2": a, b, c
    - s3 "Show3": c, d, z     (z only here)
    - s4 "Show4": a, b, c, d
    """
    items = [
        make_list_item("s1", "Show1"),
        make_list_item("s2", "Show2"),
        make_list_item("s3", "Show3"),
        make_list_item("s4", "Show4"),
    ]
    fake_http.lists["l1"] = [items[:2], items[2:]]
    rosters = {
        "s1": ["a", "b", "y"],
        "s2": ["a", "b", "c"],
        "s3": ["c", "d", "z"],
        "s4": ["a", "b", "c", "d"],
    }
    for item in items:
        casts = [make_person(pid) for pid in rosters[item["id"]]]
        fake_http.pages[item["url"]["web"]] = make_title_page(casts)
    return fake_http
