import os
from concurrent.futures import ThreadPoolExecutor, as_completed

from tqdm import tqdm

from .cast_scraper import CastScraper
from .graph_builder import classify, ingest, prune
from .list_fetcher import ListFetcher
from .renderer import write_html


class CastGraphPipeline:
    """Fetches a list, scrapes every roster, builds the cast graph and writes the page."""
    def __init__(self, list_id, output_path="index.html", title="Viki Cast Graph", use_cache=False, verbose=True):
        if not list_id:
            raise ValueError("A list id is required")

        self.verbose = verbose
        self.list_id = list_id
        self.output_path = output_path
        self.title = title
        self.NUM_WORKERS = int(os.getenv("CASTGRAPH_NUM_WORKERS", "4"))

        self.list_fetcher = ListFetcher(use_cache=use_cache, verbose=verbose)
        self.cast_scraper = CastScraper(use_cache=use_cache)

    def fetch_rosters(self, entries):
        """
        Scrape the roster of every entry concurrently.

        Returns:
        - rosters: A dict of entry id to list of Participant. Entries without a
          page URL get an empty roster.

        Any failed fetch is re-raised once all workers are joined.
        """
        rosters = {}
        pending = [entry for entry in entries if entry.url]
        for entry in entries:
            if not entry.url:
                rosters[entry.id] = []

        if self.verbose:
            print(f"Fetching {len(pending)} rosters with {self.NUM_WORKERS} workers......")

        with ThreadPoolExecutor(max_workers=self.NUM_WORKERS) as executor:
            futures = {executor.submit(self.cast_scraper.get_cast, entry.url): entry for entry in pending}

            if self.verbose:
                iterator = tqdm(as_completed(futures), total=len(futures), dynamic_ncols=True, desc="Fetching rosters")
            else:
                iterator = as_completed(futures)

            for future in iterator:
                entry = futures[future]
                try:
                    rosters[entry.id] = future.result()
                except (RuntimeError, ValueError) as e:
                    for other in futures:
                        other.cancel()
                    raise RuntimeError(f"Failed to fetch roster of {entry.id} ({entry.url}): {e}") from e

        return rosters

    def build(self):
        """Returns (graph, participant_count, entry_count) without writing anything."""
        entries = self.list_fetcher.run(self.list_id)
        if self.verbose:
            print(f"Loaded {len(entries)} entries from list {self.list_id}")

        rosters = self.fetch_rosters(entries)

        participants, ingested = ingest(entries, rosters)
        if self.verbose:
            print(f"Ingested {len(participants)} unique participants")

        participants, ingested = prune(participants, ingested)
        if self.verbose:
            print(f"Kept {len(participants)} participants appearing in more than one entry")

        graph = classify(ingested, participants)
        return graph, len(participants), len(ingested)

    def run(self):
        """Main pipeline, returns (entry_count, participant_count, node_count, edge_count)."""
        graph, participant_count, entry_count = self.build()

        write_html(graph, self.output_path, self.title)
        if self.verbose:
            print(f"Wrote {len(graph.nodes)} nodes and {len(graph.edges)} edges to {self.output_path}")

        return entry_count, participant_count, len(graph.nodes), len(graph.edges)
