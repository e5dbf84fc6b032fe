from collections import Counter
from dataclasses import dataclass
from types import MappingProxyType
from typing import Optional


@dataclass(frozen=True)
class Participant:
    id: str
    name: str
    image_url: Optional[str] = None


@dataclass(frozen=True)
class Entry:
    id: str
    name: str
    participant_ids: tuple = ()
    url: Optional[str] = None

    def with_participants(self, participant_ids):
        return Entry(self.id, self.name, tuple(participant_ids), self.url)


class _ReadOnlyIndex:
    """
    Read-only, insertion ordered mapping of records keyed by id.

    Parameters:
    - records: An iterable of (id, record) pairs. Later ids overwrite earlier ones.
    """

    def __init__(self, records=()):
        self._records = MappingProxyType(dict(records))

    def items(self):
        """
        Returns all the (id, record) pairs.
        """
        return self._records.items()

    def keys(self):
        """
        Returns all the ids.
        """
        return self._records.keys()

    def values(self):
        """
        Returns all the records.
        """
        return self._records.values()

    def __getitem__(self, record_id):
        return self._records[record_id]

    def __contains__(self, record_id):
        return record_id in self._records

    def __len__(self):
        return len(self._records)

    def __iter__(self):
        return iter(self._records)

    def __eq__(self, other):
        if not isinstance(other, _ReadOnlyIndex):
            return NotImplemented
        return type(self) is type(other) and list(self.items()) == list(other.items())

    def get(self, record_id, default=None):
        """
        Returns the record associated with the given id, or a default value if not found.
        """
        return self._records.get(record_id, default)

    def __repr__(self):
        return f"{type(self).__name__}({list(self._records)!r})"


class ParticipantSet(_ReadOnlyIndex):
    """Participants keyed by participant id."""


class EntrySet(_ReadOnlyIndex):
    """Entries keyed by entry id."""


@dataclass(frozen=True)
class CastGraph:
    nodes: tuple = ()
    edges: tuple = ()

    def __post_init__(self):
        object.__setattr__(self, "nodes", tuple(self.nodes))
        object.__setattr__(self, "edges", tuple(self.edges))

    def to_dict(self):
        return {"nodes": list(self.nodes), "edges": list(self.edges)}


def ingest(entries, rosters):
    """
    Merge every entry's roster into one participant set.

    Parameters:
    - entries: A sequence of Entry records (only id, name and url are read).
    - rosters: A mapping of entry id to a sequence of Participant. A missing
      roster counts as an empty one.

    Returns:
    - (ParticipantSet, EntrySet) with each entry carrying the ordered,
      de-duplicated ids of its roster.
    """
    participants = {}
    ingested = {}

    for entry in entries:
        roster = rosters.get(entry.id) or []
        participant_ids = []
        for participant in roster:
            # Last write wins, records are assumed stable across entries
            participants[participant.id] = participant
            if participant.id not in participant_ids:
                participant_ids.append(participant.id)
        ingested[entry.id] = entry.with_participants(participant_ids)

    return ParticipantSet(participants.items()), EntrySet(ingested.items())


def count_memberships(entries):
    """Returns a Counter of participant id -> number of entries referencing it."""
    counts = Counter()
    for entry in entries.values():
        counts.update(set(entry.participant_ids))
    return counts


def prune(participants, entries):
    """
    Drop participants that appear in at most one entry, then restrict every
    entry to the surviving participants.

    Membership counts are taken on the unfiltered entries before any roster is
    edited, so the result does not depend on iteration order.
    """
    counts = count_memberships(entries)

    surviving = ParticipantSet(
        (participant_id, participant)
        for participant_id, participant in participants.items()
        if counts[participant_id] > 1
    )
    filtered = EntrySet(
        (entry_id, entry.with_participants(pid for pid in entry.participant_ids if pid in surviving))
        for entry_id, entry in entries.items()
    )
    return surviving, filtered


def participant_node(participant):
    node = {
        "id": participant.id,
        "label": participant.name,
        "shape": "circularImage",
    }
    if participant.image_url:
        node["image"] = participant.image_url
    return node


def entry_node(entry):
    return {
        "id": entry.id,
        "label": entry.name,
        "shape": "text",
    }


def classify(entries, participants):
    """
    Turn pruned entries and participants into rendering-ready nodes and edges.

    - Every participant becomes an image node.
    - An entry with exactly two participants becomes a single edge between them,
      labeled with the entry name.
    - An entry with three or more participants becomes a text hub node with an
      unlabeled edge to each participant.
    - Entries with fewer than two participants contribute nothing.
    """
    nodes = []
    edges = []

    for participant in participants.values():
        nodes.append(participant_node(participant))

    for entry in entries.values():
        cast = [pid for pid in entry.participant_ids if pid in participants]

        if len(cast) == 2:
            edges.append({
                "from": cast[0],
                "to": cast[1],
                "label": entry.name,
            })
        elif len(cast) > 2:
            nodes.append(entry_node(entry))
            for participant_id in cast:
                edges.append({
                    "from": entry.id,
                    "to": participant_id,
                })

    return CastGraph(nodes, edges)


def build_graph(entries, rosters):
    """Runs ingest, prune and classify in sequence."""
    participants, ingested = ingest(entries, rosters)
    participants, ingested = prune(participants, ingested)
    return classify(ingested, participants)
