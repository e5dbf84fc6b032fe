from .graph_builder import (
    CastGraph,
    Entry,
    EntrySet,
    Participant,
    ParticipantSet,
    build_graph,
    classify,
    ingest,
    prune,
)
