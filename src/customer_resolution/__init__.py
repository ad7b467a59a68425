"""Rule-based customer identity resolution: blocking, trigram scoring, tiered rules and clustering."""

from customer_resolution.models import (
    NO_MATCH,
    CandidatePair,
    Cluster,
    MatchDecision,
    NormalizedRecord,
    RawRecord,
    ResolutionResult,
    ScoredPair,
)
from customer_resolution.schema import FieldTag, RecordSchema

__all__ = [
    "NO_MATCH",
    "CandidatePair",
    "Cluster",
    "MatchDecision",
    "NormalizedRecord",
    "RawRecord",
    "ResolutionResult",
    "ScoredPair",
    "FieldTag",
    "RecordSchema",
]
