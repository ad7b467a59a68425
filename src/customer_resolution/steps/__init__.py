from customer_resolution.steps.blocking import DEFAULT_BLOCK_KEYS, BlockingIndex, BlockKey
from customer_resolution.steps.clustering import ClusterBuilder, materialize_edges
from customer_resolution.steps.normalize import RecordNormalizer
from customer_resolution.steps.rules import MatchRule, RuleEngine, build_rules
from customer_resolution.steps.similarity import TrigramScorer

__all__ = [
    "BlockingIndex",
    "BlockKey",
    "DEFAULT_BLOCK_KEYS",
    "ClusterBuilder",
    "materialize_edges",
    "RecordNormalizer",
    "MatchRule",
    "RuleEngine",
    "build_rules",
    "TrigramScorer",
]
