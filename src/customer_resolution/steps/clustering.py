from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable, Sequence

from customer_resolution.models import Cluster, MatchDecision

logger = logging.getLogger(__name__)


class ClusterBuilder:
    """Turns matched pairs into a lowest-id-wins customer partition.

    Every account id becomes a vertex, matched decisions become undirected
    edges, and each connected component is labelled with its minimum
    account id.
    """

    def cluster(self, account_ids: Iterable[str], decisions: Sequence[MatchDecision]) -> dict[str, str]:
        uf = _UnionFind()
        for account_id in account_ids:
            uf.add(account_id)

        for src, tgt in materialize_edges(decisions):
            if src not in uf:
                logger.warning("Decision references unknown account %s; adding it as a vertex", src)
            uf.union(src, tgt)

        # every union has happened; roots and their minimums are final from here on
        return {account_id: uf.component_min(account_id) for account_id in uf}

    def clusters(self, account_ids: Iterable[str], decisions: Sequence[MatchDecision]) -> list[Cluster]:
        grouped: dict[str, list[str]] = defaultdict(list)
        for account_id, customer_id in self.cluster(account_ids, decisions).items():
            grouped[customer_id].append(account_id)
        return [
            Cluster(customer_id=customer_id, account_ids=sorted(members))
            for customer_id, members in sorted(grouped.items())
        ]


def materialize_edges(decisions: Iterable[MatchDecision]) -> set[tuple[str, str]]:
    """Both directions of every non-NO_MATCH decision."""
    edges: set[tuple[str, str]] = set()
    for decision in decisions:
        if decision.is_match:
            edges.update(decision.edges())
    return edges


class _UnionFind:
    """Disjoint-set forest with path compression, union by rank and per-root minimum."""

    def __init__(self) -> None:
        self._parent: dict[str, str] = {}
        self._rank: dict[str, int] = {}
        self._min: dict[str, str] = {}

    def __contains__(self, item: str) -> bool:
        return item in self._parent

    def __iter__(self):
        return iter(self._parent)

    def add(self, item: str) -> None:
        if item not in self._parent:
            self._parent[item] = item
            self._rank[item] = 0
            self._min[item] = item

    def find(self, item: str) -> str:
        self.add(item)
        root = item
        while self._parent[root] != root:
            root = self._parent[root]
        while self._parent[item] != root:
            self._parent[item], item = root, self._parent[item]
        return root

    def union(self, left: str, right: str) -> None:
        root_left = self.find(left)
        root_right = self.find(right)
        if root_left == root_right:
            return
        if self._rank[root_left] < self._rank[root_right]:
            root_left, root_right = root_right, root_left
        self._parent[root_right] = root_left
        if self._rank[root_left] == self._rank[root_right]:
            self._rank[root_left] += 1
        self._min[root_left] = min(self._min[root_left], self._min[root_right])

    def component_min(self, item: str) -> str:
        return self._min[self.find(item)]
