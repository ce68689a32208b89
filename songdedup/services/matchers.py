"""Exact and fuzzy duplicate matchers.

Exact matching groups records whose normalized field values are identical.
Fuzzy matching groups records whose normalized values reach a similarity
threshold; how matches are grouped is delegated to a Clusterer:

- GreedyAnchorClusterer: each group is anchored on its first record and
  only collects later records similar to that anchor. Order-dependent:
  if A~B and B~C but not A~C, C joins A's group only when it is similar
  to A itself.
- ConnectedComponentsClusterer: any chain of matches joins one group
  (true transitive closure), independent of scan order.

Both scan records in input order so results are reproducible.
"""

import threading
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Sequence

from songdedup.models.dedup import (
    ClusteringStrategy,
    DuplicateField,
    DuplicateGroup,
    MatchMode,
)
from songdedup.models.song import SongRecord
from songdedup.utils.exceptions import ScanCancelledError
from songdedup.utils.similarity import similarity
from songdedup.utils.text_normalizer import normalize


def _raise_if_cancelled(cancel_event: Optional[threading.Event]) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise ScanCancelledError("Duplicate scan cancelled")


def find_exact_duplicates(
    records: Sequence[SongRecord],
    field: DuplicateField,
    cancel_event: Optional[threading.Event] = None,
) -> List[DuplicateGroup]:
    """Group records whose normalized field values are identical.

    Args:
        records: Records in scan order
        field: Field to compare
        cancel_event: Set to abandon the scan

    Returns:
        Groups in the order they were opened, members in first-seen order.
    """
    _raise_if_cancelled(cancel_event)

    first_seen: Dict[str, SongRecord] = {}
    members_by_value: Dict[str, List[SongRecord]] = {}

    for record in records:
        if not field.is_comparable(record):
            continue

        key = normalize(field.value_of(record))
        if key not in first_seen:
            first_seen[key] = record
        elif key in members_by_value:
            members_by_value[key].append(record)
        else:
            # First duplicate for this value opens the group
            members_by_value[key] = [first_seen[key], record]

    return [
        DuplicateGroup(field=field, mode=MatchMode.EXACT, records=members)
        for members in members_by_value.values()
    ]


class Clusterer(ABC):
    """Groups positions of similar values.

    Implementations receive normalized values and return lists of indices,
    each list holding at least two positions in ascending order.
    """

    @abstractmethod
    def cluster(
        self,
        values: Sequence[str],
        threshold: float,
        cancel_event: Optional[threading.Event] = None,
    ) -> List[List[int]]:
        """Cluster values whose pairwise similarity reaches threshold."""
        pass


class GreedyAnchorClusterer(Clusterer):
    """Anchor-relative single pass clustering.

    For each unprocessed position i, collect every later unprocessed j with
    similarity(values[i], values[j]) >= threshold, then mark them processed.
    """

    def cluster(
        self,
        values: Sequence[str],
        threshold: float,
        cancel_event: Optional[threading.Event] = None,
    ) -> List[List[int]]:
        processed = [False] * len(values)
        groups: List[List[int]] = []

        for i, anchor in enumerate(values):
            if processed[i]:
                continue
            _raise_if_cancelled(cancel_event)

            group = [i]
            processed[i] = True

            for j in range(i + 1, len(values)):
                if processed[j]:
                    continue
                if similarity(anchor, values[j]) >= threshold:
                    group.append(j)
                    processed[j] = True

            if len(group) > 1:
                groups.append(group)

        return groups


class ConnectedComponentsClusterer(Clusterer):
    """Transitive clustering over every pair reaching the threshold.

    Compares all n*(n-1)/2 pairs, so it always costs the full O(n^2)
    comparisons even when groups are found early.
    """

    def cluster(
        self,
        values: Sequence[str],
        threshold: float,
        cancel_event: Optional[threading.Event] = None,
    ) -> List[List[int]]:
        parents = list(range(len(values)))
        ranks = [0] * len(values)

        for i in range(len(values)):
            _raise_if_cancelled(cancel_event)
            for j in range(i + 1, len(values)):
                if _find(parents, i) == _find(parents, j):
                    continue
                if similarity(values[i], values[j]) >= threshold:
                    _union(parents, ranks, i, j)

        components: Dict[int, List[int]] = {}
        for index in range(len(values)):
            components.setdefault(_find(parents, index), []).append(index)

        # dict preserves insertion order: components ordered by smallest index
        return [members for members in components.values() if len(members) > 1]


def _find(parents: List[int], node: int) -> int:
    while parents[node] != node:
        parents[node] = parents[parents[node]]
        node = parents[node]
    return node


def _union(parents: List[int], ranks: List[int], left: int, right: int) -> None:
    left_root = _find(parents, left)
    right_root = _find(parents, right)
    if left_root == right_root:
        return

    if ranks[left_root] < ranks[right_root]:
        parents[left_root] = right_root
        return

    if ranks[left_root] > ranks[right_root]:
        parents[right_root] = left_root
        return

    parents[right_root] = left_root
    ranks[left_root] += 1


_CLUSTERERS = {
    ClusteringStrategy.GREEDY: GreedyAnchorClusterer,
    ClusteringStrategy.CONNECTED: ConnectedComponentsClusterer,
}


def get_clusterer(strategy: ClusteringStrategy) -> Clusterer:
    """Fresh clusterer for a strategy."""
    return _CLUSTERERS[ClusteringStrategy(strategy)]()


def find_similar_groups(
    records: Sequence[SongRecord],
    field: DuplicateField,
    threshold: float,
    clusterer: Optional[Clusterer] = None,
    cancel_event: Optional[threading.Event] = None,
) -> List[DuplicateGroup]:
    """Group records whose normalized field values are similar.

    Args:
        records: Records in scan order
        field: Field to compare
        threshold: Minimum similarity in [0, 1] for two values to match
        clusterer: Grouping policy (GreedyAnchorClusterer when omitted)
        cancel_event: Set to abandon the scan

    Returns:
        Groups of two or more records, members in input order.
    """
    if clusterer is None:
        clusterer = GreedyAnchorClusterer()

    candidates = [record for record in records if field.is_comparable(record)]
    values = [normalize(field.value_of(record)) for record in candidates]

    return [
        DuplicateGroup(
            field=field,
            mode=MatchMode.SIMILAR,
            records=[candidates[index] for index in indices],
        )
        for indices in clusterer.cluster(values, threshold, cancel_event)
    ]


def similarity_to_anchor(group: DuplicateGroup) -> List[float]:
    """Similarity of every member to the group's first record.

    The anchor itself scores 1.0. Values are normalized before scoring, as
    they were when the group was formed.
    """
    anchor = normalize(group.field.value_of(group.anchor))
    return [
        similarity(anchor, normalize(group.field.value_of(record)))
        for record in group.records
    ]
