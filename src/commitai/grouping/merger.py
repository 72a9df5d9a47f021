"""
Transitive merging of overlapping proposals.

Two proposals that touch the same file cannot become two independent
commits, so they are merged. Merging is transitive: if A shares a file
with B and B shares a different file with C, all three end up in one
group even though A and C have nothing in common. The connected
components of the proposal/file graph are computed with a disjoint-set
structure over proposal indices.

The result is deterministic: groups are emitted in the order of their
lowest proposal index, files in first-seen order and messages in
proposal order.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Sequence

from commitai.grouping.group_model import MergedGroup, Proposal, unique_paths
from commitai.grouping.normalizer import normalize_proposals, require_proposals


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


class DisjointSet:
    """Union-find over the integers ``0 .. size - 1``.

    Uses path compression and union by rank. The representative of a
    set is always its lowest member, which keeps component order stable.
    """

    def __init__(self, size: int) -> None:
        self._parent = list(range(size))
        self._rank = [0] * size
        self._lowest = list(range(size))

    def __len__(self) -> int:
        return len(self._parent)

    def find(self, item: int) -> int:
        """Return the internal root of ``item``'s set."""
        root = item
        while self._parent[root] != root:
            root = self._parent[root]
        while self._parent[item] != root:
            self._parent[item], item = root, self._parent[item]
        return root

    def representative(self, item: int) -> int:
        """Return the lowest member of ``item``'s set."""
        return self._lowest[self.find(item)]

    def union(self, a: int, b: int) -> int:
        """Merge the sets containing ``a`` and ``b`` and return the representative."""
        root_a, root_b = self.find(a), self.find(b)
        if root_a == root_b:
            return self._lowest[root_a]
        if self._rank[root_a] < self._rank[root_b]:
            root_a, root_b = root_b, root_a
        self._parent[root_b] = root_a
        if self._rank[root_a] == self._rank[root_b]:
            self._rank[root_a] += 1
        self._lowest[root_a] = min(self._lowest[root_a], self._lowest[root_b])
        return self._lowest[root_a]

    def components(self) -> List[List[int]]:
        """Return all sets, each sorted, ordered by their lowest member."""
        members: Dict[int, List[int]] = {}
        for item in range(len(self._parent)):
            members.setdefault(self.representative(item), []).append(item)
        return [members[key] for key in sorted(members)]


def merge_proposals(proposals: Sequence[Proposal]) -> List[MergedGroup]:
    """Merge proposals with overlapping files into non-overlapping groups.

    Parameters
    ----------
    proposals : Sequence[Proposal]
        Normalized proposals. A proposal's index is its position here.

    Returns
    -------
    List[MergedGroup]
        One group per connected component, ordered by the smallest
        proposal index in the component. Every file of every proposal
        appears in exactly one group.
    """
    sets = DisjointSet(len(proposals))
    # file -> index of the first proposal that referenced it; every later
    # proposal touching the file is unioned into that proposal's set
    owners: Dict[str, int] = {}
    for index, proposal in enumerate(proposals):
        for path in proposal.files:
            owner = owners.setdefault(path, index)
            if owner != index:
                sets.union(owner, index)

    groups: List[MergedGroup] = []
    for members in sets.components():
        files = unique_paths(path for i in members for path in proposals[i].files)
        messages = tuple(message for i in members for message in proposals[i].messages)
        groups.append(MergedGroup(files=files, messages=messages))
        if len(members) > 1:
            logger.debug("Merged proposals %s into one group of %d file(s)", members, len(files))

    logger.debug("Grouped %d proposal(s) into %d group(s)", len(proposals), len(groups))
    return groups


def regroup(groups: Sequence[MergedGroup]) -> List[MergedGroup]:
    """Run the merge again treating existing groups as proposals."""
    return merge_proposals([Proposal(files=g.files, messages=g.messages) for g in groups])


def group_document(raw: Any) -> List[MergedGroup]:
    """Normalize a raw proposal document and merge it into groups.

    Raises
    ------
    InvalidInput
        If the document is malformed.
    EmptyBatch
        If no usable proposals remain.
    """
    return merge_proposals(require_proposals(normalize_proposals(raw)))
