from __future__ import annotations

from typing import Dict, Iterable, List, Tuple

import numpy as np


class UnionFind:
    """Disjoint sets over carrier indices 0..n-1 (union by rank, path compression)."""

    def __init__(self, n: int):
        self.parent = np.arange(n, dtype=np.int64)
        self.rank = np.zeros(n, dtype=np.int16)

    def __len__(self) -> int:
        return int(self.parent.shape[0])

    def find(self, x: int) -> int:
        root = int(x)
        while int(self.parent[root]) != root:
            root = int(self.parent[root])
        # path compression
        while int(self.parent[x]) != root:
            nxt = int(self.parent[x])
            self.parent[x] = root
            x = nxt
        return root

    def union(self, a: int, b: int) -> None:
        ra = self.find(a)
        rb = self.find(b)
        if ra == rb:
            return
        if self.rank[ra] < self.rank[rb]:
            self.parent[ra] = rb
        elif self.rank[ra] > self.rank[rb]:
            self.parent[rb] = ra
        else:
            self.parent[rb] = ra
            self.rank[ra] += 1

    def union_all(self, pairs: Iterable[Tuple[int, int]]) -> None:
        for a, b in pairs:
            self.union(int(a), int(b))

    def same(self, a: int, b: int) -> bool:
        return self.find(a) == self.find(b)

    def classes(self) -> List[List[int]]:
        """Index classes, ordered by their smallest member."""
        by_root: Dict[int, List[int]] = {}
        for i in range(len(self)):
            by_root.setdefault(self.find(i), []).append(i)
        return sorted(by_root.values(), key=lambda members: members[0])
