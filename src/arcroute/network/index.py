"""All-pairs shortest paths over a :class:`~arcroute.network.graph.Network`."""

import logging
import math
import time
from typing import List

import numpy as np

from arcroute.exceptions import PathReconstructionError
from arcroute.network.graph import Network

logger = logging.getLogger(__name__)

NO_PREDECESSOR = -1


class NetworkIndex:
    """Shortest distances and predecessors between every pair of nodes.

    Distances use ``numpy.inf`` for unreachable pairs, so adding a finite leg
    to an unreachable one stays unreachable. ``predecessor[i, j]`` is the last
    node before ``j`` on the shortest ``i -> j`` path.

    The index is read-only once built. If the network changes, build a new one.
    """

    def __init__(self, distances: np.ndarray, predecessors: np.ndarray):
        distances = np.array(distances, dtype=float)
        predecessors = np.array(predecessors, dtype=np.int64)
        if distances.ndim != 2 or distances.shape[0] != distances.shape[1]:
            raise ValueError(f"Distance matrix must be square, got shape {distances.shape}")
        if predecessors.shape != distances.shape:
            raise ValueError("Predecessor matrix shape must match the distance matrix")
        distances.setflags(write=False)
        predecessors.setflags(write=False)
        self._distances = distances
        self._predecessors = predecessors

    @classmethod
    def build(cls, network: Network) -> 'NetworkIndex':
        """Run Floyd-Warshall on the current links of ``network``."""
        n = network.node_count
        start = time.perf_counter()

        dist = np.full((n, n), np.inf)
        pred = np.full((n, n), NO_PREDECESSOR, dtype=np.int64)
        for u in range(n):
            for conn in network.connections(u):
                # Parallel links keep the cheapest one
                if conn.cost < dist[u, conn.to]:
                    dist[u, conn.to] = conn.cost
                    pred[u, conn.to] = u
        np.fill_diagonal(dist, 0.0)
        pred[np.arange(n), np.arange(n)] = np.arange(n)

        for k in range(n):
            through_k = dist[:, k, None] + dist[None, k, :]
            shorter = through_k < dist
            if not shorter.any():
                continue
            dist = np.where(shorter, through_k, dist)
            pred = np.where(shorter, pred[k][None, :], pred)

        logger.debug(f"Shortest paths for {n} nodes computed in {time.perf_counter() - start:.3f}s")
        return cls(dist, pred)

    @property
    def node_count(self) -> int:
        return self._distances.shape[0]

    @property
    def distances(self) -> np.ndarray:
        return self._distances

    @property
    def predecessors(self) -> np.ndarray:
        return self._predecessors

    def distance(self, u: int, v: int) -> float:
        """Shortest cost from ``u`` to ``v``; ``inf`` when unreachable or out of range."""
        n = self.node_count
        if not (0 <= u < n and 0 <= v < n):
            return math.inf
        return float(self._distances[u, v])

    def is_reachable(self, u: int, v: int) -> bool:
        return self.distance(u, v) < math.inf

    def reconstruct_path(self, u: int, v: int) -> List[int]:
        """Node sequence of the shortest ``u -> v`` path, empty if unreachable.

        The walk back from ``v`` is capped at ``2 * V`` steps; exceeding it means
        the predecessor matrix contains a cycle.
        """
        if not self.is_reachable(u, v):
            return []
        if u == v:
            return [u]

        max_steps = 2 * self.node_count
        path = [v]
        current = v
        steps = 0
        while current != u:
            current = int(self._predecessors[u, current])
            steps += 1
            if current == NO_PREDECESSOR:
                raise PathReconstructionError(
                    f"Missing predecessor while rebuilding path {u + 1} -> {v + 1}"
                )
            if steps > max_steps:
                raise PathReconstructionError(
                    f"Predecessor cycle detected while rebuilding path {u + 1} -> {v + 1}"
                )
            path.append(current)
        path.reverse()
        return path
