"""First-improvement local search over relocate, swap, 2-opt and merge moves."""

import logging
import time
from collections import Counter
from dataclasses import dataclass, field
from itertools import product
from typing import Callable, Dict, List, Optional, Sequence

from arcroute.models import Service, Solution
from arcroute.routing.cost import CostEvaluator

logger = logging.getLogger(__name__)

NEIGHBORHOODS = ('relocate', 'swap', 'two_opt', 'merge')

# Minimum cost decrease for a move to count as an improvement
IMPROVEMENT_TOLERANCE = 1e-9


@dataclass
class SearchStats:
    """What happened during one :meth:`LocalSearchEngine.run`."""
    moves: int = 0
    sweeps: int = 0
    cost_history: List[float] = field(default_factory=list)
    moves_by_neighborhood: Counter = field(default_factory=Counter)
    stopped_by: str = 'local_optimum'
    elapsed: float = 0.0
    time_to_best: float = 0.0


def _improves(new_cost: float, old_cost: float) -> bool:
    return new_cost < old_cost - IMPROVEMENT_TOLERANCE


def _reverse_segment(services: Sequence[Service], i: int, j: int, flip: bool) -> List[Service]:
    segment = list(reversed(services[i:j + 1]))
    if flip:
        segment = [s.reversed() for s in segment]
    return list(services[:i]) + segment + list(services[j + 1:])


class LocalSearchEngine:
    """Applies improving moves until no neighbourhood yields one.

    Neighbourhoods are scanned in a fixed priority order; the first improving
    move found is applied, the solution is refreshed through the evaluator and
    the scan restarts from the first neighbourhood.

    Args:
        evaluator: Cost evaluator used for every candidate.
        capacity: Vehicle capacity.
        neighborhoods: Ordered subset of :data:`NEIGHBORHOODS`.
        time_limit: Optional wall-clock budget in seconds, checked between moves.
        max_moves: Optional cap on accepted moves.
    """

    def __init__(
        self,
        evaluator: CostEvaluator,
        capacity: int,
        neighborhoods: Optional[Sequence[str]] = None,
        time_limit: Optional[float] = None,
        max_moves: Optional[int] = None
    ):
        self.evaluator = evaluator
        self.capacity = capacity
        self.neighborhoods = tuple(neighborhoods) if neighborhoods is not None else NEIGHBORHOODS
        unknown = set(self.neighborhoods) - set(NEIGHBORHOODS)
        if unknown:
            raise ValueError(f"Unknown neighborhoods: {sorted(unknown)}")
        self.time_limit = time_limit
        self.max_moves = max_moves
        self._moves: Dict[str, Callable[[Solution], bool]] = {
            'relocate': self.try_relocate,
            'swap': self.try_swap,
            'two_opt': self.try_two_opt,
            'merge': self.try_merge,
        }

    def run(self, solution: Solution) -> SearchStats:
        """Improve ``solution`` in place until a local optimum or a budget is hit."""
        stats = SearchStats(cost_history=[solution.total_cost])
        if not solution.is_feasible:
            stats.stopped_by = 'infeasible'
            return stats

        start = time.perf_counter()
        while True:
            if self.max_moves is not None and stats.moves >= self.max_moves:
                stats.stopped_by = 'max_moves'
                break
            if self.time_limit is not None and time.perf_counter() - start >= self.time_limit:
                stats.stopped_by = 'time_limit'
                break

            stats.sweeps += 1
            applied = None
            for name in self.neighborhoods:
                if self._moves[name](solution):
                    applied = name
                    break
            if applied is None:
                break

            stats.moves += 1
            stats.moves_by_neighborhood[applied] += 1
            stats.cost_history.append(solution.total_cost)
            stats.time_to_best = time.perf_counter() - start
            logger.debug(f"{applied}: cost {stats.cost_history[-2]} -> {solution.total_cost}")

        stats.elapsed = time.perf_counter() - start
        return stats

    def _apply(self, solution: Solution, changes: Dict[int, List[Service]]) -> None:
        for route_idx, services in changes.items():
            solution.routes[route_idx].services = services
        self.evaluator.refresh(solution)

    def try_relocate(self, solution: Solution) -> bool:
        """Move one service to another position, in its own route or another one."""
        routes = solution.routes
        cost = self.evaluator.route_cost
        for r1_idx, r1 in enumerate(routes):
            for s_idx, service in enumerate(r1.services):
                remaining = r1.services[:s_idx] + r1.services[s_idx + 1:]
                cost_r1_after = cost(remaining)

                for r2_idx, r2 in enumerate(routes):
                    if r2_idx == r1_idx:
                        for pos, oriented in product(range(len(remaining) + 1), service.orientations()):
                            candidate = remaining[:pos] + [oriented] + remaining[pos:]
                            if candidate == r1.services:
                                continue
                            if _improves(cost(candidate), r1.total_cost):
                                self._apply(solution, {r1_idx: candidate})
                                return True
                        continue

                    if r2.total_demand + service.demand > self.capacity:
                        continue
                    before = r1.total_cost + r2.total_cost
                    for pos, oriented in product(range(len(r2.services) + 1), service.orientations()):
                        candidate = r2.services[:pos] + [oriented] + r2.services[pos:]
                        if _improves(cost_r1_after + cost(candidate), before):
                            self._apply(solution, {r1_idx: remaining, r2_idx: candidate})
                            return True
        return False

    def try_swap(self, solution: Solution) -> bool:
        """Exchange one service between two distinct routes."""
        routes = solution.routes
        cost = self.evaluator.route_cost
        for r1_idx in range(len(routes)):
            for r2_idx in range(r1_idx + 1, len(routes)):
                r1, r2 = routes[r1_idx], routes[r2_idx]
                before = r1.total_cost + r2.total_cost
                for s1_idx, s1 in enumerate(r1.services):
                    for s2_idx, s2 in enumerate(r2.services):
                        if r1.total_demand - s1.demand + s2.demand > self.capacity:
                            continue
                        if r2.total_demand - s2.demand + s1.demand > self.capacity:
                            continue
                        for in_r1, in_r2 in product(s2.orientations(), s1.orientations()):
                            new_r1 = r1.services[:s1_idx] + [in_r1] + r1.services[s1_idx + 1:]
                            new_r2 = r2.services[:s2_idx] + [in_r2] + r2.services[s2_idx + 1:]
                            if _improves(cost(new_r1) + cost(new_r2), before):
                                self._apply(solution, {r1_idx: new_r1, r2_idx: new_r2})
                                return True
        return False

    def try_two_opt(self, solution: Solution) -> bool:
        """Reverse a contiguous segment of one route.

        Each segment is tried as a pure reordering and with its edge services
        re-oriented; a one-service segment only has the re-oriented variant.
        """
        cost = self.evaluator.route_cost
        for r_idx, route in enumerate(solution.routes):
            services = route.services
            for i in range(len(services)):
                for j in range(i, len(services)):
                    for flip in (False, True):
                        candidate = _reverse_segment(services, i, j, flip)
                        if candidate == services:
                            continue
                        if _improves(cost(candidate), route.total_cost):
                            self._apply(solution, {r_idx: candidate})
                            return True
        return False

    def try_merge(self, solution: Solution) -> bool:
        """Concatenate two routes when one vehicle can carry both."""
        routes = solution.routes
        cost = self.evaluator.route_cost
        for r1_idx in range(len(routes)):
            for r2_idx in range(r1_idx + 1, len(routes)):
                r1, r2 = routes[r1_idx], routes[r2_idx]
                if r1.total_demand + r2.total_demand > self.capacity:
                    continue
                before = r1.total_cost + r2.total_cost
                for merged in (r1.services + r2.services, r2.services + r1.services):
                    if _improves(cost(merged), before):
                        self._apply(solution, {r1_idx: merged, r2_idx: []})
                        return True
        return False
