"""
Solve entry point.

Validates the instance, builds the shortest-path index once, constructs an
initial solution and improves it with local search. Infeasible services never
raise out of :meth:`Solver.solve`; they are recorded on the returned
:class:`~arcroute.models.Solution`.
"""

import logging
import time
from typing import Optional

from arcroute.config.parameters import Parameters
from arcroute.exceptions import InvalidInstanceError
from arcroute.models import ServiceCatalog, Solution
from arcroute.network.graph import Network
from arcroute.network.index import NetworkIndex
from arcroute.routing.construction import ConstructiveBuilder
from arcroute.routing.cost import CostEvaluator
from arcroute.routing.local_search import LocalSearchEngine, SearchStats

logger = logging.getLogger(__name__)


class Solver:
    """Routes every service of ``catalog`` over ``network``.

    The shortest-path index is built on first use and reused until a link is
    added to the network, after which the next access rebuilds it.
    """

    def __init__(
        self,
        network: Network,
        catalog: ServiceCatalog,
        parameters: Optional[Parameters] = None,
        name: str = 'instance'
    ):
        self.network = network
        self.catalog = catalog
        self.parameters = parameters or Parameters()
        self.name = name
        self.last_search: Optional[SearchStats] = None
        self._index: Optional[NetworkIndex] = None
        self._index_version = -1

    @property
    def index(self) -> NetworkIndex:
        if self._index is None or self._index_version != self.network.version:
            self._index = NetworkIndex.build(self.network)
            self._index_version = self.network.version
        return self._index

    def validate(self, depot: int, vehicle_capacity: int) -> None:
        n = self.network.node_count
        if vehicle_capacity <= 0:
            raise InvalidInstanceError(f"Vehicle capacity must be positive, got {vehicle_capacity}")
        if not 0 <= depot < n:
            raise InvalidInstanceError(f"Depot {depot + 1} is outside nodes 1..{n}")
        for service in self.catalog:
            if not (0 <= service.source < n and 0 <= service.target < n):
                raise InvalidInstanceError(
                    f"Service {service.id} references nodes outside 1..{n}"
                )

    def solve(self, depot: int, vehicle_capacity: int) -> Solution:
        """Build and improve a solution. Deterministic for a fixed seed."""
        self.validate(depot, vehicle_capacity)
        params = self.parameters
        logger.info(f"[{self.name}] Services to route: {len(self.catalog)}")

        start = time.perf_counter()
        evaluator = CostEvaluator(self.index, depot)
        builder = ConstructiveBuilder(
            self.catalog,
            evaluator,
            vehicle_capacity,
            seed=params.seed,
            shuffle=params.shuffle_services
        )
        solution = builder.build(params.construction_strategy)
        solution.construction_time = time.perf_counter() - start
        solution.time_to_best = solution.construction_time

        if not solution.is_feasible:
            logger.error(f"[{self.name}] No feasible initial solution, local search skipped")
            return solution

        logger.info(
            f"[{self.name}] Initial solution: {solution.route_count} routes, cost {solution.total_cost:g}"
        )
        engine = LocalSearchEngine(
            evaluator,
            vehicle_capacity,
            neighborhoods=params.neighborhoods,
            time_limit=params.time_limit,
            max_moves=params.max_moves
        )
        stats = engine.run(solution)
        self.last_search = stats
        solution.search_time = stats.elapsed
        solution.moves = stats.moves
        solution.time_to_best = solution.construction_time + stats.time_to_best
        logger.info(
            f"[{self.name}] Local search finished after {stats.moves} moves "
            f"({stats.stopped_by}). Final cost: {solution.total_cost:g}"
        )
        return solution

    def evaluator(self, depot: int) -> CostEvaluator:
        return CostEvaluator(self.index, depot)

    def release(self) -> None:
        """Drop the cached index so its matrices can be freed."""
        self._index = None
        self.last_search = None
