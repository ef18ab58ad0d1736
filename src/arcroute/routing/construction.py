"""Initial solution construction."""

import logging
import random
from enum import Enum
from typing import List, Optional, Tuple

from arcroute.exceptions import (
    InfeasibleServiceError,
    OverCapacityServiceError,
    UnreachableServiceError,
)
from arcroute.models import INF, Route, Service, ServiceCatalog, Solution
from arcroute.routing.cost import CostEvaluator

logger = logging.getLogger(__name__)


class ConstructionStrategy(Enum):
    ONE_PER_ROUTE = 'one_per_route'
    CHEAPEST_INSERTION = 'cheapest_insertion'


class ConstructiveBuilder:
    """Turns a service catalog into a first capacity-feasible solution.

    Args:
        catalog: Services to route.
        evaluator: Cost evaluator bound to the depot.
        capacity: Vehicle capacity.
        seed: Seed for the service order shuffle. ``None`` keeps catalog order.
        shuffle: Whether cheapest insertion processes services in a seeded
            random order instead of catalog order.
    """

    def __init__(
        self,
        catalog: ServiceCatalog,
        evaluator: CostEvaluator,
        capacity: int,
        seed: Optional[int] = None,
        shuffle: bool = False
    ):
        self.catalog = catalog
        self.evaluator = evaluator
        self.capacity = capacity
        self.seed = seed
        self.shuffle = shuffle

    def build(self, strategy: ConstructionStrategy = ConstructionStrategy.CHEAPEST_INSERTION) -> Solution:
        """Build a solution, or an infeasible one naming the first bad service."""
        try:
            self.check_services()
        except InfeasibleServiceError as e:
            logger.error(f"Cannot build a feasible solution: {e}")
            return Solution.infeasible(e)

        if strategy is ConstructionStrategy.ONE_PER_ROUTE:
            routes = self._one_per_route()
        else:
            routes = self._cheapest_insertion()
        return self.evaluator.refresh(Solution(routes=routes))

    def check_services(self) -> None:
        """Fail on the first service that no route could ever serve."""
        for service in self.catalog:
            if service.demand > self.capacity:
                raise OverCapacityServiceError(service, self.capacity)
            if self._best_single_route(service)[1] == INF:
                raise UnreachableServiceError(service, self.evaluator.depot)

    def _best_single_route(self, service: Service) -> Tuple[Service, float]:
        best, best_cost = service, INF
        for oriented in service.orientations():
            cost = self.evaluator.route_cost([oriented])
            if cost < best_cost:
                best, best_cost = oriented, cost
        return best, best_cost

    def _one_per_route(self) -> List[Route]:
        return [Route(services=[self._best_single_route(s)[0]]) for s in self.catalog]

    def _service_order(self) -> List[Service]:
        services = self.catalog.services
        if self.shuffle:
            random.Random(self.seed).shuffle(services)
        return services

    def _cheapest_insertion(self) -> List[Route]:
        routes: List[Route] = []
        for service in self._service_order():
            best_delta = INF
            best_route: Optional[Route] = None
            best_sequence: List[Service] = []

            for route in routes:
                if route.total_demand + service.demand > self.capacity:
                    continue
                for pos in range(len(route.services) + 1):
                    for oriented in service.orientations():
                        candidate = route.services[:pos] + [oriented] + route.services[pos:]
                        delta = self.evaluator.route_cost(candidate) - route.total_cost
                        if delta < best_delta:
                            best_delta, best_route, best_sequence = delta, route, candidate

            oriented, new_route_cost = self._best_single_route(service)
            if new_route_cost < best_delta:
                best_route = Route()
                routes.append(best_route)
                best_sequence = [oriented]

            best_route.services = best_sequence
            best_route.total_demand = self.evaluator.route_demand(best_sequence)
            best_route.total_cost = self.evaluator.route_cost(best_sequence)

        logger.debug(f"Cheapest insertion opened {len(routes)} routes")
        return routes
